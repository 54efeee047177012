"""
Domain enums for the sales back office.
Contains all enumeration types used across the domain models.
"""

import enum


class Marketplace(str, enum.Enum):
    """E-commerce marketplaces whose sales are imported from CSV"""

    AMAZON = "amazon"
    RAKUTEN = "rakuten"
    YAHOO = "yahoo"
    MERCARI = "mercari"
    BASE = "base"
    QOO10 = "qoo10"

    @property
    def count_column(self) -> str:
        """Column on web_sales_summary / daily_sales_report holding unit counts"""
        return f"{self.value}_count"

    @property
    def amount_column(self) -> str:
        """Column on daily_sales_report holding the yen amount"""
        return f"{self.value}_amount"

    @property
    def label(self) -> str:
        return MARKETPLACE_LABELS[self]


MARKETPLACE_LABELS = {
    Marketplace.AMAZON: "Amazon",
    Marketplace.RAKUTEN: "楽天",
    Marketplace.YAHOO: "Yahoo!",
    Marketplace.MERCARI: "メルカリ",
    Marketplace.BASE: "BASE",
    Marketplace.QOO10: "Qoo10",
}

# Learned titles coming from the consolidated in-house sheet are stored
# under this key instead of a marketplace.
SUMMARY_MAPPING_SOURCE = "summary"


class MatchType(str, enum.Enum):
    """How a CSV title was resolved to a product"""

    LEARNED = "learned"
    EXACT = "exact"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class RecipeItemType(str, enum.Enum):
    """Recipe line categories, in display order"""

    INGREDIENT = "ingredient"
    INTERMEDIATE = "intermediate"
    MATERIAL = "material"
    EXPENSE = "expense"


class RecipeStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class KpiChannel(str, enum.Enum):
    """Sales channels tracked by the KPI summary (order is significant)"""

    WEB = "WEB"
    WHOLESALE = "WHOLESALE"
    STORE = "STORE"
    SHOKU = "SHOKU"


class KpiMetric(str, enum.Enum):
    """Kinds of manually entered KPI values"""

    TARGET = "target"
    ACTUAL = "actual"
    ACQUISITION_TARGET = "acquisition_target"
    ACQUISITION_ACTUAL = "acquisition_actual"
    MANUFACTURING_TARGET = "manufacturing_target"
    MANUFACTURING_ACTUAL = "manufacturing_actual"
    HISTORICAL_ACTUAL = "historical_actual"


# Metrics that are recorded per sales channel
CHANNEL_METRICS = {KpiMetric.TARGET, KpiMetric.ACTUAL, KpiMetric.HISTORICAL_ACTUAL}
