"""
Recipe cost and nutrition arithmetic.

Works on any objects exposing item_name, item_type, unit_quantity,
unit_price, usage_amount and cost (ORM rows or schema objects), so it can
price a recipe before it is saved.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from app.config import settings
from core.utils.helpers import percentage
from domain.enums import RecipeItemType

NUTRIENTS = ("calories", "protein", "fat", "carbohydrate", "sodium")

# Packaging and expenses add cost but no weight
WEIGHTLESS_TYPES = {RecipeItemType.MATERIAL, RecipeItemType.EXPENSE}


def _type(item: Any) -> RecipeItemType:
    return RecipeItemType(item.item_type or RecipeItemType.INGREDIENT)


def item_cost(item: Any) -> int:
    """
    Cost of one recipe line in yen.

    usage x unit price / unit quantity for priced lines; expenses and lines
    without a unit quantity keep the cost entered for them.
    """
    if _type(item) != RecipeItemType.EXPENSE and item.unit_quantity:
        return int(round((item.usage_amount or 0) * (item.unit_price or 0) / item.unit_quantity))
    return int(item.cost or 0)


def calculate_totals(items: Sequence[Any]) -> Dict[str, float]:
    return {
        "total_usage": sum(i.usage_amount or 0 for i in items),
        "total_cost": sum(item_cost(i) for i in items),
        "total_weight": sum(
            i.usage_amount or 0 for i in items if _type(i) not in WEIGHTLESS_TYPES
        ),
    }


def calculate_profit(selling_price: Optional[int], total_cost: float) -> Dict[str, Optional[float]]:
    """Profit and rates in percent; rates are None without a selling price"""
    if not selling_price:
        return {"profit": None, "profit_rate": None, "cost_rate": None}
    profit = selling_price - total_cost
    return {
        "profit": profit,
        "profit_rate": percentage(profit, selling_price),
        "cost_rate": percentage(total_cost, selling_price),
    }


def unit_cost(total_cost: float, production_quantity: Optional[int] = None) -> float:
    quantity = production_quantity or settings.default_production_quantity
    return round(total_cost / quantity, 2)


def group_items(items: Iterable[Any]) -> List[Dict[str, Any]]:
    """Items by type in display order; empty groups are left out"""
    grouped: Dict[RecipeItemType, List[Any]] = {t: [] for t in RecipeItemType}
    for item in items:
        grouped[_type(item)].append(item)
    return [
        {
            "item_type": t.value,
            "items": rows,
            "subtotal_cost": sum(item_cost(i) for i in rows),
            "subtotal_usage": sum(i.usage_amount or 0 for i in rows),
        }
        for t, rows in grouped.items()
        if rows
    ]


def batch_plan(items: Sequence[Any], batch_size: int) -> Dict[str, Any]:
    """
    Quantities needed to make `batch_size` units.

    packs = usage x batch / unit quantity, omitted for expenses and lines
    without a positive unit quantity.
    """
    groups = []
    for group in group_items(items):
        lines = []
        for item in group["items"]:
            usage = (item.usage_amount or 0) * batch_size
            packs = None
            if _type(item) != RecipeItemType.EXPENSE and (item.unit_quantity or 0) > 0:
                packs = round(usage / item.unit_quantity, 2)
            lines.append(
                {
                    "item_name": item.item_name,
                    "usage": usage,
                    "packs": packs,
                    "cost": item_cost(item) * batch_size,
                }
            )
        groups.append(
            {
                "item_type": group["item_type"],
                "lines": lines,
                "subtotal_usage": sum(line["usage"] for line in lines),
                "subtotal_cost": sum(line["cost"] for line in lines),
            }
        )
    return {
        "batch_size": batch_size,
        "groups": groups,
        "total_cost": sum(g["subtotal_cost"] for g in groups),
    }


def calculate_nutrition(
    items: Sequence[Any], ingredients_by_name: Mapping[str, Any]
) -> Dict[str, Any]:
    """
    Nutrition of one recipe batch from the ingredient master.

    Ingredient lines with usage contribute value x usage / 100. Per-100 g
    figures divide by the ingredient + intermediate weight.
    """
    totals = {n: 0.0 for n in NUTRIENTS}
    missing: List[str] = []
    has_intermediate = False
    weight = 0.0

    for item in items:
        kind = _type(item)
        usage = item.usage_amount or 0
        if kind == RecipeItemType.INTERMEDIATE:
            has_intermediate = True
            weight += usage
            continue
        if kind != RecipeItemType.INGREDIENT:
            continue
        weight += usage
        if usage <= 0:
            continue
        master = ingredients_by_name.get(item.item_name)
        if master is None or all(getattr(master, n, None) is None for n in NUTRIENTS):
            missing.append(item.item_name)
            continue
        for n in NUTRIENTS:
            totals[n] += (getattr(master, n) or 0) * usage / 100

    per_100g = {
        n: (round(v / weight * 100, 2) if weight > 0 else None) for n, v in totals.items()
    }
    return {
        "total": {n: round(v, 2) for n, v in totals.items()},
        "per_100g": per_100g,
        "total_weight": weight,
        "has_intermediate": has_intermediate,
        "missing_ingredients": missing,
    }
