"""
Realistic test constants for the back office test suite.

Product names, prices and marketplace CSV snippets modelled on the
exports the shop actually receives.
"""

# =============================================================================
# PRODUCT MASTER
# =============================================================================

PRODUCTS = [
    {"name": "チャーシュー", "price": 1200},
    {"name": "国産ギョーザ 20個入", "price": 980},
    {"name": "特製味噌ラーメン", "price": 1500},
    {"name": "ラーメン", "price": 900},
]

# =============================================================================
# MARKETPLACE CSV EXPORTS
# =============================================================================

AMAZON_CSV = (
    "（親）ASIN,（子）ASIN,タイトル,セッション数,注文された商品点数,注文商品の売上額\n"
    "B0001,B0001A,【公式】チャーシュー 500g,120,\"1,024\",\"¥1,228,800\"\n"
    "B0002,B0002A,国産ギョーザ 20個入,80,15,\"¥14,700\"\n"
    "B0003,B0003A,謎の商品,10,3,¥3000\n"
    "B0004,B0004A,在庫切れの商品,5,0,¥0\n"
)

RAKUTEN_CSV = (
    "楽天市場 売上データ,,,,\n"
    "集計期間: 2025/07/01-2025/07/31,,,,\n"
    "商品名,商品番号,商品管理番号,単価,売上個数\n"
    "特製味噌ラーメン 2食セット,r-001,m-001,1500,12\n"
    "チャーシュー,r-002,m-002,1200,５\n"
)

# =============================================================================
# RECIPES
# =============================================================================

RECIPE_ITEMS = [
    {"item_name": "豚肩ロース", "item_type": "ingredient", "unit_quantity": 1000, "unit_price": 1800, "usage_amount": 250},
    {"item_name": "醤油", "item_type": "ingredient", "unit_quantity": 1000, "unit_price": 400, "usage_amount": 50},
    {"item_name": "タレ", "item_type": "intermediate", "unit_quantity": 0, "unit_price": 0, "usage_amount": 100, "cost": 60},
    {"item_name": "真空袋", "item_type": "material", "unit_quantity": 100, "unit_price": 1000, "usage_amount": 1},
    {"item_name": "送料", "item_type": "expense", "cost": 30},
]
