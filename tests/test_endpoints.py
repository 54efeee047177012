"""
Route tests. Services are monkeypatched, so these only check wiring:
paths, status codes, request parsing and response shapes.
"""

import uuid
from datetime import date
from types import SimpleNamespace

from services.csv_import_service import CsvImportService
from services.daily_sales_service import DailySalesService
from services.ingredient_service import IngredientService
from services.kpi_service import KpiService
from services.learning_service import LearningService
from services.product_service import ProductService
from services.recipe_service import RecipeService
from services.web_sales_service import WebSalesService
from test_fixtures import client, make_mapping, make_product


def test_health_check():
    r = client.get("/health-check")
    assert r.status_code == 200
    assert r.json()["service"] == "SalesBackOffice"
    assert r.json()["status"] == "ok"


def test_products_list_create_get_delete(monkeypatch):
    product = make_product()

    monkeypatch.setattr(ProductService, "list_products", lambda db, search=None: [product])
    r = client.get("/products")
    assert r.status_code == 200
    assert r.json()[0]["product_number"] == "P1001"

    captured = {}

    def fake_create(db, data):
        captured["data"] = data
        return product

    monkeypatch.setattr(ProductService, "create_product", fake_create)
    r2 = client.post(
        "/products",
        json={"name": "チャーシュー", "price": 1200, "marketplace": "amazon", "marketplace_title": "焼豚"},
    )
    assert r2.status_code == 201
    assert r2.json()["id"] == str(product.id)
    assert captured["data"].marketplace.value == "amazon"

    monkeypatch.setattr(ProductService, "get_product", lambda db, pid: product)
    r3 = client.get(f"/products/{product.id}")
    assert r3.status_code == 200
    assert r3.json()["name"] == "チャーシュー"

    monkeypatch.setattr(ProductService, "delete_product", lambda db, pid: True)
    r4 = client.delete(f"/products/{product.id}")
    assert r4.status_code == 200
    assert r4.json()["removed"] == str(product.id)


def test_product_update(monkeypatch):
    product = make_product(price=1500)
    monkeypatch.setattr(ProductService, "update_product", lambda db, pid, data: product)
    r = client.patch(f"/products/{product.id}", json={"price": 1500})
    assert r.status_code == 200
    assert r.json()["price"] == 1500


def test_daily_sales_routes(monkeypatch):
    record = {"date": date(2025, 7, 3), "floor_sales": 52000}

    monkeypatch.setattr(DailySalesService, "get_daily", lambda db, d: record)
    r = client.get("/daily-sales/2025-07-03")
    assert r.status_code == 200
    assert r.json()["floor_sales"] == 52000
    assert r.json()["cash_income"] is None

    captured = {}

    def fake_upsert(db, d, data):
        captured["date"] = d
        captured["data"] = data
        return record

    monkeypatch.setattr(DailySalesService, "upsert_daily", fake_upsert)
    r2 = client.put("/daily-sales/2025-07-03", json={"floor_sales": 52000, "cash_income": ""})
    assert r2.status_code == 200
    assert captured["date"] == date(2025, 7, 3)
    assert captured["data"].cash_income is None

    monkeypatch.setattr(
        DailySalesService,
        "month_to_date",
        lambda db, d: {"start": date(2025, 7, 1), "end": d, "days_reported": 3},
    )
    r3 = client.get("/daily-sales/2025-07-03/month-to-date")
    assert r3.json()["start"] == "2025-07-01"

    monkeypatch.setattr(DailySalesService, "list_month", lambda db, m: [record])
    r4 = client.get("/daily-sales", params={"month": "2025-07"})
    assert len(r4.json()) == 1


def test_daily_sales_bad_date():
    r = client.get("/daily-sales/2025-13-40")
    assert r.status_code == 422


def test_web_sales_routes(monkeypatch):
    pid = uuid.uuid4()
    monkeypatch.setattr(
        WebSalesService,
        "get_month",
        lambda db, m: {"month": "2025-07", "rows": [], "total_amount": 0},
    )
    r = client.get("/web-sales", params={"month": "2025-07"})
    assert r.status_code == 200
    assert r.json()["month"] == "2025-07"

    row = SimpleNamespace(product_id=pid, report_month=date(2025, 7, 1), amazon_count=2,
                          rakuten_count=0, yahoo_count=0, mercari_count=0, base_count=0, qoo10_count=0)
    monkeypatch.setattr(WebSalesService, "set_counts", lambda db, p, m, data: row)
    r2 = client.patch(f"/web-sales/{pid}", params={"month": "2025-07"}, json={"amazon_count": 2})
    assert r2.status_code == 200
    assert r2.json()["amazon_count"] == 2

    r3 = client.patch(f"/web-sales/{pid}", params={"month": "2025-07"}, json={"amazon_count": -1})
    assert r3.status_code == 422

    monkeypatch.setattr(WebSalesService, "ranking", lambda db, m, limit: [{"rank": 1, "amount": 900}])
    r4 = client.get("/web-sales/ranking", params={"month": "2025-07", "limit": 5})
    assert r4.json()[0]["rank"] == 1


def test_import_parse_uploads_file(monkeypatch):
    captured = {}

    def fake_parse(db, marketplace, filename, content, month):
        captured.update(marketplace=marketplace, filename=filename, content=content, month=month)
        return {"marketplace": marketplace.value, "month": month, "matched": [], "unmatched": []}

    monkeypatch.setattr(CsvImportService, "parse_csv", fake_parse)
    r = client.post(
        "/imports/rakuten/parse",
        files={"file": ("rakuten.csv", "商品名,数量\n".encode("cp932"), "text/csv")},
        data={"month": "2025-07"},
    )

    assert r.status_code == 200
    assert r.json()["marketplace"] == "rakuten"
    assert captured["filename"] == "rakuten.csv"
    assert captured["content"] == "商品名,数量\n".encode("cp932")
    assert captured["month"] == "2025-07"


def test_import_unknown_marketplace():
    r = client.post(
        "/imports/shopify/parse",
        files={"file": ("x.csv", b"a,b\n", "text/csv")},
    )
    assert r.status_code == 422


def test_import_reconcile_and_confirm(monkeypatch):
    pid = uuid.uuid4()
    matched = [{"title": "焼豚", "quantity": 3, "product_id": str(pid), "match_type": "high", "confidence": 90}]

    monkeypatch.setattr(
        CsvImportService,
        "reconcile",
        lambda db, m, u, s, total: {"stats": {"original_matched_rows": len(m)}, "quality": total},
    )
    r = client.post("/imports/amazon/reconcile", json={"matched": matched, "csv_total_quantity": 3})
    assert r.status_code == 200
    assert r.json() == {"stats": {"original_matched_rows": 1}, "quality": 3}

    captured = {}

    def fake_confirm(db, marketplace, month, m, s, learn):
        captured.update(marketplace=marketplace, month=month, learn=learn)
        return {"success_count": 1}

    monkeypatch.setattr(CsvImportService, "confirm_import", fake_confirm)
    r2 = client.post(
        "/imports/amazon/confirm",
        json={"month": "2025-07", "matched": matched, "learn_matches": False},
    )
    assert r2.status_code == 200
    assert captured == {"marketplace": "amazon", "month": "2025-07", "learn": False}


def test_import_summary_routes(monkeypatch):
    monkeypatch.setattr(
        CsvImportService,
        "parse_summary_csv",
        lambda db, content, filename, month: {"month": "2025-07", "rows": []},
    )
    r = client.post("/imports/summary/parse", files={"file": ("summary.csv", b"x", "text/csv")})
    assert r.status_code == 200
    assert r.json()["month"] == "2025-07"

    monkeypatch.setattr(
        CsvImportService, "confirm_summary_import", lambda db, month, rows: {"success_count": len(rows)}
    )
    r2 = client.post(
        "/imports/summary/confirm",
        json={"month": "2025-07", "rows": [{"title": "焼豚", "counts": {"amazon": 1}}]},
    )
    assert r2.json() == {"success_count": 1}


def test_learning_routes(monkeypatch):
    mapping = make_mapping()

    monkeypatch.setattr(LearningService, "list_mappings", lambda db, m: [mapping])
    r = client.get("/learning/amazon")
    assert r.status_code == 200
    assert r.json()[0]["title"] == mapping.title

    monkeypatch.setattr(LearningService, "learn", lambda db, m, title, pid: mapping)
    r2 = client.post("/learning/amazon", json={"title": mapping.title, "product_id": str(mapping.product_id)})
    assert r2.status_code == 201

    monkeypatch.setattr(LearningService, "reset", lambda db, m: 4)
    assert client.delete("/learning/amazon").json()["deleted"] == 4

    monkeypatch.setattr(LearningService, "delete_mapping", lambda db, mid: True)
    r3 = client.delete(f"/learning/mappings/{mapping.id}")
    assert r3.json()["removed"] == str(mapping.id)


def test_ingredient_routes(monkeypatch):
    ingredient = SimpleNamespace(
        id=uuid.uuid4(), name="醤油", category="調味料", unit_quantity=1000.0,
        price_incl_tax=432, price_excl_tax=400, calories=None, protein=None, fat=None,
        carbohydrate=None, sodium=None, supplier=None, notes=None, price_per_gram=0.4,
    )
    monkeypatch.setattr(IngredientService, "list_ingredients", lambda db, s, c: [ingredient])
    r = client.get("/ingredients", params={"category": "調味料"})
    assert r.json()[0]["price_per_gram"] == 0.4

    monkeypatch.setattr(IngredientService, "create_ingredient", lambda db, data: ingredient)
    r2 = client.post("/ingredients", json={"name": "醤油", "unit_quantity": 1000})
    assert r2.status_code == 201

    r3 = client.post("/ingredients", json={"name": "醤油", "unit_quantity": 0})
    assert r3.status_code == 422


def test_recipe_routes(monkeypatch):
    rid = uuid.uuid4()
    captured = {}

    def fake_list(db, search, category, status, page, page_size):
        captured.update(status=status, page=page, page_size=page_size)
        return [{"id": rid, "name": "チャーシュー"}], 3

    monkeypatch.setattr(RecipeService, "list_recipes", fake_list)
    r = client.get("/recipes", params={"status": "active", "page": 2, "page_size": 2})
    assert r.status_code == 200
    assert captured == {"status": "active", "page": 2, "page_size": 2}
    assert r.json()["items"][0]["name"] == "チャーシュー"

    def fake_cost(db, recipe_id, batch):
        captured["batch"] = batch
        return {"recipe_id": recipe_id}

    monkeypatch.setattr(RecipeService, "cost_breakdown", fake_cost)
    r2 = client.get(f"/recipes/{rid}/cost", params=[("batch", 100), ("batch", 400)])
    assert r2.status_code == 200
    assert captured["batch"] == [100, 400]

    monkeypatch.setattr(RecipeService, "create_recipe", lambda db, data: {"id": rid, "name": data.name})
    r3 = client.post("/recipes", json={"name": "チャーシュー", "items": [{"item_name": "醤油"}]})
    assert r3.status_code == 201

    monkeypatch.setattr(RecipeService, "list_categories", lambda db: ["タレ"])
    assert client.get("/recipes/categories").json() == ["タレ"]


def test_kpi_routes(monkeypatch):
    entry = SimpleNamespace(id=uuid.uuid4(), metric="target", channel_code="WEB", month=date(2025, 8, 1), amount=100)

    monkeypatch.setattr(KpiService, "save_entry", lambda db, data: entry)
    r = client.put("/kpi/entries", json={"metric": "target", "channel": "WEB", "month": "2025-08", "amount": 100})
    assert r.status_code == 200
    assert r.json()["channel_code"] == "WEB"

    r2 = client.put("/kpi/entries", json={"metric": "profit", "month": "2025-08", "amount": 1})
    assert r2.status_code == 422

    monkeypatch.setattr(KpiService, "summary", lambda db, fy: {"fiscal_year": fy, "label": f"FY{fy % 100}"})
    r3 = client.get("/kpi/summary", params={"fiscal_year": 2026})
    assert r3.json()["label"] == "FY26"

    monkeypatch.setattr(KpiService, "fiscal_window", lambda db, latest: {"label": "FY26", "latest": latest})
    assert client.get("/kpi/fiscal-window", params={"latest": "2026-03"}).json()["latest"] == "2026-03"
