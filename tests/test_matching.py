"""
Tests for CSV title -> product matching.

Order of precedence: learned title, exact normalized name, product name
contained in the title (longest wins), fuzzy score above the threshold.
"""

import uuid
from types import SimpleNamespace

from domain.enums import MatchType
from services.matching import find_best_match


def _product(name):
    return SimpleNamespace(id=uuid.uuid4(), name=name)


CHASHU = _product("チャーシュー")
GYOZA = _product("国産ギョーザ 20個入")
MISO = _product("特製味噌ラーメン")
RAMEN = _product("ラーメン")
PRODUCTS = [CHASHU, GYOZA, MISO, RAMEN]


def test_learned_title_wins_over_name_match():
    learned = {"チャーシュー": GYOZA.id}
    match = find_best_match("チャーシュー", PRODUCTS, learned)
    assert match.product_id == GYOZA.id
    assert match.match_type == MatchType.LEARNED
    assert match.confidence == 100


def test_learned_title_for_deleted_product_is_ignored():
    learned = {"チャーシュー": uuid.uuid4()}
    match = find_best_match("チャーシュー", PRODUCTS, learned)
    assert match.product_id == CHASHU.id
    assert match.match_type == MatchType.EXACT


def test_exact_match_ignores_width_and_spacing():
    match = find_best_match("国産ギョーザ２０個入", PRODUCTS)
    assert match.product_id == GYOZA.id
    assert match.match_type == MatchType.EXACT
    assert match.confidence == 100


def test_contained_name_prefers_longest():
    match = find_best_match("【送料無料】特製味噌ラーメン 2食セット", PRODUCTS)
    assert match.product_id == MISO.id
    assert match.match_type == MatchType.HIGH
    assert match.confidence == 90


def test_fuzzy_match_reports_score():
    match = find_best_match("特製味噌ラメン", [MISO, GYOZA])
    assert match.product_id == MISO.id
    assert match.match_type in (MatchType.MEDIUM, MatchType.LOW)
    assert 70 <= match.confidence < 100


def test_no_match_below_threshold():
    assert find_best_match("まったく別の商品", PRODUCTS) is None


def test_threshold_can_be_overridden():
    assert find_best_match("特製味噌ラメン", [MISO], threshold=99) is None


def test_blank_inputs():
    assert find_best_match("", PRODUCTS) is None
    assert find_best_match("   ", PRODUCTS) is None
    assert find_best_match("チャーシュー", []) is None
    assert find_best_match("チャーシュー", [_product(""), _product("  ")]) is None
