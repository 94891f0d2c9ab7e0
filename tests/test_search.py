"""
Tests for the clue search filter.

Run with: python -m pytest tests/test_search.py
"""

from conftest import GOLD_COIN, MAP_SHARD, SILVER_KEY
from logic.models import Treasure
from logic.search import filter_treasures


def test_scenario_from_two_item_catalog():
    catalog = [GOLD_COIN, MAP_SHARD]

    assert filter_treasures(catalog, "shiny") == [GOLD_COIN]
    assert filter_treasures(catalog, "") == []


def test_blank_query_yields_nothing(catalog):
    for query in ["", " ", "\t", "   \n"]:
        assert filter_treasures(catalog, query) == []
    assert filter_treasures(catalog, None) == []


def test_matches_name_or_clue_case_insensitively(catalog):
    assert filter_treasures(catalog, "GOLD") == [GOLD_COIN]
    assert filter_treasures(catalog, "Torn") == [MAP_SHARD]
    assert filter_treasures(catalog, "cold METAL") == [SILVER_KEY]


def test_preserves_catalog_order(catalog):
    # "e" appears in every entry; result must follow the catalog, not relevance
    assert filter_treasures(catalog, "e") == [GOLD_COIN, MAP_SHARD, SILVER_KEY]
    reversed_catalog = list(reversed(catalog))
    assert filter_treasures(reversed_catalog, "e") == reversed_catalog


def test_result_is_exactly_the_matching_subset():
    catalog = [
        Treasure(id=str(i), name=name, clue=clue, x=0, y=0)
        for i, (name, clue) in enumerate([
            ("Anchor", "rusted iron"),
            ("Bell", "rings at IRONwood"),
            ("Compass", "points north"),
            ("Iron Cross", "heavy"),
        ])
    ]

    result = filter_treasures(catalog, "iron")

    assert [t.name for t in result] == ["Anchor", "Bell", "Iron Cross"]


def test_no_match(catalog):
    assert filter_treasures(catalog, "dragon") == []


def test_empty_catalog():
    assert filter_treasures([], "gold") == []
