from conftest import rec

from freshcart.domain.models.interaction import ActionKind
from freshcart.domain.services.history_scorer import preferred_categories


def test_empty_streams_have_no_preferences():
    assert preferred_categories([], [], []) == []


def test_ranks_by_count_across_streams():
    viewed = [rec(1, "Fruits"), rec(3, "Vegetables")]
    cart = [rec(2, "Fruits", ActionKind.ADD_TO_CART)]
    purchased = [rec(4, "Dairy", ActionKind.PURCHASE), rec(5, "Dairy", ActionKind.PURCHASE), rec(4, "Dairy", ActionKind.PURCHASE)]
    assert preferred_categories(viewed, cart, purchased) == ["Dairy", "Fruits", "Vegetables"]


def test_ties_keep_first_occurrence_order():
    viewed = [rec(5, "Meat"), rec(3, "Vegetables")]
    cart = [rec(1, "Fruits", ActionKind.ADD_TO_CART)]
    purchased = [rec(1, "Fruits", ActionKind.PURCHASE), rec(6, "Meat", ActionKind.PURCHASE), rec(3, "Vegetables", ActionKind.PURCHASE)]
    assert preferred_categories(viewed, cart, purchased) == ["Meat", "Vegetables", "Fruits"]


def test_records_without_category_are_skipped():
    viewed = [rec(1, None), rec(2, ""), rec(3, "Vegetables")]
    assert preferred_categories(viewed, [], []) == ["Vegetables"]


def test_caps_at_six_without_duplicates():
    labels = ["A", "B", "C", "D", "E", "F", "G", "H"]
    viewed = [rec(i + 1, label) for i, label in enumerate(labels)] + [rec(1, "A"), rec(8, "H")]
    result = preferred_categories(viewed, [], [])
    assert len(result) == 6
    assert len(set(result)) == 6
    assert result[:2] == ["A", "H"]
    assert result[2:] == ["B", "C", "D", "E"]
