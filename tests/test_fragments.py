from __future__ import annotations

from core.fragments import merge, partition

KNOWN_KEYS = ["title", "labelPosition", "sliderColor"]


def _flat_settings() -> dict:
    return {
        "title": "A",
        "labelPosition": "after",
        "sliderColor": "accent",
        "rpcAction": "setValue",
    }


def test_partition_splits_known_fields_from_fragment() -> None:
    known, fragment = partition(_flat_settings(), KNOWN_KEYS)
    assert known == {"title": "A", "labelPosition": "after", "sliderColor": "accent"}
    assert fragment == {"rpcAction": "setValue"}


def test_edit_then_merge_keeps_fragment_keys() -> None:
    known, fragment = partition(_flat_settings(), KNOWN_KEYS)
    known["title"] = "B"
    assert merge(known, fragment) == {
        "title": "B",
        "labelPosition": "after",
        "sliderColor": "accent",
        "rpcAction": "setValue",
    }


def test_roundtrip_restores_original() -> None:
    original = {"title": "x", "nested": {"a": [1, 2]}, "count": 3}
    result = partition(original, ["title", "missing"])
    assert merge(result.known, result.fragment) == original


def test_missing_known_keys_stay_absent() -> None:
    known, fragment = partition({"other": 1}, KNOWN_KEYS)
    assert known == {}
    assert fragment == {"other": 1}
    assert "title" not in merge(known, fragment)


def test_no_extra_keys_gives_empty_fragment() -> None:
    known, fragment = partition({"title": "A"}, KNOWN_KEYS)
    assert fragment == {}
    assert merge(known, fragment) == {"title": "A"}
    assert merge(known, None) == {"title": "A"}


def test_known_value_wins_on_collision() -> None:
    assert merge({"title": "known"}, {"title": "fragment", "x": 1}) == {"title": "known", "x": 1}


def test_merge_is_pure() -> None:
    known = {"title": "A"}
    fragment = {"x": {"y": 1}}
    first = merge(known, fragment)
    second = merge(known, fragment)
    assert first == second
    assert first is not second
    assert fragment == {"x": {"y": 1}}


def test_fragment_mutation_does_not_touch_input() -> None:
    original = {"title": "A", "extra": {"items": [1]}}
    _, fragment = partition(original, KNOWN_KEYS)
    fragment["extra"]["items"].append(2)
    fragment["added"] = True
    assert original == {"title": "A", "extra": {"items": [1]}}


def test_partition_accepts_generator_keys() -> None:
    known, fragment = partition({"a": 1, "b": 2}, (key for key in ["a"]))
    assert known == {"a": 1}
    assert fragment == {"b": 2}


def test_partition_result_unpacks_in_order() -> None:
    result = partition({"title": "A", "x": 1}, KNOWN_KEYS)
    assert list(result) == [{"title": "A"}, {"x": 1}]
