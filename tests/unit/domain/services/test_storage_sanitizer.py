from dataclasses import dataclass
from datetime import datetime, timezone

from src.domain.services.storage_sanitizer import sanitize_for_storage


def test_primitives_pass_through():
    for value in ("s", 1, 1.5, True, None):
        assert sanitize_for_storage(value) == value


def test_id_keys_and_callables_dropped_recursively():
    payload = {
        "id": "top",
        "title": "t",
        "fn": lambda: 1,
        "snippets": [{"id": "inner", "code": "x", "cb": print}],
    }
    assert sanitize_for_storage(payload) == {"title": "t", "snippets": [{"code": "x"}]}


def test_none_entries_dropped_from_lists():
    assert sanitize_for_storage(["a", None, "b"]) == ["a", "b"]


def test_datetimes_become_iso_strings():
    ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert sanitize_for_storage({"at": ts}) == {"at": "2024-01-02T03:04:05+00:00"}


def test_dataclasses_become_mappings():
    @dataclass
    class Block:
        code: str
        id: str = "x"

    assert sanitize_for_storage([Block(code="c")]) == [{"code": "c"}]


def test_unknown_objects_become_none():
    assert sanitize_for_storage({"obj": object(), "s": {1, 2}}) == {"obj": None, "s": None}
