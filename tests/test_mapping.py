"""
Mapping collaborator tests: key copying, ownership and destruction.
"""

import pytest

import jsontree
from jsontree import KeyValueMap
from jsontree._memory import MAP_SIZE


def test_insert_find_and_order() -> None:
    destroyed: list[str] = []
    mapping: KeyValueMap[str] = KeyValueMap(destroyed.append)
    mapping.insert(b"b", "one")
    mapping.insert(b"a", "two")

    assert mapping.find(b"a") == "two"
    assert mapping.find(b"missing") is None
    assert mapping.keys() == [b"b", b"a"]
    assert list(mapping) == [b"b", b"a"]
    assert len(mapping) == 2
    assert b"a" in mapping
    assert "a" not in mapping


def test_key_is_copied() -> None:
    mapping: KeyValueMap[int] = KeyValueMap(lambda value: None)
    key = bytearray(b"key")
    mapping.insert(key, 1)
    key[0] = ord("X")

    assert mapping.find(b"key") == 1
    assert mapping.find(b"Xey") is None


def test_last_write_wins_and_destroys_replaced_value() -> None:
    destroyed: list[str] = []
    mapping: KeyValueMap[str] = KeyValueMap(destroyed.append)
    mapping.insert(b"k", "old")
    mapping.insert(b"k", "new")

    assert mapping.find(b"k") == "new"
    assert len(mapping) == 1
    assert destroyed == ["old"]


def test_destroy_runs_destructor_on_every_value() -> None:
    destroyed: list[str] = []
    allocator = jsontree.Allocator()
    mapping: KeyValueMap[str] = KeyValueMap(destroyed.append, allocator)
    mapping.insert(b"x", "1")
    mapping.insert(b"yy", "2")
    assert allocator.stats.live_bytes == MAP_SIZE + 2 + 3

    mapping.destroy()
    assert destroyed == ["1", "2"]
    assert allocator.live_blocks == 0

    with pytest.raises(ValueError):
        mapping.destroy()


def test_insert_failure_leaves_value_with_caller() -> None:
    allocator = jsontree.Allocator(block_limit=1)
    destroyed: list[str] = []
    mapping: KeyValueMap[str] = KeyValueMap(destroyed.append, allocator)

    with pytest.raises(jsontree.AllocationError):
        mapping.insert(b"k", "value")
    assert mapping.find(b"k") is None
    assert destroyed == []
