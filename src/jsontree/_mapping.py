"""Insertion-ordered key/value map backing object values."""

from collections.abc import Callable
from collections.abc import Iterator
from typing import Generic
from typing import TypeVar

from ._memory import MAP_SIZE
from ._memory import Allocator

V = TypeVar("V")


class KeyValueMap(Generic[V]):
    """
    Maps byte-string keys to owned values.

    The map copies every key it is given and owns every value inserted into
    it; `destroy()` hands each value to `value_destructor`. Re-inserting an
    existing key replaces the value (last write wins) and destroys the
    previous one.
    """

    def __init__(
        self,
        value_destructor: Callable[[V], None],
        allocator: Allocator | None = None,
    ) -> None:
        self._destructor = value_destructor
        self._allocator = allocator if allocator is not None else Allocator()
        self._allocator.acquire(MAP_SIZE)
        self._entries: dict[bytes, V] = {}
        self._destroyed = False

    def insert(self, key: bytes, value: V) -> None:
        """Stores `value` under a copy of `key`, taking ownership of it."""
        self._check_live()
        key = bytes(key)
        if key in self._entries:
            previous = self._entries[key]
            self._entries[key] = value
            self._destructor(previous)
            return
        self._allocator.acquire(len(key) + 1)
        self._entries[key] = value

    def find(self, key: bytes) -> V | None:
        return self._entries.get(bytes(key))

    def destroy(self) -> None:
        """Destroys every stored value, then releases keys and the map."""
        self._check_live()
        self._destroyed = True
        entries, self._entries = self._entries, {}
        for key, value in entries.items():
            self._destructor(value)
            self._allocator.release(len(key) + 1)
        self._allocator.release(MAP_SIZE)

    def keys(self) -> list[bytes]:
        return list(self._entries)

    def items(self) -> list[tuple[bytes, V]]:
        return list(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(list(self._entries))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, bytes | bytearray):
            return False
        return bytes(key) in self._entries

    def _check_live(self) -> None:
        if self._destroyed:
            raise ValueError("map has already been destroyed")
