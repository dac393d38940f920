"""
Tagged value nodes, their construction and their destruction.

A parsed document is a tree of `Value` nodes. Composite nodes own their
children exclusively, so `free()` on the root releases every node exactly
once. Each node is charged to the allocator as a single block: strings carry
their decoded bytes and arrays their child slots inside that block.
"""

import codecs
from collections.abc import Iterator
from enum import Enum
from typing import Any

from ._cursor import Cursor
from ._mapping import KeyValueMap
from ._memory import NODE_SIZE
from ._memory import SLOT_SIZE
from ._memory import AllocationError
from ._memory import Allocator

# Error handler name for turning decoded string bytes back into text
TEXT_ERRORS = "jsontree.surrogates"


def _undecodable(err: UnicodeError) -> tuple[str, int]:
    """
    Decodes what strict UTF-8 rejects in a parsed string.

    A 3-byte surrogate sequence from a lone `\\uD800`-style escape becomes
    that surrogate; any other bad byte becomes U+DC80..U+DCFF as with
    "surrogateescape".
    """
    if not isinstance(err, UnicodeDecodeError):
        raise err
    chunk = err.object[err.start : err.start + 3]
    try:
        return chunk.decode("utf-8", "surrogatepass"), err.start + 3
    except UnicodeDecodeError:
        return chr(0xDC00 + err.object[err.start]), err.start + 1


codecs.register_error(TEXT_ERRORS, _undecodable)


class ValueKind(Enum):
    """Tag of a value node."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class Value:
    """
    One node of a parsed JSON tree.

    `kind` decides which accessor is meaningful; any other accessor raises
    TypeError. String payloads are NUL-terminated byte buffers sized exactly
    to the decoded content. Array payloads have a fixed length.
    """

    __slots__ = ("kind", "_payload", "_block_size", "_allocator")

    def __init__(
        self,
        kind: ValueKind,
        payload: Any,
        block_size: int,
        allocator: Allocator,
    ) -> None:
        self.kind = kind
        self._payload = payload
        self._block_size = block_size
        self._allocator: Allocator | None = allocator

    def _expect(self, kind: ValueKind) -> Any:
        if self._allocator is None:
            raise ValueError("JSON value has been freed")
        if self.kind is not kind:
            raise TypeError(
                f"JSON value is {self.kind.value}, not {kind.value}"
            )
        return self._payload

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    @property
    def is_boolean(self) -> bool:
        return self.kind is ValueKind.BOOLEAN

    @property
    def is_number(self) -> bool:
        return self.kind is ValueKind.NUMBER

    @property
    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    @property
    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    @property
    def is_object(self) -> bool:
        return self.kind is ValueKind.OBJECT

    @property
    def boolean(self) -> bool:
        return self._expect(ValueKind.BOOLEAN)  # type: ignore[no-any-return]

    @property
    def number(self) -> float:
        return self._expect(ValueKind.NUMBER)  # type: ignore[no-any-return]

    @property
    def string(self) -> bytes:
        """Decoded string bytes, without the terminator."""
        return bytes(self._expect(ValueKind.STRING)[:-1])

    @property
    def c_string(self) -> bytes:
        """Decoded string bytes including the trailing NUL."""
        return bytes(self._expect(ValueKind.STRING))

    @property
    def text(self) -> str:
        """
        The string decoded as UTF-8.

        Lone `\\uD800`-style escapes are kept as surrogates, since the parser
        encodes each escape on its own. Raw bytes that are not UTF-8 map to
        U+DC80..U+DCFF as with "surrogateescape". Never raises for a live
        string.
        """
        buffer = self._expect(ValueKind.STRING)
        return bytes(buffer[:-1]).decode("utf-8", TEXT_ERRORS)

    @property
    def object(self) -> KeyValueMap["Value"]:
        return self._expect(ValueKind.OBJECT)  # type: ignore[no-any-return]

    def keys(self) -> list[bytes]:
        return self.object.keys()

    def items(self) -> list[tuple[bytes, "Value"]]:
        return self.object.items()

    def __bool__(self) -> bool:
        return True

    def __len__(self) -> int:
        if self.kind is ValueKind.OBJECT:
            return len(self.object)
        return len(self._expect(ValueKind.ARRAY))

    def __getitem__(self, index: int) -> "Value":
        slots = self._expect(ValueKind.ARRAY)
        return slots[index]  # type: ignore[no-any-return]

    def __iter__(self) -> Iterator[Any]:
        if self.kind is ValueKind.OBJECT:
            return iter(self.object)
        return iter(self._expect(ValueKind.ARRAY))

    def to_python(self) -> Any:  # noqa: PLR0911
        """Converts the tree to plain None/bool/float/str/list/dict."""
        if self._allocator is None:
            raise ValueError("JSON value has been freed")
        if self.kind is ValueKind.NULL:
            return None
        elif self.kind in (ValueKind.BOOLEAN, ValueKind.NUMBER):
            return self._payload
        elif self.kind is ValueKind.STRING:
            return self.text
        elif self.kind is ValueKind.ARRAY:
            return [child.to_python() for child in self._payload]
        else:
            return {
                key.decode("utf-8", TEXT_ERRORS): child.to_python()
                for key, child in self._payload.items()
            }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is ValueKind.OBJECT:
            return dict(self.items()) == dict(other.items())
        return bool(self._payload == other._payload)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._allocator is None:
            return f"<freed {self.kind.name} value>"
        if self.kind is ValueKind.NULL:
            return "Value(NULL)"
        if self.kind is ValueKind.STRING:
            return f"Value(STRING, {self.string!r})"
        if self.kind is ValueKind.OBJECT:
            return f"Value(OBJECT, {dict(self.items())!r})"
        return f"Value({self.kind.name}, {self._payload!r})"


def free(value: Value | None) -> None:
    """
    Destroys `value` and everything it owns.

    Each child is released exactly once. Freeing a node twice raises
    ValueError; a node must not be used after it has been freed.
    """
    if value is None:
        return
    allocator = value._allocator
    if allocator is None:
        raise ValueError("JSON value has already been freed")

    payload = value._payload
    if value.kind is ValueKind.ARRAY:
        for child in payload:
            if child is not None:
                free(child)
    elif value.kind is ValueKind.OBJECT:
        payload.destroy()

    value._allocator = None
    value._payload = None
    allocator.release(value._block_size)


def lookup(value: Value | None, key: str | bytes) -> Value | None:
    """
    Returns the child stored under `key` when `value` is an object.

    Any other value, including None, yields None. Never raises.
    """
    if (
        not isinstance(value, Value)
        or value.kind is not ValueKind.OBJECT
        or value._allocator is None
    ):
        return None
    if isinstance(key, str):
        key = key.encode("utf-8", "surrogatepass")
    elif not isinstance(key, bytes | bytearray):
        return None
    return value._payload.find(key)  # type: ignore[no-any-return]


class TreeBuilder:
    """
    Allocates value nodes against an allocator.

    Allocation failures surface as "Out of memory" parse errors located at
    the cursor.
    """

    def __init__(self, allocator: Allocator) -> None:
        self.allocator = allocator

    def _acquire(self, nbytes: int, cursor: Cursor) -> None:
        try:
            self.allocator.acquire(nbytes)
        except AllocationError as e:
            raise cursor.error("Out of memory") from e

    def _node(
        self, kind: ValueKind, payload: Any, nbytes: int, cursor: Cursor
    ) -> Value:
        self._acquire(nbytes, cursor)
        return Value(kind, payload, nbytes, self.allocator)

    def null(self, cursor: Cursor) -> Value:
        return self._node(ValueKind.NULL, None, NODE_SIZE, cursor)

    def boolean(self, flag: bool, cursor: Cursor) -> Value:
        return self._node(ValueKind.BOOLEAN, flag, NODE_SIZE, cursor)

    def number(self, number: float, cursor: Cursor) -> Value:
        return self._node(ValueKind.NUMBER, number, NODE_SIZE, cursor)

    def string(self, size: int, cursor: Cursor) -> tuple[Value, bytearray]:
        """Allocates a string node with room for `size` bytes plus a NUL."""
        buffer = bytearray(size + 1)
        buffer[size] = 0
        node = self._node(
            ValueKind.STRING, buffer, NODE_SIZE + size + 1, cursor
        )
        return node, buffer

    def array(self, count: int, cursor: Cursor) -> tuple[Value, list[Any]]:
        """Allocates an array node with exactly `count` empty slots."""
        slots: list[Any] = [None] * count
        node = self._node(
            ValueKind.ARRAY, slots, NODE_SIZE + SLOT_SIZE * count, cursor
        )
        return node, slots

    def object(self, cursor: Cursor) -> Value:
        self._acquire(NODE_SIZE, cursor)
        try:
            mapping: KeyValueMap[Value] = KeyValueMap(free, self.allocator)
        except AllocationError as e:
            self.allocator.release(NODE_SIZE)
            raise cursor.error("Out of memory") from e
        return Value(ValueKind.OBJECT, mapping, NODE_SIZE, self.allocator)

    def key_buffer(self, size: int, cursor: Cursor) -> bytearray:
        """Allocates a temporary buffer for decoding an object key."""
        self._acquire(size + 1, cursor)
        buffer = bytearray(size + 1)
        buffer[size] = 0
        return buffer

    def release_key(self, buffer: bytearray) -> None:
        self.allocator.release(len(buffer))
