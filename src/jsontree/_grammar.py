"""
Recursive-descent grammar with a validate/materialize mode.

Every rule takes the cursor and a `Mode`. In `Mode.VALIDATE` a rule checks
well-formedness and returns `SCANNED` without allocating anything; in
`Mode.MATERIALIZE` it builds and returns a `Value`. Both modes consume
exactly the same input. Failures raise `JSONParseError`, and a failing rule
has already freed whatever it allocated.

Arrays use the two modes for sizing: a validate pass counts the elements,
then the cursor is rewound and a materialize pass fills a block allocated
with exactly that many slots.
"""

from enum import Enum
from typing import Final
from typing import TypeAlias
from typing import cast

from . import _profiling
from ._cursor import Cursor
from ._errors import JSONParseError
from ._memory import AllocationError
from ._strings import copy_string
from ._strings import string_size
from ._values import TreeBuilder
from ._values import Value
from ._values import free


class Mode(Enum):
    """Whether a rule only validates or also builds nodes."""

    VALIDATE = "validate"
    MATERIALIZE = "materialize"


class _Scanned:
    """Result of a successful rule in validate mode."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "SCANNED"


SCANNED: Final = _Scanned()

RuleResult: TypeAlias = Value | _Scanned

DIGITS = frozenset(b"0123456789")

# Failures a rule unwinds from, freeing what it built. A RecursionError is
# reported as a parse error once it reaches the entry point.
_UNWIND = (JSONParseError, RecursionError)

_LITERALS: tuple[tuple[bytes, bool | None], ...] = (
    (b"null", None),
    (b"true", True),
    (b"false", False),
)


class JsonGrammar:
    """
    The grammar rules, sharing one tree builder.

    `value` is the dispatch rule; the others assume the cursor sits on the
    first byte of their production. Arrays and objects count their nesting
    and fail with "Nesting too deep" past `max_depth` levels.
    """

    def __init__(
        self, builder: TreeBuilder, max_depth: int | None = None
    ) -> None:
        self.builder = builder
        self.max_depth = max_depth
        self.depth = 0

    def _enter(self, cursor: Cursor) -> None:
        if self.max_depth is not None and self.depth >= self.max_depth:
            raise cursor.error("Nesting too deep")
        self.depth += 1

    def value(self, cursor: Cursor, mode: Mode) -> RuleResult:
        """Parses any value, stripping whitespace on both sides."""
        cursor.skip_whitespace()
        ch = cursor.peek()
        if ch == ord("{"):
            result = self.object(cursor, mode)
        elif ch == ord("["):
            result = self.array(cursor, mode)
        elif ch == ord('"'):
            result = self.string(cursor, mode)
        elif ch == ord("-") or ch in DIGITS:
            result = self.number(cursor, mode)
        else:
            result = self.word(cursor, mode)
        cursor.skip_whitespace()
        return result

    def word(self, cursor: Cursor, mode: Mode) -> RuleResult:
        """Parses null, true or false."""
        with _profiling.ProfileContext("word"):
            for literal, meaning in _LITERALS:
                end = min(cursor.pos + len(literal), cursor.size)
                if cursor.data[cursor.pos : end] == literal:
                    for _ in literal:
                        cursor.advance()
                    if mode is Mode.VALIDATE:
                        return SCANNED
                    if meaning is None:
                        return self.builder.null(cursor)
                    return self.builder.boolean(meaning, cursor)
            raise cursor.error("Expected value")

    def _digits(self, cursor: Cursor) -> int:
        n = 0
        while cursor.peek() in DIGITS:
            cursor.advance()
            n += 1
        return n

    def number(self, cursor: Cursor, mode: Mode) -> RuleResult:
        """Parses -?(0|[1-9][0-9]*)(.[0-9]+)?([eE][+-]?[0-9]+)?"""
        with _profiling.ProfileContext("number"):
            start = cursor.pos
            if cursor.peek() == ord("-"):
                cursor.advance()

            if cursor.peek() == ord("0"):
                cursor.advance()
                if cursor.peek() in DIGITS:
                    raise cursor.error("Numbers may not have leading zeros")
            elif self._digits(cursor) == 0:
                raise cursor.error("Expected number")

            if cursor.peek() == ord("."):
                cursor.advance()
                if self._digits(cursor) == 0:
                    raise cursor.error("Expected number after decimal point")

            if cursor.peek() in (ord("e"), ord("E")):
                cursor.advance()
                if cursor.peek() in (ord("+"), ord("-")):
                    cursor.advance()
                if self._digits(cursor) == 0:
                    raise cursor.error("Expected number after exponent")

            if mode is Mode.VALIDATE:
                return SCANNED
            literal = cursor.data[start : cursor.pos].decode("ascii")
            return self.builder.number(float(literal), cursor)

    def string(self, cursor: Cursor, mode: Mode) -> RuleResult:
        """Parses a quoted string into a buffer sized by a dry run."""
        with _profiling.ProfileContext("string"):
            size = string_size(cursor, mode is Mode.VALIDATE)
            if mode is Mode.VALIDATE:
                return SCANNED
            node, buffer = self.builder.string(size, cursor)
            try:
                copy_string(buffer, cursor)
            except _UNWIND:
                free(node)
                raise
            return node

    def _array_elements(
        self,
        cursor: Cursor,
        start: Cursor,
        mode: Mode,
        slots: list[Value] | None,
    ) -> int:
        """
        Consumes `[ value, ... ]` and returns the element count.

        In materialize mode each element is stored into the next slot.
        """
        if cursor.advance() != ord("["):
            raise cursor.error("Expected '['")
        cursor.skip_whitespace()
        count = 0
        while True:
            ch = cursor.peek()
            if ch == ord("]"):
                cursor.advance()
                return count
            elif ch == 0 and cursor.at_end():
                raise start.error("Unterminated array")
            if count:
                if ch != ord(","):
                    raise cursor.error("Expected ','")
                cursor.advance()
            element = self.value(cursor, mode)
            if slots is not None:
                slots[count] = cast(Value, element)
            count += 1

    def array(self, cursor: Cursor, mode: Mode) -> RuleResult:
        """Parses an array: count in a validate pass, then fill."""
        with _profiling.ProfileContext("array"):
            self._enter(cursor)
            try:
                start = cursor.snapshot()
                count = self._array_elements(
                    cursor, start, Mode.VALIDATE, None
                )
                if mode is Mode.VALIDATE:
                    return SCANNED

                node, slots = self.builder.array(count, cursor)
                try:
                    end = cursor.snapshot()
                    cursor.restore(start)
                    filled = self._array_elements(
                        cursor, start, Mode.MATERIALIZE, slots
                    )
                except _UNWIND:
                    free(node)
                    raise
                if filled != count or cursor.pos != end.pos:
                    free(node)
                    raise RuntimeError(
                        f"array passes disagree: counted {count} elements, "
                        f"filled {filled}"
                    )
                return node
            finally:
                self.depth -= 1

    def _key(self, cursor: Cursor, mode: Mode) -> bytearray | None:
        """
        Parses an object key.

        In materialize mode the key is decoded into a temporary buffer that
        the caller must release.
        """
        size = string_size(cursor, mode is Mode.VALIDATE)
        if mode is Mode.VALIDATE:
            return None
        buffer = self.builder.key_buffer(size, cursor)
        try:
            copy_string(buffer, cursor)
        except _UNWIND:
            self.builder.release_key(buffer)
            raise
        return buffer

    def object(self, cursor: Cursor, mode: Mode) -> RuleResult:
        """Parses an object, inserting pairs into a map as they are read."""
        with _profiling.ProfileContext("object"):
            self._enter(cursor)
            try:
                start = cursor.snapshot()
                if cursor.advance() != ord("{"):
                    raise cursor.error("Expected '{'")
                if mode is Mode.VALIDATE:
                    self._members(cursor, start, mode, None)
                    return SCANNED

                node = self.builder.object(cursor)
                try:
                    self._members(cursor, start, mode, node)
                except _UNWIND:
                    free(node)
                    raise
                return node
            finally:
                self.depth -= 1

    def _members(
        self, cursor: Cursor, start: Cursor, mode: Mode, node: Value | None
    ) -> None:
        first = True
        while True:
            cursor.skip_whitespace()
            ch = cursor.peek()
            if ch == ord("}"):
                cursor.advance()
                return
            elif ch == 0 and cursor.at_end():
                raise start.error("Unterminated object")
            if first:
                first = False
            else:
                if ch != ord(","):
                    raise cursor.error("Expected ','")
                cursor.advance()
                cursor.skip_whitespace()

            key = self._key(cursor, mode)
            try:
                self._member(cursor, mode, node, key)
            finally:
                if key is not None:
                    self.builder.release_key(key)

    def _member(
        self,
        cursor: Cursor,
        mode: Mode,
        node: Value | None,
        key: bytearray | None,
    ) -> None:
        """Parses `: value` and stores the pair under `key`."""
        cursor.skip_whitespace()
        if cursor.advance() != ord(":"):
            raise cursor.error("Expected ':'")
        member = self.value(cursor, mode)
        if node is None or key is None:
            return

        try:
            node.object.insert(bytes(key[:-1]), cast(Value, member))
        except AllocationError as e:
            free(member)
            raise cursor.error("Out of memory") from e
