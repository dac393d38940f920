"""Read position over the input buffer, with line and column tracking."""

from dataclasses import dataclass

from ._errors import JSONParseError

# The C isspace() set
WHITESPACE = frozenset(b" \t\n\v\f\r")

NEWLINE = 0x0A


@dataclass(slots=True)
class Cursor:
    """
    Tracks the parser's position in the input buffer.

    Cursors are plain values: `snapshot()` copies one and `restore()` puts a
    copy back, which is how the grammar rewinds for its second pass.
    Byte value 0 doubles as the end-of-input sentinel and is never consumed.
    """

    data: bytes
    size: int
    pos: int = 0
    line: int = 1
    col: int = 1

    @classmethod
    def over(cls, data: bytes) -> "Cursor":
        return cls(data, len(data))

    def peek(self) -> int:
        """Returns current byte without advancing, 0 at end of input."""
        return self.data[self.pos] if self.pos < self.size else 0

    def advance(self) -> int:
        """Returns current byte and advances past it."""
        c = self.peek()
        if c:
            self.pos += 1
            self.col += 1
            if c == NEWLINE:
                self.col = 1
                self.line += 1
        return c

    def skip_whitespace(self) -> None:
        while self.pos < self.size and self.data[self.pos] in WHITESPACE:
            self.advance()

    def at_end(self) -> bool:
        return self.pos >= self.size

    def snapshot(self) -> "Cursor":
        return Cursor(self.data, self.size, self.pos, self.line, self.col)

    def restore(self, saved: "Cursor") -> None:
        self.pos = saved.pos
        self.line = saved.line
        self.col = saved.col

    def error(self, msg: str) -> JSONParseError:
        """Builds a parse error located at this cursor."""
        return JSONParseError(msg, self.line, self.col, self.pos)
