"""
Parse failures and the process-wide last-error message.

The last-error string is shared, unsynchronized state: hosts that parse from
several threads must serialize their calls. The exception raised by a failed
parse carries its own location and does not depend on that state.
"""

from typing import TypeAlias

Position: TypeAlias = int

# Longest diagnostic kept in the last-error buffer, terminator included
ERROR_BUFFER_SIZE = 512

_last_error = ""


class JSONParseError(ValueError):
    """
    Reports a parse failure with its 1-based line and column.

    Covers both syntax errors and allocation exhaustion ("Out of memory").
    The string form is "<line>:<col>: <message>".
    """

    def __init__(
        self, msg: str, lineno: int = 1, colno: int = 1, pos: Position = 0
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.lineno = lineno
        self.colno = colno
        self.pos = pos

        super().__init__(f"{lineno}:{colno}: {msg}")


def error_message() -> str:
    """Returns the diagnostic of the most recent failed parse, or ""."""
    return _last_error


def reset_error() -> None:
    global _last_error
    _last_error = ""


def record_error(err: JSONParseError) -> None:
    """Stores the diagnostic for `err`, truncated to the buffer size."""
    global _last_error
    _last_error = str(err)[: ERROR_BUFFER_SIZE - 1]
