"""
Strict JSON parsing into an owned tree of typed values.

Parses a byte buffer into `Value` nodes for embedding in a host application:
no serialization, no leniency. Leading zeros, raw control characters in
strings and trailing garbage are rejected, and every failure is reported
with a 1-based line and column.
"""

import logging
from dataclasses import dataclass
from typing import Any
from typing import TypeAlias
from typing import cast

from . import _profiling
from ._cursor import Cursor
from ._errors import JSONParseError
from ._errors import error_message
from ._errors import record_error
from ._errors import reset_error
from ._grammar import JsonGrammar
from ._grammar import Mode
from ._mapping import KeyValueMap
from ._memory import AllocationError
from ._memory import AllocationStats
from ._memory import Allocator
from ._profiling import HotPathStats
from ._profiling import clear_hot_path_stats
from ._profiling import get_hot_path_stats
from ._profiling import log_hot_path_stats
from ._values import TreeBuilder
from ._values import Value
from ._values import ValueKind
from ._values import free
from ._values import lookup

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

Buffer: TypeAlias = bytes | bytearray | memoryview


# Arrays and objects nested deeper than this fail with "Nesting too deep"
DEFAULT_MAX_DEPTH = 100


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures a parse call with immutable settings.

    `allocator` charges every node of the resulting tree; when omitted each
    parse gets a fresh, unbounded allocator. `max_depth` caps how deeply
    arrays and objects may nest; None leaves only the interpreter's
    recursion limit, which is reported the same way.
    """

    allocator: Allocator | None = None
    max_depth: int | None = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.allocator is not None and not isinstance(
            self.allocator, Allocator
        ):
            raise TypeError("allocator must be an Allocator")
        if self.max_depth is not None and (
            not isinstance(self.max_depth, int) or self.max_depth <= 0
        ):
            raise ValueError("max_depth must be a positive integer")


def _input_bytes(data: Buffer, length: int | None) -> bytes:
    if not isinstance(data, bytes | bytearray | memoryview):
        raise TypeError(
            f"the JSON document must be bytes, not {type(data).__name__}"
        )
    if length is not None:
        if not isinstance(length, int) or length < 0:
            raise ValueError("length must be a non-negative integer")
        data = data[:length]
    return bytes(data)


def _parse(data: bytes, config: ParseConfig) -> Value:
    allocator = config.allocator
    if allocator is None:
        allocator = Allocator()
    cursor = Cursor.over(data)
    grammar = JsonGrammar(TreeBuilder(allocator), config.max_depth)

    with _profiling.ProfileContext("parse", len(data)):
        try:
            result = cast(Value, grammar.value(cursor, Mode.MATERIALIZE))
        except RecursionError as e:
            # The rules have unwound and freed their nodes by now
            raise cursor.error("Nesting too deep") from e
        if not cursor.at_end():
            free(result)
            raise cursor.error("Extra garbage after value")
    return result


def parse(data: Buffer, length: int | None = None, **kwargs: Any) -> Value:
    """
    Parses a JSON document into a tree owned by the caller.

    Only the first `length` bytes are read when `length` is given. Raises
    JSONParseError on malformed input or allocation exhaustion, having freed
    everything it built. The tree should be released with `free()`.
    """
    document = _input_bytes(data, length)
    config = ParseConfig(**kwargs)

    reset_error()
    try:
        return _parse(document, config)
    except JSONParseError as err:
        record_error(err)
        logger.debug("JSON parse failed: %s", err)
        raise


def try_parse(
    data: Buffer, length: int | None = None, **kwargs: Any
) -> Value | None:
    """
    Parses like `parse()`, returning None on failure.

    The diagnostic for a failure is available from `error_message()` until
    the next parse call.
    """
    try:
        return parse(data, length, **kwargs)
    except JSONParseError:
        return None


__all__ = [
    "AllocationError",
    "AllocationStats",
    "Allocator",
    "DEFAULT_MAX_DEPTH",
    "HotPathStats",
    "JSONParseError",
    "KeyValueMap",
    "ParseConfig",
    "Value",
    "ValueKind",
    "clear_hot_path_stats",
    "error_message",
    "free",
    "get_hot_path_stats",
    "log_hot_path_stats",
    "lookup",
    "parse",
    "try_parse",
]
