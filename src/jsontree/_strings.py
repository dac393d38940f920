"""
Sizing and decoding of quoted JSON strings.

Decoding happens in two steps. `string_size` walks the string without
writing anything and returns the exact number of output bytes; the caller
allocates that many bytes plus a terminator, then `copy_string` walks the
same span again and fills the buffer from the left.

Each `\\uXXXX` escape is UTF-8 encoded on its own: surrogate pairs are not
recombined, so `\\ud83d\\ude00` yields two 3-byte sequences.
"""

from . import _profiling
from ._cursor import Cursor

QUOTE = 0x22
BACKSLASH = 0x5C
NEWLINE = 0x0A
FIRST_PRINTABLE = 0x20

# Single-character escapes and the byte each one decodes to
SIMPLE_ESCAPES = {
    ord('"'): ord('"'),
    ord("\\"): ord("\\"),
    ord("/"): ord("/"),
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("n"): 0x0A,
    ord("r"): 0x0D,
    ord("t"): 0x09,
}

UNICODE_ESCAPE = ord("u")


def utf8_length(code_point: int) -> int:
    """Bytes needed to encode a BMP code point, surrogates included."""
    if code_point < 0x80:
        return 1
    elif code_point < 0x800:
        return 2
    return 3


def _hex_decode(cursor: Cursor) -> int:
    """Consumes four hex digits and returns their value."""
    result = 0
    for _ in range(4):
        c = cursor.advance()
        if 0x30 <= c <= 0x39:
            hexit = c - 0x30
        elif 0x41 <= c <= 0x46:
            hexit = c - 0x41 + 10
        elif 0x61 <= c <= 0x66:
            hexit = c - 0x61 + 10
        else:
            raise cursor.error("Expected hex digit")
        result = result * 16 + hexit
    return result


def string_size(cursor: Cursor, consume: bool) -> int:
    """
    Validates the string at `cursor` and returns its decoded byte length.

    The walk runs on a snapshot; the caller's cursor moves past the closing
    quote only when `consume` is true.
    """
    with _profiling.ProfileContext("string_size"):
        ctx = cursor.snapshot()
        if ctx.advance() != QUOTE:
            raise ctx.error("Expected string")

        result = 0
        while True:
            c = ctx.advance()
            if c == NEWLINE or (c == 0 and ctx.at_end()):
                raise cursor.error("Unterminated string constant")
            if c < FIRST_PRINTABLE:
                raise ctx.error("Illegal string character")
            if c == QUOTE:
                if consume:
                    cursor.restore(ctx)
                return result
            elif c == BACKSLASH:
                c = ctx.advance()
                if c < FIRST_PRINTABLE:
                    raise cursor.error("Unterminated string constant")
                if c == UNICODE_ESCAPE:
                    code_point = _hex_decode(ctx)
                    if code_point == 0:
                        raise ctx.error("NULL character in string")
                    result += utf8_length(code_point)
                elif c in SIMPLE_ESCAPES:
                    result += 1
                else:
                    raise ctx.error(f"Illegal string escape '{chr(c)}'")
            else:
                result += 1


def copy_string(buffer: bytearray, cursor: Cursor) -> None:
    """
    Decodes the string at `cursor` into `buffer` and consumes it.

    `buffer` must come from a prior `string_size` call on the same cursor:
    decoding writes the first `size` bytes left to right and leaves the
    terminator at `buffer[size]` untouched.
    """
    with _profiling.ProfileContext("copy_string"):
        cursor.advance()
        i = 0
        while True:
            c = cursor.advance()
            if c == QUOTE:
                return
            elif c == BACKSLASH:
                c = cursor.advance()
                if c == UNICODE_ESCAPE:
                    ch = _hex_decode(cursor)
                    if ch < 0x80:
                        buffer[i] = ch
                        i += 1
                    elif ch < 0x800:
                        buffer[i] = 0xC0 | (ch >> 6)
                        buffer[i + 1] = 0x80 | (ch & 0x3F)
                        i += 2
                    else:
                        buffer[i] = 0xE0 | (ch >> 12)
                        buffer[i + 1] = 0x80 | ((ch >> 6) & 0x3F)
                        buffer[i + 2] = 0x80 | (ch & 0x3F)
                        i += 3
                elif c in SIMPLE_ESCAPES:
                    buffer[i] = SIMPLE_ESCAPES[c]
                    i += 1
                else:
                    raise cursor.error(f"Illegal string escape '{chr(c)}'")
            else:
                buffer[i] = c
                i += 1
