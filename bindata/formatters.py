"""
Literal formatters for embedded file data.

Both formatters consume a binary stream forward only, in buffered chunks,
and yield the Go literal text piece by piece so that large files never
have to be held in memory as one string.

Byte slice layout (12 bytes per line):

    []byte{
            0x70, 0x61, 0x63, 0x6b, 0x61, 0x67, 0x65, 0x20, 0x6d, 0x61, 0x69, 0x6e,
            0x0a,
        }

String layout (16 bytes per chunk):

    "" +
            "\\x70\\x61\\x63\\x6b\\x61\\x67\\x65\\x20\\x6d\\x61\\x69\\x6e\\x0a\\x0a\\x69\\x6d" +
            "\\x70"
"""

import io
from enum import Enum
from typing import BinaryIO, Callable, Iterator

BYTES_PER_LINE = 12
BYTES_PER_CHUNK = 16
READ_SIZE = io.DEFAULT_BUFFER_SIZE

# Newline plus two levels of indentation, the entry body inside the map
LINE_INDENT = '\n\t\t'

_BYTE_LITERALS = [f'0x{b:02x},' for b in range(256)]
_BYTE_ESCAPES = [f'\\x{b:02x}' for b in range(256)]


class LiteralMode(Enum):
    """How file contents are written into the generated map."""
    BYTES = "bytes"  # []byte{...}
    STRING = "string"  # "\x.." + "\x.."

    @classmethod
    def from_config(cls, value):
        """
        Parse a literal mode from a config or CLI value.

        Args:
            value: bool (True means strings) or one of the mode names

        Returns:
            LiteralMode enum value
        """
        if isinstance(value, cls):
            return value
        if value is True or value in ("string", "strings"):
            return cls.STRING
        if value is False or value is None or value in ("bytes", "byte"):
            return cls.BYTES
        raise ValueError(f"Unknown literal mode: {value!r}")

    @property
    def go_type(self) -> str:
        return 'string' if self is LiteralMode.STRING else '[]byte'

    @property
    def description(self) -> str:
        return 'strings' if self is LiteralMode.STRING else 'byte slices'


def _read_chunks(source: BinaryIO) -> Iterator[bytes]:
    while True:
        chunk = source.read(READ_SIZE)
        if not chunk:
            return
        yield chunk


def iter_bytes_literal(source: BinaryIO) -> Iterator[str]:
    """Yield a []byte literal for the remaining contents of source."""
    yield '[]byte{'
    count = 0
    for chunk in _read_chunks(source):
        parts = []
        for b in chunk:
            parts.append(LINE_INDENT if count % BYTES_PER_LINE == 0 else ' ')
            parts.append(_BYTE_LITERALS[b])
            count += 1
        yield ''.join(parts)
    yield '\n\t}'


def iter_string_literal(source: BinaryIO) -> Iterator[str]:
    """Yield a concatenated string literal for the remaining contents of source."""
    yield '"'
    count = 0
    for chunk in _read_chunks(source):
        parts = []
        for b in chunk:
            if count % BYTES_PER_CHUNK == 0:
                parts.append('" +' + LINE_INDENT + '"')
            parts.append(_BYTE_ESCAPES[b])
            count += 1
        yield ''.join(parts)
    yield '"'


def format_bytes(source: BinaryIO) -> str:
    """Render the stream as a Go byte slice literal."""
    return ''.join(iter_bytes_literal(source))


def format_string(source: BinaryIO) -> str:
    """Render the stream as a Go string literal."""
    return ''.join(iter_string_literal(source))


_FORMATTERS = {
    LiteralMode.BYTES: iter_bytes_literal,
    LiteralMode.STRING: iter_string_literal,
}


def get_formatter(mode: LiteralMode) -> Callable[[BinaryIO], Iterator[str]]:
    """Return the streaming formatter for the given mode."""
    return _FORMATTERS[LiteralMode.from_config(mode)]
