"""
Rendering of the generated Go source file.

The renderer reads a frozen RenderContext and streams the Go file into a
text stream. Map entries are written in sorted key order so the output is
byte-identical from one run to the next.
"""

import io
from typing import NamedTuple, TextIO

from .collector import OutputMapping, close_all
from .errors import TemplateError
from .formatters import LiteralMode, get_formatter

HEADER_TEMPLATE = """package {package}

// This file is generated. Do not edit directly.

// {map_name} stores binary files as {description} indexed by file paths.
var {map_name} = map[string]{go_type}{{"""

FOOTER = "\n}\n"

_SIMPLE_ESCAPES = {
    '\a': '\\a',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\v': '\\v',
    '"': '\\"',
    '\\': '\\\\',
}


class RenderContext(NamedTuple):
    """Everything the renderer needs; built once after collection."""
    package: str
    map_name: str
    mode: LiteralMode
    files: OutputMapping


def go_quote(s: str) -> str:
    """
    Quote s as a Go interpreted string literal.

    Follows strconv.Quote: printable characters are kept, the usual
    control characters get their short escapes, other control bytes use
    \\xhh and other non-printable code points use \\u or \\U. Surrogate
    escapes left by undecodable file names are written back as raw bytes.
    """
    out = ['"']
    for ch in s:
        code = ord(ch)
        if ch in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[ch])
        elif 0xDC80 <= code <= 0xDCFF:
            out.append(f'\\x{code - 0xDC00:02x}')
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x20 or code == 0x7F:
            out.append(f'\\x{code:02x}')
        elif code < 0x10000:
            out.append(f'\\u{code:04x}')
        else:
            out.append(f'\\U{code:08x}')
    out.append('"')
    return ''.join(out)


def _emit(out: TextIO, text: str) -> None:
    try:
        out.write(text)
    except (OSError, UnicodeEncodeError) as e:
        raise TemplateError(f"cannot write output: {e}") from e


def render(ctx: RenderContext, out: TextIO) -> None:
    """
    Write the generated Go file for ctx into out.

    Every input stream is closed once its literal is written, and all of
    them are closed if rendering stops early.

    Raises:
        TemplateError: if out cannot be written to
        OSError: if an input file cannot be read
    """
    mode = LiteralMode.from_config(ctx.mode)
    formatter = get_formatter(mode)
    try:
        _emit(out, HEADER_TEMPLATE.format(
            package=ctx.package,
            map_name=ctx.map_name,
            description=mode.description,
            go_type=mode.go_type,
        ))
        for key in sorted(ctx.files):
            entry = ctx.files[key]
            _emit(out, f"\n\t{go_quote(key)}: ")
            with entry.stream:
                for piece in formatter(entry.stream):
                    _emit(out, piece)
            _emit(out, ",")
        _emit(out, FOOTER)
    finally:
        close_all(ctx.files)


def render_to_string(ctx: RenderContext) -> str:
    """Render ctx and return the generated source as a string."""
    buf = io.StringIO()
    render(ctx, buf)
    return buf.getvalue()
