"""HTML page assembly around rendered lines."""

from __future__ import annotations

import base64
import html
from datetime import datetime
from typing import Final, Iterable, Optional, TextIO

from .render import DEFAULT_TEXT_COLOR, RenderedLine

PROJECT_NAME: Final[str] = "fixedfile-highlighter"
PROJECT_URL: Final[str] = "https://github.com/lilopkins/fixedfile-highlighter"


def encode_syntax_file(raw: bytes) -> str:
    """Base64-encode ``raw`` with the standard alphabet and no padding."""

    return base64.b64encode(raw).decode("ascii").rstrip("=")


def document_header(title: str) -> str:
    escaped_title = html.escape(title, quote=True)
    return (
        "<!doctype html><html>\n"
        f'<head><meta charset="utf-8"><title>{escaped_title}</title></head>\n'
        "<body>\n"
    )


def document_footer() -> str:
    return "</body></html>\n"


def analysis_footer(syntax_bytes: bytes, generated_at: Optional[datetime] = None) -> str:
    """Return the attribution line that embeds the syntax file as a data URI."""

    timestamp = generated_at if generated_at is not None else datetime.now().astimezone()
    return (
        f"Analysed at {html.escape(str(timestamp))} by "
        f'<a href="{PROJECT_URL}" target="_blank" rel="noopener">{PROJECT_NAME}</a> using '
        f'<a href="data:text/csv;base64,{encode_syntax_file(syntax_bytes)}">this syntax file</a>.\n'
    )


def write_document(
    stream: TextIO,
    lines: Iterable[RenderedLine],
    *,
    syntax_bytes: bytes,
    title: str,
    snippet: bool = False,
    text_color: str = DEFAULT_TEXT_COLOR,
    generated_at: Optional[datetime] = None,
) -> int:
    """
    Stream the HTML document for ``lines`` to ``stream``.

    The header is written before ``lines`` is consumed and every rendered line is
    written as soon as it is produced, so a lazy iterable keeps memory bounded.

    Parameters:
        stream: Text stream receiving the markup.
        lines: Rendered lines in input order.
        syntax_bytes: Raw syntax-file contents embedded in the footer.
        title: Document title (ignored for snippets).
        snippet: Emit only the ``<pre>`` block and the attribution footer.
        text_color: Foreground colour for highlighted spans.
        generated_at: Timestamp shown in the footer; defaults to now.

    Returns:
        int: Number of lines written.
    """

    if not snippet:
        stream.write(document_header(title))
    stream.write("<pre>\n")
    count = 0
    for rendered in lines:
        stream.write(rendered.to_html(text_color))
        stream.write("\n")
        count += 1
    stream.write("</pre>\n")
    stream.write(analysis_footer(syntax_bytes, generated_at))
    if not snippet:
        stream.write(document_footer())
    return count
