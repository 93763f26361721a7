"""Render an alignment between two texts as HTML or plain-text markup."""

from __future__ import annotations

import html
from typing import Optional

from .alignment import DELETE, INSERT, Alignment, align
from .tokenize import MODE_WORD, tokenize

DEFAULT_DELETE_STYLE = "background-color: #fecaca;"
DEFAULT_INSERT_STYLE = "background-color: #bfdbfe;"

FORMAT_HTML = "html"
FORMAT_TEXT = "text"


def render_html(
    alignment: Alignment,
    *,
    delete_style: str = DEFAULT_DELETE_STYLE,
    insert_style: str = DEFAULT_INSERT_STYLE,
) -> str:
    """
    Render ``alignment`` as HTML, wrapping deleted and inserted runs in styled spans.
    """

    parts = []
    for op in alignment:
        text = html.escape(op.joined(), quote=False)
        if op.kind == DELETE:
            parts.append(f'<span class="diff-delete" style="{html.escape(delete_style)}">{text}</span>')
        elif op.kind == INSERT:
            parts.append(f'<span class="diff-insert" style="{html.escape(insert_style)}">{text}</span>')
        else:
            parts.append(text)
    return "".join(parts)


def render_text(alignment: Alignment) -> str:
    """
    Render ``alignment`` in word-diff style: ``[-deleted-]`` and ``{+inserted+}``.
    """

    parts = []
    for op in alignment:
        text = op.joined()
        if op.kind == DELETE:
            parts.append(f"[-{text}-]")
        elif op.kind == INSERT:
            parts.append(f"{{+{text}+}}")
        else:
            parts.append(text)
    return "".join(parts)


def compute_diff_markup(
    reference: str,
    hypothesis: str,
    mode: str = MODE_WORD,
    *,
    output_format: str = FORMAT_HTML,
    delete_style: Optional[str] = None,
    insert_style: Optional[str] = None,
) -> str:
    """
    Diff ``hypothesis`` against ``reference`` at ``mode`` granularity and render it.

    Word mode keeps whitespace runs as their own tokens, so the rendered
    output preserves the hypothesis layout.
    """

    alignment = align(tokenize(reference, mode), tokenize(hypothesis, mode))
    if output_format == FORMAT_TEXT:
        return render_text(alignment)
    if output_format != FORMAT_HTML:
        raise ValueError(f"Unsupported markup format: {output_format!r}")
    return render_html(
        alignment,
        delete_style=delete_style or DEFAULT_DELETE_STYLE,
        insert_style=insert_style or DEFAULT_INSERT_STYLE,
    )


__all__ = [
    "DEFAULT_DELETE_STYLE",
    "DEFAULT_INSERT_STYLE",
    "FORMAT_HTML",
    "FORMAT_TEXT",
    "compute_diff_markup",
    "render_html",
    "render_text",
]
