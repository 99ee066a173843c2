"""Build the preview and word-processor HTML from one segment list."""
from __future__ import annotations

import re
from typing import Iterable

from core.logger import logger
from services.render.adapter import RendererAdapter
from services.segments import MathSegment, Segment, TextSegment
from utils.html_utils import escape_attribute, escape_html

BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
# Single stars only, so **bold** is never read as italic
ITALIC_RE = re.compile(r"(?<!\*)\*(?!\*)(.+?)(?<!\*)\*(?!\*)")
BULLET_RE = re.compile(r"^([•\-●])[ \t]*", re.MULTILINE)


def format_text(text: str) -> str:
    """Markdown-like formatting for plain text segments."""
    html = escape_html(text.replace("\r\n", "\n"))
    html = BOLD_RE.sub(r"<strong>\1</strong>", html)
    html = ITALIC_RE.sub(r"<em>\1</em>", html)
    html = BULLET_RE.sub(r'<span class="bullet">\1</span> ', html)
    return html.replace("\n", "<br>\n")


def build_preview_html(segments: Iterable[Segment], adapter: RendererAdapter) -> str:
    parts = []
    for seg in segments:
        if isinstance(seg, TextSegment):
            parts.append(format_text(seg.content))
        else:
            parts.append(adapter.render(seg.fragment.source_latex, seg.fragment.display_mode, "html"))
    return "".join(parts)


def build_word_html(
    segments: Iterable[Segment],
    adapter: RendererAdapter,
    font_family: str = "Cambria,serif",
    font_size: str = "12pt",
) -> str:
    """Standalone HTML with native MathML, ready for a word processor."""
    segments = list(segments)
    parts = []
    for seg in segments:
        if isinstance(seg, TextSegment):
            parts.append(format_text(seg.content))
        elif seg.fragment.original_markup:
            parts.append(seg.fragment.original_markup)
        else:
            parts.append(adapter.render(seg.fragment.source_latex, seg.fragment.display_mode, "mathml"))

    reused = sum(1 for seg in segments if isinstance(seg, MathSegment) and seg.fragment.original_markup)
    if reused:
        logger.debug("Word HTML reuses %d original MathML block(s)", reused)

    style = escape_attribute(f"font-family:{font_family};font-size:{font_size};")
    return (
        '<html><head><meta charset="utf-8"></head>'
        f'<body style="{style}">{"".join(parts)}</body></html>'
    )
