"""HTML/MathML text helpers shared by the parser and the assemblers."""
from __future__ import annotations

import html
import re

TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")

TEX_ANNOTATION_RE = re.compile(
    r"<annotation\b[^>]*encoding=[\"']application/x-tex[\"'][^>]*>([\s\S]*?)</annotation\s*>",
    re.IGNORECASE,
)
# Any annotation payload; it must not leak into the stripped text
ANNOTATION_RE = re.compile(
    r"<annotation(?:-xml)?\b[^>]*>[\s\S]*?</annotation(?:-xml)?\s*>",
    re.IGNORECASE,
)


def escape_html(text: str) -> str:
    """Escape text for element content (quotes left alone)."""
    return html.escape(text, quote=False)


def escape_attribute(text: str) -> str:
    """Escape text for a double-quoted attribute value."""
    return html.escape(text, quote=True)


def strip_tags(markup: str) -> str:
    """Remove tags, decode entities and collapse whitespace."""
    text = TAG_RE.sub("", markup)
    text = html.unescape(text)
    return WHITESPACE_RE.sub(" ", text).strip()


def extract_tex_annotation(mathml: str) -> str | None:
    """Return the TeX source carried by an annotation element, if any."""
    match = TEX_ANNOTATION_RE.search(mathml)
    if match is None:
        return None
    return html.unescape(match.group(1)).strip()


def latex_from_mathml(mathml: str) -> str:
    """
    Best-effort source text for a MathML block.

    Prefers the embedded TeX annotation; otherwise downgrades the
    presentation markup to its text content.
    """
    tex = extract_tex_annotation(mathml)
    if tex is not None:
        return tex
    return strip_tags(ANNOTATION_RE.sub("", mathml))
