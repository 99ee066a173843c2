"""
Delimiter scanner for mixed HTML/MathML/LaTeX text.

Math regions are located in fixed priority order:

1. ``<math ...>...</math>`` blocks
2. ``$$...$$`` display blocks
3. ``$...$`` inline spans (character scan, escapes honoured)

Each region is replaced by a ``Placeholder`` token instead of a sentinel
character embedded in the text, so no input byte is reserved.  Later stages
see earlier placeholders as single opaque units.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Union

from core.logger import logger
from utils.html_utils import latex_from_mathml

MATHML_BLOCK_RE = re.compile(r"<math\b[^>]*>[\s\S]*?</math\s*>", re.IGNORECASE)


class PlaceholderKind(str, Enum):
    MATHML = "MATHML"
    DISPLAY = "DISPLAY"
    INLINE = "INLINE"


@dataclass(frozen=True)
class TextRun:
    text: str


@dataclass(frozen=True)
class Placeholder:
    kind: PlaceholderKind
    index: int

    def __str__(self) -> str:
        return f"{self.kind.value}_{self.index}"


Token = Union[TextRun, Placeholder]
# A unit is one character of text or one earlier placeholder
Unit = Union[str, Placeholder]


@dataclass
class ScanResult:
    tokens: List[Token] = field(default_factory=list)
    mathml_fragments: List[str] = field(default_factory=list)
    display_fragments: List[str] = field(default_factory=list)
    inline_fragments: List[str] = field(default_factory=list)

    def fragment_for(self, placeholder: Placeholder) -> str:
        table = {
            PlaceholderKind.MATHML: self.mathml_fragments,
            PlaceholderKind.DISPLAY: self.display_fragments,
            PlaceholderKind.INLINE: self.inline_fragments,
        }[placeholder.kind]
        return table[placeholder.index]


def scan(text: str) -> ScanResult:
    """Split ``text`` into text runs and math placeholders."""
    result = ScanResult()

    units = _extract_mathml(text, result.mathml_fragments)
    resolve = _nested_source_resolver(result)
    units = _extract_display(units, result.display_fragments, resolve)
    units = _extract_inline(units, result.inline_fragments, resolve)

    result.tokens = list(_to_tokens(units))
    logger.debug(
        "Scanned %d chars: %d MathML, %d display, %d inline",
        len(text),
        len(result.mathml_fragments),
        len(result.display_fragments),
        len(result.inline_fragments),
    )
    return result


# ---------------------------------------------------------
# Stage 1: <math> blocks
# ---------------------------------------------------------
def _extract_mathml(text: str, blocks: List[str]) -> List[Unit]:
    units: List[Unit] = []
    pos = 0
    for match in MATHML_BLOCK_RE.finditer(text):
        units.extend(text[pos:match.start()])
        blocks.append(match.group(0))
        units.append(Placeholder(PlaceholderKind.MATHML, len(blocks) - 1))
        pos = match.end()
    units.extend(text[pos:])
    return units


# ---------------------------------------------------------
# Stage 2: $$...$$ blocks
# ---------------------------------------------------------
def _extract_display(
    units: List[Unit], blocks: List[str], resolve: Callable[[Placeholder], str]
) -> List[Unit]:
    out: List[Unit] = []
    i = 0
    n = len(units)
    while i < n:
        if units[i] == "$" and i + 1 < n and units[i + 1] == "$":
            # At least one unit of content between the pairs
            close = _find_double_dollar(units, i + 3)
            if close is not None:
                blocks.append(_join(units[i + 2:close], resolve).strip())
                out.append(Placeholder(PlaceholderKind.DISPLAY, len(blocks) - 1))
                i = close + 2
                continue
        out.append(units[i])
        i += 1
    return out


def _find_double_dollar(units: List[Unit], start: int) -> int | None:
    for j in range(start, len(units) - 1):
        if units[j] == "$" and units[j + 1] == "$":
            return j
    return None


# ---------------------------------------------------------
# Stage 3: $...$ spans
# ---------------------------------------------------------
def _extract_inline(
    units: List[Unit], blocks: List[str], resolve: Callable[[Placeholder], str]
) -> List[Unit]:
    out: List[Unit] = []
    i = 0
    n = len(units)
    while i < n:
        if units[i] == "$" and not _is_escaped(units, i):
            close = _find_inline_close(units, i + 1)
            if close is not None:
                latex = _join(units[i + 1:close], resolve).strip()
                if latex:
                    blocks.append(latex)
                    out.append(Placeholder(PlaceholderKind.INLINE, len(blocks) - 1))
                else:
                    # "$ $" is not math; keep both dollars as written
                    out.extend(units[i:close + 1])
                i = close + 1
                continue
        out.append(units[i])
        i += 1
    return out


def _find_inline_close(units: List[Unit], start: int) -> int | None:
    for j in range(start, len(units)):
        if units[j] == "$" and not _is_escaped(units, j):
            return j
    return None


def _is_escaped(units: List[Unit], index: int) -> bool:
    return index > 0 and units[index - 1] == "\\"


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def _nested_source_resolver(result: ScanResult) -> Callable[[Placeholder], str]:
    """Substitute an enclosed placeholder back by its source, one level deep."""

    def resolve(placeholder: Placeholder) -> str:
        logger.debug("Placeholder %s nested inside another math region", placeholder)
        if placeholder.kind is PlaceholderKind.MATHML:
            return latex_from_mathml(result.mathml_fragments[placeholder.index])
        return result.fragment_for(placeholder)

    return resolve


def _join(units: Iterable[Unit], resolve: Callable[[Placeholder], str]) -> str:
    return "".join(u if isinstance(u, str) else resolve(u) for u in units)


def _to_tokens(units: Iterable[Unit]) -> Iterable[Token]:
    buffer: List[str] = []
    for unit in units:
        if isinstance(unit, str):
            buffer.append(unit)
            continue
        if buffer:
            yield TextRun("".join(buffer))
            buffer = []
        yield unit
    if buffer:
        yield TextRun("".join(buffer))
