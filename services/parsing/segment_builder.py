"""Turn a scanned token stream into ordered text/math segments."""
from __future__ import annotations

from typing import List

from core.logger import logger
from services.parsing.delimiter_scanner import (
    Placeholder,
    PlaceholderKind,
    ScanResult,
    TextRun,
    scan,
)
from services.parsing.display_mode import should_be_display_mode
from services.segments import MathFragment, MathSegment, Segment, TextSegment
from utils.html_utils import latex_from_mathml
from utils.mathml_validator import validate_mathml


def build_segments(scanned: ScanResult) -> List[Segment]:
    """Resolve every placeholder back to its fragment, keeping document order."""
    segments: List[Segment] = []
    for token in scanned.tokens:
        if isinstance(token, TextRun):
            # Whitespace is significant for formatting, never trim
            if token.text:
                segments.append(TextSegment(token.text))
            continue
        segments.append(MathSegment(_fragment_for(token, scanned)))
    return segments


def parse_segments(text: str) -> List[Segment]:
    """Scan ``text`` and build its segment list."""
    return build_segments(scan(text))


def _fragment_for(placeholder: Placeholder, scanned: ScanResult) -> MathFragment:
    raw = scanned.fragment_for(placeholder)

    if placeholder.kind is PlaceholderKind.MATHML:
        is_valid, issues = validate_mathml(raw)
        if not is_valid:
            # Kept verbatim anyway; the TeX source is best effort
            logger.warning("MathML block %d is not well-formed: %s", placeholder.index, "; ".join(issues))
        return MathFragment(
            source_latex=latex_from_mathml(raw),
            display_mode=True,
            original_markup=raw,
        )

    if placeholder.kind is PlaceholderKind.DISPLAY:
        return MathFragment(source_latex=raw, display_mode=True)

    return MathFragment(source_latex=raw, display_mode=should_be_display_mode(raw))
