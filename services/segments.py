"""Segment model shared by the parser, assemblers and strategies."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class MathFragment:
    """Extracted math source plus how it should be rendered."""

    source_latex: str
    display_mode: bool
    # Raw <math>...</math> block when the fragment came from MathML
    original_markup: Optional[str] = None


@dataclass(frozen=True)
class TextSegment:
    content: str
    kind: Literal["text"] = field(default="text", init=False)


@dataclass(frozen=True)
class MathSegment:
    fragment: MathFragment
    kind: Literal["math"] = field(default="math", init=False)


Segment = Union[TextSegment, MathSegment]


@dataclass(frozen=True)
class ProcessingResult:
    """Output of the rich strategy for one input string."""

    preview_markup: str
    clipboard_markup: str
    segments: tuple[Segment, ...]
    plain_text: str


@dataclass(frozen=True)
class PlainTextResult:
    """Output of the plain-text strategy."""

    plain_text: str


def get_plain_text(segments: tuple[Segment, ...] | list[Segment]) -> str:
    """Join text verbatim and math by its source, in document order."""
    return "".join(
        seg.content if isinstance(seg, TextSegment) else seg.fragment.source_latex
        for seg in segments
    )


def segment_to_dict(segment: Segment) -> dict[str, object]:
    """JSON-friendly view of a segment."""
    if isinstance(segment, TextSegment):
        return {"type": "text", "content": segment.content}
    fragment = segment.fragment
    return {
        "type": "math",
        "latex": fragment.source_latex,
        "display_mode": fragment.display_mode,
        "original_mathml": fragment.original_markup,
    }
