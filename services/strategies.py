"""Cleaning strategies selected by configuration."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Union

from core.config import settings
from services.assemblers import build_preview_html, build_word_html
from services.parsing.segment_builder import parse_segments
from services.plain_text import process_plain_text
from services.render.adapter import RendererAdapter
from services.render.engine import MathRenderer
from services.segments import PlainTextResult, ProcessingResult, get_plain_text

StrategyResult = Union[ProcessingResult, PlainTextResult]


class CleaningStrategy(ABC):
    """Turn one input string into a result; no state survives the call."""

    name: str = ""

    @abstractmethod
    def process(self, text: str) -> StrategyResult:
        raise NotImplementedError


class RichMathMLStrategy(CleaningStrategy):
    """Render math for preview and build word-processor HTML with MathML."""

    name = "rich"

    def __init__(
        self,
        adapter: RendererAdapter,
        font_family: str = "Cambria,serif",
        font_size: str = "12pt",
    ) -> None:
        self.adapter = adapter
        self.font_family = font_family
        self.font_size = font_size

    def process(self, text: str) -> ProcessingResult:
        segments = tuple(parse_segments(text))
        return ProcessingResult(
            preview_markup=build_preview_html(segments, self.adapter),
            clipboard_markup=build_word_html(
                segments,
                self.adapter,
                font_family=self.font_family,
                font_size=self.font_size,
            ),
            segments=segments,
            plain_text=get_plain_text(segments),
        )


class PlainTextStrategy(CleaningStrategy):
    """Strip markup and downgrade LaTeX to readable text."""

    name = "plain"

    def process(self, text: str) -> PlainTextResult:
        return PlainTextResult(plain_text=process_plain_text(text))


def get_strategy(name: Optional[str] = None, renderer: Optional[MathRenderer] = None) -> CleaningStrategy:
    """Build the strategy named ``name`` (defaults to ``settings.strategy``)."""
    name = (name or settings.strategy).strip().lower()
    if name == RichMathMLStrategy.name:
        return RichMathMLStrategy(
            RendererAdapter.from_settings(renderer),
            font_family=settings.word_font_family,
            font_size=settings.word_font_size,
        )
    if name == PlainTextStrategy.name:
        return PlainTextStrategy()
    raise ValueError(f"Unknown cleaning strategy: {name!r}")
