"""Tests for strategies and the pipeline entry point."""
from __future__ import annotations

import pytest

from core.errors import EmptyInputError, NoContentError
from services.pipeline import contains_math, process_text
from services.render.adapter import RendererAdapter
from services.segments import MathSegment, PlainTextResult, ProcessingResult
from services.strategies import PlainTextStrategy, RichMathMLStrategy, get_strategy


@pytest.fixture
def rich(fake_adapter: RendererAdapter) -> RichMathMLStrategy:
    return RichMathMLStrategy(fake_adapter)


def test_rich_result_carries_both_outputs(rich: RichMathMLStrategy) -> None:
    result = process_text("  Let $x$ be *real*  ", rich)
    assert isinstance(result, ProcessingResult)
    assert result.preview_markup == "Let <html mode=inline>x</html> be <em>real</em>"
    assert "<mathml mode=inline>x</mathml>" in result.clipboard_markup
    assert result.plain_text == "Let x be *real*"
    assert isinstance(result.segments[1], MathSegment)


def test_each_call_is_independent(rich: RichMathMLStrategy) -> None:
    first = process_text("$a$", rich)
    second = process_text("$b$", rich)
    assert first.plain_text == "a"
    assert second.plain_text == "b"
    assert len(second.segments) == 1


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_input_is_rejected(rich: RichMathMLStrategy, text: str) -> None:
    with pytest.raises(EmptyInputError):
        process_text(text, rich)


def test_no_content_is_an_explicit_failure(rich: RichMathMLStrategy) -> None:
    with pytest.raises(NoContentError):
        process_text("<b></b>", PlainTextStrategy())
    with pytest.raises(NoContentError):
        process_text("<math></math>", rich)


def test_plain_strategy() -> None:
    result = process_text(r"Sum: $\frac{1}{2}$", PlainTextStrategy())
    assert result == PlainTextResult(plain_text="Sum: (1)/(2)")


def test_get_strategy_by_name(fake_renderer) -> None:
    rich = get_strategy("RICH", renderer=fake_renderer)
    assert isinstance(rich, RichMathMLStrategy)
    assert rich.adapter.renderer is fake_renderer
    assert isinstance(get_strategy("plain"), PlainTextStrategy)
    with pytest.raises(ValueError):
        get_strategy("fancy")


def test_rich_strategy_with_real_renderer() -> None:
    result = process_text("Energy $$E=mc^2$$", get_strategy("rich"))
    assert '<div class="math math-display"><math' in result.preview_markup
    assert result.clipboard_markup.startswith('<html><head><meta charset="utf-8"></head>')
    assert "<math" in result.clipboard_markup


def test_contains_math() -> None:
    assert contains_math("see <math><mi>x</mi></math>")
    assert contains_math("costs $5")
    assert contains_math(r"\begin{cases}")
    assert not contains_math("plain words")
