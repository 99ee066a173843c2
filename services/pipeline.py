"""Entry point of the cleaning pipeline."""
from __future__ import annotations

from core.errors import EmptyInputError, NoContentError
from core.logger import logger
from services.strategies import CleaningStrategy, StrategyResult

MATH_HINT_MARKERS = ("<math", "$", "\\begin{")


def process_text(text: str, strategy: CleaningStrategy) -> StrategyResult:
    """
    Run ``strategy`` over one input string.

    Raises:
        EmptyInputError: the input is blank.
        NoContentError: processing left no readable text.
    """
    if not text or not text.strip():
        raise EmptyInputError()

    result = strategy.process(text.strip())
    if not result.plain_text.strip():
        raise NoContentError()

    logger.info("Processed %d chars with %s strategy", len(text), strategy.name)
    return result


def contains_math(text: str) -> bool:
    """Quick check used to hint that pasted content holds formulas."""
    return any(marker in text for marker in MATH_HINT_MARKERS)
