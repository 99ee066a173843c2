"""Per-fragment rendering with local failure recovery."""
from __future__ import annotations

from typing import Optional

from core.config import settings
from core.logger import logger
from services.render.engine import Latex2MathMLRenderer, MathRenderer, OutputFormat, RenderOptions
from utils.html_utils import escape_attribute, escape_html


class RendererAdapter:
    """
    Wrap a ``MathRenderer`` so one bad fragment never aborts a document.

    The renderer is configured non-throwing; anything it still raises (or a
    missing renderer) becomes a visible ``math-error`` span whose title holds
    the failure message.
    """

    def __init__(
        self,
        renderer: Optional[MathRenderer],
        error_color: str = "#cc0000",
        strict: bool = False,
        trust: bool = True,
    ) -> None:
        self.renderer = renderer
        self.error_color = error_color
        self.strict = strict
        self.trust = trust

    @classmethod
    def from_settings(cls, renderer: Optional[MathRenderer] = None) -> "RendererAdapter":
        return cls(
            renderer or Latex2MathMLRenderer(),
            error_color=settings.error_color,
            strict=settings.strict,
            trust=settings.trust,
        )

    def render(self, source: str, display_mode: bool, target_format: OutputFormat) -> str:
        options = RenderOptions(
            display_mode=display_mode,
            error_color=self.error_color,
            strict=self.strict,
            trust=self.trust,
            output_format=target_format,
        )
        try:
            if self.renderer is None:
                raise RuntimeError("Math renderer is not available")
            return self.renderer.render(source, options)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Rendering failed (%s) for: %s", exc, source[:200])
            return self.error_span(source, str(exc))

    def error_span(self, source: str, message: str) -> str:
        return (
            f'<span class="math-error" title="{escape_attribute(message)}" '
            f'style="color:{escape_attribute(self.error_color)}">{escape_html(source)}</span>'
        )
