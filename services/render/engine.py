"""
LaTeX → MathML typesetting capability.

- Uses latex2mathml for the actual conversion
- Normalizes environments the library does not know (equation, aligned, gather)
- Non-throwing by default: malformed input renders as an inline error span
- ``strict`` rejects output that still carries literal LaTeX commands
- ``trust=False`` rejects commands that embed links or external resources
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Protocol

from latex2mathml.converter import convert as latex2mathml_convert

from core.logger import logger
from utils.html_utils import escape_attribute, escape_html

MATHML_NS = "http://www.w3.org/1998/Math/MathML"

OutputFormat = Literal["html", "mathml"]


@dataclass(frozen=True)
class RenderOptions:
    display_mode: bool = False
    error_color: str = "#cc0000"
    strict: bool = False
    trust: bool = True
    output_format: OutputFormat = "html"
    throw_on_error: bool = False


class RenderError(ValueError):
    """Raised for malformed source when ``throw_on_error`` is set."""


class MathRenderer(Protocol):
    def render(self, source: str, options: RenderOptions) -> str:
        ...


class Latex2MathMLRenderer:
    """Render LaTeX math to MathML, or to HTML wrapping that MathML."""

    UNTRUSTED_COMMANDS_RE = re.compile(r"\\(href|url|includegraphics|html[A-Za-z]*)\b")
    LITERAL_COMMAND_RE = re.compile(r"<(mi|mo|mtext)\b[^>]*>\s*(\\[A-Za-z]+)")

    def render(self, source: str, options: RenderOptions) -> str:
        try:
            mathml = self.to_mathml(source, options)
        except Exception as exc:  # noqa: BLE001
            message = f"{type(exc).__name__}: {exc}"
            if options.throw_on_error:
                raise RenderError(message) from exc
            logger.debug("LaTeX→MathML failed: %s | Input: %s", message, source[:200])
            return self._error_markup(source, message, options.error_color)

        if options.output_format == "mathml":
            return mathml
        if options.display_mode:
            return f'<div class="math math-display">{mathml}</div>'
        return f'<span class="math math-inline">{mathml}</span>'

    def to_mathml(self, source: str, options: RenderOptions) -> str:
        display = "block" if options.display_mode else "inline"
        latex = self._normalize_environments(source.strip())
        if not latex:
            return f'<math xmlns="{MATHML_NS}" display="{display}"></math>'

        if not options.trust:
            untrusted = self.UNTRUSTED_COMMANDS_RE.search(latex)
            if untrusted:
                raise ValueError(f"Untrusted command \\{untrusted.group(1)} is disabled")

        mathml = latex2mathml_convert(latex, display=display)
        mathml = self._ensure_namespace(mathml)

        if options.strict:
            literal = self.LITERAL_COMMAND_RE.search(mathml)
            if literal:
                raise ValueError(f"Unsupported command {literal.group(2)}")
        return mathml

    # ---------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------
    def _normalize_environments(self, latex: str) -> str:
        """Map block environments onto ones latex2mathml understands."""
        # Already rendered as a block; the wrapper adds nothing
        latex = re.sub(r"\\(begin|end)\{equation\*?\}", "", latex)
        # latex2mathml builds an mtable for align/align* but not for aligned
        latex = re.sub(r"\\(begin|end)\{aligned\}", r"\\\1{align*}", latex)
        latex = re.sub(r"\\(begin|end)\{gather\*?\}", r"\\\1{matrix}", latex)
        return latex.strip()

    def _ensure_namespace(self, mathml: str) -> str:
        """Ensure MathML output contains proper namespace."""
        if "<math" not in mathml:
            return f'<math xmlns="{MATHML_NS}">{mathml}</math>'
        if "xmlns=" not in mathml.split(">", 1)[0]:
            mathml = mathml.replace("<math", f'<math xmlns="{MATHML_NS}"', 1)
        return mathml

    def _error_markup(self, source: str, message: str, color: str) -> str:
        return (
            f'<span class="math-error" title="{escape_attribute(message)}" '
            f'style="color:{escape_attribute(color)}">{escape_html(source)}</span>'
        )
