"""
Best-effort downgrade of mixed math text to plain text.

Math regions are located with the same scanner as the rich path; their
LaTeX is then read by a small tokenizer over known control sequences:
fractions, roots, text-style wrappers, environments, Greek letters and
common operators.  Unknown commands collapse to a space.
"""
from __future__ import annotations

import html
import re
from typing import List, Tuple

from core.logger import logger
from services.parsing.segment_builder import parse_segments
from services.segments import TextSegment

TOKEN_RE = re.compile(r"\\[A-Za-z]+\*?|\\\\|\\.|.", re.DOTALL)

GREEK = {
    "alpha": "α", "beta": "β", "gamma": "γ", "delta": "δ", "epsilon": "ε",
    "varepsilon": "ε", "zeta": "ζ", "eta": "η", "theta": "θ", "vartheta": "ϑ",
    "iota": "ι", "kappa": "κ", "lambda": "λ", "mu": "μ", "nu": "ν", "xi": "ξ",
    "pi": "π", "rho": "ρ", "sigma": "σ", "tau": "τ", "upsilon": "υ",
    "phi": "φ", "varphi": "φ", "chi": "χ", "psi": "ψ", "omega": "ω",
    "Gamma": "Γ", "Delta": "Δ", "Theta": "Θ", "Lambda": "Λ", "Xi": "Ξ",
    "Pi": "Π", "Sigma": "Σ", "Upsilon": "Υ", "Phi": "Φ", "Psi": "Ψ", "Omega": "Ω",
}
SYMBOLS = {
    "le": "≤", "leq": "≤", "ge": "≥", "geq": "≥", "neq": "≠", "ne": "≠",
    "approx": "≈", "sim": "∼", "equiv": "≡", "propto": "∝",
    "in": "∈", "notin": "∉", "subset": "⊂", "subseteq": "⊆", "supset": "⊃",
    "cup": "∪", "cap": "∩", "forall": "∀", "exists": "∃",
    "to": "→", "rightarrow": "→", "leftarrow": "←", "Rightarrow": "⇒",
    "Leftarrow": "⇐", "iff": "⇔", "implies": "⇒", "mapsto": "↦",
    "cdot": "·", "times": "×", "div": "÷", "pm": "±", "mp": "∓",
    "sum": "∑", "prod": "∏", "int": "∫", "oint": "∮", "nabla": "∇",
    "partial": "∂", "infty": "∞", "ldots": "…", "cdots": "⋯", "dots": "…",
    "langle": "⟨", "rangle": "⟩", "mid": "|", "vert": "|", "lvert": "|",
    "rvert": "|", "Vert": "‖", "degree": "°", "circ": "∘",
}
# Functions written upright in math; keep the name
FUNCTION_NAMES = {"sin", "cos", "tan", "cot", "sec", "csc", "log", "ln", "exp", "lim", "max", "min", "det", "gcd"}
TEXT_WRAPPERS = {
    "text", "textrm", "textbf", "textit", "mathrm", "mathbf", "mathit",
    "mathsf", "mathtt", "mathbb", "mathcal", "operatorname", "mbox",
    "boldsymbol", "displaystyle",
}
FRACTIONS = {"frac", "dfrac", "tfrac", "cfrac"}
ESCAPED_CHARS = {
    "\\{": "{", "\\}": "}", "\\$": "$", "\\%": "%", "\\&": "&", "\\_": "_",
    "\\#": "#", "\\,": " ", "\\;": " ", "\\:": " ", "\\ ": " ", "\\!": "",
    "\\|": "‖",
}
# Environments whose second argument is a column specification
COLUMN_SPEC_ENVS = {"array", "tabular"}


def latex_to_plain(latex: str) -> str:
    """Downgrade one LaTeX fragment to readable text."""
    tokens = TOKEN_RE.findall(latex)
    try:
        text, _ = _read_sequence(tokens, 0, in_group=False)
    except RecursionError:
        logger.warning("LaTeX nested too deeply (%d chars), flattening it", len(latex))
        return _flatten(tokens)
    return text


def process_plain_text(text: str) -> str:
    """Plain-text rendering of a mixed HTML/MathML/LaTeX document."""
    parts: List[str] = []
    for seg in parse_segments(text):
        if isinstance(seg, TextSegment):
            parts.append(_html_to_text(seg.content))
        else:
            parts.append(latex_to_plain(seg.fragment.source_latex))
    result = _normalize_whitespace("".join(parts))
    logger.debug("Plain-text downgrade produced %d chars", len(result))
    return result


# ---------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------
def _read_sequence(tokens: List[str], i: int, in_group: bool) -> Tuple[str, int]:
    out: List[str] = []
    n = len(tokens)
    while i < n:
        tok = tokens[i]
        if tok == "}":
            if in_group:
                return "".join(out), i + 1
            i += 1
            continue
        if tok == "{":
            group, i = _read_sequence(tokens, i + 1, in_group=True)
            out.append(group)
            continue
        if tok == "\\\\":
            out.append("\n")
            i += 1
            continue
        if tok == "&":
            out.append(" ")
            i += 1
            continue
        if tok.startswith("\\"):
            text, i = _read_command(tokens, i)
            out.append(text)
            continue
        out.append(tok)
        i += 1
    return "".join(out), i


def _read_command(tokens: List[str], i: int) -> Tuple[str, int]:
    tok = tokens[i]
    if tok in ESCAPED_CHARS:
        return ESCAPED_CHARS[tok], i + 1

    name = tok[1:].rstrip("*")
    i += 1

    if name in ("begin", "end"):
        env, i = _read_argument(tokens, i)
        if name == "begin" and env.strip() in COLUMN_SPEC_ENVS:
            _, i = _read_argument(tokens, i)
        return "", i
    if name in FRACTIONS:
        numerator, i = _read_argument(tokens, i)
        denominator, i = _read_argument(tokens, i)
        return f"({numerator})/({denominator})", i
    if name == "sqrt":
        index, i = _read_optional(tokens, i)
        radicand, i = _read_argument(tokens, i)
        return (f"{index}√({radicand})" if index else f"√({radicand})"), i
    if name in TEXT_WRAPPERS:
        if name == "displaystyle":
            return "", i
        return _read_argument(tokens, i)
    if name in ("left", "right", "big", "Big", "bigg", "Bigg"):
        # Keep the delimiter that follows, except the invisible "."
        if i < len(tokens) and tokens[i] == ".":
            i += 1
        return "", i
    if name in GREEK:
        return GREEK[name], i
    if name in SYMBOLS:
        return SYMBOLS[name], i
    if name in FUNCTION_NAMES:
        return name, i
    return " ", i


def _read_argument(tokens: List[str], i: int) -> Tuple[str, int]:
    """One brace group, or the next single token."""
    n = len(tokens)
    while i < n and tokens[i].isspace():
        i += 1
    if i >= n:
        return "", i
    if tokens[i] == "{":
        return _read_sequence(tokens, i + 1, in_group=True)
    if tokens[i].startswith("\\") and tokens[i] != "\\\\":
        return _read_command(tokens, i)
    return tokens[i], i + 1


def _flatten(tokens: List[str]) -> str:
    """Structure-free reading: drop braces, map known symbols, blank the rest."""
    out: List[str] = []
    for tok in tokens:
        if tok in ("{", "}"):
            continue
        if tok == "\\\\":
            out.append("\n")
        elif tok == "&":
            out.append(" ")
        elif tok in ESCAPED_CHARS:
            out.append(ESCAPED_CHARS[tok])
        elif tok.startswith("\\"):
            name = tok[1:].rstrip("*")
            out.append(GREEK.get(name) or SYMBOLS.get(name) or (name if name in FUNCTION_NAMES else " "))
        else:
            out.append(tok)
    return "".join(out)


def _read_optional(tokens: List[str], i: int) -> Tuple[str, int]:
    """An optional ``[...]`` argument."""
    if i >= len(tokens) or tokens[i] != "[":
        return "", i
    close = i + 1
    while close < len(tokens) and tokens[close] != "]":
        close += 1
    if close >= len(tokens):
        return "", i
    text, _ = _read_sequence(tokens[i + 1:close], 0, in_group=False)
    return text, close + 1


# ---------------------------------------------------------
# Text helpers
# ---------------------------------------------------------
_BREAK_TAG_RE = re.compile(r"<br\s*/?>|</(?:p|div|li|h[1-6]|tr)\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")


def _html_to_text(markup: str) -> str:
    text = _BREAK_TAG_RE.sub("\n", markup)
    text = _TAG_RE.sub("", text)
    text = text.replace("\\$", "$")
    return html.unescape(text)


def _normalize_whitespace(text: str) -> str:
    text = re.sub(r"[ \t\u00a0]{2,}", " ", text)
    text = re.sub(r"[ \t]*\n[ \t]*", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
