"""Tests for the plain-text downgrade."""
from __future__ import annotations

import pytest

from services.plain_text import latex_to_plain, process_plain_text


@pytest.mark.parametrize(
    "latex, expected",
    [
        (r"\frac{a}{b}", "(a)/(b)"),
        (r"\dfrac12", "(1)/(2)"),
        (r"\frac{\alpha}{\beta}", "(α)/(β)"),
        (r"\sqrt{x+1}", "√(x+1)"),
        (r"\sqrt[3]{x}", "3√(x)"),
        (r"\alpha + \beta \le \infty", "α + β ≤ ∞"),
        (r"\left( x \right)", "( x )"),
        (r"\left. x \right|", " x |"),
        (r"\mathbf{v} \cdot \mathrm{d}", "v · d"),
        (r"\{1, 2\}", "{1, 2}"),
        (r"\sin x", "sin x"),
    ],
)
def test_latex_to_plain(latex: str, expected: str) -> None:
    assert latex_to_plain(latex) == expected


def test_matrix_rows_become_lines() -> None:
    assert process_plain_text(r"$$\begin{pmatrix}1&2\\3&4\end{pmatrix}$$") == "1 2\n3 4"


def test_array_column_spec_is_dropped() -> None:
    assert process_plain_text(r"$\begin{array}{cc}a&b\end{array}$") == "a b"


def test_text_command_and_spacing_are_normalized() -> None:
    assert process_plain_text(r"$\text{if } x \le 1$") == "if x ≤ 1"


def test_unknown_commands_collapse_to_space() -> None:
    assert process_plain_text(r"$\foo x$") == "x"


def test_mathml_annotation_is_used() -> None:
    text = '<p>Root: <math><annotation encoding="application/x-tex">\\sqrt{x}</annotation></math></p>'
    assert process_plain_text(text) == "Root: √(x)"


def test_tags_and_entities_are_stripped() -> None:
    assert process_plain_text("Tom &amp; Jerry<br><b>x</b>") == "Tom & Jerry\nx"


def test_escaped_dollar_becomes_plain_dollar() -> None:
    assert process_plain_text(r"cost \$5 and $x^2$") == "cost $5 and x^2"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$" + "{" * 3000 + "x" + "}" * 3000 + "$", "x"),
        ("$" + "\\frac" * 3000 + "{a}{b}$", "ab"),
        ("$" + "{" * 3000 + r"\alpha \le 1" + "}" * 3000 + "$", "α ≤ 1"),
    ],
)
def test_deep_nesting_is_flattened(text: str, expected: str) -> None:
    assert process_plain_text(text) == expected


def test_no_digit_letter_guessing() -> None:
    assert process_plain_text("43x2") == "43x2"


def test_empty_markup_gives_empty_text() -> None:
    assert process_plain_text("<b></b>") == ""
