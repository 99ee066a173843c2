"""Tests for MathML well-formedness checks."""
from __future__ import annotations

from utils.mathml_validator import MAX_NESTING_DEPTH, validate_mathml


def test_valid_mathml() -> None:
    assert validate_mathml('<math xmlns="http://www.w3.org/1998/Math/MathML"><mi>x</mi></math>') == (True, [])


def test_html_entities_are_tolerated() -> None:
    is_valid, _ = validate_mathml("<math><mtext>a&nbsp;b &lt; c</mtext></math>")
    assert is_valid


def test_broken_xml() -> None:
    is_valid, issues = validate_mathml("<math><mrow><mi>x</mi></math>")
    assert not is_valid
    assert issues[0].startswith("XML parse error")


def test_wrong_root_and_empty() -> None:
    assert validate_mathml("<div><mi>x</mi></div>")[0] is False
    assert validate_mathml("   ") == (False, ["MathML is empty"])


def test_deep_nesting_is_flagged() -> None:
    depth = MAX_NESTING_DEPTH + 1
    markup = "<math>" + "<mrow>" * depth + "</mrow>" * depth + "</math>"
    is_valid, issues = validate_mathml(markup)
    assert not is_valid
    assert "Nesting depth" in issues[0]
