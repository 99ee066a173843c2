"""Tests for the delimiter scanner."""
from __future__ import annotations

from services.parsing.delimiter_scanner import (
    Placeholder,
    PlaceholderKind,
    TextRun,
    scan,
)


def test_inline_and_unbalanced_dollar() -> None:
    result = scan("$x$ and $y")
    assert result.inline_fragments == ["x"]
    assert result.tokens == [
        Placeholder(PlaceholderKind.INLINE, 0),
        TextRun(" and $y"),
    ]


def test_escaped_dollar_is_literal() -> None:
    result = scan(r"price: \$5, formula: $x^2$")
    assert result.inline_fragments == ["x^2"]
    assert result.tokens[0] == TextRun(r"price: \$5, formula: ")


def test_escaped_closing_dollar_keeps_searching() -> None:
    result = scan(r"$a\$b$")
    assert result.inline_fragments == [r"a\$b"]


def test_empty_spans_are_not_math() -> None:
    for text in ("$$", "$ $"):
        result = scan(text)
        assert result.inline_fragments == []
        assert result.display_fragments == []
        assert result.tokens == [TextRun(text)]


def test_odd_dollar_count_leaves_trailing_literal() -> None:
    result = scan("cost is $5 and $10 or $20")
    assert result.inline_fragments == ["5 and"]
    assert result.tokens[-1] == TextRun("10 or $20")


def test_display_block_spans_lines_and_is_trimmed() -> None:
    result = scan("before $$\n  x + y\n$$ after")
    assert result.display_fragments == ["x + y"]
    assert result.tokens == [
        TextRun("before "),
        Placeholder(PlaceholderKind.DISPLAY, 0),
        TextRun(" after"),
    ]


def test_display_takes_priority_over_inline() -> None:
    result = scan("$$a$b$$ and $c$")
    assert result.display_fragments == ["a$b"]
    assert result.inline_fragments == ["c"]


def test_adjacent_inline_spans() -> None:
    result = scan("$x$$y$")
    assert result.display_fragments == []
    assert result.inline_fragments == ["x", "y"]


def test_mathml_block_is_case_insensitive_and_kept_raw() -> None:
    block = '<MATH display="block"><mi>x</mi></MATH>'
    result = scan(f"see {block} now")
    assert result.mathml_fragments == [block]
    assert result.tokens[1] == Placeholder(PlaceholderKind.MATHML, 0)


def test_dollar_inside_mathml_never_delimits() -> None:
    text = '<math><annotation encoding="application/x-tex">$</annotation></math> $z$'
    result = scan(text)
    assert result.inline_fragments == ["z"]
    assert len(result.mathml_fragments) == 1


def test_inline_span_across_mathml_substitutes_its_source() -> None:
    text = "$a <math><annotation encoding='application/x-tex'>b</annotation></math> c$"
    result = scan(text)
    assert result.inline_fragments == ["a b c"]
    assert result.tokens == [Placeholder(PlaceholderKind.INLINE, 0)]


def test_sentinel_characters_in_input_are_plain_text() -> None:
    text = "\x00MATHML_0\x00 $x$"
    result = scan(text)
    assert result.mathml_fragments == []
    assert result.inline_fragments == ["x"]
    assert result.tokens[0] == TextRun("\x00MATHML_0\x00 ")


def test_plain_text_is_single_run() -> None:
    assert scan("no math here").tokens == [TextRun("no math here")]
    assert scan("").tokens == []
