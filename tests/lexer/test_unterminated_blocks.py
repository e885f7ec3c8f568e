"""Tests for constructs that run into end of input.

The lexer never raises and never loops: whatever mode it is in at end of
input, it closes pending tokens and emits EOF.
"""

import pytest

from plantilla.lexer import tokenize
from plantilla.tokens import INCOMPLETE_MARKER, TokenType

T = TokenType


def _kinds(source: str) -> list[tuple[TokenType, str]]:
    return [(t.type, t.value) for t in tokenize(source)]


class TestUnterminatedTags:
    def test_tag_name_only(self) -> None:
        assert _kinds("<div") == [(T.TAG_OPEN, "div"), (T.EOF, "")]

    def test_trailing_whitespace(self) -> None:
        tokens = tokenize("<div   ")
        assert [t.type for t in tokens] == [T.TAG_OPEN, T.EOF]
        assert tokens[-1].start.offset == 7

    def test_after_equals(self) -> None:
        assert _kinds("<a href=") == [
            (T.TAG_OPEN, "a"),
            (T.ATTRIBUTE_NAME, "href"),
            (T.ATTRIBUTE_VALUE, ""),
            (T.EOF, ""),
        ]

    def test_open_quote(self) -> None:
        assert _kinds('<a title="never closed')[-2] == (
            T.ATTRIBUTE_VALUE,
            '"never closed',
        )

    def test_open_brace_value(self) -> None:
        value = _kinds("<a x={y")[-2]
        assert value == (T.ATTRIBUTE_VALUE, "{y" + INCOMPLETE_MARKER)

    def test_open_brace_value_cut_at_closing_tag(self) -> None:
        assert _kinds("<A x={y</A>") == [
            (T.TAG_OPEN, "A"),
            (T.ATTRIBUTE_NAME, "x"),
            (T.ATTRIBUTE_VALUE, "{y" + INCOMPLETE_MARKER),
            (T.TAG_CLOSE, "A"),
            (T.EOF, ""),
        ]


class TestUnterminatedExpressions:
    def test_nested(self) -> None:
        kinds = _kinds("{a({b}")
        assert kinds[1] == (T.EXPRESSION_CONTENT, "a({b}" + INCOMPLETE_MARKER)
        assert kinds[2] == (T.EXPRESSION_END, "")

    def test_open_brace_only(self) -> None:
        assert _kinds("{") == [
            (T.EXPRESSION_START, "{"),
            (T.EXPRESSION_CONTENT, INCOMPLETE_MARKER),
            (T.EXPRESSION_END, ""),
            (T.EOF, ""),
        ]

    def test_markup_after_cut_is_scanned(self) -> None:
        kinds = _kinds("<li>{x</li><li>y</li>")
        assert kinds.count((T.TAG_OPEN, "li")) == 2
        assert (T.TEXT, "y") in kinds


class TestUnterminatedRawText:
    @pytest.mark.parametrize("tag", ["script", "style"])
    def test_runs_to_end(self, tag: str) -> None:
        assert _kinds(f"<{tag}>body </p> {{x}}") == [
            (T.TAG_OPEN, tag),
            (T.TAG_END, ">"),
            (T.TEXT, "body </p> {x}"),
            (T.EOF, ""),
        ]

    def test_open_tag_at_end(self) -> None:
        assert _kinds("<script>") == [
            (T.TAG_OPEN, "script"),
            (T.TAG_END, ">"),
            (T.EOF, ""),
        ]


class TestUnterminatedMarkup:
    @pytest.mark.parametrize("source", ["<!--", "<!-- x -", "<!DOCTYPE", "</", "</a"])
    def test_absorbed_into_text(self, source: str) -> None:
        assert _kinds(source) == [(T.TEXT, source), (T.EOF, "")]

    def test_frontmatter_fence_only(self) -> None:
        assert _kinds("---") == [
            (T.FRONTMATTER_START, "---"),
            (T.FRONTMATTER_CONTENT, ""),
            (T.FRONTMATTER_END, ""),
            (T.EOF, ""),
        ]
