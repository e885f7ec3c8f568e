"""Error recovery and diagnostics for malformed templates.

The parser is total: every input yields a Fragment, and structural
problems are reported as diagnostics instead of exceptions.
"""

import pytest

from plantilla import Compiler, parse
from plantilla.diagnostics import (
    DUPLICATE_DIRECTIVE,
    MISMATCHED_TAG,
    UNCLOSED_EXPRESSION,
    UNCLOSED_FRONTMATTER,
    UNCLOSED_TAG,
    UNEXPECTED_TOKEN,
)
from plantilla.errors import CompilerError
from plantilla.location import Position, Span
from plantilla.nodes import Component, Element, Expression, Fragment, Text
from plantilla.parsing import ParserState, parse_document
from plantilla.config import ParseConfig
from plantilla.tokens import Token, TokenType


def _codes(source: str) -> list[str]:
    return [d.code for d in parse(source).diagnostics]


class TestUnclosedTags:
    """End of input inside an open element."""

    def test_unclosed_element_keeps_children(self) -> None:
        result = parse("<div><span>text")
        (div,) = result.ast.children
        (span,) = div.children
        assert span.children[0].value == "text"
        assert [d.code for d in result.diagnostics] == [UNCLOSED_TAG, UNCLOSED_TAG]

    def test_unclosed_tag_reported_at_open_tag(self) -> None:
        result = parse("text\n  <section>")
        (diagnostic,) = result.diagnostics
        assert diagnostic.code == UNCLOSED_TAG
        assert (diagnostic.span.start.line, diagnostic.span.start.column) == (2, 3)
        assert diagnostic.severity == "error"

    def test_start_tag_cut_by_eof(self) -> None:
        result = parse('<a href="x"')
        (a,) = result.ast.children
        assert a.get_attribute("href").value == "x"
        assert _codes('<a href="x"') == [UNCLOSED_TAG]

    def test_unclosed_void_is_fine(self) -> None:
        assert _codes("<p>a<br>b</p>") == []


class TestMismatchedTags:
    """Closing tags that do not match the open element."""

    def test_mismatch_closes_parent(self) -> None:
        result = parse("<section><div>a</section>")
        (section,) = result.ast.children
        (div,) = section.children
        assert div.children[0].value == "a"
        (diagnostic,) = result.diagnostics
        assert diagnostic.code == MISMATCHED_TAG
        assert "</section>" in diagnostic.message

    def test_stray_closing_tag_at_top_level(self) -> None:
        result = parse("</div>after")
        (text,) = result.ast.children
        assert text.value == "after"
        assert [d.code for d in result.diagnostics] == [MISMATCHED_TAG]

    def test_mismatch_is_case_sensitive(self) -> None:
        assert MISMATCHED_TAG in _codes("<div></DIV>")

    def test_unmatched_close_reported_once(self) -> None:
        result = parse("<section><div><span></p></span></div></section>")
        (diagnostic,) = result.diagnostics
        assert diagnostic.code == MISMATCHED_TAG
        assert diagnostic.span.start == Position(line=1, column=21, offset=20)
        (section,) = result.ast.children
        (div,) = section.children
        (span,) = div.children
        assert span.tag == "span"
        assert span.children == ()

    def test_unmatched_close_keeps_element_open(self) -> None:
        result = parse("<ul><li>a</p>b</li></ul>")
        (ul,) = result.ast.children
        (li,) = ul.children
        assert [child.value for child in li.children] == ["a", "b"]
        assert _codes("<ul><li>a</p>b</li></ul>") == [MISMATCHED_TAG]

    def test_ancestor_close_reported_once(self) -> None:
        result = parse("<main><section><div><span>x</main>after")
        assert [d.code for d in result.diagnostics] == [MISMATCHED_TAG]
        main, after = result.ast.children
        assert main.tag == "main"
        assert after.value == "after"


class TestUnclosedExpressions:
    """Expressions that never see their closing brace."""

    def test_cut_at_closing_tag(self) -> None:
        result = parse("<p>{count + </p><p>next</p>")
        first, second = result.ast.children
        (expr,) = first.children
        assert isinstance(expr, Expression)
        assert expr.incomplete is True
        assert expr.code == "count + "
        assert second.children[0].value == "next"
        assert _codes("<p>{count + </p><p>next</p>") == [UNCLOSED_EXPRESSION]

    def test_at_end_of_input(self) -> None:
        (expr,) = parse("{a + b").ast.children
        assert expr.code == "a + b"
        assert expr.incomplete is True

    def test_in_attribute(self) -> None:
        result = parse("<Comp value={x</Comp>")
        (comp,) = result.ast.children
        value = comp.get_attribute("value").value
        assert isinstance(value, Expression)
        assert value.incomplete is True
        assert value.code == "x"
        assert UNCLOSED_EXPRESSION in [d.code for d in result.diagnostics]

    def test_marker_never_leaks(self) -> None:
        for source in ("{x", "<p>{x", "<A b={x"):
            for node in parse(source).ast.children:
                assert "\x00" not in repr(node)


class TestFrontmatterRecovery:
    def test_unclosed_frontmatter(self) -> None:
        result = parse("---\nconst a = 1;\n<p>{a}</p>")
        assert result.ast.frontmatter is not None
        assert result.ast.frontmatter.code == "const a = 1;\n<p>{a}</p>"
        assert [d.code for d in result.diagnostics] == [UNCLOSED_FRONTMATTER]


class TestDirectives:
    """duplicate-directive warnings."""

    def test_once_per_repeat(self) -> None:
        result = parse("<X client:idle client:idle client:idle />")
        dupes = [d for d in result.diagnostics if d.code == DUPLICATE_DIRECTIVE]
        assert len(dupes) == 2
        assert all(d.severity == "warning" for d in dupes)

    def test_distinct_directives_ok(self) -> None:
        assert _codes("<X client:load client:visible />") == []

    def test_plain_attributes_may_repeat(self) -> None:
        assert _codes('<div class="a" class="b"></div>') == []

    def test_duplicate_points_at_second_attribute(self) -> None:
        (diagnostic,) = parse("<X client:load client:load />").diagnostics
        assert diagnostic.span.start.offset == 15

    def test_directive_on_element(self) -> None:
        result = parse("<div client:load client:load></div>")
        assert isinstance(result.ast.children[0], Element)
        assert _codes("<div client:load client:load></div>") == [DUPLICATE_DIRECTIVE]


class TestHandBuiltTokens:
    """The parser accepts both attribute token shapes."""

    @staticmethod
    def _span(start: int, end: int) -> Span:
        return Span(Position(1, start + 1, start), Position(1, end + 1, end))

    def test_combined_attribute_token(self) -> None:
        tokens = [
            Token(TokenType.TAG_OPEN, "Card", self._span(0, 5)),
            Token(TokenType.ATTRIBUTE_VALUE, 'title="Hi"', self._span(6, 16)),
            Token(TokenType.ATTRIBUTE_VALUE, "count={n}", self._span(17, 26)),
            Token(TokenType.TAG_SELF_CLOSE, "/>", self._span(27, 29)),
        ]
        state, fragment = parse_document(ParserState.from_tokens(tokens), ParseConfig())
        (card,) = fragment.children
        assert isinstance(card, Component)
        assert card.get_attribute("title").value == "Hi"
        count = card.get_attribute("count").value
        assert isinstance(count, Expression)
        assert count.code == "n"
        assert state.diagnostics == ()

    def test_missing_eof_is_appended(self) -> None:
        state = ParserState.from_tokens(
            [Token(TokenType.TEXT, "hi", self._span(0, 2))]
        )
        assert state.tokens[-1].type is TokenType.EOF
        assert state.tokens[-1].span.start.offset == 2

    def test_unexpected_top_level_token(self) -> None:
        tokens = [
            Token(TokenType.TAG_END, ">", self._span(0, 1)),
            Token(TokenType.TEXT, "x", self._span(1, 2)),
        ]
        state, fragment = parse_document(ParserState.from_tokens(tokens), ParseConfig())
        assert isinstance(fragment.children[0], Text)
        (diagnostic,) = state.diagnostics
        assert diagnostic.code == UNEXPECTED_TOKEN
        assert diagnostic.severity == "warning"


class TestParseResult:
    """ParseResult helpers."""

    def test_errors_and_warnings_split(self) -> None:
        result = parse("<X client:load client:load><div>")
        assert [d.code for d in result.warnings] == [DUPLICATE_DIRECTIVE]
        assert {d.code for d in result.errors} == {UNCLOSED_TAG}
        assert not result.ok

    def test_raise_for_errors(self) -> None:
        result = Compiler().parse("<main>", filename="index.astro")
        with pytest.raises(CompilerError) as exc_info:
            result.raise_for_errors()
        assert exc_info.value.code == UNCLOSED_TAG
        assert str(exc_info.value).startswith("index.astro:1:1: ")

    def test_raise_for_errors_ignores_warnings(self) -> None:
        parse("<X client:load client:load />").raise_for_errors()

    def test_loc_alias(self) -> None:
        (diagnostic,) = parse("<p>").diagnostics
        assert diagnostic.loc is diagnostic.span


class TestTotality:
    """Garbage in, Fragment out."""

    @pytest.mark.parametrize(
        "source",
        [
            "<",
            "</",
            "<>",
            "<<<<",
            "{",
            "}",
            "{{{",
            "<a =>",
            "<a b=",
            '<a b="',
            "<a {",
            "<!--",
            "<!",
            "---",
            "---\n",
            "<script>",
            "<script>unterminated",
            "\x00\xff�",
            "<div/ >",
            "<div / x>",
        ],
    )
    def test_never_raises(self, source: str) -> None:
        result = parse(source)
        assert isinstance(result.ast, Fragment)
        assert all(d.code != "internal-error" for d in result.diagnostics)
