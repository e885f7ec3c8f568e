"""Property-based tests for lexer invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from plantilla.lexer import Lexer
from plantilla.tokens import INCOMPLETE_MARKER, TokenType

# Inputs biased toward delimiters so every mode gets exercised
markup_text = st.text(alphabet="<>/{}=\"'`!- \n\tabpXYscriptyle:\\", max_size=400)
any_text = st.one_of(st.text(max_size=400), markup_text)


class TestBasicInvariants:
    """Test basic invariants that should always hold."""

    @given(any_text)
    @settings(max_examples=300)
    def test_always_ends_with_eof(self, source: str) -> None:
        """Every tokenization must end with exactly one EOF token."""
        tokens = list(Lexer(source).tokenize())

        assert tokens[-1].type == TokenType.EOF, "Last token must be EOF"
        eof_count = sum(1 for t in tokens if t.type == TokenType.EOF)
        assert eof_count == 1, "Must have exactly one EOF token"

    @given(any_text)
    @settings(max_examples=300)
    def test_eof_at_end_of_input(self, source: str) -> None:
        lexer = Lexer(source)
        eof = list(lexer.tokenize())[-1]
        assert eof.span.start.offset == len(lexer.source)
        assert eof.span.length == 0

    @given(any_text)
    @settings(max_examples=300)
    def test_spans_monotonic(self, source: str) -> None:
        """Tokens never overlap and never move backwards."""
        previous_end = 0
        for token in Lexer(source).tokenize():
            assert token.span.start.offset >= previous_end
            assert token.span.end.offset >= token.span.start.offset
            previous_end = token.span.end.offset

    @given(any_text)
    @settings(max_examples=200)
    def test_line_and_column_match_offset(self, source: str) -> None:
        lexer = Lexer(source)
        normalized = lexer.source
        for token in lexer.tokenize():
            for pos in (token.span.start, token.span.end):
                prefix = normalized[: pos.offset]
                assert pos.line == prefix.count("\n") + 1
                assert pos.column == pos.offset - (prefix.rfind("\n") + 1) + 1


class TestCoverage:
    """Every source character belongs to some token or skipped whitespace."""

    @given(markup_text)
    @settings(max_examples=300)
    def test_text_tokens_are_source_slices(self, source: str) -> None:
        lexer = Lexer(source)
        normalized = lexer.source
        for token in lexer.tokenize():
            if token.type in (TokenType.TEXT, TokenType.ATTRIBUTE_NAME):
                start, end = token.span.start.offset, token.span.end.offset
                assert normalized[start:end] == token.value

    @given(st.text(alphabet="abc <>/", max_size=200))
    @settings(max_examples=200)
    def test_plain_markup_reconstructs(self, source: str) -> None:
        """Without attributes or expressions, gaps are whitespace only."""
        lexer = Lexer(source)
        normalized = lexer.source
        covered = 0
        for token in lexer.tokenize():
            gap = normalized[covered : token.span.start.offset]
            assert set(gap) <= set(" \t\n/=")
            covered = token.span.end.offset
        assert covered == len(normalized)


class TestExpressionPairing:
    @given(markup_text)
    @settings(max_examples=300)
    def test_every_start_has_content_and_end(self, source: str) -> None:
        tokens = list(Lexer(source).tokenize())
        for i, token in enumerate(tokens):
            if token.type == TokenType.EXPRESSION_START:
                assert tokens[i + 1].type == TokenType.EXPRESSION_CONTENT
                assert tokens[i + 2].type == TokenType.EXPRESSION_END
                if tokens[i + 1].incomplete:
                    assert tokens[i + 2].value == ""

    @given(markup_text)
    @settings(max_examples=200)
    def test_marker_only_on_expression_tokens(self, source: str) -> None:
        for token in Lexer(source).tokenize():
            if INCOMPLETE_MARKER in token.value:
                assert token.type in (
                    TokenType.EXPRESSION_CONTENT,
                    TokenType.ATTRIBUTE_VALUE,
                )
                assert token.value.endswith(INCOMPLETE_MARKER)

    @given(st.text(max_size=100))
    @settings(max_examples=200)
    def test_frontmatter_tokens_balanced(self, source: str) -> None:
        tokens = list(Lexer("---\n" + source).tokenize())
        kinds = [t.type for t in tokens]
        assert kinds[0] == TokenType.FRONTMATTER_START
        assert kinds.count(TokenType.FRONTMATTER_END) == 1
