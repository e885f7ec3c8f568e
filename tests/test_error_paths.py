"""Error-path tests: exception formatting and the safe-execution boundary.

Template problems never raise. These tests cover what does: API misuse,
opt-in fail-fast, and internal faults converted at the parse boundary.
"""

import logging

import pytest

import plantilla.parser
from plantilla import parse
from plantilla.boundary import ErrorContext, safe_execute
from plantilla.diagnostics import INTERNAL_ERROR, Diagnostic
from plantilla.errors import CompilerError, PlantillaError, RenderError
from plantilla.location import Position, Span

# =========================================================================
# CompilerError construction and formatting
# =========================================================================


class TestCompilerErrorFormatting:
    """Verify CompilerError produces well-formatted messages."""

    def test_message_only(self) -> None:
        err = CompilerError("unexpected token")
        assert str(err) == "unexpected token"
        assert err.span is None
        assert err.code == "error"

    def test_with_span(self) -> None:
        span = Span(Position(10, 5, 120), Position(10, 9, 124))
        err = CompilerError("missing bracket", "unclosed-tag", span)
        assert str(err) == "10:5: missing bracket"

    def test_with_filename(self) -> None:
        span = Span(Position(1, 1, 0), Position(1, 2, 1))
        err = CompilerError("error", span=span, filename="page.astro")
        assert str(err) == "page.astro:1:1: error"

    def test_filename_without_span(self) -> None:
        assert str(CompilerError("boom", filename="a.astro")) == "a.astro: boom"

    def test_hierarchy(self) -> None:
        assert issubclass(CompilerError, PlantillaError)
        assert issubclass(RenderError, PlantillaError)

    def test_from_diagnostic(self) -> None:
        diagnostic = Diagnostic("mismatched-tag", "bad close", Span.empty(), filename="x.astro")
        err = diagnostic.to_error()
        assert err.code == "mismatched-tag"
        assert str(err) == "x.astro:1:1: bad close"


# =========================================================================
# safe_execute
# =========================================================================


class TestSafeExecute:
    """The boundary converts Exceptions and lets BaseExceptions through."""

    def test_passes_result_through(self) -> None:
        assert safe_execute(lambda: 42, ErrorContext("op"), lambda exc: -1) == 42

    def test_fallback_receives_exception(self) -> None:
        def boom() -> int:
            raise ValueError("bad")

        seen: list[Exception] = []

        def fallback(exc: Exception) -> int:
            seen.append(exc)
            return -1

        assert safe_execute(boom, ErrorContext("op"), fallback) == -1
        assert isinstance(seen[0], ValueError)

    def test_logs_context(self, caplog: pytest.LogCaptureFixture) -> None:
        def boom() -> None:
            raise RuntimeError("kaboom")

        with caplog.at_level(logging.ERROR, logger="plantilla"):
            safe_execute(boom, ErrorContext("parse", "a.astro", 12), lambda exc: None)

        (record,) = caplog.records
        message = record.getMessage()
        assert "parse" in message
        assert "a.astro" in message
        assert "source_length=12" in message
        assert record.exc_info is not None

    def test_base_exceptions_propagate(self) -> None:
        def interrupt() -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            safe_execute(interrupt, ErrorContext("op"), lambda exc: None)

    def test_describe(self) -> None:
        assert ErrorContext("render").describe() == (
            "operation=render filename=<string> source_length=0"
        )


# =========================================================================
# Internal faults at the parse boundary
# =========================================================================


class TestInternalFaults:
    """An internal fault becomes an empty Fragment plus internal-error."""

    def test_parser_crash_is_contained(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(state, config):  # type: ignore[no-untyped-def]
            raise RuntimeError("parser bug")

        monkeypatch.setattr(plantilla.parser, "parse_document", broken)
        result = parse("<p>fine</p>", filename="page.astro")

        assert result.ast.children == ()
        assert result.ast.span == Span.empty()
        (diagnostic,) = result.diagnostics
        assert diagnostic.code == INTERNAL_ERROR
        assert diagnostic.severity == "error"
        assert diagnostic.filename == "page.astro"
        assert "parser bug" in diagnostic.message

    def test_fault_logged_to_injected_logger(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        def broken(source):  # type: ignore[no-untyped-def]
            raise RuntimeError("lexer bug")

        monkeypatch.setattr(plantilla.parser, "Lexer", broken)
        log = logging.getLogger("test.plantilla.faults")
        with caplog.at_level(logging.ERROR, logger="test.plantilla.faults"):
            result = parse("x", logger=log)

        assert [d.code for d in result.diagnostics] == [INTERNAL_ERROR]
        assert any(r.name == "test.plantilla.faults" for r in caplog.records)


# =========================================================================
# Renderer misuse
# =========================================================================


class TestRenderErrors:
    def test_evaluate_without_evaluator(self) -> None:
        from plantilla import Compiler, HtmlOptions

        compiler = Compiler(options=HtmlOptions(evaluate_expressions=True))
        with pytest.raises(RenderError, match="evaluator"):
            compiler("<p>{x}</p>")

    def test_evaluator_errors_propagate(self) -> None:
        from plantilla import HtmlOptions, build_html

        def evaluator(code: str) -> str:
            raise NameError(code)

        fragment = parse("{missing}").ast
        with pytest.raises(NameError, match="missing"):
            build_html(fragment, HtmlOptions(evaluate_expressions=True, evaluator=evaluator))
