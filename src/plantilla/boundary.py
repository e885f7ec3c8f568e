"""Safe-execution boundary for public entry points.

Wraps a pipeline call so that an unexpected internal fault never escapes
to the caller. The fault is logged with its context and converted into a
fallback value chosen by the caller.

Thread Safety:
Stateless. ErrorContext is frozen.

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from plantilla.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """What was running when a fault occurred.

    Attributes:
        operation: Name of the pipeline step (e.g. "parse")
        filename: Source file, when known
        source_length: Length of the source text in characters

    """

    operation: str
    filename: str | None = None
    source_length: int = 0

    def describe(self) -> str:
        return (
            f"operation={self.operation} "
            f"filename={self.filename or '<string>'} "
            f"source_length={self.source_length}"
        )


def safe_execute[T](
    fn: Callable[[], T],
    context: ErrorContext,
    fallback: Callable[[Exception], T],
    *,
    log: logging.Logger | None = None,
) -> T:
    """Run fn, converting any Exception into fallback(exc).

    BaseException subclasses (KeyboardInterrupt, SystemExit) propagate.

    Args:
        fn: Zero-argument callable to run
        context: Context recorded in the log message
        fallback: Builds the result returned when fn raises
        log: Logger to report faults to (defaults to this module's logger)

    Returns:
        fn's result, or fallback's result if fn raised.
    """
    try:
        return fn()
    except Exception as exc:
        (log or logger).error(
            "Internal error during %s (%s): %s",
            context.operation,
            context.describe(),
            exc,
            exc_info=True,
        )
        return fallback(exc)
