"""Assertions for untrusted peer input and for internal invariants."""

from __future__ import annotations

import os
import sys

__all__ = ["DenialOfServiceError", "dos_assert", "fatal_assert"]


class DenialOfServiceError(Exception):
    """Raised when input from the other side of a connection is illegal.

    It is never fatal: a peer sending garbage must not be able to bring the
    session down.
    """

    fatal = False

    def __init__(self, expression: str, function: str, filename: str, lineno: int) -> None:
        self.expression = expression
        self.function = function
        self.filename = filename
        self.lineno = lineno
        super().__init__(
            "Illegal counterparty input (possible denial of service) "
            f"in function {function} at {filename}:{lineno}, failed test: {expression}"
        )


def _caller() -> tuple[str, str, int]:
    """Return (function, file, line) of whoever called the assertion."""
    frame = sys._getframe(2)
    return frame.f_code.co_name, frame.f_code.co_filename, frame.f_lineno


def dos_assert(condition: object, expression: str) -> None:
    """Raise DenialOfServiceError if *condition* is false."""
    if condition:
        return
    function, filename, lineno = _caller()
    raise DenialOfServiceError(expression, function, filename, lineno)


def fatal_assert(condition: object, expression: str) -> None:
    """Report the failed test on stderr and abort the process if *condition* is false."""
    if condition:
        return
    function, filename, lineno = _caller()
    sys.stderr.write(
        f"Fatal assertion failure in function {function} at {filename}:{lineno}\n"
        f"Failed test: {expression}\n"
    )
    sys.stderr.flush()
    os.abort()