from __future__ import annotations


class InputFormatError(ValueError):
    """Raised when simulation input fails validation (caller's fault)."""


class InvariantViolationError(RuntimeError):
    """
    Raised when simulator bookkeeping breaks an invariant.

    These indicate a bug, not bad input, and are never caught inside the package.
    """
