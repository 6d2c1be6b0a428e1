"""Exception types raised by the metrics pipeline."""

from __future__ import annotations

from pathlib import Path


class MetricsError(ArithmeticError):
    """A metric could not be computed from the supplied inputs."""


class DivisionByZeroError(MetricsError, ZeroDivisionError):
    """Zero total amount (ROI) or zero volatility (Sharpe ratio)."""


class InvalidInputError(MetricsError, ValueError):
    """Input series is too short or otherwise unusable for a metric."""


class ReaderError(ValueError):
    """A tabular input row could not be parsed; the whole read is aborted."""

    def __init__(self, message: str, *, line_no: int, path: str | Path | None = None):
        self.line_no = line_no
        self.path = str(path) if path is not None else None
        where = f"{self.path}:{line_no}" if self.path else f"line {line_no}"
        super().__init__(f"{where}: {message}")
