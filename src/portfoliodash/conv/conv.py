from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal, InvalidOperation

NUM_CLEAN_RE = re.compile(r"[,\s]")  # remove thousands separators, spaces

CHART_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_PLACEHOLDERS = {"-", "--", "...", "N/A", "n/a"}


def to_dec_strict(s: str | float | int | Decimal | None) -> Decimal:
    """Convert a numeric cell to a finite Decimal.

    Raises ValueError on invalid/missing data. Floats go through ``str`` so
    ``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.
    """
    if s is None:
        raise ValueError("Value is None")
    if isinstance(s, bool):
        raise ValueError(f"Value is a boolean: {s!r}")
    if isinstance(s, Decimal):
        value = s
    elif isinstance(s, (int, float)):
        value = Decimal(str(s))
    else:
        s_stripped = s.strip()
        if not s_stripped:
            raise ValueError("Value is empty string")

        if s_stripped in _PLACEHOLDERS:
            raise ValueError(f"Value is a placeholder: {s_stripped!r}")

        try:
            value = Decimal(NUM_CLEAN_RE.sub("", s_stripped))
        except InvalidOperation as e:
            raise ValueError(f"Invalid decimal format: {s!r}") from e

    if not value.is_finite():
        raise ValueError(f"Value is not a finite number: {s!r}")
    return value


def parse_timestamp(s: str) -> dt.datetime:
    """Parse a chart timestamp in 'YYYY-MM-DD HH:MM:SS' form."""
    return dt.datetime.strptime(s.strip(), CHART_TIMESTAMP_FORMAT)
