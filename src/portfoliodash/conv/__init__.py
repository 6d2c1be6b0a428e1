from .conv import CHART_TIMESTAMP_FORMAT, parse_timestamp, to_dec_strict

__all__ = [
    "CHART_TIMESTAMP_FORMAT",
    "parse_timestamp",
    "to_dec_strict",
]
