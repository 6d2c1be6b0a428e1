from .export import write_transactions
from .readers import (
    ParseReport,
    merge_reports,
    parse_chart_rows,
    parse_index_rows,
    parse_quote_rows,
    parse_transaction_rows,
    read_chart_points,
    read_index_entries,
    read_quotes,
    read_transactions,
)
from .records import ChartPoint, IndexEntry, PriceQuote, Side, Transaction

__all__ = [
    "ChartPoint",
    "IndexEntry",
    "ParseReport",
    "PriceQuote",
    "Side",
    "Transaction",
    "merge_reports",
    "parse_chart_rows",
    "parse_index_rows",
    "parse_quote_rows",
    "parse_transaction_rows",
    "read_chart_points",
    "read_index_entries",
    "read_quotes",
    "read_transactions",
    "write_transactions",
]
