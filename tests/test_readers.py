import csv
import datetime as dt
import logging
from decimal import Decimal

import pytest
from fixtures import write_csv

from portfoliodash.errors import ReaderError
from portfoliodash.model import (
    Side,
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
from portfoliodash.model.readers import (
    CHART_HEADER,
    EXECUTION_HEADER,
    INDEX_HEADER,
    QUOTE_HEADER,
)

EXEC_ROWS = [
    list(EXECUTION_HEADER),
    [
        "00012ec5.676a4251.01.01",
        "20241224 11:46:53 EET",
        "AAPL",
        "BOT",
        "100.0000000000000000",
        "255.45",
        "25545.00",
    ],
    [
        "00012ec5.676a4255.01.01",
        "20241224 11:47:37 EET",
        "AAPL",
        "SLD",
        "40",
        "255.45",
        "10218.00",
    ],
]


def test_parse_transactions_maps_fields_and_broker_sides():
    txs, report = parse_transaction_rows(EXEC_ROWS)
    assert len(txs) == 2
    first = txs[0]
    assert first.exec_id == "00012ec5.676a4251.01.01"
    assert first.date == "20241224 11:46:53 EET"
    assert first.symbol == "AAPL"
    assert first.side is Side.BUY
    assert first.quantity == Decimal("100")
    assert str(first.quantity) == "100.0000000000000000"
    assert first.price_per_share == Decimal("255.45")
    assert first.total_amount == Decimal("25545.00")
    assert txs[1].side is Side.SELL
    assert report.issues == []


def test_parse_transactions_header_is_skipped_whatever_its_content():
    rows = [["anything"]] + EXEC_ROWS[1:]
    txs, _ = parse_transaction_rows(rows)
    assert len(txs) == 2


def test_parse_transactions_ignores_blank_lines():
    rows = EXEC_ROWS[:2] + [[], ["", " "]] + EXEC_ROWS[2:]
    txs, _ = parse_transaction_rows(rows)
    assert [t.side for t in txs] == [Side.BUY, Side.SELL]


def test_parse_transactions_total_mismatch_is_warning_not_fix():
    rows = [
        EXEC_ROWS[0],
        ["e1", "d", "AAPL", "BUY", "10", "100", "999.00"],
    ]
    txs, report = parse_transaction_rows(rows, source="executions.csv")
    assert txs[0].total_amount == Decimal("999.00")
    assert len(report.issues) == 1
    issue = report.issues[0]
    assert issue.line_no == 2
    assert issue.source == "executions.csv"
    assert "TotalAmount 999.00 differs" in issue.message


def test_parse_transactions_total_rounded_to_cents_is_accepted():
    rows = [EXEC_ROWS[0], ["e1", "d", "AAPL", "BUY", "3", "0.333", "1.00"]]
    _, report = parse_transaction_rows(rows)
    assert report.issues == []


def test_parse_transactions_duplicate_exec_id_warns():
    rows = [EXEC_ROWS[0], EXEC_ROWS[1], EXEC_ROWS[1]]
    txs, report = parse_transaction_rows(rows)
    assert len(txs) == 2
    assert any("Duplicate ExecId" in i.message for i in report.issues)


@pytest.mark.parametrize(
    "row, fragment",
    [
        (["e1", "d", "AAPL", "BUY", "10", "100"], "expected 7 fields, got 6"),
        (["e1", "d", "AAPL", "BUY", "10", "100", "1000", "x"], "expected 7 fields"),
        (["e1", "d", "AAPL", "HOLD", "10", "100", "1000"], "Unknown transaction side"),
        (["e1", "d", "AAPL", "BUY", "ten", "100", "1000"], "Invalid decimal format"),
        (["e1", "d", "AAPL", "BUY", "0", "100", "1000"], "quantity must be positive"),
        (["e1", "d", "AAPL", "BUY", "1", "-5", "1000"], "price per share"),
        (["e1", "d", "AAPL", "BUY", "1", "5", "NaN"], "not a finite number"),
        (["", "d", "AAPL", "BUY", "1", "5", "5"], "missing ExecId"),
        (["e1", "d", "", "BUY", "1", "5", "5"], "missing StockSymbol"),
    ],
)
def test_parse_transactions_malformed_row_aborts(row, fragment):
    rows = [EXEC_ROWS[0], EXEC_ROWS[1], row, EXEC_ROWS[2]]
    with pytest.raises(ReaderError) as excinfo:
        parse_transaction_rows(rows)
    assert excinfo.value.line_no == 3
    assert fragment in str(excinfo.value)


def test_parse_chart_rows():
    rows = [
        list(CHART_HEADER),
        ["2024-12-24 09:30:00", "255.1"],
        ["2024-12-24 09:35:00", "255.65"],
    ]
    points, report = parse_chart_rows(rows)
    assert points[0].timestamp == dt.datetime(2024, 12, 24, 9, 30)
    assert points[1].close_price == Decimal("255.65")
    assert report.issues == []


def test_parse_chart_rows_rejects_bad_timestamp():
    rows = [list(CHART_HEADER), ["24/12/2024 09:30", "255.1"]]
    with pytest.raises(ReaderError):
        parse_chart_rows(rows)


def test_parse_index_rows_preserves_order():
    rows = [list(INDEX_HEADER), ["SPY", "590.1"], ["VOO", "542.3"], ["IVV", "593"]]
    entries, _ = parse_index_rows(rows)
    assert [e.symbol for e in entries] == ["SPY", "VOO", "IVV"]
    assert [e.price for e in entries] == [
        Decimal("590.1"),
        Decimal("542.3"),
        Decimal("593"),
    ]


def test_parse_index_rows_rejects_nan_price():
    with pytest.raises(ReaderError, match="not a finite number"):
        parse_index_rows([list(INDEX_HEADER), ["SPY", "NaN"]])


def test_parse_quote_rows():
    rows = [
        list(QUOTE_HEADER),
        ["AAPL", "260.00", "258.20", "261.5", "257.1", "usd"],
    ]
    quotes, report = parse_quote_rows(rows)
    q = quotes[0]
    assert q.symbol == "AAPL"
    assert q.price == Decimal("260.00")
    assert q.previous_close == Decimal("258.20")
    assert q.day_high == Decimal("261.5")
    assert q.day_low == Decimal("257.1")
    assert q.currency == "usd"
    assert report.issues == []


def test_parse_quote_rows_duplicate_symbol_warns():
    row = ["AAPL", "260.00", "258.20", "261.5", "257.1", "USD"]
    quotes, report = parse_quote_rows([list(QUOTE_HEADER), row, row])
    assert len(quotes) == 2
    assert "first one is used" in report.issues[0].message


def test_read_files(tmp_path):
    exec_path = write_csv(tmp_path / "executions.csv", EXEC_ROWS[0], EXEC_ROWS[1:])
    chart_path = write_csv(
        tmp_path / "chart.csv", CHART_HEADER, [["2024-12-24 09:30:00", "255"]]
    )
    index_path = write_csv(tmp_path / "sp500.csv", INDEX_HEADER, [["SPY", "590"]])
    quotes_path = write_csv(
        tmp_path / "quotes.csv",
        QUOTE_HEADER,
        [["AAPL", "260", "258", "261", "257", "USD"]],
    )

    txs, report = read_transactions(exec_path)
    assert len(txs) == 2
    assert report.source == str(exec_path)
    assert len(read_chart_points(chart_path)[0]) == 1
    assert len(read_index_entries(index_path)[0]) == 1
    assert read_quotes(quotes_path)[0][0].symbol == "AAPL"


def test_read_file_error_names_path(tmp_path):
    path = write_csv(tmp_path / "sp500.csv", INDEX_HEADER, [["SPY"]])
    with pytest.raises(ReaderError) as excinfo:
        read_index_entries(path)
    assert excinfo.value.path == str(path)
    assert str(excinfo.value).startswith(f"{path}:2:")


def test_read_empty_file_yields_no_records(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    txs, report = read_transactions(path)
    assert txs == []
    assert report.issues == []


def test_merge_reports_logs_each_issue_with_its_source(caplog):
    _, r1 = parse_transaction_rows(
        [EXEC_ROWS[0], ["e1", "d", "AAPL", "BUY", "1", "1", "2"]], source="a.csv"
    )
    row = ["AAPL", "1", "1", "1", "1", "USD"]
    _, r2 = parse_quote_rows([list(QUOTE_HEADER), row, row], source="q.csv")
    merged = merge_reports([r1, r2])
    assert len(merged.issues) == 2

    with caplog.at_level(logging.WARNING):
        merged.log_with(logging.getLogger("test"))
    assert "a.csv:2:" in caplog.text
    assert "q.csv:3:" in caplog.text


def test_parse_transactions_total_beyond_cent_precision_is_kept_with_warning():
    rows = [EXEC_ROWS[0], ["e1", "d", "AAPL", "BUY", "1", "1", "1E+30"]]
    txs, report = parse_transaction_rows(rows)
    assert txs[0].total_amount == Decimal("1E+30")
    assert len(report.issues) == 1
    assert "cannot be checked" in report.issues[0].message


def test_read_file_with_invalid_utf8_raises_reader_error(tmp_path):
    path = tmp_path / "executions.csv"
    path.write_bytes(
        ",".join(EXECUTION_HEADER).encode() + b"\ne1,d,AAPL,BUY,1,1,\xff\xfe\n"
    )
    with pytest.raises(ReaderError) as excinfo:
        read_transactions(path)
    assert excinfo.value.path == str(path)
    assert "codec can't decode" in str(excinfo.value)


def test_parse_rows_csv_syntax_error_raises_reader_error():
    def rows():
        yield list(EXECUTION_HEADER)
        raise csv.Error("field larger than field limit (131072)")

    with pytest.raises(ReaderError) as excinfo:
        parse_transaction_rows(rows())
    assert excinfo.value.line_no == 2
    assert "field limit" in str(excinfo.value)
