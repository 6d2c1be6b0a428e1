from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from openpyxl import Workbook
from openpyxl.chart import LineChart, Reference
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .analyzer import DashboardPayload

PLACEHOLDER = "N/A"

LABELS = {
    "sheet": {
        "summary": "Summary",
        "roi": "ROI",
        "benchmark": "Benchmark",
    },
    "summary": {
        "metric": "Metric",
        "value": "Value",
        "sharpe": "Sharpe Ratio",
        "volatility": "Volatility",
        "average_roi": "Average ROI (%)",
        "transactions": "Transactions",
        "buys": "BUY Transactions",
    },
    "roi": {
        "index": "#",
        "date": "Date",
        "roi": "ROI (%)",
        "cumulative": "Cumulative ROI (%)",
    },
    "benchmark": {
        "index": "Index",
        "portfolio": "Portfolio ROI (%)",
        "benchmark": "Benchmark Price",
    },
}

_PCT_FMT = "0.00"
_PRICE_FMT = "#,##0.00"
_RATIO_FMT = "0.0000"


def format_ratio(value: float | None) -> str:
    """Render a headline ratio with four decimals, or the N/A placeholder."""
    return PLACEHOLDER if value is None else f"{value:.4f}"


class DashboardSink(Protocol):
    def write(self, payload: DashboardPayload) -> Path:  # returns written file path
        ...


@dataclass
class ExcelDashboardSink:
    out_path: Path

    def write(self, payload: DashboardPayload) -> Path:
        out_path = Path(self.out_path)
        wb = Workbook()

        # Remove the default sheet
        wb.remove(wb.active)

        self._write_summary(
            wb.create_sheet(title=LABELS["sheet"]["summary"]), payload
        )
        self._write_roi(wb.create_sheet(title=LABELS["sheet"]["roi"]), payload)
        self._write_benchmark(
            wb.create_sheet(title=LABELS["sheet"]["benchmark"]), payload
        )

        for ws in wb.worksheets:
            _autosize(ws)

        out_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(out_path)
        return out_path

    def _write_summary(self, ws: Worksheet, payload: DashboardPayload) -> None:
        labels = LABELS["summary"]
        ws.append([labels["metric"], labels["value"]])

        def ratio_row(label: str, value: float | None, fmt: str) -> None:
            ws.append([label, PLACEHOLDER if value is None else value])
            if value is not None:
                ws.cell(row=ws.max_row, column=2).number_format = fmt

        ratio_row(labels["sharpe"], payload.sharpe_ratio, _RATIO_FMT)
        ratio_row(labels["volatility"], payload.volatility, _RATIO_FMT)
        ratio_row(labels["average_roi"], payload.average_roi, _PCT_FMT)
        ws.append([labels["transactions"], len(payload.dates)])
        ws.append([labels["buys"], len(payload.roi_series)])

    def _write_roi(self, ws: Worksheet, payload: DashboardPayload) -> None:
        labels = LABELS["roi"]
        ws.append(
            [labels["index"], labels["date"], labels["roi"], labels["cumulative"]]
        )
        for i, (roi, cumulative) in enumerate(
            zip(payload.roi_series, payload.cumulative_roi_series), start=1
        ):
            date = payload.roi_dates[i - 1] if i <= len(payload.roi_dates) else None
            ws.append([i, date, roi, cumulative])
            r = ws.max_row
            ws.cell(row=r, column=3).number_format = _PCT_FMT
            ws.cell(row=r, column=4).number_format = _PCT_FMT

        if not payload.roi_series:
            return
        last = ws.max_row
        categories = Reference(ws, min_col=2, min_row=2, max_row=last)
        ws.add_chart(
            _line_chart(
                "ROI per BUY", labels["date"], labels["roi"], ws, 3, last, categories
            ),
            "F2",
        )
        ws.add_chart(
            _line_chart(
                "Cumulative ROI",
                labels["date"],
                labels["cumulative"],
                ws,
                4,
                last,
                categories,
            ),
            "F20",
        )

    def _write_benchmark(self, ws: Worksheet, payload: DashboardPayload) -> None:
        # Series are compared by position only; there is no date alignment.
        labels = LABELS["benchmark"]
        ws.append([labels["index"], labels["portfolio"], labels["benchmark"]])
        rows = max(len(payload.roi_series), len(payload.benchmark_series))
        for i in range(rows):
            roi = payload.roi_series[i] if i < len(payload.roi_series) else None
            bench = (
                float(payload.benchmark_series[i])
                if i < len(payload.benchmark_series)
                else None
            )
            ws.append([i, roi, bench])
            r = ws.max_row
            ws.cell(row=r, column=2).number_format = _PCT_FMT
            ws.cell(row=r, column=3).number_format = _PRICE_FMT

        if rows == 0:
            return
        last = ws.max_row
        chart = _line_chart(
            "Portfolio vs Benchmark",
            "Index position",
            labels["portfolio"],
            ws,
            2,
            last,
            Reference(ws, min_col=1, min_row=2, max_row=last),
        )
        chart.add_data(
            Reference(ws, min_col=3, min_row=1, max_row=last), titles_from_data=True
        )
        ws.add_chart(chart, "E2")


def _line_chart(
    title: str,
    x_title: str,
    y_title: str,
    ws: Worksheet,
    column: int,
    last_row: int,
    categories: Reference,
) -> LineChart:
    chart = LineChart()
    chart.title = title
    chart.x_axis.title = x_title
    chart.y_axis.title = y_title
    chart.add_data(
        Reference(ws, min_col=column, min_row=1, max_row=last_row),
        titles_from_data=True,
    )
    chart.set_categories(categories)
    return chart


def _autosize(sheet: Worksheet, max_width: int = 60, min_width: int = 10) -> None:
    for col in range(1, sheet.max_column + 1):
        max_len = 0
        for row in range(1, sheet.max_row + 1):
            v = sheet.cell(row=row, column=col).value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        width = min(max_width, max(min_width, max_len + 2))
        sheet.column_dimensions[get_column_letter(col)].width = width
