from .analyzer import (
    BuyRoiLine,
    DashboardPayload,
    PortfolioAnalyzer,
    build_dashboard_payload,
    compute_buy_roi,
    compute_sell_roi,
    resolve_current_price,
)
from .dashboard_sink import DashboardSink, ExcelDashboardSink
from .metrics import (
    RISK_FREE_RATE,
    calculate_roi,
    calculate_sharpe_ratio,
    calculate_volatility,
)
from .sources import (
    CsvExecutionSource,
    CsvMarketDataSource,
    ExecutionSource,
    MarketDataSource,
)

__all__ = [
    "BuyRoiLine",
    "DashboardPayload",
    "PortfolioAnalyzer",
    "build_dashboard_payload",
    "compute_buy_roi",
    "compute_sell_roi",
    "resolve_current_price",
    "DashboardSink",
    "ExcelDashboardSink",
    "RISK_FREE_RATE",
    "calculate_roi",
    "calculate_sharpe_ratio",
    "calculate_volatility",
    "CsvExecutionSource",
    "CsvMarketDataSource",
    "ExecutionSource",
    "MarketDataSource",
]
