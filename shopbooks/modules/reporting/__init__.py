# shopbooks/modules/reporting/__init__.py
"""
Report aggregators. Each class takes an open sqlite3 connection and
returns plain view-model dataclasses; see query.ReportQuery for the
screen-facing wrapper.
"""
from .aging_reports import AgingReports
from .customer_statement import CustomerStatement, CustomerStatementReports
from .financial_reports import (
    CashFlowReport,
    CashMovementReport,
    DayBook,
    FinancialReports,
    ProfitLossReport,
    TaxSummary,
)
from .inventory_reports import InventoryReports, StockSummary
from .ledger_math import (
    AgingReport,
    RunningLedger,
    aggregate_aging,
    classify_aging_bucket,
    compute_running_ledger,
)
from .periods import DateRange, date_range_for_period
from .purchase_reports import PurchaseReports, PurchaseSummary
from .query import ReportQuery, ReportResult
from .sales_reports import SalesReports, SalesSummary

__all__ = [
    "AgingReport",
    "AgingReports",
    "CashFlowReport",
    "CashMovementReport",
    "CustomerStatement",
    "CustomerStatementReports",
    "DateRange",
    "DayBook",
    "FinancialReports",
    "InventoryReports",
    "ProfitLossReport",
    "PurchaseReports",
    "PurchaseSummary",
    "ReportQuery",
    "ReportResult",
    "RunningLedger",
    "SalesReports",
    "SalesSummary",
    "StockSummary",
    "TaxSummary",
    "aggregate_aging",
    "classify_aging_bucket",
    "compute_running_ledger",
    "date_range_for_period",
]
