# shopbooks/modules/reporting/sales_reports.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .invoice_reports import InvoiceReports, InvoiceSummary
from .periods import DateRange


@dataclass
class SalesSummary(InvoiceSummary):
    @property
    def total_sales(self) -> float:
        return self.total_amount

    @property
    def top_customers(self) -> List[dict]:
        return self.top_parties


class SalesReports(InvoiceReports):
    """
    Sales summary (totals, top customers/items, monthly trend) plus the
    sales register and grouped sales reports.
    """

    kind = "sale"
    summary_cls = SalesSummary

    def by_customer(self, date_range: DateRange) -> List[dict]:
        return self.by_party(date_range)
