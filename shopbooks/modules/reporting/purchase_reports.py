# shopbooks/modules/reporting/purchase_reports.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .invoice_reports import InvoiceReports, InvoiceSummary
from .periods import DateRange


@dataclass
class PurchaseSummary(InvoiceSummary):
    @property
    def total_purchases(self) -> float:
        return self.total_amount

    @property
    def top_suppliers(self) -> List[dict]:
        return self.top_parties


class PurchaseReports(InvoiceReports):
    """Purchase-side mirror of SalesReports; suppliers live in `customers`."""

    kind = "purchase"
    summary_cls = PurchaseSummary

    def by_supplier(self, date_range: DateRange) -> List[dict]:
        return self.by_party(date_range)
