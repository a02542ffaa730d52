# shopbooks/modules/reporting/invoice_reports.py
"""
Shared summary/register logic for sale and purchase invoices.

SalesReports and PurchaseReports are thin subclasses that pick the side
and rename the counterparty fields.
"""
from __future__ import annotations

import calendar
import sqlite3
from dataclasses import dataclass, field
from typing import List

from ...constants import TOP_N
from ...database.repositories.reporting_repo import ReportingRepo
from ...utils.helpers import num
from .periods import DateRange


@dataclass
class InvoiceSummary:
    total_amount: float = 0.0
    total_invoices: int = 0
    total_paid: float = 0.0
    total_due: float = 0.0
    average_order_value: float = 0.0
    top_parties: List[dict] = field(default_factory=list)
    top_items: List[dict] = field(default_factory=list)
    by_month: List[dict] = field(default_factory=list)


def month_label(month: str) -> str:
    """'2024-03' -> 'Mar 2024'."""
    return f"{calendar.month_abbr[int(month[5:7])]} {month[:4]}"


class InvoiceReports:
    """
    Pure computation over ReportingRepo for one document side.
    """

    kind = "sale"
    summary_cls = InvoiceSummary

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.repo = ReportingRepo(conn)

    # ---- summary ----

    def summary(self, date_range: DateRange, top_n: int = TOP_N) -> InvoiceSummary:
        f, t = date_range.date_from, date_range.date_to
        head = self.repo.invoice_totals(self.kind, f, t)
        total_amount = num(head["total_amount"])
        total_invoices = int(head["invoice_count"] or 0)

        top_parties = [
            {
                "customer_id": r["customer_id"],
                "name": r["name"],
                "amount": num(r["total"]),
                "invoice_count": int(r["invoice_count"] or 0),
            }
            for r in self.repo.top_counterparties(self.kind, f, t, top_n)
        ]
        top_items = [
            {
                "item_id": r["item_id"],
                "name": r["name"],
                "quantity": num(r["quantity"]),
                "amount": num(r["amount"]),
            }
            for r in self.repo.top_items(self.kind, f, t, top_n)
        ]
        by_month = [
            {"month": r["month"], "label": month_label(r["month"]), "amount": num(r["amount"])}
            for r in self.repo.totals_by_month(self.kind, f, t)
        ]

        return self.summary_cls(
            total_amount=total_amount,
            total_invoices=total_invoices,
            total_paid=num(head["total_paid"]),
            total_due=num(head["total_due"]),
            average_order_value=(total_amount / total_invoices) if total_invoices > 0 else 0.0,
            top_parties=top_parties,
            top_items=top_items,
            by_month=by_month,
        )

    # ---- simple grouped reports ----

    def register(self, date_range: DateRange) -> List[dict]:
        return [dict(r) for r in self.repo.register(self.kind, date_range.date_from, date_range.date_to)]

    def by_party(self, date_range: DateRange) -> List[dict]:
        """Totals per counterparty, largest first."""
        return [
            {
                "customer_id": r["customer_id"],
                "name": r["name"],
                "invoice_count": int(r["invoice_count"] or 0),
                "total": num(r["total"]),
                "paid": num(r["paid"]),
                "due": num(r["due"]),
            }
            for r in self.repo.totals_by_counterparty(self.kind, date_range.date_from, date_range.date_to)
        ]

    def by_item(self, date_range: DateRange) -> List[dict]:
        """Quantity and amount per item, largest amount first, with average unit price."""
        out: List[dict] = []
        for r in self.repo.totals_by_item(self.kind, date_range.date_from, date_range.date_to):
            qty = num(r["quantity"])
            amount = num(r["amount"])
            out.append(
                {
                    "item_id": r["item_id"],
                    "name": r["name"],
                    "quantity": qty,
                    "amount": amount,
                    "average_price": (amount / qty) if qty > 0 else 0.0,
                }
            )
        return out
