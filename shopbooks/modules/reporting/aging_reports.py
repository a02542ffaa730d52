# shopbooks/modules/reporting/aging_reports.py
from __future__ import annotations

import sqlite3
from typing import List, Optional

from ...database.repositories.reporting_repo import ReportingRepo
from ...utils.helpers import DateLike, num, today_str
from .ledger_math import AgingReport, aggregate_aging


class AgingReports:
    """
    Receivables (sale side) and payables (purchase side) aging as of a date.
    Bucketing lives in ledger_math.aggregate_aging; this class only feeds it.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.repo = ReportingRepo(conn)

    def _aging(self, kind: str, as_of: Optional[DateLike]) -> AgingReport:
        invoices = [dict(r) for r in self.repo.open_invoices(kind)]
        return aggregate_aging(invoices, as_of or today_str())

    def receivables(self, as_of: Optional[DateLike] = None) -> AgingReport:
        return self._aging("sale", as_of)

    def payables(self, as_of: Optional[DateLike] = None) -> AgingReport:
        return self._aging("purchase", as_of)

    # ---- flat summaries ----

    def _outstanding(self, kind: str, as_of: Optional[str]) -> List[dict]:
        return [
            {
                "customer_id": r["customer_id"],
                "name": r["name"],
                "invoice_count": int(r["invoice_count"] or 0),
                "total_due": num(r["total_due"]),
                "overdue": num(r["overdue"]),
            }
            for r in self.repo.outstanding_by_counterparty(kind, as_of or today_str())
        ]

    def receivables_summary(self, as_of: Optional[str] = None) -> List[dict]:
        """Per customer: total due, amount past its due date, open invoice count."""
        return self._outstanding("sale", as_of)

    def payables_summary(self, as_of: Optional[str] = None) -> List[dict]:
        return self._outstanding("purchase", as_of)

    def customer_balances(self, include_suppliers: bool = False) -> List[dict]:
        types = ("customer", "both", "supplier") if include_suppliers else ("customer", "both")
        return [
            {
                "customer_id": r["id"],
                "name": r["name"],
                "type": r["type"],
                "phone": r["phone"] or "",
                "opening_balance": num(r["opening_balance"]),
                "current_balance": num(r["current_balance"]),
                "credit_limit": r["credit_limit"],
            }
            for r in self.repo.customer_balances(types)
        ]
