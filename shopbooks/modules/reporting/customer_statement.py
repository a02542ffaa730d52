# shopbooks/modules/reporting/customer_statement.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import List, Optional

from ...database.repositories.reporting_repo import ReportingRepo
from ...utils.helpers import num
from .ledger_math import compute_running_ledger
from .periods import DateRange


@dataclass
class CustomerStatement:
    customer: dict
    date_from: str
    date_to: str
    opening_balance: float = 0.0
    entries: List[dict] = field(default_factory=list)
    total_debit: float = 0.0
    total_credit: float = 0.0
    closing_balance: float = 0.0


class CustomerStatementReports:
    """
    Period statement for one customer: invoices debit, payments and credit
    notes credit, seeded with an opening balance.

    By default the opening balance is the customer's stored opening_balance
    field, regardless of the period start. With carry_forward=True the net
    of everything dated before the period is added to it, which gives the
    true balance brought forward.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.repo = ReportingRepo(conn)

    def statement(
        self,
        customer_id: str,
        date_range: DateRange,
        *,
        carry_forward: bool = False,
    ) -> Optional[CustomerStatement]:
        cust = self.repo.customer(customer_id)
        if cust is None:
            return None

        opening = num(cust["opening_balance"])
        if carry_forward:
            opening += self.repo.customer_net_before(customer_id, date_range.date_from)

        activity = [
            dict(r) for r in self.repo.customer_activity(customer_id, date_range.date_from, date_range.date_to)
        ]
        ledger = compute_running_ledger(opening, activity)

        return CustomerStatement(
            customer=dict(cust),
            date_from=date_range.date_from,
            date_to=date_range.date_to,
            opening_balance=opening,
            entries=ledger.entries,
            total_debit=ledger.total_debit,
            total_credit=ledger.total_credit,
            closing_balance=ledger.closing_balance,
        )
