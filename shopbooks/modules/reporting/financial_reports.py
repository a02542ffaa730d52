# shopbooks/modules/reporting/financial_reports.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...constants import PAYMENT_MODE_LABELS
from ...database.repositories.reporting_repo import ReportingRepo
from ...utils.helpers import num
from .periods import DateRange


# ------------------------------ View-models ---------------------------------

@dataclass
class ProfitLossReport:
    revenue: float = 0.0
    cost_of_goods_sold: float = 0.0
    gross_profit: float = 0.0
    expenses: List[dict] = field(default_factory=list)
    total_expenses: float = 0.0
    net_profit: float = 0.0
    profit_margin: float = 0.0


@dataclass
class CashFlowReport:
    inflows: Dict[str, float] = field(default_factory=dict)
    outflows: Dict[str, float] = field(default_factory=dict)
    total_inflow: float = 0.0
    total_outflow: float = 0.0
    net_cash_flow: float = 0.0
    opening_balance: float = 0.0
    closing_balance: float = 0.0


@dataclass
class DayBook:
    date: str
    entries: List[dict] = field(default_factory=list)
    total_in: float = 0.0
    total_out: float = 0.0
    net: float = 0.0


@dataclass
class TaxSummary:
    tax_collected: float = 0.0
    tax_paid: float = 0.0
    net_tax: float = 0.0
    sales_taxable: float = 0.0
    purchases_taxable: float = 0.0


@dataclass
class CashMovementReport:
    by_mode: List[dict] = field(default_factory=list)
    total_in: float = 0.0
    total_out: float = 0.0
    net: float = 0.0
    transactions: List[dict] = field(default_factory=list)


# ------------------------------ Logic ---------------------------------------

class FinancialReports:
    """
    Profit & loss, expenses by category, cash flow, day book, tax and cash
    movement built on ReportingRepo.

    COGS is approximated by purchase invoice totals in the period; there is
    no per-sale cost valuation.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.repo = ReportingRepo(conn)

    def profit_loss(self, date_range: DateRange) -> ProfitLossReport:
        f, t = date_range.date_from, date_range.date_to
        revenue = self.repo.total_amount("sale", f, t)
        cogs = self.repo.total_amount("purchase", f, t)
        gross = revenue - cogs

        expenses = self.expenses_by_category(date_range)
        total_expenses = sum(e["amount"] for e in expenses)
        net = gross - total_expenses

        return ProfitLossReport(
            revenue=revenue,
            cost_of_goods_sold=cogs,
            gross_profit=gross,
            expenses=expenses,
            total_expenses=total_expenses,
            net_profit=net,
            profit_margin=(net / revenue * 100.0) if revenue > 0 else 0.0,
        )

    def expenses_by_category(self, date_range: DateRange) -> List[dict]:
        """Expense totals and counts per category, largest first."""
        return [
            {
                "category": r["category"],
                "amount": num(r["amount"]),
                "count": int(r["expense_count"] or 0),
            }
            for r in self.repo.expenses_by_category(date_range.date_from, date_range.date_to)
        ]

    def cash_flow(self, date_range: DateRange) -> CashFlowReport:
        f, t = date_range.date_from, date_range.date_to
        report = CashFlowReport()
        for r in self.repo.cash_flow_sources(f, t):
            amount = num(r["total"])
            if r["direction"] == "in":
                report.inflows[r["source"]] = amount
                report.total_inflow += amount
            else:
                report.outflows[r["source"]] = amount
                report.total_outflow += amount

        report.net_cash_flow = report.total_inflow - report.total_outflow
        report.opening_balance = self.repo.cash_balance_before(f)
        report.closing_balance = report.opening_balance + report.net_cash_flow
        return report

    def day_book(self, day: str) -> DayBook:
        book = DayBook(date=day)
        for r in self.repo.day_book_rows(day):
            entry = {
                "type": r["type"],
                "reference_number": r["reference_number"] or "",
                "party_name": r["party_name"] or "",
                "description": r["description"] or "",
                "amount_in": num(r["amount_in"]),
                "amount_out": num(r["amount_out"]),
            }
            book.entries.append(entry)
            book.total_in += entry["amount_in"]
            book.total_out += entry["amount_out"]
        book.net = book.total_in - book.total_out
        return book

    def tax_summary(self, date_range: DateRange) -> TaxSummary:
        r = self.repo.tax_totals(date_range.date_from, date_range.date_to)
        collected = num(r["tax_collected"])
        paid = num(r["tax_paid"])
        return TaxSummary(
            tax_collected=collected,
            tax_paid=paid,
            net_tax=collected - paid,
            sales_taxable=num(r["sales_taxable"]),
            purchases_taxable=num(r["purchases_taxable"]),
        )

    def cash_movement(self, date_range: DateRange, mode: Optional[str] = None) -> CashMovementReport:
        """
        Payments in and out grouped by payment mode.
        Modes appear in the order they are first seen.
        """
        report = CashMovementReport()
        modes: Dict[str, dict] = {}
        for r in self.repo.payments(date_range.date_from, date_range.date_to, mode):
            tx = dict(r)
            tx["amount"] = num(tx["amount"])
            report.transactions.append(tx)

            key = tx["payment_mode"] or "other"
            row = modes.get(key)
            if row is None:
                row = {
                    "mode": key,
                    "label": PAYMENT_MODE_LABELS.get(key, key.title()),
                    "in_amount": 0.0,
                    "out_amount": 0.0,
                    "net": 0.0,
                    "transaction_count": 0,
                }
                modes[key] = row
            if tx["direction"] == "in":
                row["in_amount"] += tx["amount"]
                report.total_in += tx["amount"]
            else:
                row["out_amount"] += tx["amount"]
                report.total_out += tx["amount"]
            row["net"] = row["in_amount"] - row["out_amount"]
            row["transaction_count"] += 1

        report.by_mode = list(modes.values())
        report.net = report.total_in - report.total_out
        return report
