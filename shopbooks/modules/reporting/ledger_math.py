# shopbooks/modules/reporting/ledger_math.py
"""
Pure ledger arithmetic shared by statements and aging reports.

Nothing here touches the database; callers hand in plain dicts (or
sqlite3.Row-like mappings) and get dataclasses back.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from ...constants import AGING_BUCKETS
from ...utils.helpers import DateLike, num, to_date

OPENING_BALANCE_LABEL = "Opening Balance"

# bucket label -> key used in the per-counterparty breakdown dicts
BUCKET_KEYS: Dict[str, str] = {
    "Current": "current",
    "1-30 Days": "days_1_30",
    "31-60 Days": "days_31_60",
    "61-90 Days": "days_61_90",
    "90+ Days": "days_90_plus",
}


# ------------------------------ Running ledger ------------------------------

@dataclass
class RunningLedger:
    entries: List[dict]
    total_debit: float
    total_credit: float
    closing_balance: float


def compute_running_ledger(opening_balance: float, transactions: Iterable[Mapping]) -> RunningLedger:
    """
    Fold transactions into a running balance.

    The first entry is a synthetic opening row carrying the opening balance
    as a debit (positive) or credit (negative). Each following entry is a
    copy of the input transaction plus `balance` after applying
    debit - credit. Input order is preserved; missing debit/credit count as 0.
    Totals cover the transactions only, not the opening row.
    """
    opening = num(opening_balance)
    entries: List[dict] = [
        {
            "date": None,
            "type": "opening",
            "reference_number": "",
            "description": OPENING_BALANCE_LABEL,
            "debit": max(opening, 0.0),
            "credit": max(-opening, 0.0),
            "balance": opening,
        }
    ]

    balance = opening
    total_debit = 0.0
    total_credit = 0.0
    for tx in transactions:
        debit = num(tx.get("debit"))
        credit = num(tx.get("credit"))
        balance += debit - credit
        total_debit += debit
        total_credit += credit
        entry = dict(tx)
        entry["debit"] = debit
        entry["credit"] = credit
        entry["balance"] = balance
        entries.append(entry)

    return RunningLedger(
        entries=entries,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=balance,
    )


# ------------------------------ Aging ---------------------------------------

def days_between(reference_date: DateLike, other: DateLike) -> int:
    """Whole calendar days from `other` to `reference_date`; time of day ignored."""
    return (to_date(reference_date) - to_date(other)).days


def classify_aging_bucket(reference_date: DateLike, due_or_invoice_date: DateLike) -> str:
    days = days_between(reference_date, due_or_invoice_date)
    if days > 90:
        return "90+ Days"
    if days > 60:
        return "61-90 Days"
    if days > 30:
        return "31-60 Days"
    if days > 0:
        return "1-30 Days"
    return "Current"


@dataclass
class AgingReport:
    buckets: Dict[str, float] = field(default_factory=lambda: {b: 0.0 for b in AGING_BUCKETS})
    total_due: float = 0.0
    by_counterparty: List[dict] = field(default_factory=list)
    invoice_count: int = 0


def _empty_breakdown(counterparty_id, name: str) -> dict:
    row = {"counterparty_id": counterparty_id, "name": name, "total_due": 0.0}
    for key in BUCKET_KEYS.values():
        row[key] = 0.0
    return row


def aggregate_aging(invoices: Iterable[Mapping], reference_date: DateLike) -> AgingReport:
    """
    Distribute outstanding invoice amounts into aging buckets.

    Invoices with nothing due or status 'cancelled' are skipped. Age is
    measured from due_date, or from the invoice date when no due date is set.
    Counterparties come back sorted by total due, largest first; ties keep
    the order in which they were first seen.
    """
    report = AgingReport()
    breakdown: Dict[object, dict] = {}
    order: List[object] = []

    for inv in invoices:
        amount_due = num(inv.get("amount_due"))
        if amount_due <= 0 or inv.get("status") == "cancelled":
            continue

        anchor: Optional[str] = inv.get("due_date") or inv.get("date")
        bucket = classify_aging_bucket(reference_date, anchor)
        report.buckets[bucket] += amount_due
        report.total_due += amount_due
        report.invoice_count += 1

        cp_id = inv.get("customer_id")
        row = breakdown.get(cp_id)
        if row is None:
            row = _empty_breakdown(cp_id, inv.get("customer_name") or "")
            breakdown[cp_id] = row
            order.append(cp_id)
        row[BUCKET_KEYS[bucket]] += amount_due
        row["total_due"] += amount_due

    # sorted() is stable, so equal totals stay in first-seen order
    report.by_counterparty = sorted(
        (breakdown[k] for k in order), key=lambda r: r["total_due"], reverse=True
    )
    return report
