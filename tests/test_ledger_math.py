# tests/test_ledger_math.py
from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from shopbooks.modules.reporting.ledger_math import (
    aggregate_aging,
    classify_aging_bucket,
    compute_running_ledger,
)

REF = date(2024, 6, 30)


# ---------------------------------------------------------------------------
# A) Running ledger
# ---------------------------------------------------------------------------

def test_a1_running_ledger_example() -> None:
    """A1: opening 100, +500, -300 gives balances 100/600/300 and matching totals."""
    led = compute_running_ledger(
        100,
        [
            {"date": "2024-01-02", "debit": 500, "credit": 0},
            {"date": "2024-01-05", "debit": 0, "credit": 300},
        ],
    )
    assert [e["balance"] for e in led.entries] == [100, 600, 300]
    assert led.total_debit == 500
    assert led.total_credit == 300
    assert led.closing_balance == 300
    assert led.entries[0]["description"] == "Opening Balance"
    assert led.entries[0]["debit"] == 100 and led.entries[0]["credit"] == 0


def test_a2_running_ledger_prefix_sums() -> None:
    """A2: every balance equals opening plus the prefix sum of debit - credit."""
    txs = [{"debit": d, "credit": c} for d, c in [(10, 0), (0, 4.5), (7.25, 1), (0, 20), (3, 3)]]
    led = compute_running_ledger(-12.5, txs)
    running = -12.5
    for tx, entry in zip(txs, led.entries[1:]):
        running += tx["debit"] - tx["credit"]
        assert entry["balance"] == pytest.approx(running)
    assert led.closing_balance == pytest.approx(led.entries[-1]["balance"])


def test_a3_empty_and_negative_opening() -> None:
    """A3: no transactions -> only the opening row; a negative opening shows as credit."""
    led = compute_running_ledger(-50, [])
    assert len(led.entries) == 1
    assert led.entries[0]["credit"] == 50
    assert led.entries[0]["debit"] == 0
    assert led.closing_balance == -50
    assert led.total_debit == 0 and led.total_credit == 0


def test_a4_nulls_count_as_zero_and_order_is_kept() -> None:
    """A4: missing debit/credit are 0 and entries keep input order and extra fields."""
    txs = [
        {"reference_number": "B", "debit": None, "credit": 5},
        {"reference_number": "A", "debit": 8},
    ]
    led = compute_running_ledger(0, txs)
    assert [e["reference_number"] for e in led.entries[1:]] == ["B", "A"]
    assert [e["balance"] for e in led.entries[1:]] == [-5, 3]
    # input dicts are not mutated
    assert "balance" not in txs[0]


# ---------------------------------------------------------------------------
# B) Aging buckets
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "days, bucket",
    [
        (0, "Current"),
        (1, "1-30 Days"),
        (30, "1-30 Days"),
        (31, "31-60 Days"),
        (60, "31-60 Days"),
        (61, "61-90 Days"),
        (90, "61-90 Days"),
        (91, "90+ Days"),
        (-5, "Current"),
    ],
)
def test_b1_bucket_boundaries(days: int, bucket: str) -> None:
    """B1: exact day-count boundaries; future due dates are Current."""
    assert classify_aging_bucket(REF, REF - timedelta(days=days)) == bucket


def test_b2_time_of_day_is_ignored() -> None:
    """B2: timestamps late in the day do not shift the bucket."""
    ref = datetime(2024, 6, 30, 0, 1)
    assert classify_aging_bucket(ref, "2024-05-31T23:59:59") == "1-30 Days"
    assert classify_aging_bucket("2024-06-30T08:00:00", "2024-06-30T23:00:00") == "Current"


# ---------------------------------------------------------------------------
# C) Aging aggregate
# ---------------------------------------------------------------------------

def _invoices() -> list[dict]:
    return [
        {"customer_id": "c1", "customer_name": "Acme", "date": "2024-06-20", "due_date": "2024-06-29",
         "amount_due": 100, "status": "unpaid"},
        {"customer_id": "c2", "customer_name": "Bolt", "date": "2024-01-01", "due_date": None,
         "amount_due": 400, "status": "overdue"},
        {"customer_id": "c1", "customer_name": "Acme", "date": "2024-04-01", "due_date": "2024-04-15",
         "amount_due": 250, "status": "partial"},
        {"customer_id": "c3", "customer_name": "Cyan", "date": "2024-06-01", "due_date": "2024-07-10",
         "amount_due": 0, "status": "paid"},
        {"customer_id": "c3", "customer_name": "Cyan", "date": "2024-06-01", "due_date": "2024-07-10",
         "amount_due": 999, "status": "cancelled"},
        {"customer_id": "c4", "customer_name": "Dune", "date": "2024-06-25", "due_date": "2024-07-25",
         "amount_due": 350, "status": "sent"},
    ]


def test_c1_aggregate_buckets_and_breakdown() -> None:
    """C1: skips cancelled/zero-due, falls back to invoice date, sorts parties by total desc."""
    rep = aggregate_aging(_invoices(), REF)

    assert rep.buckets == {
        "Current": 350,
        "1-30 Days": 100,
        "31-60 Days": 0,
        "61-90 Days": 250,
        "90+ Days": 400,
    }
    assert rep.total_due == 1100
    assert rep.invoice_count == 4
    assert [r["counterparty_id"] for r in rep.by_counterparty] == ["c2", "c1", "c4"]

    acme = rep.by_counterparty[1]
    assert acme["name"] == "Acme"
    assert acme["total_due"] == 350
    assert acme["days_1_30"] == 100
    assert acme["days_61_90"] == 250


def test_c2_ties_keep_first_seen_order() -> None:
    """C2: equal totals keep the order in which counterparties first appear."""
    invs = [
        {"customer_id": "z", "customer_name": "Z", "date": "2024-06-01", "amount_due": 10},
        {"customer_id": "a", "customer_name": "A", "date": "2024-06-01", "amount_due": 10},
    ]
    rep = aggregate_aging(invs, REF)
    assert [r["counterparty_id"] for r in rep.by_counterparty] == ["z", "a"]


def test_c3_aggregate_is_idempotent() -> None:
    """C3: same input, same reference date -> identical output."""
    assert aggregate_aging(_invoices(), REF) == aggregate_aging(_invoices(), REF)


def test_c4_empty_input() -> None:
    """C4: nothing outstanding -> zero buckets, no parties."""
    rep = aggregate_aging([], REF)
    assert rep.total_due == 0
    assert all(v == 0 for v in rep.buckets.values())
    assert rep.by_counterparty == []
