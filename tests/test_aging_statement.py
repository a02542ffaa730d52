# tests/test_aging_statement.py
from __future__ import annotations

import pytest

from shopbooks.modules.reporting.aging_reports import AgingReports
from shopbooks.modules.reporting.customer_statement import CustomerStatementReports
from shopbooks.modules.reporting.periods import DateRange

AS_OF = "2024-06-30"


@pytest.fixture()
def parties(seed):
    acme = seed.customer("Acme", opening_balance=100, current_balance=900)
    bolt = seed.customer("Bolt", current_balance=50)
    paper = seed.customer("Paper Co", party_type="supplier", current_balance=-300)
    return {"acme": acme, "bolt": bolt, "paper": paper}


def test_a1_receivables_from_sale_invoices(conn, seed, parties) -> None:
    """A1: open sale invoices are bucketed; paid and cancelled ones drop out."""
    seed.sale(parties["acme"], "Acme", "2024-06-01", 500, paid=100, due_date="2024-06-20", status="partial")
    seed.sale(parties["acme"], "Acme", "2024-01-01", 300, due_date="2024-01-31")
    seed.sale(parties["bolt"], "Bolt", "2024-06-29", 200)
    seed.sale(parties["bolt"], "Bolt", "2024-03-01", 999, status="cancelled")
    seed.sale(parties["bolt"], "Bolt", "2024-03-01", 400, paid=400, status="paid")

    rep = AgingReports(conn).receivables(AS_OF)
    assert rep.total_due == 900
    assert rep.buckets["1-30 Days"] == 600
    assert rep.buckets["90+ Days"] == 300
    assert rep.by_counterparty[0]["name"] == "Acme"
    assert rep.by_counterparty[0]["total_due"] == 700


def test_a2_payables_use_purchase_invoices(conn, seed, parties) -> None:
    """A2: payables age the purchase side only."""
    seed.purchase(parties["paper"], "Paper Co", "2024-05-01", 250, due_date="2024-05-15")
    seed.sale(parties["acme"], "Acme", "2024-05-01", 1000)
    rep = AgingReports(conn).payables(AS_OF)
    assert rep.total_due == 250
    assert rep.buckets["31-60 Days"] == 250


def test_b1_outstanding_summaries(conn, seed, parties) -> None:
    """B1: per party total due, overdue part and invoice count."""
    seed.sale(parties["acme"], "Acme", "2024-06-01", 500, due_date="2024-06-10")
    seed.sale(parties["acme"], "Acme", "2024-06-25", 200, due_date="2024-07-25")
    seed.sale(parties["bolt"], "Bolt", "2024-06-01", 50)

    rows = AgingReports(conn).receivables_summary(AS_OF)
    assert rows[0] == {"customer_id": parties["acme"], "name": "Acme", "invoice_count": 2,
                       "total_due": 700, "overdue": 500}
    assert rows[1]["overdue"] == 0
    assert AgingReports(conn).payables_summary(AS_OF) == []


def test_b2_customer_balances(conn, parties) -> None:
    """B2: customers by current balance; suppliers only on request."""
    rep = AgingReports(conn)
    assert [r["name"] for r in rep.customer_balances()] == ["Acme", "Bolt"]
    assert [r["name"] for r in rep.customer_balances(include_suppliers=True)] == ["Acme", "Bolt", "Paper Co"]


def _activity(seed, acme) -> None:
    seed.sale(acme, "Acme", "2023-12-15", 400, number="S-0")
    seed.payment_in(acme, "Acme", "2023-12-20", 150, number="R-0")
    seed.sale(acme, "Acme", "2024-01-05", 500, number="S-1")
    seed.payment_in(acme, "Acme", "2024-01-05", 200, number="R-1")
    seed.credit_note(acme, "Acme", "2024-01-10", 50, number="CN-1")
    seed.credit_note(acme, "Acme", "2024-01-11", 70, number="CN-X", status="cancelled")
    seed.sale(acme, "Acme", "2024-02-01", 999, number="S-2")


def test_c1_statement_uses_stored_opening_balance(conn, seed, parties) -> None:
    """C1: default opening is the stored field; invoices debit, payments and credit notes credit."""
    _activity(seed, parties["acme"])
    st = CustomerStatementReports(conn).statement(parties["acme"], DateRange("2024-01-01", "2024-01-31"))

    assert st.opening_balance == 100
    assert [(e["reference_number"], e["balance"]) for e in st.entries] == [
        ("", 100),
        ("S-1", 600),
        ("R-1", 400),
        ("CN-1", 350),
    ]
    assert st.total_debit == 500
    assert st.total_credit == 250
    assert st.closing_balance == 350
    assert st.customer["name"] == "Acme"


def test_c2_statement_carry_forward(conn, seed, parties) -> None:
    """C2: carry_forward adds the net of everything before the period to the opening."""
    _activity(seed, parties["acme"])
    st = CustomerStatementReports(conn).statement(
        parties["acme"], DateRange("2024-01-01", "2024-01-31"), carry_forward=True
    )
    assert st.opening_balance == 350
    assert st.closing_balance == 600


def test_c3_unknown_customer(conn) -> None:
    """C3: no such customer -> None rather than an empty statement."""
    assert CustomerStatementReports(conn).statement("nope", DateRange("2024-01-01", "2024-01-31")) is None
