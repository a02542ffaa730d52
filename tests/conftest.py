# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - Every test gets its own in-memory database built from the real schema
# - Seed through the `seed` fixture; every helper commits, so checkout
#   rollbacks never undo fixture data
# - pytest-qt owns QApplication (use qapp/qtbot fixtures where Qt is involved)
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import sqlite3
import uuid
from typing import Iterable, Optional, Sequence, Tuple

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from shopbooks.database import get_connection  # noqa: E402


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


# ---------- Fresh database per test ----------
@pytest.fixture()
def conn():
    con = get_connection(":memory:")
    try:
        yield con
    finally:
        con.close()


def _table_snapshot(con: sqlite3.Connection, table: str) -> list[tuple]:
    return [tuple(r) for r in con.execute(f"SELECT * FROM {table} ORDER BY id")]


@pytest.fixture()
def snapshot(conn):
    """snapshot(table) -> full, ordered dump of a table for before/after comparisons."""
    return lambda table: _table_snapshot(conn, table)


# (item_id, item_name, quantity, amount)
Line = Tuple[Optional[str], str, float, float]


class Seeder:
    """Plain INSERT helpers. Every call commits."""

    def __init__(self, con: sqlite3.Connection) -> None:
        self.con = con

    @staticmethod
    def _id() -> str:
        return str(uuid.uuid4())

    def customer(
        self,
        name: str,
        *,
        party_type: str = "customer",
        opening_balance: float = 0.0,
        current_balance: Optional[float] = None,
        cid: Optional[str] = None,
    ) -> str:
        cid = cid or self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO customers(id, name, type, opening_balance, current_balance) VALUES (?,?,?,?,?)",
                (cid, name, party_type, opening_balance,
                 opening_balance if current_balance is None else current_balance),
            )
        return cid

    def item(
        self,
        name: str,
        *,
        sale_price: float = 0.0,
        purchase_price: float = 0.0,
        stock: float = 0.0,
        low_stock_alert: float = 0.0,
        item_type: str = "product",
        tax_rate: float = 0.0,
        is_active: int = 1,
        iid: Optional[str] = None,
    ) -> str:
        iid = iid or self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO items(id, name, sku, type, sale_price, purchase_price, tax_rate, "
                "stock_quantity, low_stock_alert, is_active) VALUES (?,?,?,?,?,?,?,?,?,?)",
                (iid, name, f"SKU-{name}", item_type, sale_price, purchase_price, tax_rate,
                 stock, low_stock_alert, is_active),
            )
        return iid

    def _invoice(
        self,
        head: str,
        lines_table: str,
        *,
        customer_id: Optional[str],
        customer_name: str,
        date: str,
        total: float,
        paid: float,
        due: Optional[float],
        due_date: Optional[str],
        status: str,
        subtotal: Optional[float],
        tax: float,
        number: Optional[str],
        lines: Iterable[Line],
        created_at: Optional[str],
    ) -> str:
        inv_id = self._id()
        with self.con:
            self.con.execute(
                f"INSERT INTO {head}(id, invoice_number, customer_id, customer_name, date, due_date, "
                "status, subtotal, tax_amount, total, amount_paid, amount_due, created_at) "
                "VALUES (?,?,?,?,?,?,?,?,?,?,?,?,?)",
                (
                    inv_id,
                    number or f"INV-{inv_id[:6]}",
                    customer_id,
                    customer_name,
                    date,
                    due_date,
                    status,
                    total - tax if subtotal is None else subtotal,
                    tax,
                    total,
                    paid,
                    total - paid if due is None else due,
                    created_at or f"{date}T10:00:00",
                ),
            )
            for item_id, item_name, qty, amount in lines:
                self.con.execute(
                    f"INSERT INTO {lines_table}(id, invoice_id, item_id, item_name, quantity, unit_price, amount) "
                    "VALUES (?,?,?,?,?,?,?)",
                    (self._id(), inv_id, item_id, item_name, qty, amount / qty if qty else 0.0, amount),
                )
        return inv_id

    def sale(self, customer_id, customer_name, date, total, *, paid=0.0, due=None, due_date=None,
             status="unpaid", subtotal=None, tax=0.0, number=None, lines: Sequence[Line] = (),
             created_at=None) -> str:
        return self._invoice(
            "sale_invoices", "sale_invoice_items",
            customer_id=customer_id, customer_name=customer_name, date=date, total=total, paid=paid,
            due=due, due_date=due_date, status=status, subtotal=subtotal, tax=tax, number=number,
            lines=lines, created_at=created_at,
        )

    def purchase(self, supplier_id, supplier_name, date, total, *, paid=0.0, due=None, due_date=None,
                 status="unpaid", subtotal=None, tax=0.0, number=None, lines: Sequence[Line] = (),
                 created_at=None) -> str:
        return self._invoice(
            "purchase_invoices", "purchase_invoice_items",
            customer_id=supplier_id, customer_name=supplier_name, date=date, total=total, paid=paid,
            due=due, due_date=due_date, status=status, subtotal=subtotal, tax=tax, number=number,
            lines=lines, created_at=created_at,
        )

    def payment_in(self, customer_id, customer_name, date, amount, *, mode="cash", number=None,
                   created_at=None) -> str:
        pid = self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO payment_ins(id, receipt_number, customer_id, customer_name, date, amount, "
                "payment_mode, created_at) VALUES (?,?,?,?,?,?,?,?)",
                (pid, number or f"RCT-{pid[:6]}", customer_id, customer_name, date, amount, mode,
                 created_at or f"{date}T11:00:00"),
            )
        return pid

    def payment_out(self, supplier_id, supplier_name, date, amount, *, mode="cash", number=None,
                    created_at=None) -> str:
        pid = self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO payment_outs(id, payment_number, customer_id, customer_name, date, amount, "
                "payment_mode, created_at) VALUES (?,?,?,?,?,?,?,?)",
                (pid, number or f"PAY-{pid[:6]}", supplier_id, supplier_name, date, amount, mode,
                 created_at or f"{date}T12:00:00"),
            )
        return pid

    def credit_note(self, customer_id, customer_name, date, total, *, number=None, status="issued") -> str:
        cid = self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO credit_notes(id, credit_note_number, customer_id, customer_name, date, "
                "total, status) VALUES (?,?,?,?,?,?,?)",
                (cid, number or f"CN-{cid[:6]}", customer_id, customer_name, date, total, status),
            )
        return cid

    def expense(self, date, amount, *, category="other", mode="cash", paid_to=None, number=None,
                created_at=None) -> str:
        eid = self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO expenses(id, expense_number, category, paid_to_name, date, amount, "
                "payment_mode, created_at) VALUES (?,?,?,?,?,?,?,?)",
                (eid, number or f"EXP-{eid[:6]}", category, paid_to, date, amount, mode,
                 created_at or f"{date}T13:00:00"),
            )
        return eid

    def cash(self, date, tx_type, amount) -> str:
        tid = self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO cash_transactions(id, date, type, amount) VALUES (?,?,?,?)",
                (tid, date, tx_type, amount),
            )
        return tid

    def bank(self, date, tx_type, amount) -> str:
        tid = self._id()
        with self.con:
            self.con.execute(
                "INSERT INTO bank_transactions(id, date, type, amount) VALUES (?,?,?,?)",
                (tid, date, tx_type, amount),
            )
        return tid


@pytest.fixture()
def seed(conn) -> Seeder:
    return Seeder(conn)
