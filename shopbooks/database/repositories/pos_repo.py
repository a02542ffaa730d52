# shopbooks/database/repositories/pos_repo.py
from __future__ import annotations
from dataclasses import dataclass
import sqlite3
from typing import Iterable, Optional


@dataclass
class PosInvoiceHeader:
    id: str
    invoice_number: str
    invoice_name: str
    customer_id: str | None
    customer_name: str
    date: str
    due_date: str
    status: str
    subtotal: float
    tax_amount: float
    discount_amount: float
    total: float
    amount_paid: float
    amount_due: float
    created_by: str | None
    created_at: str


@dataclass
class PosInvoiceLine:
    id: str
    invoice_id: str
    item_id: str
    item_name: str
    quantity: float
    unit: str | None
    unit_price: float
    mrp: float
    discount_percent: float
    tax_percent: float
    amount: float


@dataclass
class PosPayment:
    id: str
    receipt_number: str
    customer_id: str | None
    customer_name: str
    date: str
    amount: float
    payment_mode: str
    invoice_id: str
    invoice_number: str
    created_at: str


class PosRepo:
    """
    Write side of a POS sale.

    create_pos_sale() is all-or-nothing: the header, every line, every stock
    decrement and the payment row commit together or not at all.
    """

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def current_stock(self, item_id: str) -> Optional[float]:
        """Stored stock for an item, or None if the item row does not exist."""
        row = self.conn.execute("SELECT stock_quantity FROM items WHERE id=?", (item_id,)).fetchone()
        if row is None:
            return None
        return float(row["stock_quantity"] or 0.0)

    def get_invoice(self, invoice_id: str) -> Optional[sqlite3.Row]:
        return self.conn.execute("SELECT * FROM sale_invoices WHERE id=?", (invoice_id,)).fetchone()

    def list_invoice_lines(self, invoice_id: str) -> list[sqlite3.Row]:
        return self.conn.execute(
            "SELECT * FROM sale_invoice_items WHERE invoice_id=? ORDER BY rowid", (invoice_id,)
        ).fetchall()

    def list_invoice_payments(self, invoice_id: str) -> list[sqlite3.Row]:
        return self.conn.execute(
            "SELECT * FROM payment_ins WHERE invoice_id=? ORDER BY rowid", (invoice_id,)
        ).fetchall()

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def create_pos_sale(
        self,
        header: PosInvoiceHeader,
        lines: Iterable[PosInvoiceLine],
        payment: PosPayment,
    ) -> None:
        with self.conn:
            self._insert_header(header)
            for ln in lines:
                self._insert_line(ln)
                self._decrement_stock(ln.item_id, ln.quantity, header.created_at)
            self._insert_payment(payment)

    def _insert_header(self, h: PosInvoiceHeader) -> None:
        self.conn.execute(
            """
            INSERT INTO sale_invoices(
              id, invoice_number, invoice_name, customer_id, customer_name,
              date, due_date, status, subtotal, tax_amount, discount_amount,
              total, amount_paid, amount_due, created_by, created_at, updated_at
            ) VALUES (?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?)
            """,
            (
                h.id,
                h.invoice_number,
                h.invoice_name,
                h.customer_id,
                h.customer_name,
                h.date,
                h.due_date,
                h.status,
                h.subtotal,
                h.tax_amount,
                h.discount_amount,
                h.total,
                h.amount_paid,
                h.amount_due,
                h.created_by,
                h.created_at,
                h.created_at,
            ),
        )

    def _insert_line(self, ln: PosInvoiceLine) -> None:
        self.conn.execute(
            """
            INSERT INTO sale_invoice_items(
              id, invoice_id, item_id, item_name, quantity, unit,
              unit_price, mrp, discount_percent, tax_percent, amount
            ) VALUES (?,?,?,?,?,?,?,?,?,?,?)
            """,
            (
                ln.id,
                ln.invoice_id,
                ln.item_id,
                ln.item_name,
                ln.quantity,
                ln.unit,
                ln.unit_price,
                ln.mrp,
                ln.discount_percent,
                ln.tax_percent,
                ln.amount,
            ),
        )

    def _decrement_stock(self, item_id: str, quantity: float, now: str) -> None:
        self.conn.execute(
            "UPDATE items SET stock_quantity = stock_quantity - ?, updated_at = ? WHERE id = ?",
            (quantity, now, item_id),
        )

    def _insert_payment(self, p: PosPayment) -> None:
        self.conn.execute(
            """
            INSERT INTO payment_ins(
              id, receipt_number, customer_id, customer_name, date, amount,
              payment_mode, invoice_id, invoice_number, created_at, updated_at
            ) VALUES (?,?,?,?,?,?,?,?,?,?,?)
            """,
            (
                p.id,
                p.receipt_number,
                p.customer_id,
                p.customer_name,
                p.date,
                p.amount,
                p.payment_mode,
                p.invoice_id,
                p.invoice_number,
                p.created_at,
                p.created_at,
            ),
        )
