# shopbooks/database/repositories/reporting_repo.py
from __future__ import annotations

import sqlite3
from typing import Optional

# Sale and purchase documents share a shape; reports pick the side by kind.
_DOC_TABLES = {
    "sale": ("sale_invoices", "sale_invoice_items"),
    "purchase": ("purchase_invoices", "purchase_invoice_items"),
}


def _tables(kind: str) -> tuple[str, str]:
    try:
        return _DOC_TABLES[kind]
    except KeyError:
        raise ValueError(f"Unknown document kind {kind!r}") from None


class ReportingRepo:
    """
    Read-only SQL for the report aggregators.

    Every method returns plain rows (or a scalar); the folding into
    view-models happens in modules/reporting. Dates are ISO strings and are
    compared as strings, so date ranges are inclusive on both ends.
    Cancelled documents are filtered out everywhere a status exists.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ----------------------------------------------------------------------
    # --------------------------- INVOICE TOTALS ---------------------------
    # ----------------------------------------------------------------------

    def invoice_totals(self, kind: str, date_from: str, date_to: str) -> sqlite3.Row:
        head, _ = _tables(kind)
        sql = f"""
        SELECT
          COUNT(*)                             AS invoice_count,
          COALESCE(SUM(total), 0.0)            AS total_amount,
          COALESCE(SUM(amount_paid), 0.0)      AS total_paid,
          COALESCE(SUM(amount_due), 0.0)       AS total_due
        FROM {head}
        WHERE status <> 'cancelled'
          AND date >= ? AND date <= ?
        """
        return self.conn.execute(sql, (date_from, date_to)).fetchone()

    def top_counterparties(self, kind: str, date_from: str, date_to: str, limit: int) -> list[sqlite3.Row]:
        head, _ = _tables(kind)
        sql = f"""
        SELECT
          customer_id,
          COALESCE(customer_name, '')          AS name,
          COALESCE(SUM(total), 0.0)            AS total,
          COUNT(*)                             AS invoice_count
        FROM {head}
        WHERE status <> 'cancelled'
          AND date >= ? AND date <= ?
        GROUP BY customer_id, customer_name
        ORDER BY total DESC
        LIMIT ?
        """
        return list(self.conn.execute(sql, (date_from, date_to, limit)))

    def top_items(self, kind: str, date_from: str, date_to: str, limit: int) -> list[sqlite3.Row]:
        head, lines = _tables(kind)
        sql = f"""
        SELECT
          li.item_id,
          COALESCE(li.item_name, '')           AS name,
          COALESCE(SUM(li.quantity), 0.0)      AS quantity,
          COALESCE(SUM(li.amount), 0.0)        AS amount
        FROM {lines} li
        JOIN {head} h ON h.id = li.invoice_id
        WHERE h.status <> 'cancelled'
          AND h.date >= ? AND h.date <= ?
        GROUP BY li.item_id, li.item_name
        ORDER BY amount DESC
        LIMIT ?
        """
        return list(self.conn.execute(sql, (date_from, date_to, limit)))

    def totals_by_month(self, kind: str, date_from: str, date_to: str) -> list[sqlite3.Row]:
        head, _ = _tables(kind)
        sql = f"""
        SELECT
          substr(date, 1, 7)                   AS month,
          COALESCE(SUM(total), 0.0)            AS amount
        FROM {head}
        WHERE status <> 'cancelled'
          AND date >= ? AND date <= ?
        GROUP BY substr(date, 1, 7)
        ORDER BY month ASC
        """
        return list(self.conn.execute(sql, (date_from, date_to)))

    def total_amount(self, kind: str, date_from: str, date_to: str) -> float:
        row = self.invoice_totals(kind, date_from, date_to)
        return float(row["total_amount"] or 0.0)

    # ----------------------------------------------------------------------
    # ------------------------- REGISTERS & GROUPS -------------------------
    # ----------------------------------------------------------------------

    def register(self, kind: str, date_from: str, date_to: str) -> list[sqlite3.Row]:
        head, _ = _tables(kind)
        sql = f"""
        SELECT
          id, invoice_number, date, due_date, customer_id,
          COALESCE(customer_name, '') AS customer_name,
          status, subtotal, tax_amount, discount_amount,
          total, amount_paid, amount_due
        FROM {head}
        WHERE status <> 'cancelled'
          AND date >= ? AND date <= ?
        ORDER BY date DESC, invoice_number DESC
        """
        return list(self.conn.execute(sql, (date_from, date_to)))

    def totals_by_counterparty(self, kind: str, date_from: str, date_to: str) -> list[sqlite3.Row]:
        head, _ = _tables(kind)
        sql = f"""
        SELECT
          customer_id,
          COALESCE(customer_name, '')          AS name,
          COUNT(*)                             AS invoice_count,
          COALESCE(SUM(total), 0.0)            AS total,
          COALESCE(SUM(amount_paid), 0.0)      AS paid,
          COALESCE(SUM(amount_due), 0.0)       AS due
        FROM {head}
        WHERE status <> 'cancelled'
          AND date >= ? AND date <= ?
        GROUP BY customer_id, customer_name
        ORDER BY total DESC
        """
        return list(self.conn.execute(sql, (date_from, date_to)))

    def totals_by_item(self, kind: str, date_from: str, date_to: str) -> list[sqlite3.Row]:
        head, lines = _tables(kind)
        sql = f"""
        SELECT
          li.item_id,
          COALESCE(li.item_name, '')           AS name,
          COALESCE(SUM(li.quantity), 0.0)      AS quantity,
          COALESCE(SUM(li.amount), 0.0)        AS amount
        FROM {lines} li
        JOIN {head} h ON h.id = li.invoice_id
        WHERE h.status <> 'cancelled'
          AND h.date >= ? AND h.date <= ?
        GROUP BY li.item_id, li.item_name
        ORDER BY amount DESC
        """
        return list(self.conn.execute(sql, (date_from, date_to)))

    def item_quantities(self, kind: str, date_from: str, date_to: str) -> list[sqlite3.Row]:
        """item_id -> quantity moved by non-cancelled documents of `kind` in range."""
        head, lines = _tables(kind)
        sql = f"""
        SELECT li.item_id, COALESCE(SUM(li.quantity), 0.0) AS quantity
        FROM {lines} li
        JOIN {head} h ON h.id = li.invoice_id
        WHERE h.status <> 'cancelled'
          AND h.date >= ? AND h.date <= ?
          AND li.item_id IS NOT NULL
        GROUP BY li.item_id
        """
        return list(self.conn.execute(sql, (date_from, date_to)))

    # ----------------------------------------------------------------------
    # ------------------------------- AGING --------------------------------
    # ----------------------------------------------------------------------

    def open_invoices(self, kind: str) -> list[sqlite3.Row]:
        """Invoices with something still due, oldest first."""
        head, _ = _tables(kind)
        sql = f"""
        SELECT
          id, invoice_number, customer_id,
          COALESCE(customer_name, '') AS customer_name,
          date, due_date, status, total, amount_paid, amount_due
        FROM {head}
        WHERE status <> 'cancelled'
          AND amount_due > 0
        ORDER BY date ASC, invoice_number ASC
        """
        return list(self.conn.execute(sql))

    def outstanding_by_counterparty(self, kind: str, as_of: str) -> list[sqlite3.Row]:
        """Total due, overdue part (due_date before as_of) and open invoice count per counterparty."""
        head, _ = _tables(kind)
        sql = f"""
        SELECT
          customer_id,
          COALESCE(customer_name, '') AS name,
          COUNT(*) AS invoice_count,
          COALESCE(SUM(amount_due), 0.0) AS total_due,
          COALESCE(SUM(CASE WHEN due_date IS NOT NULL AND due_date < ?
                            THEN amount_due ELSE 0 END), 0.0) AS overdue
        FROM {head}
        WHERE status <> 'cancelled'
          AND amount_due > 0
        GROUP BY customer_id, customer_name
        ORDER BY total_due DESC
        """
        return list(self.conn.execute(sql, (as_of,)))

    def customer_balances(self, party_types: tuple[str, ...]) -> list[sqlite3.Row]:
        marks = ",".join("?" for _ in party_types)
        sql = f"""
        SELECT id, name, type, phone,
               COALESCE(opening_balance, 0.0) AS opening_balance,
               COALESCE(current_balance, 0.0) AS current_balance,
               credit_limit
        FROM customers
        WHERE is_active = 1
          AND type IN ({marks})
        ORDER BY current_balance DESC, name COLLATE NOCASE
        """
        return list(self.conn.execute(sql, party_types))

    # ----------------------------------------------------------------------
    # ------------------------------ FINANCIALS ----------------------------
    # ----------------------------------------------------------------------

    def expenses_by_category(self, date_from: str, date_to: str) -> list[sqlite3.Row]:
        sql = """
        SELECT
          COALESCE(category, 'other')          AS category,
          COALESCE(SUM(amount), 0.0)           AS amount,
          COUNT(*)                             AS expense_count
        FROM expenses
        WHERE date >= ? AND date <= ?
        GROUP BY COALESCE(category, 'other')
        ORDER BY amount DESC
        """
        return list(self.conn.execute(sql, (date_from, date_to)))

    def cash_flow_sources(self, date_from: str, date_to: str) -> list[sqlite3.Row]:
        """
        One row per money source: direction ('in'/'out'), source, total.
        Rows with a non-positive amount do not count towards the totals.
        """
        sql = """
        SELECT 'in' AS direction, 'customer_payments' AS source, COALESCE(SUM(amount), 0.0) AS total
          FROM payment_ins WHERE date >= :f AND date <= :t AND amount > 0
        UNION ALL
        SELECT 'in', 'cash_in', COALESCE(SUM(amount), 0.0)
          FROM cash_transactions WHERE type = 'in' AND date >= :f AND date <= :t AND amount > 0
        UNION ALL
        SELECT 'in', 'bank_deposits', COALESCE(SUM(amount), 0.0)
          FROM bank_transactions WHERE type = 'deposit' AND date >= :f AND date <= :t AND amount > 0
        UNION ALL
        SELECT 'out', 'vendor_payments', COALESCE(SUM(amount), 0.0)
          FROM payment_outs WHERE date >= :f AND date <= :t AND amount > 0
        UNION ALL
        SELECT 'out', 'expenses', COALESCE(SUM(amount), 0.0)
          FROM expenses WHERE date >= :f AND date <= :t AND amount > 0
        UNION ALL
        SELECT 'out', 'cash_out', COALESCE(SUM(amount), 0.0)
          FROM cash_transactions WHERE type = 'out' AND date >= :f AND date <= :t AND amount > 0
        UNION ALL
        SELECT 'out', 'bank_withdrawals', COALESCE(SUM(amount), 0.0)
          FROM bank_transactions WHERE type = 'withdrawal' AND date >= :f AND date <= :t AND amount > 0
        """
        return list(self.conn.execute(sql, {"f": date_from, "t": date_to}))

    def cash_balance_before(self, before: str) -> float:
        """Net of cash-book entries dated strictly before `before`; adjustments are signed."""
        sql = """
        SELECT COALESCE(SUM(
                 CASE type
                   WHEN 'in'  THEN amount
                   WHEN 'out' THEN -amount
                   ELSE amount
                 END), 0.0) AS balance
        FROM cash_transactions
        WHERE date < ?
        """
        row = self.conn.execute(sql, (before,)).fetchone()
        return float(row["balance"] or 0.0)

    def tax_totals(self, date_from: str, date_to: str) -> sqlite3.Row:
        sql = """
        SELECT
          (SELECT COALESCE(SUM(subtotal), 0.0) FROM sale_invoices
            WHERE status <> 'cancelled' AND date >= :f AND date <= :t)   AS sales_taxable,
          (SELECT COALESCE(SUM(tax_amount), 0.0) FROM sale_invoices
            WHERE status <> 'cancelled' AND date >= :f AND date <= :t)   AS tax_collected,
          (SELECT COALESCE(SUM(subtotal), 0.0) FROM purchase_invoices
            WHERE status <> 'cancelled' AND date >= :f AND date <= :t)   AS purchases_taxable,
          (SELECT COALESCE(SUM(tax_amount), 0.0) FROM purchase_invoices
            WHERE status <> 'cancelled' AND date >= :f AND date <= :t)   AS tax_paid
        """
        return self.conn.execute(sql, {"f": date_from, "t": date_to}).fetchone()

    def day_book_rows(self, day: str) -> list[sqlite3.Row]:
        """All money-moving documents of one day with their direction."""
        sql = """
        SELECT 'sale' AS type, invoice_number AS reference_number,
               COALESCE(customer_name, '') AS party_name,
               'Sale invoice' AS description,
               total AS amount_in, 0.0 AS amount_out, created_at
          FROM sale_invoices WHERE date = :d AND status <> 'cancelled'
        UNION ALL
        SELECT 'purchase', invoice_number, COALESCE(customer_name, ''),
               'Purchase invoice', 0.0, total, created_at
          FROM purchase_invoices WHERE date = :d AND status <> 'cancelled'
        UNION ALL
        SELECT 'payment_in', receipt_number, COALESCE(customer_name, ''),
               'Payment received', amount, 0.0, created_at
          FROM payment_ins WHERE date = :d
        UNION ALL
        SELECT 'payment_out', payment_number, COALESCE(customer_name, ''),
               'Payment made', 0.0, amount, created_at
          FROM payment_outs WHERE date = :d
        UNION ALL
        SELECT 'expense', COALESCE(expense_number, ''),
               COALESCE(paid_to_name, customer_name, ''),
               COALESCE(description, category), 0.0, amount, created_at
          FROM expenses WHERE date = :d
        ORDER BY created_at ASC
        """
        return list(self.conn.execute(sql, {"d": day}))

    def payments(self, date_from: str, date_to: str, mode: Optional[str] = None) -> list[sqlite3.Row]:
        """Payments in and out in range, optionally restricted to one payment mode."""
        mode_where = " AND payment_mode = :m " if mode else ""
        sql = f"""
        SELECT 'in' AS direction, id, receipt_number AS reference_number,
               COALESCE(customer_name, '') AS party_name,
               date, amount, payment_mode
          FROM payment_ins WHERE date >= :f AND date <= :t {mode_where}
        UNION ALL
        SELECT 'out', id, payment_number, COALESCE(customer_name, ''),
               date, amount, payment_mode
          FROM payment_outs WHERE date >= :f AND date <= :t {mode_where}
        ORDER BY date ASC, reference_number ASC
        """
        return list(self.conn.execute(sql, {"f": date_from, "t": date_to, "m": mode}))

    # ----------------------------------------------------------------------
    # ------------------------- CUSTOMER STATEMENT -------------------------
    # ----------------------------------------------------------------------

    def customer(self, customer_id: str) -> Optional[sqlite3.Row]:
        sql = """
        SELECT id, name, type, phone, email, address,
               COALESCE(opening_balance, 0.0) AS opening_balance,
               COALESCE(current_balance, 0.0) AS current_balance
        FROM customers WHERE id = ?
        """
        return self.conn.execute(sql, (customer_id,)).fetchone()

    # invoices debit the customer; payments and credit notes credit them
    _CUSTOMER_ACTIVITY = """
        SELECT 0 AS seq, date, 'invoice' AS type, invoice_number AS reference_number,
               'Sale invoice' AS description, total AS debit, 0.0 AS credit
          FROM sale_invoices
         WHERE customer_id = :c AND status <> 'cancelled'
        UNION ALL
        SELECT 1, date, 'payment', receipt_number,
               'Payment received', 0.0, amount
          FROM payment_ins
         WHERE customer_id = :c
        UNION ALL
        SELECT 2, date, 'credit_note', credit_note_number,
               COALESCE(reason, 'Credit note'), 0.0, total
          FROM credit_notes
         WHERE customer_id = :c AND status <> 'cancelled'
    """

    def customer_activity(self, customer_id: str, date_from: str, date_to: str) -> list[sqlite3.Row]:
        sql = f"""
        SELECT date, type, reference_number, description, debit, credit
        FROM ({self._CUSTOMER_ACTIVITY}) a
        WHERE a.date >= :f AND a.date <= :t
        ORDER BY a.date ASC, a.seq ASC, a.reference_number ASC
        """
        return list(self.conn.execute(sql, {"c": customer_id, "f": date_from, "t": date_to}))

    def customer_net_before(self, customer_id: str, before: str) -> float:
        sql = f"""
        SELECT COALESCE(SUM(debit - credit), 0.0) AS net
        FROM ({self._CUSTOMER_ACTIVITY}) a
        WHERE a.date < :b
        """
        row = self.conn.execute(sql, {"c": customer_id, "b": before}).fetchone()
        return float(row["net"] or 0.0)

    # ----------------------------------------------------------------------
    # ------------------------------ INVENTORY -----------------------------
    # ----------------------------------------------------------------------

    def active_items(self) -> list[sqlite3.Row]:
        sql = """
        SELECT
          i.id, i.name, COALESCE(i.sku, '') AS sku, i.type,
          COALESCE(c.name, '') AS category,
          COALESCE(i.unit, '') AS unit,
          COALESCE(i.stock_quantity, 0.0)  AS stock_quantity,
          COALESCE(i.low_stock_alert, 0.0) AS low_stock_alert,
          COALESCE(i.purchase_price, 0.0)  AS purchase_price,
          COALESCE(i.sale_price, 0.0)      AS sale_price
        FROM items i
        LEFT JOIN categories c ON c.id = i.category_id
        WHERE i.is_active = 1
        ORDER BY i.name COLLATE NOCASE
        """
        return list(self.conn.execute(sql))

    def low_stock_items(self) -> list[sqlite3.Row]:
        sql = """
        SELECT
          id, name, COALESCE(sku, '') AS sku,
          COALESCE(stock_quantity, 0.0)  AS stock_quantity,
          COALESCE(low_stock_alert, 0.0) AS low_stock_alert,
          COALESCE(purchase_price, 0.0)  AS purchase_price
        FROM items
        WHERE is_active = 1
          AND type = 'product'
          AND COALESCE(stock_quantity, 0.0) <= COALESCE(low_stock_alert, 0.0)
        ORDER BY (COALESCE(low_stock_alert, 0.0) - COALESCE(stock_quantity, 0.0)) DESC,
                 name COLLATE NOCASE
        """
        return list(self.conn.execute(sql))

    def item_sales_with_cost(self, date_from: str, date_to: str) -> list[sqlite3.Row]:
        """Per item sold in range: quantity, revenue and the item's current purchase price."""
        sql = """
        SELECT
          li.item_id,
          COALESCE(i.name, li.item_name, '')   AS name,
          COALESCE(SUM(li.quantity), 0.0)      AS quantity_sold,
          COALESCE(SUM(li.amount), 0.0)        AS revenue,
          COALESCE(i.purchase_price, 0.0)      AS purchase_price
        FROM sale_invoice_items li
        JOIN sale_invoices h ON h.id = li.invoice_id
        LEFT JOIN items i ON i.id = li.item_id
        WHERE h.status <> 'cancelled'
          AND h.date >= ? AND h.date <= ?
        GROUP BY li.item_id
        ORDER BY revenue DESC
        """
        return list(self.conn.execute(sql, (date_from, date_to)))
