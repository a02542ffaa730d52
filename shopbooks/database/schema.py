from __future__ import annotations

import logging
import sqlite3
import sys
from pathlib import Path

_log = logging.getLogger(__name__)

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== PARTIES ======================== */

/* customers and suppliers share one table; type tells them apart */
CREATE TABLE IF NOT EXISTS customers (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    type            TEXT NOT NULL DEFAULT 'customer'
                    CHECK (type IN ('customer','supplier','both')),
    phone           TEXT,
    email           TEXT,
    tax_id          TEXT,
    address         TEXT,
    opening_balance REAL NOT NULL DEFAULT 0,
    current_balance REAL NOT NULL DEFAULT 0,
    credit_limit    REAL,
    credit_days     INTEGER,
    notes           TEXT,
    is_active       INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1)),
    created_at      TEXT,
    updated_at      TEXT
);
CREATE INDEX IF NOT EXISTS idx_customers_name ON customers(name);

/* ======================== ITEMS ======================== */

CREATE TABLE IF NOT EXISTS categories (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    description TEXT
);

CREATE TABLE IF NOT EXISTS items (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    sku             TEXT,
    type            TEXT NOT NULL DEFAULT 'product' CHECK (type IN ('product','service')),
    category_id     TEXT,
    unit            TEXT,
    sale_price      REAL NOT NULL DEFAULT 0,
    purchase_price  REAL NOT NULL DEFAULT 0,
    tax_rate        REAL NOT NULL DEFAULT 0,
    stock_quantity  REAL NOT NULL DEFAULT 0,
    low_stock_alert REAL NOT NULL DEFAULT 0,
    is_active       INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1)),
    created_at      TEXT,
    updated_at      TEXT,
    FOREIGN KEY (category_id) REFERENCES categories(id)
);
CREATE INDEX IF NOT EXISTS idx_items_name ON items(name);

/* ======================== SALES ======================== */

CREATE TABLE IF NOT EXISTS sale_invoices (
    id              TEXT PRIMARY KEY,
    invoice_number  TEXT NOT NULL,
    invoice_name    TEXT,
    customer_id     TEXT,
    customer_name   TEXT,
    date            TEXT NOT NULL,
    due_date        TEXT,
    status          TEXT NOT NULL DEFAULT 'draft'
                    CHECK (status IN ('draft','sent','paid','partial','unpaid','overdue','cancelled')),
    subtotal        REAL NOT NULL DEFAULT 0,
    tax_amount      REAL NOT NULL DEFAULT 0,
    discount_amount REAL NOT NULL DEFAULT 0,
    total           REAL NOT NULL DEFAULT 0,
    amount_paid     REAL NOT NULL DEFAULT 0,
    amount_due      REAL NOT NULL DEFAULT 0,
    notes           TEXT,
    created_by      TEXT,
    created_at      TEXT,
    updated_at      TEXT
);
CREATE INDEX IF NOT EXISTS idx_sale_invoices_date     ON sale_invoices(date);
CREATE INDEX IF NOT EXISTS idx_sale_invoices_customer ON sale_invoices(customer_id);

CREATE TABLE IF NOT EXISTS sale_invoice_items (
    id               TEXT PRIMARY KEY,
    invoice_id       TEXT NOT NULL,
    item_id          TEXT,
    item_name        TEXT,
    quantity         REAL NOT NULL DEFAULT 0,
    unit             TEXT,
    unit_price       REAL NOT NULL DEFAULT 0,
    mrp              REAL,
    discount_percent REAL NOT NULL DEFAULT 0,
    tax_percent      REAL NOT NULL DEFAULT 0,
    amount           REAL NOT NULL DEFAULT 0,
    FOREIGN KEY (invoice_id) REFERENCES sale_invoices(id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_sale_invoice_items_invoice ON sale_invoice_items(invoice_id);
CREATE INDEX IF NOT EXISTS idx_sale_invoice_items_item    ON sale_invoice_items(item_id);

CREATE TABLE IF NOT EXISTS payment_ins (
    id               TEXT PRIMARY KEY,
    receipt_number   TEXT NOT NULL,
    customer_id      TEXT,
    customer_name    TEXT,
    date             TEXT NOT NULL,
    amount           REAL NOT NULL DEFAULT 0 CHECK (amount >= 0),
    payment_mode     TEXT NOT NULL DEFAULT 'cash',
    reference_number TEXT,
    invoice_id       TEXT,
    invoice_number   TEXT,
    notes            TEXT,
    created_at       TEXT,
    updated_at       TEXT
);
CREATE INDEX IF NOT EXISTS idx_payment_ins_date     ON payment_ins(date);
CREATE INDEX IF NOT EXISTS idx_payment_ins_customer ON payment_ins(customer_id);

CREATE TABLE IF NOT EXISTS credit_notes (
    id                 TEXT PRIMARY KEY,
    credit_note_number TEXT NOT NULL,
    customer_id        TEXT,
    customer_name      TEXT,
    date               TEXT NOT NULL,
    invoice_id         TEXT,
    invoice_number     TEXT,
    reason             TEXT,
    subtotal           REAL NOT NULL DEFAULT 0,
    tax_amount         REAL NOT NULL DEFAULT 0,
    total              REAL NOT NULL DEFAULT 0,
    status             TEXT NOT NULL DEFAULT 'issued',
    notes              TEXT,
    created_at         TEXT,
    updated_at         TEXT
);
CREATE INDEX IF NOT EXISTS idx_credit_notes_customer ON credit_notes(customer_id);

/* ======================== PURCHASES ======================== */

/* customer_id/customer_name reference the supplier row in customers */
CREATE TABLE IF NOT EXISTS purchase_invoices (
    id                      TEXT PRIMARY KEY,
    invoice_number          TEXT NOT NULL,
    supplier_invoice_number TEXT,
    customer_id             TEXT,
    customer_name           TEXT,
    date                    TEXT NOT NULL,
    due_date                TEXT,
    status                  TEXT NOT NULL DEFAULT 'draft'
                            CHECK (status IN ('draft','received','paid','partial','unpaid','overdue','cancelled')),
    subtotal                REAL NOT NULL DEFAULT 0,
    tax_amount              REAL NOT NULL DEFAULT 0,
    discount_amount         REAL NOT NULL DEFAULT 0,
    total                   REAL NOT NULL DEFAULT 0,
    amount_paid             REAL NOT NULL DEFAULT 0,
    amount_due              REAL NOT NULL DEFAULT 0,
    notes                   TEXT,
    created_at              TEXT,
    updated_at              TEXT
);
CREATE INDEX IF NOT EXISTS idx_purchase_invoices_date ON purchase_invoices(date);

CREATE TABLE IF NOT EXISTS purchase_invoice_items (
    id               TEXT PRIMARY KEY,
    invoice_id       TEXT NOT NULL,
    item_id          TEXT,
    item_name        TEXT,
    quantity         REAL NOT NULL DEFAULT 0,
    unit             TEXT,
    unit_price       REAL NOT NULL DEFAULT 0,
    mrp              REAL,
    discount_percent REAL NOT NULL DEFAULT 0,
    tax_percent      REAL NOT NULL DEFAULT 0,
    amount           REAL NOT NULL DEFAULT 0,
    FOREIGN KEY (invoice_id) REFERENCES purchase_invoices(id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_purchase_invoice_items_invoice ON purchase_invoice_items(invoice_id);

CREATE TABLE IF NOT EXISTS payment_outs (
    id               TEXT PRIMARY KEY,
    payment_number   TEXT NOT NULL,
    customer_id      TEXT,
    customer_name    TEXT,
    date             TEXT NOT NULL,
    amount           REAL NOT NULL DEFAULT 0 CHECK (amount >= 0),
    payment_mode     TEXT NOT NULL DEFAULT 'cash',
    reference_number TEXT,
    invoice_id       TEXT,
    invoice_number   TEXT,
    notes            TEXT,
    created_at       TEXT,
    updated_at       TEXT
);
CREATE INDEX IF NOT EXISTS idx_payment_outs_date ON payment_outs(date);

/* ======================== EXPENSES ======================== */

CREATE TABLE IF NOT EXISTS expenses (
    id               TEXT PRIMARY KEY,
    expense_number   TEXT,
    category         TEXT NOT NULL DEFAULT 'other',
    customer_id      TEXT,
    customer_name    TEXT,
    paid_to_name     TEXT,
    date             TEXT NOT NULL,
    amount           REAL NOT NULL DEFAULT 0 CHECK (amount >= 0),
    payment_mode     TEXT NOT NULL DEFAULT 'cash',
    reference_number TEXT,
    description      TEXT,
    notes            TEXT,
    created_at       TEXT,
    updated_at       TEXT
);
CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);

/* ======================== CASH & BANK ======================== */

CREATE TABLE IF NOT EXISTS cash_transactions (
    id                     TEXT PRIMARY KEY,
    date                   TEXT NOT NULL,
    type                   TEXT NOT NULL CHECK (type IN ('in','out','adjustment')),
    amount                 REAL NOT NULL DEFAULT 0,
    description            TEXT,
    category               TEXT,
    related_customer_id    TEXT,
    related_customer_name  TEXT,
    related_invoice_id     TEXT,
    related_invoice_number TEXT,
    balance                REAL,
    created_at             TEXT
);
CREATE INDEX IF NOT EXISTS idx_cash_transactions_date ON cash_transactions(date);

CREATE TABLE IF NOT EXISTS bank_accounts (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    bank_name       TEXT,
    account_number  TEXT,
    account_type    TEXT NOT NULL DEFAULT 'checking',
    opening_balance REAL NOT NULL DEFAULT 0,
    current_balance REAL NOT NULL DEFAULT 0,
    is_active       INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1)),
    created_at      TEXT,
    updated_at      TEXT
);

CREATE TABLE IF NOT EXISTS bank_transactions (
    id                    TEXT PRIMARY KEY,
    account_id            TEXT,
    date                  TEXT NOT NULL,
    type                  TEXT NOT NULL CHECK (type IN ('deposit','withdrawal','transfer')),
    amount                REAL NOT NULL DEFAULT 0,
    description           TEXT,
    reference_number      TEXT,
    related_customer_id   TEXT,
    related_customer_name TEXT,
    balance               REAL,
    created_at            TEXT,
    FOREIGN KEY (account_id) REFERENCES bank_accounts(id)
);
CREATE INDEX IF NOT EXISTS idx_bank_transactions_date ON bank_transactions(date);

/* ======================== APP STATE ======================== */

/* key-value snapshots (e.g. the open POS cart) */
CREATE TABLE IF NOT EXISTS app_state (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT
);
"""


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply the (idempotent) schema on an open connection."""
    conn.executescript(SQL)


def init_schema(db_path: Path | str = "shopbooks.db") -> None:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        apply_schema(conn)
        conn.commit()
    finally:
        conn.close()
    _log.info("schema applied to %s", db_path)


if __name__ == "__main__":
    from ..config import DB_PATH

    target = sys.argv[1] if len(sys.argv) > 1 else DB_PATH
    init_schema(target)
