from __future__ import annotations
from dataclasses import dataclass
import sqlite3
import uuid

from ...errors import ValidationError
from ...utils.helpers import now_iso

PARTY_TYPES = ("customer", "supplier", "both")


@dataclass
class Customer:
    id: str
    name: str
    type: str
    phone: str | None
    email: str | None
    address: str | None
    opening_balance: float
    current_balance: float


_COLUMNS = "id, name, type, phone, email, address, opening_balance, current_balance"


class CustomersRepo:
    """Customers and suppliers (one table, told apart by `type`)."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ---- Internal helpers -------------------------------------------------

    @staticmethod
    def _normalize_text(s: str | None) -> str | None:
        if s is None:
            return None
        return s.strip()

    @staticmethod
    def _ensure_non_empty(value: str | None, field_label: str) -> None:
        if value is None or value.strip() == "":
            raise ValidationError(f"{field_label} cannot be empty.", details={"field": field_label.lower()})

    # ---- Queries ----------------------------------------------------------

    def get(self, customer_id: str) -> Customer | None:
        r = self.conn.execute(f"SELECT {_COLUMNS} FROM customers WHERE id=?", (customer_id,)).fetchone()
        return Customer(**r) if r else None

    def search(self, term: str = "", party_type: str | None = None, active_only: bool = True) -> list[Customer]:
        """
        LIKE search over name/phone/email. party_type='customer' also matches
        rows of type 'both' (same for 'supplier').
        """
        pattern = f"%{term.strip()}%"
        where = ["(name LIKE ? OR COALESCE(phone,'') LIKE ? OR COALESCE(email,'') LIKE ?)"]
        params: list[object] = [pattern, pattern, pattern]
        if active_only:
            where.append("is_active = 1")
        if party_type:
            where.append("type IN (?, 'both')")
            params.append(party_type)
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM customers WHERE {' AND '.join(where)} ORDER BY name COLLATE NOCASE",
            params,
        ).fetchall()
        return [Customer(**r) for r in rows]

    # ---- Mutations --------------------------------------------------------

    def create(
        self,
        name: str,
        *,
        party_type: str = "customer",
        phone: str | None = None,
        email: str | None = None,
        address: str | None = None,
        opening_balance: float = 0.0,
    ) -> str:
        """
        Insert a new party. current_balance starts at the opening balance.
        """
        self._ensure_non_empty(name, "Name")
        if party_type not in PARTY_TYPES:
            raise ValidationError(f"Unknown party type {party_type!r}.", details={"field": "type"})

        cid = str(uuid.uuid4())
        now = now_iso()
        with self.conn:
            self.conn.execute(
                "INSERT INTO customers(id, name, type, phone, email, address, "
                "opening_balance, current_balance, created_at, updated_at) "
                "VALUES (?,?,?,?,?,?,?,?,?,?)",
                (
                    cid,
                    self._normalize_text(name),
                    party_type,
                    self._normalize_text(phone),
                    self._normalize_text(email),
                    self._normalize_text(address),
                    float(opening_balance),
                    float(opening_balance),
                    now,
                    now,
                ),
            )
        return cid
