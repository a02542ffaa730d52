# shopbooks/database/repositories/items_repo.py
from __future__ import annotations
from dataclasses import dataclass
import sqlite3
import uuid

from ...errors import ValidationError
from ...utils.helpers import now_iso

ITEM_TYPES = ("product", "service")


@dataclass
class Item:
    id: str
    name: str
    sku: str | None
    type: str
    unit: str | None
    sale_price: float
    purchase_price: float
    tax_rate: float
    stock_quantity: float
    low_stock_alert: float


_COLUMNS = (
    "id, name, sku, type, unit, sale_price, purchase_price, tax_rate, "
    "stock_quantity, low_stock_alert"
)


class ItemsRepo:
    """Item catalog lookups for the POS and inventory screens."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def get(self, item_id: str) -> Item | None:
        r = self.conn.execute(f"SELECT {_COLUMNS} FROM items WHERE id=?", (item_id,)).fetchone()
        return Item(**r) if r else None

    def search(self, term: str = "", active_only: bool = True) -> list[Item]:
        """Match name or SKU; exact SKU hits sort first (barcode scans)."""
        t = term.strip()
        pattern = f"%{t}%"
        sql = (
            f"SELECT {_COLUMNS} FROM items "
            "WHERE (name LIKE ? OR COALESCE(sku,'') LIKE ?) "
            + ("AND is_active = 1 " if active_only else "")
            + "ORDER BY (COALESCE(sku,'') = ?) DESC, name COLLATE NOCASE"
        )
        rows = self.conn.execute(sql, (pattern, pattern, t)).fetchall()
        return [Item(**r) for r in rows]

    def create(
        self,
        name: str,
        *,
        sale_price: float,
        purchase_price: float = 0.0,
        item_type: str = "product",
        sku: str | None = None,
        unit: str | None = None,
        tax_rate: float = 0.0,
        stock_quantity: float = 0.0,
        low_stock_alert: float = 0.0,
    ) -> str:
        if not name or not name.strip():
            raise ValidationError("Name cannot be empty.", details={"field": "name"})
        if item_type not in ITEM_TYPES:
            raise ValidationError(f"Unknown item type {item_type!r}.", details={"field": "type"})
        if sale_price < 0 or purchase_price < 0:
            raise ValidationError("Prices cannot be negative.", details={"field": "sale_price"})

        iid = str(uuid.uuid4())
        now = now_iso()
        with self.conn:
            self.conn.execute(
                "INSERT INTO items(id, name, sku, type, unit, sale_price, purchase_price, tax_rate, "
                "stock_quantity, low_stock_alert, created_at, updated_at) "
                "VALUES (?,?,?,?,?,?,?,?,?,?,?,?)",
                (
                    iid,
                    name.strip(),
                    sku,
                    item_type,
                    unit,
                    float(sale_price),
                    float(purchase_price),
                    float(tax_rate),
                    float(stock_quantity),
                    float(low_stock_alert),
                    now,
                    now,
                ),
            )
        return iid
