# shopbooks/modules/pos/cart.py
"""
In-memory POS cart and its pricing rules.

Totals are never cached: every accessor recomputes from the current lines,
so they cannot drift from the cart contents.

    line_total      = price * quantity
    line_discount   = line_total * d/100            (percentage)
                    = d * quantity                  (fixed, per unit)
    bill_discount   = (subtotal - item discounts) * d/100   (percentage)
                    = d                                     (fixed)
    tax             = sum((line_total - line_discount) * tax_rate/100)
    grand_total     = subtotal - item discounts - bill discount + tax

The bill discount is not spread back over the lines, so it does not
reduce the tax base.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict, dataclass, fields
from typing import Any, List, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from ...utils.helpers import num
from ...utils.validators import validate_discount_type

_log = logging.getLogger(__name__)


@dataclass
class PosCartItem:
    id: str
    name: str
    sale_price: float
    price: float
    quantity: float = 1.0
    discount: float = 0.0
    discount_type: str = "percentage"
    type: str = "product"
    sku: Optional[str] = None
    unit: Optional[str] = None
    tax_rate: float = 0.0
    stock_quantity: float = 0.0
    purchase_price: float = 0.0

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @property
    def line_discount(self) -> float:
        if self.discount_type == "percentage":
            return self.line_total * (self.discount / 100.0)
        return self.discount * self.quantity

    @property
    def net_amount(self) -> float:
        return self.line_total - self.line_discount

    @property
    def tax_amount(self) -> float:
        return self.net_amount * (self.tax_rate or 0.0) / 100.0


_ITEM_FIELDS = {f.name for f in fields(PosCartItem)}


def _as_mapping(obj: Any) -> Mapping:
    if obj is None or isinstance(obj, Mapping):
        return obj
    if isinstance(obj, sqlite3.Row):
        return dict(obj)
    return vars(obj)


class PosCart(QObject):
    """
    Cart state owned by one POS session. Every mutator emits `changed`.
    Quantity and price are clamped at zero; discount values are stored as
    given (range checks belong to utils.validators.validate_discount).
    """

    changed = Signal()

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.cart: List[PosCartItem] = []
        self.customer: Optional[dict] = None
        self.bill_discount: float = 0.0
        self.bill_discount_type: str = "percentage"
        self.selected_item_id: Optional[str] = None

    # ---- lookups ----

    def find(self, item_id: str) -> Optional[PosCartItem]:
        for line in self.cart:
            if line.id == item_id:
                return line
        return None

    def is_empty(self) -> bool:
        return not self.cart

    def __len__(self) -> int:
        return len(self.cart)

    # ---- mutators ----

    def add_item(self, item: Any) -> PosCartItem:
        """
        Add one unit of `item` (an Item record, an items row or a mapping
        with at least id, name and sale_price). A second add of the same id bumps quantity.
        """
        data = _as_mapping(item)
        existing = self.find(data["id"])
        if existing is not None:
            existing.quantity += 1
            line = existing
        else:
            kw = {k: v for k, v in data.items() if k in _ITEM_FIELDS}
            sale_price = num(data.get("sale_price"))
            kw.update(sale_price=sale_price, price=sale_price, quantity=1.0, discount=0.0,
                      discount_type="percentage")
            line = PosCartItem(**kw)
            self.cart.append(line)
        self.selected_item_id = line.id
        self.changed.emit()
        return line

    def remove_item(self, item_id: str) -> None:
        self.cart = [ln for ln in self.cart if ln.id != item_id]
        if self.selected_item_id == item_id:
            self.selected_item_id = None
        self.changed.emit()

    def update_quantity(self, item_id: str, quantity: float) -> None:
        """Zero is allowed and keeps the line; use remove_item to drop it."""
        line = self.find(item_id)
        if line is not None:
            line.quantity = max(0.0, float(quantity))
            self.selected_item_id = item_id
        self.changed.emit()

    def update_item_price(self, item_id: str, price: float) -> None:
        line = self.find(item_id)
        if line is not None:
            line.price = max(0.0, float(price))
            self.selected_item_id = item_id
        self.changed.emit()

    def update_item_discount(self, item_id: str, discount: float, discount_type: str) -> None:
        validate_discount_type(discount_type)
        line = self.find(item_id)
        if line is not None:
            line.discount = float(discount)
            line.discount_type = discount_type
            self.selected_item_id = item_id
        self.changed.emit()

    def set_customer(self, customer: Any) -> None:
        """Attach a customer (record, row or mapping with id and name), or None for walk-in."""
        data = _as_mapping(customer)
        self.customer = dict(data) if data is not None else None
        self.changed.emit()

    def set_bill_discount(self, discount: float, discount_type: str) -> None:
        validate_discount_type(discount_type)
        self.bill_discount = float(discount)
        self.bill_discount_type = discount_type
        self.changed.emit()

    def set_selected_item(self, item_id: Optional[str]) -> None:
        self.selected_item_id = item_id
        self.changed.emit()

    def clear_cart(self) -> None:
        """Back to an empty sale; the bill discount type is left as it was."""
        self.cart = []
        self.customer = None
        self.bill_discount = 0.0
        self.selected_item_id = None
        self.changed.emit()

    # ---- totals ----

    def subtotal(self) -> float:
        return sum(ln.line_total for ln in self.cart)

    def item_discount_total(self) -> float:
        return sum(ln.line_discount for ln in self.cart)

    def bill_discount_amount(self) -> float:
        if self.bill_discount_type == "percentage":
            return (self.subtotal() - self.item_discount_total()) * (self.bill_discount / 100.0)
        return self.bill_discount

    def discount_total(self) -> float:
        return self.item_discount_total() + self.bill_discount_amount()

    def tax_total(self) -> float:
        return sum(ln.tax_amount for ln in self.cart)

    def grand_total(self) -> float:
        return self.subtotal() - self.item_discount_total() - self.bill_discount_amount() + self.tax_total()

    # ---- persistence ----

    def to_snapshot(self) -> dict:
        """The part of the session that survives a restart; selection is not kept."""
        return {
            "cart": [asdict(ln) for ln in self.cart],
            "customer": dict(self.customer) if self.customer is not None else None,
            "bill_discount": self.bill_discount,
            "bill_discount_type": self.bill_discount_type,
        }

    def restore_snapshot(self, snapshot: Mapping) -> None:
        bill_type = snapshot.get("bill_discount_type") or "percentage"
        validate_discount_type(bill_type)
        self.cart = [
            PosCartItem(**{k: v for k, v in ln.items() if k in _ITEM_FIELDS})
            for ln in snapshot.get("cart") or []
        ]
        customer = snapshot.get("customer")
        self.customer = dict(customer) if customer else None
        self.bill_discount = num(snapshot.get("bill_discount"))
        self.bill_discount_type = bill_type
        self.selected_item_id = None
        _log.debug("restored cart with %d lines", len(self.cart))
        self.changed.emit()
