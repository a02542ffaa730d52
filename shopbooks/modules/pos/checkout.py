# shopbooks/modules/pos/checkout.py
from __future__ import annotations

import logging
import sqlite3
import time
import uuid
from typing import List, Optional

from ...constants import (
    POS_INVOICE_NAME,
    POS_INVOICE_PREFIX,
    POS_RECEIPT_PREFIX,
    WALK_IN_CUSTOMER,
)
from ...database.repositories.pos_repo import (
    PosInvoiceHeader,
    PosInvoiceLine,
    PosPayment,
    PosRepo,
)
from ...errors import EmptyCartError, InsufficientStockError, TransactionFailedError
from ...utils.helpers import now_iso, timestamp_number, today_str
from ...utils.validators import validate_payment
from .cart import PosCart

_log = logging.getLogger(__name__)


class CheckoutService:
    """
    Turns the current cart into a paid sale invoice.

    Checks run before anything is written (empty cart, payment fields,
    stock). The write itself is one transaction via PosRepo.create_pos_sale;
    on any storage error nothing is kept and the cart is left untouched so
    the operator can retry.
    """

    def __init__(self, conn: sqlite3.Connection, cart: PosCart, *, user_id: Optional[str] = None) -> None:
        self.conn = conn
        self.cart = cart
        self.user_id = user_id
        self.repo = PosRepo(conn)

    # ---- checks ----

    def check_stock(self) -> None:
        """
        First product line whose quantity exceeds stock raises.
        Stock is read from the item row; the line's own snapshot is used
        only if the item no longer exists.
        """
        for line in self.cart.cart:
            if line.type != "product":
                continue
            stored = self.repo.current_stock(line.id)
            available = stored if stored is not None else float(line.stock_quantity or 0.0)
            if available - line.quantity < 0:
                raise InsufficientStockError(line.name, available)

    # ---- commit ----

    def process_transaction(self, payment_mode: str, amount_paid: float) -> str:
        if self.cart.is_empty():
            _log.warning("checkout rejected: cart is empty")
            raise EmptyCartError()

        amount = validate_payment(payment_mode, amount_paid)

        try:
            self.check_stock()
        except InsufficientStockError as e:
            _log.warning("checkout rejected: %s", e.message)
            raise

        now_ms = int(time.time() * 1000)
        invoice_id = str(uuid.uuid4())
        invoice_number = timestamp_number(POS_INVOICE_PREFIX, now_ms)
        receipt_number = timestamp_number(POS_RECEIPT_PREFIX, now_ms)
        day = today_str()
        stamp = now_iso()

        customer = self.cart.customer or {}
        customer_id = customer.get("id")
        customer_name = customer.get("name") or WALK_IN_CUSTOMER

        total = self.cart.grand_total()
        header = PosInvoiceHeader(
            id=invoice_id,
            invoice_number=invoice_number,
            invoice_name=POS_INVOICE_NAME,
            customer_id=customer_id,
            customer_name=customer_name,
            date=day,
            due_date=day,
            status="paid",
            subtotal=self.cart.subtotal(),
            tax_amount=self.cart.tax_total(),
            discount_amount=self.cart.discount_total(),
            total=total,
            amount_paid=amount,
            amount_due=max(0.0, total - amount),
            created_by=self.user_id,
            created_at=stamp,
        )
        lines: List[PosInvoiceLine] = [
            PosInvoiceLine(
                id=str(uuid.uuid4()),
                invoice_id=invoice_id,
                item_id=ln.id,
                item_name=ln.name,
                quantity=ln.quantity,
                unit=ln.unit,
                unit_price=ln.price,
                mrp=ln.sale_price,
                discount_percent=ln.discount if ln.discount_type == "percentage" else 0.0,
                tax_percent=ln.tax_rate or 0.0,
                amount=ln.line_total - ln.line_discount,
            )
            for ln in self.cart.cart
        ]
        payment = PosPayment(
            id=str(uuid.uuid4()),
            receipt_number=receipt_number,
            customer_id=customer_id,
            customer_name=customer_name,
            date=day,
            amount=amount,
            payment_mode=payment_mode,
            invoice_id=invoice_id,
            invoice_number=invoice_number,
            created_at=stamp,
        )

        _log.info("checkout %s: %d lines, total %.2f, paid %.2f", invoice_number, len(lines), total, amount)
        try:
            self.repo.create_pos_sale(header, lines, payment)
        except sqlite3.Error as e:
            _log.exception("checkout %s failed; rolled back", invoice_number)
            raise TransactionFailedError() from e

        _log.info("sale completed: invoice %s", invoice_number)
        self.cart.clear_cart()
        return invoice_id
