# tests/test_pos_cart.py
from __future__ import annotations

import pytest

from shopbooks.errors import ValidationError
from shopbooks.modules.pos.cart import PosCart
from shopbooks.utils.validators import validate_discount

PEN = {"id": "i-pen", "name": "Pen", "sale_price": 10.0, "tax_rate": 10.0, "stock_quantity": 50, "type": "product"}
INK = {"id": "i-ink", "name": "Ink", "sale_price": 25.0, "tax_rate": 0.0, "stock_quantity": 5, "type": "product"}
FIX = {"id": "i-fix", "name": "Repair", "sale_price": 40.0, "tax_rate": 5.0, "type": "service"}


@pytest.fixture()
def cart(app) -> PosCart:
    return PosCart()


def _identity_holds(c: PosCart) -> None:
    assert c.grand_total() == pytest.approx(c.subtotal() - c.discount_total() + c.tax_total(), abs=1e-6)


# ---------------------------------------------------------------------------
# A) Line mutations
# ---------------------------------------------------------------------------

def test_a1_add_item_appends_then_increments(cart: PosCart) -> None:
    """A1: first add creates a line at sale price; second add bumps quantity; both select it."""
    line = cart.add_item(PEN)
    assert line.quantity == 1
    assert line.price == 10.0
    assert line.discount == 0 and line.discount_type == "percentage"
    assert cart.selected_item_id == "i-pen"

    cart.add_item(INK)
    assert cart.selected_item_id == "i-ink"
    cart.add_item(PEN)
    assert len(cart) == 2
    assert cart.find("i-pen").quantity == 2
    assert cart.selected_item_id == "i-pen"


def test_a2_remove_item_clears_selection(cart: PosCart) -> None:
    """A2: removing the selected line clears the selection; removing another keeps it."""
    cart.add_item(PEN)
    cart.add_item(INK)
    cart.remove_item("i-pen")
    assert cart.selected_item_id == "i-ink"
    cart.remove_item("i-ink")
    assert cart.selected_item_id is None
    assert cart.is_empty()


def test_a3_quantity_and_price_are_clamped(cart: PosCart) -> None:
    """A3: negative quantity/price become 0; zero-quantity lines stay in the cart."""
    cart.add_item(PEN)
    cart.update_quantity("i-pen", -3)
    assert cart.find("i-pen").quantity == 0
    assert len(cart) == 1
    cart.update_item_price("i-pen", -1)
    assert cart.find("i-pen").price == 0
    assert cart.subtotal() == 0


def test_a4_discount_type_is_checked_but_value_is_not(cart: PosCart) -> None:
    """A4: unknown discount type raises; out-of-range values are stored as given."""
    cart.add_item(PEN)
    with pytest.raises(ValidationError):
        cart.update_item_discount("i-pen", 5, "bogus")
    cart.update_item_discount("i-pen", 150, "percentage")
    assert cart.find("i-pen").discount == 150

    with pytest.raises(ValidationError):
        validate_discount(150, "percentage")
    with pytest.raises(ValidationError):
        validate_discount(-1, "fixed")
    assert validate_discount("12.5", "fixed") == 12.5


def test_a5_add_item_accepts_item_records(cart: PosCart) -> None:
    """A5: catalog Item dataclasses work as well as mappings."""
    from shopbooks.database.repositories.items_repo import Item

    item = Item(id="i-x", name="Box", sku="BX", type="product", unit="pc", sale_price=3.0,
                purchase_price=1.0, tax_rate=0.0, stock_quantity=9, low_stock_alert=2)
    line = cart.add_item(item)
    assert line.unit == "pc"
    assert line.stock_quantity == 9
    assert cart.subtotal() == 3.0


def test_a6_add_item_accepts_database_rows(cart: PosCart, conn, seed) -> None:
    """A6: rows straight from an items/customers query can be added without conversion."""
    pen = seed.item("Pen", sale_price=10.0, stock=7, tax_rate=5.0)
    acme = seed.customer("Acme")

    row = conn.execute("SELECT * FROM items WHERE id=?", (pen,)).fetchone()
    line = cart.add_item(row)
    cart.add_item(row)
    assert line.name == "Pen"
    assert line.quantity == 2
    assert line.stock_quantity == 7
    assert cart.tax_total() == pytest.approx(1.0)

    cart.set_customer(conn.execute("SELECT * FROM customers WHERE id=?", (acme,)).fetchone())
    assert cart.customer["id"] == acme
    assert cart.customer["name"] == "Acme"


# ---------------------------------------------------------------------------
# B) Totals
# ---------------------------------------------------------------------------

def test_b1_percentage_discounts_and_tax(cart: PosCart) -> None:
    """B1: item % discount reduces the tax base; bill % discount applies after item discounts."""
    cart.add_item(PEN)
    cart.update_quantity("i-pen", 3)              # 30.00
    cart.update_item_discount("i-pen", 10, "percentage")  # -3.00
    cart.add_item(INK)                            # 25.00
    cart.set_bill_discount(10, "percentage")

    assert cart.subtotal() == pytest.approx(55.0)
    assert cart.item_discount_total() == pytest.approx(3.0)
    assert cart.bill_discount_amount() == pytest.approx(5.2)
    assert cart.discount_total() == pytest.approx(8.2)
    assert cart.tax_total() == pytest.approx(2.7)   # (30 - 3) * 10%
    assert cart.grand_total() == pytest.approx(49.5)
    _identity_holds(cart)


def test_b2_fixed_discounts(cart: PosCart) -> None:
    """B2: fixed item discount is per unit; fixed bill discount is flat."""
    cart.add_item(FIX)
    cart.update_quantity("i-fix", 2)              # 80.00
    cart.update_item_discount("i-fix", 5, "fixed")  # 5 * 2 = 10
    cart.set_bill_discount(7, "fixed")

    assert cart.item_discount_total() == pytest.approx(10.0)
    assert cart.bill_discount_amount() == pytest.approx(7.0)
    assert cart.tax_total() == pytest.approx(3.5)   # 70 * 5%
    assert cart.grand_total() == pytest.approx(80 - 10 - 7 + 3.5)
    _identity_holds(cart)


def test_b3_identity_holds_through_any_sequence(cart: PosCart) -> None:
    """B3: grand = subtotal - discounts + tax after every mutation."""
    steps = [
        lambda c: c.add_item(PEN),
        lambda c: c.add_item(INK),
        lambda c: c.update_quantity("i-ink", 4),
        lambda c: c.update_item_discount("i-pen", 2.5, "fixed"),
        lambda c: c.set_bill_discount(12.5, "percentage"),
        lambda c: c.add_item(FIX),
        lambda c: c.update_item_discount("i-fix", 33.3, "percentage"),
        lambda c: c.update_item_price("i-ink", 19.99),
        lambda c: c.set_bill_discount(3, "fixed"),
        lambda c: c.update_quantity("i-pen", 0),
        lambda c: c.remove_item("i-ink"),
    ]
    _identity_holds(cart)
    for step in steps:
        step(cart)
        _identity_holds(cart)


def test_b4_empty_cart_totals_are_zero(cart: PosCart) -> None:
    """B4: an empty cart prices to zero even with a bill discount set."""
    cart.set_bill_discount(10, "percentage")
    assert cart.subtotal() == 0
    assert cart.grand_total() == 0


# ---------------------------------------------------------------------------
# C) Session state
# ---------------------------------------------------------------------------

def test_c1_clear_cart_resets_sale(cart: PosCart) -> None:
    """C1: clear empties lines, customer, bill discount and selection."""
    cart.add_item(PEN)
    cart.set_customer({"id": "c1", "name": "Acme"})
    cart.set_bill_discount(5, "fixed")
    cart.clear_cart()
    assert cart.is_empty()
    assert cart.customer is None
    assert cart.bill_discount == 0
    assert cart.selected_item_id is None


def test_c2_every_mutation_emits_changed(cart: PosCart) -> None:
    """C2: the `changed` signal fires once per mutator call."""
    hits: list[int] = []
    cart.changed.connect(lambda: hits.append(1))
    cart.add_item(PEN)
    cart.update_quantity("i-pen", 2)
    cart.set_selected_item(None)
    cart.set_bill_discount(1, "fixed")
    cart.clear_cart()
    assert len(hits) == 5


def test_c3_snapshot_restores_priced_state(app) -> None:
    """C3: a restored cart prices identically; selection is not part of the snapshot."""
    a = PosCart()
    a.add_item(PEN)
    a.add_item(INK)
    a.update_item_discount("i-ink", 2, "fixed")
    a.set_customer({"id": "c1", "name": "Acme"})
    a.set_bill_discount(4, "fixed")

    b = PosCart()
    b.restore_snapshot(a.to_snapshot())
    assert b.grand_total() == pytest.approx(a.grand_total())
    assert b.customer == {"id": "c1", "name": "Acme"}
    assert b.bill_discount_type == "fixed"
    assert b.selected_item_id is None
