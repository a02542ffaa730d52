from .cart import PosCart, PosCartItem
from .cart_store import CartSnapshotStore
from .checkout import CheckoutService

__all__ = ["PosCart", "PosCartItem", "CartSnapshotStore", "CheckoutService"]
