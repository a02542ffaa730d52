# shopbooks/modules/pos/cart_store.py
from __future__ import annotations

import json
import logging
import sqlite3
from typing import Optional

from ...constants import CART_STATE_KEY
from ...utils.helpers import now_iso
from .cart import PosCart

_log = logging.getLogger(__name__)


class CartSnapshotStore:
    """
    Keeps the open POS cart in app_state as JSON so a restart resumes the sale.
    """

    def __init__(self, conn: sqlite3.Connection, key: str = CART_STATE_KEY) -> None:
        conn.row_factory = sqlite3.Row
        self.conn = conn
        self.key = key

    def save(self, cart: PosCart) -> None:
        payload = json.dumps(cart.to_snapshot())
        with self.conn:
            self.conn.execute(
                "INSERT INTO app_state(key, value, updated_at) VALUES (?,?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (self.key, payload, now_iso()),
            )

    def load(self) -> Optional[dict]:
        row = self.conn.execute("SELECT value FROM app_state WHERE key=?", (self.key,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            _log.warning("discarding unreadable cart snapshot under %r", self.key)
            return None

    def restore_into(self, cart: PosCart) -> bool:
        """Load the saved snapshot into `cart`. Returns False when nothing was saved."""
        snap = self.load()
        if snap is None:
            return False
        cart.restore_snapshot(snap)
        return True

    def clear(self) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM app_state WHERE key=?", (self.key,))

    def bind(self, cart: PosCart) -> None:
        """Save on every cart change."""
        cart.changed.connect(lambda: self.save(cart))
