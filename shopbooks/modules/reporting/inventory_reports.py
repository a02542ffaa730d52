# shopbooks/modules/reporting/inventory_reports.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Dict, List

from ...constants import STOCK_IN, STOCK_LOW, STOCK_OUT
from ...database.repositories.reporting_repo import ReportingRepo
from ...utils.helpers import num
from .periods import DateRange


def stock_status(quantity: float, low_stock_alert: float) -> str:
    if quantity <= 0:
        return STOCK_OUT
    if quantity <= low_stock_alert:
        return STOCK_LOW
    return STOCK_IN


@dataclass
class StockSummary:
    items: List[dict] = field(default_factory=list)
    total_items: int = 0
    total_value: float = 0.0
    low_stock_count: int = 0
    out_of_stock_count: int = 0


# ------------------------------ Logic ---------------------------------------


class InventoryReports:
    """
    Thin logic layer built on ReportingRepo for inventory reporting.
    Stock is valued at the item's current purchase price.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.repo = ReportingRepo(conn)

    def stock_summary(self) -> StockSummary:
        summary = StockSummary()
        for r in self.repo.active_items():
            qty = num(r["stock_quantity"])
            price = num(r["purchase_price"])
            alert = num(r["low_stock_alert"])
            status = stock_status(qty, alert)
            row = {
                "item_id": r["id"],
                "name": r["name"],
                "sku": r["sku"],
                "category": r["category"],
                "unit": r["unit"],
                "stock_quantity": qty,
                "low_stock_alert": alert,
                "purchase_price": price,
                "stock_value": qty * price,
                "status": status,
            }
            summary.items.append(row)
            summary.total_value += row["stock_value"]
            if status == STOCK_LOW:
                summary.low_stock_count += 1
            elif status == STOCK_OUT:
                summary.out_of_stock_count += 1
        summary.total_items = len(summary.items)
        return summary

    def low_stock(self) -> List[dict]:
        """Active products at or below their alert level, biggest shortfall first."""
        out: List[dict] = []
        for r in self.repo.low_stock_items():
            qty = num(r["stock_quantity"])
            alert = num(r["low_stock_alert"])
            out.append(
                {
                    "item_id": r["id"],
                    "name": r["name"],
                    "sku": r["sku"],
                    "stock_quantity": qty,
                    "low_stock_alert": alert,
                    "shortfall": max(alert - qty, 0.0),
                    "status": stock_status(qty, alert),
                }
            )
        return out

    def stock_movement(self, date_range: DateRange) -> List[dict]:
        """
        Per active item: quantity purchased and sold in the range.

        Closing stock is the current stock; opening is derived backwards
        (closing - purchased + sold), so it is exact only when the range
        ends today.
        """
        f, t = date_range.date_from, date_range.date_to
        sold: Dict[str, float] = {r["item_id"]: num(r["quantity"]) for r in self.repo.item_quantities("sale", f, t)}
        bought: Dict[str, float] = {
            r["item_id"]: num(r["quantity"]) for r in self.repo.item_quantities("purchase", f, t)
        }

        out: List[dict] = []
        for r in self.repo.active_items():
            closing = num(r["stock_quantity"])
            qty_sold = sold.get(r["id"], 0.0)
            qty_bought = bought.get(r["id"], 0.0)
            out.append(
                {
                    "item_id": r["id"],
                    "name": r["name"],
                    "opening": closing - qty_bought + qty_sold,
                    "purchased": qty_bought,
                    "sold": qty_sold,
                    "closing": closing,
                }
            )
        out.sort(key=lambda x: x["sold"] + x["purchased"], reverse=True)
        return out

    def item_profitability(self, date_range: DateRange) -> List[dict]:
        out: List[dict] = []
        for r in self.repo.item_sales_with_cost(date_range.date_from, date_range.date_to):
            qty = num(r["quantity_sold"])
            revenue = num(r["revenue"])
            cost = qty * num(r["purchase_price"])
            profit = revenue - cost
            out.append(
                {
                    "item_id": r["item_id"],
                    "name": r["name"],
                    "quantity_sold": qty,
                    "revenue": revenue,
                    "cost": cost,
                    "profit": profit,
                    "margin": (profit / revenue * 100.0) if revenue > 0 else 0.0,
                }
            )
        out.sort(key=lambda x: x["profit"], reverse=True)
        return out
