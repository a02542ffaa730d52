# shopbooks/database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from shopbooks.database.repositories import (
        CustomersRepo, Customer,
        ItemsRepo, Item,
        PosRepo, PosInvoiceHeader, PosInvoiceLine, PosPayment,
        ReportingRepo,
    )
"""

# ---------------- Customers ----------------
from .customers_repo import CustomersRepo, Customer

# ------------------ Items ------------------
from .items_repo import ItemsRepo, Item

# ------------------- POS -------------------
from .pos_repo import PosRepo, PosInvoiceHeader, PosInvoiceLine, PosPayment

# ---------------- Reporting ----------------
from .reporting_repo import ReportingRepo

__all__ = [
    # customers_repo
    "CustomersRepo",
    "Customer",
    # items_repo
    "ItemsRepo",
    "Item",
    # pos_repo
    "PosRepo",
    "PosInvoiceHeader",
    "PosInvoiceLine",
    "PosPayment",
    # reporting_repo
    "ReportingRepo",
]
