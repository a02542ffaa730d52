# shopbooks/constants.py

DATA_DIR = "data"
DB_FILE_NAME = "shopbooks.db"

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1.0.0"

# ---- POS ----
POS_INVOICE_PREFIX = "POS"
POS_RECEIPT_PREFIX = "RCT"
POS_INVOICE_NAME = "POS Sale"
WALK_IN_CUSTOMER = "Walk-in Customer"
CART_STATE_KEY = "pos-storage"

DISCOUNT_TYPES: tuple[str, ...] = ("percentage", "fixed")

PAYMENT_MODES: tuple[str, ...] = ("cash", "bank", "card", "ach", "cheque", "other")
PAYMENT_MODE_LABELS = {
    "cash": "Cash",
    "bank": "Bank Transfer",
    "card": "Card",
    "ach": "ACH Transfer",
    "cheque": "Cheque",
    "other": "Other",
}

# ---- Reporting ----
TOP_N = 5

AGING_BUCKETS: tuple[str, ...] = (
    "Current",
    "1-30 Days",
    "31-60 Days",
    "61-90 Days",
    "90+ Days",
)

STOCK_IN = "in-stock"
STOCK_LOW = "low-stock"
STOCK_OUT = "out-of-stock"
