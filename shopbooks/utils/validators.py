# utils/validators.py
from ..constants import DISCOUNT_TYPES, PAYMENT_MODES
from ..errors import ValidationError


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)

    ok == False means parsing failed and value is None.
    """
    try:
        return True, float(x)
    except (TypeError, ValueError):
        return False, None


def is_non_negative_number(x) -> bool:
    """
    True iff x parses to a float and value >= 0.
    """
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val >= 0)


# ---- POS inputs ----

def validate_discount_type(discount_type: str) -> str:
    if discount_type not in DISCOUNT_TYPES:
        raise ValidationError(
            f"Unknown discount type {discount_type!r}; expected one of {', '.join(DISCOUNT_TYPES)}."
        )
    return discount_type


def validate_discount(discount, discount_type: str) -> float:
    """
    Caller-side bounds check for item and bill discounts.

    The cart itself stores whatever it is given; screens call this first so
    the operator can correct the value in place.
      - percentage: 0..100
      - fixed: >= 0
    """
    validate_discount_type(discount_type)
    ok, val = try_parse_float(discount)
    if not ok:
        raise ValidationError(f"Discount must be a number, got {discount!r}.")
    if val < 0:
        raise ValidationError("Discount cannot be negative.")
    if discount_type == "percentage" and val > 100:
        raise ValidationError("Percentage discount cannot exceed 100.")
    return val


def validate_payment(payment_mode: str, amount_paid) -> float:
    if not payment_mode or payment_mode not in PAYMENT_MODES:
        raise ValidationError(
            f"Payment mode must be one of {', '.join(PAYMENT_MODES)}.",
            details={"field": "payment_mode"},
        )
    if not is_non_negative_number(amount_paid):
        raise ValidationError(
            "Amount paid must be a non-negative number.",
            details={"field": "amount_paid"},
        )
    return float(amount_paid)
