# utils/helpers.py
import logging
import time
from datetime import date, datetime
from typing import Union, Optional

NumberLike = Union[float, int, str]
DateLike = Union[date, datetime, str]

_log = logging.getLogger(__name__)


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def num(v) -> float:
    """Null-safe numeric coercion: None/'' become 0.0."""
    if v is None or v == "":
        return 0.0
    return float(v)


def to_date(v: DateLike) -> date:
    """
    Date-only view of a date, datetime or ISO string.
    Time of day is dropped so day differences never flicker within a day.
    """
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    return date.fromisoformat(str(v).strip()[:10])


def timestamp_number(prefix: str, now_ms: Optional[int] = None) -> str:
    """
    PREFIX-<last 6 digits of epoch ms>.

    Fine for a single local writer; two documents created within the same
    millisecond window (or 1000 s apart on the same suffix) will collide.
    """
    ms = int(time.time() * 1000) if now_ms is None else int(now_ms)
    return f"{prefix}-{str(ms)[-6:]}"


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    try:
        x = float(v)
    except (TypeError, ValueError) as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{x:,.{places}f}"
