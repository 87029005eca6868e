"""
Coercion and time helpers shared by the extraction and aggregation stages.

Raw statistic records come from a remote API as loosely-typed mappings:
numbers may arrive as strings, fields may be missing or null, the same field
may use camelCase or PascalCase, and timestamps may be ISO strings, plain
dates or epoch milliseconds. Everything in this module is defensive and
never raises for bad input:
    - `to_num` / `to_count` turn anything into a finite number (0 on failure),
    - `first_present` resolves a canonical field from its alias list,
    - `parse_timestamp` turns a raw temporal value into a datetime (or None)
        and reports whether a time of day was actually supplied,
    - `day_key`, `fmt_hm` and `fmt_br_from_iso` format the temporal keys used
        everywhere downstream.
"""

# Import libraries
from __future__ import annotations
import logging
import math
import re
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

_MISSING = object()
DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")


def to_num(val: Any) -> float:
    """Return `val` as a finite float; None, junk, NaN and infinities become 0."""
    if val is None or isinstance(val, (list, tuple, dict, set)):
        return 0.0
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return 0.0
    try:
        x = float(val)
    except (TypeError, ValueError):
        return 0.0
    return x if math.isfinite(x) else 0.0


def to_count(val: Any) -> int:
    return int(to_num(val))


def first_present(raw: Mapping[str, Any], aliases: Iterable[str], default: Any = None) -> Any:
    """Value of the first alias present in `raw` with a non-null value."""
    for key in aliases:
        v = raw.get(key, _MISSING)
        if v is _MISSING or v is None:
            continue
        return v
    return default


def parse_timestamp(val: Any, tz: Optional[str] = None) -> Tuple[Optional[datetime], bool]:
    """
    Parse a raw temporal value into (datetime, has_time).

    Accepts: datetime/date objects, pandas Timestamps, ISO-like strings
    ('2025-11-04', '2025-11-04T14:02:00Z', ...) and epoch milliseconds.
    A date-only value yields midnight with has_time=False. Aware timestamps
    are converted to `tz` when given, otherwise to the process-local zone;
    naive ones are taken as already local. Anything unparsable returns
    (None, False).
    """
    if val is None or isinstance(val, bool):
        return None, False

    has_time = True
    if isinstance(val, (int, float)):
        if not math.isfinite(val):
            return None, False
        ts = pd.to_datetime(val, unit="ms", errors="coerce", utc=True)
    elif isinstance(val, datetime):
        ts = pd.Timestamp(val)
    elif isinstance(val, date):
        ts = pd.Timestamp(val.year, val.month, val.day)
        has_time = False
    elif isinstance(val, str):
        s = val.strip()
        if not s:
            return None, False
        has_time = DATE_ONLY.fullmatch(s) is None
        ts = pd.to_datetime(s, errors="coerce")
    else:
        return None, False

    if ts is None or pd.isna(ts):
        return None, False

    if ts.tzinfo is None:
        return ts.to_pydatetime(), has_time
    if tz:
        try:
            return ts.tz_convert(tz).to_pydatetime(), has_time
        except Exception as e:
            # Unknown zone name: fall back to the process-local zone.
            logger.debug("cannot convert %s to %r: %s", ts, tz, e)
    return ts.to_pydatetime().astimezone(), has_time


def day_key(ts: Optional[datetime]) -> Optional[str]:
    """'YYYY-MM-DD' of the timestamp's own (local) calendar date."""
    if ts is None:
        return None
    return ts.date().isoformat()


def fmt_hm(ts: Optional[datetime]) -> Optional[str]:
    if ts is None:
        return None
    return f"{ts.hour:02d}:{ts.minute:02d}"


def fmt_br_from_iso(iso: Optional[str]) -> str:
    """'2025-11-04...' -> '04/11/2025'. Short or empty input is returned unchanged."""
    if not iso or DATE_ONLY.fullmatch(iso[:10]) is None:
        return iso or ""
    y, m, d = iso[:10].split("-")
    return f"{d}/{m}/{y}"


def sort_stamp(ts: datetime) -> pd.Timestamp:
    """Comparable key for mixed naive/aware timestamps (aware ones compare in UTC)."""
    stamp = pd.Timestamp(ts)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert("UTC").tz_localize(None)
    return stamp


def iso_utc(ts: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string for a timestamp; aware values are normalised to UTC ('Z')."""
    if ts is None:
        return None
    stamp = pd.Timestamp(ts)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert("UTC").tz_localize(None)
        return stamp.isoformat(timespec="milliseconds") + "Z"
    return stamp.isoformat(timespec="milliseconds")
