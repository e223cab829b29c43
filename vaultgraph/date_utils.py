# vaultgraph/date_utils.py

from __future__ import annotations
from typing import Optional
from datetime import datetime, date, time, timedelta, timezone
import re

from .config import config


_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def get_today(mock_date: Optional[str] = None) -> str:
    """
    Today's date as YYYY-MM-DD for callers at the wall-clock boundary.

    The engine itself never calls this; it receives `today` explicitly.
    VAULTGRAPH_MOCK_DATE (or the `mock_date` argument) pins the value for tests.
    """
    pinned = mock_date if mock_date is not None else config['mock_date']
    if pinned and _ISO_DATE.match(pinned):
        return pinned
    return date.today().isoformat()


def parse_iso_date(value: str) -> date:
    """Strict YYYY-MM-DD parse. Raises ValueError on anything else."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def end_of_week(today: str) -> str:
    """
    The Sunday closing the Monday..Sunday week that contains `today`.

    A Sunday is its own end of week.
    """
    d = parse_iso_date(today)
    return (d + timedelta(days=6 - d.weekday())).isoformat()


def start_of_week(today: str) -> str:
    d = parse_iso_date(today)
    return (d - timedelta(days=d.weekday())).isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp (or bare date) into a naive datetime.

    Offsets are converted to UTC before the tzinfo is dropped.
    Malformed or empty values return None.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def end_of_day(today: str) -> datetime:
    return datetime.combine(parse_iso_date(today), time.max)


def was_modified_within(
    updated_at: Optional[str],
    today: str,
    hours: int = 24,
    now: Optional[datetime] = None
) -> bool:
    """
    True when `updated_at` falls in the `hours` window ending at `now`.

    Without an explicit `now` the window ends at the last instant of `today`,
    so the answer depends only on the inputs.
    """
    stamp = parse_timestamp(updated_at)
    if stamp is None:
        return False
    reference = now if now is not None else end_of_day(today)
    if reference.tzinfo is not None:
        reference = reference.astimezone(timezone.utc).replace(tzinfo=None)
    return stamp >= reference - timedelta(hours=hours)
