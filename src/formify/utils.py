from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import orjson
import ulid


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    return ensure_aware(dt).isoformat()


def parse_dt(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, str):
        # Postgres returns "...Z" on older servers
        text = value.replace("Z", "+00:00") if value.endswith("Z") else value
        try:
            return ensure_aware(datetime.fromisoformat(text))
        except ValueError:
            return now_utc()
    return now_utc()


def dumps_json(value: Any) -> str:
    return orjson.dumps(value).decode("utf-8")


def loads_json(value: str | bytes | None) -> Any:
    if not value:
        return None
    return orjson.loads(value)


def new_id() -> str:
    """ULID rendered as a UUID string, so it fits a Postgres uuid column."""
    return str(ulid.new().uuid)


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def local_dt(value: Any, tz_name: str) -> datetime | None:
    if value in (None, ""):
        return None
    return parse_dt(value).astimezone(get_zone(tz_name))


def format_date(value: Any, tz_name: str = "UTC", fmt: str = "%m/%d/%Y") -> str:
    dt = local_dt(value, tz_name)
    return dt.strftime(fmt) if dt else ""


def date_key(value: Any, tz_name: str = "UTC") -> str:
    dt = local_dt(value, tz_name)
    return dt.date().isoformat() if dt else ""
