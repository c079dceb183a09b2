from __future__ import annotations

from typing import Any

from formify.utils import date_key, format_date


def submissions_by_date(
    submissions: list[dict[str, Any]],
    tz_name: str = "UTC",
    date_format: str = "%m/%d/%Y",
) -> list[dict[str, Any]]:
    """Count submissions per calendar day, oldest day first.

    Days are keyed by the ISO date in ``tz_name``; ``date`` is the display
    label for the chart axis.
    """
    counts: dict[str, dict[str, Any]] = {}
    for submission in submissions:
        submitted_at = submission.get("submitted_at")
        key = date_key(submitted_at, tz_name)
        if not key:
            continue
        bucket = counts.get(key)
        if bucket is None:
            counts[key] = {
                "key": key,
                "date": format_date(submitted_at, tz_name, date_format),
                "submissions": 1,
            }
        else:
            bucket["submissions"] += 1
    return [counts[key] for key in sorted(counts)]


def form_titles(forms: list[dict[str, Any]]) -> dict[str, str]:
    return {form["id"]: form.get("title", "") for form in forms}
