"""Transient notifications shown at the top of a page.

A notice is a plain dict ``{"title", "description", "variant"}``; variant is
``"default"`` or ``"destructive"``. Notices raised before a redirect travel as
a ``?notice=<code>`` query parameter and are looked up in :data:`NOTICES`.
"""
from __future__ import annotations

from typing import Any


def make_notice(title: str, description: str, variant: str = "default") -> dict[str, str]:
    return {"title": title, "description": description, "variant": variant}


def error_notice(title: str, description: str) -> dict[str, str]:
    return make_notice(title, description, "destructive")


NOTICES: dict[str, dict[str, str]] = {
    "form_saved": make_notice("Form Saved", "Your form has been saved successfully."),
    "form_deleted": make_notice("Success", "Form deleted successfully"),
    "delete_failed": error_notice("Error", "Failed to delete form"),
    "export_empty": error_notice("Export Failed", "No submissions found for this form"),
    "export_failed": error_notice("Export Failed", "Failed to load submissions. Please try again."),
    "load_failed": error_notice("Error", "Failed to load data. Please try again."),
}


def notices_from_query(query: Any) -> list[dict[str, str]]:
    code = query.get("notice") if query else None
    if code and code in NOTICES:
        return [NOTICES[code]]
    return []
