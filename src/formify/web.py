from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from fastapi import Request
from fastapi.responses import HTMLResponse

from formify.notices import notices_from_query


def base_url_for(request: Request) -> str:
    settings = request.app.state.settings
    if settings.public_base_url:
        return settings.public_base_url
    return str(request.base_url).rstrip("/")


def resolve_redirect_target(next_path: Any, default: str = "/") -> str:
    candidate = str(next_path or "").strip()
    if not candidate:
        return default
    if not candidate.startswith("/") or candidate.startswith("//"):
        return default
    parsed = urlsplit(candidate)
    if parsed.scheme or parsed.netloc:
        return default
    if parsed.query:
        return f"{parsed.path}?{parsed.query}"
    return parsed.path


def with_notice(path: str, code: str) -> str:
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}notice={code}"


def render(
    request: Request,
    template: str,
    context: dict[str, Any],
    status_code: int = 200,
) -> HTMLResponse:
    templates = request.app.state.templates
    notices = notices_from_query(request.query_params) + list(context.pop("notices", []))
    return templates.TemplateResponse(
        request=request,
        name=template,
        context={
            "theme": request.app.state.theme.theme,
            "base_url": base_url_for(request),
            "notices": notices,
            **context,
        },
        status_code=status_code,
    )
