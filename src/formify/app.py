from __future__ import annotations

import json
import logging
from typing import Any

import markupsafe
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from formify.answers import answer_to_text
from formify.builder import share_url
from formify.config import BASE_DIR, Settings, ensure_dirs
from formify.protocols import Storage
from formify.routes.api import router as api_router
from formify.routes.dashboard import router as dashboard_router
from formify.routes.index import router as index_router
from formify.routes.public import router as public_router
from formify.storage import init_storage
from formify.theme import ThemeContext
from formify.utils import format_date

logger = logging.getLogger(__name__)


def _tojson_attr(value: Any) -> markupsafe.Markup:
    """Escape a JSON string so it can sit inside an HTML attribute."""
    return markupsafe.Markup(markupsafe.escape(json.dumps(value, ensure_ascii=False)))


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    settings = settings or Settings()
    if storage is None:
        ensure_dirs(settings)
        storage = init_storage(settings)

    app = FastAPI(
        title="Formify",
        openapi_tags=[
            {"name": "index", "description": "Forms list and builder (HTML)"},
            {"name": "public", "description": "Public form (HTML)"},
            {"name": "dashboard", "description": "Dashboard (HTML)"},
            {"name": "api/forms", "description": "REST API: forms"},
            {"name": "api/submissions", "description": "REST API: submissions"},
            {"name": "system", "description": "System"},
        ],
    )

    app.state.storage = storage
    app.state.settings = settings
    app.state.theme = ThemeContext(settings.default_theme)

    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
    app.state.templates = templates

    def _format_date(value: Any) -> str:
        return format_date(value, settings.timezone, settings.date_format)

    templates.env.filters["tojson_attr"] = _tojson_attr
    templates.env.globals["format_date"] = _format_date
    templates.env.globals["share_url"] = share_url
    templates.env.globals["answer_to_text"] = answer_to_text

    app.include_router(index_router)
    app.include_router(public_router)
    app.include_router(dashboard_router)
    app.include_router(api_router)

    logger.info("Formify ready (store: %s)", settings.storage_backend)
    return app
