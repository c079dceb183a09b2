from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from formify.builder import BuilderError, FormDraft
from formify.config import QUESTION_TYPES
from formify.notices import NOTICES, error_notice, make_notice
from formify.protocols import StorageError
from formify.schema import QuestionError
from formify.web import base_url_for, render, resolve_redirect_target, with_notice

logger = logging.getLogger(__name__)

router = APIRouter()

QUESTION_TYPE_LABELS = {
    "text": "Text",
    "multiple": "Multiple Choice",
    "checkbox": "Checkboxes",
}


def render_builder(
    request: Request,
    draft: FormDraft,
    on_complete: str,
    notices: list[dict[str, str]] | None = None,
    share_link: str = "",
) -> HTMLResponse:
    return render(
        request,
        "builder.html",
        {
            "draft": draft,
            "on_complete": on_complete,
            "question_types": [(t, QUESTION_TYPE_LABELS[t]) for t in QUESTION_TYPES],
            "share_link": share_link,
            "notices": notices or [],
        },
    )


@router.get("/", response_class=HTMLResponse, tags=["index"])
async def index(request: Request) -> HTMLResponse:
    if request.query_params.get("builder"):
        return render_builder(request, FormDraft(), on_complete="index")

    storage = request.app.state.storage
    notices: list[dict[str, str]] = []
    try:
        forms = storage.forms.list_forms()
    except StorageError:
        forms = []
        notices.append(NOTICES["load_failed"])
    return render(request, "index.html", {"forms": forms, "notices": notices})


@router.get("/builder", response_class=HTMLResponse, tags=["index"])
async def new_form(request: Request) -> HTMLResponse:
    return render_builder(request, FormDraft(), on_complete="dashboard")


def _apply_action(draft: FormDraft, action: str) -> None:
    verb, _, arg = action.partition(":")
    if verb == "add":
        draft.add_question(arg)
    elif verb == "remove" and arg.isdigit():
        draft.remove_question(int(arg))


@router.post("/builder", response_class=HTMLResponse, tags=["index"])
async def builder_action(request: Request) -> Any:
    storage = request.app.state.storage
    form_data = await request.form()
    action = str(form_data.get("action", "update"))
    on_complete = "index" if form_data.get("on_complete") == "index" else "dashboard"

    try:
        draft = FormDraft.from_form_data(form_data)
    except QuestionError as exc:
        return render_builder(
            request,
            FormDraft(
                title=str(form_data.get("title", "")),
                description=str(form_data.get("description", "")),
            ),
            on_complete,
            notices=[error_notice("Error", str(exc))],
        )

    if action == "save":
        try:
            draft.save(storage)
        except BuilderError as exc:
            return render_builder(request, draft, on_complete, notices=[exc.notice])
        except StorageError:
            return render_builder(
                request,
                draft,
                on_complete,
                notices=[error_notice("Error", "Failed to save form. Please try again.")],
            )
        target = "/" if on_complete == "index" else "/dashboard"
        return RedirectResponse(with_notice(target, "form_saved"), status_code=303)

    if action == "share":
        try:
            link = draft.share_url(base_url_for(request), storage)
        except BuilderError as exc:
            return render_builder(request, draft, on_complete, notices=[exc.notice])
        except StorageError:
            return render_builder(
                request,
                draft,
                on_complete,
                notices=[error_notice("Error", "Failed to load form. Please try again.")],
            )
        return render_builder(
            request,
            draft,
            on_complete,
            notices=[
                make_notice(
                    "Share Link Generated",
                    "Use the copy button to put the link on your clipboard.",
                )
            ],
            share_link=link,
        )

    try:
        _apply_action(draft, action)
    except QuestionError as exc:
        return render_builder(
            request, draft, on_complete, notices=[error_notice("Error", str(exc))]
        )
    return render_builder(request, draft, on_complete)


@router.post("/theme/toggle", tags=["index"])
async def toggle_theme(request: Request) -> RedirectResponse:
    form_data = await request.form()
    request.app.state.theme.toggle()
    target = resolve_redirect_target(form_data.get("next"))
    return RedirectResponse(target, status_code=303)
