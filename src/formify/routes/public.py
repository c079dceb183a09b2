from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from formify.answers import collect_answers
from formify.notices import error_notice, make_notice
from formify.protocols import StorageError
from formify.utils import new_id, now_utc
from formify.web import render

logger = logging.getLogger(__name__)

router = APIRouter()


def load_public_form(request: Request, form_id: str) -> tuple[dict[str, Any] | None, HTMLResponse | None]:
    storage = request.app.state.storage
    try:
        form = storage.forms.get_form(form_id)
    except StorageError:
        return None, render(
            request,
            "form_not_found.html",
            {"message": "Failed to load form. Please try again."},
            status_code=503,
        )
    if not form:
        return None, render(
            request, "form_not_found.html", {"message": "Form not found"}, status_code=404
        )
    return form, None


@router.get("/form/{form_id}", response_class=HTMLResponse, tags=["public"])
async def public_form(request: Request, form_id: str) -> HTMLResponse:
    form, failure = load_public_form(request, form_id)
    if failure is not None:
        return failure
    return render(request, "form_public.html", {"form": form, "answers": {}})


@router.post("/form/{form_id}", response_class=HTMLResponse, tags=["public"])
async def submit_form(request: Request, form_id: str) -> HTMLResponse:
    form, failure = load_public_form(request, form_id)
    if failure is not None:
        return failure

    storage = request.app.state.storage
    form_data = await request.form()
    answers = collect_answers(form_data, form.get("questions", []))
    submission = {
        "id": new_id(),
        "form_id": form["id"],
        "answers": answers,
        "submitted_at": now_utc(),
    }
    try:
        storage.submissions.create_submission(submission)
    except StorageError:
        return render(
            request,
            "form_public.html",
            {
                "form": form,
                "answers": answers,
                "notices": [error_notice("Error", "Failed to submit form. Please try again.")],
            },
        )

    logger.info("Stored submission %s for form %s", submission["id"], form["id"])
    return render(
        request,
        "form_public.html",
        {
            "form": form,
            "answers": {},
            "notices": [
                make_notice("Success", "Your response has been submitted successfully.")
            ],
        },
    )
