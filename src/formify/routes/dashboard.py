from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from formify.analytics import form_titles, submissions_by_date
from formify.export import build_workbook, export_filename
from formify.notices import NOTICES
from formify.protocols import StorageError
from formify.web import render, resolve_redirect_target, with_notice

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
        },
    )


@router.get("/dashboard", response_class=HTMLResponse, tags=["dashboard"])
async def dashboard(request: Request) -> HTMLResponse:
    storage = request.app.state.storage
    settings = request.app.state.settings
    notices: list[dict[str, str]] = []

    # two independent queries; one failing does not hide the other
    try:
        submissions = storage.submissions.list_submissions()
    except StorageError:
        submissions = []
        notices.append(NOTICES["load_failed"])
    try:
        forms = storage.forms.list_forms()
    except StorageError:
        forms = []
        if not notices:
            notices.append(NOTICES["load_failed"])

    series = submissions_by_date(submissions, settings.timezone, settings.date_format)
    return render(
        request,
        "dashboard.html",
        {
            "forms": forms,
            "submissions": submissions,
            "titles": form_titles(forms),
            "series": series,
            "chart_stroke": request.app.state.theme.chart_stroke,
            "notices": notices,
        },
    )


@router.get("/dashboard/forms/{form_id}/export", tags=["dashboard"])
async def export_form(request: Request, form_id: str) -> Any:
    storage = request.app.state.storage
    settings = request.app.state.settings
    try:
        form = storage.forms.get_form(form_id)
        submissions = storage.submissions.list_submissions(form_id) if form else []
    except StorageError:
        return RedirectResponse(with_notice("/dashboard", "export_failed"), status_code=303)
    if not form or not submissions:
        return RedirectResponse(with_notice("/dashboard", "export_empty"), status_code=303)

    content = build_workbook(submissions, settings.timezone, settings.date_format)
    logger.info("Exported %d submissions of form %s", len(submissions), form_id)
    return xlsx_response(content, export_filename(form))


@router.get("/forms/{form_id}/delete", response_class=HTMLResponse, tags=["dashboard"])
async def confirm_delete(request: Request, form_id: str) -> Any:
    storage = request.app.state.storage
    next_path = resolve_redirect_target(request.query_params.get("next"), "/dashboard")
    try:
        form = storage.forms.get_form(form_id)
    except StorageError:
        return RedirectResponse(with_notice(next_path, "load_failed"), status_code=303)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return render(request, "confirm_delete.html", {"form": form, "next": next_path})


@router.post("/forms/{form_id}/delete", tags=["dashboard"])
async def delete_form(request: Request, form_id: str) -> RedirectResponse:
    storage = request.app.state.storage
    form_data = await request.form()
    target = resolve_redirect_target(form_data.get("next"), "/dashboard")
    if form_data.get("confirm") != "yes":
        return RedirectResponse(target, status_code=303)
    try:
        storage.forms.delete_form(form_id)
    except StorageError:
        return RedirectResponse(with_notice(target, "delete_failed"), status_code=303)
    logger.info("Deleted form %s", form_id)
    return RedirectResponse(with_notice(target, "form_deleted"), status_code=303)
