from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from formify.export import build_workbook, export_filename
from formify.protocols import StorageError
from formify.routes.dashboard import xlsx_response
from formify.schema import QuestionError, parse_questions, sanitize_form_output
from formify.utils import new_id, now_utc, to_iso

logger = logging.getLogger(__name__)

router = APIRouter()


def store_unavailable(exc: StorageError) -> HTTPException:
    return HTTPException(status_code=503, detail=f"Store call failed: {exc}")


def sanitize_submission_output(submission: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": submission["id"],
        "form_id": submission["form_id"],
        "answers": submission.get("answers", {}),
        "submitted_at": to_iso(submission["submitted_at"]),
    }


def get_form_or_404(request: Request, form_id: str) -> dict[str, Any]:
    storage = request.app.state.storage
    try:
        form = storage.forms.get_form(form_id)
    except StorageError as exc:
        raise store_unavailable(exc) from exc
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("/api/forms", tags=["api/forms"])
async def api_list_forms(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    try:
        forms = storage.forms.list_forms()
    except StorageError as exc:
        raise store_unavailable(exc) from exc
    return JSONResponse([sanitize_form_output(form) for form in forms])


@router.post("/api/forms", tags=["api/forms"])
async def api_create_form(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    payload = await request.json()
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Request body must be an object")
    title = str(payload.get("title", "")).strip()
    if not title:
        raise HTTPException(status_code=400, detail="title is required")
    try:
        questions = parse_questions(payload.get("questions", []))
    except QuestionError as exc:
        raise HTTPException(status_code=400, detail=exc.errors) from exc

    form = {
        "id": new_id(),
        "title": title,
        "description": str(payload.get("description", "")).strip(),
        "questions": questions,
        "created_at": now_utc(),
    }
    try:
        storage.forms.create_form(form)
    except StorageError as exc:
        raise store_unavailable(exc) from exc
    logger.info("Created form %s via API", form["id"])
    return JSONResponse(sanitize_form_output(form), status_code=201)


@router.get("/api/forms/{form_id}", tags=["api/forms"])
async def api_get_form(request: Request, form_id: str) -> JSONResponse:
    form = get_form_or_404(request, form_id)
    return JSONResponse(sanitize_form_output(form))


@router.delete("/api/forms/{form_id}", tags=["api/forms"])
async def api_delete_form(request: Request, form_id: str) -> Response:
    storage = request.app.state.storage
    get_form_or_404(request, form_id)
    try:
        storage.forms.delete_form(form_id)
    except StorageError as exc:
        raise store_unavailable(exc) from exc
    logger.info("Deleted form %s via API", form_id)
    return Response(status_code=204)


@router.post("/api/forms/{form_id}/submissions", tags=["api/submissions"])
async def api_submit_form(request: Request, form_id: str) -> JSONResponse:
    storage = request.app.state.storage
    form = get_form_or_404(request, form_id)
    payload = await request.json()
    answers = payload.get("answers", payload) if isinstance(payload, dict) else None
    if not isinstance(answers, dict):
        raise HTTPException(status_code=400, detail="answers must be an object")

    submission = {
        "id": new_id(),
        "form_id": form["id"],
        "answers": answers,
        "submitted_at": now_utc(),
    }
    try:
        storage.submissions.create_submission(submission)
    except StorageError as exc:
        raise store_unavailable(exc) from exc
    return JSONResponse(sanitize_submission_output(submission), status_code=201)


@router.get("/api/submissions", tags=["api/submissions"])
async def api_list_submissions(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    form_id = request.query_params.get("form_id") or None
    try:
        submissions = storage.submissions.list_submissions(form_id)
    except StorageError as exc:
        raise store_unavailable(exc) from exc
    return JSONResponse([sanitize_submission_output(item) for item in submissions])


@router.get("/api/forms/{form_id}/export", tags=["api/submissions"])
async def api_export_form(request: Request, form_id: str) -> Response:
    storage = request.app.state.storage
    settings = request.app.state.settings
    form = get_form_or_404(request, form_id)
    try:
        submissions = storage.submissions.list_submissions(form_id)
    except StorageError as exc:
        raise store_unavailable(exc) from exc
    if not submissions:
        raise HTTPException(status_code=404, detail="No submissions found for this form")
    content = build_workbook(submissions, settings.timezone, settings.date_format)
    return xlsx_response(content, export_filename(form))


@router.get("/healthz", tags=["system"])
async def healthz() -> dict[str, str]:
    return {"status": "ok"}
