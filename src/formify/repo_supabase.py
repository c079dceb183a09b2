from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from formify.protocols import StorageError
from formify.utils import loads_json, parse_dt, to_iso

logger = logging.getLogger(__name__)

FORMS_TABLE = "forms"
SUBMISSIONS_TABLE = "form_submissions"


def init_supabase(url: str, key: str) -> Client:
    if not url or not key:
        raise StorageError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class SupabaseRepoBase:
    def __init__(self, client: Client) -> None:
        self._client = client

    @contextmanager
    def _call(self, table: str) -> Iterator[Any]:
        try:
            yield self._client.table(table)
        except (APIError, httpx.HTTPError) as exc:
            logger.exception("Supabase call on %s failed", table)
            raise StorageError(str(exc)) from exc


class SupabaseFormRepo(SupabaseRepoBase):
    def list_forms(self) -> list[dict[str, Any]]:
        with self._call(FORMS_TABLE) as table:
            response = table.select("*").order("created_at", desc=True).execute()
        return [self._from_row(row) for row in response.data or []]

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        # the id column is a uuid; anything else cannot match
        if not _is_uuid(form_id):
            return None
        with self._call(FORMS_TABLE) as table:
            response = table.select("*").eq("id", form_id).limit(1).execute()
        rows = response.data or []
        return self._from_row(rows[0]) if rows else None

    def create_form(self, form: dict[str, Any]) -> None:
        with self._call(FORMS_TABLE) as table:
            table.insert(
                {
                    "id": form["id"],
                    "title": form["title"],
                    "description": form.get("description", ""),
                    "questions": form["questions"],
                    "created_at": to_iso(form["created_at"]),
                }
            ).execute()

    def delete_form(self, form_id: str) -> None:
        # form_submissions.form_id cascades on delete in the hosted schema
        if not _is_uuid(form_id):
            return
        with self._call(FORMS_TABLE) as table:
            table.delete().eq("id", form_id).execute()

    @staticmethod
    def _from_row(row: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": str(row["id"]),
            "title": row.get("title") or "",
            "description": row.get("description") or "",
            "questions": row.get("questions") or [],
            "created_at": parse_dt(row.get("created_at")),
        }


class SupabaseSubmissionRepo(SupabaseRepoBase):
    def list_submissions(self, form_id: str | None = None) -> list[dict[str, Any]]:
        if form_id is not None and not _is_uuid(form_id):
            return []
        with self._call(SUBMISSIONS_TABLE) as table:
            query = table.select("*")
            if form_id is not None:
                query = query.eq("form_id", form_id)
            response = query.order("submitted_at", desc=True).execute()
        return [self._from_row(row) for row in response.data or []]

    def create_submission(self, submission: dict[str, Any]) -> None:
        with self._call(SUBMISSIONS_TABLE) as table:
            table.insert(
                {
                    "id": submission["id"],
                    "form_id": submission["form_id"],
                    "answers": submission["answers"],
                    "submitted_at": to_iso(submission["submitted_at"]),
                }
            ).execute()

    @staticmethod
    def _from_row(row: dict[str, Any]) -> dict[str, Any]:
        answers = row.get("answers") or {}
        if isinstance(answers, str):
            answers = loads_json(answers) or {}
        return {
            "id": str(row["id"]),
            "form_id": str(row["form_id"]),
            "answers": answers,
            "submitted_at": parse_dt(row.get("submitted_at")),
        }


class SupabaseStorage:
    def __init__(self, client: Client) -> None:
        self.forms = SupabaseFormRepo(client)
        self.submissions = SupabaseSubmissionRepo(client)
