from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from filelock import FileLock, Timeout
from tinydb import Query, TinyDB

from formify.protocols import StorageError
from formify.utils import parse_dt, to_iso

logger = logging.getLogger(__name__)


class JSONRepoBase:
    def __init__(self, path: Path, lock: FileLock) -> None:
        self._path = path
        self._lock = lock

    @contextmanager
    def _db(self) -> Iterator[TinyDB]:
        try:
            with self._lock:
                db = TinyDB(self._path)
                try:
                    yield db
                finally:
                    db.close()
        except (OSError, ValueError, Timeout) as exc:
            logger.exception("JSON store call failed: %s", self._path)
            raise StorageError(str(exc)) from exc


class JSONFormRepo(JSONRepoBase):
    def list_forms(self) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("forms").all()
        forms = [self._from_record(item) for item in items]
        return sorted(forms, key=lambda x: x["created_at"], reverse=True)

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(Query().id == form_id)
        return self._from_record(item) if item else None

    def create_form(self, form: dict[str, Any]) -> None:
        record = self._to_record(form)
        with self._db() as db:
            db.table("forms").insert(record)

    def delete_form(self, form_id: str) -> None:
        with self._db() as db:
            db.table("form_submissions").remove(Query().form_id == form_id)
            db.table("forms").remove(Query().id == form_id)

    @staticmethod
    def _to_record(form: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": form["id"],
            "title": form["title"],
            "description": form.get("description", ""),
            "questions": form["questions"],
            "created_at": to_iso(form["created_at"]),
        }

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "title": record.get("title", ""),
            "description": record.get("description", ""),
            "questions": record.get("questions", []),
            "created_at": parse_dt(record.get("created_at")),
        }


class JSONSubmissionRepo(JSONRepoBase):
    def list_submissions(self, form_id: str | None = None) -> list[dict[str, Any]]:
        with self._db() as db:
            table = db.table("form_submissions")
            if form_id is None:
                items = table.all()
            else:
                items = table.search(Query().form_id == form_id)
        submissions = [self._from_record(item) for item in items]
        return sorted(submissions, key=lambda x: x["submitted_at"], reverse=True)

    def create_submission(self, submission: dict[str, Any]) -> None:
        record = self._to_record(submission)
        with self._db() as db:
            db.table("form_submissions").insert(record)

    @staticmethod
    def _to_record(submission: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": submission["id"],
            "form_id": submission["form_id"],
            "answers": submission["answers"],
            "submitted_at": to_iso(submission["submitted_at"]),
        }

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "form_id": record["form_id"],
            "answers": record.get("answers", {}),
            "submitted_at": parse_dt(record.get("submitted_at")),
        }


class JSONStorage:
    def __init__(self, path: Path) -> None:
        self._lock = FileLock(f"{path}.lock", timeout=10)
        self.forms = JSONFormRepo(path, self._lock)
        self.submissions = JSONSubmissionRepo(path, self._lock)
