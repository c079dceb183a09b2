from __future__ import annotations

from typing import Any, Protocol


class StorageError(RuntimeError):
    """A store call failed; the caller aborts the operation and reports it."""


class FormRepository(Protocol):
    def list_forms(self) -> list[dict[str, Any]]: ...

    def get_form(self, form_id: str) -> dict[str, Any] | None: ...

    def create_form(self, form: dict[str, Any]) -> None: ...

    def delete_form(self, form_id: str) -> None: ...


class SubmissionRepository(Protocol):
    def list_submissions(self, form_id: str | None = None) -> list[dict[str, Any]]: ...

    def create_submission(self, submission: dict[str, Any]) -> None: ...


class Storage(Protocol):
    forms: FormRepository
    submissions: SubmissionRepository
