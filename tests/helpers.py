"""Builders for stored fixtures and a store that fails on demand."""

from typing import Any

from formify.protocols import StorageError
from formify.utils import new_id, now_utc


def make_form(storage, title: str = "Feedback", questions: list[dict[str, Any]] | None = None, **extra) -> dict[str, Any]:
    form = {
        "id": new_id(),
        "title": title,
        "description": extra.get("description", ""),
        "questions": questions if questions is not None else [],
        "created_at": extra.get("created_at", now_utc()),
    }
    storage.forms.create_form(form)
    return form


def make_submission(storage, form_id: str, answers: dict[str, Any], submitted_at=None) -> dict[str, Any]:
    submission = {
        "id": new_id(),
        "form_id": form_id,
        "answers": answers,
        "submitted_at": submitted_at or now_utc(),
    }
    storage.submissions.create_submission(submission)
    return submission


class FailingRepo:
    """Delegates reads to a real repo and fails the named write/read calls."""

    def __init__(self, repo, failing: set[str]) -> None:
        self._repo = repo
        self._failing = failing

    def __getattr__(self, name: str):
        if name in self._failing:
            def fail(*args, **kwargs):
                raise StorageError(f"{name} unavailable")

            return fail
        return getattr(self._repo, name)


class FailingStorage:
    def __init__(self, storage, failing: set[str]) -> None:
        self.forms = FailingRepo(storage.forms, failing)
        self.submissions = FailingRepo(storage.submissions, failing)
