from __future__ import annotations

import logging
from typing import Any

from formify.config import CHOICE_TYPES
from formify.notices import error_notice
from formify.protocols import Storage
from formify.schema import check_questions, load_draft_questions, new_question
from formify.utils import dumps_json, new_id, now_utc

logger = logging.getLogger(__name__)


class BuilderError(ValueError):
    def __init__(self, title: str, description: str) -> None:
        super().__init__(f"{title}: {description}")
        self.title = title
        self.description = description

    @property
    def notice(self) -> dict[str, str]:
        return error_notice(self.title, self.description)


def share_url(base_url: str, form_id: str) -> str:
    return f"{base_url.rstrip('/')}/form/{form_id}"


class FormDraft:
    """An unsaved form as edited in the builder.

    The draft round-trips through the builder page: every action posts the
    whole draft back, :meth:`from_form_data` rebuilds it and the action is
    applied on top.
    """

    def __init__(
        self,
        title: str = "",
        description: str = "",
        questions: list[dict[str, Any]] | None = None,
        form_id: str = "",
    ) -> None:
        self.title = title
        self.description = description
        self.questions: list[dict[str, Any]] = list(questions or [])
        self.form_id = form_id

    @classmethod
    def from_form_data(cls, form_data: Any) -> "FormDraft":
        draft = cls(
            title=str(form_data.get("title", "")),
            description=str(form_data.get("description", "")),
            questions=load_draft_questions(str(form_data.get("questions_json", ""))),
            form_id=str(form_data.get("form_id", "")).strip(),
        )
        for index, question in enumerate(list(draft.questions)):
            prefix = f"q-{index}-"
            if f"{prefix}question" not in form_data:
                continue
            updates: dict[str, Any] = {
                "question": str(form_data.get(f"{prefix}question", "")).strip(),
                "required": f"{prefix}required" in form_data,
            }
            if question["type"] in CHOICE_TYPES:
                raw_options = str(form_data.get(f"{prefix}options", ""))
                updates["options"] = [
                    line.strip() for line in raw_options.splitlines() if line.strip()
                ]
            draft.update_question(index, updates)
        return draft

    @property
    def questions_json(self) -> str:
        return dumps_json(self.questions)

    def add_question(self, question_type: str) -> dict[str, Any]:
        question = new_question(question_type)
        self.questions = [*self.questions, question]
        return question

    def remove_question(self, index: int) -> None:
        self.questions = [q for idx, q in enumerate(self.questions) if idx != index]

    def update_question(self, index: int, updates: dict[str, Any]) -> None:
        if not 0 <= index < len(self.questions):
            return
        questions = list(self.questions)
        questions[index] = {**questions[index], **updates}
        self.questions = questions

    def save(self, storage: Storage) -> dict[str, Any]:
        """Persist the draft as a new form.

        Raises :class:`BuilderError` without touching the store when the draft
        is incomplete. Store failures propagate as ``StorageError`` and leave
        the draft as it was.
        """
        if not self.title.strip():
            raise BuilderError(
                "Form Title Required",
                "Please add a title to your form before saving.",
            )
        problems = check_questions(self.questions)
        if problems:
            raise BuilderError("Incomplete Questions", " ".join(problems))

        form = {
            "id": new_id(),
            "title": self.title.strip(),
            "description": self.description.strip(),
            "questions": self.questions,
            "created_at": now_utc(),
        }
        storage.forms.create_form(form)
        self.form_id = form["id"]
        logger.info("Saved form %s (%d questions)", form["id"], len(self.questions))
        return form

    def share_url(self, base_url: str, storage: Storage) -> str:
        """Public link for the saved form; the id must exist in the store."""
        if not self.form_id or storage.forms.get_form(self.form_id) is None:
            raise BuilderError(
                "Save Form First",
                "Please save your form before generating a sharing link.",
            )
        return share_url(base_url, self.form_id)
