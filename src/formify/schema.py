from __future__ import annotations

from typing import Any

import orjson
from jsonschema import Draft7Validator

from formify.config import CHOICE_TYPES, QUESTION_TYPES
from formify.utils import new_id, to_iso

# Shape of the "questions" column shared by every storage backend and the API.
QUESTIONS_JSON_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "type"],
        "properties": {
            "id": {"type": "string", "minLength": 1},
            "type": {"enum": list(QUESTION_TYPES)},
            "question": {"type": "string"},
            "required": {"type": "boolean"},
            "options": {"type": "array", "items": {"type": "string"}},
        },
    },
}

_validator = Draft7Validator(QUESTIONS_JSON_SCHEMA)


class QuestionError(ValueError):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def new_question(question_type: str) -> dict[str, Any]:
    if question_type not in QUESTION_TYPES:
        raise QuestionError([f"Unknown question type: {question_type}"])
    question: dict[str, Any] = {
        "id": new_id(),
        "type": question_type,
        "question": "",
        "required": False,
    }
    if question_type in CHOICE_TYPES:
        question["options"] = []
    return question


def normalize_question(raw: dict[str, Any]) -> dict[str, Any]:
    question_type = str(raw.get("type", "")).strip()
    question: dict[str, Any] = {
        "id": str(raw.get("id", "")).strip(),
        "type": question_type,
        "question": str(raw.get("question") or "").strip(),
        "required": bool(raw.get("required", False)),
    }
    if question_type in CHOICE_TYPES:
        question["options"] = [
            str(option).strip()
            for option in (raw.get("options") or [])
            if str(option).strip()
        ]
    return question


def check_questions(questions: list[dict[str, Any]]) -> list[str]:
    """Return human readable problems with a question list; empty when valid."""
    errors = [
        f"questions{''.join(f'[{p}]' for p in error.path)}: {error.message}"
        for error in sorted(_validator.iter_errors(questions), key=lambda e: list(e.path))
    ]
    if errors:
        return errors
    seen: set[str] = set()
    for index, question in enumerate(questions, start=1):
        if question["id"] in seen:
            errors.append(f"Question {index}: duplicate id ({question['id']})")
        seen.add(question["id"])
        if question["type"] in CHOICE_TYPES and not question.get("options"):
            errors.append(f"Question {index}: add at least one option")
    return errors


def parse_questions(raw_questions: Any) -> list[dict[str, Any]]:
    if not isinstance(raw_questions, list):
        raise QuestionError(["questions must be a list"])
    raw_errors = [
        error.message for error in _validator.iter_errors(raw_questions)
    ]
    if raw_errors:
        raise QuestionError(raw_errors)
    questions = [normalize_question(raw) for raw in raw_questions]
    errors = check_questions(questions)
    if errors:
        raise QuestionError(errors)
    return questions


def load_draft_questions(questions_json: str) -> list[dict[str, Any]]:
    """Decode the builder's hidden question list without enforcing completeness."""
    if not questions_json:
        return []
    try:
        raw = orjson.loads(questions_json)
    except orjson.JSONDecodeError as exc:
        raise QuestionError(["Could not read the question list"]) from exc
    if not isinstance(raw, list):
        raise QuestionError(["Could not read the question list"])
    questions: list[dict[str, Any]] = []
    for item in raw:
        if not isinstance(item, dict) or item.get("type") not in QUESTION_TYPES:
            continue
        question = normalize_question(item)
        if not question["id"]:
            question["id"] = new_id()
        questions.append(question)
    return questions


def sanitize_form_output(form: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": form["id"],
        "title": form["title"],
        "description": form.get("description", ""),
        "questions": form.get("questions", []),
        "created_at": to_iso(form["created_at"]) if form.get("created_at") else None,
    }
