from __future__ import annotations

from typing import Any

from formify.config import QUESTION_TYPES


def collect_answers(form_data: Any, questions: list[dict[str, Any]]) -> dict[str, Any]:
    """Build the answer mapping for one submission from posted form data.

    Text and single-choice questions yield a string, checkbox questions a list
    of the ticked options in posted order. Unanswered questions are left out;
    ``required`` is only an HTML hint and is not checked here.
    """
    answers: dict[str, Any] = {}
    for question in questions:
        question_id = question["id"]
        question_type = question.get("type")
        if question_type not in QUESTION_TYPES:
            continue
        if question_type == "checkbox":
            values = [
                str(value)
                for value in form_data.getlist(question_id)
                if str(value) != ""
            ]
            if values:
                answers[question_id] = values
            continue
        raw_value = form_data.get(question_id)
        if raw_value is None:
            continue
        value = str(raw_value)
        if value.strip():
            answers[question_id] = value
    return answers


def answer_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, set)):
        return ", ".join(str(item) for item in value)
    return str(value)
