from starlette.datastructures import FormData

from formify.answers import answer_to_text, collect_answers

QUESTIONS = [
    {"id": "name", "type": "text", "question": "Name"},
    {"id": "color", "type": "multiple", "question": "Color", "options": ["Red", "Blue"]},
    {"id": "pets", "type": "checkbox", "question": "Pets", "options": ["Cat", "Dog"]},
]


def test_collects_each_question_type():
    data = FormData([("name", "Bob"), ("color", "Red"), ("pets", "Dog"), ("pets", "Cat")])
    assert collect_answers(data, QUESTIONS) == {
        "name": "Bob",
        "color": "Red",
        "pets": ["Dog", "Cat"],
    }


def test_unanswered_questions_are_omitted():
    data = FormData([("name", "   "), ("extra", "ignored")])
    assert collect_answers(data, QUESTIONS) == {}


def test_answer_to_text():
    assert answer_to_text(["Cat", "Dog"]) == "Cat, Dog"
    assert answer_to_text("Alice") == "Alice"
    assert answer_to_text(None) == ""
