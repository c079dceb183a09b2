"""Tests for the public form page."""

from fastapi.testclient import TestClient

from formify.app import create_app
from helpers import FailingStorage, make_form


def feedback_form(storage):
    return make_form(
        storage,
        title="Feedback",
        questions=[{"id": "name", "type": "text", "question": "Name", "required": True}],
    )


class TestPublicForm:
    def test_renders_questions_with_required_marker(self, client, storage):
        form = feedback_form(storage)
        response = client.get(f"/form/{form['id']}")
        assert response.status_code == 200
        assert "<h1>Feedback</h1>" in response.text
        assert 'Name<span class="required">*</span>' in response.text

    def test_unknown_form(self, client):
        response = client.get("/form/does-not-exist")
        assert response.status_code == 404
        assert "Form not found" in response.text

    def test_submit_stores_answers(self, client, storage):
        form = feedback_form(storage)
        response = client.post(f"/form/{form['id']}", data={"name": "Alice"})
        assert response.status_code == 200
        assert "Your response has been submitted successfully." in response.text
        assert 'value="Alice"' not in response.text
        submissions = storage.submissions.list_submissions(form["id"])
        assert len(submissions) == 1
        assert submissions[0]["answers"] == {"name": "Alice"}
        assert submissions[0]["form_id"] == form["id"]

    def test_required_is_not_enforced_on_submit(self, client, storage):
        form = feedback_form(storage)
        client.post(f"/form/{form['id']}", data={})
        submissions = storage.submissions.list_submissions(form["id"])
        assert len(submissions) == 1
        assert submissions[0]["answers"] == {}

    def test_choice_answers(self, client, storage):
        form = make_form(
            storage,
            questions=[
                {"id": "color", "type": "multiple", "question": "Color", "options": ["Red", "Blue"]},
                {"id": "pets", "type": "checkbox", "question": "Pets", "options": ["Cat", "Dog"]},
            ],
        )
        client.post(f"/form/{form['id']}", data={"color": "Blue", "pets": ["Cat", "Dog"]})
        [submission] = storage.submissions.list_submissions(form["id"])
        assert submission["answers"] == {"color": "Blue", "pets": ["Cat", "Dog"]}

    def test_store_failure_keeps_entered_values(self, settings, storage):
        form = feedback_form(storage)
        client = TestClient(create_app(settings, FailingStorage(storage, {"create_submission"})))
        response = client.post(f"/form/{form['id']}", data={"name": "Alice"})
        assert response.status_code == 200
        assert "Failed to submit form. Please try again." in response.text
        assert 'value="Alice"' in response.text

    def test_load_failure(self, settings, storage):
        client = TestClient(create_app(settings, FailingStorage(storage, {"get_form"})))
        response = client.get("/form/anything")
        assert response.status_code == 503
        assert "Failed to load form" in response.text
