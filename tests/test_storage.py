"""Store behaviour shared by the SQLite and JSON backends."""

from datetime import datetime, timedelta, timezone

from formify.config import Settings
from formify.repo_json import JSONStorage
from formify.repo_sqlite import SQLiteStorage
from formify.storage import init_storage
from helpers import make_form, make_submission


class TestFormRepo:
    def test_list_newest_first(self, storage):
        now = datetime.now(timezone.utc)
        old = make_form(storage, title="Old", created_at=now - timedelta(days=2))
        new = make_form(storage, title="New", created_at=now)
        assert [f["id"] for f in storage.forms.list_forms()] == [new["id"], old["id"]]

    def test_get_round_trips_questions(self, storage):
        questions = [{"id": "q1", "type": "checkbox", "question": "Pick", "required": True, "options": ["a"]}]
        form = make_form(storage, questions=questions, description="About")
        loaded = storage.forms.get_form(form["id"])
        assert loaded["questions"] == questions
        assert loaded["description"] == "About"
        assert loaded["created_at"].tzinfo is not None

    def test_get_missing(self, storage):
        assert storage.forms.get_form("nope") is None

    def test_delete_cascades_to_submissions(self, storage):
        form = make_form(storage)
        make_submission(storage, form["id"], {"q": "x"})
        storage.forms.delete_form(form["id"])
        assert storage.forms.list_forms() == []
        assert storage.submissions.list_submissions() == []


class TestSubmissionRepo:
    def test_filter_by_form(self, storage):
        first = make_form(storage)
        second = make_form(storage)
        make_submission(storage, first["id"], {"q": "1"})
        make_submission(storage, second["id"], {"q": "2"})
        assert [s["answers"] for s in storage.submissions.list_submissions(first["id"])] == [{"q": "1"}]
        assert len(storage.submissions.list_submissions()) == 2

    def test_newest_first(self, storage):
        form = make_form(storage)
        now = datetime.now(timezone.utc)
        make_submission(storage, form["id"], {"n": "old"}, submitted_at=now - timedelta(hours=1))
        make_submission(storage, form["id"], {"n": "new"}, submitted_at=now)
        assert [s["answers"]["n"] for s in storage.submissions.list_submissions()] == ["new", "old"]


class TestInitStorage:
    def test_selects_backend(self, tmp_path):
        settings = Settings()
        settings.sqlite_path = tmp_path / "a.db"
        settings.json_path = tmp_path / "a.json"
        settings.storage_backend = "json"
        assert isinstance(init_storage(settings), JSONStorage)
        settings.storage_backend = "sqlite"
        assert isinstance(init_storage(settings), SQLiteStorage)
