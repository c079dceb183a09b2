"""Supabase repositories against a mocked client."""

from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from formify.protocols import StorageError
from formify.repo_supabase import SupabaseStorage, init_supabase
from formify.utils import new_id, now_utc


def client_returning(data):
    client = MagicMock()
    table = client.table.return_value
    for method in ("select", "eq", "order", "limit", "insert", "delete"):
        getattr(table, method).return_value = table
    table.execute.return_value = MagicMock(data=data)
    return client, table


class TestSupabaseForms:
    def test_list_maps_rows(self):
        form_id = new_id()
        client, table = client_returning(
            [
                {
                    "id": form_id,
                    "title": "Feedback",
                    "description": None,
                    "questions": [{"id": "q", "type": "text", "question": "Name"}],
                    "created_at": "2026-10-19T08:00:00Z",
                }
            ]
        )
        forms = SupabaseStorage(client).forms.list_forms()
        client.table.assert_called_with("forms")
        table.order.assert_called_with("created_at", desc=True)
        assert forms[0]["id"] == form_id
        assert forms[0]["description"] == ""
        assert forms[0]["created_at"].year == 2026

    def test_get_non_uuid_skips_query(self):
        client, _ = client_returning([])
        assert SupabaseStorage(client).forms.get_form("not-a-uuid") is None
        client.table.assert_not_called()

    def test_api_error_becomes_storage_error(self):
        client, table = client_returning([])
        table.execute.side_effect = APIError({"message": "boom"})
        with pytest.raises(StorageError):
            SupabaseStorage(client).forms.list_forms()


class TestSupabaseSubmissions:
    def test_filter_and_decode_string_answers(self):
        form_id = new_id()
        client, table = client_returning(
            [
                {
                    "id": new_id(),
                    "form_id": form_id,
                    "answers": '{"name": "Alice"}',
                    "submitted_at": "2026-10-19T08:00:00+00:00",
                }
            ]
        )
        submissions = SupabaseStorage(client).submissions.list_submissions(form_id)
        table.eq.assert_called_with("form_id", form_id)
        assert submissions[0]["answers"] == {"name": "Alice"}

    def test_insert_serializes_timestamp(self):
        client, table = client_returning([])
        submission = {"id": new_id(), "form_id": new_id(), "answers": {}, "submitted_at": now_utc()}
        SupabaseStorage(client).submissions.create_submission(submission)
        row = table.insert.call_args.args[0]
        assert isinstance(row["submitted_at"], str)


def test_init_requires_credentials():
    with pytest.raises(StorageError):
        init_supabase("", "")
