"""Shared fixtures: isolated stores under tmp_path and a TestClient per store."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from formify.app import create_app
from formify.config import Settings
from formify.repo_json import JSONStorage
from formify.repo_sqlite import SQLiteStorage


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    settings = Settings()
    settings.storage_backend = "sqlite"
    settings.sqlite_path = tmp_path / "formify.db"
    settings.json_path = tmp_path / "formify.json"
    settings.public_base_url = "http://forms.example"
    settings.timezone = "UTC"
    settings.date_format = "%m/%d/%Y"
    settings.default_theme = "light"
    return settings


@pytest.fixture(params=["sqlite", "json"])
def storage(request, settings: Settings):
    if request.param == "json":
        return JSONStorage(settings.json_path)
    return SQLiteStorage(settings.sqlite_path)


@pytest.fixture
def client(settings: Settings, storage) -> TestClient:
    return TestClient(create_app(settings, storage))
