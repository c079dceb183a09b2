from __future__ import annotations

import logging

from formify.config import Settings
from formify.protocols import Storage
from formify.repo_json import JSONStorage
from formify.repo_sqlite import SQLiteStorage

logger = logging.getLogger(__name__)


def init_storage(settings: Settings) -> Storage:
    backend = settings.storage_backend
    if backend == "supabase":
        from formify.repo_supabase import SupabaseStorage, init_supabase

        logger.info("Using Supabase store at %s", settings.supabase_url)
        return SupabaseStorage(init_supabase(settings.supabase_url, settings.supabase_key))
    if backend == "json":
        logger.info("Using JSON store at %s", settings.json_path)
        return JSONStorage(settings.json_path)
    logger.info("Using SQLite store at %s", settings.sqlite_path)
    return SQLiteStorage(settings.sqlite_path)
