from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from formify.models import Base, FormModel, SubmissionModel
from formify.protocols import StorageError
from formify.utils import dumps_json, loads_json, parse_dt

logger = logging.getLogger(__name__)


class SQLiteRepoBase:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._Session() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("SQLite store call failed")
            raise StorageError(str(exc)) from exc


class SQLiteFormRepo(SQLiteRepoBase):
    def list_forms(self) -> list[dict[str, Any]]:
        with self._session() as session:
            rows = session.query(FormModel).order_by(FormModel.created_at.desc()).all()
            return [self._to_dict(row) for row in rows]

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        with self._session() as session:
            row = session.get(FormModel, form_id)
            return self._to_dict(row) if row else None

    def create_form(self, form: dict[str, Any]) -> None:
        with self._session() as session:
            row = FormModel(
                id=form["id"],
                title=form["title"],
                description=form.get("description", ""),
                questions=dumps_json(form["questions"]),
                created_at=form["created_at"],
            )
            session.add(row)
            session.commit()

    def delete_form(self, form_id: str) -> None:
        with self._session() as session:
            session.query(SubmissionModel).filter(
                SubmissionModel.form_id == form_id
            ).delete(synchronize_session=False)
            session.query(FormModel).filter(FormModel.id == form_id).delete(
                synchronize_session=False
            )
            session.commit()

    @staticmethod
    def _to_dict(row: FormModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "title": row.title,
            "description": row.description or "",
            "questions": loads_json(row.questions) or [],
            "created_at": parse_dt(row.created_at),
        }


class SQLiteSubmissionRepo(SQLiteRepoBase):
    def list_submissions(self, form_id: str | None = None) -> list[dict[str, Any]]:
        with self._session() as session:
            query = session.query(SubmissionModel)
            if form_id is not None:
                query = query.filter(SubmissionModel.form_id == form_id)
            rows = query.order_by(SubmissionModel.submitted_at.desc()).all()
            return [self._to_dict(row) for row in rows]

    def create_submission(self, submission: dict[str, Any]) -> None:
        with self._session() as session:
            row = SubmissionModel(
                id=submission["id"],
                form_id=submission["form_id"],
                answers=dumps_json(submission["answers"]),
                submitted_at=submission["submitted_at"],
            )
            session.add(row)
            session.commit()

    @staticmethod
    def _to_dict(row: SubmissionModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "form_id": row.form_id,
            "answers": loads_json(row.answers) or {},
            "submitted_at": parse_dt(row.submitted_at),
        }


class SQLiteStorage:
    def __init__(self, db_path: Path) -> None:
        self._engine = create_engine(f"sqlite:///{db_path}", future=True)
        self._Session = sessionmaker(self._engine, expire_on_commit=False)
        Base.metadata.create_all(self._engine)
        self.forms = SQLiteFormRepo(self._Session)
        self.submissions = SQLiteSubmissionRepo(self._Session)
