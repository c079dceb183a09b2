from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class FormModel(Base):
    __tablename__ = "forms"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    questions = Column(Text)
    created_at = Column(DateTime(timezone=True), index=True)


class SubmissionModel(Base):
    __tablename__ = "form_submissions"

    id = Column(String, primary_key=True)
    form_id = Column(
        String, ForeignKey("forms.id", ondelete="CASCADE"), index=True
    )
    answers = Column(Text)
    submitted_at = Column(DateTime(timezone=True), index=True)
