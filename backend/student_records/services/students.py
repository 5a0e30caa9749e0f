"""Student record store.

Each operation is a single parameterized statement against ``students``,
except listing, which issues a page query followed by an independent count
query. The two are not wrapped in a shared transaction, so under concurrent
writes the count may briefly disagree with the page.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_records.core.errors import NotFoundError, StoreError, ValidationError
from student_records.models.entities import Student

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MUTABLE_FIELDS = ("name", "email", "phone", "course", "enrolment_date")
# Driver errors raised while binding parameters, e.g. ints wider than the
# column on SQLite, are not wrapped by SQLAlchemy.
STORE_ERRORS = (SQLAlchemyError, OverflowError)


@dataclass(frozen=True)
class Pagination:
    total: int
    page: int
    limit: int
    total_pages: int

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit() and int(text) > 0:
            return int(text)
    return default


def parse_student_id(raw: Any) -> int:
    """Return ``raw`` as a positive integer id or raise ``ValidationError``."""
    if isinstance(raw, bool):
        raise ValidationError("Invalid student id")
    if isinstance(raw, int):
        student_id = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        student_id = int(raw.strip())
    else:
        raise ValidationError("Invalid student id")
    if student_id <= 0:
        raise ValidationError("Invalid student id")
    return student_id


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_student_fields(payload: dict[str, Any]) -> None:
    if _is_blank(payload.get("name")):
        raise ValidationError("Name is required")
    if _is_blank(payload.get("email")):
        raise ValidationError("Email is required")


def serialize_student(student: Student) -> dict[str, Any]:
    return {
        "id": student.id,
        "name": student.name,
        "email": student.email,
        "phone": student.phone,
        "course": student.course,
        "enrolment_date": student.enrolment_date,
        "is_active": student.is_active,
    }


def _as_stored(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value)


def _mutable_values(payload: dict[str, Any]) -> dict[str, Any]:
    return {field: _as_stored(payload.get(field)) for field in MUTABLE_FIELDS}


def list_students(
    db: Session,
    search: Any = "",
    page: Any = None,
    limit: Any = None,
) -> tuple[list[Student], Pagination]:
    search_text = search if isinstance(search, str) else ""
    page_number = _positive_int(page, DEFAULT_PAGE)
    page_size = _positive_int(limit, DEFAULT_LIMIT)
    offset = (page_number - 1) * page_size
    pattern = f"%{search_text}%"

    try:
        rows = (
            db.query(Student)
            .filter(Student.name.ilike(pattern), Student.is_active.is_(True))
            .order_by(Student.id.desc())
            .limit(page_size)
            .offset(offset)
            .all()
        )
        total = (
            db.query(func.count(Student.id))
            .filter(Student.name.ilike(pattern), Student.is_active.is_(True))
            .scalar()
        )
    except STORE_ERRORS as exc:
        raise StoreError() from exc

    total = int(total or 0)
    pagination = Pagination(
        total=total,
        page=page_number,
        limit=page_size,
        total_pages=math.ceil(total / page_size),
    )
    return rows, pagination


def get_student(db: Session, student_id: int) -> Student:
    try:
        student = (
            db.query(Student)
            .filter(Student.id == student_id, Student.is_active.is_(True))
            .one_or_none()
        )
    except STORE_ERRORS as exc:
        raise StoreError() from exc
    if student is None:
        raise NotFoundError()
    return student


def create_student(db: Session, payload: dict[str, Any]) -> dict[str, Any]:
    validate_student_fields(payload)
    values = _mutable_values(payload)
    student = Student(**values, is_active=True)
    try:
        db.add(student)
        db.flush()
        student_id = student.id
        db.commit()
    except STORE_ERRORS as exc:
        db.rollback()
        raise StoreError() from exc
    logger.info("Created student %s", student_id)
    # Echo the submitted fields rather than re-reading the stored row.
    submitted = {field: payload[field] for field in MUTABLE_FIELDS if field in payload}
    return {"id": student_id, **submitted}


def update_student(db: Session, student_id: int, payload: dict[str, Any]) -> None:
    validate_student_fields(payload)
    try:
        # Filters by id only: inactive rows remain updatable.
        matched = (
            db.query(Student)
            .filter(Student.id == student_id)
            .update(_mutable_values(payload), synchronize_session=False)
        )
        db.commit()
    except STORE_ERRORS as exc:
        db.rollback()
        raise StoreError() from exc
    if matched == 0:
        raise NotFoundError()
    logger.info("Updated student %s", student_id)


def deactivate_student(db: Session, student_id: int) -> None:
    try:
        matched = (
            db.query(Student)
            .filter(Student.id == student_id)
            .update({"is_active": False}, synchronize_session=False)
        )
        db.commit()
    except STORE_ERRORS as exc:
        db.rollback()
        raise StoreError() from exc
    if matched == 0:
        raise NotFoundError()
    logger.info("Soft-deleted student %s", student_id)
