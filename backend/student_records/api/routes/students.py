from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.orm import Session

from student_records.api.deps import get_current_user, get_db
from student_records.schemas.api import (
    MessageOut,
    StudentCreatedOut,
    StudentListOut,
    StudentOut,
)
from student_records.services import students as store

router = APIRouter(prefix="/students", dependencies=[Depends(get_current_user)])


def _submitted_fields(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        return {}
    return {field: body[field] for field in store.MUTABLE_FIELDS if field in body}


@router.get("", response_model=StudentListOut)
@router.get("/", response_model=StudentListOut, include_in_schema=False)
def list_students(
    search: str = Query(default=""),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    rows, pagination = store.list_students(db, search=search, page=page, limit=limit)
    return {
        "students": [store.serialize_student(row) for row in rows],
        "pagination": pagination.as_dict(),
    }


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    parsed_id = store.parse_student_id(student_id)
    return store.serialize_student(store.get_student(db, parsed_id))


@router.post("", status_code=201, response_model=StudentCreatedOut, response_model_exclude_unset=True)
@router.post(
    "/",
    status_code=201,
    response_model=StudentCreatedOut,
    response_model_exclude_unset=True,
    include_in_schema=False,
)
def create_student(body: Any = Body(default=None), db: Session = Depends(get_db)) -> dict[str, Any]:
    return store.create_student(db, _submitted_fields(body))


@router.put("/{student_id}", response_model=MessageOut)
def update_student(
    student_id: str,
    body: Any = Body(default=None),
    db: Session = Depends(get_db),
) -> dict[str, str]:
    parsed_id = store.parse_student_id(student_id)
    store.update_student(db, parsed_id, _submitted_fields(body))
    return {"message": "Student updated successfully"}


@router.delete("/{student_id}", status_code=204)
def delete_student(student_id: str, db: Session = Depends(get_db)) -> Response:
    parsed_id = store.parse_student_id(student_id)
    store.deactivate_student(db, parsed_id)
    return Response(status_code=204)
