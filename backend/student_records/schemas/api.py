from pydantic import BaseModel
from typing import Any, List, Optional


class AuthOut(BaseModel):
    token: str


class StudentOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    course: Optional[str] = None
    enrolment_date: Optional[str] = None
    is_active: bool


class StudentCreatedOut(BaseModel):
    id: int
    name: Any = None
    email: Any = None
    phone: Any = None
    course: Any = None
    enrolment_date: Any = None


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class StudentListOut(BaseModel):
    students: List[StudentOut]
    pagination: PaginationOut


class MessageOut(BaseModel):
    message: str
