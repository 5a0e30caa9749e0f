from datetime import datetime
from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime
from student_records.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(120), nullable=False, unique=True, index=True)
    password_salt = Column(String(200), nullable=False)
    password_hash = Column(String(200), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Unbounded: values are stored as submitted, without length checks.
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    course = Column(Text, nullable=True)
    enrolment_date = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
