"""Out-of-band data setup: user accounts and demo student rows.

Usage::

    python -m student_records.seed init-db
    python -m student_records.seed create-user --username admin --password secret
    python -m student_records.seed demo-students
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from student_records.core.config import settings
from student_records.core.database import SessionLocal, init_db
from student_records.core.logging_config import setup_logging
from student_records.models.entities import Student, User
from student_records.services.auth import hash_password

logger = logging.getLogger(__name__)

DEMO_STUDENTS = [
    ("Ada Lovelace", "ada@example.com", "555-0100", "Mathematics", "2024-01-15"),
    ("Alan Turing", "alan@example.com", "555-0101", "Computer Science", "2024-02-01"),
    ("Grace Hopper", "grace@example.com", "555-0102", "Computer Science", "2024-02-20"),
    ("Katherine Johnson", "katherine@example.com", None, "Physics", "2024-03-05"),
    ("Edsger Dijkstra", "edsger@example.com", "555-0104", None, None),
]


def create_user(db: Session, username: str, password: str) -> User:
    username = username.strip()
    if not username or not password:
        raise ValueError("username and password must be non-empty")
    if db.query(User).filter(User.username == username).one_or_none():
        raise ValueError(f"user {username!r} already exists")
    salt, digest = hash_password(password)
    user = User(username=username, password_salt=salt, password_hash=digest)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def seed_demo_students(db: Session) -> int:
    for name, email, phone, course, enrolment_date in DEMO_STUDENTS:
        db.add(
            Student(
                name=name,
                email=email,
                phone=phone,
                course=course,
                enrolment_date=enrolment_date,
                is_active=True,
            )
        )
    db.commit()
    return len(DEMO_STUDENTS)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="student_records.seed")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="create tables that do not exist yet")
    user_parser = sub.add_parser("create-user", help="add a login account")
    user_parser.add_argument("--username", required=True)
    user_parser.add_argument("--password", required=True)
    sub.add_parser("demo-students", help="insert sample student rows")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)

    if args.command == "init-db":
        init_db()
        logger.info("Tables created")
        return 0

    db = SessionLocal()
    try:
        if args.command == "create-user":
            try:
                user = create_user(db, args.username, args.password)
            except ValueError as exc:
                logger.error("%s", exc)
                return 1
            logger.info("Created user %s (id=%s)", user.username, user.id)
        elif args.command == "demo-students":
            count = seed_demo_students(db)
            logger.info("Inserted %s demo students", count)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
