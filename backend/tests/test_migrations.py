from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

SCRIPT_LOCATION = Path(__file__).resolve().parents[1] / "student_records" / "alembic"


def _alembic_config(url):
    cfg = Config()
    cfg.set_main_option("script_location", str(SCRIPT_LOCATION))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def test_initial_migration_upgrades_and_downgrades(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = _alembic_config(url)

    command.upgrade(cfg, "head")
    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert {"users", "students"} <= set(inspector.get_table_names())
        columns = {column["name"] for column in inspector.get_columns("students")}
        assert columns == {"id", "name", "email", "phone", "course", "enrolment_date", "is_active"}
        indexes = {index["name"] for index in inspector.get_indexes("students")}
        assert "ix_students_is_active_id" in indexes

        with engine.begin() as connection:
            connection.exec_driver_sql("INSERT INTO students (name, email) VALUES ('Ada', 'ada@example.com')")
            is_active = connection.exec_driver_sql("SELECT is_active FROM students").scalar()
        assert is_active == 1

        command.downgrade(cfg, "base")
        remaining = set(inspect(engine).get_table_names())
        assert "students" not in remaining
        assert "users" not in remaining
    finally:
        engine.dispose()
