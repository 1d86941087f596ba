from pathlib import Path

from src.event_attendance.event_attendance.database.bootstrap import (
    _strip_create_db_and_use,
    as_db_config,
    iter_sql_statements,
)

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_split_ignores_semicolons_in_quotes_and_comment_lines():
    sql = "-- setup; not a statement\nINSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES ('it\\'s');\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        "INSERT INTO t VALUES ('it\\'s')",
        "SELECT 1",
    ]


def test_schema_creates_every_table_without_switching_database():
    statements = list(iter_sql_statements(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))))

    tables = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE IF NOT EXISTS")]
    assert tables == [
        "clusters",
        "courses",
        "sections",
        "students",
        "student_biometrics",
        "locations",
        "events",
        "attendance_records",
        "attendance_pings",
    ]
    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)


def test_db_config_defaults():
    cfg = as_db_config({"host": "db", "port": "3307"})

    assert cfg.host == "db"
    assert cfg.port == 3307
    assert cfg.user == "root"
