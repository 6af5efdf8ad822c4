from shift_log.database.bootstrap import (
    SCHEMA_PATH,
    SEED_PATH,
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)


def test_splitter_respects_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;y\";\nSELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'SELECT "x;y"',
        "SELECT 1",
    ]


def test_splitter_handles_escaped_quote():
    sql = r"INSERT INTO t VALUES ('it\'s; fine');"
    assert list(iter_sql_statements(sql)) == [r"INSERT INTO t VALUES ('it\'s; fine')"]


def test_comments_and_database_statements_are_removed():
    sql = "CREATE DATABASE foo;\nUSE foo;\n-- note; with semicolon\nSELECT 1;"
    cleaned = _strip_line_comments(_strip_create_db_and_use(sql))
    assert list(iter_sql_statements(cleaned)) == ["SELECT 1"]


def test_bundled_schema_defines_tables_and_active_index():
    statements = list(iter_sql_statements(_strip_line_comments(SCHEMA_PATH.read_text(encoding="utf-8"))))
    joined = "\n".join(statements)
    for table in ("workers", "shifts", "facility_locations"):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in joined
    assert "uq_shifts_one_active" in joined


def test_bundled_seed_sets_primary_location():
    seed = SEED_PATH.read_text(encoding="utf-8")
    assert "'primary'" in seed
    assert "Main Healthcare Center" in seed
