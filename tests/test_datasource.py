"""Round trips against an in-memory SQLite database."""

from datetime import date, datetime

import pytest
from sqlalchemy import MetaData, Table, create_engine, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.pool import StaticPool

from sqlmask.core.datasource import SqlAlchemyDataSource
from sqlmask.core.manager import DialectManager, SecurityManager
from sqlmask.core.obfuscation import ObfuscationRule
from sqlmask.core.settings import MaskingSettings, SettingsStore

SCHEMA = (
    "CREATE TABLE samples ("
    "id INTEGER PRIMARY KEY, label VARCHAR(20), note TEXT, amount REAL, active BOOLEAN, "
    "payload BLOB, born DATE, seen DATETIME, code VARCHAR(10), UNIQUE (code))"
)

ROWS = [
    {
        "id": 1, "label": "O'Brien", "note": None, "amount": 12.5, "active": True,
        "payload": b"\x00\xff", "born": date(1990, 5, 17),
        "seen": datetime(2024, 1, 2, 3, 4, 5, 678000), "code": "C1",
    },
    {
        "id": 2, "label": "Ann", "note": "ann@example.com", "amount": -3.0, "active": False,
        "payload": b"abc", "born": date(2001, 12, 31),
        "seen": datetime(2023, 6, 7, 8, 9, 10), "code": "C2",
    },
]

HIDE_LABEL = {"label": ObfuscationRule.mask(1, 99, "*")}


@pytest.fixture
def source():
    engine = create_engine(
        "sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False}
    )
    data_source = SqlAlchemyDataSource(engine)
    data_source.execute(SCHEMA)
    manager = DialectManager("sqlite", data_source)
    for row in ROWS:
        data_source.execute(manager.generate_insert_sql(None, "samples", row))
    yield data_source
    engine.dispose()


@pytest.fixture
def security(source):
    return SecurityManager(source, SettingsStore(MaskingSettings(sample_size=5)))


def _stored_rows(source):
    samples = Table("samples", MetaData(), autoload_with=source.engine)
    with source.engine.connect() as connection:
        return [dict(row._mapping) for row in connection.execute(select(samples).order_by(samples.c.id))]


class TestIntrospection:
    """Schema metadata through SQLAlchemy reflection."""

    def test_column_types(self, source):
        types = source.get_column_types(None, "samples")
        assert types["id"] == "INTEGER"
        assert types["label"] == "VARCHAR(20)"
        assert types["seen"] == "DATETIME"
        assert source.get_column_names(None, "samples")[:3] == ["id", "label", "note"]

    def test_unique_keys(self, source):
        keys = source.get_unique_keys(None, "samples")
        assert keys[0] == ("id",)
        assert ("code",) in keys
        assert len(keys) == len(set(keys))

    def test_dialect_name(self, source):
        assert source.dialect_name == "sqlite"


class TestLiteralRoundTrip:
    """Generated literals read back as the original values."""

    def test_inserted_rows_read_back(self, source):
        assert _stored_rows(source) == ROWS

    def test_update_with_unique_key(self, source):
        manager = DialectManager("sqlite", source)
        sql = manager.generate_update_sql(
            None, "samples", {"note": "it's"}, {"label": "Ann", "code": "C2"}, filtered_by_unique_key=True
        )
        assert sql == "UPDATE samples SET note = 'it''s' WHERE code = 'C2';"
        assert source.execute(sql) == 1
        assert _stored_rows(source)[1]["note"] == "it's"

    def test_delete_with_unique_key(self, source):
        manager = DialectManager("sqlite", source)
        sql = manager.generate_delete_sql(
            None, "samples", {"label": "O'Brien", "code": "C1"}, filtered_by_unique_key=True
        )
        assert sql == "DELETE FROM samples WHERE code = 'C1';"
        assert source.execute(sql) == 1
        assert [row["id"] for row in _stored_rows(source)] == [2]

    def test_delete_matching_null_column(self, source):
        sql = DialectManager("sqlite", source).generate_delete_sql(None, "samples", {"note": None})
        assert sql == "DELETE FROM samples WHERE note IS NULL;"
        assert source.execute(sql) == 1


class TestFetching:
    """Column samples and query rows."""

    def test_column_values_are_limited(self, source):
        assert source.fetch_column_values(None, "samples", "code", 1) == ["C1"]
        assert source.fetch_column_values(None, "samples", "code", 0) == []

    def test_fetch_rows_keeps_column_order(self, source):
        rows = source.fetch_rows("SELECT code, id FROM samples ORDER BY id", limit=1)
        assert rows == [{"code": "C1", "id": 1}]
        assert list(rows[0]) == ["code", "id"]


class TestSecurityManager:
    """Masked reads and scans."""

    def test_query_with_alias(self, security):
        rows = security.query_with_mask("SELECT label AS tag, id FROM samples ORDER BY id", HIDE_LABEL)
        assert rows == [{"tag": "O******", "id": 1}, {"tag": "A**", "id": 2}]

    def test_query_with_alias_and_rename_off(self, security):
        security.settings.handle_rename = False
        rows = security.query_with_mask("SELECT label AS tag FROM samples ORDER BY id", HIDE_LABEL, limit=1)
        assert rows == [{"tag": "O'Brien"}]

    def test_table_data_with_mask(self, security):
        rows = security.table_data_with_mask(None, "samples", {"code": ObfuscationRule.truncate(0, 1)}, limit=1)
        assert len(rows) == 1
        assert rows[0]["code"] == "C"
        assert rows[0]["id"] == 1

    def test_script_with_mask(self, security):
        results = security.script_with_mask(
            "UPDATE samples SET label = 'Zed' WHERE id = 2;\n"
            "SELECT label AS tag FROM samples WHERE id = 2;\n"
            "SELECT label FROM samples WHERE id = 1;",
            HIDE_LABEL,
        )
        assert results == [[{"rows": 1}], [{"tag": "Z**"}], [{"label": "O******"}]]

    def test_failing_script_rolls_back_earlier_statements(self, security, source):
        with pytest.raises(DBAPIError):
            security.script_with_mask(
                "UPDATE samples SET label = 'b' WHERE id = 1;\n"
                "INSERT INTO missing_table VALUES (1);",
                HIDE_LABEL,
            )
        assert _stored_rows(source)[0]["label"] == "O'Brien"

    def test_execute_script_results(self, source):
        results = source.execute_script([
            "DELETE FROM samples WHERE id = 99",
            "SELECT id FROM samples ORDER BY id",
        ])
        assert results == [0, [{"id": 1}, {"id": 2}]]

    def test_scan_table_data(self, security):
        findings = security.scan_table_data(None, "samples", [r"^C\d$", r"@example\.com$"])
        assert [(f.column_name, f.match_data) for f in findings] == [
            ("note", ["ann@example.com"]),
            ("code", ["C1", "C2"]),
        ]

    def test_resolve_aliases(self, security):
        assert security.resolve_aliases("SELECT label AS tag FROM samples") == {"tag": ["label"]}
