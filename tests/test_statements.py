"""Tests for literal INSERT/UPDATE/DELETE generation."""

from datetime import date

import pytest

from sqlmask.core.manager import DialectManager
from sqlmask.core.statements import StatementGenerator


class StaticSchema:
    """In-memory schema introspector."""

    def __init__(self, column_types, unique_keys=()):
        self.column_types = column_types
        self.unique_keys = list(unique_keys)

    def get_column_types(self, schema_name, table_name):
        return dict(self.column_types)

    def get_unique_keys(self, schema_name, table_name):
        return list(self.unique_keys)

    def get_column_names(self, schema_name, table_name):
        return list(self.column_types)


USERS = StaticSchema(
    {"id": "INT", "full_name": "VARCHAR(20)", "created": "DATE", "note": "TEXT",
     "email": "VARCHAR(64)", "code": "INT"},
    unique_keys=[("id",), ("email",), ("full_name", "created")],
)

PHOENIX_USERS = StaticSchema(
    {"id": "INTEGER", "note": "VARCHAR", "email": "VARCHAR(64)", "code": "INTEGER"},
    unique_keys=[("id",), ("email",)],
)


class TestInsert:
    """INSERT statements."""

    def test_standard_insert(self):
        generator = StatementGenerator("mysql", USERS)
        sql = generator.generate_insert_sql(
            "shop", "users",
            {"id": 1, "full_name": "O'Brien", "created": date(2024, 1, 2), "note": None}
        )
        assert sql == (
            "INSERT INTO shop.users (id, full_name, created, note) "
            "VALUES (1, 'O''Brien', '2024-01-02', NULL);"
        )

    def test_schema_is_optional(self):
        generator = StatementGenerator("postgresql", USERS)
        assert generator.generate_insert_sql(None, "users", {"id": 2}) == \
            "INSERT INTO users (id) VALUES (2);"
        assert generator.generate_insert_sql("  ", "users", {"id": 2}) == \
            "INSERT INTO users (id) VALUES (2);"

    def test_empty_data_is_rejected(self):
        with pytest.raises(ValueError):
            StatementGenerator("sqlite", USERS).generate_insert_sql(None, "users", {})

    def test_hive_insert_select(self):
        schema = StaticSchema({"id": "INT", "label": "STRING"})
        sql = StatementGenerator("hive", schema).generate_insert_sql("db", "t", {"id": 1, "label": "x"})
        assert sql == "INSERT INTO db.t SELECT 1 AS id, 'x' AS label FROM (SELECT 1) t;"

    def test_phoenix_upsert(self):
        sql = StatementGenerator("phoenix", PHOENIX_USERS).generate_insert_sql(None, "users", {"id": 1})
        assert sql == "UPSERT INTO users (id) VALUES (1);"

    def test_column_types_are_matched_case_insensitively(self):
        schema = StaticSchema({"ID": "INT", "Label": "NVARCHAR(10)"})
        sql = StatementGenerator("mssql", schema).generate_insert_sql(None, "t", {"Id": "5", "LABEL": "a"})
        assert sql == "INSERT INTO t (Id, LABEL) VALUES (5, N'a');"

    def test_without_introspector_types_are_inferred(self):
        sql = StatementGenerator("oracle").generate_insert_sql(None, "t", {"n": 3, "s": "x"})
        assert sql == "INSERT INTO t (n, s) VALUES (3, 'x');"


class TestUpdate:
    """UPDATE statements."""

    def test_update_with_null_condition(self):
        generator = StatementGenerator("postgresql", USERS)
        sql = generator.generate_update_sql(None, "users", {"note": "y"}, {"id": 1, "code": None})
        assert sql == "UPDATE users SET note = 'y' WHERE id = 1 AND code IS NULL;"

    @pytest.mark.parametrize("set_data, where", [
        ({"note": "y"}, None),
        ({"note": "y"}, {}),
        ({}, {"id": 1}),
    ])
    def test_refuses_unconditional_or_empty_update(self, set_data, where):
        assert StatementGenerator("mysql", USERS).generate_update_sql(None, "users", set_data, where) is None

    def test_unique_key_filter(self):
        generator = StatementGenerator("mysql", USERS)
        sql = generator.generate_update_sql(
            None, "users", {"note": "z"}, {"note": "y", "id": 7}, filtered_by_unique_key=True
        )
        assert sql == "UPDATE users SET note = 'z' WHERE id = 7;"

    def test_phoenix_update_is_upsert(self):
        sql = StatementGenerator("phoenix", PHOENIX_USERS).generate_update_sql(
            None, "users", {"note": "y"}, {"id": 1}
        )
        assert sql == "UPSERT INTO users (id, note) VALUES (1, 'y');"

    def test_phoenix_set_value_wins_over_condition(self):
        orders = StaticSchema({"id": "INTEGER", "status": "VARCHAR"}, unique_keys=[("id",)])
        sql = StatementGenerator("phoenix", orders).generate_update_sql(
            None, "orders", {"status": "closed"}, {"id": 1, "status": "open"}
        )
        assert sql == "UPSERT INTO orders (id, status) VALUES (1, 'closed');"

    def test_phoenix_condition_is_always_narrowed(self):
        sql = StatementGenerator("phoenix", PHOENIX_USERS).generate_update_sql(
            None, "users", {"code": 9}, {"note": "old", "email": "a@b.io"}
        )
        assert sql == "UPSERT INTO users (email, code) VALUES ('a@b.io', 9);"

    def test_phoenix_without_unique_key_keeps_set_values(self):
        sql = StatementGenerator("phoenix").generate_update_sql(
            None, "orders", {"status": "closed"}, {"id": 1, "status": "open"}
        )
        assert sql == "UPSERT INTO orders (id, status) VALUES (1, 'closed');"


class TestDelete:
    """DELETE statements."""

    def test_refuses_unconditional_delete(self):
        generator = StatementGenerator("mysql", USERS)
        assert generator.generate_delete_sql(None, "users", None) is None
        assert generator.generate_delete_sql(None, "users", {}) is None

    def test_all_columns_without_flag(self):
        sql = StatementGenerator("mysql", USERS).generate_delete_sql(
            "shop", "users", {"note": "a", "id": 3}
        )
        assert sql == "DELETE FROM shop.users WHERE note = 'a' AND id = 3;"

    def test_first_unique_column_in_supplied_order(self):
        sql = StatementGenerator("mysql", USERS).generate_delete_sql(
            None, "users", {"note": "a", "email": "x@y.io", "id": 3}, filtered_by_unique_key=True
        )
        assert sql == "DELETE FROM users WHERE email = 'x@y.io';"

    def test_falls_back_to_all_columns(self):
        sql = StatementGenerator("mysql", USERS).generate_delete_sql(
            None, "users", {"note": "a", "code": 2}, filtered_by_unique_key=True
        )
        assert sql == "DELETE FROM users WHERE note = 'a' AND code = 2;"

    def test_composite_keys_do_not_identify_alone(self):
        sql = StatementGenerator("mysql", USERS).generate_delete_sql(
            None, "users", {"full_name": "a", "created": "2024-01-02"}, filtered_by_unique_key=True
        )
        assert sql == "DELETE FROM users WHERE full_name = 'a' AND created = '2024-01-02';"

    def test_null_unique_value_is_passed_over(self):
        sql = StatementGenerator("mysql", USERS).generate_delete_sql(
            None, "users", {"email": None, "id": 4}, filtered_by_unique_key=True
        )
        assert sql == "DELETE FROM users WHERE id = 4;"


class TestDialectManager:
    """Facade over one dialect."""

    def test_facade_delegates(self):
        manager = DialectManager("dm", USERS)
        assert manager.format_data(date(2024, 1, 2), "DATE") == "DATE '2024-01-02'"
        assert manager.generate_delete_sql(None, "users", {"id": 1}) == "DELETE FROM users WHERE id = 1;"
        assert manager.generate_update_sql(None, "users", {"note": "n"}, None) is None
        assert manager.generate_insert_sql(None, "users", {"id": 1}) == "INSERT INTO users (id) VALUES (1);"
