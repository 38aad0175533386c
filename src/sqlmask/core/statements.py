#!/usr/bin/env python3
"""
Literal Statement Generator
Builds literal INSERT/UPDATE/DELETE SQL text for a dialect from row data and schema metadata.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .datasource import SchemaIntrospector
from .dialects import Dialect, get_dialect


class StatementGenerator:
    """
    Generates literal DML for one dialect.

    Declared column types and unique keys come from the introspector; without
    one, literals are formatted from the runtime values alone.
    """

    def __init__(self, dialect, introspector: Optional[SchemaIntrospector] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.dialect: Dialect = get_dialect(dialect)
        self.introspector = introspector

    def column_types(self, schema_name: Optional[str], table_name: str) -> Dict[str, str]:
        """Declared type per lower-cased column name."""
        if self.introspector is None:
            return {}
        types = self.introspector.get_column_types(schema_name, table_name) or {}
        return {name.lower(): type_name for name, type_name in types.items()}

    def unique_columns(self, schema_name: Optional[str], table_name: str) -> set:
        """Columns that on their own carry a primary key or unique constraint."""
        if self.introspector is None:
            return set()
        return {
            key[0].lower()
            for key in self.introspector.get_unique_keys(schema_name, table_name)
            if len(key) == 1
        }

    def filter_condition(
        self,
        schema_name: Optional[str],
        table_name: str,
        where: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Narrow a condition to the first column that identifies a row on its own.

        Columns are checked in the order supplied. A NULL value never identifies
        a row, so such columns are passed over. Falls back to every column.
        """
        unique = self.unique_columns(schema_name, table_name)
        for column, value in where.items():
            if value is not None and column.lower() in unique:
                return {column: value}
        return dict(where)

    def generate_insert_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        data: Mapping[str, Any]
    ) -> str:
        """
        Build an INSERT for one row.

        Raises:
            ValueError: data is empty
        """
        column_types = self.column_types(schema_name, table_name)
        return self.dialect.insert_sql(schema_name, table_name, data, column_types)

    def generate_update_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        set_data: Mapping[str, Any],
        where: Optional[Mapping[str, Any]],
        filtered_by_unique_key: bool = False
    ) -> Optional[str]:
        """
        Build an UPDATE; returns None instead of an unconditional update.

        Dialects whose updates are upserts always narrow the condition to a
        unique key, whatever `filtered_by_unique_key` says.
        """
        if not where or not set_data:
            self.logger.info(f"No UPDATE generated for {table_name}: empty SET or WHERE")
            return None

        condition = (
            self.filter_condition(schema_name, table_name, where)
            if filtered_by_unique_key or self.dialect.update_by_unique_key else where
        )
        column_types = self.column_types(schema_name, table_name)
        return self.dialect.update_sql(schema_name, table_name, set_data, condition, column_types)

    def generate_delete_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        where: Optional[Mapping[str, Any]],
        filtered_by_unique_key: bool = False
    ) -> Optional[str]:
        """Build a DELETE; returns None instead of an unconditional delete."""
        if not where:
            self.logger.info(f"No DELETE generated for {table_name}: empty WHERE")
            return None

        condition = (
            self.filter_condition(schema_name, table_name, where)
            if filtered_by_unique_key else where
        )
        column_types = self.column_types(schema_name, table_name)
        return self.dialect.delete_sql(schema_name, table_name, condition, column_types)
