#!/usr/bin/env python3
"""
Data Source Collaborators
Schema introspection and data fetching boundaries, with a SQLAlchemy implementation.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from sqlalchemy import column, create_engine, inspect, literal_column, select, table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError


class SchemaIntrospector(Protocol):
    """Column type and uniqueness metadata for a table."""

    def get_column_types(self, schema_name: Optional[str], table_name: str) -> Dict[str, str]:
        ...

    def get_unique_keys(self, schema_name: Optional[str], table_name: str) -> List[Tuple[str, ...]]:
        ...

    def get_column_names(self, schema_name: Optional[str], table_name: str) -> List[str]:
        ...


class DataFetcher(Protocol):
    """Reads column samples and result rows."""

    def fetch_column_values(
        self,
        schema_name: Optional[str],
        table_name: str,
        column_name: str,
        limit: int
    ) -> Iterable[Any]:
        ...

    def fetch_rows(self, sql: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        ...


class SqlAlchemyDataSource:
    """
    SchemaIntrospector and DataFetcher backed by a SQLAlchemy engine.

    Errors raised by SQLAlchemy or the driver propagate unchanged.
    """

    def __init__(self, engine_or_url: Union[Engine, str], **engine_options):
        self.logger = logging.getLogger(self.__class__.__name__)
        if isinstance(engine_or_url, Engine):
            self.engine = engine_or_url
        else:
            self.engine = create_engine(engine_or_url, **engine_options)

    @property
    def dialect_name(self) -> str:
        """SQLAlchemy dialect name of the engine, e.g. 'sqlite' or 'postgresql'."""
        return self.engine.dialect.name

    def _type_name(self, column_type) -> str:
        try:
            return column_type.compile(dialect=self.engine.dialect)
        except CompileError:
            return column_type.__class__.__name__.upper()

    def get_column_types(self, schema_name: Optional[str], table_name: str) -> Dict[str, str]:
        """Declared type per column, keyed by lower-cased column name."""
        columns = inspect(self.engine).get_columns(table_name, schema=schema_name or None)
        return {
            info["name"].lower(): self._type_name(info["type"])
            for info in columns
        }

    def get_column_names(self, schema_name: Optional[str], table_name: str) -> List[str]:
        columns = inspect(self.engine).get_columns(table_name, schema=schema_name or None)
        return [info["name"] for info in columns]

    def get_unique_keys(self, schema_name: Optional[str], table_name: str) -> List[Tuple[str, ...]]:
        """Primary key first, then unique constraints and unique indexes."""
        inspector = inspect(self.engine)
        schema = schema_name or None
        keys: List[Tuple[str, ...]] = []

        primary_key = inspector.get_pk_constraint(table_name, schema=schema)
        if primary_key and primary_key.get("constrained_columns"):
            keys.append(tuple(primary_key["constrained_columns"]))

        for constraint in inspector.get_unique_constraints(table_name, schema=schema):
            keys.append(tuple(constraint["column_names"]))

        for index in inspector.get_indexes(table_name, schema=schema):
            if index.get("unique") and all(index.get("column_names") or [None]):
                keys.append(tuple(index["column_names"]))

        unique_keys: List[Tuple[str, ...]] = []
        for key in keys:
            if key not in unique_keys:
                unique_keys.append(key)
        return unique_keys

    def fetch_column_values(
        self,
        schema_name: Optional[str],
        table_name: str,
        column_name: str,
        limit: int
    ) -> List[Any]:
        """Up to `limit` values of one column in the engine's natural order."""
        if limit <= 0:
            return []

        source = table(table_name, column(column_name), schema=schema_name or None)
        query = select(source.c[column_name]).limit(limit)
        with self.engine.connect() as connection:
            return [row[0] for row in connection.execute(query)]

    def fetch_table_rows(
        self,
        schema_name: Optional[str],
        table_name: str,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        query = select(literal_column("*")).select_from(table(table_name, schema=schema_name or None))
        if limit is not None:
            query = query.limit(limit)
        with self.engine.connect() as connection:
            return [dict(row) for row in connection.execute(query).mappings()]

    def fetch_rows(self, sql: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Run a query and return its rows as ordered column -> value dicts."""
        with self.engine.connect() as connection:
            result = connection.exec_driver_sql(sql).mappings()
            rows = result.fetchmany(limit) if limit is not None else result.all()
            return [dict(row) for row in rows]

    def execute_script(self, statements: Sequence[str]) -> List[Union[List[Dict[str, Any]], int]]:
        """
        Run statements in order inside one transaction.

        Returns:
            Per statement, its rows as dicts when it returns rows, otherwise the
            affected row count. A failing statement rolls back the whole script.
        """
        results: List[Union[List[Dict[str, Any]], int]] = []
        with self.engine.begin() as connection:
            for sql in statements:
                result = connection.exec_driver_sql(sql)
                if result.returns_rows:
                    results.append([dict(row) for row in result.mappings()])
                else:
                    results.append(result.rowcount)
        self.logger.debug(f"Executed script of {len(results)} statement(s)")
        return results

    def execute(self, sql: str) -> int:
        """Execute one statement in its own transaction; returns the affected row count."""
        with self.engine.begin() as connection:
            result = connection.exec_driver_sql(sql)
            self.logger.debug(f"Executed statement, {result.rowcount} row(s) affected")
            return result.rowcount
