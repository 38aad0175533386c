#!/usr/bin/env python3
"""
Dialect and Security Managers
Entry points that bind the formatter, generator, resolver and scanner to a data source.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import sqlparse

from .alias_resolver import resolve_aliases
from .datasource import SqlAlchemyDataSource
from .dialects import get_dialect
from .obfuscation import ObfuscationRule
from .orchestrator import MaskingOrchestrator
from .scanner import SensitiveColumn, SensitiveScanner
from .settings import DEFAULT_SETTINGS, resolve_settings
from .statements import StatementGenerator


class DialectManager:
    """Literal formatting and DML generation for one database type."""

    def __init__(self, dialect_name: str, introspector=None):
        self.dialect = get_dialect(dialect_name)
        self.generator = StatementGenerator(self.dialect, introspector)

    def format_data(self, data: Any, type_name: Optional[str] = None) -> str:
        return self.dialect.format_data(data, type_name)

    def generate_insert_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        data: Mapping[str, Any]
    ) -> str:
        return self.generator.generate_insert_sql(schema_name, table_name, data)

    def generate_update_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        set_data: Mapping[str, Any],
        where: Optional[Mapping[str, Any]],
        filtered_by_unique_key: bool = False
    ) -> Optional[str]:
        return self.generator.generate_update_sql(
            schema_name, table_name, set_data, where, filtered_by_unique_key
        )

    def generate_delete_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        where: Optional[Mapping[str, Any]],
        filtered_by_unique_key: bool = False
    ) -> Optional[str]:
        return self.generator.generate_delete_sql(
            schema_name, table_name, where, filtered_by_unique_key
        )


class SecurityManager:
    """
    Masked reads and sensitive-data scans against a SQLAlchemy data source.

    Features:
    - Query results masked by rules keyed on original column names
    - Alias-aware rule matching driven by the query text
    - Whole-table masked reads
    - Multi-statement scripts with masked query results
    - Bounded-sample sensitive data scans
    """

    def __init__(self, source: SqlAlchemyDataSource, settings=DEFAULT_SETTINGS):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.source = source
        self.settings = settings
        self.orchestrator = MaskingOrchestrator(settings)
        self.scanner = SensitiveScanner(source, source, settings)

    def query_with_mask(
        self,
        sql: str,
        rules: Mapping[str, ObfuscationRule],
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Run a query and mask its rows, following the query's aliases when enabled."""
        rows = self.source.fetch_rows(sql, limit)
        return self.orchestrator.mask_rows(rows, rules, sql=sql)

    def table_data_with_mask(
        self,
        schema_name: Optional[str],
        table_name: str,
        rules: Mapping[str, ObfuscationRule],
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Read a table or view and mask every row."""
        rows = self.source.fetch_table_rows(schema_name, table_name, limit)
        return self.orchestrator.mask_rows(rows, rules)

    def script_with_mask(
        self,
        script: str,
        rules: Mapping[str, ObfuscationRule]
    ) -> List[List[Dict[str, Any]]]:
        """
        Run a semicolon-separated script in one transaction.

        Returns:
            One entry per statement, in script order: the masked rows of a
            query, or ``[{"rows": n}]`` with the affected row count otherwise

        Raises:
            Any database error; the whole script is rolled back
        """
        statements = [
            sql for sql in (statement.strip().rstrip(";").strip() for statement in sqlparse.split(script))
            if sql
        ]
        self.logger.info(f"Running script of {len(statements)} statement(s)")
        outcomes = self.source.execute_script(statements)

        results: List[List[Dict[str, Any]]] = []
        for sql, outcome in zip(statements, outcomes):
            if isinstance(outcome, list):
                results.append(self.orchestrator.mask_rows(outcome, rules, sql=sql))
            else:
                results.append([{"rows": outcome}])
        return results

    def scan_table_data(
        self,
        schema_name: Optional[str],
        table_name: str,
        regex_list: Sequence[str],
        columns: Optional[Sequence[str]] = None
    ) -> List[SensitiveColumn]:
        """Scan every column of a table (or the given columns) for sensitive values."""
        self.logger.info(
            f"Scanning {table_name} with {len(regex_list)} pattern(s), "
            f"sample size {resolve_settings(self.settings).sample_size}"
        )
        return self.scanner.scan_table(schema_name, table_name, regex_list, columns)

    def resolve_aliases(self, sql: str) -> Dict[str, List[str]]:
        return resolve_aliases(sql).to_dict()
