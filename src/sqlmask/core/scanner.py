#!/usr/bin/env python3
"""
Sensitive Data Scanner
Samples column values and flags the ones matching sensitive-data patterns.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Sequence, Tuple

from .datasource import DataFetcher, SchemaIntrospector
from .dialects import text_of
from .settings import DEFAULT_SETTINGS, resolve_settings


# Common patterns, usable as a starting regex list
DEFAULT_SENSITIVE_PATTERNS = {
    "email": r"[\w.+-]+@[\w-]+\.[\w.-]+",
    "phone": r"\b1[3-9]\d{9}\b|\b\d{3}[-.\s]\d{3}[-.\s]\d{4}\b",
    "ssn": r"\b\d{3}-\d{2}-\d{4}\b",
    "credit_card": r"\b(?:\d{4}[-\s]?){3}\d{4}\b",
    "ipv4": r"\b(?:\d{1,3}\.){3}\d{1,3}\b",
}


@dataclass
class SensitiveColumn:
    """Values of one column that matched one pattern."""
    schema_name: Optional[str]
    table_name: str
    column_name: str
    regex: str
    match_data: List[Any] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.table_name, self.column_name, self.regex)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_name": self.schema_name,
            "table_name": self.table_name,
            "column_name": self.column_name,
            "regex": self.regex,
            "match_data": list(self.match_data),
        }


class SensitiveScanner:
    """
    Bounded-sample scanner.

    Each column scan reads the sample size from the settings when it starts and
    never keeps more than that many matched values per (column, regex) pair.
    """

    def __init__(
        self,
        fetcher: DataFetcher,
        introspector: Optional[SchemaIntrospector] = None,
        settings=DEFAULT_SETTINGS
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.fetcher = fetcher
        self.introspector = introspector
        self.settings = settings

    def _compile_patterns(self, regex_list: Sequence[str]) -> List[Tuple[str, Pattern]]:
        compiled = []
        for regex in regex_list:
            if any(regex == seen for seen, _ in compiled):
                continue
            try:
                compiled.append((regex, re.compile(regex)))
            except (re.error, TypeError) as e:
                self.logger.warning(f"Invalid regex pattern: {regex} - {e}")
        return compiled

    def scan_column(
        self,
        schema_name: Optional[str],
        table_name: str,
        column_name: str,
        regex_list: Sequence[str]
    ) -> List[SensitiveColumn]:
        """
        Scan one column against every pattern.

        Args:
            schema_name: Schema of the table, or None for the default
            table_name: Table or view to sample
            column_name: Column to sample
            regex_list: Patterns tested with re.search against each value's text

        Returns:
            Findings with at least one matched value, in pattern order
        """
        sample_size = resolve_settings(self.settings).sample_size
        patterns = self._compile_patterns(regex_list)
        if not patterns or sample_size <= 0:
            return []

        findings: Dict[str, SensitiveColumn] = {}
        values = self.fetcher.fetch_column_values(schema_name, table_name, column_name, sample_size)
        for position, value in enumerate(values):
            if position >= sample_size:
                break
            if value is None:
                continue

            text = text_of(value)
            for regex, pattern in patterns:
                if not pattern.search(text):
                    continue
                finding = findings.get(regex)
                if finding is None:
                    finding = SensitiveColumn(schema_name, table_name, column_name, regex)
                    findings[regex] = finding
                if len(finding.match_data) < sample_size:
                    finding.match_data.append(value)

        ordered = [findings[regex] for regex, _ in patterns if regex in findings]
        if ordered:
            self.logger.info(
                f"Column {table_name}.{column_name} matched {len(ordered)} sensitive pattern(s)"
            )
        return ordered

    def scan_table(
        self,
        schema_name: Optional[str],
        table_name: str,
        regex_list: Sequence[str],
        columns: Optional[Sequence[str]] = None
    ) -> List[SensitiveColumn]:
        """Scan the given columns, or every column the introspector reports."""
        if columns is None:
            if self.introspector is None:
                raise ValueError("An introspector is required to scan every column of a table")
            columns = self.introspector.get_column_names(schema_name, table_name)

        findings: List[SensitiveColumn] = []
        for column_name in columns:
            findings.extend(self.scan_column(schema_name, table_name, column_name, regex_list))
        return findings
