#!/usr/bin/env python3
"""
Masking Orchestrator
Resolves the obfuscation rule for each output column, following SQL aliases when enabled.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .alias_resolver import AliasGraph, resolve_aliases
from .obfuscation import ObfuscationRule, apply_obfuscation
from .settings import DEFAULT_SETTINGS, resolve_settings


class MaskingOrchestrator:
    """
    Applies obfuscation rules keyed by original column name to result rows.

    With the rename toggle on, an output column with no rule of its own is
    matched through its alias lineage; with it off, only the output name counts.
    """

    def __init__(self, settings=DEFAULT_SETTINGS):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = settings

    def _rule_index(self, rules: Mapping[str, ObfuscationRule]) -> Dict[str, ObfuscationRule]:
        index: Dict[str, ObfuscationRule] = {}
        for name, rule in rules.items():
            # First rule for a case-insensitive name wins
            index.setdefault(name.lower(), rule)
        return index

    def _resolve_target(
        self,
        column: str,
        index: Mapping[str, ObfuscationRule],
        alias_graph: Optional[AliasGraph],
        handle_rename: bool
    ) -> Optional[str]:
        name = column.lower()
        if name in index:
            return name
        if not handle_rename or alias_graph is None:
            return None
        for origin in alias_graph.lineage(column):
            if origin in index:
                self.logger.debug(f"Column {column} resolved to rule for {origin}")
                return origin
        return None

    def resolve_rule(
        self,
        column: str,
        rules: Mapping[str, ObfuscationRule],
        alias_graph: Optional[AliasGraph] = None
    ) -> Optional[ObfuscationRule]:
        """Find the rule for an output column: its own name first, then its alias lineage."""
        index = self._rule_index(rules)
        handle_rename = resolve_settings(self.settings).handle_rename
        target = self._resolve_target(column, index, alias_graph, handle_rename)
        return index[target] if target is not None else None

    def mask_row(
        self,
        row: Mapping[str, Any],
        rules: Mapping[str, ObfuscationRule],
        alias_graph: Optional[AliasGraph] = None
    ) -> Dict[str, Any]:
        """
        Mask one row.

        Args:
            row: Output column name -> value, in result order
            rules: Original column name -> rule
            alias_graph: Alias graph of the query that produced the row

        Returns:
            New dict in the same column order; columns without a rule are unchanged
        """
        handle_rename = resolve_settings(self.settings).handle_rename
        index = self._rule_index(rules)

        masked: Dict[str, Any] = {}
        for column, value in row.items():
            target = self._resolve_target(column, index, alias_graph, handle_rename)
            masked[column] = value if target is None else apply_obfuscation(value, index[target])
        return masked

    def mask_rows(
        self,
        rows: Iterable[Mapping[str, Any]],
        rules: Mapping[str, ObfuscationRule],
        sql: Optional[str] = None,
        alias_graph: Optional[AliasGraph] = None
    ) -> List[Dict[str, Any]]:
        """Mask every row, resolving the alias graph from `sql` once when needed."""
        if alias_graph is None and sql and resolve_settings(self.settings).handle_rename:
            alias_graph = resolve_aliases(sql)
        return [self.mask_row(row, rules, alias_graph) for row in rows]

    def matched_columns(
        self,
        columns: Iterable[str],
        rules: Mapping[str, ObfuscationRule],
        alias_graph: Optional[AliasGraph] = None
    ) -> Dict[str, Optional[str]]:
        """Output column -> rule target it resolves to, None when left unmasked."""
        index = self._rule_index(rules)
        handle_rename = resolve_settings(self.settings).handle_rename
        return {
            column: self._resolve_target(column, index, alias_graph, handle_rename)
            for column in columns
        }


def mask_row(
    row: Mapping[str, Any],
    rules: Mapping[str, ObfuscationRule],
    alias_graph: Optional[AliasGraph] = None
) -> Dict[str, Any]:
    """Mask one row with the process-wide settings."""
    return MaskingOrchestrator(DEFAULT_SETTINGS).mask_row(row, rules, alias_graph)
