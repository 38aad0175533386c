#!/usr/bin/env python3
"""
Alias Resolver
Parses SELECT statements with sqlparse into a transitive alias -> origin-name graph.
"""

import logging
from collections import deque
from collections.abc import Mapping
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

import sqlparse
from sqlparse.sql import Identifier, IdentifierList, Parenthesis, Where
from sqlparse.tokens import CTE, Comment, DML, Keyword, Number

SET_OPERATORS = {"UNION", "INTERSECT", "EXCEPT", "MINUS"}
SELECT_MODIFIERS = {"DISTINCT", "ALL"}
_QUOTE_CHARS = "\"`[]"


def normalize_name(name: Optional[str]) -> str:
    """Lower-case a column reference, drop its quoting and its qualifier."""
    if not name:
        return ""
    text = name.strip().strip(_QUOTE_CHARS)
    text = text.rsplit(".", 1)[-1]
    return text.strip().strip(_QUOTE_CHARS).lower()


def close_alias_edges(edges: Mapping) -> Dict[str, List[str]]:
    """
    Transitively close raw alias edges.

    Each key's closure lists every name reachable from it, nearest first. A
    per-key visited set guards against cycles and keeps the key out of its own
    closure; keys that reach nothing are dropped.
    """
    closed: Dict[str, List[str]] = {}
    for key in edges:
        visited = {key}
        reachable: List[str] = []
        queue = deque(edges.get(key, ()))
        while queue:
            name = queue.popleft()
            if name in visited:
                continue
            visited.add(name)
            reachable.append(name)
            queue.extend(edges.get(name, ()))
        if reachable:
            closed[key] = reachable
    return closed


class AliasGraph(Mapping):
    """
    Read-only mapping of alias -> frozenset of the original names it may refer to.

    Lookups normalise the alias the same way parsing does, so ``graph["E"]`` and
    ``graph["sub.e"]`` find the entry for ``e``.
    """

    def __init__(self, edges: Optional[Mapping] = None):
        self._edges: Dict[str, Tuple[str, ...]] = {
            key: tuple(targets) for key, targets in (edges or {}).items()
        }
        self._lineage: Dict[str, Tuple[str, ...]] = {
            key: tuple(names) for key, names in close_alias_edges(self._edges).items()
        }
        self._closure: Dict[str, FrozenSet[str]] = {
            key: frozenset(names) for key, names in self._lineage.items()
        }

    def __getitem__(self, alias: str) -> FrozenSet[str]:
        return self._closure[normalize_name(alias)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._closure)

    def __len__(self) -> int:
        return len(self._closure)

    def __repr__(self) -> str:
        return f"AliasGraph({self.to_dict()})"

    @property
    def edges(self) -> Dict[str, Tuple[str, ...]]:
        """Direct alias edges as parsed, before closure."""
        return dict(self._edges)

    def lineage(self, alias: str) -> Tuple[str, ...]:
        """Names reachable from the alias, nearest first; empty when unknown."""
        return self._lineage.get(normalize_name(alias), ())

    def to_dict(self) -> Dict[str, List[str]]:
        return {key: sorted(names) for key, names in self._closure.items()}


def _skip_blank(leaves: List, idx: int) -> int:
    while idx < len(leaves) and (leaves[idx].is_whitespace or leaves[idx].ttype in Comment):
        idx += 1
    return idx


def _opens_select_list(token) -> bool:
    if token is None:
        return False
    if token.ttype is DML:
        return token.normalized == "SELECT"
    return token.ttype in Keyword and token.normalized in SELECT_MODIFIERS


def _row_limit_end(leaves: List, idx: int) -> Optional[int]:
    """Index just past the row limit starting at leaves[idx] (TOP), or None if there is none."""
    pos = _skip_blank(leaves, idx + 1)
    if pos >= len(leaves):
        return None

    if leaves[pos].ttype in Number:
        end = pos + 1
    elif leaves[pos].value == "(":
        depth = 0
        for end in range(pos, len(leaves)):
            if leaves[end].value == "(":
                depth += 1
            elif leaves[end].value == ")":
                depth -= 1
                if depth == 0:
                    break
        else:
            return None
        end += 1
    else:
        # Plain column named "top"
        return None

    pos = _skip_blank(leaves, end)
    if pos < len(leaves) and leaves[pos].value.upper() == "PERCENT":
        end = pos + 1
        pos = _skip_blank(leaves, end)
    if pos < len(leaves) and leaves[pos].value.upper() == "WITH":
        after = _skip_blank(leaves, pos + 1)
        if after < len(leaves) and leaves[after].value.upper() == "TIES":
            end = after + 1
    return end


class AliasResolver:
    """
    Extracts explicit select-list aliases from SELECT statements.

    Covers the top-level select list, every branch of a set operation
    (UNION [ALL], INTERSECT, EXCEPT, MINUS), parenthesised branches, the
    bodies of a WITH list and every sub-select found in the FROM clause,
    including joined sub-selects. SQL Server TOP row limits are skipped.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def resolve(self, sql: Optional[str]) -> AliasGraph:
        """
        Build the alias graph for a statement.

        Non-SELECT, empty or unparseable text yields an empty graph.
        """
        if not sql or not sql.strip():
            return AliasGraph()

        edges: Dict[str, List[str]] = {}
        try:
            if "TOP" in sql.upper():
                sql = self._without_row_limit(sql)
            for statement in sqlparse.parse(sql):
                self._collect_statement(statement.tokens, edges)
        except Exception as e:
            self.logger.debug(f"Alias resolution failed, using empty graph: {e}")
            return AliasGraph()

        if not edges:
            self.logger.debug("No select-list aliases found in statement")
        return AliasGraph(edges)

    def _collect_statement(self, tokens: List, edges: Dict[str, List[str]]) -> None:
        for branch in self._split_set_operations(tokens):
            self._collect_select(branch, edges)

    def _split_set_operations(self, tokens: List) -> List[List]:
        """Split a token list into set-operation branches."""
        branches: List[List] = [[]]
        for token in tokens:
            if token.ttype in Keyword and token.normalized.split()[0] in SET_OPERATORS:
                branches.append([])
            else:
                branches[-1].append(token)
        return branches

    def _collect_select(self, tokens: List, edges: Dict[str, List[str]]) -> None:
        meaningful = [
            token for token in tokens
            if not token.is_whitespace and token.ttype not in Comment
        ]
        if not meaningful:
            return

        first = meaningful[0]
        if isinstance(first, Parenthesis):
            # Parenthesised set-operation branch
            self._collect_statement(first.tokens[1:-1], edges)
            return
        if first.ttype is CTE:
            self._collect_with(meaningful[1:], edges)
            return
        if first.ttype is not DML or first.normalized != "SELECT":
            return

        select_list_seen = False
        in_from = False
        for token in meaningful[1:]:
            if isinstance(token, Where):
                break
            if token.ttype in Keyword:
                if token.normalized == "FROM":
                    in_from = True
                continue
            if in_from:
                self._collect_from_item(token, edges)
            elif not select_list_seen and isinstance(token, (Identifier, IdentifierList)):
                self._record_select_list(token, edges)
                select_list_seen = True

    def _collect_with(self, tokens: List, edges: Dict[str, List[str]]) -> None:
        """Collect every common table expression body, then the main query."""
        for idx, token in enumerate(tokens):
            if token.ttype is DML:
                self._collect_select(tokens[idx:], edges)
                return
            self._collect_from_item(token, edges)

    def _without_row_limit(self, sql: str) -> str:
        """Drop `TOP n [PERCENT] [WITH TIES]` row limits that open a select list."""
        leaves = [leaf for statement in sqlparse.parse(sql) for leaf in statement.flatten()]
        kept: List[str] = []
        previous = None
        idx = 0
        while idx < len(leaves):
            leaf = leaves[idx]
            if leaf.value.upper() == "TOP" and _opens_select_list(previous):
                end = _row_limit_end(leaves, idx)
                if end is not None:
                    idx = end
                    continue
            kept.append(leaf.value)
            if not leaf.is_whitespace and leaf.ttype not in Comment:
                previous = leaf
            idx += 1
        return "".join(kept)

    def _collect_from_item(self, token, edges: Dict[str, List[str]]) -> None:
        """Descend into sub-selects of a FROM clause item."""
        if isinstance(token, Parenthesis):
            self._collect_statement(token.tokens[1:-1], edges)
        elif isinstance(token, (Identifier, IdentifierList)):
            for child in token.tokens:
                if isinstance(child, (Parenthesis, Identifier, IdentifierList)):
                    self._collect_from_item(child, edges)

    def _record_select_list(self, token, edges: Dict[str, List[str]]) -> None:
        items = token.get_identifiers() if isinstance(token, IdentifierList) else [token]
        for item in items:
            if not isinstance(item, Identifier):
                continue
            alias = item.get_alias()
            if not alias:
                continue

            alias_name = normalize_name(alias)
            origin = normalize_name(self._expression_text(item))
            if not alias_name or not origin or alias_name == origin:
                continue

            targets = edges.setdefault(alias_name, [])
            if origin not in targets:
                targets.append(origin)

    def _expression_text(self, item: Identifier) -> str:
        """Text of a select-list item without its alias."""
        as_idx, as_token = item.token_next_by(m=(Keyword, "AS"))
        if as_token is not None:
            head = item.tokens[:as_idx]
        else:
            # "expression alias": the alias follows the last whitespace
            ws_positions = [idx for idx, child in enumerate(item.tokens) if child.is_whitespace]
            head = item.tokens[:ws_positions[-1]] if ws_positions else item.tokens
        return "".join(str(child) for child in head).strip()


_resolver = AliasResolver()


def resolve_aliases(sql: Optional[str]) -> AliasGraph:
    """Parse SELECT text into its alias graph."""
    return _resolver.resolve(sql)

