"""
sqlmask - Dialect-Aware SQL Literals and Column Masking

This package renders row values as SQL literals for heterogeneous engines and
masks sensitive columns in query results:
- Per-dialect literal formatting (SQLite, MySQL, MariaDB, Oracle, PostgreSQL,
  SQL Server, DM, KingBase, GBase 8a/8s/8t, Hive, Phoenix)
- Literal INSERT/UPDATE/DELETE generation
- Alias-aware obfuscation rules (mask, truncate, replace, generalize, add noise)
- Bounded-sample sensitive data scanning
"""

from .core.alias_resolver import AliasGraph, resolve_aliases
from .core.dialects import DIALECTS, Dialect, format_data, get_dialect
from .core.manager import DialectManager, SecurityManager
from .core.obfuscation import ObfuscationMethod, ObfuscationRule, apply_obfuscation
from .core.orchestrator import MaskingOrchestrator, mask_row
from .core.scanner import SensitiveColumn, SensitiveScanner
from .core.settings import DEFAULT_SETTINGS, MaskingSettings, SettingsStore
from .core.statements import StatementGenerator

__all__ = [
    'AliasGraph',
    'resolve_aliases',
    'DIALECTS',
    'Dialect',
    'format_data',
    'get_dialect',
    'DialectManager',
    'SecurityManager',
    'ObfuscationMethod',
    'ObfuscationRule',
    'apply_obfuscation',
    'MaskingOrchestrator',
    'mask_row',
    'SensitiveColumn',
    'SensitiveScanner',
    'DEFAULT_SETTINGS',
    'MaskingSettings',
    'SettingsStore',
    'StatementGenerator'
]

__version__ = '1.0.0'
