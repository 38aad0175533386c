#!/usr/bin/env python3
"""
Dialect-Aware Literal Formatting
Renders Python values as SQL literals and literal INSERT/UPDATE/DELETE
statements for each supported database engine.
"""

import logging
import math
import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .errors import BinaryValueError, UnsupportedDialectError


class DatabaseType(str, Enum):
    """Database types with a registered dialect."""
    SQLITE = "sqlite"
    MYSQL = "mysql"
    MARIADB = "mariadb"
    ORACLE = "oracle"
    POSTGRESQL = "postgresql"
    MSSQL = "mssql"
    DM = "dm"
    KINGBASE = "kingbase"
    GBASE8A = "gbase8a"
    GBASE8S = "gbase8s"
    GBASE8T = "gbase8t"
    HIVE = "hive"
    PHOENIX = "phoenix"


class ValueKind(str, Enum):
    """Closed set of runtime value shapes a formatter matches on."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    TEXT = "text"
    BYTES = "bytes"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    INTERVAL = "interval"
    COLLECTION = "collection"
    OTHER = "other"


class TypeCategory(str, Enum):
    """Semantic category of a declared column type."""
    NULL = "null"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    TEXT = "text"
    LARGE_TEXT = "large_text"
    BINARY = "binary"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    INTERVAL = "interval"
    XML = "xml"
    COLLECTION = "collection"
    UNKNOWN = "unknown"


def classify_value(value: Any) -> ValueKind:
    """Classify a row value once so formatting can match on a closed tag set."""
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BYTES
    # datetime is a subclass of date
    if isinstance(value, datetime):
        return ValueKind.DATETIME
    if isinstance(value, date):
        return ValueKind.DATE
    if isinstance(value, time):
        return ValueKind.TIME
    if isinstance(value, timedelta):
        return ValueKind.INTERVAL
    if isinstance(value, (list, tuple, set, frozenset)):
        return ValueKind.COLLECTION
    return ValueKind.OTHER


# Category used when a column has no declared type
_CATEGORY_BY_KIND = {
    ValueKind.BOOLEAN: TypeCategory.BOOLEAN,
    ValueKind.NUMBER: TypeCategory.NUMERIC,
    ValueKind.TEXT: TypeCategory.TEXT,
    ValueKind.BYTES: TypeCategory.BINARY,
    ValueKind.DATE: TypeCategory.DATE,
    ValueKind.TIME: TypeCategory.TIME,
    ValueKind.DATETIME: TypeCategory.TIMESTAMP,
    ValueKind.INTERVAL: TypeCategory.INTERVAL,
    ValueKind.COLLECTION: TypeCategory.COLLECTION,
}

_NUMERIC_TEXT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_TRUE_WORDS = {"true", "t", "1", "yes", "y", "on"}
_FALSE_WORDS = {"false", "f", "0", "no", "n", "off"}
_LIST_TEXT = re.compile(r"\[(.*)\]", re.DOTALL)
_PARAMETERS = re.compile(r"\([^()]*\)")


def normalize_type_name(type_name: Optional[str]) -> str:
    """Upper-case a declared type and drop its parameters and sign modifiers."""
    if not type_name:
        return ""
    name = str(type_name).upper()
    # Innermost groups first so nested parameters disappear too
    while _PARAMETERS.search(name):
        name = _PARAMETERS.sub(" ", name)
    name = re.sub(r"\b(UNSIGNED|SIGNED|ZEROFILL)\b", " ", name)
    return " ".join(name.split())


def hex_of(data: Any) -> str:
    """Hex-encode binary data given as bytes or as a UTF-8 string."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data).hex()
    if isinstance(data, str):
        return data.encode("utf-8").hex()
    raise BinaryValueError(data)


def text_of(data: Any) -> str:
    """Text form of a value as it would be stored in a character column."""
    if isinstance(data, bool):
        return "true" if data else "false"
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data).decode("utf-8", errors="replace")
    if isinstance(data, datetime):
        return data.isoformat(sep=" ")
    if isinstance(data, (date, time)):
        return data.isoformat()
    return str(data)


def quoted(text: str) -> str:
    """Single-quote text, doubling embedded quotes."""
    return "'" + text.replace("'", "''") + "'"


def _names(category: TypeCategory, *names: str) -> Dict[str, TypeCategory]:
    return {name: category for name in names}


class Dialect:
    """
    Base literal formatter and statement template.

    Subclasses declare which type names belong to which TypeCategory and
    override the literal wrappers where their engine differs.
    """

    name = "base"
    type_categories: Dict[str, TypeCategory] = {}
    # Checked in order after the exact-name lookup fails
    type_prefixes: Tuple[Tuple[str, TypeCategory], ...] = ()

    date_pattern = "%Y-%m-%d"
    time_pattern = "%H:%M:%S"
    timestamp_pattern = "%Y-%m-%d %H:%M:%S"
    fraction_digits = 6
    keeps_utc_offset = False

    true_literal = "TRUE"
    false_literal = "FALSE"
    text_prefix = ""
    escape_backslash = False
    insert_keyword = "INSERT INTO"
    # UPDATE conditions always narrowed to a unique key
    update_by_unique_key = False

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    # Type categorisation

    def categorize(self, type_name: Optional[str]) -> Optional[TypeCategory]:
        """Map a declared type to its category, or None when no type is declared."""
        name = normalize_type_name(type_name)
        if not name:
            return None
        category = self.type_categories.get(name)
        if category is not None:
            return category
        for prefix, prefixed_category in self.type_prefixes:
            if name.startswith(prefix):
                return prefixed_category
        self.logger.debug(f"Unrecognized type {type_name!r}, formatting as text")
        return TypeCategory.UNKNOWN

    # Value formatting

    def format_data(self, data: Any, type_name: Optional[str] = None) -> str:
        """
        Render a value as a SQL literal for a column of the declared type.

        Args:
            data: Value read from a row, or to be written
            type_name: Declared SQL type of the target column

        Returns:
            Literal text ready to be embedded in a statement

        Raises:
            BinaryValueError: binary column value is neither bytes nor str
        """
        kind = classify_value(data)
        if kind is ValueKind.NULL:
            return "NULL"

        category = self.categorize(type_name)
        if category is None:
            category = _CATEGORY_BY_KIND.get(kind, TypeCategory.TEXT)

        handler = self._handlers()[category]
        return handler(data, kind, normalize_type_name(type_name))

    def _handlers(self) -> Dict[TypeCategory, Callable[[Any, ValueKind, str], str]]:
        return {
            TypeCategory.NULL: self.format_null,
            TypeCategory.NUMERIC: self.format_numeric,
            TypeCategory.BOOLEAN: self.format_boolean,
            TypeCategory.TEXT: self.format_text,
            TypeCategory.LARGE_TEXT: self.format_large_text,
            TypeCategory.BINARY: self.format_binary,
            TypeCategory.DATE: self.format_date,
            TypeCategory.TIME: self.format_time,
            TypeCategory.TIMESTAMP: self.format_timestamp,
            TypeCategory.INTERVAL: self.format_interval,
            TypeCategory.XML: self.format_xml,
            TypeCategory.COLLECTION: self.format_collection,
            TypeCategory.UNKNOWN: self.format_unknown,
        }

    def format_null(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return "NULL"

    def format_numeric(self, data: Any, kind: ValueKind, type_name: str) -> str:
        if kind is ValueKind.BOOLEAN:
            return "1" if data else "0"
        if kind is ValueKind.NUMBER:
            return self.numeric_text(data)
        text = text_of(data).strip()
        if _NUMERIC_TEXT.match(text):
            return text
        return self.quote_text(text_of(data))

    def numeric_text(self, number) -> str:
        """Canonical decimal text; non-finite values are quoted."""
        if isinstance(number, float):
            if not math.isfinite(number):
                return quoted(str(number))
            return repr(number)
        if isinstance(number, Decimal) and not number.is_finite():
            return quoted(str(number))
        return str(number)

    def format_boolean(self, data: Any, kind: ValueKind, type_name: str) -> str:
        if kind is ValueKind.BOOLEAN:
            return self.true_literal if data else self.false_literal
        if kind is ValueKind.NUMBER:
            return self.true_literal if data != 0 else self.false_literal
        word = text_of(data).strip().lower()
        if word in _TRUE_WORDS:
            return self.true_literal
        if word in _FALSE_WORDS:
            return self.false_literal
        return self.quote_text(text_of(data))

    def quote_text(self, text: str) -> str:
        """Quote character data the way this engine expects."""
        if self.escape_backslash:
            text = text.replace("\\", "\\\\")
        return self.text_prefix + quoted(text)

    def format_text(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.quote_text(text_of(data))

    def format_large_text(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.format_text(data, kind, type_name)

    def format_binary(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.binary_literal(hex_of(data))

    def binary_literal(self, hex_text: str) -> str:
        return f"X'{hex_text}'"

    def temporal_text(self, data: Any, kind: ValueKind, pattern: str) -> str:
        """Format native date/time values with the pattern; keep strings as given."""
        if kind not in (ValueKind.DATE, ValueKind.TIME, ValueKind.DATETIME):
            return text_of(data)
        text = data.strftime(pattern)
        if pattern.endswith("%f") and self.fraction_digits < 6:
            text = text[: len(text) - (6 - self.fraction_digits)]
            if self.fraction_digits == 0:
                text = text.rstrip(".")
        if self.keeps_utc_offset and kind is not ValueKind.DATE and data.tzinfo is not None:
            text += data.strftime("%z")
        return text

    def format_date(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.date_literal(self.temporal_text(data, kind, self.date_pattern))

    def format_time(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.time_literal(self.temporal_text(data, kind, self.time_pattern))

    def format_timestamp(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.timestamp_literal(self.temporal_text(data, kind, self.timestamp_pattern))

    def date_literal(self, text: str) -> str:
        return quoted(text)

    def time_literal(self, text: str) -> str:
        return quoted(text)

    def timestamp_literal(self, text: str) -> str:
        return quoted(text)

    def interval_text(self, delta: timedelta) -> str:
        """Interval text of a timedelta, e.g. '1 days 02:03:04'."""
        hours, remainder = divmod(delta.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        text = f"{delta.days} days {hours:02d}:{minutes:02d}:{seconds:02d}"
        if delta.microseconds:
            text += f".{delta.microseconds:06d}"
        return text

    def format_interval(self, data: Any, kind: ValueKind, type_name: str) -> str:
        text = self.interval_text(data) if kind is ValueKind.INTERVAL else text_of(data)
        return quoted(text)

    def format_xml(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.quote_text(text_of(data))

    def format_collection(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.quote_text(text_of(data))

    def format_unknown(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return self.quote_text(text_of(data))

    # Statement templates

    def qualified_name(self, schema_name: Optional[str], table_name: str) -> str:
        if schema_name and schema_name.strip():
            return f"{schema_name}.{table_name}"
        return table_name

    def literal_for(self, column: str, value: Any, column_types: Mapping[str, str]) -> str:
        """Format a value using the declared type of its column."""
        type_name = column_types.get(column.lower(), column_types.get(column))
        return self.format_data(value, type_name)

    def insert_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        data: Mapping[str, Any],
        column_types: Mapping[str, str]
    ) -> str:
        """Build a literal INSERT statement for one row."""
        if not data:
            raise ValueError("No data provided to generate SQL")

        columns = ", ".join(data.keys())
        values = ", ".join(
            self.literal_for(column, value, column_types)
            for column, value in data.items()
        )
        target = self.qualified_name(schema_name, table_name)
        return f"{self.insert_keyword} {target} ({columns}) VALUES ({values});"

    def update_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        set_data: Mapping[str, Any],
        where: Optional[Mapping[str, Any]],
        column_types: Mapping[str, str]
    ) -> Optional[str]:
        """Build a literal UPDATE statement; None when there is nothing to set or no condition."""
        if not set_data or not where:
            return None

        assignments = ", ".join(
            f"{column} = {self.literal_for(column, value, column_types)}"
            for column, value in set_data.items()
        )
        target = self.qualified_name(schema_name, table_name)
        return f"UPDATE {target} SET {assignments} WHERE {self.where_clause(where, column_types)};"

    def delete_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        where: Optional[Mapping[str, Any]],
        column_types: Mapping[str, str]
    ) -> Optional[str]:
        """Build a literal DELETE statement; None without a condition."""
        if not where:
            return None

        target = self.qualified_name(schema_name, table_name)
        return f"DELETE FROM {target} WHERE {self.where_clause(where, column_types)};"

    def where_clause(self, where: Mapping[str, Any], column_types: Mapping[str, str]) -> str:
        predicates = []
        for column, value in where.items():
            literal = self.literal_for(column, value, column_types)
            if value is None or literal.upper() == "NULL":
                predicates.append(f"{column} IS NULL")
            else:
                predicates.append(f"{column} = {literal}")
        return " AND ".join(predicates)


class SQLiteDialect(Dialect):
    """SQLite: type affinity names, X'..' blobs, 1/0 booleans."""

    name = DatabaseType.SQLITE.value
    type_categories = {
        **_names(TypeCategory.NULL, "NULL"),
        **_names(
            TypeCategory.NUMERIC,
            "INTEGER", "INT", "TINYINT", "SMALLINT", "MEDIUMINT", "BIGINT", "BIG INT",
            "INT2", "INT8", "REAL", "DOUBLE", "DOUBLE PRECISION", "FLOAT",
            "NUMERIC", "DECIMAL",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN", "BOOL"),
        **_names(
            TypeCategory.TEXT,
            "TEXT", "CHARACTER", "VARCHAR", "VARYING CHARACTER", "NCHAR",
            "NATIVE CHARACTER", "NVARCHAR", "CHAR", "CLOB", "STRING", "JSON",
        ),
        **_names(TypeCategory.BINARY, "BLOB"),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIME, "TIME"),
        **_names(TypeCategory.TIMESTAMP, "DATETIME", "TIMESTAMP"),
    }
    # Same text layout SQLAlchemy uses for SQLite DATETIME columns
    time_pattern = "%H:%M:%S.%f"
    timestamp_pattern = "%Y-%m-%d %H:%M:%S.%f"
    true_literal = "1"
    false_literal = "0"


class MariaDBDialect(Dialect):
    """MariaDB: backslash-aware quoting, x'..' blobs."""

    name = DatabaseType.MARIADB.value
    type_categories = {
        **_names(TypeCategory.NULL, "NULL"),
        **_names(
            TypeCategory.NUMERIC,
            "BIT", "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT",
            "DECIMAL", "DEC", "NUMERIC", "FIXED", "FLOAT", "DOUBLE", "DOUBLE PRECISION", "REAL",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN", "BOOL"),
        **_names(
            TypeCategory.TEXT,
            "CHAR", "VARCHAR", "NCHAR", "NVARCHAR", "TINYTEXT", "TEXT", "MEDIUMTEXT",
            "LONGTEXT", "ENUM", "SET", "YEAR", "JSON",
        ),
        **_names(
            TypeCategory.BINARY,
            "BINARY", "VARBINARY", "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
        ),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIME, "TIME"),
        **_names(TypeCategory.TIMESTAMP, "DATETIME", "TIMESTAMP"),
    }
    true_literal = "true"
    false_literal = "false"
    escape_backslash = True

    def binary_literal(self, hex_text: str) -> str:
        return f"x'{hex_text}'"


class MySQLDialect(MariaDBDialect):
    """MySQL shares the MariaDB literal rules."""

    name = DatabaseType.MYSQL.value


class OracleDialect(Dialect):
    """Oracle: TO_DATE/TIMESTAMP literals, HEXTORAW, TO_CLOB, XMLTYPE, typed intervals."""

    name = DatabaseType.ORACLE.value
    type_categories = {
        **_names(
            TypeCategory.NUMERIC,
            "NUMBER", "FLOAT", "INTEGER", "INT", "SMALLINT", "REAL", "DOUBLE PRECISION",
            "DECIMAL", "NUMERIC", "BINARY_FLOAT", "BINARY_DOUBLE",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN"),
        **_names(
            TypeCategory.TEXT,
            "CHAR", "NCHAR", "VARCHAR", "VARCHAR2", "NVARCHAR2", "LONG", "ROWID", "UROWID",
        ),
        **_names(TypeCategory.LARGE_TEXT, "CLOB", "NCLOB"),
        **_names(TypeCategory.BINARY, "RAW", "LONG RAW", "BLOB"),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.XML, "XMLTYPE", "SYS.XMLTYPE"),
    }
    type_prefixes = (
        ("TIMESTAMP", TypeCategory.TIMESTAMP),
        ("INTERVAL", TypeCategory.INTERVAL),
    )
    timestamp_pattern = "%Y-%m-%d %H:%M:%S.%f"
    date_time_pattern = "%Y-%m-%d %H:%M:%S"

    def format_large_text(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return f"TO_CLOB({self.quote_text(text_of(data))})"

    def format_xml(self, data: Any, kind: ValueKind, type_name: str) -> str:
        return f"XMLTYPE({self.quote_text(text_of(data))})"

    def binary_literal(self, hex_text: str) -> str:
        return f"HEXTORAW('{hex_text}')"

    def format_date(self, data: Any, kind: ValueKind, type_name: str) -> str:
        # Oracle DATE carries a time of day; keep it when the value has one
        if kind is ValueKind.DATETIME:
            text, mask = data.strftime(self.date_time_pattern), "yyyy-mm-dd hh24:mi:ss"
        elif kind is ValueKind.DATE:
            text, mask = data.strftime(self.date_pattern), "yyyy-mm-dd"
        else:
            text = text_of(data).strip()
            mask = "yyyy-mm-dd hh24:mi:ss" if len(text) > 10 else "yyyy-mm-dd"
        return f"TO_DATE({quoted(text)}, '{mask}')"

    def timestamp_literal(self, text: str) -> str:
        return f"TIMESTAMP {quoted(text)}"

    def interval_text(self, delta: timedelta) -> str:
        # The sign applies to the whole day-to-second value
        sign = "-" if delta < timedelta(0) else ""
        delta = abs(delta)
        hours, remainder = divmod(delta.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{sign}{delta.days} {hours:02d}:{minutes:02d}:{seconds:02d}.{delta.microseconds:06d}"

    def format_interval(self, data: Any, kind: ValueKind, type_name: str) -> str:
        text = self.interval_text(data) if kind is ValueKind.INTERVAL else text_of(data)
        if type_name.startswith("INTERVAL YEAR"):
            return f"INTERVAL {quoted(text)} YEAR TO MONTH"
        return f"INTERVAL {quoted(text)} DAY TO SECOND"


class MsSQLDialect(Dialect):
    """SQL Server: N'..' strings, 0x.. binaries, BIT booleans, millisecond timestamps."""

    name = DatabaseType.MSSQL.value
    type_categories = {
        **_names(
            TypeCategory.NUMERIC,
            "BIGINT", "INT", "SMALLINT", "TINYINT", "MONEY", "SMALLMONEY",
            "NUMERIC", "DECIMAL", "REAL", "FLOAT",
        ),
        **_names(TypeCategory.BOOLEAN, "BIT"),
        **_names(TypeCategory.TEXT, "CHAR", "VARCHAR", "TEXT", "NCHAR", "NVARCHAR", "NTEXT"),
        **_names(TypeCategory.BINARY, "BINARY", "VARBINARY", "IMAGE"),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIME, "TIME"),
        **_names(
            TypeCategory.TIMESTAMP,
            "DATETIME", "DATETIME2", "SMALLDATETIME", "DATETIMEOFFSET",
        ),
        **_names(TypeCategory.XML, "XML"),
    }
    time_pattern = "%H:%M:%S.%f"
    timestamp_pattern = "%Y-%m-%d %H:%M:%S.%f"
    fraction_digits = 3
    true_literal = "1"
    false_literal = "0"
    text_prefix = "N"

    def binary_literal(self, hex_text: str) -> str:
        return f"0x{hex_text}"


class PostgreSQLDialect(Dialect):
    """PostgreSQL: true/false, E'\\\\x..' bytea, quoted temporal values with offsets."""

    name = DatabaseType.POSTGRESQL.value
    type_categories = {
        **_names(TypeCategory.NULL, "NULL"),
        **_names(
            TypeCategory.NUMERIC,
            "SMALLINT", "INTEGER", "INT", "BIGINT", "INT2", "INT4", "INT8",
            "DECIMAL", "NUMERIC", "REAL", "DOUBLE PRECISION", "FLOAT", "FLOAT4", "FLOAT8",
            "SMALLSERIAL", "SERIAL", "BIGSERIAL", "SERIAL2", "SERIAL4", "SERIAL8", "OID",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN", "BOOL"),
        **_names(
            TypeCategory.TEXT,
            "CHARACTER", "CHARACTER VARYING", "CHAR", "VARCHAR", "BPCHAR", "TEXT",
            "NAME", "CITEXT",
        ),
        **_names(TypeCategory.BINARY, "BYTEA"),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIME, "TIMETZ"),
        **_names(TypeCategory.TIMESTAMP, "TIMESTAMPTZ"),
        **_names(TypeCategory.XML, "XML"),
    }
    # TIMESTAMP must be tried before TIME
    type_prefixes = (
        ("TIMESTAMP", TypeCategory.TIMESTAMP),
        ("TIME", TypeCategory.TIME),
        ("INTERVAL", TypeCategory.INTERVAL),
    )
    time_pattern = "%H:%M:%S.%f"
    timestamp_pattern = "%Y-%m-%d %H:%M:%S.%f"
    keeps_utc_offset = True
    true_literal = "true"
    false_literal = "false"

    def binary_literal(self, hex_text: str) -> str:
        return "E'\\\\x" + hex_text + "'"


class KingBaseDialect(PostgreSQLDialect):
    """KingBase: PostgreSQL rules plus its Oracle-compatible type names."""

    name = DatabaseType.KINGBASE.value
    type_categories = {
        **PostgreSQLDialect.type_categories,
        **_names(TypeCategory.NUMERIC, "TINYINT", "NUMBER"),
        **_names(TypeCategory.TEXT, "VARCHAR2", "NVARCHAR", "NVARCHAR2", "NCHAR", "CLOB"),
        **_names(TypeCategory.TIMESTAMP, "DATETIME"),
    }


class DMDialect(Dialect):
    """Dameng: DATE/TIME/TIMESTAMP typed literals, HEXTORAW binaries."""

    name = DatabaseType.DM.value
    type_categories = {
        **_names(
            TypeCategory.NUMERIC,
            "INT", "INTEGER", "TINYINT", "SMALLINT", "BIGINT", "BYTE", "DECIMAL", "DEC",
            "NUMERIC", "NUMBER", "FLOAT", "DOUBLE", "DOUBLE PRECISION", "REAL",
        ),
        **_names(TypeCategory.BOOLEAN, "BIT", "BOOLEAN"),
        **_names(
            TypeCategory.TEXT,
            "TEXT", "CHAR", "CHARACTER", "VARCHAR", "VARCHAR2", "CHARACTER VARYING",
            "NCHAR", "NVARCHAR", "LONGVARCHAR",
        ),
        **_names(TypeCategory.LARGE_TEXT, "CLOB", "NCLOB"),
        **_names(
            TypeCategory.BINARY,
            "BLOB", "BINARY", "VARBINARY", "IMAGE", "LONGVARBINARY",
        ),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIME, "TIME"),
        **_names(TypeCategory.TIMESTAMP, "TIMESTAMP", "DATETIME"),
    }
    type_prefixes = (
        ("TIMESTAMP", TypeCategory.TIMESTAMP),
        ("TIME WITH", TypeCategory.TIME),
        ("INTERVAL", TypeCategory.INTERVAL),
    )
    true_literal = "1"
    false_literal = "0"

    def binary_literal(self, hex_text: str) -> str:
        return f"HEXTORAW('{hex_text}')"

    def date_literal(self, text: str) -> str:
        return f"DATE {quoted(text)}"

    def time_literal(self, text: str) -> str:
        return f"TIME {quoted(text)}"

    def timestamp_literal(self, text: str) -> str:
        return f"TIMESTAMP {quoted(text)}"


class Gbase8aDialect(Dialect):
    """GBase 8a: MySQL-compatible literals with 1/0 booleans."""

    name = DatabaseType.GBASE8A.value
    type_categories = {
        **_names(
            TypeCategory.NUMERIC,
            "SMALLINT", "TINYINT", "INT", "INTEGER", "BIGINT", "REAL", "DOUBLE",
            "FLOAT", "DECIMAL", "NUMERIC",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN", "BOOL"),
        **_names(TypeCategory.TEXT, "CHAR", "VARCHAR", "TEXT", "LONGTEXT"),
        **_names(TypeCategory.BINARY, "BINARY", "VARBINARY", "BLOB", "LONGBLOB"),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIME, "TIME"),
        **_names(TypeCategory.TIMESTAMP, "TIMESTAMP", "DATETIME"),
    }
    true_literal = "1"
    false_literal = "0"
    escape_backslash = True


class Gbase8sDialect(Dialect):
    """GBase 8s (Informix lineage): 't'/'f' booleans and SET{}/LIST{} collections."""

    name = DatabaseType.GBASE8S.value
    type_categories = {
        **_names(
            TypeCategory.NUMERIC,
            "BIGINT", "BIGSERIAL", "SERIAL", "SERIAL8", "DECIMAL", "DOUBLE PRECISION",
            "FLOAT", "INT", "INT8", "INTEGER", "NUMERIC", "REAL", "SMALLINT",
            "SMALLFLOAT", "MONEY",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN"),
        **_names(
            TypeCategory.TEXT,
            "CHAR", "CHARACTER", "CHARACTER VARYING", "NCHAR", "NVARCHAR", "VARCHAR",
            "LVARCHAR", "TEXT",
        ),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIME, "TIME"),
        **_names(TypeCategory.TIMESTAMP, "TIMESTAMP"),
        **_names(TypeCategory.COLLECTION, "SET", "LIST", "MULTISET"),
    }
    type_prefixes = (
        ("DATETIME", TypeCategory.TIMESTAMP),
        ("INTERVAL", TypeCategory.INTERVAL),
        ("SET", TypeCategory.COLLECTION),
        ("LIST", TypeCategory.COLLECTION),
        ("MULTISET", TypeCategory.COLLECTION),
    )
    true_literal = "'t'"
    false_literal = "'f'"

    def format_collection(self, data: Any, kind: ValueKind, type_name: str) -> str:
        """Render a list value (or '[a, b]' text) as a collection literal, e.g. SET{'a','b'}."""
        collection = type_name.split()[0] if type_name else "LIST"
        if kind is ValueKind.COLLECTION:
            elements = [text_of(element) for element in data]
        else:
            match = _LIST_TEXT.search(text_of(data))
            if not match:
                return self.quote_text(text_of(data))
            elements = [element.strip() for element in match.group(1).split(",")]
        return collection + "{" + ",".join(quoted(element) for element in elements) + "}"


class Gbase8tDialect(Gbase8sDialect):
    """GBase 8t shares the GBase 8s literal rules."""

    name = DatabaseType.GBASE8T.value


class HiveDialect(Dialect):
    """Hive: INSERT ... SELECT statements, unhex() binaries."""

    name = DatabaseType.HIVE.value
    type_categories = {
        **_names(
            TypeCategory.NUMERIC,
            "TINYINT", "SMALLINT", "INT", "INTEGER", "BIGINT", "FLOAT", "DOUBLE",
            "DOUBLE PRECISION", "DECIMAL", "NUMERIC",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN"),
        **_names(TypeCategory.TEXT, "STRING", "VARCHAR", "CHAR"),
        **_names(TypeCategory.BINARY, "BINARY"),
        **_names(TypeCategory.DATE, "DATE"),
        **_names(TypeCategory.TIMESTAMP, "TIMESTAMP"),
    }
    type_prefixes = (("INTERVAL", TypeCategory.INTERVAL),)
    true_literal = "true"
    false_literal = "false"

    def binary_literal(self, hex_text: str) -> str:
        return f"unhex('{hex_text}')"

    def insert_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        data: Mapping[str, Any],
        column_types: Mapping[str, str]
    ) -> str:
        if not data:
            raise ValueError("No data provided to generate SQL")

        selected = ", ".join(
            f"{self.literal_for(column, value, column_types)} AS {column}"
            for column, value in data.items()
        )
        target = self.qualified_name(schema_name, table_name)
        return f"INSERT INTO {target} SELECT {selected} FROM (SELECT 1) t;"


class PhoenixDialect(Dialect):
    """Apache Phoenix: UPSERT statements and TO_DATE/TO_TIME/TO_TIMESTAMP literals."""

    name = DatabaseType.PHOENIX.value
    type_categories = {
        **_names(
            TypeCategory.NUMERIC,
            "INTEGER", "UNSIGNED_INT", "BIGINT", "UNSIGNED_LONG", "TINYINT",
            "UNSIGNED_TINYINT", "SMALLINT", "UNSIGNED_SMALLINT", "FLOAT",
            "UNSIGNED_FLOAT", "DOUBLE", "UNSIGNED_DOUBLE", "DECIMAL",
        ),
        **_names(TypeCategory.BOOLEAN, "BOOLEAN"),
        # Phoenix has no hex literal; binary columns take character data
        **_names(TypeCategory.TEXT, "VARCHAR", "CHAR", "VARBINARY", "BINARY"),
        **_names(TypeCategory.DATE, "DATE", "UNSIGNED_DATE"),
        **_names(TypeCategory.TIME, "TIME", "UNSIGNED_TIME"),
        **_names(TypeCategory.TIMESTAMP, "TIMESTAMP", "UNSIGNED_TIMESTAMP"),
    }
    insert_keyword = "UPSERT INTO"
    update_by_unique_key = True

    def date_literal(self, text: str) -> str:
        return f"TO_DATE({quoted(text)}, 'yyyy-MM-dd')"

    def time_literal(self, text: str) -> str:
        return f"TO_TIME({quoted(text)}, 'HH:mm:ss')"

    def timestamp_literal(self, text: str) -> str:
        return f"TO_TIMESTAMP({quoted(text)}, 'yyyy-MM-dd HH:mm:ss')"

    def update_sql(
        self,
        schema_name: Optional[str],
        table_name: str,
        set_data: Mapping[str, Any],
        where: Optional[Mapping[str, Any]],
        column_types: Mapping[str, str]
    ) -> Optional[str]:
        """Phoenix updates are upserts of the new values keyed by the condition columns."""
        if not set_data or not where:
            return None
        # SET values win over condition values for the same column
        merged = dict(where)
        merged.update(set_data)
        return self.insert_sql(schema_name, table_name, merged, column_types)


_DIALECT_CLASSES = (
    SQLiteDialect, MySQLDialect, MariaDBDialect, OracleDialect, PostgreSQLDialect,
    MsSQLDialect, DMDialect, KingBaseDialect, Gbase8aDialect, Gbase8sDialect,
    Gbase8tDialect, HiveDialect, PhoenixDialect,
)

# Static registry, built once at import and never mutated
DIALECTS: Mapping[str, Dialect] = {cls.name: cls() for cls in _DIALECT_CLASSES}


def get_dialect(db_type) -> Dialect:
    """
    Look up the dialect registered for a database type.

    Raises:
        UnsupportedDialectError: the type has no registered dialect
    """
    if isinstance(db_type, Dialect):
        return db_type
    key = db_type.value if isinstance(db_type, DatabaseType) else str(db_type or "").strip().lower()
    dialect = DIALECTS.get(key)
    if dialect is None:
        raise UnsupportedDialectError(str(db_type))
    return dialect


def supported_dialects() -> List[str]:
    return sorted(DIALECTS)


def format_data(data: Any, type_name: Optional[str], db_type) -> str:
    """Render a value as a SQL literal for the given database type."""
    return get_dialect(db_type).format_data(data, type_name)
