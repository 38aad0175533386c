#!/usr/bin/env python3
"""
Obfuscation Engine
Best-effort masking transforms applied to single column values.
"""

import math
import re
import secrets
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from .dialects import text_of
from .errors import InvalidRuleError, RandomSourceUnavailableError, UnsupportedObfuscationMethodError


class ObfuscationMethod(str, Enum):
    """Supported obfuscation transforms."""
    MASK = "MASK"
    TRUNCATE = "TRUNCATE"
    REPLACE = "REPLACE"
    GENERALIZE = "GENERALIZE"
    ADD_NOISE = "ADD_NOISE"

    @property
    def code(self) -> int:
        return _METHOD_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "ObfuscationMethod":
        for method, method_code in _METHOD_CODES.items():
            if method_code == code:
                return method
        raise UnsupportedObfuscationMethodError(code)

    @classmethod
    def parse(cls, method) -> Optional["ObfuscationMethod"]:
        """Accept a method, its numeric code or its (case-insensitive) name."""
        if method is None or isinstance(method, cls):
            return method
        if isinstance(method, bool):
            raise UnsupportedObfuscationMethodError(method)
        if isinstance(method, int):
            return cls.from_code(method)
        if isinstance(method, str):
            name = method.strip().upper().replace("-", "_")
            if name.isdigit():
                return cls.from_code(int(name))
            try:
                return cls(name)
            except ValueError:
                raise UnsupportedObfuscationMethodError(method) from None
        raise UnsupportedObfuscationMethodError(method)


_METHOD_CODES = {
    ObfuscationMethod.MASK: 1,
    ObfuscationMethod.TRUNCATE: 2,
    ObfuscationMethod.REPLACE: 3,
    ObfuscationMethod.GENERALIZE: 4,
    ObfuscationMethod.ADD_NOISE: 5,
}


@dataclass(frozen=True)
class ObfuscationRule:
    """
    Obfuscation rule bound to a target column.

    Only the fields relevant to ``method`` are read; the others are ignored.
    """
    method: Optional[ObfuscationMethod] = None
    start: int = 0
    end: int = 0
    mask_char: str = "*"
    regex: Optional[str] = None
    replacement: Optional[str] = None
    range: int = 0
    noise_range: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "method", ObfuscationMethod.parse(self.method))
        if not isinstance(self.mask_char, str) or len(self.mask_char) != 1:
            raise InvalidRuleError(f"mask_char must be a single character, got {self.mask_char!r}")

    @classmethod
    def mask(cls, start: int, end: int, mask_char: str = "*") -> "ObfuscationRule":
        return cls(ObfuscationMethod.MASK, start=start, end=end, mask_char=mask_char)

    @classmethod
    def truncate(cls, start: int, end: int) -> "ObfuscationRule":
        return cls(ObfuscationMethod.TRUNCATE, start=start, end=end)

    @classmethod
    def replace(cls, regex: Optional[str], replacement: Optional[str]) -> "ObfuscationRule":
        return cls(ObfuscationMethod.REPLACE, regex=regex, replacement=replacement)

    @classmethod
    def generalize(cls, bucket: int) -> "ObfuscationRule":
        return cls(ObfuscationMethod.GENERALIZE, range=bucket)

    @classmethod
    def add_noise(cls, noise_range: float) -> "ObfuscationRule":
        return cls(ObfuscationMethod.ADD_NOISE, noise_range=noise_range)


def mask(value: str, start: int, end: int, mask_char: str = "*") -> str:
    """Replace the characters in [start, end) with mask_char, clamping end to the length."""
    if not value or start < 0 or start >= len(value) or end <= start:
        return value
    end = min(end, len(value))
    return value[:start] + mask_char * (end - start) + value[end:]


def truncate(value: str, start: int, end: int) -> str:
    """Keep value[start:end]; any bound outside the string leaves it unchanged."""
    if start < 0 or end < 0 or start > len(value) or end > len(value) or start > end:
        return value
    return value[start:end]


def replace_with_regex(value: str, regex: Optional[str], replacement: Optional[str]) -> str:
    """
    Substitute every match of regex with replacement.

    An absent regex or replacement, or an empty regex, disables the rule and the
    value passes through. An empty replacement deletes the matches.
    """
    if regex is None or replacement is None or regex == "":
        return value
    try:
        pattern = re.compile(regex)
    except re.error as e:
        raise InvalidRuleError(f"Invalid regex pattern {regex!r}: {e}") from e
    # Literal replacement text; no group references
    return pattern.sub(lambda _: replacement, value)


def _as_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidRuleError("GENERALIZE requires an integer value, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)) and math.isfinite(value) and value == int(value):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidRuleError(f"GENERALIZE requires an integer value, got {value!r}")


def generalize(value: Any, bucket: int) -> str:
    """Label the bucket of width `bucket` containing value, e.g. 37, 10 -> '30-39'."""
    if isinstance(bucket, bool) or not isinstance(bucket, int) or bucket <= 0:
        raise InvalidRuleError(f"GENERALIZE range must be a positive integer, got {bucket!r}")
    number = _as_integer(value)
    lower = (number // bucket) * bucket
    return f"{lower}-{lower + bucket - 1}"


def add_noise(value: Any, noise_range: float) -> float:
    """Add uniform noise from [-noise_range/2, +noise_range/2] drawn from the OS random source."""
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidRuleError(f"ADD_NOISE requires a numeric value, got {value!r}") from e

    try:
        sample = secrets.SystemRandom().random()
    except (NotImplementedError, OSError) as e:
        raise RandomSourceUnavailableError(
            "No cryptographically strong random source is available"
        ) from e

    noise_range = float(noise_range)
    return number + sample * noise_range - noise_range / 2


def apply_obfuscation(value: Any, rule: Optional[ObfuscationRule]) -> Any:
    """
    Apply one obfuscation rule to one value.

    Args:
        value: Column value; None always passes through
        rule: Rule to apply; no rule or no method leaves the value unchanged

    Returns:
        Obfuscated value. MASK, TRUNCATE and REPLACE return text; GENERALIZE
        returns the bucket label; ADD_NOISE returns a float.

    Raises:
        InvalidRuleError: rule parameters cannot be applied to the value
        RandomSourceUnavailableError: ADD_NOISE without a strong random source
    """
    if value is None or rule is None or rule.method is None:
        return value

    method = rule.method
    if method is ObfuscationMethod.MASK:
        return mask(text_of(value), rule.start, rule.end, rule.mask_char)
    if method is ObfuscationMethod.TRUNCATE:
        return truncate(text_of(value), rule.start, rule.end)
    if method is ObfuscationMethod.REPLACE:
        if rule.regex is None or rule.replacement is None or rule.regex == "":
            return value
        return replace_with_regex(text_of(value), rule.regex, rule.replacement)
    if method is ObfuscationMethod.GENERALIZE:
        return generalize(value, rule.range)
    if method is ObfuscationMethod.ADD_NOISE:
        return add_noise(value, rule.noise_range)

    raise UnsupportedObfuscationMethodError(method)
