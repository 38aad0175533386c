#!/usr/bin/env python3
"""
Configuration Management
Masking settings, sensitive patterns and obfuscation rules from YAML files or the environment.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .dialects import DIALECTS
from .errors import ConfigurationError, SqlMaskError
from .obfuscation import ObfuscationMethod, ObfuscationRule
from .scanner import DEFAULT_SENSITIVE_PATTERNS
from .settings import MATCH_DATA_SIZE, MaskingSettings, SettingsStore


class RuleModel(BaseModel):
    """Validated obfuscation rule entry."""
    method: Optional[ObfuscationMethod] = None
    start: int = 0
    end: int = 0
    mask_char: str = Field(default="*", min_length=1, max_length=1)
    regex: Optional[str] = None
    replacement: Optional[str] = None
    range: int = 0
    noise_range: float = 0.0

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, value):
        try:
            return ObfuscationMethod.parse(value)
        except SqlMaskError as e:
            raise ValueError(str(e)) from e

    def to_rule(self) -> ObfuscationRule:
        return ObfuscationRule(**self.model_dump())


class ConfigModel(BaseModel):
    """Validated configuration document."""
    dialect: Optional[str] = None
    database_url: Optional[str] = None
    sample_size: int = Field(default=MATCH_DATA_SIZE, ge=0)
    handle_rename: bool = True
    sensitive_patterns: List[str] = Field(default_factory=list)
    obfuscation_rules: Dict[str, RuleModel] = Field(default_factory=dict)

    @field_validator("dialect")
    @classmethod
    def check_dialect(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        key = value.strip().lower()
        if key not in DIALECTS:
            raise ValueError(f"Unsupported database type: {value}")
        return key


@dataclass
class MaskingConfig:
    """Main masking configuration."""
    dialect: Optional[str] = None
    database_url: Optional[str] = None

    # Scan and mask settings
    sample_size: int = MATCH_DATA_SIZE
    handle_rename: bool = True

    sensitive_patterns: List[str] = field(default_factory=list)
    obfuscation_rules: Dict[str, ObfuscationRule] = field(default_factory=dict)

    @classmethod
    def from_file(cls, config_path: str) -> 'MaskingConfig':
        """Load configuration from YAML file."""
        try:
            with open(config_path, 'r') as file:
                data = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MaskingConfig':
        """Create configuration from dictionary."""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a mapping")
        try:
            model = ConfigModel.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        return cls(
            dialect=model.dialect,
            database_url=model.database_url,
            sample_size=model.sample_size,
            handle_rename=model.handle_rename,
            sensitive_patterns=list(model.sensitive_patterns),
            obfuscation_rules={
                name: rule.to_rule() for name, rule in model.obfuscation_rules.items()
            }
        )

    @classmethod
    def from_environment(cls) -> 'MaskingConfig':
        """Create configuration from environment variables."""
        data: Dict[str, Any] = {
            'dialect': os.getenv('SQLMASK_DIALECT') or None,
            'database_url': os.getenv('SQLMASK_DATABASE_URL') or None,
            'handle_rename': os.getenv('SQLMASK_HANDLE_RENAME', 'true').lower() == 'true',
            'sensitive_patterns': list(DEFAULT_SENSITIVE_PATTERNS.values()),
        }

        sample_size = os.getenv('SQLMASK_SAMPLE_SIZE')
        if sample_size:
            try:
                data['sample_size'] = int(sample_size)
            except ValueError as e:
                raise ConfigurationError(f"SQLMASK_SAMPLE_SIZE must be an integer: {sample_size}") from e

        return cls.from_dict(data)

    @property
    def settings(self) -> MaskingSettings:
        return MaskingSettings(sample_size=self.sample_size, handle_rename=self.handle_rename)

    def apply(self, store: SettingsStore) -> MaskingSettings:
        """Push the sample size and rename toggle into a settings store."""
        store.set(self.settings)
        return self.settings


class ConfigManager:
    """Configuration loading with validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config_path = config_path
        self.config: Optional[MaskingConfig] = None

    def load_config(self) -> MaskingConfig:
        """Load configuration from file or environment."""
        if self.config_path and os.path.exists(self.config_path):
            self.logger.info(f"Loading configuration from file: {self.config_path}")
            self.config = MaskingConfig.from_file(self.config_path)
        elif self.config_path:
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")
        else:
            self.logger.info("Loading configuration from environment variables")
            self.config = MaskingConfig.from_environment()

        self._validate_config()
        return self.config

    def _validate_config(self) -> None:
        """Validate configuration consistency."""
        if not self.config:
            raise ConfigurationError("Configuration not loaded")

        for name, rule in self.config.obfuscation_rules.items():
            if rule.method is ObfuscationMethod.GENERALIZE and rule.range <= 0:
                raise ConfigurationError(f"GENERALIZE rule for {name} needs a positive range")
            if rule.method is ObfuscationMethod.REPLACE and rule.regex is None:
                self.logger.warning(f"REPLACE rule for {name} has no regex and will pass values through")

        self.logger.info("Configuration validation passed")


def create_default_config_file(output_path: str) -> None:
    """Create default configuration file template."""

    config_template = {
        'dialect': 'mysql',
        'database_url': 'sqlite:///example.db',
        'sample_size': MATCH_DATA_SIZE,
        'handle_rename': True,
        'sensitive_patterns': list(DEFAULT_SENSITIVE_PATTERNS.values()),
        'obfuscation_rules': {
            'email': {
                'method': ObfuscationMethod.REPLACE.value,
                'regex': DEFAULT_SENSITIVE_PATTERNS['email'],
                'replacement': '[redacted]'
            },
            'phone': {
                'method': ObfuscationMethod.MASK.value,
                'start': 3,
                'end': 7,
                'mask_char': '*'
            },
            'age': {
                'method': ObfuscationMethod.GENERALIZE.value,
                'range': 10
            },
            'salary': {
                'method': ObfuscationMethod.ADD_NOISE.value,
                'noise_range': 1000.0
            }
        }
    }

    with open(output_path, 'w') as file:
        yaml.dump(config_template, file, default_flow_style=False, indent=2, sort_keys=False)
