#!/usr/bin/env python3
"""
Masking Settings
Process-wide sample-size policy and rename toggle, guarded for concurrent use.
"""

import threading
from dataclasses import dataclass, replace
from typing import Optional


# Default number of matched values kept per (column, regex) finding
MATCH_DATA_SIZE = 5


@dataclass(frozen=True)
class MaskingSettings:
    """Immutable snapshot of the scan/mask settings."""
    sample_size: int = MATCH_DATA_SIZE
    handle_rename: bool = True

    def __post_init__(self):
        if isinstance(self.sample_size, bool) or not isinstance(self.sample_size, int):
            raise TypeError("sample_size must be an integer")
        if self.sample_size < 0:
            raise ValueError("sample_size must not be negative")


class SettingsStore:
    """
    Holder for the current MaskingSettings.

    Every read and every write takes the lock once; operations read the store
    when they start, so a change made by another thread is seen by the next
    read of any caller.
    """

    def __init__(self, settings: Optional[MaskingSettings] = None):
        self._lock = threading.Lock()
        self._settings = settings or MaskingSettings()

    def get(self) -> MaskingSettings:
        """Return the current settings snapshot."""
        with self._lock:
            return self._settings

    def set(self, settings: MaskingSettings) -> None:
        """Replace the current settings snapshot."""
        with self._lock:
            self._settings = settings

    def update(self, **changes) -> MaskingSettings:
        """Apply field changes atomically and return the new snapshot."""
        with self._lock:
            self._settings = replace(self._settings, **changes)
            return self._settings

    def reset(self) -> None:
        self.set(MaskingSettings())

    @property
    def sample_size(self) -> int:
        return self.get().sample_size

    @sample_size.setter
    def sample_size(self, value: int) -> None:
        self.update(sample_size=value)

    @property
    def handle_rename(self) -> bool:
        return self.get().handle_rename

    @handle_rename.setter
    def handle_rename(self, value: bool) -> None:
        self.update(handle_rename=bool(value))


# Process-wide default used when callers do not thread their own store
DEFAULT_SETTINGS = SettingsStore()


def resolve_settings(settings=None) -> MaskingSettings:
    """Read a snapshot from a store, pass a snapshot through, or use the default."""
    if settings is None:
        return DEFAULT_SETTINGS.get()
    if isinstance(settings, MaskingSettings):
        return settings
    return settings.get()
