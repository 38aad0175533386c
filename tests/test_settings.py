"""Tests for the masking settings store."""

import threading

import pytest

from sqlmask.core.settings import (
    DEFAULT_SETTINGS, MATCH_DATA_SIZE, MaskingSettings, SettingsStore, resolve_settings
)


class TestMaskingSettings:
    """Settings snapshots."""

    def test_defaults(self):
        settings = MaskingSettings()
        assert settings.sample_size == MATCH_DATA_SIZE == 5
        assert settings.handle_rename is True

    def test_negative_sample_size(self):
        with pytest.raises(ValueError):
            MaskingSettings(sample_size=-1)

    @pytest.mark.parametrize("value", ["5", 2.5, True])
    def test_sample_size_must_be_an_integer(self, value):
        with pytest.raises(TypeError):
            MaskingSettings(sample_size=value)


class TestSettingsStore:
    """Shared, lock-guarded settings."""

    def test_update_and_reset(self):
        store = SettingsStore()
        store.update(sample_size=10, handle_rename=False)
        assert store.get() == MaskingSettings(sample_size=10, handle_rename=False)
        store.reset()
        assert store.get() == MaskingSettings()

    def test_property_setters(self):
        store = SettingsStore()
        store.sample_size = 3
        store.handle_rename = 0
        assert store.sample_size == 3
        assert store.handle_rename is False

    def test_invalid_update_keeps_previous_value(self):
        store = SettingsStore(MaskingSettings(sample_size=7))
        with pytest.raises(ValueError):
            store.sample_size = -2
        assert store.sample_size == 7

    def test_concurrent_writers_leave_a_consistent_snapshot(self):
        store = SettingsStore()

        def writer(size):
            for _ in range(200):
                store.update(sample_size=size, handle_rename=size % 2 == 0)

        threads = [threading.Thread(target=writer, args=(size,)) for size in range(1, 9)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = store.get()
        assert snapshot.handle_rename is (snapshot.sample_size % 2 == 0)

    def test_resolve_settings(self):
        snapshot = MaskingSettings(sample_size=1)
        assert resolve_settings(snapshot) is snapshot
        assert resolve_settings(SettingsStore(snapshot)) is snapshot
        assert resolve_settings() == DEFAULT_SETTINGS.get()
