"""Tests for the SQLite settings and preset store."""

import sqlite3

import pytest

from cardweight.common.card import Label
from cardweight.baccarat.constants import DEFAULT_SETTINGS_KEY, DEFAULT_WEIGHTS
from cardweight.baccarat.settings import Settings
from cardweight.baccarat.storage import SETTINGS_KEY_ENV, SettingsStore, default_settings_key
from cardweight.simulation.sampler import SimulationConfig


class TestSettingsStorage:
    def test_missing_key(self, settings_store):
        """Test that an unknown key reads as None."""
        assert settings_store.get("nothing-here") is None

    def test_set_and_get(self, settings_store):
        """Test storing and loading settings."""
        weights = dict(DEFAULT_WEIGHTS)
        weights[Label.ACE] = 11
        stored = settings_store.set(Settings(weights=weights, simulation=SimulationConfig(decks=4, iterations=999)), "k")
        loaded = settings_store.get("k")
        assert loaded.weights[Label.ACE] == 11
        assert loaded.simulation.decks == 4
        assert loaded.simulation.iterations == 999
        assert loaded.updated_at == stored.updated_at

    def test_set_clamps_and_overwrites(self, settings_store):
        """Test that a second save replaces the first, clamped."""
        settings_store.set(Settings(simulation=SimulationConfig(decks=2)), "k")
        settings_store.set(Settings(simulation=SimulationConfig(decks=99, iterations=1)), "k")
        loaded = settings_store.get("k")
        assert loaded.simulation.decks == 12
        assert loaded.simulation.iterations == 100

    def test_default_key_from_environment(self, settings_store, monkeypatch):
        """Test that the default key comes from the environment."""
        monkeypatch.delenv(SETTINGS_KEY_ENV, raising=False)
        assert default_settings_key() == DEFAULT_SETTINGS_KEY
        monkeypatch.setenv(SETTINGS_KEY_ENV, "custom")
        settings_store.set(Settings())
        assert settings_store.get("custom") is not None
        assert settings_store.get(DEFAULT_SETTINGS_KEY) is None

    def test_persists_across_connections(self, tmp_path):
        """Test that settings survive reopening the database."""
        db_file = str(tmp_path / "settings.db")
        with SettingsStore(db_file) as store:
            store.set(Settings(simulation=SimulationConfig(decks=3)), "k")
        with SettingsStore(db_file) as store:
            assert store.get("k").simulation.decks == 3

    def test_closed_store_rejects_calls(self, tmp_path):
        """Test that a closed store raises the driver error instead of failing on None."""
        store = SettingsStore(str(tmp_path / "settings.db"))
        store.close()
        with pytest.raises(sqlite3.ProgrammingError):
            store.get("k")
        with pytest.raises(sqlite3.ProgrammingError):
            store.list_presets()


class TestPresets:
    def test_save_load_list_delete(self, settings_store):
        """Test the preset lifecycle."""
        settings_store.save_preset("aggressive", {Label.FOUR: 30})
        settings_store.save_preset(" calm ", {"4": 1})
        assert settings_store.list_presets() == ["aggressive", "calm"]

        loaded = settings_store.load_preset("aggressive")
        assert loaded[Label.FOUR] == 30
        assert loaded[Label.NINE] == DEFAULT_WEIGHTS[Label.NINE]

        assert settings_store.delete_preset("calm")
        assert not settings_store.delete_preset("calm")
        assert settings_store.load_preset("calm") is None

    def test_save_replaces(self, settings_store):
        """Test that saving a preset twice keeps one entry."""
        settings_store.save_preset("p", {"A": 1})
        settings_store.save_preset("p", {"A": 2})
        assert settings_store.load_preset("p")[Label.ACE] == 2
        assert settings_store.list_presets() == ["p"]

    def test_blank_name_rejected(self, settings_store):
        """Test that a blank preset name is rejected."""
        with pytest.raises(ValueError):
            settings_store.save_preset("   ", {})
