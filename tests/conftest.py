"""
Pytest configuration for the calculator tests.

This module contains shared fixtures for tracker, weight and storage tests.
"""

import os
import tempfile

import pytest

from cardweight.baccarat.constants import DEFAULT_WEIGHTS
from cardweight.baccarat.game import RoundTracker
from cardweight.baccarat.storage import SettingsStore


@pytest.fixture
def default_weights():
    """A private, mutable copy of the default weight table."""
    return dict(DEFAULT_WEIGHTS)


@pytest.fixture
def tracker(default_weights):
    """A fresh round tracker using the default weights."""
    return RoundTracker(default_weights)


@pytest.fixture
def settings_store():
    """Set up a settings store on a temporary database file."""
    db_file = tempfile.NamedTemporaryFile(suffix=".db", delete=False).name
    store = SettingsStore(db_file)

    yield store

    store.close()
    if os.path.exists(db_file):
        os.remove(db_file)
