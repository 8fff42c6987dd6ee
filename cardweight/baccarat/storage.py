"""
SQLite storage for settings and named weight presets.

Settings are stored as a JSON blob under an opaque string key. Presets map a
user-chosen name to a weight table. Everything read back goes through the
settings parsers, so a hand-edited database cannot produce an incomplete
weight table.
"""

import json
import logging
import os
import sqlite3
from typing import Dict, List, Mapping, Optional

from cardweight.common.card import Label
from cardweight.baccarat.constants import DEFAULT_SETTINGS_KEY
from cardweight.baccarat.settings import Settings, utc_now, parse_weights, weights_to_dict

logger = logging.getLogger("cardweight.baccarat.storage")

SETTINGS_KEY_ENV = "CARDWEIGHT_SETTINGS_KEY"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,  -- JSON of Settings.to_dict()
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS presets (
    name TEXT PRIMARY KEY,
    weights TEXT NOT NULL,  -- JSON object label -> weight
    updated_at TEXT NOT NULL
);
"""


def default_settings_key() -> str:
    """The settings key, overridable through the environment."""
    return os.environ.get(SETTINGS_KEY_ENV, DEFAULT_SETTINGS_KEY)


class SettingsStore:
    """
    Store and retrieve settings and weight presets in SQLite.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the store and create its tables.

        Args:
            db_path: Optional path to the database file. If None, uses an in-memory database.
        """
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path if db_path else ":memory:")
        self.conn.row_factory = sqlite3.Row
        self.conn.executescript(SCHEMA_SQL)
        self.conn.commit()

    def close(self) -> None:
        """Close the database connection; later calls raise sqlite3.ProgrammingError."""
        self.conn.close()

    def __enter__(self) -> "SettingsStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get(self, key: Optional[str] = None) -> Optional[Settings]:
        """
        Load settings stored under `key`.

        Returns:
            The parsed settings, or None if nothing is stored under the key
        """
        key = key or default_settings_key()
        row = self.conn.execute("SELECT payload FROM settings WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return Settings.from_dict(json.loads(row["payload"]))

    def set(self, settings: Settings, key: Optional[str] = None) -> Settings:
        """
        Store settings under `key`, stamping them with the current time.

        Returns:
            The settings as stored (normalized and with a fresh `updated_at`)
        """
        key = key or default_settings_key()
        stored = Settings.from_dict({**settings.to_dict(), "updated_at": utc_now()})
        self.conn.execute(
            """
            INSERT INTO settings (key, payload, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET payload = excluded.payload,
                                           updated_at = excluded.updated_at
            """,
            (key, json.dumps(stored.to_dict()), stored.updated_at),
        )
        self.conn.commit()
        logger.info("Stored settings under %s", key)
        return stored

    def save_preset(self, name: str, weights: Mapping) -> None:
        """
        Save a weight table under a name, replacing any preset with that name.

        Raises:
            ValueError: If the name is blank
        """
        name = name.strip()
        if not name:
            raise ValueError("Preset name must not be empty")
        payload = weights_to_dict(parse_weights(weights))
        self.conn.execute(
            """
            INSERT INTO presets (name, weights, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET weights = excluded.weights,
                                            updated_at = excluded.updated_at
            """,
            (name, json.dumps(payload), utc_now()),
        )
        self.conn.commit()
        logger.info("Saved weight preset %r", name)

    def load_preset(self, name: str) -> Optional[Dict[Label, int]]:
        row = self.conn.execute("SELECT weights FROM presets WHERE name = ?", (name.strip(),)).fetchone()
        if row is None:
            return None
        return parse_weights(json.loads(row["weights"]))

    def list_presets(self) -> List[str]:
        rows = self.conn.execute("SELECT name FROM presets ORDER BY name").fetchall()
        return [row["name"] for row in rows]

    def delete_preset(self, name: str) -> bool:
        """Delete a preset. Returns True if it existed."""
        cursor = self.conn.execute("DELETE FROM presets WHERE name = ?", (name.strip(),))
        self.conn.commit()
        return cursor.rowcount > 0

