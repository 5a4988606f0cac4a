"""
Database connection management and initialization.
"""

import logging
import sqlite3
import threading
from pathlib import Path
from contextlib import contextmanager
from typing import Generator

from custom_monopoly.config import settings


logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database manager.

    Each thread gets its own connection to the database file. The schema is
    created the first time an instance opens the file.
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = str(db_path or settings.DATABASE_PATH)
        self._local = threading.local()
        self._ensure_directory()
        self._ensure_schema()

    def _ensure_directory(self) -> None:
        """Create database directory if it doesn't exist."""
        if self.db_path == ":memory:":
            return
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def _ensure_schema(self) -> None:
        with self.get_connection() as conn:
            self._create_tables(conn)
        logger.debug(f"Database ready at {self.db_path}")

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Get a thread-local database connection.

        The block is one transaction: it commits on exit and rolls back if the
        block raises.

        Usage:
            with db.get_connection() as conn:
                cursor = conn.execute("SELECT ...")
        """
        if getattr(self._local, "connection", None) is None:
            self._local.connection = self._create_connection()

        conn = self._local.connection
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=30.0
        )

        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("PRAGMA journal_mode = WAL")
        conn.row_factory = sqlite3.Row

        return conn

    def _create_tables(self, conn: sqlite3.Connection) -> None:
        conn.executescript(SCHEMA_SQL)

    def close_connection(self) -> None:
        """Close the current thread's connection."""
        connection = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            self._local.connection = None

    def reset_database(self) -> None:
        """Drop and recreate all tables."""
        with self.get_connection() as conn:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            tables = [row["name"] for row in cursor.fetchall()]

            conn.execute("PRAGMA foreign_keys = OFF")
            for table in tables:
                conn.execute(f"DROP TABLE IF EXISTS {table}")
            conn.execute("PRAGMA foreign_keys = ON")

            self._create_tables(conn)
        logger.warning(f"Database at {self.db_path} was reset")


SCHEMA_SQL = """
-- One row per game
CREATE TABLE IF NOT EXISTS games (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'ROLL',
    current_player_index INTEGER NOT NULL DEFAULT 0,
    turn_number INTEGER NOT NULL DEFAULT 1,
    game_in_progress INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    finished_at TIMESTAMP,
    winner_id TEXT,
    settings_json TEXT NOT NULL DEFAULT '{}'
);

-- Player ledgers; ids are only unique within a game
CREATE TABLE IF NOT EXISTS players (
    game_id TEXT NOT NULL,
    id TEXT NOT NULL,
    name TEXT NOT NULL,
    color TEXT NOT NULL,
    turn_order INTEGER NOT NULL,
    position INTEGER NOT NULL DEFAULT 0,
    money INTEGER NOT NULL DEFAULT 1500,
    locked_money INTEGER NOT NULL DEFAULT 0,
    properties_json TEXT NOT NULL DEFAULT '[]',
    skip_next_turn INTEGER NOT NULL DEFAULT 0,

    PRIMARY KEY (game_id, id),
    FOREIGN KEY (game_id) REFERENCES games(id) ON DELETE CASCADE
);

-- Escrowed buy requests between players
CREATE TABLE IF NOT EXISTS buy_requests (
    id TEXT PRIMARY KEY,
    game_id TEXT NOT NULL,
    from_player_id TEXT NOT NULL,
    to_player_id TEXT NOT NULL,
    property_id INTEGER NOT NULL,
    amount INTEGER NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    created_at REAL NOT NULL,

    FOREIGN KEY (game_id) REFERENCES games(id) ON DELETE CASCADE
);

-- Serialized snapshots for recovery
CREATE TABLE IF NOT EXISTS game_states (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    game_id TEXT NOT NULL,
    state_json TEXT NOT NULL,
    turn_number INTEGER NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

    FOREIGN KEY (game_id) REFERENCES games(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_players_game_id ON players(game_id);
CREATE INDEX IF NOT EXISTS idx_buy_requests_game_id ON buy_requests(game_id);
CREATE INDEX IF NOT EXISTS idx_buy_requests_status ON buy_requests(status);
CREATE INDEX IF NOT EXISTS idx_game_states_game_id ON game_states(game_id);
CREATE INDEX IF NOT EXISTS idx_games_status ON games(status);
"""


# Global database instance
_db: Database | None = None


def get_database() -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database()
    return _db


def init_database(db_path: str | Path | None = None) -> Database:
    """Point the global database instance at a (possibly new) file."""
    global _db
    if _db is not None:
        _db.close_connection()
    _db = Database(db_path)
    return _db
