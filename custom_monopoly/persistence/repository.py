"""
Repository layer for game persistence operations.

Handles all database CRUD operations and game state serialization.
"""

import json
import logging
from typing import Any

from custom_monopoly.persistence.database import Database, get_database
from custom_monopoly.persistence.models import (
    BuyRequestRecord,
    GameRecord,
    GameStateSnapshot,
    GameSummary,
    PlayerRecord,
)


logger = logging.getLogger(__name__)


_UPSERT_GAME = """
    INSERT INTO games (id, name, status, current_player_index, turn_number,
                       game_in_progress, finished_at, winner_id, settings_json)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        name = excluded.name,
        status = excluded.status,
        current_player_index = excluded.current_player_index,
        turn_number = excluded.turn_number,
        game_in_progress = excluded.game_in_progress,
        updated_at = CURRENT_TIMESTAMP,
        finished_at = excluded.finished_at,
        winner_id = excluded.winner_id,
        settings_json = excluded.settings_json
"""

_UPSERT_PLAYER = """
    INSERT INTO players (
        game_id, id, name, color, turn_order, position, money,
        locked_money, properties_json, skip_next_turn
    )
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(game_id, id) DO UPDATE SET
        name = excluded.name,
        color = excluded.color,
        turn_order = excluded.turn_order,
        position = excluded.position,
        money = excluded.money,
        locked_money = excluded.locked_money,
        properties_json = excluded.properties_json,
        skip_next_turn = excluded.skip_next_turn
"""

_UPSERT_BUY_REQUEST = """
    INSERT INTO buy_requests (
        id, game_id, from_player_id, to_player_id, property_id,
        amount, status, created_at
    )
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        status = excluded.status
"""


def _game_params(game: GameRecord) -> tuple:
    return (
        game.id,
        game.name,
        game.status,
        game.current_player_index,
        game.turn_number,
        int(game.game_in_progress),
        game.finished_at,
        game.winner_id,
        game.settings_json,
    )


def _player_params(player: PlayerRecord) -> tuple:
    return (
        player.game_id,
        player.id,
        player.name,
        player.color,
        player.turn_order,
        player.position,
        player.money,
        player.locked_money,
        json.dumps(sorted(player.properties)),
        int(player.skip_next_turn),
    )


def _request_params(request: BuyRequestRecord) -> tuple:
    return (
        request.id,
        request.game_id,
        request.from_player_id,
        request.to_player_id,
        request.property_id,
        request.amount,
        request.status,
        request.created_at,
    )


class GameRepository:
    """
    Repository for game persistence operations.

    Provides high-level methods for saving and loading games,
    abstracting away the database details.
    """

    def __init__(self, database: Database | None = None):
        self.db = database or get_database()

    # =========================================================================
    # Game CRUD Operations
    # =========================================================================

    def create_game(self, game_record: GameRecord) -> GameRecord:
        """Create a new game record."""
        with self.db.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO games (id, name, status, current_player_index, turn_number,
                                   game_in_progress, finished_at, winner_id, settings_json)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                _game_params(game_record)
            )
        return game_record

    def get_game(self, game_id: str) -> GameRecord | None:
        """Get a game by ID."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM games WHERE id = ?",
                (game_id,)
            )
            row = cursor.fetchone()

            if row:
                return GameRecord.from_row(dict(row))
            return None

    def update_game(self, game_record: GameRecord) -> None:
        """Insert or update a game record."""
        with self.db.get_connection() as conn:
            conn.execute(_UPSERT_GAME, _game_params(game_record))

    def delete_game(self, game_id: str) -> bool:
        """Delete a game and all related data (cascades)."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM games WHERE id = ?",
                (game_id,)
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted stored game {game_id}")
        return deleted

    def list_games(
        self,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0
    ) -> list[GameSummary]:
        """List games, most recently updated first, with optional status filter."""
        where = "WHERE g.status = ?" if status else ""
        params: tuple = (status, limit, offset) if status else (limit, offset)

        with self.db.get_connection() as conn:
            cursor = conn.execute(
                f"""
                SELECT g.id, g.name, g.status, g.created_at, g.updated_at,
                       COUNT(p.id) as player_count
                FROM games g
                LEFT JOIN players p ON g.id = p.game_id
                {where}
                GROUP BY g.id
                ORDER BY g.updated_at DESC, g.rowid DESC
                LIMIT ? OFFSET ?
                """,
                params
            )

            return [
                GameSummary(
                    id=row["id"],
                    name=row["name"],
                    status=row["status"],
                    player_count=row["player_count"],
                    created_at=row["created_at"],
                    updated_at=row["updated_at"]
                )
                for row in cursor.fetchall()
            ]

    # =========================================================================
    # Player Operations
    # =========================================================================

    def save_player(self, player: PlayerRecord) -> PlayerRecord:
        """Insert or update a player's ledger."""
        with self.db.get_connection() as conn:
            conn.execute(_UPSERT_PLAYER, _player_params(player))
        return player

    def get_player(self, game_id: str, player_id: str) -> PlayerRecord | None:
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM players WHERE game_id = ? AND id = ?",
                (game_id, player_id)
            )
            row = cursor.fetchone()

            if row:
                return PlayerRecord.from_row(dict(row))
            return None

    def get_players_for_game(self, game_id: str) -> list[PlayerRecord]:
        """Get all players in a game, ordered by turn order."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM players WHERE game_id = ? ORDER BY turn_order",
                (game_id,)
            )
            return [PlayerRecord.from_row(dict(row)) for row in cursor.fetchall()]

    # =========================================================================
    # Buy Request Operations
    # =========================================================================

    def save_buy_request(self, request: BuyRequestRecord) -> None:
        """Insert a request, or update the status of a stored one."""
        with self.db.get_connection() as conn:
            conn.execute(_UPSERT_BUY_REQUEST, _request_params(request))

    def get_buy_requests_for_game(
        self,
        game_id: str,
        status: str | None = None
    ) -> list[BuyRequestRecord]:
        """Requests of a game in creation order, optionally filtered by status."""
        with self.db.get_connection() as conn:
            if status:
                cursor = conn.execute(
                    """
                    SELECT * FROM buy_requests
                    WHERE game_id = ? AND status = ?
                    ORDER BY created_at, rowid
                    """,
                    (game_id, status)
                )
            else:
                cursor = conn.execute(
                    "SELECT * FROM buy_requests WHERE game_id = ? ORDER BY created_at, rowid",
                    (game_id,)
                )
            return [BuyRequestRecord.from_row(dict(row)) for row in cursor.fetchall()]

    # =========================================================================
    # Game State Snapshots
    # =========================================================================

    def save_game_state(self, game_id: str, state: dict[str, Any], turn_number: int) -> int:
        """
        Save a complete game state snapshot.

        Returns the snapshot ID.
        """
        state_json = json.dumps(state)

        with self.db.get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO game_states (game_id, state_json, turn_number)
                VALUES (?, ?, ?)
                """,
                (game_id, state_json, turn_number)
            )
            return cursor.lastrowid

    def get_latest_game_state(self, game_id: str) -> GameStateSnapshot | None:
        """Get the most recent game state snapshot."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT * FROM game_states
                WHERE game_id = ?
                ORDER BY id DESC
                LIMIT 1
                """,
                (game_id,)
            )
            row = cursor.fetchone()

            if row:
                return GameStateSnapshot.from_row(dict(row))
            return None

    def get_most_recent_game_id(self) -> str | None:
        """Id of the game that was saved last."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "SELECT game_id FROM game_states ORDER BY id DESC LIMIT 1"
            )
            row = cursor.fetchone()
            return row["game_id"] if row else None

    def cleanup_old_snapshots(self, game_id: str, keep_count: int = 10) -> int:
        """
        Delete old snapshots, keeping the most recent ones.

        Returns the number of deleted snapshots.
        """
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                """
                DELETE FROM game_states
                WHERE game_id = ? AND id NOT IN (
                    SELECT id FROM game_states
                    WHERE game_id = ?
                    ORDER BY id DESC
                    LIMIT ?
                )
                """,
                (game_id, game_id, keep_count)
            )
            return cursor.rowcount

    # =========================================================================
    # High-Level Save/Load Operations
    # =========================================================================

    def save_full_game(
        self,
        game: GameRecord,
        players: list[PlayerRecord],
        buy_requests: list[BuyRequestRecord],
        state_snapshot: dict[str, Any] | None = None,
    ) -> None:
        """
        Save a complete game state in a single transaction.

        Players no longer in the game are removed. This is the primary method
        for persisting game state.
        """
        with self.db.get_connection() as conn:
            conn.execute(_UPSERT_GAME, _game_params(game))

            conn.execute(
                f"""
                DELETE FROM players
                WHERE game_id = ? AND id NOT IN ({",".join("?" * len(players))})
                """,
                (game.id, *[p.id for p in players])
            )
            for player in players:
                conn.execute(_UPSERT_PLAYER, _player_params(player))

            if not buy_requests:
                conn.execute("DELETE FROM buy_requests WHERE game_id = ?", (game.id,))
            for request in buy_requests:
                conn.execute(_UPSERT_BUY_REQUEST, _request_params(request))

            if state_snapshot:
                conn.execute(
                    """
                    INSERT INTO game_states (game_id, state_json, turn_number)
                    VALUES (?, ?, ?)
                    """,
                    (game.id, json.dumps(state_snapshot), game.turn_number)
                )

    def load_full_game(self, game_id: str) -> dict[str, Any] | None:
        """
        Load a complete game state.

        Returns a dictionary with all game data, or None if not found.
        """
        game = self.get_game(game_id)
        if not game:
            return None

        return {
            "game": game,
            "players": self.get_players_for_game(game_id),
            "buy_requests": self.get_buy_requests_for_game(game_id),
            "latest_snapshot": self.get_latest_game_state(game_id),
        }
