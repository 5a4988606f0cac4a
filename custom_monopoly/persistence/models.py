"""
Data models for database operations.

These are simple dataclasses that map to database rows,
separate from the game engine models.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class GameRecord:
    """Database representation of a game."""
    id: str
    name: str
    status: str = "ROLL"
    current_player_index: int = 0
    turn_number: int = 1
    game_in_progress: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    finished_at: datetime | None = None
    winner_id: str | None = None
    settings_json: str = "{}"

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "GameRecord":
        """Create from database row."""
        return cls(
            id=row["id"],
            name=row["name"],
            status=row["status"],
            current_player_index=row["current_player_index"],
            turn_number=row["turn_number"],
            game_in_progress=bool(row["game_in_progress"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            finished_at=row["finished_at"],
            winner_id=row["winner_id"],
            settings_json=row["settings_json"]
        )


@dataclass
class PlayerRecord:
    """Database representation of a player's ledger."""
    id: str
    game_id: str
    name: str
    color: str
    turn_order: int
    position: int = 0
    money: int = 1500
    locked_money: int = 0
    properties: list[int] = field(default_factory=list)
    skip_next_turn: bool = False

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PlayerRecord":
        """Create from database row."""
        return cls(
            id=row["id"],
            game_id=row["game_id"],
            name=row["name"],
            color=row["color"],
            turn_order=row["turn_order"],
            position=row["position"],
            money=row["money"],
            locked_money=row["locked_money"],
            properties=json.loads(row["properties_json"]),
            skip_next_turn=bool(row["skip_next_turn"])
        )


@dataclass
class BuyRequestRecord:
    """Database representation of a buy request."""
    id: str
    game_id: str
    from_player_id: str
    to_player_id: str
    property_id: int
    amount: int
    status: str
    created_at: float

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "BuyRequestRecord":
        """Create from database row."""
        return cls(
            id=row["id"],
            game_id=row["game_id"],
            from_player_id=row["from_player_id"],
            to_player_id=row["to_player_id"],
            property_id=row["property_id"],
            amount=row["amount"],
            status=row["status"],
            created_at=row["created_at"]
        )


@dataclass
class GameStateSnapshot:
    """
    Complete serialized game state for recovery.

    This stores the full JSON from game.to_dict() for
    point-in-time recovery.
    """
    id: int | None
    game_id: str
    state_json: str
    turn_number: int
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "GameStateSnapshot":
        """Create from database row."""
        return cls(
            id=row["id"],
            game_id=row["game_id"],
            state_json=row["state_json"],
            turn_number=row["turn_number"],
            created_at=row["created_at"]
        )

    @property
    def state(self) -> dict[str, Any]:
        return json.loads(self.state_json)


@dataclass
class GameSummary:
    """Lightweight game info for listings."""
    id: str
    name: str
    status: str
    player_count: int
    created_at: datetime | None
    updated_at: datetime | None
