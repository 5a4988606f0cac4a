"""
Persistence layer for Custom Monopoly.

Provides SQLite-based storage for games, players, buy requests and
game state snapshots.
"""

from custom_monopoly.persistence.database import (
    Database,
    get_database,
    init_database
)
from custom_monopoly.persistence.models import (
    BuyRequestRecord,
    GameRecord,
    GameStateSnapshot,
    GameSummary,
    PlayerRecord,
)
from custom_monopoly.persistence.repository import GameRepository


__all__ = [
    # Database
    "Database",
    "get_database",
    "init_database",

    # Models
    "GameRecord",
    "PlayerRecord",
    "BuyRequestRecord",
    "GameStateSnapshot",
    "GameSummary",

    # Repository
    "GameRepository"
]
