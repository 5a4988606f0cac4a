"""
Enumerations used throughout the game.
"""
from enum import Enum


class SpaceType(str, Enum):
    """Types of spaces on the board."""
    PROPERTY = "property"
    ACTION = "action"
    QUESTION = "question"
    CORNER = "corner"
    JAIL = "jail"


class GamePhase(str, Enum):
    """Current phase of a player's turn."""
    ROLL = "ROLL"
    ACTIONS = "ACTIONS"
    ACTION_CARD = "ACTION_CARD"        # Waiting for acknowledgement
    QUESTION_CARD = "QUESTION_CARD"    # Waiting for an answer
    GAME_OVER = "GAME_OVER"


class ActionEffect(str, Enum):
    """Effects an action card can trigger."""
    GO_TO_JAIL = "go-to-jail"
    SKIP_TURN = "skip-turn"
    EXTRA_TURN = "extra-turn"
    COLLECT_MONEY = "collect-money"
    PAY_MONEY = "pay-money"
    ADVANCE_SPACES = "advance-spaces"


class BuyRequestStatus(str, Enum):
    """Status of a buy request."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"


class WinConditionType(str, Enum):
    """Ways a player can win the game."""
    MONEY = "money"
    PROPERTIES = "properties"
    MONOPOLY = "monopoly"
    LAST_STANDING = "last-standing"
