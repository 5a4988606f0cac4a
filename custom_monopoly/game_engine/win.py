"""
Win condition evaluation.
"""
from dataclasses import dataclass
from typing import List, Optional

from shared.constants import WIN_MONEY_THRESHOLD, WIN_PROPERTY_THRESHOLD
from shared.enums import WinConditionType

from .board import Board
from .player import Player


@dataclass(frozen=True)
class WinCondition:
    type: WinConditionType
    description: str
    threshold: Optional[int] = None


DEFAULT_WIN_CONDITIONS = (
    WinCondition(WinConditionType.MONEY, f"First to reach ${WIN_MONEY_THRESHOLD:,}", WIN_MONEY_THRESHOLD),
    WinCondition(WinConditionType.PROPERTIES, f"Own {WIN_PROPERTY_THRESHOLD} properties", WIN_PROPERTY_THRESHOLD),
    WinCondition(WinConditionType.LAST_STANDING, "Last player with money remaining"),
)

MONOPOLY_CONDITION = WinCondition(
    WinConditionType.MONOPOLY, "Own every property of one colour group"
)


@dataclass(frozen=True)
class WinResult:
    player_id: str
    condition: WinCondition

    @property
    def message(self) -> str:
        return self.condition.description


class WinEvaluator:
    """
    Checks the configured win conditions in order.

    The first condition any player meets decides the game; within a
    condition players are checked in turn order.
    """

    def __init__(self, board: Board, conditions: Optional[List[WinCondition]] = None):
        self.board = board
        self.conditions = list(conditions if conditions is not None else DEFAULT_WIN_CONDITIONS)

    @classmethod
    def with_monopoly(cls, board: Board) -> "WinEvaluator":
        """Default conditions plus the colour-group condition before last-standing."""
        conditions = list(DEFAULT_WIN_CONDITIONS)
        conditions.insert(2, MONOPOLY_CONDITION)
        return cls(board, conditions)

    def evaluate(self, players: List[Player]) -> WinResult | None:
        for condition in self.conditions:
            for player in players:
                if self._meets(condition, player, players):
                    return WinResult(player_id=player.id, condition=condition)
        return None

    def _meets(self, condition: WinCondition, player: Player, players: List[Player]) -> bool:
        if condition.type == WinConditionType.MONEY:
            return condition.threshold is not None and player.money >= condition.threshold

        if condition.type == WinConditionType.PROPERTIES:
            return condition.threshold is not None and len(player.properties) >= condition.threshold

        if condition.type == WinConditionType.MONOPOLY:
            return self.has_monopoly(player)

        if condition.type == WinConditionType.LAST_STANDING:
            solvent = [p for p in players if p.money > 0]
            return len(players) > 1 and len(solvent) == 1 and solvent[0].id == player.id

        return False

    def has_monopoly(self, player: Player) -> bool:
        """True if the player owns every property of at least one colour group."""
        colors = {
            space.color for space in self.board.get_player_properties(player.id)
            if space.color
        }
        return any(self.board.player_has_monopoly(player.id, color) for color in colors)


def game_status(players: List[Player], winner_id: str | None) -> dict:
    """
    Summary of who is still solvent and who has won.

    The game has also ended once at most one player has money left, even if
    no win condition recorded a winner.
    """
    active = [p for p in players if p.money > 0]
    bankrupt = [p for p in players if p.money <= 0]
    return {
        "active_players": [p.id for p in active],
        "bankrupt_players": [p.id for p in bankrupt],
        "game_ended": winner_id is not None or len(active) <= 1,
        "winner": winner_id,
    }
