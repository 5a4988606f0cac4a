"""
Game engine package.
"""
from .dice import Dice, DiceResult
from .player import Player, generate_players
from .board import Board, BoardSpace
from .cards import (
    ActionCard, CardDeck, CardManager, CardOutcome, QuestionCard,
    resolve_action_card, resolve_question_card,
)
from .trade import BuyRequest, TradeManager
from .rules import RuleEngine, ValidationResult, ActionResult
from .win import WinCondition, WinEvaluator, WinResult
from .game import Game, GameEvent

__all__ = [
    "Dice",
    "DiceResult",
    "Player",
    "generate_players",
    "Board",
    "BoardSpace",
    "ActionCard",
    "QuestionCard",
    "CardDeck",
    "CardManager",
    "CardOutcome",
    "resolve_action_card",
    "resolve_question_card",
    "BuyRequest",
    "TradeManager",
    "RuleEngine",
    "ValidationResult",
    "ActionResult",
    "WinCondition",
    "WinEvaluator",
    "WinResult",
    "Game",
    "GameEvent",
]
