"""
Board, property and card configuration document.

The settings editor produces this document and the engine only reads it.
Entries are kept as plain dictionaries so the document round-trips through
JSON unchanged; the engine turns them into typed objects when a game starts.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from shared.constants import (
    ACTION_CARDS, BOARD_SIZE, BOARD_SPACES, DEFAULT_GAME_TITLE,
    DEFAULT_NUMBER_OF_PLAYERS, MAX_PLAYERS, MIN_PLAYERS, PROPERTY_CARDS,
    QUESTION_CARDS,
)
from shared.enums import ActionEffect, SpaceType

_MONEY_EFFECTS = {ActionEffect.COLLECT_MONEY.value, ActionEffect.PAY_MONEY.value}


def _default_properties() -> List[Dict[str, Any]]:
    return [
        {
            "id": card_id,
            "name": name,
            "color": color,
            "price": price,
            "rent": rent,
            "description": description,
        }
        for card_id, name, color, price, rent, description in PROPERTY_CARDS
    ]


def _default_board_spaces() -> List[Dict[str, Any]]:
    spaces = []
    for position, name, space_type, color, price, rent in BOARD_SPACES:
        space: Dict[str, Any] = {"id": position, "name": name, "type": space_type}
        if color is not None:
            space["color"] = color
        if price is not None:
            space["price"] = price
            space["rent"] = rent
        spaces.append(space)
    return spaces


def _default_question_cards() -> List[Dict[str, Any]]:
    return [
        {
            "id": card_id,
            "question": question,
            "options": list(options),
            "correct_answer": correct_answer,
            "reward": reward,
            "penalty": penalty,
        }
        for card_id, question, options, correct_answer, reward, penalty in QUESTION_CARDS
    ]


def _default_action_cards() -> List[Dict[str, Any]]:
    cards = []
    for card_id, title, description, effect, value in ACTION_CARDS:
        card: Dict[str, Any] = {
            "id": card_id,
            "title": title,
            "description": description,
            "effect": effect,
        }
        if value is not None:
            card["value"] = value
        cards.append(card)
    return cards


@dataclass
class GameSettings:
    """Configuration for a game: board layout, property catalog and card decks."""
    game_title: str = DEFAULT_GAME_TITLE
    number_of_players: int = DEFAULT_NUMBER_OF_PLAYERS
    properties: List[Dict[str, Any]] = field(default_factory=_default_properties)
    board_spaces: List[Dict[str, Any]] = field(default_factory=_default_board_spaces)
    question_cards: List[Dict[str, Any]] = field(default_factory=_default_question_cards)
    action_cards: List[Dict[str, Any]] = field(default_factory=_default_action_cards)

    def validate(self) -> List[str]:
        """
        Check the document for problems.

        Returns:
            List of human-readable problems, empty if the document is usable
        """
        problems = []

        if not MIN_PLAYERS <= self.number_of_players <= MAX_PLAYERS:
            problems.append(
                f"number_of_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}"
            )

        if len(self.board_spaces) != BOARD_SIZE:
            problems.append(f"Board must have exactly {BOARD_SIZE} spaces")

        valid_types = {t.value for t in SpaceType}
        for index, space in enumerate(self.board_spaces):
            if int(space.get("id", -1)) != index:
                problems.append(f"Space at index {index} has id {space.get('id')}")
            space_type = space.get("type")
            if space_type not in valid_types:
                problems.append(f"Space {index} has unknown type {space_type!r}")
            elif space_type == SpaceType.PROPERTY.value:
                if space.get("price") is None or space.get("rent") is None:
                    problems.append(f"Property space {index} needs a price and a rent")

        if not self.action_cards:
            problems.append("Action deck is empty")
        if not self.question_cards:
            problems.append("Question deck is empty")

        valid_effects = {e.value for e in ActionEffect}
        for card in self.action_cards:
            if card.get("effect") not in valid_effects:
                problems.append(
                    f"Action card {card.get('id')} has unknown effect {card.get('effect')!r}"
                )
            elif card["effect"] in _MONEY_EFFECTS and (card.get("value") or 0) < 0:
                problems.append(f"Action card {card.get('id')} has a negative value")

        for card in self.question_cards:
            options = card.get("options", [])
            if not 0 <= card.get("correct_answer", -1) < len(options):
                problems.append(
                    f"Question card {card.get('id')} has no valid correct answer"
                )
            for key in ("reward", "penalty"):
                if (card.get(key) or 0) < 0:
                    problems.append(f"Question card {card.get('id')} has a negative {key}")

        return problems

    def to_dict(self) -> dict:
        return {
            "game_title": self.game_title,
            "number_of_players": self.number_of_players,
            "properties": [dict(p) for p in self.properties],
            "board_spaces": [dict(s) for s in self.board_spaces],
            "question_cards": [dict(q) for q in self.question_cards],
            "action_cards": [dict(a) for a in self.action_cards],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GameSettings":
        """
        Create settings from a dictionary.

        Missing sections fall back to the stock board.

        Raises:
            ValueError: If a section is present but is not a list
        """
        if not isinstance(data, dict):
            raise ValueError("Settings document must be a JSON object")

        defaults = cls()
        sections = {}
        for name in ("properties", "board_spaces", "question_cards", "action_cards"):
            value = data.get(name, getattr(defaults, name))
            if not isinstance(value, list):
                raise ValueError(f"Settings section {name!r} must be a list")
            sections[name] = [dict(entry) for entry in value]

        return cls(
            game_title=data.get("game_title", DEFAULT_GAME_TITLE),
            number_of_players=int(data.get("number_of_players", DEFAULT_NUMBER_OF_PLAYERS)),
            **sections,
        )


def default_settings() -> GameSettings:
    """The stock cloud-services board."""
    return GameSettings()


def load_settings(path: str | Path) -> GameSettings:
    """Load a settings document from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return GameSettings.from_dict(json.load(f))


def save_settings(settings: GameSettings, path: str | Path) -> None:
    """Write a settings document to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, indent=2)
