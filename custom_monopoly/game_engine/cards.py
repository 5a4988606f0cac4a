"""
Action and question cards: catalog, decks and effect resolution.
"""
import logging
import random
from dataclasses import dataclass, field, replace
from typing import Generic, List, Optional, TypeVar

from shared.constants import (
    DEFAULT_ADVANCE_SPACES, DEFAULT_COLLECT_AMOUNT, DEFAULT_PAY_AMOUNT,
)
from shared.enums import ActionEffect
from shared.game_settings import GameSettings, default_settings

from .board import Board
from .player import Player


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionCard:
    """An action card. ``effect`` is a raw string when the tag is not recognised."""

    id: str
    title: str
    description: str
    effect: ActionEffect | str
    value: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "effect": self.effect.value if isinstance(self.effect, ActionEffect) else self.effect,
        }
        if self.value is not None:
            data["value"] = self.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ActionCard":
        raw_effect = data.get("effect", "")
        try:
            effect: ActionEffect | str = ActionEffect(raw_effect)
        except ValueError:
            effect = raw_effect
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            effect=effect,
            value=data.get("value"),
        )


@dataclass(frozen=True)
class QuestionCard:
    """A multiple-choice question with a reward and a penalty."""

    id: str
    question: str
    options: tuple
    correct_answer: int
    reward: int
    penalty: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "correct_answer": self.correct_answer,
            "reward": self.reward,
            "penalty": self.penalty,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuestionCard":
        return cls(
            id=str(data["id"]),
            question=data.get("question", ""),
            options=tuple(data.get("options", [])),
            correct_answer=int(data["correct_answer"]),
            reward=int(data.get("reward", 0)),
            penalty=int(data.get("penalty", 0)),
        )


@dataclass
class CardOutcome:
    """
    New values for the player after a card is resolved.

    Resolution never touches the player passed in; the game applies the
    outcome.
    """
    money: int
    position: int
    skip_next_turn: bool
    message: str
    extra_turn: bool = False

    def apply_to(self, player: Player) -> None:
        player.money = self.money
        player.position = self.position
        player.skip_next_turn = self.skip_next_turn


def _unchanged(player: Player, message: str, extra_turn: bool = False) -> CardOutcome:
    return CardOutcome(
        money=player.money,
        position=player.position,
        skip_next_turn=player.skip_next_turn,
        message=message,
        extra_turn=extra_turn,
    )


def _card_amount(card: ActionCard, default: int) -> int:
    """Money value of a card; negative values count as zero."""
    amount = card.value if card.value is not None else default
    return max(0, amount)


def resolve_action_card(card: ActionCard, player: Player, board: Board) -> CardOutcome:
    """
    Work out what an action card does to a player.

    ``advance-spaces`` only moves the token; the space it lands on has no
    further effect.
    """
    outcome = _unchanged(player, "")

    if card.effect == ActionEffect.GO_TO_JAIL:
        outcome.position = board.jail_position
        outcome.message = f"{player.name} goes to jail!"

    elif card.effect == ActionEffect.SKIP_TURN:
        outcome.skip_next_turn = True
        outcome.message = f"{player.name} will skip their next turn."

    elif card.effect == ActionEffect.EXTRA_TURN:
        outcome.extra_turn = True
        outcome.message = f"{player.name} gets an extra turn!"

    elif card.effect == ActionEffect.COLLECT_MONEY:
        amount = _card_amount(card, DEFAULT_COLLECT_AMOUNT)
        outcome.money = player.money + amount
        outcome.message = f"{player.name} collected ${amount}!"

    elif card.effect == ActionEffect.PAY_MONEY:
        amount = _card_amount(card, DEFAULT_PAY_AMOUNT)
        outcome.money = max(0, player.money - amount)
        outcome.message = f"{player.name} paid ${player.money - outcome.money}."

    elif card.effect == ActionEffect.ADVANCE_SPACES:
        spaces = card.value if card.value is not None else DEFAULT_ADVANCE_SPACES
        outcome.position = (player.position + spaces) % board.size
        space = board.get_space(outcome.position)
        outcome.message = (
            f"{player.name} advances {spaces} spaces to "
            f"{space.name if space else 'unknown position'}."
        )

    else:
        logger.warning(f"Unknown action effect {card.effect!r} on card {card.id}")
        outcome.message = f"Unknown action: {card.title}"

    return outcome


def resolve_question_card(card: QuestionCard, selected_answer: int, player: Player) -> CardOutcome:
    """
    Reward a correct answer, charge the penalty (floored at zero) otherwise.

    Negative rewards and penalties count as zero.
    """
    if selected_answer == card.correct_answer:
        reward = max(0, card.reward)
        return replace(
            _unchanged(player, f"Correct! {player.name} earned ${reward}"),
            money=player.money + reward,
        )

    new_money = max(0, player.money - max(0, card.penalty))
    return replace(
        _unchanged(player, f"Wrong answer. {player.name} lost ${player.money - new_money}"),
        money=new_money,
    )


T = TypeVar("T")


@dataclass
class CardDeck(Generic[T]):
    """
    A deck that is drawn from with replacement.

    Cards are never removed, so every draw is uniform over the whole deck.
    """

    cards: List[T] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random)

    def draw(self) -> T:
        """
        Draw a card from the deck.

        Raises:
            IndexError: If the deck is empty
        """
        if not self.cards:
            raise IndexError("Cannot draw from an empty deck")
        return self.rng.choice(self.cards)

    def find(self, card_id: str) -> T | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def __len__(self) -> int:
        return len(self.cards)


class CardManager:
    """Manages both card decks."""

    def __init__(self, settings: GameSettings | None = None, seed: int | str | None = None):
        settings = settings or default_settings()
        self._random = random.Random(seed)
        self.actions: CardDeck[ActionCard] = CardDeck(
            [ActionCard.from_dict(c) for c in settings.action_cards], self._random
        )
        self.questions: CardDeck[QuestionCard] = CardDeck(
            [QuestionCard.from_dict(c) for c in settings.question_cards], self._random
        )

    def draw_action(self) -> ActionCard:
        """Draw an action card."""
        return self.actions.draw()

    def draw_question(self) -> QuestionCard:
        """Draw a question card."""
        return self.questions.draw()

    def set_seed(self, seed: int) -> None:
        self._random.seed(seed)
