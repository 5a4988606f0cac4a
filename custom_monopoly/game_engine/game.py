"""
Main game orchestration - ties all components together.

``Game`` is the only object callers mutate. Each operation validates through
the rule engine, applies its effect in one step, records ``GameEvent``s and
then checks the win conditions.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from shared.constants import MAX_PLAYERS, MIN_PLAYERS
from shared.enums import ActionEffect, GamePhase, SpaceType
from shared.game_settings import GameSettings, default_settings

from .board import Board, BoardSpace, to_position
from .cards import (
    ActionCard, CardManager, QuestionCard,
    resolve_action_card, resolve_question_card,
)
from .dice import Dice, DiceResult
from .player import Player, generate_players
from .rules import RuleEngine, ValidationResult
from .trade import BuyRequest, TradeManager
from .win import WinEvaluator, game_status


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _card_seed(seed: Optional[int]) -> Optional[str]:
    """Cards draw from their own stream so they do not mirror the dice."""
    return None if seed is None else f"cards:{seed}"


def _checked_player_count(count: int) -> int:
    if not MIN_PLAYERS <= count <= MAX_PLAYERS:
        raise ValueError(f"A game needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {count}")
    return count


def _space_ref(value):
    """
    Space ids may arrive as strings. Anything that is not a position is
    passed through for the rule engine to reject.
    """
    position = to_position(value)
    return value if position is None else position


@dataclass
class GameEvent:
    """Represents something that happened in the game."""
    event_type: str
    data: dict
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Game:
    """
    Main game class that orchestrates all gameplay.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    created_at: datetime = field(default_factory=_utcnow)

    # Configuration
    settings: GameSettings = field(default_factory=default_settings)
    seed: Optional[int] = None
    monopoly_wins: bool = False

    # Game components
    board: Board = field(init=False)
    dice: Dice = field(init=False)
    cards: CardManager = field(init=False)
    rules: RuleEngine = field(init=False)
    trades: TradeManager = field(init=False)
    win: WinEvaluator = field(init=False)

    # Players
    players: Dict[str, Player] = field(default_factory=dict)
    player_order: List[str] = field(default_factory=list)
    current_player_index: int = 0

    # Game state
    phase: GamePhase = GamePhase.ROLL
    turn_number: int = 1
    game_in_progress: bool = False
    last_dice_roll: Optional[DiceResult] = None
    pending_action_card: Optional[ActionCard] = None
    pending_question_card: Optional[QuestionCard] = None
    winner_id: Optional[str] = None
    win_condition: Optional[str] = None

    # Event log
    events: List[GameEvent] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            self.name = self.settings.game_title
        self.board = Board.from_settings(self.settings)
        self.dice = Dice(self.seed)
        self.cards = CardManager(self.settings, _card_seed(self.seed))
        self.rules = RuleEngine(self.board)
        self.trades = TradeManager()
        self.win = WinEvaluator.with_monopoly(self.board) if self.monopoly_wins else WinEvaluator(self.board)

        if not self.players:
            count = _checked_player_count(self.settings.number_of_players)
            self._seat_players(generate_players(count))
        elif not self.player_order:
            self.player_order = list(self.players)

    def _seat_players(self, players: List[Player]) -> None:
        self.players = {p.id: p for p in players}
        self.player_order = [p.id for p in players]

    @property
    def current_player(self) -> Optional[Player]:
        """Get the current player."""
        if not self.player_order:
            return None
        return self.players.get(self.player_order[self.current_player_index])

    @property
    def ordered_players(self) -> List[Player]:
        return [self.players[pid] for pid in self.player_order if pid in self.players]

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def _current_id(self) -> str:
        return self.current_player.id if self.current_player else ""

    def _acting_player(self, player_id: Optional[str]) -> Optional[Player]:
        """The named player, or the current player when no id is given."""
        if player_id is None:
            return self.current_player
        return self.players.get(str(player_id))

    def _log_event(self, event_type: str, data: dict) -> GameEvent:
        """Log a game event."""
        event = GameEvent(event_type=event_type, data=data)
        self.events.append(event)
        return event

    def _rejected(self, operation: str, validation: ValidationResult) -> str:
        logger.debug(f"{operation} rejected ({validation.result.name}): {validation.message}")
        return validation.message

    def _advance_turn(self) -> None:
        """Move to next player's turn."""
        if not self.player_order:
            return

        self.current_player_index = (self.current_player_index + 1) % len(self.player_order)
        self.turn_number += 1
        self.phase = GamePhase.ROLL

        self._log_event("turn_started", {
            "player_id": self._current_id(),
            "turn_number": self.turn_number,
        })

    def _check_winner(self) -> bool:
        """Declare a winner if any win condition now holds."""
        if self.winner_id is not None:
            return True

        result = self.win.evaluate(self.ordered_players)
        if result is None:
            return False

        winner = self.players[result.player_id]
        self.winner_id = winner.id
        self.win_condition = result.condition.type.value
        self.phase = GamePhase.GAME_OVER
        self.game_in_progress = False
        self.pending_action_card = None
        self.pending_question_card = None

        self._log_event("game_over", {
            "winner_id": winner.id,
            "winner_name": winner.name,
            "condition": self.win_condition,
        })
        logger.info(f"Game {self.id}: {winner.name} wins ({result.message})")
        return True

    def _after_debit(self, player: Player) -> None:
        """Cancel offers the player can no longer cover."""
        for request in self.trades.release_excess_locks(player):
            self._log_event("buy_request_cancelled", {
                "request_id": request.id,
                "player_id": player.id,
                "reason": "insufficient_funds",
            })

    def _finish(self, message: str) -> str:
        if self._check_winner():
            winner = self.players[self.winner_id]
            return f"{message} {winner.name} wins the game!"
        return message

    # =========== Dice and Movement ===========

    def roll_dice(self, player_id: Optional[str] = None) -> Tuple[bool, str, Optional[DiceResult]]:
        """
        Roll dice for the current player and resolve where they land.

        A player flagged to skip their turn forfeits it here: the flag is
        cleared, no dice are rolled and play passes to the next player.

        Returns:
            Tuple of (success, message, dice_result)
        """
        player = self._acting_player(player_id)
        validation = self.rules.validate_roll_dice(player, self._current_id(), self.phase)
        if not validation.valid:
            return False, self._rejected("roll_dice", validation), None

        self.game_in_progress = True

        if player.skip_next_turn:
            player.skip_next_turn = False
            self._log_event("turn_skipped", {"player_id": player.id})
            self._advance_turn()
            return True, f"{player.name} skips this turn", None

        result = self.dice.roll()
        self.last_dice_roll = result
        self._log_event("dice_rolled", {
            "player_id": player.id,
            "dice1": result.die1,
            "dice2": result.die2,
            "total": result.total,
        })

        old_position = player.position
        passed_go = player.move_forward(result.total, self.board.size)
        if passed_go:
            self._log_event("passed_go", {"player_id": player.id})
        self._log_event("player_moved", {
            "player_id": player.id,
            "from": old_position,
            "to": player.position,
            "spaces": result.total,
        })

        self.phase = GamePhase.ACTIONS
        message = self._handle_landing(player)
        if passed_go:
            message = f"{player.name} passed GO. {message}"

        return True, self._finish(message), result

    def _handle_landing(self, player: Player) -> str:
        """Apply the effect of the space the player stopped on."""
        space = self.board.get_space(player.position)
        if space is None:
            return f"{player.name} landed on an unknown space"

        if space.space_type == SpaceType.PROPERTY:
            return self._handle_property_landing(player, space)

        if space.space_type == SpaceType.CORNER:
            if space.is_go_to_jail:
                player.send_to_jail(self.board.jail_position)
                self._log_event("sent_to_jail", {
                    "player_id": player.id,
                    "reason": "landed_on_go_to_jail",
                })
                return f"{player.name} landed on {space.name} and goes to jail!"
            return f"{player.name} landed on {space.name}"

        if space.space_type == SpaceType.JAIL:
            return f"{player.name} is just visiting {space.name}"

        if space.space_type == SpaceType.ACTION:
            if not len(self.cards.actions):
                return f"{player.name} landed on {space.name}"
            card = self.cards.draw_action()
            self.pending_action_card = card
            self.phase = GamePhase.ACTION_CARD
            self._log_event("action_card_drawn", {"player_id": player.id, "card_id": card.id})
            return f"{player.name} drew an action card: {card.title}"

        if space.space_type == SpaceType.QUESTION:
            if not len(self.cards.questions):
                return f"{player.name} landed on {space.name}"
            card = self.cards.draw_question()
            self.pending_question_card = card
            self.phase = GamePhase.QUESTION_CARD
            self._log_event("question_card_drawn", {"player_id": player.id, "card_id": card.id})
            return f"{player.name} drew a question: {card.question}"

        return f"{player.name} landed on {space.name}"

    def _handle_property_landing(self, player: Player, space: BoardSpace) -> str:
        if not space.is_owned:
            if space.price is not None:
                return f"{space.name} is available for ${space.price}"
            return f"{player.name} landed on {space.name}"

        if space.owner_id == player.id:
            return f"Welcome back to {space.name}!"

        owner = self.players.get(space.owner_id)
        rent = self.rules.rent_due(space, player)
        paid = player.pay(rent)
        if owner is not None:
            owner.add_money(paid)

        self._log_event("rent_paid", {
            "payer_id": player.id,
            "payee_id": space.owner_id,
            "amount": paid,
            "property_id": space.id,
        })
        self._after_debit(player)

        owner_name = owner.name if owner else "the owner"
        return f"{player.name} paid ${paid} rent to {owner_name} for {space.name}"

    # =========== Cards ===========

    def acknowledge_action_card(
        self,
        player_id: Optional[str] = None,
        card_id: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """
        Apply the drawn action card.

        After an extra-turn card the same player rolls again; every other card
        leaves the player in the action phase.
        """
        player = self._acting_player(player_id)
        validation = self.rules.validate_acknowledge_action(
            player, self._current_id(), self.phase, self.pending_action_card, card_id
        )
        if not validation.valid:
            return False, self._rejected("acknowledge_action_card", validation)

        card = self.pending_action_card
        money_before = player.money
        outcome = resolve_action_card(card, player, self.board)
        outcome.apply_to(player)
        self.pending_action_card = None

        self._log_event("action_card_resolved", {
            "player_id": player.id,
            "card_id": card.id,
            "effect": card.to_dict()["effect"],
            "money": player.money,
            "position": player.position,
        })
        if card.effect == ActionEffect.GO_TO_JAIL:
            self._log_event("sent_to_jail", {"player_id": player.id, "reason": "action_card"})
        if player.money < money_before:
            self._after_debit(player)

        if outcome.extra_turn:
            self.phase = GamePhase.ROLL
            self._log_event("turn_started", {
                "player_id": player.id,
                "turn_number": self.turn_number,
                "extra_turn": True,
            })
        else:
            self.phase = GamePhase.ACTIONS

        return True, self._finish(outcome.message)

    def answer_question(
        self,
        selected_answer: int,
        player_id: Optional[str] = None,
        card_id: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """Resolve the drawn question card with the player's answer."""
        player = self._acting_player(player_id)
        validation = self.rules.validate_answer_question(
            player, self._current_id(), self.phase,
            self.pending_question_card, selected_answer, card_id
        )
        if not validation.valid:
            return False, self._rejected("answer_question", validation)

        card = self.pending_question_card
        money_before = player.money
        outcome = resolve_question_card(card, selected_answer, player)
        outcome.apply_to(player)
        self.pending_question_card = None
        self.phase = GamePhase.ACTIONS

        self._log_event("question_answered", {
            "player_id": player.id,
            "card_id": card.id,
            "selected_answer": selected_answer,
            "correct": selected_answer == card.correct_answer,
            "money": player.money,
        })
        if player.money < money_before:
            self._after_debit(player)

        return True, self._finish(outcome.message)

    # =========== Property Actions ===========

    def buy_property(
        self,
        player_id: Optional[str] = None,
        space_id: Optional[int] = None,
    ) -> Tuple[bool, str]:
        """Buy the unowned property the current player is standing on."""
        player = self._acting_player(player_id)
        if space_id is not None:
            position = _space_ref(space_id)
        else:
            position = player.position if player else -1
        validation = self.rules.validate_buy_property(
            player, position, self._current_id(), self.phase
        )
        if not validation.valid:
            return False, self._rejected("buy_property", validation)

        space = self.board.get_space(position)
        player.pay(space.price)
        player.add_property(space.id)
        self.board.transfer_property(space.id, player.id)

        self._log_event("property_bought", {
            "player_id": player.id,
            "property_id": space.id,
            "price": space.price,
        })

        return True, self._finish(f"{player.name} bought {space.name} for ${space.price}")

    def decline_property(self, player_id: Optional[str] = None) -> Tuple[bool, str]:
        """Pass on buying the current space. The phase does not change."""
        player = self._acting_player(player_id)
        position = player.position if player else -1
        validation = self.rules.validate_decline_property(
            player, position, self._current_id(), self.phase
        )
        if not validation.valid:
            return False, self._rejected("decline_property", validation)

        space = self.board.get_space(position)
        self._log_event("property_declined", {"player_id": player.id, "property_id": space.id})
        return True, f"{player.name} declined to buy {space.name}"

    def can_buy_current_space(self) -> bool:
        player = self.current_player
        if player is None:
            return False
        return self.rules.validate_buy_property(
            player, player.position, player.id, self.phase
        ).valid

    # =========== Buy Requests ===========

    def send_buy_request(
        self,
        from_player_id: str,
        to_player_id: str,
        property_id: int,
    ) -> Tuple[bool, str, Optional[BuyRequest]]:
        """
        Offer to buy a property from its owner at the listed price.

        Returns:
            Tuple of (success, message, request)
        """
        property_id = _space_ref(property_id)
        buyer = self.players.get(str(from_player_id))
        seller = self.players.get(str(to_player_id))
        validation = self.rules.validate_buy_request(
            buyer, seller, property_id, self.phase,
            already_requested=buyer is not None and self.trades.has_pending(buyer.id, property_id),
        )
        if not validation.valid:
            return False, self._rejected("send_buy_request", validation), None

        space = self.board.get_space(property_id)
        request = self.trades.create(buyer, seller, space.id, space.price)

        self._log_event("buy_request_sent", {
            "request_id": request.id,
            "from_player_id": buyer.id,
            "to_player_id": seller.id,
            "property_id": space.id,
            "amount": request.amount,
        })

        return True, f"{buyer.name} offered ${request.amount} for {space.name}", request

    def respond_to_buy_request(
        self,
        request_id: str,
        accept: bool,
        player_id: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """
        Accept or decline a pending request.

        Answering a request that is no longer pending changes nothing.
        """
        request = self.trades.get(request_id)
        validation = self.rules.validate_respond_to_request(
            request, accept, self.phase, str(player_id) if player_id is not None else None
        )
        if not validation.valid:
            return False, self._rejected("respond_to_buy_request", validation)

        buyer = self.players[request.from_player_id]
        seller = self.players[request.to_player_id]
        space = self.board.get_space(request.property_id)

        if not accept:
            self.trades.decline(request, buyer)
            self._log_event("buy_request_declined", {"request_id": request.id})
            return True, f"{seller.name} declined {buyer.name}'s offer for {space.name}"

        stale = self.trades.accept(request, buyer, seller, self.board, self.players)
        self._log_event("buy_request_accepted", {
            "request_id": request.id,
            "from_player_id": buyer.id,
            "to_player_id": seller.id,
            "property_id": space.id,
            "amount": request.amount,
        })
        for other in stale:
            self._log_event("buy_request_declined", {
                "request_id": other.id,
                "reason": "property_sold",
            })

        return True, self._finish(
            f"{seller.name} sold {space.name} to {buyer.name} for ${request.amount}"
        )

    def cancel_buy_request(
        self,
        request_id: str,
        player_id: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """Withdraw a pending request and release its lock."""
        request = self.trades.get(request_id)
        validation = self.rules.validate_cancel_request(
            request, str(player_id) if player_id is not None else None
        )
        if not validation.valid:
            return False, self._rejected("cancel_buy_request", validation)

        buyer = self.players[request.from_player_id]
        self.trades.cancel(request, buyer)
        self._log_event("buy_request_cancelled", {
            "request_id": request.id,
            "player_id": buyer.id,
        })
        return True, f"{buyer.name} cancelled their offer"

    def get_pending_requests(self, player_id: str, direction: str = "incoming") -> List[BuyRequest]:
        """
        Pending requests for a player.

        Args:
            player_id: The player
            direction: "incoming" (offers to the player) or "outgoing"
        """
        if direction == "incoming":
            return self.trades.incoming(str(player_id))
        if direction == "outgoing":
            return self.trades.outgoing(str(player_id))
        raise ValueError(f"Unknown request direction: {direction!r}")

    # =========== Turn Management ===========

    def end_turn(self, player_id: Optional[str] = None) -> Tuple[bool, str]:
        """End current player's turn."""
        player = self._acting_player(player_id)
        validation = self.rules.validate_end_turn(player, self._current_id(), self.phase)
        if not validation.valid:
            return False, self._rejected("end_turn", validation)

        self._advance_turn()
        return True, self._finish(f"Turn ended. {self.current_player.name}'s turn")

    def reset_game(self, number_of_players: Optional[int] = None) -> None:
        """Start over with a fresh set of players and an empty board."""
        count = _checked_player_count(number_of_players or self.settings.number_of_players)
        self.board.reset()
        self.trades.clear()
        self._seat_players(generate_players(count))
        self.current_player_index = 0
        self.phase = GamePhase.ROLL
        self.turn_number = 1
        self.game_in_progress = False
        self.last_dice_roll = None
        self.pending_action_card = None
        self.pending_question_card = None
        self.winner_id = None
        self.win_condition = None
        self.events.clear()

        self._log_event("game_reset", {"players": count})
        logger.info(f"Game {self.id} reset with {count} players")

    # =========== Queries ===========

    def get_current_player(self) -> Optional[Player]:
        return self.current_player

    def spendable_money(self, player_id: str) -> int:
        player = self.players.get(str(player_id))
        return player.spendable_money if player else 0

    def get_game_status(self) -> dict:
        """Solvent and bankrupt players, and the winner once there is one."""
        return game_status(self.ordered_players, self.winner_id)

    def get_state(self) -> dict:
        """Snapshot of everything a display needs."""
        return {
            "game_id": self.id,
            "game_name": self.name,
            "phase": self.phase.value,
            "turn_number": self.turn_number,
            "current_player_id": self.current_player.id if self.current_player else None,
            "game_in_progress": self.game_in_progress,
            "last_dice_roll": self.last_dice_roll.to_dict() if self.last_dice_roll else None,
            "pending_action_card": (
                self.pending_action_card.to_dict() if self.pending_action_card else None
            ),
            "pending_question_card": (
                self.pending_question_card.to_dict() if self.pending_question_card else None
            ),
            "can_buy": self.can_buy_current_space(),
            "players": [p.to_dict() for p in self.ordered_players],
            "board": self.board.to_dict(),
            "buy_requests": [r.to_dict() for r in self.trades.pending()],
            "winner_id": self.winner_id,
        }

    # =========== Serialization ===========

    def to_dict(self) -> dict:
        """Convert game state to dictionary for saving."""
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "seed": self.seed,
            "monopoly_wins": self.monopoly_wins,
            "phase": self.phase.value,
            "turn_number": self.turn_number,
            "current_player_index": self.current_player_index,
            "game_in_progress": self.game_in_progress,
            "winner_id": self.winner_id,
            "win_condition": self.win_condition,
            "last_dice_roll": self.last_dice_roll.to_dict() if self.last_dice_roll else None,
            "pending_action_card": (
                self.pending_action_card.to_dict() if self.pending_action_card else None
            ),
            "pending_question_card": (
                self.pending_question_card.to_dict() if self.pending_question_card else None
            ),
            "players": [p.to_dict() for p in self.ordered_players],
            "buy_requests": self.trades.to_list(),
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict, settings: Optional[GameSettings] = None) -> "Game":
        """
        Create game from dictionary.

        Board ownership is rebuilt from the players' property sets.
        """
        if settings is None:
            settings = (
                GameSettings.from_dict(data["settings"]) if data.get("settings")
                else default_settings()
            )

        players = [Player.from_dict(p) for p in data.get("players", [])]
        game = cls(
            id=data["id"],
            name=data.get("name", ""),
            settings=settings,
            seed=data.get("seed"),
            monopoly_wins=data.get("monopoly_wins", False),
            players={p.id: p for p in players},
            player_order=[p.id for p in players],
        )

        if data.get("created_at"):
            game.created_at = datetime.fromisoformat(data["created_at"])
        game.phase = GamePhase(data.get("phase", GamePhase.ROLL.value))
        game.turn_number = data.get("turn_number", 1)
        game.current_player_index = data.get("current_player_index", 0)
        game.game_in_progress = data.get("game_in_progress", False)
        game.winner_id = data.get("winner_id")
        game.win_condition = data.get("win_condition")

        roll = data.get("last_dice_roll")
        if roll:
            game.last_dice_roll = DiceResult(die1=roll["dice1"], die2=roll["dice2"])
        if data.get("pending_action_card"):
            game.pending_action_card = ActionCard.from_dict(data["pending_action_card"])
        if data.get("pending_question_card"):
            game.pending_question_card = QuestionCard.from_dict(data["pending_question_card"])

        for player in players:
            for position in player.properties:
                game.board.transfer_property(position, player.id)

        game.trades = TradeManager.from_list(data.get("buy_requests", []))
        return game
