"""
Rule enforcement and validation.

Every operation on the game is checked here first. A failed check carries
the reason as an ``ActionResult`` plus a message for the player; the game
never mutates state for a failed check.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from shared.enums import GamePhase

from .board import Board, BoardSpace
from .cards import ActionCard, QuestionCard
from .player import Player
from .trade import BuyRequest


class ActionResult(Enum):
    """Result of attempting an action."""
    SUCCESS = auto()
    INVALID_TRANSITION = auto()
    INSUFFICIENT_FUNDS = auto()
    INVALID_REFERENCE = auto()
    NOT_YOUR_TURN = auto()
    NOT_ON_SPACE = auto()
    NOT_A_PROPERTY = auto()
    PROPERTY_OWNED = auto()
    NOT_OWNER = auto()
    INVALID_TRADE = auto()
    REQUEST_NOT_PENDING = auto()
    NOT_REQUESTER = auto()
    CARD_MISMATCH = auto()
    INVALID_ANSWER = auto()


@dataclass
class ValidationResult:
    """Result of validating an action."""
    valid: bool
    result: ActionResult
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> "ValidationResult":
        return cls(valid=True, result=ActionResult.SUCCESS, message=message)

    @classmethod
    def failure(cls, result: ActionResult, message: str = "") -> "ValidationResult":
        return cls(valid=False, result=result, message=message)


def _player_missing() -> ValidationResult:
    return ValidationResult.failure(ActionResult.INVALID_REFERENCE, "Player not found")


class RuleEngine:
    """
    Validates player actions against the board and the turn phase.
    """

    def __init__(self, board: Board):
        self.board = board

    def _check_turn(
        self,
        player: Optional[Player],
        current_player_id: str,
        phase: GamePhase,
        expected_phase: GamePhase,
    ) -> ValidationResult:
        if player is None:
            return _player_missing()

        if phase != expected_phase:
            if phase == GamePhase.GAME_OVER:
                return ValidationResult.failure(ActionResult.INVALID_TRANSITION, "The game is over")
            return ValidationResult.failure(
                ActionResult.INVALID_TRANSITION,
                f"Cannot do that during the {phase.value} phase"
            )

        if player.id != current_player_id:
            return ValidationResult.failure(ActionResult.NOT_YOUR_TURN, "It's not your turn")

        return ValidationResult.success()

    def validate_roll_dice(
        self,
        player: Optional[Player],
        current_player_id: str,
        phase: GamePhase
    ) -> ValidationResult:
        """Validate if player can roll dice."""
        return self._check_turn(player, current_player_id, phase, GamePhase.ROLL)

    def validate_end_turn(
        self,
        player: Optional[Player],
        current_player_id: str,
        phase: GamePhase
    ) -> ValidationResult:
        """Validate if player can end their turn."""
        return self._check_turn(player, current_player_id, phase, GamePhase.ACTIONS)

    def validate_decline_property(
        self,
        player: Optional[Player],
        position: int,
        current_player_id: str,
        phase: GamePhase
    ) -> ValidationResult:
        """Everything a purchase needs except the money."""
        check = self._check_turn(player, current_player_id, phase, GamePhase.ACTIONS)
        if not check.valid:
            return check

        space = self.board.get_space(position)
        if space is None:
            return ValidationResult.failure(ActionResult.INVALID_REFERENCE, f"No space {position}")

        if not space.is_property or space.price is None:
            return ValidationResult.failure(
                ActionResult.NOT_A_PROPERTY,
                f"{space.name} is not a purchasable property"
            )

        if player.position != position:
            return ValidationResult.failure(
                ActionResult.NOT_ON_SPACE,
                f"You are not on {space.name}"
            )

        if space.is_owned:
            return ValidationResult.failure(
                ActionResult.PROPERTY_OWNED,
                f"{space.name} is already owned"
            )

        return ValidationResult.success()

    def validate_buy_property(
        self,
        player: Optional[Player],
        position: int,
        current_player_id: str,
        phase: GamePhase
    ) -> ValidationResult:
        """Validate if player can buy property at position."""
        check = self.validate_decline_property(player, position, current_player_id, phase)
        if not check.valid:
            return check

        space = self.board.get_space(position)
        if not player.can_afford(space.price):
            return ValidationResult.failure(
                ActionResult.INSUFFICIENT_FUNDS,
                f"You need ${space.price} to buy {space.name}"
            )

        return ValidationResult.success()

    def validate_buy_request(
        self,
        buyer: Optional[Player],
        seller: Optional[Player],
        property_id: int,
        phase: GamePhase,
        already_requested: bool = False,
    ) -> ValidationResult:
        """
        Validate an offer to buy another player's property.

        Offers are not tied to the turn; any player may make one while the
        game is running. The buyer's spendable balance has to cover the
        current price.
        """
        if buyer is None or seller is None:
            return _player_missing()

        if phase == GamePhase.GAME_OVER:
            return ValidationResult.failure(ActionResult.INVALID_TRANSITION, "The game is over")

        if buyer.id == seller.id:
            return ValidationResult.failure(
                ActionResult.INVALID_TRADE,
                "You cannot buy from yourself"
            )

        space = self.board.get_space(property_id)
        if space is None:
            return ValidationResult.failure(ActionResult.INVALID_REFERENCE, f"No space {property_id}")

        if not space.is_property or space.price is None:
            return ValidationResult.failure(
                ActionResult.NOT_A_PROPERTY,
                f"{space.name} is not a property"
            )

        if space.owner_id != seller.id:
            return ValidationResult.failure(
                ActionResult.NOT_OWNER,
                f"{seller.name} does not own {space.name}"
            )

        if already_requested:
            return ValidationResult.failure(
                ActionResult.INVALID_TRADE,
                f"You already have an offer pending for {space.name}"
            )

        if not buyer.can_afford(space.price):
            return ValidationResult.failure(
                ActionResult.INSUFFICIENT_FUNDS,
                f"You need ${space.price} available to offer for {space.name}"
            )

        return ValidationResult.success()

    def validate_respond_to_request(
        self,
        request: Optional[BuyRequest],
        accept: bool,
        phase: GamePhase,
        responder_id: Optional[str] = None,
    ) -> ValidationResult:
        """Only the seller may answer, and only while the request is pending."""
        if request is None:
            return ValidationResult.failure(ActionResult.INVALID_REFERENCE, "Buy request not found")

        if not request.is_pending:
            return ValidationResult.failure(
                ActionResult.REQUEST_NOT_PENDING,
                f"Buy request is already {request.status.value}"
            )

        if responder_id is not None and responder_id != request.to_player_id:
            return ValidationResult.failure(
                ActionResult.NOT_OWNER,
                "Only the owner can answer this request"
            )

        if accept:
            if phase == GamePhase.GAME_OVER:
                return ValidationResult.failure(ActionResult.INVALID_TRANSITION, "The game is over")
            if self.board.get_property_owner(request.property_id) != request.to_player_id:
                return ValidationResult.failure(
                    ActionResult.INVALID_TRADE,
                    "The seller no longer owns this property"
                )

        return ValidationResult.success()

    def validate_cancel_request(
        self,
        request: Optional[BuyRequest],
        requester_id: Optional[str] = None,
    ) -> ValidationResult:
        if request is None:
            return ValidationResult.failure(ActionResult.INVALID_REFERENCE, "Buy request not found")

        if not request.is_pending:
            return ValidationResult.failure(
                ActionResult.REQUEST_NOT_PENDING,
                f"Buy request is already {request.status.value}"
            )

        if requester_id is not None and requester_id != request.from_player_id:
            return ValidationResult.failure(
                ActionResult.NOT_REQUESTER,
                "Only the player who sent the request can cancel it"
            )

        return ValidationResult.success()

    def validate_acknowledge_action(
        self,
        player: Optional[Player],
        current_player_id: str,
        phase: GamePhase,
        pending: Optional[ActionCard],
        card_id: Optional[str] = None,
    ) -> ValidationResult:
        check = self._check_turn(player, current_player_id, phase, GamePhase.ACTION_CARD)
        if not check.valid:
            return check

        if pending is None or (card_id is not None and card_id != pending.id):
            return ValidationResult.failure(
                ActionResult.CARD_MISMATCH,
                "That is not the card you drew"
            )

        return ValidationResult.success()

    def validate_answer_question(
        self,
        player: Optional[Player],
        current_player_id: str,
        phase: GamePhase,
        pending: Optional[QuestionCard],
        selected_answer: int,
        card_id: Optional[str] = None,
    ) -> ValidationResult:
        check = self._check_turn(player, current_player_id, phase, GamePhase.QUESTION_CARD)
        if not check.valid:
            return check

        if pending is None or (card_id is not None and card_id != pending.id):
            return ValidationResult.failure(
                ActionResult.CARD_MISMATCH,
                "That is not the card you drew"
            )

        if (
            isinstance(selected_answer, bool)
            or not isinstance(selected_answer, int)
            or not 0 <= selected_answer < len(pending.options)
        ):
            return ValidationResult.failure(
                ActionResult.INVALID_ANSWER,
                f"Pick an answer between 0 and {len(pending.options) - 1}"
            )

        return ValidationResult.success()

    def rent_due(self, space: BoardSpace, player: Player) -> int:
        """
        Rent the player owes for landing on a space, capped at what they have.
        Zero for unowned, self-owned and non-property spaces.
        """
        if not space.is_property or not space.is_owned or space.owner_id == player.id:
            return 0
        return min(space.rent or 0, player.money)
