"""
Escrowed buy requests between players.

A request reserves the offered amount in the buyer's ``locked_money`` while
it is pending. Every terminal transition consumes or releases that lock
exactly once.
"""
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from shared.enums import BuyRequestStatus

from .board import Board
from .player import Player


logger = logging.getLogger(__name__)


@dataclass
class BuyRequest:
    """An offer from one player to buy a property owned by another."""

    from_player_id: str
    to_player_id: str
    property_id: int
    amount: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: BuyRequestStatus = BuyRequestStatus.PENDING
    created_at: float = field(default_factory=time.time)

    @property
    def is_pending(self) -> bool:
        return self.status == BuyRequestStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "from_player_id": self.from_player_id,
            "to_player_id": self.to_player_id,
            "property_id": self.property_id,
            "amount": self.amount,
            "status": self.status.value,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BuyRequest":
        return cls(
            id=data["id"],
            from_player_id=str(data["from_player_id"]),
            to_player_id=str(data["to_player_id"]),
            property_id=int(data["property_id"]),
            amount=int(data["amount"]),
            status=BuyRequestStatus(data.get("status", BuyRequestStatus.PENDING.value)),
            created_at=data.get("created_at", time.time()),
        )


class TradeManager:
    """
    Owns every buy request of a game and performs the money and ownership
    moves for them. Callers validate through the rule engine first; the
    methods here assume the request is pending and the players exist.
    """

    def __init__(self, requests: Optional[List[BuyRequest]] = None):
        self.requests: List[BuyRequest] = list(requests or [])

    def get(self, request_id: str) -> BuyRequest | None:
        for request in self.requests:
            if request.id == request_id:
                return request
        return None

    def pending(self) -> List[BuyRequest]:
        return [r for r in self.requests if r.is_pending]

    def incoming(self, player_id: str) -> List[BuyRequest]:
        """Pending requests addressed to a player."""
        return [r for r in self.pending() if r.to_player_id == player_id]

    def outgoing(self, player_id: str) -> List[BuyRequest]:
        """Pending requests a player has sent."""
        return [r for r in self.pending() if r.from_player_id == player_id]

    def has_pending(self, buyer_id: str, property_id: int) -> bool:
        return any(r.property_id == property_id for r in self.outgoing(buyer_id))

    def locked_total(self, player_id: str) -> int:
        return sum(r.amount for r in self.outgoing(player_id))

    def create(self, buyer: Player, seller: Player, property_id: int, amount: int) -> BuyRequest:
        """Open a request and lock the amount in the buyer's balance."""
        buyer.lock(amount)
        request = BuyRequest(
            from_player_id=buyer.id,
            to_player_id=seller.id,
            property_id=property_id,
            amount=amount,
        )
        self.requests.append(request)
        logger.debug(f"Buy request {request.id}: {buyer.name} offers ${amount} for {property_id}")
        return request

    def accept(
        self,
        request: BuyRequest,
        buyer: Player,
        seller: Player,
        board: Board,
        players: Dict[str, Player],
    ) -> List[BuyRequest]:
        """
        Complete a sale.

        The locked amount leaves the buyer's balance and is paid to the
        seller, and the property changes hands.

        Returns:
            Other requests for the same property that were declined
        """
        buyer.spend_locked(request.amount)
        seller.add_money(request.amount)

        seller.remove_property(request.property_id)
        buyer.add_property(request.property_id)
        board.transfer_property(request.property_id, buyer.id)

        request.status = BuyRequestStatus.ACCEPTED
        return self.decline_stale(request.property_id, players)

    def decline(self, request: BuyRequest, buyer: Player) -> None:
        buyer.release(request.amount)
        request.status = BuyRequestStatus.DECLINED

    def cancel(self, request: BuyRequest, buyer: Player) -> None:
        buyer.release(request.amount)
        request.status = BuyRequestStatus.CANCELLED

    def decline_stale(self, property_id: int, players: Dict[str, Player]) -> List[BuyRequest]:
        """
        Decline pending requests made to anyone other than the property's
        current owner.
        """
        stale = []
        for request in self.pending():
            if request.property_id != property_id:
                continue
            seller = players.get(request.to_player_id)
            if seller is not None and property_id in seller.properties:
                continue
            self.decline(request, players[request.from_player_id])
            stale.append(request)
        return stale

    def release_excess_locks(self, player: Player) -> List[BuyRequest]:
        """
        Cancel a player's newest outgoing requests until their lock fits
        inside their money again.

        Returns:
            The requests that were cancelled
        """
        cancelled = []
        # Requests are stored in creation order
        for request in reversed(self.outgoing(player.id)):
            if player.locked_money <= player.money:
                break
            self.cancel(request, player)
            cancelled.append(request)
        if cancelled:
            logger.info(
                f"Cancelled {len(cancelled)} buy request(s) from {player.name}: "
                f"balance ${player.money} no longer covers the offers"
            )
        return cancelled

    def clear(self) -> None:
        self.requests.clear()

    def to_list(self) -> List[dict]:
        return [r.to_dict() for r in self.requests]

    @classmethod
    def from_list(cls, data: List[dict]) -> "TradeManager":
        return cls([BuyRequest.from_dict(r) for r in data])
