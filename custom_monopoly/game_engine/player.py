"""
Player ledger: money, escrow, ownership and position.
"""
from dataclasses import dataclass, field
from typing import List, Set

from shared.constants import (
    BOARD_SIZE, FALLBACK_PLAYER_COLOR, JAIL_POSITION, PLAYER_COLORS,
    SALARY_AMOUNT, STARTING_MONEY,
)


@dataclass
class Player:
    """Represents a player in the game."""

    id: str
    name: str
    color: str = FALLBACK_PLAYER_COLOR
    position: int = 0
    money: int = STARTING_MONEY

    # Reserved against pending outgoing buy requests; part of money
    locked_money: int = 0

    # Properties owned (tracked by board position)
    properties: Set[int] = field(default_factory=set)

    skip_next_turn: bool = False

    @property
    def spendable_money(self) -> int:
        """Money not reserved by pending buy requests."""
        return self.money - self.locked_money

    @property
    def is_bankrupt(self) -> bool:
        return self.money <= 0

    def add_money(self, amount: int) -> int:
        """
        Add money to player's balance.

        Returns:
            New balance
        """
        self.money += amount
        return self.money

    def pay(self, amount: int) -> int:
        """
        Pay up to ``amount``, never going below zero.

        Returns:
            The amount actually paid
        """
        paid = min(max(amount, 0), self.money)
        self.money -= paid
        return paid

    def can_afford(self, amount: int) -> bool:
        """Check if the spendable balance covers ``amount``."""
        return self.spendable_money >= amount

    def lock(self, amount: int) -> None:
        """Reserve money for a buy request."""
        if amount < 0 or amount > self.spendable_money:
            raise ValueError(f"Cannot lock ${amount} for {self.name}")
        self.locked_money += amount

    def release(self, amount: int) -> None:
        """Release a reservation without spending it."""
        if amount < 0 or amount > self.locked_money:
            raise ValueError(f"Cannot release ${amount} for {self.name}")
        self.locked_money -= amount

    def spend_locked(self, amount: int) -> None:
        """Spend money that was previously reserved."""
        self.release(amount)
        self.money -= amount

    def move_forward(self, spaces: int, board_size: int = BOARD_SIZE) -> bool:
        """
        Move player forward by a number of spaces.

        Collects the salary when the move wraps past GO. A single roll can
        cross GO at most once.

        Returns:
            True if player passed GO
        """
        passed_go = self.position + spaces >= board_size
        self.position = (self.position + spaces) % board_size
        if passed_go:
            self.add_money(SALARY_AMOUNT)
        return passed_go

    def send_to_jail(self, jail_position: int = JAIL_POSITION) -> None:
        """Send player to jail."""
        self.position = jail_position

    def add_property(self, position: int) -> None:
        """Add a property to player's ownership."""
        self.properties.add(position)

    def remove_property(self, position: int) -> None:
        """Remove a property from player's ownership."""
        self.properties.discard(position)

    def to_dict(self) -> dict:
        """Convert player to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "position": self.position,
            "money": self.money,
            "locked_money": self.locked_money,
            "properties": sorted(self.properties),
            "skip_next_turn": self.skip_next_turn,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Create player from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            color=data.get("color", FALLBACK_PLAYER_COLOR),
            position=data.get("position", 0),
            money=data.get("money", STARTING_MONEY),
            locked_money=data.get("locked_money", 0),
            properties=set(data.get("properties", [])),
            skip_next_turn=data.get("skip_next_turn", False),
        )


def generate_players(count: int) -> List[Player]:
    """Create the default roster: ids "1".."n", names "Player i"."""
    return [
        Player(
            id=str(i + 1),
            name=f"Player {i + 1}",
            color=PLAYER_COLORS[i] if i < len(PLAYER_COLORS) else FALLBACK_PLAYER_COLOR,
        )
        for i in range(count)
    ]
