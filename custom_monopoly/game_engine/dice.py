"""
Dice rolling mechanics.
"""
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, Tuple


@dataclass(frozen=True)
class DiceResult:
    """Outcome of one roll of the two dice."""
    die1: int
    die2: int

    @property
    def total(self) -> int:
        return self.die1 + self.die2

    def to_dict(self) -> dict:
        return {"dice1": self.die1, "dice2": self.die2, "total": self.total}


class Dice:
    """
    Two six-sided dice.

    Rolls come from a private ``random.Random`` so a seeded game is
    reproducible. Rolls can also be queued ahead of time, which the tests and
    the headless runner use to script a turn.
    """

    def __init__(self, seed: int | None = None):
        self._random = random.Random(seed)
        self._queued: Deque[DiceResult] = deque()

    def queue(self, *rolls: Tuple[int, int] | Iterable[int]) -> None:
        """
        Queue rolls to be returned before any random ones.

        Args:
            rolls: Pairs of die values, each in [1, 6]

        Raises:
            ValueError: If a die value is out of range
        """
        for die1, die2 in rolls:
            if not (1 <= die1 <= 6 and 1 <= die2 <= 6):
                raise ValueError(f"Invalid dice values: {die1}, {die2}")
            self._queued.append(DiceResult(die1=die1, die2=die2))

    def roll(self) -> DiceResult:
        if self._queued:
            return self._queued.popleft()
        return DiceResult(
            die1=self._random.randint(1, 6),
            die2=self._random.randint(1, 6),
        )

    def set_seed(self, seed: int) -> None:
        """Set random seed for reproducible results."""
        self._random.seed(seed)
