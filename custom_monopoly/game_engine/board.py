"""
Board representation and property ownership.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shared.constants import GO_POSITION, GO_TO_JAIL_POSITION, JAIL_POSITION
from shared.enums import SpaceType
from shared.game_settings import GameSettings, default_settings


def to_position(value: Any) -> int | None:
    """Board position from an int or a numeric string, or None."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class BoardSpace:
    """One space on the board. Only ``owner_id`` changes during a game."""

    id: int
    name: str
    space_type: SpaceType
    color: Optional[str] = None
    price: Optional[int] = None
    rent: Optional[int] = None
    description: str = ""

    owner_id: Optional[str] = None

    @property
    def is_property(self) -> bool:
        return self.space_type == SpaceType.PROPERTY

    @property
    def is_owned(self) -> bool:
        """Check if property is owned."""
        return self.owner_id is not None

    @property
    def is_purchasable(self) -> bool:
        """Unowned property with a price."""
        return self.is_property and not self.is_owned and self.price is not None

    @property
    def is_go(self) -> bool:
        return self.space_type == SpaceType.CORNER and self.id == GO_POSITION

    @property
    def is_go_to_jail(self) -> bool:
        return self.space_type == SpaceType.CORNER and self.id == GO_TO_JAIL_POSITION

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.space_type.value,
        }
        if self.color is not None:
            data["color"] = self.color
        if self.price is not None:
            data["price"] = self.price
        if self.rent is not None:
            data["rent"] = self.rent
        if self.owner_id is not None:
            data["owner_id"] = self.owner_id
        return data

    @classmethod
    def from_dict(cls, data: dict, catalog: Dict[str, dict] | None = None) -> "BoardSpace":
        """
        Create a space from a settings entry.

        Property spaces pick up a missing name, colour, price, rent or
        description from the property catalog entry with the same id.
        """
        space_type = SpaceType(data["type"])
        entry = (catalog or {}).get(str(data["id"]), {}) if space_type == SpaceType.PROPERTY else {}

        def pick(key):
            value = data.get(key)
            return value if value is not None else entry.get(key)

        return cls(
            id=int(data["id"]),
            name=pick("name") or f"Space {data['id']}",
            space_type=space_type,
            color=pick("color"),
            price=pick("price"),
            rent=pick("rent"),
            description=pick("description") or "",
            owner_id=data.get("owner_id") if space_type == SpaceType.PROPERTY else None,
        )


@dataclass
class Board:
    """
    The ring of spaces players move around.
    Manages all spaces and property ownership.
    """

    spaces: List[BoardSpace] = field(default_factory=list)

    def __post_init__(self):
        if not self.spaces:
            self.spaces = Board.from_settings(default_settings()).spaces

    @classmethod
    def from_settings(cls, settings: GameSettings) -> "Board":
        """Build the board described by a settings document."""
        catalog = {str(p["id"]): p for p in settings.properties}
        spaces = [BoardSpace.from_dict(s, catalog) for s in settings.board_spaces]
        spaces.sort(key=lambda s: s.id)
        return cls(spaces=spaces)

    @property
    def size(self) -> int:
        return len(self.spaces)

    @property
    def jail_position(self) -> int:
        """First jail space on the board, or the canonical jail position."""
        for space in self.spaces:
            if space.space_type == SpaceType.JAIL:
                return space.id
        return JAIL_POSITION

    def get_space(self, position: int | str) -> BoardSpace | None:
        """Get the space at a board position. Unknown positions give None."""
        position = to_position(position)
        if position is not None and 0 <= position < len(self.spaces):
            return self.spaces[position]
        return None

    def get_property(self, position: int) -> BoardSpace | None:
        """Get property at position, if it exists."""
        space = self.get_space(position)
        return space if space is not None and space.is_property else None

    def get_property_owner(self, position: int) -> str | None:
        """Get owner ID of property at position."""
        prop = self.get_property(position)
        return prop.owner_id if prop else None

    def is_property_available(self, position: int) -> bool:
        """Check if property at position can be purchased."""
        prop = self.get_property(position)
        return prop is not None and prop.is_purchasable

    def get_player_properties(self, player_id: str) -> List[BoardSpace]:
        """Get all properties owned by a player."""
        return [
            space for space in self.spaces
            if space.is_property and space.owner_id == player_id
        ]

    def get_group_properties(self, color: str) -> List[BoardSpace]:
        """Get all properties in a color group."""
        return [
            space for space in self.spaces
            if space.is_property and space.color == color
        ]

    def player_has_monopoly(self, player_id: str, color: str) -> bool:
        """Check if player owns all properties in a color group."""
        group = self.get_group_properties(color)
        if not group:
            return False
        return all(space.owner_id == player_id for space in group)

    def transfer_property(self, position: int, new_owner_id: str | None) -> bool:
        """
        Transfer property ownership.

        Args:
            position: Property position
            new_owner_id: New owner's ID (None to remove ownership)

        Returns:
            True if successful
        """
        prop = self.get_property(position)
        if not prop:
            return False

        prop.owner_id = new_owner_id
        return True

    def reset(self) -> None:
        """Clear all ownership."""
        for space in self.spaces:
            space.owner_id = None

    def to_dict(self) -> dict:
        """Convert board state to dictionary."""
        return {"spaces": [space.to_dict() for space in self.spaces]}
