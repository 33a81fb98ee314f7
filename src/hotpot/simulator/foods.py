"""Food items and the pot inventory."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class FoodKind(Enum):
    """Food variants that can be dropped into the pot."""

    BEEF = "beef"
    POTATO = "potato"
    TOFU = "tofu"


@dataclass(frozen=True)
class FoodProperties:
    """Fixed thermal properties of a food variant.

    Attributes:
        name: Display name.
        specific_heat: Specific heat in J/(g·K).
        mass: Mass of one piece in grams.
    """

    name: str
    specific_heat: float
    mass: float


FOOD_DATA: dict[FoodKind, FoodProperties] = {
    FoodKind.BEEF: FoodProperties(name="Beef", specific_heat=2.8, mass=50.0),
    FoodKind.POTATO: FoodProperties(name="Potato", specific_heat=3.4, mass=80.0),
    FoodKind.TOFU: FoodProperties(name="Tofu", specific_heat=3.8, mass=60.0),
}


def _new_food_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class FoodItem:
    """A single piece of food in the pot.

    The item's temperature is only meaningful at creation. Once it is mixed
    into the pot, its heat is part of the pot temperature and the item is kept
    as a heat capacity contributor.
    """

    kind: FoodKind
    name: str
    specific_heat: float
    mass: float
    temperature: float
    id: str = field(default_factory=_new_food_id)

    @classmethod
    def create(cls, kind: FoodKind, temperature: float) -> "FoodItem":
        """Create a food item with the fixed properties of its kind."""
        props = FOOD_DATA[kind]
        return cls(
            kind=kind,
            name=props.name,
            specific_heat=props.specific_heat,
            mass=props.mass,
            temperature=temperature,
        )

    @property
    def heat_capacity(self) -> float:
        """Heat capacity in J/K."""
        return self.specific_heat * self.mass

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "specific_heat": self.specific_heat,
            "mass": self.mass,
            "temperature": self.temperature,
        }


class Inventory:
    """Ordered collection of the food items in the pot.

    Insertion order is preserved. Items are looked up by id only for removal.
    """

    def __init__(self) -> None:
        self._items: list[FoodItem] = []

    def __iter__(self) -> Iterator[FoodItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, food_id: object) -> bool:
        return any(item.id == food_id for item in self._items)

    def add(self, item: FoodItem) -> None:
        self._items.append(item)

    def remove(self, food_id: str) -> Optional[FoodItem]:
        """Remove the item with the given id.

        Args:
            food_id: Id of the item to remove.

        Returns:
            The removed item, or None if no item had that id.
        """
        for index, item in enumerate(self._items):
            if item.id == food_id:
                return self._items.pop(index)
        return None

    def clear(self) -> None:
        self._items.clear()

    def items(self) -> list[FoodItem]:
        """Snapshot of the items in insertion order."""
        return list(self._items)

    def total_heat_capacity(self) -> float:
        return sum(item.heat_capacity for item in self._items)


def parse_food_kind(value: str | FoodKind) -> FoodKind:
    """Resolve a food kind from its value or enum name.

    Raises:
        ValueError: If the value names no known food.
    """
    if isinstance(value, FoodKind):
        return value
    try:
        return FoodKind(value.lower())
    except ValueError:
        raise ValueError(f"Unknown food kind: {value}") from None
