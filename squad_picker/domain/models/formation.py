"""Formation domain model and the static formation catalog."""

from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .candidate import CATEGORY_ORDER, Category

# Slot id prefixes per category, e.g. "gk1", "def3"
SLOT_PREFIXES: Dict[Category, str] = {
    Category.GK: "gk",
    Category.DEF: "def",
    Category.MID: "mid",
    Category.FWD: "fwd",
}


class Slot(BaseModel):
    """A single required position in a formation."""

    model_config = ConfigDict(frozen=True)

    slot_id: str = Field(..., min_length=1, description="Unique within a formation")
    category: Category = Field(..., description="Required category")


class Formation(BaseModel):
    """An ordered set of slots; the per-category counts are its shape."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Formation name, e.g. '4-3-3'")
    slots: Tuple[Slot, ...] = Field(..., description="Slots in display order")

    @field_validator("slots")
    @classmethod
    def validate_slots(cls, v: Tuple[Slot, ...]) -> Tuple[Slot, ...]:
        """A formation needs at least one slot and unique slot ids."""
        if len(v) == 0:
            raise ValueError("Formation must contain at least one slot")
        slot_ids = [slot.slot_id for slot in v]
        if len(slot_ids) != len(set(slot_ids)):
            raise ValueError("Duplicate slot ids found in formation")
        return v

    @property
    def size(self) -> int:
        """Total number of slots."""
        return len(self.slots)

    @property
    def shape(self) -> Dict[Category, int]:
        """Number of slots per category (every category present, possibly 0)."""
        counts = {category: 0 for category in CATEGORY_ORDER}
        for slot in self.slots:
            counts[slot.category] += 1
        return counts

    @property
    def slot_ids(self) -> List[str]:
        return [slot.slot_id for slot in self.slots]

    def slots_for(self, category: Category) -> List[Slot]:
        """Slots of one category in formation order."""
        return [slot for slot in self.slots if slot.category == category]

    def get_slot(self, slot_id: str) -> Slot:
        for slot in self.slots:
            if slot.slot_id == slot_id:
                return slot
        raise KeyError(slot_id)

    def has_slot(self, slot_id: str) -> bool:
        return any(slot.slot_id == slot_id for slot in self.slots)


def build_formation(name: str, shape: Dict[Category, int]) -> Formation:
    """Build a formation with generated slot ids ("gk1", "def1", ...).

    Args:
        name: Formation name
        shape: Required count per category

    Returns:
        Formation whose slots follow category order
    """
    slots = []
    for category in CATEGORY_ORDER:
        count = shape.get(category, 0)
        if count < 0:
            raise ValueError(f"Negative slot count for {category.value}: {count}")
        for index in range(1, count + 1):
            slots.append(
                Slot(slot_id=f"{SLOT_PREFIXES[category]}{index}", category=category)
            )
    return Formation(name=name, slots=tuple(slots))


# (GK, DEF, MID, FWD) per catalog formation
FORMATION_SHAPES: Dict[str, Tuple[int, int, int, int]] = {
    "3-5-2": (1, 3, 5, 2),
    "3-4-3": (1, 3, 4, 3),
    "3-6-1": (1, 3, 6, 1),
    "4-4-2": (1, 4, 4, 2),
    "4-3-3": (1, 4, 3, 3),
    "4-2-3-1": (1, 4, 5, 1),
    "4-2-4": (1, 4, 2, 4),
    "4-5-1": (1, 4, 5, 1),
    "5-3-2": (1, 5, 3, 2),
    "5-4-1": (1, 5, 4, 1),
    "5-2-3": (1, 5, 2, 3),
}

FORMATION_CATALOG: Dict[str, Formation] = {
    name: build_formation(name, dict(zip(CATEGORY_ORDER, counts)))
    for name, counts in FORMATION_SHAPES.items()
}

AUTO_FORMATION = "auto"


def get_formation(name: str) -> Formation:
    """Look up a catalog formation by name.

    Raises:
        ValueError: If the name is not in the catalog
    """
    try:
        return FORMATION_CATALOG[name]
    except KeyError:
        raise ValueError(
            f"Unknown formation {name!r}. Available: {list(FORMATION_CATALOG)}"
        ) from None
