"""Garden item models — tagged variants with repair-on-load.

Items are persisted as a JSON array and re-validated on every load.
The ``kind`` field discriminates the three variants:

- ``tree`` and ``flower`` live on the ground grid (``col``/``row``).
- ``butterfly`` lives on the sky plane (``left``/``top`` percentages).

Coordinates are lazily assigned by :mod:`pomogarden.domain.placement`.
Out-of-range coordinates are dropped during validation so the next
placement pass reassigns them instead of failing.
"""

from __future__ import annotations

import logging
import random
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    model_validator,
)

from pomogarden.domain.ids import generate_item_id
from pomogarden.domain.types import RewardKind

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Glyph pools
# ---------------------------------------------------------------------------

PALM_GLYPH = "🌴"
PALM_FRUIT = "🥥"

GLYPH_POOLS: dict[RewardKind, tuple[str, ...]] = {
    RewardKind.TREE: ("🌳", PALM_GLYPH),
    RewardKind.FLOWER: ("🌻", "🌹", "🌷", "🌺", "🌸", "🌼", "🪷"),
    RewardKind.BUTTERFLY: ("🦋",),
}

GENERAL_FRUITS: tuple[str, ...] = (
    "🍎",
    "🍋",
    "🍊",
    "🍑",
    "🍐",
    "🍅",
    "🍒",
    "🍇",
    "🥭",
    "🍓",
)
PALM_FRUITS: tuple[str, ...] = (PALM_FRUIT,)


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


class FruitPosition(BaseModel):
    """Fruit anchor inside a tree's bounding box, in percent."""

    left: float
    top: float


class _ItemBase(BaseModel):
    model_config = {"coerce_numbers_to_str": True}

    id: str
    glyph: str = Field(min_length=1)
    created: str | None = None


class GroundItem(_ItemBase):
    """Shared shape of items placed on the integer ground grid."""

    col: int | None = None
    row: int | None = None

    @model_validator(mode="after")
    def _drop_invalid_cell(self, info: ValidationInfo) -> GroundItem:
        max_row = (info.context or {}).get("max_row")
        if (
            self.col is None
            or self.row is None
            or self.col < 1
            or self.row < 1
            or (max_row is not None and self.row > max_row)
        ):
            self.col = None
            self.row = None
        return self

    @property
    def cell(self) -> tuple[int, int] | None:
        if self.col is None or self.row is None:
            return None
        return self.col, self.row


class TreeItem(GroundItem):
    """A fruit tree. Nameable; carries generated fruit decorations."""

    kind: Literal["tree"] = "tree"
    name: str | None = None
    fruits: list[str] | None = None
    fruit_positions: list[FruitPosition] | None = None

    @property
    def is_palm(self) -> bool:
        return self.glyph == PALM_GLYPH


class FlowerItem(GroundItem):
    """A flower on the ground grid."""

    kind: Literal["flower"] = "flower"


class ButterflyItem(_ItemBase):
    """A butterfly on the continuous sky plane."""

    kind: Literal["butterfly"] = "butterfly"
    left: float | None = None
    top: float | None = None

    @model_validator(mode="after")
    def _drop_invalid_position(self) -> ButterflyItem:
        if (
            self.left is None
            or self.top is None
            or not 0 <= self.left <= 100
            or not 0 <= self.top <= 100
        ):
            self.left = None
            self.top = None
        return self


AnyGardenItem = TreeItem | FlowerItem | ButterflyItem

GardenItem = Annotated[TreeItem | FlowerItem | ButterflyItem, Field(discriminator="kind")]

_ITEM_ADAPTER: TypeAdapter[AnyGardenItem] = TypeAdapter(GardenItem)

_ITEM_CLASSES: dict[RewardKind, type[AnyGardenItem]] = {
    RewardKind.TREE: TreeItem,
    RewardKind.FLOWER: FlowerItem,
    RewardKind.BUTTERFLY: ButterflyItem,
}


# ---------------------------------------------------------------------------
# Construction and (de)serialization
# ---------------------------------------------------------------------------


def new_item(
    kind: RewardKind,
    *,
    rng: random.Random | None = None,
    created: str | None = None,
) -> AnyGardenItem:
    """Create an unplaced item of *kind* with a glyph drawn from its pool."""
    rng = rng or random.Random()
    glyph = rng.choice(GLYPH_POOLS[kind])
    return _ITEM_CLASSES[kind](id=generate_item_id(), glyph=glyph, created=created)


def parse_garden(raw: Any) -> tuple[list[AnyGardenItem], list[str]]:
    """Validate a persisted garden blob into typed items.

    Returns ``(items, warnings)``. A blob that is not a list yields an
    empty garden. Records that fail validation are dropped individually
    so one bad record never loses the rest of the garden.
    """
    if raw is None:
        return [], []
    if not isinstance(raw, list):
        logger.warning("Garden blob is not a list (%s); starting empty", type(raw).__name__)
        return [], ["Stored garden was malformed and has been reset"]

    # Placement never lands more than two rows below the lowest item.
    context = {"max_row": 2 * len(raw) + 2}
    items: list[AnyGardenItem] = []
    warnings: list[str] = []
    for index, record in enumerate(raw):
        try:
            items.append(_ITEM_ADAPTER.validate_python(record, context=context))
        except ValidationError as exc:
            logger.warning("Dropping invalid garden record %d: %s", index, exc.errors()[:1])
            warnings.append(f"Dropped invalid garden record at position {index}")
    return items, warnings


def dump_garden(items: list[AnyGardenItem]) -> list[dict[str, Any]]:
    """Serialize items to JSON-compatible dicts, preserving order."""
    return [item.model_dump(mode="json") for item in items]
