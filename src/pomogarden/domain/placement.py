"""Placement rules for the ground grid, the sky plane, and tree fruit.

All functions are pure apart from mutating the item passed in and the
caller-owned ``occupied`` set. Randomness comes from an injected
:class:`random.Random` so callers can seed or script it.

Ground placement is two-phase by policy: a bounded random probe, then a
deterministic row-major scan that always terminates. It is re-run on
every snapshot because the column count follows the current layout;
a cell whose column no longer exists is silently reassigned.

Sky placement quantizes new items onto a virtual grid, stores the cell
centre as percentages, and never moves a stored position again. Stored
positions are mapped back onto the current virtual grid only to mark
occupancy for the pass.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from pomogarden.domain.items import (
    GENERAL_FRUITS,
    PALM_FRUIT,
    PALM_FRUITS,
    ButterflyItem,
    FruitPosition,
    GroundItem,
    TreeItem,
)

Cell = tuple[int, int]

DEFAULT_PROBE_ATTEMPTS = 200

SKY_CELL_PX = 80
MIN_SKY_COLS = 6
MIN_SKY_ROWS = 4

FRUIT_COUNT_RANGE = (3, 5)
FRUIT_LEFT_RANGE = (15.0, 85.0)
FRUIT_TOP_RANGE = (10.0, 65.0)

# Float slack so a stored cell centre rounds back to its own cell.
_ROUND_SLACK = 1e-9


# ---------------------------------------------------------------------------
# Ground grid
# ---------------------------------------------------------------------------


def find_free_cell(
    columns: int,
    occupied: set[Cell],
    rng: random.Random,
    *,
    attempts: int = DEFAULT_PROBE_ATTEMPTS,
) -> Cell:
    """Find an unoccupied ``(col, row)`` on a grid *columns* wide.

    Probes up to *attempts* random cells with rows in
    ``[1, max_used_row + 2]``, then falls back to scanning rows from 1
    upward, left to right.
    """
    columns = max(columns, 1)
    max_row = max((row for _, row in occupied), default=0)

    for _ in range(attempts):
        cell = (rng.randint(1, columns), rng.randint(1, max_row + 2))
        if cell not in occupied:
            return cell

    row = 1
    while True:
        for col in range(1, columns + 1):
            if (col, row) not in occupied:
                return col, row
        row += 1


def resolve_ground_position(
    item: GroundItem,
    occupied: set[Cell],
    columns: int,
    rng: random.Random,
    *,
    attempts: int = DEFAULT_PROBE_ATTEMPTS,
) -> bool:
    """Give *item* a free cell and claim it in *occupied*.

    Keeps the stored cell when it is set, inside the grid, and not yet
    claimed by an earlier item in this pass. Returns True when the
    item's coordinates changed and need persisting.
    """
    cell = item.cell
    changed = False
    if cell is None or cell in occupied or cell[0] > max(columns, 1):
        cell = find_free_cell(columns, occupied, rng, attempts=attempts)
        item.col, item.row = cell
        changed = True
    occupied.add(cell)
    return changed


# ---------------------------------------------------------------------------
# Sky plane
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SkyGrid:
    """Virtual grid used to spread new sky items out."""

    cols: int
    rows: int

    @classmethod
    def from_size(cls, width: float, height: float) -> SkyGrid:
        """Derive the grid from the sky area's size in pixels."""
        return cls(
            cols=max(math.floor(width / SKY_CELL_PX), MIN_SKY_COLS),
            rows=max(math.floor(height / SKY_CELL_PX), MIN_SKY_ROWS),
        )


def sky_cell_to_percent(cell: Cell, grid: SkyGrid) -> tuple[float, float]:
    """Centre of *cell* as ``(left, top)`` percentages."""
    col, row = cell
    return (col - 0.5) / grid.cols * 100, (row - 0.5) / grid.rows * 100


def percent_to_sky_cell(left: float, top: float, grid: SkyGrid) -> Cell:
    """Map a stored position back onto *grid* by rounding half up, clamped."""
    col = min(max(math.floor(left / 100 * grid.cols + 0.5 + _ROUND_SLACK), 1), grid.cols)
    row = min(max(math.floor(top / 100 * grid.rows + 0.5 + _ROUND_SLACK), 1), grid.rows)
    return col, row


def find_free_sky_cell(
    grid: SkyGrid,
    occupied: set[Cell],
    rng: random.Random,
    *,
    attempts: int = DEFAULT_PROBE_ATTEMPTS,
) -> Cell:
    """Random probe for a free virtual cell; ``(1, 1)`` if none is found."""
    for _ in range(attempts):
        cell = (rng.randint(1, grid.cols), rng.randint(1, grid.rows))
        if cell not in occupied:
            return cell
    return 1, 1


def resolve_sky_position(
    item: ButterflyItem,
    occupied: set[Cell],
    grid: SkyGrid,
    rng: random.Random,
    *,
    attempts: int = DEFAULT_PROBE_ATTEMPTS,
) -> bool:
    """Assign a position to an unplaced sky item; mark occupancy.

    Returns True when the item received a new position.
    """
    if item.left is not None and item.top is not None:
        occupied.add(percent_to_sky_cell(item.left, item.top, grid))
        return False

    cell = find_free_sky_cell(grid, occupied, rng, attempts=attempts)
    occupied.add(cell)
    item.left, item.top = sky_cell_to_percent(cell, grid)
    return True


# ---------------------------------------------------------------------------
# Tree fruit
# ---------------------------------------------------------------------------


def fruits_need_repair(tree: TreeItem) -> bool:
    """Whether the tree's fruit data is missing or inconsistent."""
    if tree.fruits is None or tree.fruit_positions is None:
        return True
    if len(tree.fruits) != len(tree.fruit_positions):
        return True
    if tree.is_palm:
        return any(fruit != PALM_FRUIT for fruit in tree.fruits)
    return any(fruit == PALM_FRUIT for fruit in tree.fruits)


def ensure_fruits(tree: TreeItem, rng: random.Random) -> bool:
    """Regenerate the tree's fruit when needed. Returns True if regenerated."""
    if not fruits_need_repair(tree):
        return False

    pool = PALM_FRUITS if tree.is_palm else GENERAL_FRUITS
    count = rng.randint(*FRUIT_COUNT_RANGE)
    tree.fruits = [rng.choice(pool) for _ in range(count)]
    tree.fruit_positions = [
        FruitPosition(
            left=rng.uniform(*FRUIT_LEFT_RANGE),
            top=rng.uniform(*FRUIT_TOP_RANGE),
        )
        for _ in range(count)
    ]
    return True
