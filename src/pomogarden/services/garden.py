"""GardenService — reward items, placement passes, naming, and clearing.

The persisted garden is reloaded at the start of every operation and
re-validated. Each snapshot runs a full placement pass (ground, fruit,
sky) over the items in insertion order and writes the garden back only
when the pass changed something. A failed write is logged; the caller
still gets the in-memory result.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from pomogarden.domain.items import (
    AnyGardenItem,
    ButterflyItem,
    GardenItem,
    GroundItem,
    TreeItem,
    dump_garden,
    new_item,
    parse_garden,
)
from pomogarden.domain.placement import (
    Cell,
    SkyGrid,
    ensure_fruits,
    resolve_ground_position,
    resolve_sky_position,
)
from pomogarden.domain.types import RewardKind
from pomogarden.infrastructure.store import GARDEN_KEY
from pomogarden.services._helpers import now_iso
from pomogarden.services.base import BaseService
from pomogarden.services.result import ServiceResult

if TYPE_CHECKING:
    import random

    from pomogarden.config.models import GardenConfig
    from pomogarden.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout and snapshot models
# ---------------------------------------------------------------------------


class GardenLayout(BaseModel):
    """Dimensions the current view offers to the garden.

    ``columns`` is the ground grid width; ``sky_width`` and
    ``sky_height`` size the sky plane in virtual pixels.
    """

    model_config = {"frozen": True}

    columns: int = Field(default=4, ge=1)
    sky_width: float = Field(default=320, gt=0)
    sky_height: float = Field(default=320, gt=0)

    @classmethod
    def from_config(cls, config: GardenConfig) -> GardenLayout:
        """Layout used when no terminal size is known."""
        return cls.for_terminal(config.default_columns * config.cell_width, config)

    @classmethod
    def for_terminal(cls, width: int, config: GardenConfig) -> GardenLayout:
        """Layout for a terminal *width* characters wide."""
        width = max(width, 1)
        return cls(
            columns=max(width // config.cell_width, 1),
            sky_width=width * config.char_px,
            sky_height=config.sky_height,
        )


class GardenSnapshot(BaseModel):
    """Read-only materialized garden handed to the presentation layer."""

    model_config = {"frozen": True}

    items: list[GardenItem]
    columns: int
    rows: int
    sky_cols: int
    sky_rows: int
    plant_count: int
    butterfly_count: int

    def ground_cells(self) -> dict[Cell, GroundItem]:
        """Ground items keyed by their resolved ``(col, row)``."""
        cells: dict[Cell, GroundItem] = {}
        for item in self.items:
            if isinstance(item, GroundItem) and item.cell is not None:
                cells[item.cell] = item
        return cells

    def sky_items(self) -> list[ButterflyItem]:
        return [item for item in self.items if isinstance(item, ButterflyItem)]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class GardenService(BaseService):
    """Reward placement engine over the persisted garden."""

    def __init__(self, workspace: Workspace, *, rng: random.Random | None = None) -> None:
        super().__init__(workspace)
        self._rng = rng or workspace.rng
        self._config = workspace.settings.garden

    def default_layout(self) -> GardenLayout:
        """Layout for the workspace viewport, or the configured default."""
        width = self._workspace.viewport_width
        if width is None:
            return GardenLayout.from_config(self._config)
        return GardenLayout.for_terminal(width, self._config)

    def add_reward(self, kind: str, *, layout: GardenLayout | None = None) -> ServiceResult:
        """Append a fresh item of *kind*, persist, and return the snapshot."""
        op = "add_reward"
        try:
            reward = RewardKind(str(kind))
        except ValueError:
            logger.error("Unknown reward kind: %r", kind)
            return ServiceResult.rejected(
                op,
                "UNKNOWN_KIND",
                f"Unknown reward kind: {kind!r}",
                kind=str(kind),
            )

        items, warnings = self._load()
        item = new_item(reward, rng=self._rng, created=now_iso())
        items.append(item)
        logger.debug("Added %s %s (%s)", reward, item.id, item.glyph)

        snapshot = self._place(items, layout, warnings, force_save=True)
        self._dispatch_event("on_garden_changed", {"snapshot": snapshot}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": item.id,
                "kind": reward.value,
                "glyph": item.glyph,
                "garden": snapshot.model_dump(mode="json"),
            },
            warnings=warnings,
        )

    def snapshot(self, layout: GardenLayout | None = None) -> GardenSnapshot:
        """Run a placement pass and return the resulting snapshot."""
        items, warnings = self._load()
        return self._place(items, layout, warnings)

    def show(self, layout: GardenLayout | None = None) -> ServiceResult:
        """Snapshot wrapped as a result (``garden show``)."""
        items, warnings = self._load()
        snapshot = self._place(items, layout, warnings)
        return ServiceResult(
            ok=True,
            op="garden",
            data=snapshot.model_dump(mode="json"),
            warnings=warnings,
        )

    def rename_tree(
        self,
        item_id: str,
        name: str | None,
        *,
        layout: GardenLayout | None = None,
    ) -> ServiceResult:
        """Set or clear a tree's name. Placement and fruit are untouched."""
        op = "rename_tree"
        items, warnings = self._load()
        target = next((item for item in items if item.id == item_id), None)
        if target is None:
            logger.error("No garden item with id %r", item_id)
            return ServiceResult.rejected(
                op,
                "NOT_FOUND",
                f"No garden item found with ID: {item_id}",
            )
        if not isinstance(target, TreeItem):
            logger.error("Item %s is a %s, not a tree", item_id, target.kind)
            return ServiceResult.rejected(
                op,
                "NOT_A_TREE",
                f"Only trees can be named; {item_id} is a {target.kind}",
                kind=target.kind,
            )

        trimmed = (name or "").strip()
        target.name = trimmed or None
        snapshot = self._place(items, layout, warnings, force_save=True)
        self._dispatch_event("on_garden_changed", {"snapshot": snapshot}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": target.id, "glyph": target.glyph, "name": target.name},
            warnings=warnings,
        )

    def clear(self, *, confirmed: bool | None = None) -> ServiceResult:
        """Remove every item. Asks for confirmation unless *confirmed* is given."""
        op = "clear_garden"
        if confirmed is None:
            confirmed = self._confirm("clear_garden", "clear_confirm")
        if not confirmed:
            logger.debug("Garden clear declined")
            return ServiceResult(ok=True, op=op, data={"aborted": True})

        items, warnings = self._load()
        removed = len(items)
        snapshot = self._place([], None, warnings, force_save=True)
        self._dispatch_event("on_garden_changed", {"snapshot": snapshot}, warnings)
        logger.debug("Cleared %d garden items", removed)
        return ServiceResult(ok=True, op=op, data={"removed": removed}, warnings=warnings)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> tuple[list[AnyGardenItem], list[str]]:
        return parse_garden(self._workspace.store.load(GARDEN_KEY))

    def _save(self, items: list[AnyGardenItem], warnings: list[str]) -> None:
        if not self._workspace.store.save(GARDEN_KEY, dump_garden(items)):
            warnings.append("Garden could not be saved; changes may be lost on reload")

    def _place(
        self,
        items: list[AnyGardenItem],
        layout: GardenLayout | None,
        warnings: list[str],
        *,
        force_save: bool = False,
    ) -> GardenSnapshot:
        layout = layout or self.default_layout()
        attempts = self._config.probe_attempts
        # records dropped while loading are persisted away too
        changed = force_save or bool(warnings)

        occupied: set[Cell] = set()
        for item in items:
            if isinstance(item, GroundItem):
                if resolve_ground_position(
                    item, occupied, layout.columns, self._rng, attempts=attempts
                ):
                    changed = True

        for item in items:
            if isinstance(item, TreeItem) and ensure_fruits(item, self._rng):
                changed = True

        grid = SkyGrid.from_size(layout.sky_width, layout.sky_height)
        sky_occupied: set[Cell] = set()
        for item in items:
            if isinstance(item, ButterflyItem):
                if resolve_sky_position(item, sky_occupied, grid, self._rng, attempts=attempts):
                    changed = True

        if changed:
            self._save(items, warnings)

        ground = [item for item in items if isinstance(item, GroundItem)]
        return GardenSnapshot(
            items=[item.model_copy(deep=True) for item in items],
            columns=layout.columns,
            rows=max((item.row or 0 for item in ground), default=0),
            sky_cols=grid.cols,
            sky_rows=grid.rows,
            plant_count=len(ground),
            butterfly_count=len(items) - len(ground),
        )
