"""Tests for GardenService — rewards, placement passes, naming, clearing."""

from __future__ import annotations

import json
import random
from collections.abc import Sequence
from typing import Any, TypeVar

import pytest

from pomogarden.config.models import GardenConfig
from pomogarden.config.settings import PomoSettings
from pomogarden.domain.items import GLYPH_POOLS, PALM_FRUIT, PALM_GLYPH, ButterflyItem
from pomogarden.domain.placement import SkyGrid, percent_to_sky_cell, sky_cell_to_percent
from pomogarden.domain.types import RewardKind
from pomogarden.infrastructure.store import GARDEN_KEY, MemoryStore
from pomogarden.infrastructure.workspace import Workspace
from pomogarden.services.garden import GardenLayout, GardenService, GardenSnapshot
from tests.conftest import ManualClock, garden_record, wire_recorder

T = TypeVar("T")

FOUR = GardenLayout(columns=4)


class LowRandom(random.Random):
    """Always draws the lowest value, so every random probe collides."""

    def randint(self, a: int, b: int) -> int:
        return a

    def choice(self, seq: Sequence[T]) -> T:
        return seq[0]

    def uniform(self, a: float, b: float) -> float:
        return a


class CountingStore(MemoryStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__(initial)
        self.writes = 0

    def _write(self, key: str, raw: str) -> None:
        self.writes += 1
        super()._write(key, raw)


class ReadOnlyStore(MemoryStore):
    def _write(self, key: str, raw: str) -> None:
        raise OSError("read-only file system")


def _store_with(*records: dict[str, Any]) -> MemoryStore:
    return MemoryStore({GARDEN_KEY: json.dumps(list(records))})


@pytest.fixture
def make_workspace(settings: PomoSettings, manual_clock: ManualClock) -> Any:
    created: list[Workspace] = []

    def _make(store: MemoryStore) -> Workspace:
        ws = Workspace(settings, store=store, clock=manual_clock, rng=random.Random(77))
        created.append(ws)
        return ws

    yield _make
    for ws in created:
        ws.close()


@pytest.fixture
def service(workspace: Workspace) -> GardenService:
    return GardenService(workspace)


def _stored(workspace: Workspace) -> list[dict[str, Any]]:
    return workspace.store.load(GARDEN_KEY) or []


class TestAddReward:
    def test_tree(self, service: GardenService, workspace: Workspace) -> None:
        result = service.add_reward("tree", layout=FOUR)

        assert result.ok
        assert result.op == "add_reward"
        assert result.data["kind"] == "tree"
        assert result.data["glyph"] in GLYPH_POOLS[RewardKind.TREE]
        garden = result.data["garden"]
        assert garden["plant_count"] == 1
        assert garden["rows"] in (1, 2)
        (record,) = _stored(workspace)
        assert record["id"] == result.data["id"]
        assert record["col"] is not None
        assert 3 <= len(record["fruits"]) <= 5
        assert record["created"] is not None

    def test_butterfly_goes_to_sky(self, service: GardenService, workspace: Workspace) -> None:
        result = service.add_reward("butterfly", layout=FOUR)
        garden = result.data["garden"]
        assert garden["plant_count"] == 0
        assert garden["butterfly_count"] == 1
        assert garden["rows"] == 0
        (record,) = _stored(workspace)
        assert 0 < record["left"] < 100
        assert 0 < record["top"] < 100

    def test_unknown_kind(self, service: GardenService, workspace: Workspace) -> None:
        result = service.add_reward("dragon")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_KIND"
        assert workspace.store.load(GARDEN_KEY) is None

    def test_insertion_order_kept(self, service: GardenService, workspace: Workspace) -> None:
        ids = [service.add_reward(kind).data["id"] for kind in ("flower", "tree", "butterfly")]
        assert [record["id"] for record in _stored(workspace)] == ids

    def test_raises_garden_changed(self, service: GardenService, workspace: Workspace) -> None:
        recorder = wire_recorder(workspace)
        service.add_reward("flower", layout=FOUR)
        (payload,) = recorder.payloads("on_garden_changed")
        snapshot = payload["snapshot"]
        assert isinstance(snapshot, GardenSnapshot)
        assert snapshot.plant_count == 1

    def test_five_flowers_fill_two_rows(self, workspace: Workspace) -> None:
        service = GardenService(workspace, rng=LowRandom())
        for _ in range(5):
            service.add_reward("flower", layout=FOUR)

        cells = [(record["col"], record["row"]) for record in _stored(workspace)]
        assert len(set(cells)) == 5
        assert max(row for _, row in cells) <= 2
        assert cells == [(1, 1), (2, 1), (3, 1), (4, 1), (1, 2)]

    def test_single_column_above_fifty_rows(self, make_workspace: Any) -> None:
        records = [
            garden_record(f"f{row}", "flower", "🌷", col=1, row=row) for row in range(1, 51)
        ]
        ws = make_workspace(_store_with(*records))
        result = GardenService(ws).add_reward("flower", layout=GardenLayout(columns=1))
        new_record = _stored(ws)[-1]
        assert result.ok
        assert new_record["col"] == 1
        assert new_record["row"] in (51, 52)


class TestPlacementPass:
    def test_ground_cells_pairwise_distinct(self, service: GardenService) -> None:
        for index in range(30):
            service.add_reward("tree" if index % 3 else "flower", layout=FOUR)
        snapshot = service.snapshot(FOUR)
        cells = [item.cell for item in snapshot.items if not isinstance(item, ButterflyItem)]
        assert len(cells) == 30
        assert len(set(cells)) == 30
        assert all(cell is not None and 1 <= cell[0] <= 4 for cell in cells)

    def test_duplicate_stored_cells_resolved_in_order(self, make_workspace: Any) -> None:
        ws = make_workspace(
            _store_with(
                garden_record("a", "flower", "🌷", col=2, row=1),
                garden_record("b", "flower", "🌼", col=2, row=1),
            )
        )
        snapshot = GardenService(ws).snapshot(FOUR)
        cells = snapshot.ground_cells()
        assert cells[(2, 1)].id == "a"
        assert len(cells) == 2

    def test_narrower_layout_reassigns_columns(self, make_workspace: Any) -> None:
        ws = make_workspace(
            _store_with(
                garden_record("a", "flower", "🌷", col=1, row=1),
                garden_record("b", "flower", "🌼", col=6, row=1),
            )
        )
        snapshot = GardenService(ws).snapshot(GardenLayout(columns=3))
        assert snapshot.columns == 3
        assert all(cell[0] <= 3 for cell in snapshot.ground_cells())
        stored = {record["id"]: record for record in _stored(ws)}
        assert stored["a"]["col"] == 1
        assert stored["b"]["col"] <= 3

    def test_runaway_stored_row_reassigned(self, make_workspace: Any) -> None:
        ws = make_workspace(_store_with(garden_record("a", "tree", "🌳", col=1, row=10**9)))
        snapshot = GardenService(ws).snapshot(FOUR)
        assert snapshot.rows <= 3
        assert _stored(ws)[0]["row"] <= 3

    def test_stable_garden_not_rewritten(self, make_workspace: Any) -> None:
        store = CountingStore()
        ws = make_workspace(store)
        service = GardenService(ws)
        service.add_reward("tree", layout=FOUR)
        service.add_reward("butterfly", layout=FOUR)
        writes = store.writes
        first = service.snapshot(FOUR).model_dump()

        second = service.snapshot(FOUR).model_dump()

        assert store.writes == writes
        assert first == second

    def test_missing_fruit_generated_and_persisted(self, make_workspace: Any) -> None:
        ws = make_workspace(_store_with(garden_record("t", "tree", "🌳", col=1, row=1)))
        GardenService(ws).snapshot(FOUR)
        (record,) = _stored(ws)
        assert record["fruits"]
        assert len(record["fruits"]) == len(record["fruit_positions"])

    def test_palm_purity_across_passes(self, make_workspace: Any) -> None:
        ws = make_workspace(
            _store_with(
                garden_record(
                    "p",
                    "tree",
                    PALM_GLYPH,
                    col=1,
                    row=1,
                    fruits=["🍎", "🍒", "🍋"],
                    fruit_positions=[{"left": 20, "top": 20}] * 3,
                ),
                garden_record(
                    "o",
                    "tree",
                    "🌳",
                    col=2,
                    row=1,
                    fruits=[PALM_FRUIT],
                    fruit_positions=[{"left": 20, "top": 20}],
                ),
            )
        )
        service = GardenService(ws)
        for _ in range(5):
            snapshot = service.snapshot(FOUR)
            palm, oak = snapshot.items
            assert set(palm.fruits) == {PALM_FRUIT}
            assert PALM_FRUIT not in oak.fruits

    def test_sky_position_survives_resize(self, make_workspace: Any) -> None:
        ws = make_workspace(
            _store_with(garden_record("b", "butterfly", "🦋", left=41.5, top=63.0))
        )
        service = GardenService(ws)
        for layout in (FOUR, GardenLayout(columns=12, sky_width=1600, sky_height=800)):
            (bird,) = service.snapshot(layout).sky_items()
            assert (bird.left, bird.top) == (41.5, 63.0)

    def test_new_butterflies_take_free_sky_cells(self, service: GardenService) -> None:
        for _ in range(12):
            service.add_reward("butterfly", layout=FOUR)
        grid = SkyGrid(cols=6, rows=4)
        cells = {
            percent_to_sky_cell(bird.left or 0, bird.top or 0, grid)
            for bird in service.snapshot(FOUR).sky_items()
        }
        assert len(cells) == 12

    def test_exhausted_sky_probe_falls_back_to_first_cell(self, make_workspace: Any) -> None:
        # LowRandom only ever probes cell (1, 1), which the stored butterfly holds
        ws = make_workspace(
            _store_with(garden_record("b", "butterfly", "🦋", left=8.0, top=12.5))
        )
        GardenService(ws, rng=LowRandom()).add_reward("butterfly", layout=FOUR)
        new_bird = _stored(ws)[-1]
        expected = sky_cell_to_percent((1, 1), SkyGrid(cols=6, rows=4))
        assert (new_bird["left"], new_bird["top"]) == pytest.approx(expected)

    def test_invalid_records_dropped_and_persisted(self, make_workspace: Any) -> None:
        ws = make_workspace(
            _store_with(
                garden_record("a", "flower", "🌷", col=1, row=1),
                {"id": "x", "kind": "unicorn", "glyph": "🦄"},
            )
        )
        result = GardenService(ws).show(FOUR)
        assert result.data["plant_count"] == 1
        assert any("Dropped invalid" in warning for warning in result.warnings)
        assert [record["id"] for record in _stored(ws)] == ["a"]

    def test_malformed_blob_starts_empty(self, make_workspace: Any) -> None:
        ws = make_workspace(MemoryStore({GARDEN_KEY: json.dumps({"not": "a list"})}))
        result = GardenService(ws).show(FOUR)
        assert result.data["items"] == []
        assert result.warnings

    def test_counters(self, service: GardenService) -> None:
        for kind in ("tree", "flower", "butterfly", "butterfly"):
            service.add_reward(kind, layout=FOUR)
        snapshot = service.snapshot(FOUR)
        assert snapshot.plant_count == 2
        assert snapshot.butterfly_count == 2
        assert len(snapshot.sky_items()) == 2
        assert snapshot.sky_cols == 6
        assert snapshot.sky_rows == 4

    def test_snapshot_is_a_copy(self, service: GardenService, workspace: Workspace) -> None:
        service.add_reward("tree", layout=FOUR)
        snapshot = service.snapshot(FOUR)
        snapshot.items[0].name = "Changed"  # type: ignore[union-attr]
        assert _stored(workspace)[0].get("name") is None


class TestLayout:
    def test_default_from_config(self, service: GardenService) -> None:
        layout = service.default_layout()
        assert layout == GardenLayout(columns=4, sky_width=320, sky_height=320)

    def test_viewport_width(self, service: GardenService, workspace: Workspace) -> None:
        workspace.viewport_width = 80
        layout = service.default_layout()
        assert layout.columns == 8
        assert layout.sky_width == 640

    def test_narrow_terminal_has_one_column(self) -> None:
        assert GardenLayout.for_terminal(3, GardenConfig()).columns == 1

    def test_show_uses_default_layout(self, service: GardenService) -> None:
        result = service.show()
        assert result.op == "garden"
        assert result.data["columns"] == 4


class TestRenameTree:
    def _tree_id(self, service: GardenService) -> str:
        return str(service.add_reward("tree", layout=FOUR).data["id"])

    def test_name_trimmed(self, service: GardenService, workspace: Workspace) -> None:
        tree_id = self._tree_id(service)
        result = service.rename_tree(tree_id, "  Old Oak  ", layout=FOUR)
        assert result.ok
        assert result.data["name"] == "Old Oak"
        assert _stored(workspace)[0]["name"] == "Old Oak"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_clears_name(
        self, service: GardenService, workspace: Workspace, name: str | None
    ) -> None:
        tree_id = self._tree_id(service)
        service.rename_tree(tree_id, "Oak", layout=FOUR)
        result = service.rename_tree(tree_id, name, layout=FOUR)
        assert result.data["name"] is None
        assert _stored(workspace)[0]["name"] is None

    def test_placement_and_fruit_untouched(
        self, service: GardenService, workspace: Workspace
    ) -> None:
        tree_id = self._tree_id(service)
        before = _stored(workspace)[0]
        service.rename_tree(tree_id, "Maple", layout=FOUR)
        after = _stored(workspace)[0]
        for key in ("col", "row", "fruits", "fruit_positions", "glyph"):
            assert after[key] == before[key]

    def test_not_found(self, service: GardenService) -> None:
        result = service.rename_tree("missing", "Oak")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_not_a_tree(self, service: GardenService) -> None:
        flower_id = service.add_reward("flower", layout=FOUR).data["id"]
        result = service.rename_tree(flower_id, "Rosie")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_A_TREE"
        assert result.error.detail == {"kind": "flower"}


class TestClear:
    def test_confirmed(self, service: GardenService, workspace: Workspace) -> None:
        service.add_reward("tree")
        service.add_reward("butterfly")
        result = service.clear(confirmed=True)
        assert result.ok
        assert result.data == {"removed": 2}
        assert _stored(workspace) == []

    def test_no_listener_aborts(self, service: GardenService, workspace: Workspace) -> None:
        service.add_reward("tree")
        result = service.clear()
        assert result.ok
        assert result.aborted
        assert len(_stored(workspace)) == 1

    def test_listener_declines(self, service: GardenService, workspace: Workspace) -> None:
        recorder = wire_recorder(workspace, answer=False)
        service.add_reward("flower")
        result = service.clear()
        assert result.aborted
        assert len(_stored(workspace)) == 1
        assert recorder.payloads("confirm_action")[0]["action"] == "clear_garden"

    def test_listener_accepts(self, service: GardenService, workspace: Workspace) -> None:
        recorder = wire_recorder(workspace, answer=True)
        service.add_reward("flower")
        recorder.calls.clear()

        result = service.clear()

        assert result.data == {"removed": 1}
        assert _stored(workspace) == []
        assert recorder.names() == ["confirm_action", "on_garden_changed"]
        assert recorder.payloads("on_garden_changed")[0]["snapshot"].items == []

    def test_explicit_decline(self, service: GardenService, workspace: Workspace) -> None:
        recorder = wire_recorder(workspace, answer=True)
        result = service.clear(confirmed=False)
        assert result.aborted
        assert recorder.payloads("confirm_action") == []


class TestSaveFailure:
    def test_result_still_returned(
        self, make_workspace: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        ws = make_workspace(ReadOnlyStore())
        result = GardenService(ws).add_reward("tree", layout=FOUR)
        assert result.ok
        assert result.data["garden"]["plant_count"] == 1
        assert any("could not be saved" in warning for warning in result.warnings)
        assert "Could not save" in caplog.text
