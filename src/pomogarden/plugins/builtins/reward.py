"""Built-in reward plugin: completed cycles grow the garden.

Turns ``on_cycle_completed`` into :meth:`GardenService.add_reward`, which
in turn raises ``on_garden_changed`` for the presentation layer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pluggy

from pomogarden.services.garden import GardenService

if TYPE_CHECKING:
    from pomogarden.infrastructure.workspace import Workspace
    from pomogarden.services.result import ServiceResult

hookimpl = pluggy.HookimplMarker("pomogarden")

logger = logging.getLogger(__name__)


class GardenRewardPlugin:
    """Appends the finished mode's reward to the persisted garden."""

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace
        self.last_result: ServiceResult | None = None

    @hookimpl
    def on_cycle_completed(self, kind: str) -> None:
        result = GardenService(self._workspace).add_reward(kind)
        self.last_result = result
        if not result.ok:
            logger.warning("Reward %s was not granted: %s", kind, result.error)
