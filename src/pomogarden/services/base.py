"""BaseService — shared foundation for the timer and garden services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides the store, the clock and scheduler, the translator,
and (once initialized) the plugin event bus.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pomogarden.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class GardenService(BaseService):
            def add_reward(self, kind: str) -> ServiceResult:
                raw = self._workspace.store.load(GARDEN_KEY)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a presentation event. No-op if event bus not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._workspace.event_bus
        if bus is None:
            return
        try:
            warnings.extend(bus.dispatch(hook_name, payload))
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")

    def _confirm(self, action: str, message_key: str) -> bool:
        """Ask the presentation layer to confirm *action*.

        No event bus, no listener, or a failing listener all decline.
        """
        bus = self._workspace.event_bus
        if bus is None:
            return False
        message = self._workspace.translator(message_key)
        answer = bus.ask("confirm_action", {"action": action, "message": message})
        logger.debug("Confirmation for %s: %r", action, answer)
        return answer is True
