"""BaseService: foundation for all deskctl services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides settings, the session unit of work and the plugin
manager. Services own their unit-of-work boundary via
``self._workspace.session()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from deskctl.domain.actions import ActionContext
from deskctl.services.result import NO_SESSION, ServiceResult

if TYPE_CHECKING:
    from deskctl.infrastructure.workspace import SessionUnit, Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class LayoutService(BaseService):
            def organize(self) -> ServiceResult:
                with self._workspace.session() as unit:
                    ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _action_context(self) -> ActionContext:
        return ActionContext(canvas=self._workspace.canvas, grid=self._workspace.grid)

    @staticmethod
    def _no_session(op: str, unit: SessionUnit) -> ServiceResult | None:
        """Failure result when nothing has been imported yet, else None."""
        if unit.exists:
            return None
        return ServiceResult.failure(
            op, NO_SESSION, "No desktop imported yet. Run 'deskctl import' first."
        )

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Notify plugins of a lifecycle event.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            getattr(self._workspace.plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")

    def _collect(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> list[dict[str, Any]]:
        """Call a collaborator hook and flatten every plugin's list result.

        Malformed entries (non-dicts) are dropped with a warning.
        """
        try:
            results = getattr(self._workspace.plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Collaborator hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
            return []

        collected: list[dict[str, Any]] = []
        for result in results:
            for entry in result or []:
                if isinstance(entry, dict):
                    collected.append(entry)
                else:
                    warnings.append(f"Ignored malformed {hook_name} entry: {entry!r}")
        return collected
