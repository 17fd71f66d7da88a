"""Pluggy hook specifications for deskctl.

Two collaborator hooks produce plain data for tag management; three
lifecycle hooks notify plugins after state-changing operations.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("deskctl")
hookimpl = pluggy.HookimplMarker("deskctl")


class DeskctlHookSpec:
    """Hook specifications for the deskctl plugin system."""

    @hookspec
    def suggest_tags(self, items: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
        """Propose tags for *items* (``{id, label, type}`` dicts).

        Return ``[{"name": ..., "color": ...}]``; ``color`` is optional.
        """

    @hookspec
    def assign_tags(
        self,
        items: list[dict[str, Any]],
        existing_tags: list[dict[str, Any]],
    ) -> list[dict[str, Any]] | None:
        """Distribute item labels over *existing_tags* (``{name, items}`` dicts).

        Return ``[{"tagName": ..., "files": [label, ...]}]``.
        """

    @hookspec
    def post_apply(self, descriptions: list[str], item_count: int) -> None:
        """Called after a rule set is applied to the desktop."""

    @hookspec
    def post_rollback(self, entry_id: str, title: str) -> None:
        """Called after the desktop is restored from history."""

    @hookspec
    def post_import(self, source: str, item_count: int) -> None:
        """Called after a desktop description is imported."""
