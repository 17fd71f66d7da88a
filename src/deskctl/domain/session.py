"""Explicit session state: everything a workspace persists."""

from __future__ import annotations

from pydantic import BaseModel, Field

from deskctl.domain.history import HistoryStore
from deskctl.domain.models import DesktopItem, HistoryEntry, Rule, Tag

SESSION_VERSION = 1


class DesktopSession(BaseModel):
    """Items, tags, active rules, saved rule sets and history for one desktop.

    ``last_applied`` is the collection as it stood after the most recent
    apply or rollback; it decides whether a "before" snapshot is needed on
    the next apply.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    version: int = SESSION_VERSION
    source: str | None = None
    items: list[DesktopItem] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    rules: list[Rule] = Field(default_factory=list)
    saved_rules: list[Rule] = Field(default_factory=list, alias="savedRules")
    history: list[HistoryEntry] = Field(default_factory=list)
    last_applied: list[DesktopItem] | None = Field(default=None, alias="lastApplied")

    def history_store(self) -> HistoryStore:
        return HistoryStore(self.history)

    def with_history(self, store: HistoryStore) -> DesktopSession:
        return self.model_copy(update={"history": store.entries})

    def find_item(self, item_id: str) -> DesktopItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    def find_tag(self, tag_id: str) -> Tag | None:
        return next((tag for tag in self.tags if tag.id == tag_id), None)
