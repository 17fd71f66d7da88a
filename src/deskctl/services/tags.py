"""TagService: named, colored groups of item labels.

Tags are referenced by id or, failing that, by exact name. Membership
is by label, so a label is accepted even when no current item carries
it (a warning is returned).
"""

from __future__ import annotations

import re
from typing import Any

from deskctl.domain.ids import generate_id
from deskctl.domain.models import Tag
from deskctl.domain.session import DesktopSession
from deskctl.services._helpers import plugin_items, tag_payload, unique_name
from deskctl.services.base import BaseService
from deskctl.services.result import (
    DUPLICATE_NAME,
    INVALID_INPUT,
    NOT_FOUND,
    ServiceResult,
)
from deskctl.services.telemetry import traced

DEFAULT_TAG_NAME = "NewTag"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _find(state: DesktopSession, ref: str) -> Tag | None:
    return state.find_tag(ref) or next((t for t in state.tags if t.name == ref), None)


def _replace_tag(state: DesktopSession, tag: Tag) -> DesktopSession:
    return state.model_copy(update={"tags": [tag if t.id == tag.id else t for t in state.tags]})


class TagService(BaseService):
    """Create, edit and auto-populate tags."""

    @traced
    def list(self) -> ServiceResult:
        with self._workspace.session() as unit:
            tags = unit.state.tags
        return ServiceResult(
            ok=True,
            op="list_tags",
            data={"count": len(tags), "tags": [tag_payload(t) for t in tags]},
        )

    @traced
    def create(self, name: str | None = None, *, color: str | None = None) -> ServiceResult:
        """Create a tag. Without a name, the first free ``NewTag``, ``NewTag1`` ... is used."""
        op = "create_tag"
        if color is not None and not _HEX_COLOR.match(color):
            return ServiceResult.failure(op, INVALID_INPUT, f"Invalid color {color!r}")

        with self._workspace.session() as unit:
            existing = [t.name for t in unit.state.tags]
            if name is None or not name.strip():
                final_name = unique_name(DEFAULT_TAG_NAME, existing)
            else:
                final_name = name.strip()
                if final_name in existing:
                    return ServiceResult.failure(
                        op, DUPLICATE_NAME, f"Tag {final_name!r} already exists"
                    )
            tag = Tag(
                id=generate_id("tag"),
                name=final_name,
                color=color or self._workspace.settings.tags.default_color,
            )
            unit.replace(unit.state.model_copy(update={"tags": [*unit.state.tags, tag]}))
        return ServiceResult(ok=True, op=op, data={"tag": tag_payload(tag)})

    @traced
    def rename(self, ref: str, new_name: str) -> ServiceResult:
        op = "rename_tag"
        new_name = new_name.strip()
        if not new_name:
            return ServiceResult.failure(op, INVALID_INPUT, "Tag name cannot be empty")
        with self._workspace.session() as unit:
            tag = _find(unit.state, ref)
            if tag is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No tag {ref!r}")
            if any(t.name == new_name and t.id != tag.id for t in unit.state.tags):
                return ServiceResult.failure(op, DUPLICATE_NAME, f"Tag {new_name!r} already exists")
            updated = tag.model_copy(update={"name": new_name})
            unit.replace(_replace_tag(unit.state, updated))
        return ServiceResult(ok=True, op=op, data={"tag": tag_payload(updated), "old_name": tag.name})

    @traced
    def recolor(self, ref: str, color: str) -> ServiceResult:
        op = "recolor_tag"
        if not _HEX_COLOR.match(color):
            return ServiceResult.failure(op, INVALID_INPUT, f"Invalid color {color!r}")
        return self._update(op, ref, lambda tag: {"color": color})

    @traced
    def toggle_expand(self, ref: str) -> ServiceResult:
        return self._update("toggle_tag", ref, lambda tag: {"expanded": not tag.expanded})

    @traced
    def add_item(self, ref: str, label: str) -> ServiceResult:
        op = "tag_add_item"
        warnings: list[str] = []
        with self._workspace.session() as unit:
            tag = _find(unit.state, ref)
            if tag is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No tag {ref!r}")
            if not any(item.label == label for item in unit.state.items):
                warnings.append(f"No desktop item is labelled {label!r}")
            if label not in tag.items:
                tag = tag.model_copy(update={"items": [*tag.items, label]})
                unit.replace(_replace_tag(unit.state, tag))
        return ServiceResult(ok=True, op=op, data={"tag": tag_payload(tag)}, warnings=warnings)

    @traced
    def remove_item(self, ref: str, label: str) -> ServiceResult:
        op = "tag_remove_item"
        with self._workspace.session() as unit:
            tag = _find(unit.state, ref)
            if tag is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No tag {ref!r}")
            if label not in tag.items:
                return ServiceResult.failure(op, NOT_FOUND, f"{label!r} is not in tag {tag.name!r}")
            tag = tag.model_copy(update={"items": [i for i in tag.items if i != label]})
            unit.replace(_replace_tag(unit.state, tag))
        return ServiceResult(ok=True, op=op, data={"tag": tag_payload(tag)})

    @traced
    def delete(self, ref: str) -> ServiceResult:
        op = "delete_tag"
        with self._workspace.session() as unit:
            tag = _find(unit.state, ref)
            if tag is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No tag {ref!r}")
            remaining = [t for t in unit.state.tags if t.id != tag.id]
            unit.replace(unit.state.model_copy(update={"tags": remaining}))
        return ServiceResult(ok=True, op=op, data={"id": tag.id, "name": tag.name})

    @traced
    def delete_all(self) -> ServiceResult:
        with self._workspace.session() as unit:
            count = len(unit.state.tags)
            if count:
                unit.replace(unit.state.model_copy(update={"tags": []}))
        return ServiceResult(ok=True, op="delete_all_tags", data={"deleted": count})

    def _update(self, op: str, ref: str, changes: Any) -> ServiceResult:
        with self._workspace.session() as unit:
            tag = _find(unit.state, ref)
            if tag is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No tag {ref!r}")
            updated = tag.model_copy(update=changes(tag))
            unit.replace(_replace_tag(unit.state, updated))
        return ServiceResult(ok=True, op=op, data={"tag": tag_payload(updated)})

    # ------------------------------------------------------------------
    # Collaborator hooks
    # ------------------------------------------------------------------

    @traced
    def suggest(self) -> ServiceResult:
        """Ask plugins for tag proposals and add the ones not already present.

        Names are compared case-insensitively, against existing tags and
        against earlier proposals in the same batch.
        """
        op = "suggest_tags"
        warnings: list[str] = []
        with self._workspace.session() as unit:
            if failure := self._no_session(op, unit):
                return failure
            proposals = self._collect(
                "suggest_tags", {"items": plugin_items(unit.state.items)}, warnings
            )

            taken = {t.name.casefold() for t in unit.state.tags}
            default_color = self._workspace.settings.tags.default_color
            created: list[Tag] = []
            for proposal in proposals:
                name = str(proposal.get("name") or "").strip()
                if not name or name.casefold() in taken:
                    continue
                taken.add(name.casefold())
                color = proposal.get("color")
                if not (isinstance(color, str) and _HEX_COLOR.match(color)):
                    color = default_color
                created.append(
                    Tag(id=generate_id("tag"), name=name, color=color, expanded=False)
                )
            if created:
                unit.replace(unit.state.model_copy(update={"tags": [*unit.state.tags, *created]}))

        return ServiceResult(
            ok=True,
            op=op,
            data={"proposed": len(proposals), "created": [tag_payload(t) for t in created]},
            warnings=warnings,
        )

    @traced
    def assign(self) -> ServiceResult:
        """Ask plugins to distribute item labels over the existing tags.

        Assigned labels are merged into each tag without duplicates;
        assignments naming unknown tags are ignored.
        """
        op = "assign_tags"
        warnings: list[str] = []
        with self._workspace.session() as unit:
            if failure := self._no_session(op, unit):
                return failure
            state = unit.state
            if not state.tags:
                return ServiceResult.failure(op, NOT_FOUND, "No tags to assign to")
            assignments = self._collect(
                "assign_tags",
                {
                    "items": plugin_items(state.items),
                    "existing_tags": [{"name": t.name, "items": list(t.items)} for t in state.tags],
                },
                warnings,
            )

            incoming: dict[str, list[str]] = {}
            for assignment in assignments:
                files = assignment.get("files") or []
                incoming.setdefault(str(assignment.get("tagName", "")), []).extend(
                    str(f) for f in files
                )

            total = 0
            tags: list[Tag] = []
            for tag in state.tags:
                wanted = dict.fromkeys(incoming.get(tag.name, []))
                additions = [f for f in wanted if f not in tag.items]
                total += len(additions)
                if additions:
                    tag = tag.model_copy(update={"items": [*tag.items, *additions]})
                tags.append(tag)
            if total:
                unit.replace(state.model_copy(update={"tags": tags}))

        assigned_labels = {f for files in incoming.values() for f in files}
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "assigned": total,
                "files": len(assigned_labels),
                "tags": [tag_payload(t) for t in tags],
            },
            warnings=warnings,
        )
