"""ImportService: load a desktop into the workspace session."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from deskctl.domain.importer import parse_desktop_info
from deskctl.domain.models import DesktopItem
from deskctl.domain.session import DesktopSession
from deskctl.services._helpers import item_payload
from deskctl.services.base import BaseService
from deskctl.services.result import IMPORT_FAILED, ServiceResult
from deskctl.services.telemetry import trace_span, traced

_ITEM_LIST = TypeAdapter(list[DesktopItem])


class ImportService(BaseService):
    """Replace the workspace desktop with an imported item collection.

    Tags and saved rule sets survive an import; history and active rules
    belong to the previous desktop and are cleared.
    """

    @traced
    def import_file(self, path: Path, *, icon_dir: Path | None = None) -> ServiceResult:
        """Import the exporter's text description.

        Icon file names are resolved against *icon_dir* (default: the
        directory holding *path*).
        """
        op = "import_file"
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            return ServiceResult.failure(op, IMPORT_FAILED, f"Cannot read {path}: {exc}")

        icons = _icon_map(icon_dir or path.parent)
        with trace_span("parse") as span:
            items = parse_desktop_info(text, icons)
            if span:
                span.annotate("items", len(items))
                span.annotate("icons", len(icons))
        return self._replace_desktop(op, str(path), items)

    @traced
    def import_json(self, path: Path) -> ServiceResult:
        """Import a JSON item list (or ``{"items": [...]}``) in camelCase or snake_case."""
        op = "import_json"
        try:
            raw: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            return ServiceResult.failure(op, IMPORT_FAILED, f"Cannot read {path}: {exc}")

        if isinstance(raw, dict):
            raw = raw.get("items", [])
        try:
            items = _ITEM_LIST.validate_python(raw)
        except ValidationError as exc:
            errors = exc.errors(include_url=False, include_context=False)
            return ServiceResult.failure(
                op, IMPORT_FAILED, f"Invalid item data in {path}", errors=errors
            )
        return self._replace_desktop(op, str(path), items)

    def _replace_desktop(self, op: str, source: str, items: list[DesktopItem]) -> ServiceResult:
        if not items:
            return ServiceResult.failure(op, IMPORT_FAILED, f"No desktop items found in {source}")

        counts = Counter(item.id for item in items)
        duplicates = sorted(item_id for item_id, n in counts.items() if n > 1)
        if duplicates:
            return ServiceResult.failure(
                op, IMPORT_FAILED, "Duplicate item ids in import", ids=duplicates
            )

        warnings: list[str] = []
        with self._workspace.session() as unit:
            previous = unit.state
            unit.replace(
                DesktopSession(
                    source=source,
                    items=items,
                    tags=previous.tags,
                    saved_rules=previous.saved_rules,
                )
            )

        self._dispatch_event("post_import", {"source": source, "item_count": len(items)}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"source": source, "count": len(items), "items": item_payload(items)},
            warnings=warnings,
        )


def _icon_map(icon_dir: Path) -> dict[str, str]:
    """Map exported icon file names to ``file://`` URLs."""
    if not icon_dir.is_dir():
        return {}
    return {p.name: p.resolve().as_uri() for p in icon_dir.glob("*.png") if p.is_file()}
