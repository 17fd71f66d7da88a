"""ID prefixes and generation.

Every entity created at runtime (implicit folders, zip markers, tags,
rules, saved rule sets, history entries) gets ``{prefix}-{12 hex chars}``.
Imported desktop items keep the ids assigned by the exporter.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import uuid

ID_PREFIXES: dict[str, str] = {
    "folder": "folder-",
    "zip": "zip-",
    "tag": "tag-",
    "rule": "rule-",
    "saved": "saved-",
    "history": "h-",
}


def generate_id(kind: str) -> str:
    """Return a fresh id for an entity of *kind* (a key of :data:`ID_PREFIXES`)."""
    prefix = ID_PREFIXES.get(kind)
    if prefix is None:
        msg = f"Unknown id kind: {kind!r}"
        raise ValueError(msg)
    return f"{prefix}{uuid.uuid4().hex[:12]}"

