"""JSON file persistence for :class:`DesktopSession`.

The session file is rewritten whole on every save. Writes go to a
sibling temp file first and are moved into place, so an interrupted
save never leaves a truncated session behind.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from deskctl.domain.session import DesktopSession

logger = logging.getLogger(__name__)

STATE_DIRNAME = ".deskctl"
SESSION_FILENAME = "session.json"


class SessionLoadError(Exception):
    """The session file exists but cannot be read as a session."""


class SessionStore:
    """Load and save one session file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @classmethod
    def for_root(cls, root: Path) -> SessionStore:
        return cls(root / STATE_DIRNAME / SESSION_FILENAME)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> DesktopSession | None:
        """Read the session, or None when no session file exists."""
        if not self.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return DesktopSession.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as exc:
            msg = f"Corrupt session file {self._path}: {exc}"
            raise SessionLoadError(msg) from exc

    def save(self, session: DesktopSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = session.model_dump(mode="json", by_alias=True, exclude_none=True)
        tmp = self._path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)
        logger.debug("Saved session to %s (%d items)", self._path, len(session.items))
