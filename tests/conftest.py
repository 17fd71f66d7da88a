"""Shared pytest fixtures for deskctl tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from deskctl.config.settings import DeskSettings
from deskctl.domain.models import DesktopItem
from deskctl.domain.session import DesktopSession
from deskctl.infrastructure.workspace import Workspace
from deskctl.services.telemetry import disable_telemetry

SAMPLE_EXPORT = """\
[1] Report.docx
    位置: (120, 40)
    路徑: C:\\Users\\me\\Desktop\\Report.docx
    圖示: 已儲存 (Icon file: icon_1.png)
-----------------------------------
[2] Projects
    位置: (20, 20)
    路徑: C:\\Users\\me\\Desktop\\Projects
    圖示: 資料夾
-----------------------------------
[3] Chrome.lnk
    位置: (20, 130)
    路徑: 找不到路徑
    圖示: 已儲存
-----------------------------------
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary workspace directory, isolated from any ambient config."""
    monkeypatch.delenv("DESKCTL_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def workspace(workspace_root: Path) -> Workspace:
    """Workspace on a temp directory with default settings and no session yet."""
    return Workspace(DeskSettings.from_cli(workspace_root=workspace_root))


@pytest.fixture
def make_item() -> Callable[..., DesktopItem]:
    """Factory for desktop items: ``make_item("1", "a.txt", x=20, y=20)``."""

    def _make(item_id: str, label: str, **fields: Any) -> DesktopItem:
        return DesktopItem(id=item_id, label=label, **fields)

    return _make


@pytest.fixture
def seed_session(workspace: Workspace) -> Callable[..., DesktopSession]:
    """Write a session with the given fields straight to the workspace store."""

    def _seed(**fields: Any) -> DesktopSession:
        session = DesktopSession(**fields)
        workspace.store.save(session)
        return session

    return _seed


@pytest.fixture
def export_file(workspace_root: Path) -> Path:
    """A desktop description export with three items and one icon file."""
    path = workspace_root / "desktop_info.txt"
    path.write_text(SAMPLE_EXPORT, encoding="utf-8")
    (workspace_root / "icon_1.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    return path


@pytest.fixture
def _isolated_workspace(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp workspace so the CLI uses it.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(workspace_root)


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo the logging and telemetry setup that CLI invocations perform."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    disable_telemetry()
