"""Shared fixtures for quickref tests."""

from pathlib import Path

import pytest

from quickref.search.backends import SearchBackend
from quickref.search.models import Invocation, InvocationOutput


class FakeBackend(SearchBackend):
    """Search backend that returns canned output instead of spawning processes.

    ``outputs`` maps (root, extension) to stdout text. Pairs listed in
    ``failures`` return a failed InvocationOutput with that error text.
    """

    tool = "fake-grep"

    def __init__(
        self,
        outputs: dict[tuple[str, str], str] | None = None,
        failures: dict[tuple[str, str], str] | None = None,
        available: bool = True,
        tool_missing: bool = False,
    ):
        self.outputs = outputs or {}
        self.failures = failures or {}
        self.available = available
        self.tool_missing = tool_missing
        self.calls: list[Invocation] = []

    def is_available(self) -> bool:
        return self.available

    def build_argv(self, text: str, root: Path, extension: str) -> list[str]:
        return [self.tool, text, str(root), extension]

    def run(self, invocation, cancel_event=None) -> InvocationOutput:
        self.calls.append(invocation)
        key = (str(invocation.root), invocation.extension)
        if self.tool_missing:
            return InvocationOutput(
                invocation, ok=False, error="No such file", tool_missing=True
            )
        if key in self.failures:
            return InvocationOutput(invocation, ok=False, error=self.failures[key])
        return InvocationOutput(invocation, stdout=self.outputs.get(key, ""))


@pytest.fixture
def unity_project(tmp_path: Path) -> Path:
    """Create a minimal Unity project with a few tracked assets."""
    project = tmp_path / "Game"
    files = {
        "Assets/Materials/Floor.mat": "%YAML 1.1\n--- !u!21 &2100000\nMaterial:\n",
        "Assets/Prefabs/Player.prefab": (
            "%YAML 1.1\n"
            "--- !u!1 &100\n"
            "GameObject:\n"
            "  m_Name: Player\n"
            "--- !u!23 &200\n"
            "MeshRenderer:\n"
            "  m_Materials:\n"
            "  - {fileID: 2100000, guid: aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa, type: 2}\n"
        ),
        "Assets/Scenes/Main.unity": (
            "%YAML 1.1\n"
            "--- !u!23 &300\n"
            "MeshRenderer:\n"
            "  m_Materials:\n"
            "  - {fileID: 2100000, guid: aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa, type: 2}\n"
        ),
        "ProjectSettings/GraphicsSettings.asset": (
            "GraphicsSettings:\n"
            "  m_Default: {fileID: 2100000, guid: aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa, type: 2}\n"
        ),
    }
    guids = {
        "Assets/Materials/Floor.mat": "a" * 32,
        "Assets/Prefabs/Player.prefab": "b" * 32,
        "Assets/Scenes/Main.unity": "c" * 32,
    }

    for rel, content in files.items():
        path = project / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    for rel, guid in guids.items():
        meta = project / f"{rel}.meta"
        meta.write_text(f"fileFormatVersion: 2\nguid: {guid}\n")

    (project / "Packages").mkdir()
    return project
