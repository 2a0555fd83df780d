from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pytest

from tmark.models import AliasEntry
from tmark.multiplexer import Multiplexer
from tmark.storage import AliasStorage


class FakeMultiplexer(Multiplexer):
    """In-memory multiplexer that records every call"""

    def __init__(self, sessions: Optional[List[str]] = None):
        self.sessions = list(sessions or [])
        self.created = []
        self.attached = []

    def list_sessions(self) -> List[str]:
        return list(self.sessions)

    def create_session(self, name: str, path: str) -> None:
        self.created.append((name, path))
        self.sessions.append(name)

    def attach_session(self, name: str) -> None:
        self.attached.append(name)


@pytest.fixture
def home(tmp_path, monkeypatch) -> Path:
    home = tmp_path.resolve() / "tmark-home"
    home.mkdir()
    monkeypatch.setenv("TMARK_HOME", str(home))
    return home


@pytest.fixture
def storage(home) -> AliasStorage:
    return AliasStorage(home)


@pytest.fixture
def project_dir(tmp_path) -> Path:
    project = tmp_path.resolve() / "myproject"
    project.mkdir()
    return project


@pytest.fixture
def other_dir(tmp_path) -> Path:
    other = tmp_path.resolve() / "other"
    other.mkdir()
    return other


@pytest.fixture
def fake_mux() -> FakeMultiplexer:
    return FakeMultiplexer()


@pytest.fixture
def entry(project_dir) -> AliasEntry:
    return AliasEntry(
        alias="proj",
        path=str(project_dir),
        created_at=datetime(2025, 10, 24, 16, 34, 21, 653023),
    )
