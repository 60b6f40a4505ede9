# tests/conftest.py

from datetime import datetime, timedelta, timezone

import pytest

from core.db import ScriptDatabase
from core.script_repository import ScriptRepository
from data.script import Script

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def database(tmp_path):
    """A fresh ScriptDatabase on a temporary SQLite file."""
    db = ScriptDatabase(tmp_path / "scripts.db")
    yield db
    db.close()


@pytest.fixture
def dao(database):
    return database.script_dao()


@pytest.fixture
def repository(dao):
    return ScriptRepository(dao)


def make_script(template_type: str = "invoice", content: str = "Total: 10", minutes: int = 0, **kwargs) -> Script:
    """Script stamped `minutes` after T0 unless timestamps are given."""
    when = T0 + timedelta(minutes=minutes)
    kwargs.setdefault("created_at", when)
    kwargs.setdefault("updated_at", when)
    return Script(template_type=template_type, content=content, **kwargs)


class Recorder:
    """Live-list subscriber that keeps every snapshot it is sent."""

    def __init__(self):
        self.snapshots = []

    def __call__(self, scripts):
        self.snapshots.append(scripts)

    @property
    def last(self):
        return self.snapshots[-1]
