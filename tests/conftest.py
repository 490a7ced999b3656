from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

# Garante que o pacote complaints seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from complaints.core import config as core_config  # noqa: E402
from complaints.db import models  # noqa: E402
from complaints.db import session as db_session  # noqa: E402
from complaints.repositories.base import StorageError  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.reset_engine()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    db_session.reset_engine()
    core_config.get_settings.cache_clear()


class FakeBackend:
    """In-memory ComplaintBackend recording every call in a shared journal."""

    def __init__(self, name, data=None, *, fail_load=False, fail_save=False, journal=None):
        self.name = name
        self.data = copy.deepcopy(data)
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.journal = journal if journal is not None else []
        self.saves = []

    def prepare(self):
        self.journal.append((self.name, "prepare"))

    def load(self):
        self.journal.append((self.name, "load"))
        if self.fail_load:
            raise StorageError(f"{self.name} unreadable")
        return copy.deepcopy(self.data)

    def save(self, complaints):
        self.journal.append((self.name, "save"))
        if self.fail_save:
            raise StorageError(f"{self.name} unwritable")
        self.data = copy.deepcopy(list(complaints))
        self.saves.append(self.data)


@pytest.fixture()
def journal():
    return []


@pytest.fixture()
def make_backend(journal):
    def _make(name, data=None, **kwargs):
        return FakeBackend(name, data, journal=journal, **kwargs)

    return _make
