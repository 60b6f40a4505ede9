# tests/test_script_repository.py

from unittest.mock import MagicMock

import pytest

from conftest import make_script
from core.script_dao import ScriptDao
from core.script_repository import ScriptRepository
from data.script import SyncStatus


@pytest.fixture
def fake_dao():
    return MagicMock(spec=ScriptDao)


class TestForwarding:
    """Every call reaches the DAO with the same arguments and its result comes back unchanged."""

    @pytest.mark.parametrize("method, args", [
        ("all_scripts", ()),
        ("scripts_by_template", ("invoice",)),
        ("scripts_by_user", ("u1",)),
        ("get_by_id", (1,)),
        ("get_by_firebase_id", ("abc",)),
        ("get_by_status", (SyncStatus.PENDING,)),
        ("get_unsynced", ()),
        ("get_conflicted", ()),
        ("pending_sync_count", ()),
        ("count_by_template", ("invoice", True)),
        ("insert", (make_script(),)),
        ("update", (make_script(id=1),)),
        ("delete", (make_script(id=1),)),
        ("delete_by_id", (1,)),
        ("soft_delete", (1, None)),
        ("update_sync_status", (1, SyncStatus.SYNCED, None)),
        ("update_firebase_id", (1, "abc", SyncStatus.SYNCED, None)),
    ])
    def test_forwards(self, fake_dao, method, args):
        repository = ScriptRepository(fake_dao)
        result = getattr(repository, method)(*args)
        getattr(fake_dao, method).assert_called_once_with(*args)
        assert result is getattr(fake_dao, method).return_value


class TestAgainstDatabase:

    def test_two_invoices_one_letter(self, repository):
        first = repository.insert(make_script("invoice", minutes=1)).result()
        second = repository.insert(make_script("invoice", minutes=2)).result()
        repository.insert(make_script("letter", minutes=3)).result()

        invoices = repository.scripts_by_template("invoice").current().result()
        assert {s.id for s in invoices} == {first, second}
