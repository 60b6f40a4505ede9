# tests/test_script.py

from datetime import timedelta

import pytest

from conftest import T0, make_script
from core.errors import ValidationError
from data.script import Script, SyncStatus


class TestScriptDefaults:

    def test_new_script_is_unsaved_and_unsynced(self):
        script = Script(template_type="invoice", content="Total: 10")
        assert script.id is None
        assert script.sync_status is SyncStatus.NOT_SYNCED
        assert script.version == 1
        assert script.is_deleted is False
        assert script.firebase_id is None
        assert script.user_id is None
        assert script.last_sync_at is None

    def test_updated_at_defaults_to_created_at(self):
        script = Script(template_type="invoice", content="x", created_at=T0)
        assert script.updated_at == script.created_at == T0

    def test_updated_before_created_is_rejected(self):
        with pytest.raises(ValidationError):
            Script(template_type="invoice", content="x",
                   created_at=T0, updated_at=T0 - timedelta(seconds=1))

    def test_version_below_one_is_rejected(self):
        with pytest.raises(ValidationError):
            Script(template_type="invoice", content="x", version=0)


class TestScriptEdited:

    def test_edit_bumps_version_and_updated_at(self):
        script = make_script(id=1)
        edited = script.edited(content="Total: 20")
        assert edited.content == "Total: 20"
        assert edited.version == 2
        assert edited.updated_at > script.updated_at
        assert edited.created_at == script.created_at
        assert edited.id == 1

    def test_edit_keeps_original_untouched(self):
        script = make_script(id=1)
        script.edited(content="other")
        assert script.content == "Total: 10"
        assert script.version == 1

    def test_synced_script_becomes_pending(self):
        script = make_script(sync_status=SyncStatus.SYNCED)
        assert script.edited(content="y").sync_status is SyncStatus.PENDING

    def test_never_synced_script_stays_not_synced(self):
        script = make_script()
        assert script.edited(content="y").sync_status is SyncStatus.NOT_SYNCED

    def test_conflict_is_kept(self):
        script = make_script(sync_status=SyncStatus.CONFLICT)
        assert script.edited(content="y").sync_status is SyncStatus.CONFLICT


class TestRemoteShape:

    def test_to_remote_uses_column_names(self):
        script = make_script(firebase_id="abc123", user_id="u1", version=3,
                             form_data={"cliente": "ACME"})
        doc = script.to_remote()
        assert doc["id"] == "abc123"
        assert doc["templateType"] == "invoice"
        assert doc["generatedScript"] == "Total: 10"
        assert doc["formData"] == {"cliente": "ACME"}
        assert doc["userId"] == "u1"
        assert doc["version"] == 3
        assert doc["isDeleted"] is False

    def test_from_remote_is_synced(self):
        doc = make_script(firebase_id="abc123", user_id="u1", version=4).to_remote()
        local = Script.from_remote(doc, local_id=7)
        assert local.id == 7
        assert local.firebase_id == "abc123"
        assert local.sync_status is SyncStatus.SYNCED
        assert local.last_sync_at is not None
        assert local.version == 4
        assert local.created_at == T0

    def test_from_remote_without_ids(self):
        doc = make_script().to_remote()
        local = Script.from_remote(doc)
        assert local.firebase_id is None
        assert local.user_id is None
