# core/script_dao.py

import logging
from concurrent.futures import Future
from datetime import datetime
from typing import Callable, List, Optional, TYPE_CHECKING

from pony.orm import db_session, desc

from core.errors import ScriptVersionError, ValidationError
from core.live_list import LiveList
from data.converters import from_entity, sync_status_to_ordinal, to_columns, to_epoch_millis, utc_now
from data.script import Script, SyncStatus

if TYPE_CHECKING:
    from core.db import ScriptDatabase

log = logging.getLogger(__name__)


class ScriptDao:
    """
    Typed access to saved_scripts.

    Every call is queued on the database worker. One-shot calls return a
    Future; list queries return a LiveList that is re-pushed after every
    write. Reads skip tombstoned rows except the sync queries, which must
    see them to propagate deletions.

    Missing ids are not errors: get_by_id resolves to None, update and
    both deletes do nothing.
    """

    def __init__(self, database: "ScriptDatabase"):
        self._database = database
        self._submit = database.submit
        self._invalidation = database.invalidation
        self.SavedScript = database.SavedScript

    # ── Live lists ───────────────────────────────────────────

    def all_scripts(self) -> LiveList[Script]:
        """Every script, newest edit first."""
        return self._live(self._all_scripts)

    def scripts_by_template(self, template_type: str) -> LiveList[Script]:
        return self._live(lambda: self._scripts_by_template(template_type))

    def scripts_by_user(self, user_id: str) -> LiveList[Script]:
        return self._live(lambda: self._scripts_by_user(user_id))

    # ── One-shot reads ───────────────────────────────────────

    def get_by_id(self, script_id: int) -> "Future[Optional[Script]]":
        return self._submit(self._get_by_id, script_id)

    def get_by_firebase_id(self, firebase_id: str) -> "Future[Optional[Script]]":
        return self._submit(self._get_by_firebase_id, firebase_id)

    def get_by_status(self, status: SyncStatus) -> "Future[List[Script]]":
        return self._submit(self._get_by_status, status)

    def get_unsynced(self) -> "Future[List[Script]]":
        """Scripts never synced or waiting to be pushed again."""
        return self._submit(self._get_unsynced)

    def get_conflicted(self) -> "Future[List[Script]]":
        return self._submit(self._get_by_status, SyncStatus.CONFLICT)

    def pending_sync_count(self) -> "Future[int]":
        return self._submit(self._pending_sync_count)

    def count_by_template(self, template_type: str, include_deleted: bool = False) -> "Future[int]":
        """Live scripts of `template_type`; tombstones too with include_deleted."""
        return self._submit(self._count_by_template, template_type, include_deleted)

    # ── Writes ───────────────────────────────────────────────

    def insert(self, script: Script) -> "Future[int]":
        """
        Save `script` and resolve to its id. A script whose id already exists
        replaces that row entirely.
        """
        return self._write(self._insert, script)

    def update(self, script: Script) -> "Future[None]":
        """Overwrite the row with script.id. No-op when the row is gone."""
        return self._write(self._update, script)

    def delete(self, script: Script) -> "Future[None]":
        return self._write(self._delete_by_id, script.id)

    def delete_by_id(self, script_id: int) -> "Future[None]":
        return self._write(self._delete_by_id, script_id)

    def soft_delete(self, script_id: int, when: Optional[datetime] = None) -> "Future[None]":
        """Tombstone the row so the deletion can be pushed to the remote copy."""
        return self._write(self._soft_delete, script_id, when)

    def update_sync_status(self, script_id: int, status: SyncStatus,
                           when: Optional[datetime] = None) -> "Future[None]":
        return self._write(self._update_sync_status, script_id, status, when)

    def update_firebase_id(self, script_id: int, firebase_id: str,
                           status: SyncStatus = SyncStatus.SYNCED,
                           when: Optional[datetime] = None) -> "Future[None]":
        return self._write(self._update_firebase_id, script_id, firebase_id, status, when)

    # ── Plumbing ─────────────────────────────────────────────

    def _live(self, query: Callable[[], List[Script]]) -> LiveList[Script]:
        return LiveList(query, self._submit, self._invalidation)

    def _write(self, fn: Callable, *args) -> Future:
        def run():
            result = fn(*args)
            # fn's db_session has committed by now
            self._invalidation.invalidate()
            return result
        return self._submit(run)

    # ── Worker-side queries ──────────────────────────────────

    @db_session
    def _all_scripts(self) -> List[Script]:
        S = self.SavedScript
        query = S.select(lambda s: not s.is_deleted).order_by(desc(S.updated_at), desc(S.id))
        return [from_entity(rec) for rec in query]

    @db_session
    def _scripts_by_template(self, template_type: str) -> List[Script]:
        S = self.SavedScript
        query = S.select(
            lambda s: s.template_type == template_type and not s.is_deleted
        ).order_by(desc(S.updated_at), desc(S.id))
        return [from_entity(rec) for rec in query]

    @db_session
    def _scripts_by_user(self, user_id: str) -> List[Script]:
        S = self.SavedScript
        query = S.select(
            lambda s: s.user_id == user_id and not s.is_deleted
        ).order_by(desc(S.updated_at), desc(S.id))
        return [from_entity(rec) for rec in query]

    @db_session
    def _get_by_id(self, script_id: int) -> Optional[Script]:
        rec = self.SavedScript.get(id=script_id, is_deleted=False)
        return from_entity(rec) if rec else None

    @db_session
    def _get_by_firebase_id(self, firebase_id: str) -> Optional[Script]:
        rec = self.SavedScript.select(lambda s: s.firebase_id == firebase_id).first()
        return from_entity(rec) if rec else None

    @db_session
    def _get_by_status(self, status: SyncStatus) -> List[Script]:
        ordinal = sync_status_to_ordinal(status)
        S = self.SavedScript
        query = S.select(lambda s: s.sync_status == ordinal).order_by(S.id)
        return [from_entity(rec) for rec in query]

    @db_session
    def _get_unsynced(self) -> List[Script]:
        not_synced = sync_status_to_ordinal(SyncStatus.NOT_SYNCED)
        pending = sync_status_to_ordinal(SyncStatus.PENDING)
        S = self.SavedScript
        query = S.select(
            lambda s: s.sync_status == not_synced or s.sync_status == pending
        ).order_by(S.id)
        return [from_entity(rec) for rec in query]

    @db_session
    def _pending_sync_count(self) -> int:
        not_synced = sync_status_to_ordinal(SyncStatus.NOT_SYNCED)
        pending = sync_status_to_ordinal(SyncStatus.PENDING)
        return self.SavedScript.select(
            lambda s: s.sync_status == not_synced or s.sync_status == pending
        ).count()

    @db_session
    def _count_by_template(self, template_type: str, include_deleted: bool) -> int:
        query = self.SavedScript.select(lambda s: s.template_type == template_type)
        if not include_deleted:
            query = query.filter(lambda s: not s.is_deleted)
        return query.count()

    # ── Worker-side writes ───────────────────────────────────

    @db_session
    def _insert(self, script: Script) -> int:
        values = to_columns(script)
        if script.id is None:
            rec = self.SavedScript(**values)
        else:
            rec = self.SavedScript.get(id=script.id)
            if rec is not None:
                log.debug("Replacing saved script %d", script.id)
                rec.set(**values)
            else:
                rec = self.SavedScript(id=script.id, **values)
        rec.flush()
        return rec.id

    @db_session
    def _update(self, script: Script) -> None:
        if script.id is None:
            raise ValidationError("Cannot update a script that was never saved")
        rec = self.SavedScript.get(id=script.id)
        if rec is None:
            log.debug("Update skipped, script %d does not exist", script.id)
            return
        if script.version < rec.version:
            raise ScriptVersionError(
                f"Script {script.id} is at version {rec.version}, refusing version {script.version}"
            )
        rec.set(**to_columns(script))

    @db_session
    def _delete_by_id(self, script_id: Optional[int]) -> None:
        rec = self.SavedScript.get(id=script_id) if script_id is not None else None
        if rec is None:
            log.debug("Delete skipped, script %s does not exist", script_id)
            return
        rec.delete()

    @db_session
    def _soft_delete(self, script_id: int, when: Optional[datetime]) -> None:
        rec = self.SavedScript.get(id=script_id)
        if rec is None:
            return
        millis = to_epoch_millis(when or utc_now())
        rec.set(
            is_deleted=True,
            updated_at=max(millis, rec.updated_at),
            version=rec.version + 1,
            sync_status=sync_status_to_ordinal(SyncStatus.PENDING),
        )

    @db_session
    def _update_sync_status(self, script_id: int, status: SyncStatus,
                            when: Optional[datetime]) -> None:
        rec = self.SavedScript.get(id=script_id)
        if rec is None:
            return
        rec.set(
            sync_status=sync_status_to_ordinal(status),
            last_sync_at=to_epoch_millis(when or utc_now()),
        )

    @db_session
    def _update_firebase_id(self, script_id: int, firebase_id: str, status: SyncStatus,
                            when: Optional[datetime]) -> None:
        rec = self.SavedScript.get(id=script_id)
        if rec is None:
            return
        rec.set(
            firebase_id=firebase_id,
            sync_status=sync_status_to_ordinal(status),
            last_sync_at=to_epoch_millis(when or utc_now()),
        )
