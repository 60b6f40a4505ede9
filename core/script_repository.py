# core/script_repository.py

from concurrent.futures import Future
from datetime import datetime
from typing import List, Optional

from core.live_list import LiveList
from core.script_dao import ScriptDao
from data.script import Script, SyncStatus


class ScriptRepository:
    """
    What the application talks to. Forwards each call to the DAO unchanged,
    so tests and the UI can swap in a fake.
    """

    def __init__(self, dao: ScriptDao):
        self._dao = dao

    def all_scripts(self) -> LiveList[Script]:
        return self._dao.all_scripts()

    def scripts_by_template(self, template_type: str) -> LiveList[Script]:
        return self._dao.scripts_by_template(template_type)

    def scripts_by_user(self, user_id: str) -> LiveList[Script]:
        return self._dao.scripts_by_user(user_id)

    def get_by_id(self, script_id: int) -> "Future[Optional[Script]]":
        return self._dao.get_by_id(script_id)

    def get_by_firebase_id(self, firebase_id: str) -> "Future[Optional[Script]]":
        return self._dao.get_by_firebase_id(firebase_id)

    def get_by_status(self, status: SyncStatus) -> "Future[List[Script]]":
        return self._dao.get_by_status(status)

    def get_unsynced(self) -> "Future[List[Script]]":
        return self._dao.get_unsynced()

    def get_conflicted(self) -> "Future[List[Script]]":
        return self._dao.get_conflicted()

    def pending_sync_count(self) -> "Future[int]":
        return self._dao.pending_sync_count()

    def count_by_template(self, template_type: str, include_deleted: bool = False) -> "Future[int]":
        return self._dao.count_by_template(template_type, include_deleted)

    def insert(self, script: Script) -> "Future[int]":
        return self._dao.insert(script)

    def update(self, script: Script) -> "Future[None]":
        return self._dao.update(script)

    def delete(self, script: Script) -> "Future[None]":
        return self._dao.delete(script)

    def delete_by_id(self, script_id: int) -> "Future[None]":
        return self._dao.delete_by_id(script_id)

    def soft_delete(self, script_id: int, when: Optional[datetime] = None) -> "Future[None]":
        return self._dao.soft_delete(script_id, when)

    def update_sync_status(self, script_id: int, status: SyncStatus,
                           when: Optional[datetime] = None) -> "Future[None]":
        return self._dao.update_sync_status(script_id, status, when)

    def update_firebase_id(self, script_id: int, firebase_id: str,
                           status: SyncStatus = SyncStatus.SYNCED,
                           when: Optional[datetime] = None) -> "Future[None]":
        return self._dao.update_firebase_id(script_id, firebase_id, status, when)
