# core/db.py

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, TYPE_CHECKING

from pony.orm import Database, db_session

from core.live_list import InvalidationTracker
from core.migrations import MIGRATIONS_DIR, run_migrations, stamp_schema_version
from data.converters import to_epoch_millis, utc_now
from data.models import define_entities

if TYPE_CHECKING:
    from core.script_dao import ScriptDao

log = logging.getLogger(__name__)

SCHEMA_VERSION = 2


class ScriptDatabase:
    """
    Owns the SQLite file, its Pony mapping and the single worker thread that
    every read and write runs on.

    Construct one per process (core.app.App does) and pass it to whoever
    needs it:
      1) run pending raw-SQL migrations against an existing file
      2) bind Pony and generate the mapping, creating tables on a fresh file
      3) stamp the schema version and record the applied migrations

    A MigrationError from step 1 is fatal: the object is not constructed.
    """

    def __init__(self, db_path: Path, migration_dir: Path = MIGRATIONS_DIR):
        self.path = Path(db_path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

        applied = run_migrations(self.path, SCHEMA_VERSION, migration_dir)

        self.db = Database()
        self.Migration, self.SavedScript = define_entities(self.db)
        self.db.bind(provider="sqlite", filename=str(self.path), create_db=True)
        self.db.generate_mapping(create_tables=True)

        stamp_schema_version(self.path, SCHEMA_VERSION)
        self._record_migrations(applied)
        # Later work happens on the worker thread; drop this thread's connection.
        self.db.disconnect()

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="scriptmine-db")
        self.invalidation = InvalidationTracker(self.submit)
        self._dao: Optional["ScriptDao"] = None

        log.info("Opened %s at schema version %d", self.path, SCHEMA_VERSION)

    @db_session
    def _record_migrations(self, applied: List[str]) -> None:
        for filename in applied:
            self.Migration(filename=filename, applied_at=to_epoch_millis(utc_now()))

    def applied_migrations(self) -> "Future[List[str]]":
        return self.submit(self._applied_migrations)

    @db_session
    def _applied_migrations(self) -> List[str]:
        return [m.filename for m in self.Migration.select().order_by(self.Migration.filename)]

    # ── Worker ───────────────────────────────────────────────

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        """Queue `fn` on the database worker. Calls run one at a time, in order."""
        return self._executor.submit(fn, *args, **kwargs)

    def barrier(self) -> None:
        """Block until everything queued so far, live-list refreshes included, has run."""
        self.submit(lambda: None).result()

    def script_dao(self) -> "ScriptDao":
        if self._dao is None:
            from core.script_dao import ScriptDao
            self._dao = ScriptDao(self)
        return self._dao

    def close(self) -> None:
        """Finish queued work and release the connection."""
        self._executor.submit(self.db.disconnect)
        self._executor.shutdown(wait=True)
        log.info("Closed %s", self.path)
