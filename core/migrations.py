# core/migrations.py

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Dict, List

from core.errors import MigrationError

log = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent / "data/migrations"
SCRIPTS_TABLE  = "saved_scripts"


def migration_version(path: Path) -> int:
    """002_add_sync_fields.py -> 2"""
    return int(path.name.split("_", 1)[0])


def load_migration(path: Path) -> Dict[str, Callable]:
    """Execute a migration file and return its namespace (apply, validate, ...)."""
    code = compile(path.read_text(encoding="utf-8"), path.name, "exec")
    scope: Dict[str, Callable] = {}
    exec(code, scope)
    if not callable(scope.get("apply")):
        raise MigrationError(f"{path.name} defines no apply(cursor)")
    return scope


def read_user_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def has_scripts_table(conn: sqlite3.Connection) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
        (SCRIPTS_TABLE,)
    ).fetchone()
    return row is not None


def run_migrations(db_path: Path, target_version: int,
                   migration_dir: Path = MIGRATIONS_DIR) -> List[str]:
    """
    Bring an existing database file up to `target_version`.

    1) A file without saved_scripts is fresh; the ORM mapping creates it at
       the target version, so nothing runs here.
    2) PRAGMA user_version is the schema version. 0 with an existing table
       means an unstamped file: stamped as `target_version` when every
       migration validate() already passes, otherwise treated as version 1.
    3) Each pending migrations/NNN_*.py runs in its own transaction together
       with its validate() check and the user_version bump.

    Returns the filenames applied, in order. Any failure rolls the current
    migration back and raises MigrationError.
    """
    conn = sqlite3.connect(str(db_path), isolation_level=None)
    try:
        if not has_scripts_table(conn):
            return []

        stamped = read_user_version(conn)
        if stamped == 0 and _layout_is_current(conn, migration_dir, target_version):
            # Created at the current layout but never stamped
            log.info("Stamping unversioned %s at schema version %d", db_path.name, target_version)
            conn.execute(f"PRAGMA user_version = {target_version}")
            return []

        current = max(stamped, 1)
        if current > target_version:
            raise MigrationError(
                f"{db_path.name} is at schema version {current}, newer than {target_version}"
            )

        pending = [
            path for path in sorted(migration_dir.glob("*.py"))
            if current < migration_version(path) <= target_version
        ]

        applied = []
        for path in pending:
            _apply_one(conn, path)
            applied.append(path.name)
        return applied
    finally:
        conn.close()


def _apply_one(conn: sqlite3.Connection, path: Path) -> None:
    scope = load_migration(path)
    version = migration_version(path)
    log.info("Applying migration: %s", path.name)

    cursor = conn.cursor()
    cursor.execute("BEGIN")
    try:
        scope["apply"](cursor)
        validate = scope.get("validate")
        if callable(validate) and not validate(cursor):
            raise MigrationError(f"{path.name} did not validate")
        cursor.execute(f"PRAGMA user_version = {version}")
        cursor.execute("COMMIT")
    except MigrationError:
        cursor.execute("ROLLBACK")
        raise
    except sqlite3.Error as exc:
        cursor.execute("ROLLBACK")
        raise MigrationError(f"{path.name} failed: {exc}") from exc


def _layout_is_current(conn: sqlite3.Connection, migration_dir: Path, target_version: int) -> bool:
    """True if every migration up to `target_version` validates as already applied."""
    checks = [
        load_migration(path).get("validate")
        for path in sorted(migration_dir.glob("*.py"))
        if 1 < migration_version(path) <= target_version
    ]
    cursor = conn.cursor()
    return all(callable(check) and check(cursor) for check in checks)


def stamp_schema_version(db_path: Path, version: int) -> None:
    """Record `version` on a freshly created file; never lowers it."""
    conn = sqlite3.connect(str(db_path), isolation_level=None)
    try:
        if read_user_version(conn) < version:
            conn.execute(f"PRAGMA user_version = {version}")
    finally:
        conn.close()
