# data/migrations/002_add_sync_fields.py

import sqlite3

SYNC_COLUMNS = (
    ("firebaseId", "TEXT"),
    ("userId",     "TEXT"),
    ("syncStatus", "INTEGER NOT NULL DEFAULT 0"),
    ("lastSyncAt", "INTEGER"),
    ("version",    "INTEGER NOT NULL DEFAULT 1"),
    ("isDeleted",  "INTEGER NOT NULL DEFAULT 0"),
)

INDEXED_COLUMNS = ("syncStatus", "firebaseId", "userId", "isDeleted")


def apply(cursor):
    """
    Migration 002: prepare saved_scripts for sync with a remote copy.
    Existing rows become NOT_SYNCED (0), version 1, not deleted, with no
    remote id, owner or sync time.
    """
    for name, sql_type in SYNC_COLUMNS:
        cursor.execute(f"ALTER TABLE saved_scripts ADD COLUMN {name} {sql_type}")
    create_indexes(cursor)


def create_indexes(cursor):
    """Safe to re-run."""
    for name in INDEXED_COLUMNS:
        cursor.execute(f"""
            CREATE INDEX IF NOT EXISTS index_saved_scripts_{name}
            ON saved_scripts({name})
        """)


def validate(cursor) -> bool:
    """True if every sync column can be read back."""
    try:
        cursor.execute("""
            SELECT firebaseId, userId, syncStatus, lastSyncAt, version, isDeleted
            FROM saved_scripts LIMIT 1
        """)
        cursor.fetchall()
    except sqlite3.Error:
        return False
    return True
