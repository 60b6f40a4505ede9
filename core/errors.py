# core/errors.py
# Project exceptions. Storage engine errors (sqlite3, Pony) are not wrapped;
# they reach the caller unchanged.


class ScriptMineError(Exception):
    """Root exception for ScriptMine errors."""


# ── Database ─────────────────────────────────────────────────

class DatabaseError(ScriptMineError):
    """Raised when the local store is unusable or its data is inconsistent."""


class MigrationError(DatabaseError):
    """Raised when a schema migration fails. The database must not be opened."""


class CorruptedDataError(DatabaseError):
    """Raised when a stored value cannot be converted back to a Script."""


class ScriptVersionError(DatabaseError):
    """Raised when an update would move a script's version backwards."""


# ── Input ────────────────────────────────────────────────────

class ValidationError(ScriptMineError):
    """Raised when a script or form value is rejected before saving."""


class TemplateError(ScriptMineError):
    """Raised for unknown templates or malformed template definitions."""
