# data/converters.py
# Boundary between Script values and the integer/text columns of saved_scripts.

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from core.errors import CorruptedDataError
from data.script import Script, SyncStatus

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Persisted ordinals. Append new states with new numbers; never renumber.
SYNC_STATUS_ORDINALS: Dict[SyncStatus, int] = {
    SyncStatus.NOT_SYNCED: 0,
    SyncStatus.SYNCED:     1,
    SyncStatus.PENDING:    2,
    SyncStatus.CONFLICT:   3,
}
ORDINAL_SYNC_STATUSES: Dict[int, SyncStatus] = {
    ordinal: status for status, ordinal in SYNC_STATUS_ORDINALS.items()
}

if set(SYNC_STATUS_ORDINALS) != set(SyncStatus) or len(ORDINAL_SYNC_STATUSES) != len(SyncStatus):
    raise RuntimeError("SyncStatus ordinal table must map every state to a distinct integer")


# ── Timestamps ───────────────────────────────────────────────

def utc_now() -> datetime:
    """Current UTC time truncated to whole milliseconds."""
    return normalize_datetime(datetime.now(timezone.utc))


def normalize_datetime(value: datetime) -> datetime:
    """Aware UTC, millisecond precision. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def to_epoch_millis(value: datetime) -> int:
    return (normalize_datetime(value) - EPOCH) // timedelta(milliseconds=1)


def from_epoch_millis(millis: int) -> datetime:
    return EPOCH + timedelta(milliseconds=millis)


# ── SyncStatus ───────────────────────────────────────────────

def sync_status_to_ordinal(status: SyncStatus) -> int:
    return SYNC_STATUS_ORDINALS[status]


def sync_status_from_ordinal(ordinal: int) -> SyncStatus:
    try:
        return ORDINAL_SYNC_STATUSES[ordinal]
    except KeyError:
        raise CorruptedDataError(f"Unknown syncStatus ordinal: {ordinal!r}") from None


# ── Rows ─────────────────────────────────────────────────────

def to_columns(script: Script) -> Dict[str, Any]:
    """Entity attribute values for `script`, everything except the primary key."""
    return {
        "template_type": script.template_type,
        "client_name":   script.client_name,
        "form_data":     json.dumps(script.form_data, ensure_ascii=False, sort_keys=True),
        "content":       script.content,
        "created_at":    to_epoch_millis(script.created_at),
        "updated_at":    to_epoch_millis(script.updated_at),
        "firebase_id":   script.firebase_id,
        "user_id":       script.user_id,
        "sync_status":   sync_status_to_ordinal(script.sync_status),
        "last_sync_at":  to_epoch_millis(script.last_sync_at) if script.last_sync_at else None,
        "version":       script.version,
        "is_deleted":    script.is_deleted,
    }


def from_entity(rec) -> Script:
    """Detach a SavedScript entity into a Script. Must run inside db_session."""
    try:
        form_data = json.loads(rec.form_data) if rec.form_data else {}
    except json.JSONDecodeError as exc:
        raise CorruptedDataError(f"saved_scripts row {rec.id} has malformed formData") from exc

    return Script(
        id=rec.id,
        template_type=rec.template_type,
        client_name=rec.client_name,
        form_data=form_data,
        content=rec.content,
        created_at=from_epoch_millis(rec.created_at),
        updated_at=from_epoch_millis(rec.updated_at),
        firebase_id=rec.firebase_id,
        user_id=rec.user_id,
        sync_status=sync_status_from_ordinal(rec.sync_status),
        last_sync_at=from_epoch_millis(rec.last_sync_at) if rec.last_sync_at is not None else None,
        version=rec.version,
        is_deleted=bool(rec.is_deleted),
    )
