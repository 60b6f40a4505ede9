# data/script.py

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

from core.errors import ValidationError


class SyncStatus(Enum):
    """
    Relationship of a local script to its remote copy.
    Persisted as an ordinal through data.converters, never through .value.
    """
    NOT_SYNCED = "not_synced"
    SYNCED     = "synced"
    PENDING    = "pending"
    CONFLICT   = "conflict"


@dataclass
class Script:
    """
    Detached, thread-safe copy of one saved_scripts row.

    Timestamps are UTC and millisecond precise, matching what the table can
    hold, so a saved script reads back equal to what was written.
    """
    template_type: str
    content:       str
    id:            Optional[int]      = None
    client_name:   str                = ""
    form_data:     Dict[str, Any]     = field(default_factory=dict)
    created_at:    Optional[datetime] = None
    updated_at:    Optional[datetime] = None
    firebase_id:   Optional[str]      = None
    user_id:       Optional[str]      = None
    sync_status:   SyncStatus         = SyncStatus.NOT_SYNCED
    last_sync_at:  Optional[datetime] = None
    version:       int                = 1
    is_deleted:    bool               = False

    def __post_init__(self) -> None:
        # Local import: converters imports this module for SyncStatus.
        from data.converters import normalize_datetime, utc_now

        self.created_at = normalize_datetime(self.created_at) if self.created_at else utc_now()
        self.updated_at = normalize_datetime(self.updated_at) if self.updated_at else self.created_at
        if self.last_sync_at is not None:
            self.last_sync_at = normalize_datetime(self.last_sync_at)

        if self.updated_at < self.created_at:
            raise ValidationError(
                f"updated_at ({self.updated_at}) is earlier than created_at ({self.created_at})"
            )
        if self.version < 1:
            raise ValidationError(f"version must start at 1, got {self.version}")

    def edited(
            self,
            content: Optional[str] = None,
            form_data: Optional[Dict[str, Any]] = None,
            client_name: Optional[str] = None
    ) -> "Script":
        """
        Return a copy carrying an edit:
          - updated_at strictly later than the current one
          - version + 1
          - a synced script becomes PENDING; other states are kept
        """
        from data.converters import utc_now

        status = self.sync_status
        if status is SyncStatus.SYNCED:
            status = SyncStatus.PENDING

        return replace(
            self,
            content=self.content if content is None else content,
            form_data=dict(self.form_data if form_data is None else form_data),
            client_name=self.client_name if client_name is None else client_name,
            updated_at=max(utc_now(), self.updated_at + timedelta(milliseconds=1)),
            version=self.version + 1,
            sync_status=status,
        )

    # ── Remote document shape ────────────────────────────────

    def to_remote(self) -> Dict[str, Any]:
        """Document as the remote store keeps it (keys match the table columns)."""
        return {
            "id":              self.firebase_id or "",
            "templateType":    self.template_type,
            "clientName":      self.client_name,
            "formData":        dict(self.form_data),
            "generatedScript": self.content,
            "createdAt":       self.created_at,
            "updatedAt":       self.updated_at,
            "userId":          self.user_id or "",
            "version":         self.version,
            "isDeleted":       self.is_deleted,
        }

    @classmethod
    def from_remote(cls, doc: Dict[str, Any], local_id: Optional[int] = None) -> "Script":
        """Build the local copy of a remote document; it is SYNCED as of now."""
        from data.converters import utc_now

        now = utc_now()
        created = doc.get("createdAt") or now
        return cls(
            id=local_id,
            template_type=doc["templateType"],
            content=doc.get("generatedScript", ""),
            client_name=doc.get("clientName", ""),
            form_data=dict(doc.get("formData") or {}),
            created_at=created,
            updated_at=doc.get("updatedAt") or created,
            firebase_id=doc.get("id") or None,
            user_id=doc.get("userId") or None,
            sync_status=SyncStatus.SYNCED,
            last_sync_at=now,
            version=int(doc.get("version", 1)),
            is_deleted=bool(doc.get("isDeleted", False)),
        )

    def __str__(self) -> str:
        return (
            f"Script(id={self.id}, template={self.template_type!r}, "
            f"client={self.client_name!r}, v{self.version}, {self.sync_status.name})"
        )
