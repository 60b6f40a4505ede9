# core/validation.py

import re

from core.config import MAX_CONTENT_LENGTH, MAX_TEMPLATE_LENGTH
from core.errors import ValidationError
from data.script import Script

USER_ID_RE     = re.compile(r"^[A-Za-z0-9_-]+$")
FIREBASE_ID_RE = re.compile(r"^[A-Za-z0-9]+$")

# Markup, path traversal and SQL keywords that have no business in a template name
DANGEROUS_PATTERNS = (
    "<script",
    "javascript:",
    "onerror=",
    "onclick=",
    "onload=",
    "../",
    "..\\",
    "drop table",
    "delete from",
    "insert into",
    "update set",
)


def contains_dangerous_pattern(text: str) -> bool:
    lowered = text.lower()
    return any(p in lowered for p in DANGEROUS_PATTERNS)


def validate_content(content: str) -> str:
    if not content or not content.strip():
        raise ValidationError("Script content cannot be empty")
    if len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError(f"Script content is too long (max {MAX_CONTENT_LENGTH} characters)")
    return content


def validate_template_name(name: str) -> str:
    if not name or not name.strip():
        raise ValidationError("Template name cannot be empty")
    if len(name) > MAX_TEMPLATE_LENGTH:
        raise ValidationError(f"Template name is too long (max {MAX_TEMPLATE_LENGTH} characters)")
    if contains_dangerous_pattern(name):
        raise ValidationError("Template name contains invalid characters")
    return name.strip()


def validate_user_id(user_id: str) -> str:
    if not user_id or not USER_ID_RE.match(user_id):
        raise ValidationError(f"Invalid user ID format: {user_id!r}")
    return user_id


def validate_firebase_id(firebase_id: str) -> str:
    if not firebase_id or not FIREBASE_ID_RE.match(firebase_id):
        raise ValidationError(f"Invalid Firebase ID format: {firebase_id!r}")
    return firebase_id


def validate_script(script: Script) -> Script:
    """Check a script before it is saved; returns it unchanged."""
    validate_template_name(script.template_type)
    validate_content(script.content)
    if script.user_id is not None:
        validate_user_id(script.user_id)
    if script.firebase_id is not None:
        validate_firebase_id(script.firebase_id)
    return script
