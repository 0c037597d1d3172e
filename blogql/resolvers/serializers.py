"""
Response shaping for stored documents.

Each serializer whitelists the fields a client may see. Identifiers become
strings and timestamps ISO-8601 strings; the password hash is never copied.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Format a UTC timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def serialize_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize a user document."""
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name", ""),
        "email": doc.get("email", ""),
        "status": doc.get("status", ""),
        "posts": [str(p) for p in doc.get("posts", [])],
    }


def serialize_post(
    doc: Dict[str, Any],
    creator: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Serialize a post document.

    Args:
        doc: Post document, creator populated or not
        creator: User document to use as the creator instead of ``doc["creator"]``

    Returns:
        Post dict; ``creator`` is a serialized user, or None if not populated
    """
    creator_doc = creator if creator is not None else doc.get("creator")
    return {
        "id": str(doc["_id"]),
        "title": doc.get("title", ""),
        "content": doc.get("content", ""),
        "image_url": doc.get("image_url", ""),
        "creator": serialize_user(creator_doc) if isinstance(creator_doc, dict) else None,
        "created_at": to_iso(doc.get("created_at")),
        "updated_at": to_iso(doc.get("updated_at")),
    }
