"""
Services Module

Business logic behind the HTTP routes:
- Auth Gateway: registration, login, session tokens
- Content Store: posts, likes, comments
- Moderation Filter: Gemini-backed appropriateness check
- Media Relay: attachment storage (local disk or database)
"""
from .auth_gateway import AuthGateway, Identity
from .content_store import ContentStore
from .media_relay import (
    DatabaseMediaStore,
    LocalMediaStore,
    MediaStore,
    StoredMedia,
    get_media_store,
)
from .moderation import ModerationFilter, Verdict

__all__ = [
    "AuthGateway",
    "Identity",
    "ContentStore",
    "MediaStore",
    "LocalMediaStore",
    "DatabaseMediaStore",
    "StoredMedia",
    "get_media_store",
    "ModerationFilter",
    "Verdict",
]
