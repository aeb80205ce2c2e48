# app/core/context.py
"""
Service context: the explicitly constructed set of collaborators a request
handler needs. Built once at startup, stored on app.state.services and
closed at shutdown.
"""
from dataclasses import dataclass
from typing import Optional

import httpx

from app.config import Settings
from app.services.auth_gateway import AuthGateway
from app.services.content_store import ContentStore
from app.services.media_relay import MediaStore, get_media_store
from app.services.moderation import ModerationFilter


@dataclass
class ServiceContext:
    settings: Settings
    http_client: httpx.AsyncClient
    auth: AuthGateway
    moderation: ModerationFilter
    posts: ContentStore
    media: MediaStore

    async def aclose(self) -> None:
        await self.media.aclose()
        await self.http_client.aclose()


def build_services(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    media: Optional[MediaStore] = None,
) -> ServiceContext:
    """
    Wire up all services for one application instance.

    Args:
        settings: Configuration to build from
        transport: Optional httpx transport (tests pass a MockTransport)
        media: Optional pre-built media store, overriding MEDIA_BACKEND
    """
    http_client = httpx.AsyncClient(timeout=settings.moderation_timeout_seconds, transport=transport)
    moderation = ModerationFilter.from_settings(settings, http_client=http_client)
    return ServiceContext(
        settings=settings,
        http_client=http_client,
        auth=AuthGateway.from_settings(settings),
        moderation=moderation,
        posts=ContentStore(moderation),
        media=media or get_media_store(settings),
    )
