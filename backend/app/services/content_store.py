"""
Content Store Service

Creates, lists, likes and comments on posts. Every piece of user text is
run through the moderation filter before it is persisted.
"""
import logging
from typing import Optional

from tortoise.expressions import F

from app.core.errors import PostNotFoundError, ValidationError
from app.models.post import Comment, Post
from app.services.moderation import ModerationFilter, Verdict

logger = logging.getLogger("uvicorn.error")

_MAX_POST_ID = 2**31 - 1  # IntField primary key range


def _parse_post_id(post_id) -> int:
    try:
        pid = int(post_id)
    except (TypeError, ValueError):
        raise PostNotFoundError("Post not found")
    if pid < 1 or pid > _MAX_POST_ID:
        raise PostNotFoundError("Post not found")
    return pid


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class ContentStore:
    """Post persistence gated by a ModerationFilter"""

    def __init__(self, moderation: ModerationFilter):
        self.moderation = moderation

    @staticmethod
    def validate_post_fields(title: Optional[str], content: Optional[str]) -> None:
        if _is_blank(title) or _is_blank(content):
            raise ValidationError("Title and content are required fields")

    async def create_post(
        self,
        title: Optional[str],
        content: Optional[str],
        author: str,
        media: Optional[str] = None,
    ) -> Post:
        """
        Create a post.

        Title and content are classified independently (both calls always
        happen); the post is flagged if either one is inappropriate.

        Raises:
            ValidationError: title or content missing or blank
        """
        self.validate_post_fields(title, content)

        title_verdict, content_verdict = await self.moderation.classify_many(title, content)
        is_title_flagged = title_verdict is Verdict.INAPPROPRIATE
        is_content_flagged = content_verdict is Verdict.INAPPROPRIATE
        logger.info("[posts] title flagged as inappropriate: %s", is_title_flagged)
        logger.info("[posts] content flagged as inappropriate: %s", is_content_flagged)

        post = await Post.create(
            title=title,
            content=content,
            file=media,
            is_flagged=is_title_flagged or is_content_flagged,
            username=author,
        )
        logger.info("[posts] created post id=%s by %s file=%s", post.id, author, media)
        return post

    async def list_posts(self) -> list[Post]:
        """All posts in insertion order. Presentation order is the client's concern."""
        return await Post.all().order_by("id")

    async def get_post(self, post_id) -> Post:
        post = await Post.get_or_none(id=_parse_post_id(post_id))
        if not post:
            raise PostNotFoundError("Post not found")
        return post

    async def add_comment(self, post_id, text: Optional[str], author: str) -> Post:
        """
        Append a moderated comment to a post.

        Load, append and save is not atomic: two comments arriving at the same
        time on the same post can overwrite each other.

        Raises:
            PostNotFoundError: no such post (checked before the text)
            ValidationError: comment text missing or blank
        """
        post = await self.get_post(post_id)
        if _is_blank(text):
            raise ValidationError("Comment text is required")

        is_flagged = await self.moderation.is_flagged(text)
        logger.info("[posts] comment on post %s flagged as inappropriate: %s", post.id, is_flagged)

        comment = Comment(text=text, is_flagged=is_flagged, username=author)
        post.comments = [*(post.comments or []), comment.to_document()]
        await post.save(update_fields=["comments"])
        return post

    async def like_post(self, post_id) -> Post:
        """
        Increment the like counter by exactly one.

        The increment runs as a single UPDATE ... SET likes = likes + 1, so
        concurrent likes are not lost.

        Raises:
            PostNotFoundError: no such post
        """
        pid = _parse_post_id(post_id)
        updated = await Post.filter(id=pid).update(likes=F("likes") + 1)
        if not updated:
            raise PostNotFoundError("Post not found")
        logger.info("[posts] liked post %s", pid)
        return await self.get_post(pid)
