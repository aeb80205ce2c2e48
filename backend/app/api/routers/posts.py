# app/api/routers/posts.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from app.api.deps import get_current_identity, get_services, http_error
from app.core.context import ServiceContext
from app.core.errors import AppError
from app.schemas.post import CommentIn, PostOut
from app.services.auth_gateway import Identity
from app.services.content_store import ContentStore

router = APIRouter(prefix="/posts", tags=["posts"])

@router.get("", response_model=list[PostOut])
async def list_posts(
    identity: Identity = Depends(get_current_identity),
    services: ServiceContext = Depends(get_services),
):
    """
    List every post, oldest first.

    Flagged posts are included with isFlagged=true; hiding them is up to the client.

    Raises:
        HTTPException (401/403): Missing or invalid token
    """
    posts = await services.posts.list_posts()
    return [PostOut.from_model(p) for p in posts]

@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostOut)
async def create_post(
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    identity: Identity = Depends(get_current_identity),
    services: ServiceContext = Depends(get_services),
):
    """
    Create a post from a multipart form.

    Form fields:
        - title: str (required)
        - content: str (required)
        - file: optional attachment, stored as-is

    Title and content are each checked by the moderation filter; the post is
    flagged if either is inappropriate.

    Raises:
        HTTPException (400): Title or content missing (BAD_REQUEST)
        HTTPException (401/403): Missing or invalid token
    """
    try:
        ContentStore.validate_post_fields(title, content)
        stored_name = None
        if file is not None and file.filename:
            stored_name = await services.media.store(
                file.file, file.filename, content_type=file.content_type, field_name="file"
            )
        try:
            post = await services.posts.create_post(title, content, identity.username, media=stored_name)
        except Exception:
            # No post points at the attachment, so drop it
            if stored_name is not None:
                await services.media.discard(stored_name)
            raise
    except AppError as e:
        raise http_error(e)
    finally:
        if file is not None:
            await file.close()
    return PostOut.from_model(post)

@router.post("/like/{post_id}", response_model=PostOut)
async def like_post(
    post_id: str,
    identity: Identity = Depends(get_current_identity),
    services: ServiceContext = Depends(get_services),
):
    """
    Add one like to a post.

    Raises:
        HTTPException (404): Post not found (NOT_FOUND)
    """
    try:
        post = await services.posts.like_post(post_id)
    except AppError as e:
        raise http_error(e)
    return PostOut.from_model(post)

@router.post("/comment/{post_id}", response_model=PostOut)
async def add_comment(
    post_id: str,
    body: CommentIn,
    identity: Identity = Depends(get_current_identity),
    services: ServiceContext = Depends(get_services),
):
    """
    Append a moderated comment to a post.

    Raises:
        HTTPException (400): Comment text missing (BAD_REQUEST)
        HTTPException (404): Post not found (NOT_FOUND)
    """
    try:
        post = await services.posts.add_comment(post_id, body.text, identity.username)
    except AppError as e:
        raise http_error(e)
    return PostOut.from_model(post)
