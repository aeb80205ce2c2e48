# app/schemas/post.py
"""
Pydantic schemas for post endpoints.
"""
from typing import Optional, List
from pydantic import BaseModel

from app.models.post import Post

class CommentIn(BaseModel):
    """Request body for adding a comment."""
    text: Optional[str] = None

class CommentOut(BaseModel):
    text: str
    isFlagged: bool  # Client hides flagged text
    username: str

class PostOut(BaseModel):
    """
    Post as returned to clients, comments embedded in arrival order.
    """
    id: int
    title: str
    content: str
    file: Optional[str] = None  # Stored media filename, fetch via /api/files/{file}
    likes: int
    comments: List[CommentOut]
    isFlagged: bool
    username: str
    createdAt: Optional[str] = None  # ISO timestamp

    @classmethod
    def from_model(cls, post: Post) -> "PostOut":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            file=post.file,
            likes=post.likes,
            comments=[
                CommentOut(text=c.text, isFlagged=c.is_flagged, username=c.username)
                for c in post.comment_list()
            ],
            isFlagged=post.is_flagged,
            username=post.username,
            createdAt=post.created_at.isoformat() if post.created_at else None,
        )
