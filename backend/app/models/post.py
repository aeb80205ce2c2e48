# app/models/post.py
"""
Database model for posts.
A post owns its comments: they are stored as an ordered JSON list on the
post row and have no identity of their own.
"""
from dataclasses import dataclass
from tortoise import fields, models


@dataclass(frozen=True)
class Comment:
    """Comment value object, embedded in its parent post."""
    text: str
    is_flagged: bool
    username: str

    def to_document(self) -> dict:
        return {"text": self.text, "isFlagged": self.is_flagged, "username": self.username}

    @classmethod
    def from_document(cls, doc: dict) -> "Comment":
        return cls(
            text=doc.get("text", ""),
            is_flagged=bool(doc.get("isFlagged", False)),
            username=doc.get("username", ""),
        )


class Post(models.Model):
    """
    Post database model.

    - is_flagged is computed from title and content when the post is created
      and never changes afterwards
    - likes only ever grows, one at a time
    - comments is a list of {"text", "isFlagged", "username"} dicts in arrival order
    """
    id = fields.IntField(pk=True)  # Autoincrement; ascending id is insertion order
    title = fields.TextField()
    content = fields.TextField()
    file = fields.CharField(max_length=512, null=True)  # Stored media filename, if any
    likes = fields.IntField(default=0)
    comments = fields.JSONField(default=list)
    is_flagged = fields.BooleanField(default=False)
    username = fields.CharField(max_length=256)  # Author
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "posts"

    def comment_list(self) -> list[Comment]:
        return [Comment.from_document(c) for c in (self.comments or [])]
