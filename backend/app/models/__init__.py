# app/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- Post: Post with like counter and embedded comments
- MediaObject: Stored upload bytes (database media backend)
"""
from .user import User
from .post import Post
from .media import MediaObject
