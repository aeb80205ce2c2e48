"""
Media Relay Service

Stores attachments uploaded with a post and serves them back by name.

Backends:
- LocalMediaStore: files in a directory on disk (default ./uploads)
- DatabaseMediaStore: bytes in the media_objects table

Stored names are "<field>-<epoch millis>-<8 hex><ext>", e.g.
"file-1718000000000-3fa2c1d9.png". Nothing about the content is validated
and anyone who knows a stored name can fetch it.
"""
import logging
import mimetypes
import re
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from starlette.concurrency import run_in_threadpool
from tortoise.exceptions import IntegrityError

from app.core.errors import MediaNotFoundError
from app.models.media import MediaObject

logger = logging.getLogger("uvicorn.error")

DEFAULT_FIELD = "file"

# Only short alphanumeric extensions survive into the stored name
_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]{1,16}")


@dataclass
class StoredMedia:
    """A stored attachment: either a path on disk or the raw bytes."""
    filename: str
    media_type: str
    path: Optional[Path] = None
    data: Optional[bytes] = None


def generate_filename(original_name: Optional[str], field_name: str = DEFAULT_FIELD) -> str:
    ext = Path(original_name or "").suffix
    if not _EXTENSION_RE.fullmatch(ext):
        ext = ""
    return f"{field_name}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"


def is_safe_filename(filename: str) -> bool:
    """Reject anything that could escape the store (separators, dot segments)."""
    if not filename or filename in (".", ".."):
        return False
    if "/" in filename or "\\" in filename or ".." in filename:
        return False
    return Path(filename).name == filename


def guess_media_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


class MediaStore(ABC):
    """Storage interface shared by all media backends"""

    name: str = "base"

    @abstractmethod
    async def store(
        self,
        stream: BinaryIO,
        original_name: Optional[str],
        content_type: Optional[str] = None,
        field_name: str = DEFAULT_FIELD,
    ) -> str:
        """
        Persist an upload.

        Parameters:
        - stream: File-like object positioned at the start of the upload
        - original_name: Client-side filename, only its extension is kept
        - content_type: Client-declared type, recorded as-is when the backend keeps it
        - field_name: Multipart field the file arrived in

        Returns:
        - str: Generated stored filename
        """

    @abstractmethod
    async def fetch(self, filename: str) -> StoredMedia:
        """
        Look up a stored upload.

        Raises:
        - MediaNotFoundError: Unknown or unsafe filename
        """

    @abstractmethod
    async def discard(self, filename: str) -> None:
        """Remove a stored upload; unknown names are ignored."""

    async def aclose(self) -> None:
        return None


class LocalMediaStore(MediaStore):
    name = "local"

    def __init__(self, upload_dir: str | Path):
        self.root = Path(upload_dir)

    async def store(self, stream, original_name, content_type=None, field_name=DEFAULT_FIELD) -> str:
        filename = generate_filename(original_name, field_name)
        await run_in_threadpool(self._write, filename, stream)
        logger.info("[media] stored %s on disk", filename)
        return filename

    def _write(self, filename: str, stream: BinaryIO) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        # "xb" refuses to overwrite an existing upload
        with open(self.root / filename, "xb") as out:
            while True:
                chunk = stream.read(64 * 1024)
                if not chunk:
                    break
                out.write(chunk)

    async def fetch(self, filename: str) -> StoredMedia:
        if not is_safe_filename(filename):
            raise MediaNotFoundError("File not found")
        path = self.root / filename
        if not path.is_file():
            raise MediaNotFoundError("File not found")
        return StoredMedia(filename=filename, media_type=guess_media_type(filename), path=path)

    async def discard(self, filename: str) -> None:
        if not is_safe_filename(filename):
            return
        await run_in_threadpool((self.root / filename).unlink, missing_ok=True)
        logger.info("[media] discarded %s from disk", filename)


class DatabaseMediaStore(MediaStore):
    name = "database"

    async def store(self, stream, original_name, content_type=None, field_name=DEFAULT_FIELD) -> str:
        data = await run_in_threadpool(stream.read)
        filename = generate_filename(original_name, field_name)
        try:
            await MediaObject.create(filename=filename, content_type=content_type, data=data)
        except IntegrityError:
            # Same millisecond and same random suffix; draw another name once
            filename = generate_filename(original_name, field_name)
            await MediaObject.create(filename=filename, content_type=content_type, data=data)
        logger.info("[media] stored %s in database (%d bytes)", filename, len(data))
        return filename

    async def fetch(self, filename: str) -> StoredMedia:
        if not is_safe_filename(filename):
            raise MediaNotFoundError("File not found")
        obj = await MediaObject.get_or_none(filename=filename)
        if not obj:
            raise MediaNotFoundError("File not found")
        return StoredMedia(
            filename=filename,
            media_type=obj.content_type or guess_media_type(filename),
            data=bytes(obj.data),
        )

    async def discard(self, filename: str) -> None:
        await MediaObject.filter(filename=filename).delete()
        logger.info("[media] discarded %s from database", filename)


def get_media_store(settings) -> MediaStore:
    """
    Build the media backend selected by MEDIA_BACKEND.

    Raises:
    - RuntimeError: Unknown backend name
    """
    if settings.media_backend == LocalMediaStore.name:
        return LocalMediaStore(settings.upload_dir)
    if settings.media_backend == DatabaseMediaStore.name:
        return DatabaseMediaStore()
    raise RuntimeError(
        f"Unknown MEDIA_BACKEND {settings.media_backend!r}. Use 'local' or 'database'"
    )
