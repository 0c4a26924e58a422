# nexus/services/blob_store.py
from __future__ import annotations

import logging
import random
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from nexus.core.config import get_settings
from nexus.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "text/plain",
        "image/jpeg",
        "image/png",
        "image/gif",
    }
)

CHUNK_SIZE = 64 * 1024

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StoredBlob:
    handle: str
    size: int


def generate_blob_name(original_name: str) -> str:
    """
    <stem>-<epoch ms>-<random><ext>, with the stem reduced to safe characters.
    """
    base = Path(original_name or "upload").name
    suffix = Path(base).suffix
    stem = base[: -len(suffix)] if suffix else base
    stem = _UNSAFE_CHARS.sub("_", stem).strip("._") or "upload"
    ext = _UNSAFE_CHARS.sub("", suffix)
    return f"{stem}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


class LocalBlobStore:
    """
    Uploaded files on local disk. Handles are bare file names under ``root``.
    """

    def __init__(self, root: str | Path, max_bytes: int):
        self.root = Path(root)
        self.max_bytes = max_bytes

    def path_for(self, handle: str) -> Path:
        if not handle or Path(handle).name != handle:
            raise ValueError(f"Invalid blob handle: {handle!r}")
        return self.root / handle

    def exists(self, handle: str) -> bool:
        return self.path_for(handle).is_file()

    def save(self, stream: BinaryIO, original_name: str) -> StoredBlob:
        self.root.mkdir(parents=True, exist_ok=True)
        handle = generate_blob_name(original_name)
        path = self.path_for(handle)

        size = 0
        try:
            with path.open("xb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        break
                    out.write(chunk)
        except BaseException:
            # no partial file survives an interrupted read or write
            path.unlink(missing_ok=True)
            raise

        if size > self.max_bytes:
            path.unlink(missing_ok=True)
            raise ValidationError(
                f"File exceeds the maximum upload size of {self.max_bytes} bytes",
                code="file-too-large",
            )

        return StoredBlob(handle=handle, size=size)

    def delete(self, handle: str) -> bool:
        path = self.path_for(handle)
        if not path.exists():
            return False
        path.unlink()
        logger.info("blob deleted", extra={"handle": handle})
        return True


def get_blob_store() -> LocalBlobStore:
    settings = get_settings()
    return LocalBlobStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)
