"""Flat key -> bytes storage on the local filesystem.

Keys are generated as ``{uuid}-{sanitized name}`` by the callers, so every
write lands on a fresh file and nothing is ever overwritten or locked.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from artifact_chat.core.exceptions import InvalidBlobKeyError

logger = logging.getLogger(__name__)

UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
UUID_KEY_PREFIX = re.compile(
    r"^[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}-"
)


def sanitize_name(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with an underscore."""
    return UNSAFE_NAME_CHARS.sub("_", name)


def make_key(filename: str, blob_id: Optional[str] = None) -> tuple[str, str]:
    """Build a storage key for ``filename``. Returns (id, key)."""
    blob_id = blob_id or str(uuid.uuid4())
    return blob_id, f"{blob_id}-{filename}"


def strip_key_prefix(key: str) -> str:
    """Recover the display filename from a ``{id}-{name}`` key.

    Generated ids are uuid4 strings, which contain dashes themselves; any other
    id is taken to end at the first dash.
    """
    stripped, count = UUID_KEY_PREFIX.subn("", key, count=1)
    if count:
        return stripped
    return re.sub(r"^[^-]+-", "", key, count=1)


class BlobStore:
    """Bytes stored as files in a single directory, created on demand."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def _ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, key: str) -> Path:
        """Map a key to its path, rejecting anything that escapes the root."""
        if not key or key in (".", ".."):
            raise InvalidBlobKeyError(f"Invalid blob key: {key!r}")

        path = (self.root / key).resolve()
        if path.parent != self.root:
            raise InvalidBlobKeyError(f"Blob key escapes storage directory: {key!r}")
        return path

    def exists(self, key: str) -> bool:
        return self.resolve(key).is_file()

    async def write(self, key: str, data: bytes) -> Path:
        self._ensure_root()
        path = self.resolve(key)
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
        logger.debug("Stored %d bytes at %s", len(data), path)
        return path

    async def read(self, key: str) -> bytes:
        """Read a blob. Raises FileNotFoundError if it was never written."""
        path = self.resolve(key)
        async with aiofiles.open(path, "rb") as f:
            return await f.read()
