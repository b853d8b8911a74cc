"""Filesystem-backed attachment store served through a static mount."""
from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path, PurePosixPath

from pulse_chat.application.exceptions import UpstreamDependencyError

logger = logging.getLogger(__name__)


class LocalAttachmentStore:
    """Writes blobs under ``root`` and hands out ``<base_url>/<name>`` references."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        suffix = PurePosixPath(filename).suffix.lower()
        name = f"{uuid.uuid4().hex}{suffix}"
        try:
            await asyncio.to_thread(self._write, name, data)
        except OSError as exc:
            raise UpstreamDependencyError("Failed to store attachment") from exc
        logger.debug("Stored attachment %s (%s, %d bytes)", name, content_type, len(data))
        return f"{self._base_url}/{name}"

    async def delete(self, reference: str) -> None:
        name = PurePosixPath(reference).name
        if not name or not reference.startswith(self._base_url):
            raise UpstreamDependencyError(f"Unknown attachment reference: {reference}")
        try:
            await asyncio.to_thread(self._unlink, name)
        except OSError as exc:
            raise UpstreamDependencyError("Failed to remove attachment") from exc

    def _write(self, name: str, data: bytes) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        (self._root / name).write_bytes(data)

    def _unlink(self, name: str) -> None:
        (self._root / name).unlink(missing_ok=True)
