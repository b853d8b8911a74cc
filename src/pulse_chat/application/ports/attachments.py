from __future__ import annotations

from typing import Protocol


class AttachmentStore(Protocol):
    """External binary storage. Implementations raise UpstreamDependencyError."""

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        """Persist the blob and return the reference stored on the message."""
        ...

    async def delete(self, reference: str) -> None: ...
