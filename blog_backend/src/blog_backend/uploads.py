from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from typing import BinaryIO

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from .errors import PayloadTooLarge
from .settings import get_settings
from .utils import now_ms

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"
_CHUNK_SIZE = 64 * 1024
# Room for multipart boundaries and part headers around the file bytes
MULTIPART_OVERHEAD_BYTES = 64 * 1024


@dataclass(frozen=True)
class StoredUpload:
    """
    Result of storing one uploaded file.
    """
    filename: str  # generated name on disk
    original_filename: str
    size: int

    @property
    def url(self) -> str:
        return UPLOADS_URL_PREFIX + self.filename


# PUBLIC_INTERFACE
def generate_filename(original_filename: str) -> str:
    """
    Build a collision-resistant name '<ms>-<16 hex chars><ext>' keeping the
    extension of the client-supplied name (if any).
    """
    ext = os.path.splitext(os.path.basename(original_filename or ""))[1]
    return f"{now_ms()}-{secrets.token_hex(8)}{ext}"


class UploadStore:
    """
    Writes uploaded files into a single directory under generated names.
    """

    def __init__(self, directory: str, max_bytes: int) -> None:
        self.directory = directory
        self.max_bytes = max_bytes

    def save(self, source: BinaryIO, original_filename: str) -> StoredUpload:
        """
        Stream `source` to disk in chunks.

        Raises:
            PayloadTooLarge if the content exceeds max_bytes; the partial file
            is removed, never kept truncated.
        """
        os.makedirs(self.directory, exist_ok=True)
        name = generate_filename(original_filename)
        path = os.path.join(self.directory, name)

        size = 0
        try:
            with open(path, "xb") as out:
                while True:
                    chunk = source.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        logger.warning("Rejected upload %r over %d bytes", original_filename, self.max_bytes)
                        raise PayloadTooLarge(
                            f"File too large (limit {self.max_bytes} bytes)"
                        )
                    out.write(chunk)
        except BaseException:
            if os.path.exists(path):
                os.remove(path)
            raise

        logger.info("Stored upload %r as %s (%d bytes)", original_filename, name, size)
        return StoredUpload(filename=name, original_filename=original_filename, size=size)


# PUBLIC_INTERFACE
def get_upload_store() -> UploadStore:
    """Dependency returning an UploadStore for the configured upload directory."""
    settings = get_settings()
    return UploadStore(settings.upload_dir, settings.max_upload_bytes)


class UploadSizeLimitMiddleware:
    """
    ASGI middleware refusing upload requests whose declared Content-Length
    already exceeds the ceiling, before any of the body is received.

    Requests without a Content-Length (chunked) pass through and are bounded
    by UploadStore.save while the file is written.
    """

    def __init__(
        self,
        app: ASGIApp,
        path: str,
        max_bytes: int,
        overhead: int = MULTIPART_OVERHEAD_BYTES,
    ) -> None:
        self.app = app
        self.path = path
        self.max_bytes = max_bytes
        self.overhead = overhead

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST" and scope["path"] == self.path:
            declared = Headers(scope=scope).get("content-length", "").strip()
            if declared.isascii() and declared.isdigit() and int(declared) > self.max_bytes + self.overhead:
                logger.warning("Refused upload declaring %s bytes (limit %d)", declared, self.max_bytes)
                response = JSONResponse(
                    status_code=PayloadTooLarge.status_code,
                    content={"msg": f"File too large (limit {self.max_bytes} bytes)"},
                )
                await response(scope, receive, send)
                return
        await self.app(scope, receive, send)
