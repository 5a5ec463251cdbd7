"""Attachment storage on the local filesystem."""

import asyncio
import re
import secrets
import time
from pathlib import Path
from typing import Iterable

from ..exceptions import NotFound, ValidationError
from ..logging import get_logger
from ..schemas.common import FieldError
from ..schemas.files import StoredFile
from .interfaces import IFileService

logger = get_logger("services.files")

# stored names are generated by us, anything else is not ours to serve
_STORED_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class FileStorageService(IFileService):
    """Stores uploaded PDFs under ``upload_dir`` and serves them back by stored name."""

    def __init__(
        self,
        upload_dir: str,
        max_size_bytes: int,
        allowed_content_types: Iterable[str],
        public_prefix: str = "/uploads",
    ):
        self.upload_dir = Path(upload_dir)
        self.max_size_bytes = max_size_bytes
        self.allowed_content_types = set(allowed_content_types)
        self.public_prefix = public_prefix.rstrip("/")

    @classmethod
    def from_settings(cls, settings) -> "FileStorageService":
        return cls(
            upload_dir=settings.upload_dir,
            max_size_bytes=settings.max_file_size_bytes,
            allowed_content_types=settings.allowed_content_types,
        )

    def _stored_name(self, original_name: str) -> str:
        suffix = Path(original_name or "").suffix.lower() or ".pdf"
        millis = int(time.time() * 1000)
        return f"file-{millis}-{secrets.randbelow(10**9)}{suffix}"

    async def read_upload(self, upload, chunk_size: int = 64 * 1024) -> bytes:
        """Read an upload in chunks, stopping one byte past the size limit."""
        limit = self.max_size_bytes + 1
        chunks = []
        received = 0
        while received < limit:
            chunk = await upload.read(min(chunk_size, limit - received))
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks)

    async def store(
self, data: bytes, original_name: str, content_type: str) -> StoredFile:
        """Validate and write an upload. Only PDFs up to the size limit are accepted."""
        errors = []
        if content_type not in self.allowed_content_types:
            errors.append(FieldError(field="file", message="Only PDF files are allowed"))
        if not data:
            errors.append(FieldError(field="file", message="Uploaded file is empty"))
        elif len(data) > self.max_size_bytes:
            limit_mb = self.max_size_bytes // (1024 * 1024)
            errors.append(FieldError(field="file", message=f"File too large, maximum size is {limit_mb}MB"))
        if errors:
            raise ValidationError(errors)

        stored_name = self._stored_name(original_name)
        path = self.upload_dir / stored_name

        await asyncio.to_thread(self.upload_dir.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, data)

        logger.info(
            "File stored",
            extra={"stored_name": stored_name, "size": len(data), "content_type": content_type},
        )
        return StoredFile(
            id=stored_name,
            name=original_name or stored_name,
            url=f"{self.public_prefix}/{stored_name}",
            type=content_type,
            size=len(data),
        )

    def resolve(self, filename: str) -> Path:
        """Path of a stored file. Anything outside ``upload_dir`` is treated as missing."""
        if not _STORED_NAME.match(filename or "") or ".." in filename:
            raise NotFound("File not found")

        base = self.upload_dir.resolve()
        path = (base / filename).resolve()
        if path.parent != base or not path.is_file():
            raise NotFound("File not found")
        return path

    async def delete(self, filename: str) -> None:
        """Remove a stored file."""
        path = self.resolve(filename)
        await asyncio.to_thread(path.unlink)
        logger.info("File deleted", extra={"stored_name": filename})
