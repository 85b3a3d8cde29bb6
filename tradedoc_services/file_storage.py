"""
File storage for receipts, logos and signatures.

Responsibility:
    Validate an upload against a ``FileRule`` (content-type allowlist, size
    cap, leading-bytes signature) and persist it, returning an opaque
    reference the documents keep.

Failure modes:
    - FileRejectedError for a disallowed type, an empty or oversize file,
      or bytes that do not match the declared type.
    - OSError from the filesystem propagates.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from tradedoc_config.schema import FileRule
from tradedoc_kernel.exceptions import FileRejectedError
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("services.file_storage")

# Leading bytes each allowed type must start with
_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/png": (b"\x89PNG\r\n\x1a\n",),
    "application/pdf": (b"%PDF-",),
}

_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "application/pdf": ".pdf",
}


@dataclass(frozen=True)
class UploadedFile:
    data: bytes
    content_type: str
    filename: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredFile:
    ref: str
    content_type: str
    size: int


def normalize_content_type(content_type: str) -> str:
    """``"Image/PNG; charset=x"`` -> ``"image/png"``."""
    return content_type.split(";", 1)[0].strip().lower()


def check_upload(upload: UploadedFile, rule: FileRule, field: str) -> str:
    """
    Validate ``upload`` against ``rule``; return the normalized content type.

    Raises:
        FileRejectedError: naming ``field``.
    """
    if not isinstance(upload, UploadedFile):
        raise FileRejectedError(field, "expected an uploaded file")

    content_type = normalize_content_type(upload.content_type or "")
    if content_type not in rule.allowed_content_types:
        raise FileRejectedError(
            field,
            f"content type {content_type or '(none)'} is not allowed",
            content_type=content_type,
            size=upload.size,
        )
    if upload.size == 0:
        raise FileRejectedError(field, "file is empty", content_type=content_type, size=0)
    if upload.size > rule.max_size_bytes:
        raise FileRejectedError(
            field,
            f"file exceeds {rule.max_size_bytes} bytes",
            content_type=content_type,
            size=upload.size,
        )
    signatures = _SIGNATURES.get(content_type)
    if signatures and not upload.data.startswith(signatures):
        raise FileRejectedError(
            field,
            f"file content does not match {content_type}",
            content_type=content_type,
            size=upload.size,
        )
    return content_type


class FileStorage(Protocol):
    def store_file(
        self,
        upload: UploadedFile,
        rule: FileRule,
        category: str,
        field: str,
    ) -> StoredFile:
        ...

    def read_file(self, ref: str) -> bytes:
        ...


class LocalFileStorage:
    """Stores files under ``root/<category>/<uuid><ext>``."""

    def __init__(self, root: str | Path):
        self._root = Path(root)

    def _path(self, ref: str) -> Path:
        path = (self._root / ref).resolve()
        if self._root.resolve() not in path.parents:
            raise ValueError(f"File reference escapes storage root: {ref!r}")
        return path

    def store_file(
        self,
        upload: UploadedFile,
        rule: FileRule,
        category: str,
        field: str,
    ) -> StoredFile:
        content_type = check_upload(upload, rule, field)

        ref = f"{category}/{uuid4().hex}{_EXTENSIONS.get(content_type, '')}"
        path = self._path(ref)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(upload.data)

        logger.info(
            "file_stored",
            extra={
                "file_ref": ref,
                "category": category,
                "content_type": content_type,
                "size": upload.size,
            },
        )
        return StoredFile(ref=ref, content_type=content_type, size=upload.size)

    def read_file(self, ref: str) -> bytes:
        return self._path(ref).read_bytes()
