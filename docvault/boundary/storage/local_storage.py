"""
Local filesystem storage adapter.

Translates between absolute paths and paths relative to the storage root,
writes uploaded blobs, opens them for reading and deletes them idempotently.
Every filesystem call runs through asyncio.to_thread so the event loop is
never blocked.

Dependencies: asyncio, docvault.configs.storage
System role: Blob storage for document files
"""

import asyncio
import logging
import os
import uuid
from typing import BinaryIO
from uuid import UUID

from docvault.configs.storage import StorageSettings
from docvault.core.exceptions import InternalError, ValidationError
from docvault.models.document import UploadedBlob

logger = logging.getLogger(__name__)


class FilenameValidationError(ValidationError):
    """Raised when an upload filename is unsafe or has a disallowed extension."""

    def __init__(self, message: str) -> None:
        super().__init__(message, field="file")


def split_extension(filename: str) -> tuple[str, str]:
    """
    Split a filename into (base, extension) with a lowercased leading-dot extension.

    Args:
        filename: File name or path

    Returns:
        tuple: ("report", ".pdf") for "report.PDF"; (name, "") when there is none
    """
    base, ext = os.path.splitext(filename)
    return base, ext.lower()


class LocalStorage:
    """
    Blob storage rooted at a single directory.

    Persisted paths are always relative to root; absolute paths only exist
    in memory while a blob is being written or read.
    """

    def __init__(
        self,
        root: str,
        upload_dir: str = "uploads",
        allowed_extensions: set[str] | None = None,
        max_upload_bytes: int | None = None,
    ) -> None:
        """
        Initialize storage adapter.

        Args:
            root: Absolute storage root
            upload_dir: Directory under root receiving uploads
            allowed_extensions: Accepted extensions without dot (e.g. {"pdf"})
            max_upload_bytes: Upload size limit, None for unlimited
        """
        self.root = os.path.abspath(root)
        self.upload_dir = upload_dir
        self.allowed_extensions = {e.lower().lstrip(".") for e in (allowed_extensions or {"pdf", "docx"})}
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "LocalStorage":
        return cls(
            root=settings.root,
            upload_dir=settings.upload_dir,
            allowed_extensions=settings.allowed_extensions,
            max_upload_bytes=settings.max_upload_bytes,
        )

    def to_relative(self, absolute_path: str) -> str:
        """
        Strip the storage root prefix from a path.

        Args:
            absolute_path: Path that may or may not live under root

        Returns:
            str: Path relative to root, or the input unchanged if outside root
        """
        prefix = self.root + os.sep
        if absolute_path.startswith(prefix):
            return absolute_path[len(prefix):]
        return absolute_path

    def to_absolute(self, relative_path: str) -> str:
        return os.path.join(self.root, relative_path)

    def validate_filename(self, filename: str) -> None:
        """
        Validate an upload filename for safety and allowed extension.

        Args:
            filename: Original filename from the client

        Raises:
            FilenameValidationError: If filename is invalid or not allowed
        """
        if not filename or len(filename) > 255:
            raise FilenameValidationError("Invalid filename length")

        # Block path traversal
        if ".." in filename or "/" in filename or "\\" in filename:
            raise FilenameValidationError("Invalid filename: path traversal detected")

        if "." not in filename:
            raise FilenameValidationError("File must have an extension")

        ext = filename.rsplit(".", 1)[-1].lower()
        if ext not in self.allowed_extensions:
            raise FilenameValidationError(
                f"File type '.{ext}' not allowed. Allowed: {', '.join(sorted(self.allowed_extensions))}"
            )

    def build_upload_path(self, owner_id: UUID, filename: str) -> str:
        """
        Build a unique root-relative path for an upload.

        Format: {upload_dir}/{owner_id}/{unique_id}-{sanitized_name}{ext}

        Args:
            owner_id: Uploading user
            filename: Validated original filename

        Returns:
            str: Relative blob path
        """
        base_name, file_ext = split_extension(filename)

        # Only alphanumerics, hyphens and underscores survive
        safe_name = "".join(c for c in base_name if c.isalnum() or c in "-_")
        if not safe_name:
            safe_name = "document"

        unique_id = str(uuid.uuid4())[:8]
        return os.path.join(self.upload_dir, str(owner_id), f"{unique_id}-{safe_name}{file_ext}")

    def check_upload_size(self, size: int | None) -> None:
        """
        Reject an upload larger than max_upload_bytes.

        Args:
            size: Upload size in bytes, None when the client did not report it

        Raises:
            ValidationError: Upload exceeds max_upload_bytes
        """
        if size is None or self.max_upload_bytes is None:
            return
        if size > self.max_upload_bytes:
            raise ValidationError(
                f"File exceeds maximum size of {self.max_upload_bytes} bytes",
                field="file",
                details={"size": size},
            )

    async def save_upload(
        self,
        owner_id: UUID,
        filename: str,
        content: bytes,
        mime_type: str,
    ) -> UploadedBlob:
        """
        Validate and write an uploaded file under the owner's upload directory.

        Args:
            owner_id: Uploading user
            filename: Original filename from the client
            content: File bytes
            mime_type: Content type reported by the client

        Returns:
            UploadedBlob: Absolute location and metadata of the written blob

        Raises:
            FilenameValidationError: Filename rejected
            ValidationError: Upload exceeds max_upload_bytes
            InternalError: Filesystem write failed
        """
        self.validate_filename(filename)
        self.check_upload_size(len(content))

        absolute_path = self.to_absolute(self.build_upload_path(owner_id, filename))

        def _write() -> None:
            os.makedirs(os.path.dirname(absolute_path), exist_ok=True)
            with open(absolute_path, "wb") as fh:
                fh.write(content)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            logger.error(
                "Failed to write uploaded blob",
                extra={"file_name": filename, "owner_id": str(owner_id), "error_msg": str(e)},
            )
            raise InternalError("Failed to store uploaded file") from e

        logger.info(
            "Stored uploaded blob",
            extra={
                "file_path": self.to_relative(absolute_path),
                "owner_id": str(owner_id),
                "size": len(content),
            },
        )
        return UploadedBlob(
            absolute_path=absolute_path,
            original_filename=filename,
            mime_type=mime_type,
            size=len(content),
        )

    async def exists(self, relative_path: str) -> bool:
        return await asyncio.to_thread(os.path.isfile, self.to_absolute(relative_path))

    async def open_read(self, relative_path: str) -> BinaryIO:
        """
        Open a blob for binary reading. The caller closes the stream.

        Raises:
            FileNotFoundError: Blob is missing
        """
        return await asyncio.to_thread(open, self.to_absolute(relative_path), "rb")

    async def delete(self, relative_path: str) -> None:
        """
        Delete a blob; a missing blob counts as success.

        Args:
            relative_path: Root-relative blob path

        Raises:
            InternalError: Any filesystem failure other than a missing file
        """
        try:
            await asyncio.to_thread(os.unlink, self.to_absolute(relative_path))
        except FileNotFoundError:
            logger.debug("Blob already absent", extra={"file_path": relative_path})
            return
        except OSError as e:
            raise InternalError(
                "Failed to delete file",
                details={"file_path": relative_path, "error_msg": str(e)},
            ) from e
        logger.info("Deleted blob", extra={"file_path": relative_path})
