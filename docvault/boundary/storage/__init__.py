"""
Blob storage boundary.

Exports:
  - LocalStorage: Filesystem adapter for document blobs
  - FilenameValidationError: Rejected upload filename
"""

from docvault.boundary.storage.local_storage import FilenameValidationError, LocalStorage

__all__ = ["LocalStorage", "FilenameValidationError"]
