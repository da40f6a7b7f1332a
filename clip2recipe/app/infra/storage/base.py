# clip2recipe/app/infra/storage/base.py
"""
Abstract base class for storage providers.
This interface allows easy swapping between different storage backends (S3, R2, GCS, etc.)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StorageProvider(ABC):
    """
    Abstract interface for the upload hand-off.

    The core pipeline never reads what a provider returns; it is passed
    through to the client untouched.

    Implementations:
    - MockS3StorageProvider: fixed bucket URL plus form fields
    """

    @abstractmethod
    def generate_upload_handoff(self, upload_id: str) -> dict[str, Any]:
        """
        Build the payload a client needs to upload the source media.

        Args:
            upload_id: The id the upload was registered under

        Returns:
            Provider-specific payload (e.g. pre-signed form target)
        """
        pass

    def generate_object_key(self, upload_id: str, prefix: str = "uploads") -> str:
        """
        Generate a standardized object key for an upload.

        Format: {prefix}/{upload_id}
        """
        return f"{prefix}/{upload_id}"
