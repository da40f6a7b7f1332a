from __future__ import annotations

import logging
from typing import Any

from clip2recipe.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)

DEFAULT_BUCKET_URL = "https://s3.amazonaws.com/bucket"


class MockS3StorageProvider(StorageProvider):
    """Returns S3-style POST form fields without contacting any bucket."""

    def __init__(self, bucket_url: str = DEFAULT_BUCKET_URL):
        self.bucket_url = bucket_url

    def generate_upload_handoff(self, upload_id: str) -> dict[str, Any]:
        key = self.generate_object_key(upload_id)
        logger.debug("storage.handoff upload=%s key=%s", upload_id, key)
        return {"url": self.bucket_url, "fields": {"key": key}}
