# clip2recipe/app/infra/db/base.py
"""
Abstract repositories for uploads and job results.
These interfaces allow swapping the in-memory stores for durable ones.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from clip2recipe.app.domain.models import JobResult, UploadRecord


class UploadRepository(ABC):
    """
    Stores upload records keyed by upload id.

    Implementations:
    - InMemoryUploadRepository: process-local dict (records live until exit)
    """

    @abstractmethod
    def put(self, upload_id: str, record: UploadRecord) -> None:
        """
        Persist an upload record.

        Args:
            upload_id: Identifier returned to the client
            record: Immutable description of the source
        """
        pass

    @abstractmethod
    def get(self, upload_id: str) -> Optional[UploadRecord]:
        """
        Look up an upload record.

        Returns:
            The record, or None if the id was never registered
        """
        pass


class JobResultRepository(ABC):
    """
    Write-once store of job results keyed by job id.

    A result must only become readable after it is fully built, and each job
    id may be written at most once.
    """

    @abstractmethod
    def put(self, job_id: str, result: JobResult) -> None:
        """
        Publish the result of a job.

        Raises:
            ResultAlreadyPublishedError: If the job already has a result
        """
        pass

    @abstractmethod
    def get(self, job_id: str) -> Optional[JobResult]:
        """
        Fetch a job's result.

        Returns:
            The result, or None if it is not ready (or the id is unknown)
        """
        pass

    @abstractmethod
    def list_recent(self, limit: int = 20) -> list[tuple[str, JobResult]]:
        """
        List published results, newest first.

        Args:
            limit: Maximum number of entries to return
        """
        pass
