"""
Process-local repositories. Nothing survives a restart.
"""
from __future__ import annotations

import threading
from typing import Optional

from clip2recipe.app.domain.errors import ResultAlreadyPublishedError
from clip2recipe.app.domain.models import JobResult, UploadRecord
from clip2recipe.app.infra.db.base import JobResultRepository, UploadRepository


class InMemoryUploadRepository(UploadRepository):
    # TODO: expire records once their job has finished; they are kept until exit.
    def __init__(self) -> None:
        self._records: dict[str, UploadRecord] = {}

    def put(self, upload_id: str, record: UploadRecord) -> None:
        self._records[upload_id] = record

    def get(self, upload_id: str) -> Optional[UploadRecord]:
        return self._records.get(upload_id)


class InMemoryJobResultRepository(JobResultRepository):
    def __init__(self) -> None:
        self._results: dict[str, JobResult] = {}
        self._lock = threading.Lock()

    def put(self, job_id: str, result: JobResult) -> None:
        with self._lock:
            if job_id in self._results:
                raise ResultAlreadyPublishedError(job_id)
            self._results[job_id] = result

    def get(self, job_id: str) -> Optional[JobResult]:
        return self._results.get(job_id)

    def list_recent(self, limit: int = 20) -> list[tuple[str, JobResult]]:
        with self._lock:
            entries = list(self._results.items())
        entries.reverse()
        return entries[:limit]
