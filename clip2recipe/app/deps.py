# clip2recipe/app/deps.py (process-wide singletons exposed as dependencies)

from __future__ import annotations

from clip2recipe.app.config import settings
from clip2recipe.app.infra.db.base import JobResultRepository, UploadRepository
from clip2recipe.app.infra.db.memory_repo import InMemoryJobResultRepository, InMemoryUploadRepository
from clip2recipe.app.infra.storage.base import StorageProvider
from clip2recipe.app.infra.storage.mock_provider import MockS3StorageProvider
from clip2recipe.app.services.job_orchestrator import JobOrchestrator
from clip2recipe.services.fetcher import create_http_client

_upload_repo: UploadRepository | None = None
_result_repo: JobResultRepository | None = None
_storage: StorageProvider | None = None
_orchestrator: JobOrchestrator | None = None


def get_upload_repo() -> UploadRepository:
    global _upload_repo
    if _upload_repo is None:
        _upload_repo = InMemoryUploadRepository()
    return _upload_repo


def get_result_repo() -> JobResultRepository:
    global _result_repo
    if _result_repo is None:
        _result_repo = InMemoryJobResultRepository()
    return _result_repo


def get_storage() -> StorageProvider:
    global _storage
    if _storage is None:
        _storage = MockS3StorageProvider(bucket_url=settings.UPLOAD_BUCKET_URL)
    return _storage


def _http_client():
    return create_http_client(
        timeout=settings.FETCH_TIMEOUT_SECONDS,
        accept_language=settings.ACCEPT_LANGUAGE,
    )


def get_orchestrator() -> JobOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = JobOrchestrator(
            upload_repository=get_upload_repo(),
            result_repository=get_result_repo(),
            concurrency=settings.WORKER_CONCURRENCY,
            client_factory=_http_client,
        )
    return _orchestrator
