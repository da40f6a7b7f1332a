# clip2recipe/app/services/job_orchestrator.py
"""
Job orchestration for the extraction-and-synthesis pipeline.

Responsibilities:
- Allocate job ids and track each job's lifecycle state
- Run URL jobs on a bounded pool of asyncio workers
- Publish exactly one JobResult per job, after the pipeline finishes
- Feed the per-job event log from real phase transitions
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Optional
from uuid import uuid4

import httpx

from clip2recipe.app.domain.errors import InvalidJobTransitionError, JobNotFoundError
from clip2recipe.app.domain.models import (
    JobEvent,
    JobHandle,
    JobResult,
    JobState,
    JobStatusSnapshot,
    Recipe,
    UploadRecord,
)
from clip2recipe.app.infra.db.base import JobResultRepository, UploadRepository
from clip2recipe.app.services.job_events import JobEventLog
from clip2recipe.services import captions, fetcher, synthesizer
from clip2recipe.services.render import to_markdown, to_plain_text
from clip2recipe.services.types import VideoMetadata

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Failed to extract content"
NOT_IMPLEMENTED_MESSAGE = "File processing not implemented"
DEFAULT_EVENTS_URL = "/api/jobs/{job_id}/events"

Resolver = Callable[[str, httpx.AsyncClient], Awaitable[VideoMetadata]]
Retriever = Callable[[str, httpx.AsyncClient], Awaitable[str]]
ClientFactory = Callable[[], httpx.AsyncClient]


@dataclass
class JobRecord:
    """Handle retained for every job the orchestrator has accepted."""
    job_id: str
    upload_id: str
    state: JobState
    events: JobEventLog
    source_url: Optional[str] = None


def render_result(recipe: Recipe) -> JobResult:
    return JobResult(recipe=recipe, markdown=to_markdown(recipe), text=to_plain_text(recipe))


def fallback_result(message: str) -> JobResult:
    return render_result(synthesizer.fallback_recipe(message))


class JobOrchestrator:
    def __init__(
        self,
        upload_repository: UploadRepository,
        result_repository: JobResultRepository,
        concurrency: int = 4,
        client_factory: ClientFactory = fetcher.create_http_client,
        resolver: Resolver = fetcher.resolve,
        retriever: Retriever = captions.retrieve,
        events_url_template: str = DEFAULT_EVENTS_URL,
    ):
        self._uploads = upload_repository
        self._results = result_repository
        self._concurrency = max(1, concurrency)
        self._client_factory = client_factory
        self._resolve = resolver
        self._retrieve = retriever
        self._events_url_template = events_url_template

        self._jobs: dict[str, JobRecord] = {}
        self._queue: Optional["asyncio.Queue[Optional[str]]"] = None
        self._workers: list[asyncio.Task[None]] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Worker pool
    # -------------------------------------------------------------------------
    @property
    def running(self) -> bool:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return False
        return self._loop is loop and any(not w.done() for w in self._workers)

    async def start(self) -> None:
        if self._loop is not asyncio.get_running_loop():
            # first start, or the previous loop has gone away
            self._lock = asyncio.Lock()
            self._workers = []
        async with self._lock:
            if self.running:
                return
            self._loop = asyncio.get_running_loop()
            queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
            self._queue = queue
            self._workers = [
                asyncio.create_task(self._run_worker(idx, queue), name=f"recipe-worker-{idx}")
                for idx in range(self._concurrency)
            ]
            logger.info("orchestrator.started workers=%d", self._concurrency)

    async def stop(self) -> None:
        async with self._lock:
            if not self._workers or self._queue is None:
                return
            for _ in self._workers:
                await self._queue.put(None)
            try:
                await asyncio.gather(*self._workers)
            finally:
                self._workers = []
                logger.info("orchestrator.stopped")

    async def drain(self) -> None:
        """Wait until every queued job has been processed."""
        if self._queue is not None:
            await self._queue.join()

    async def _run_worker(self, idx: int, queue: "asyncio.Queue[Optional[str]]") -> None:
        while True:
            job_id = await queue.get()
            if job_id is None:
                queue.task_done()
                break
            try:
                await self._run_pipeline(self._jobs[job_id])
            except Exception:
                logger.exception("orchestrator.worker_unexpected_error worker=%d job=%s", idx, job_id)
            finally:
                queue.task_done()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------
    async def start_job(self, upload_id: str) -> JobHandle:
        """
        Accept a job for ``upload_id`` without waiting for it to run.

        URL uploads are queued for the pipeline. File uploads and unknown
        upload ids get a fallback result straight away.
        """
        upload = self._uploads.get(upload_id)
        record = self._register(upload_id, upload)
        handle = JobHandle(
            job_id=record.job_id,
            events_url=self._events_url_template.format(job_id=record.job_id),
        )

        if upload is None or not upload.is_url:
            if upload is None:
                logger.warning("job.unknown_upload job=%s upload=%s", record.job_id, upload_id)
            self._finish(record, fallback_result(NOT_IMPLEMENTED_MESSAGE), JobState.FAILED)
            return handle

        await self.start()
        if self._queue is None:
            raise RuntimeError("worker pool is not running")
        await self._queue.put(record.job_id)
        return handle

    def get_status(self, job_id: str) -> JobStatusSnapshot:
        record = self._get_record(job_id)
        return JobStatusSnapshot(state=record.state, progress_pct=record.state.progress_pct)

    def get_result(self, job_id: str) -> Optional[JobResult]:
        return self._results.get(job_id)

    def stream_events(self, job_id: str) -> AsyncIterator[JobEvent]:
        """Subscribe to a job's phase events. Raises JobNotFoundError eagerly."""
        return self._get_record(job_id).events.subscribe()

    def list_history(self, limit: int = 20) -> list[tuple[str, JobResult]]:
        return self._results.list_recent(limit)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _get_record(self, job_id: str) -> JobRecord:
        record = self._jobs.get(job_id)
        if record is None:
            raise JobNotFoundError(job_id)
        return record

    def _register(self, upload_id: str, upload: Optional[UploadRecord]) -> JobRecord:
        job_id = f"job_{uuid4()}"
        record = JobRecord(
            job_id=job_id,
            upload_id=upload_id,
            state=JobState.QUEUED,
            events=JobEventLog(job_id),
            source_url=upload.source_url if upload else None,
        )
        self._jobs[job_id] = record
        record.events.emit(JobState.QUEUED)
        logger.info("job.created job=%s upload=%s", job_id, upload_id)
        return record

    def _advance(self, record: JobRecord, target: JobState) -> None:
        if not record.state.can_transition_to(target):
            raise InvalidJobTransitionError(record.job_id, record.state.value, target.value)
        record.state = target
        record.events.emit(target)
        logger.info("job.phase job=%s state=%s", record.job_id, target.value)

    def _finish(self, record: JobRecord, result: JobResult, state: JobState) -> None:
        # publish before announcing the terminal state
        self._results.put(record.job_id, result)
        self._advance(record, state)

    async def _run_pipeline(self, record: JobRecord) -> None:
        url = record.source_url or ""
        try:
            async with self._client_factory() as client:
                self._advance(record, JobState.EXTRACTING)
                metadata = await self._resolve(url, client)

                self._advance(record, JobState.TRANSCRIBING)
                transcript = await self._retrieve(url, client)

            self._advance(record, JobState.UNDERSTANDING)
            ingredients, steps = synthesizer.understand(metadata.description, transcript)

            self._advance(record, JobState.SYNTHESIZING)
            recipe = synthesizer.assemble(metadata.title, ingredients, steps)

            self._advance(record, JobState.VALIDATING)
            synthesizer.check_recipe(recipe)
            result = render_result(recipe)
        except Exception:
            logger.exception("job.failed job=%s url=%s", record.job_id, url)
            self._finish(record, fallback_result(EXTRACTION_FAILED_MESSAGE), JobState.FAILED)
            return

        self._finish(record, result, JobState.COMPLETED)
        logger.info(
            "job.completed job=%s title=%r ingredients=%d steps=%d",
            record.job_id,
            result.recipe.title,
            len(result.recipe.ingredients),
            len(result.recipe.steps),
        )
