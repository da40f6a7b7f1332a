from __future__ import annotations

import asyncio
from typing import Optional

import httpx
import pytest

from clip2recipe.app.domain.errors import JobNotFoundError
from clip2recipe.app.domain.models import JobState, PIPELINE_ORDER, SourceType, UploadRecord
from clip2recipe.app.infra.db.memory_repo import InMemoryJobResultRepository, InMemoryUploadRepository
from clip2recipe.app.services.job_orchestrator import (
    EXTRACTION_FAILED_MESSAGE,
    NOT_IMPLEMENTED_MESSAGE,
    JobOrchestrator,
)
from clip2recipe.services.fetcher import create_http_client
from clip2recipe.services.types import VideoMetadata

VIDEO_URL = "https://www.youtube.com/watch?v=abcdef12345"
DESCRIPTION = "Ingredients\n2 cups flour\n1 tsp salt\nInstructions\nMix."
TRANSCRIPT = "Preheat the oven. Add flour and stir gently. Serve warm."


def offline_client() -> httpx.AsyncClient:
    return create_http_client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))


class StubSources:
    """Resolver and retriever stand-ins that record the URLs they were given."""

    def __init__(self, title: str = "Pancakes", fail_with: Optional[Exception] = None) -> None:
        self.title = title
        self.fail_with = fail_with
        self.resolved: list[str] = []
        self.retrieved: list[str] = []

    async def resolve(self, url: str, client: httpx.AsyncClient) -> VideoMetadata:
        self.resolved.append(url)
        if self.fail_with is not None:
            raise self.fail_with
        return VideoMetadata(title=self.title, description=DESCRIPTION)

    async def retrieve(self, url: str, client: httpx.AsyncClient) -> str:
        self.retrieved.append(url)
        return TRANSCRIPT


def make_orchestrator(sources: StubSources) -> tuple[JobOrchestrator, InMemoryUploadRepository]:
    uploads = InMemoryUploadRepository()
    uploads.put("upl_url", UploadRecord(SourceType.URL, "video", 0, VIDEO_URL))
    uploads.put("upl_file", UploadRecord(SourceType.FILE, "clip.mp4", 1024))
    orchestrator = JobOrchestrator(
        upload_repository=uploads,
        result_repository=InMemoryJobResultRepository(),
        concurrency=2,
        client_factory=offline_client,
        resolver=sources.resolve,
        retriever=sources.retrieve,
    )
    return orchestrator, uploads


async def run_to_end(orchestrator: JobOrchestrator, upload_id: str):
    handle = await orchestrator.start_job(upload_id)
    states = [event.state async for event in orchestrator.stream_events(handle.job_id)]
    await orchestrator.drain()
    await orchestrator.stop()
    return handle, states


class TestUrlJobs:
    def test_completes_with_recipe(self) -> None:
        sources = StubSources()

        async def go():
            orchestrator, _ = make_orchestrator(sources)
            handle, states = await run_to_end(orchestrator, "upl_url")
            return orchestrator, handle, states

        orchestrator, handle, states = asyncio.run(go())

        assert states == list(PIPELINE_ORDER)
        assert sources.resolved == [VIDEO_URL]
        assert sources.retrieved == [VIDEO_URL]

        result = orchestrator.get_result(handle.job_id)
        assert result is not None
        assert result.recipe.title == "Pancakes"
        assert [i.item for i in result.recipe.ingredients] == ["flour", "salt"]
        assert [s.text for s in result.recipe.steps] == ["Add flour and stir gently.", "Serve warm."]
        assert result.markdown.startswith("# Pancakes\n")
        assert result.text.startswith("Pancakes\n")

        snapshot = orchestrator.get_status(handle.job_id)
        assert snapshot.state is JobState.COMPLETED
        assert snapshot.progress_pct == 100

    def test_events_url_uses_job_id(self) -> None:
        async def go():
            orchestrator, _ = make_orchestrator(StubSources())
            handle, _ = await run_to_end(orchestrator, "upl_url")
            return handle

        handle = asyncio.run(go())

        assert handle.job_id.startswith("job_")
        assert handle.events_url == f"/api/jobs/{handle.job_id}/events"

    def test_pipeline_error_publishes_fallback(self) -> None:
        sources = StubSources(fail_with=RuntimeError("boom"))

        async def go():
            orchestrator, _ = make_orchestrator(sources)
            handle, states = await run_to_end(orchestrator, "upl_url")
            return orchestrator, handle, states

        orchestrator, handle, states = asyncio.run(go())

        assert states == [JobState.QUEUED, JobState.EXTRACTING, JobState.FAILED]
        result = orchestrator.get_result(handle.job_id)
        assert result is not None
        assert [s.text for s in result.recipe.steps] == [EXTRACTION_FAILED_MESSAGE]
        assert orchestrator.get_status(handle.job_id).state is JobState.FAILED

    def test_concurrent_jobs_get_distinct_results(self) -> None:
        async def go():
            orchestrator, _ = make_orchestrator(StubSources())
            handles = [await orchestrator.start_job("upl_url") for _ in range(5)]
            await orchestrator.drain()
            await orchestrator.stop()
            return orchestrator, handles

        orchestrator, handles = asyncio.run(go())

        assert len({h.job_id for h in handles}) == 5
        assert all(orchestrator.get_status(h.job_id).state is JobState.COMPLETED for h in handles)
        assert len(orchestrator.list_history(limit=10)) == 5


class TestNonUrlJobs:
    @pytest.mark.parametrize("upload_id", ["upl_file", "upl_unknown"])
    def test_fallback_published_immediately(self, upload_id: str) -> None:
        sources = StubSources()

        async def go():
            orchestrator, _ = make_orchestrator(sources)
            handle = await orchestrator.start_job(upload_id)
            # result is readable before anything else runs
            result = orchestrator.get_result(handle.job_id)
            states = [event.state async for event in orchestrator.stream_events(handle.job_id)]
            return orchestrator, handle, result, states

        orchestrator, handle, result, states = asyncio.run(go())

        assert result is not None
        assert [s.text for s in result.recipe.steps] == [NOT_IMPLEMENTED_MESSAGE]
        assert states == [JobState.QUEUED, JobState.FAILED]
        assert orchestrator.get_status(handle.job_id).state is JobState.FAILED
        assert sources.resolved == []


class TestLookups:
    def test_not_running_outside_event_loop(self) -> None:
        orchestrator, _ = make_orchestrator(StubSources())
        assert orchestrator.running is False

    def test_unknown_job(self) -> None:
        orchestrator, _ = make_orchestrator(StubSources())

        assert orchestrator.get_result("job_missing") is None
        with pytest.raises(JobNotFoundError):
            orchestrator.get_status("job_missing")
        with pytest.raises(JobNotFoundError):
            orchestrator.stream_events("job_missing")

    def test_start_is_idempotent(self) -> None:
        async def go() -> int:
            orchestrator, _ = make_orchestrator(StubSources())
            await orchestrator.start()
            await orchestrator.start()
            workers = len(orchestrator._workers)
            await orchestrator.stop()
            return workers

        assert asyncio.run(go()) == 2
