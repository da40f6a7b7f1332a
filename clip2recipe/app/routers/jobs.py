# clip2recipe/app/routers/jobs.py
"""
Recipe job routes: start, status, event stream and result retrieval.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse

from clip2recipe.app.deps import get_orchestrator
from clip2recipe.app.domain.errors import JobNotFoundError
from clip2recipe.app.domain.models import JobEvent
from clip2recipe.app.routers.errors import error_response
from clip2recipe.app.schemas.jobs import (
    DeleteAssetsResponse,
    FeedbackRequest,
    FeedbackResponse,
    HistoryItem,
    HistoryResponse,
    JobProgress,
    JobStatusResponse,
    RecipeResultResponse,
    StartJobRequest,
    StartJobResponse,
)
from clip2recipe.app.services.job_orchestrator import JobOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Jobs"])


def format_sse(event: JobEvent) -> str:
    payload = json.dumps({"state": event.state.value})
    return f"event: {event.state.value}\ndata: {payload}\n\n"


@router.post("/start-job", response_model=StartJobResponse)
async def start_job(
    request: StartJobRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """
    Start processing an upload.

    Returns immediately. Follow ``sse_url`` for phase events and poll
    ``/get-recipe`` until the result is available.
    """
    handle = await orchestrator.start_job(request.upload_id)
    return StartJobResponse(job_id=handle.job_id, sse_url=handle.events_url)


@router.get("/jobs/{job_id}/status", response_model=JobStatusResponse)
async def get_job_status(
    job_id: str,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    try:
        snapshot = orchestrator.get_status(job_id)
    except JobNotFoundError as e:
        return error_response(status.HTTP_404_NOT_FOUND, "not_found", str(e))

    return JobStatusResponse(
        state=snapshot.state.value,
        progress=JobProgress(pct=snapshot.progress_pct),
    )


@router.get("/jobs/{job_id}/events")
async def stream_job_events(
    job_id: str,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    """
    Server-sent events, one per pipeline phase, closed after the terminal one.

    ``completed`` is only sent once the result can be fetched.
    """
    try:
        events = orchestrator.stream_events(job_id)
    except JobNotFoundError as e:
        return error_response(status.HTTP_404_NOT_FOUND, "not_found", str(e))

    async def event_stream():
        try:
            async for event in events:
                yield format_sse(event)
        finally:
            await events.aclose()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.get("/get-recipe", response_model=RecipeResultResponse)
async def get_recipe(
    job_id: Optional[str] = Query(default=None),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    if not job_id:
        return error_response(status.HTTP_400_BAD_REQUEST, "invalid_request", "job_id is required")

    result = orchestrator.get_result(job_id)
    if result is None:
        return error_response(
            status.HTTP_425_TOO_EARLY,
            "not_ready",
            "Job still processing, try again soon",
        )

    return RecipeResultResponse(
        recipe_json=result.recipe.to_dict(),
        markdown=result.markdown,
        txt=result.text,
    )


@router.get("/list-history", response_model=HistoryResponse)
async def list_history(
    limit: int = Query(default=20, ge=1, le=100),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    items = [
        HistoryItem(job_id=job_id, title=result.recipe.title)
        for job_id, result in orchestrator.list_history(limit)
    ]
    return HistoryResponse(items=items, next_cursor=None)


@router.post("/submit-feedback", response_model=FeedbackResponse)
async def submit_feedback(request: Optional[FeedbackRequest] = None):
    request = request or FeedbackRequest()
    logger.info(
        "feedback.received job=%s rating=%s comment_chars=%d",
        request.job_id,
        request.rating,
        len(request.comment or ""),
    )
    return FeedbackResponse(ok=True)


@router.delete("/delete-assets", response_model=DeleteAssetsResponse)
async def delete_assets():
    # TODO: purge stored uploads once a durable storage provider exists.
    return DeleteAssetsResponse(status="scheduled")
