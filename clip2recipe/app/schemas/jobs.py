from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str
    message: str


class StartJobRequest(BaseModel):
    upload_id: str = Field(..., min_length=1)


class StartJobResponse(BaseModel):
    job_id: str
    sse_url: str


class JobProgress(BaseModel):
    pct: int = Field(..., ge=0, le=100)


class JobStatusResponse(BaseModel):
    state: str
    progress: JobProgress


class RecipeResultResponse(BaseModel):
    recipe_json: dict[str, Any]
    markdown: str
    txt: str


class HistoryItem(BaseModel):
    job_id: str
    title: str


class HistoryResponse(BaseModel):
    items: list[HistoryItem] = Field(default_factory=list)
    next_cursor: Optional[str] = None


class FeedbackRequest(BaseModel):
    job_id: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class FeedbackResponse(BaseModel):
    ok: bool = True


class DeleteAssetsResponse(BaseModel):
    status: str
