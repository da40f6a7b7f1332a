# clip2recipe/app/domain/models.py
"""
Domain models for recipe extraction jobs.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

Number = Union[int, float]

TIME_PLACEHOLDER = "—"


class SourceType(str, Enum):
    """Kind of source registered by an upload."""
    FILE = "file"
    URL = "url"


class JobState(str, Enum):
    """Lifecycle states of an extraction job, in pipeline order."""
    QUEUED = "queued"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    UNDERSTANDING = "understanding"
    SYNTHESIZING = "synthesizing"
    VALIDATING = "validating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)

    @property
    def progress_pct(self) -> int:
        return PROGRESS_BY_STATE[self]

    def can_transition_to(self, target: "JobState") -> bool:
        """States only move forward; any live state may fail."""
        if self.is_terminal:
            return False
        if target is JobState.FAILED:
            return True
        return PIPELINE_ORDER.index(target) > PIPELINE_ORDER.index(self)


PIPELINE_ORDER: tuple[JobState, ...] = (
    JobState.QUEUED,
    JobState.EXTRACTING,
    JobState.TRANSCRIBING,
    JobState.UNDERSTANDING,
    JobState.SYNTHESIZING,
    JobState.VALIDATING,
    JobState.COMPLETED,
)

PROGRESS_BY_STATE: dict[JobState, int] = {
    JobState.QUEUED: 0,
    JobState.EXTRACTING: 15,
    JobState.TRANSCRIBING: 35,
    JobState.UNDERSTANDING: 55,
    JobState.SYNTHESIZING: 72,
    JobState.VALIDATING: 90,
    JobState.COMPLETED: 100,
    JobState.FAILED: 100,
}


@dataclass(frozen=True)
class UploadRecord:
    """Source metadata registered before a job starts."""
    source_type: SourceType
    filename: str
    size_bytes: int
    source_url: Optional[str] = None

    @property
    def is_url(self) -> bool:
        return self.source_type is SourceType.URL and bool(self.source_url)


@dataclass(frozen=True)
class Ingredient:
    item: str
    quantity: Optional[Number] = None
    unit: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"quantity": self.quantity, "unit": self.unit, "item": self.item}


@dataclass(frozen=True)
class Step:
    n: int
    text: str
    time_hint: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"n": self.n, "text": self.text, "time_hint": self.time_hint}


@dataclass(frozen=True)
class RecipeTime:
    total: str = TIME_PLACEHOLDER
    active: str = TIME_PLACEHOLDER


@dataclass(frozen=True)
class Recipe:
    """Structured recipe produced by the synthesizer."""
    title: str
    servings: int
    time: RecipeTime = field(default_factory=RecipeTime)
    ingredients: tuple[Ingredient, ...] = ()
    equipment: tuple[str, ...] = ()
    steps: tuple[Step, ...] = ()
    notes: tuple[str, ...] = ()
    allergens: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "servings": self.servings,
            "time": {"total": self.time.total, "active": self.time.active},
            "ingredients": [i.to_dict() for i in self.ingredients],
            "equipment": list(self.equipment),
            "steps": [s.to_dict() for s in self.steps],
            "notes": list(self.notes),
            "allergens": list(self.allergens),
        }


@dataclass(frozen=True)
class JobResult:
    """Once-written output of a job: the recipe plus its renderings."""
    recipe: Recipe
    markdown: str
    text: str


@dataclass(frozen=True)
class JobEvent:
    job_id: str
    state: JobState


@dataclass(frozen=True)
class JobStatusSnapshot:
    state: JobState
    progress_pct: int


@dataclass(frozen=True)
class JobHandle:
    """What a caller gets back when a job is accepted."""
    job_id: str
    events_url: str


@dataclass(frozen=True)
class UploadTicket:
    upload_id: str
    storage_handoff: dict[str, Any]
