from __future__ import annotations

import dataclasses

import pytest

from clip2recipe.app.domain.models import (
    Ingredient,
    JobResult,
    JobState,
    PIPELINE_ORDER,
    Recipe,
    RecipeTime,
    SourceType,
    Step,
    UploadRecord,
)


class TestJobState:
    def test_job_state_values(self) -> None:
        assert [s.value for s in PIPELINE_ORDER] == [
            "queued",
            "extracting",
            "transcribing",
            "understanding",
            "synthesizing",
            "validating",
            "completed",
        ]
        assert JobState.FAILED.value == "failed"

    def test_job_state_is_string_enum(self) -> None:
        assert isinstance(JobState.QUEUED, str)
        assert JobState.QUEUED == "queued"

    def test_terminal_states(self) -> None:
        assert JobState.COMPLETED.is_terminal is True
        assert JobState.FAILED.is_terminal is True
        assert JobState.SYNTHESIZING.is_terminal is False

    def test_progress_is_monotonic_along_pipeline(self) -> None:
        progress = [s.progress_pct for s in PIPELINE_ORDER]
        assert progress == sorted(progress)
        assert progress[0] == 0
        assert progress[-1] == 100

    def test_forward_transitions_allowed(self) -> None:
        assert JobState.QUEUED.can_transition_to(JobState.EXTRACTING) is True
        assert JobState.VALIDATING.can_transition_to(JobState.COMPLETED) is True

    def test_backward_transitions_rejected(self) -> None:
        assert JobState.TRANSCRIBING.can_transition_to(JobState.EXTRACTING) is False
        assert JobState.EXTRACTING.can_transition_to(JobState.EXTRACTING) is False

    def test_any_live_state_can_fail(self) -> None:
        for state in PIPELINE_ORDER[:-1]:
            assert state.can_transition_to(JobState.FAILED) is True

    def test_terminal_states_are_final(self) -> None:
        assert JobState.COMPLETED.can_transition_to(JobState.FAILED) is False
        assert JobState.FAILED.can_transition_to(JobState.COMPLETED) is False


class TestUploadRecord:
    def test_url_record(self) -> None:
        record = UploadRecord(
            source_type=SourceType.URL,
            filename="video",
            size_bytes=0,
            source_url="https://www.youtube.com/watch?v=abcdef12345",
        )
        assert record.is_url is True

    def test_file_record_is_not_url(self) -> None:
        record = UploadRecord(source_type=SourceType.FILE, filename="clip.mp4", size_bytes=10)
        assert record.is_url is False
        assert record.source_url is None

    def test_record_is_immutable(self) -> None:
        record = UploadRecord(source_type=SourceType.FILE, filename="clip.mp4", size_bytes=10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.size_bytes = 20  # type: ignore[misc]


class TestRecipe:
    def test_to_dict_shape(self) -> None:
        recipe = Recipe(
            title="Pancakes",
            servings=4,
            ingredients=(Ingredient(item="flour", quantity=2, unit="cups"), Ingredient(item="salt")),
            steps=(Step(n=1, text="Mix for 2 minutes.", time_hint="2 minutes"),),
        )

        data = recipe.to_dict()

        assert data == {
            "title": "Pancakes",
            "servings": 4,
            "time": {"total": "—", "active": "—"},
            "ingredients": [
                {"quantity": 2, "unit": "cups", "item": "flour"},
                {"quantity": None, "unit": None, "item": "salt"},
            ],
            "equipment": [],
            "steps": [{"n": 1, "text": "Mix for 2 minutes.", "time_hint": "2 minutes"}],
            "notes": [],
            "allergens": [],
        }

    def test_default_time_placeholder(self) -> None:
        assert RecipeTime().total == RecipeTime().active == "—"


class TestJobResult:
    def test_result_is_immutable(self) -> None:
        result = JobResult(recipe=Recipe(title="X", servings=1), markdown="# X", text="X")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.markdown = "changed"  # type: ignore[misc]
