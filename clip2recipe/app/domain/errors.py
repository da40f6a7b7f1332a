from __future__ import annotations


class RecipeJobError(Exception):
    pass


class JobNotFoundError(RecipeJobError):
    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class ResultAlreadyPublishedError(RecipeJobError):
    def __init__(self, job_id: str):
        super().__init__(f"Result already published for job {job_id}")
        self.job_id = job_id


class InvalidJobTransitionError(RecipeJobError):
    def __init__(self, job_id: str, current: str, target: str):
        super().__init__(f"Job {job_id} cannot move from {current} to {target}")
        self.job_id = job_id
        self.current = current
        self.target = target
