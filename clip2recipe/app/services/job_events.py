"""
Per-job phase event log.

The pipeline appends one event per state transition; any number of
subscribers can replay the log from the start and then follow it live until
the terminal event.
"""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from clip2recipe.app.domain.models import JobEvent, JobState

logger = logging.getLogger(__name__)


class JobEventLog:
    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        self._events: list[JobEvent] = []
        self._wakeup = asyncio.Event()

    @property
    def events(self) -> tuple[JobEvent, ...]:
        return tuple(self._events)

    @property
    def closed(self) -> bool:
        return bool(self._events) and self._events[-1].state.is_terminal

    def emit(self, state: JobState) -> JobEvent:
        event = JobEvent(job_id=self.job_id, state=state)
        self._events.append(event)
        # wake everyone waiting on the old event, then arm a fresh one
        wakeup, self._wakeup = self._wakeup, asyncio.Event()
        wakeup.set()
        return event

    async def subscribe(self) -> AsyncIterator[JobEvent]:
        """Yield every event in order, ending after the terminal one.

        Closing the iterator early only detaches this subscriber.
        """
        position = 0
        try:
            while True:
                while position < len(self._events):
                    event = self._events[position]
                    position += 1
                    yield event
                    if event.state.is_terminal:
                        return
                await self._wakeup.wait()
        finally:
            logger.debug("events.subscriber_closed job=%s delivered=%d", self.job_id, position)
