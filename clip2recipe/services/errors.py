from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    pass


class InvalidURLError(ServiceError):
    pass


class FetchFailedError(ServiceError):
    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"Fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class NetworkTimeoutError(ServiceError):
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds
