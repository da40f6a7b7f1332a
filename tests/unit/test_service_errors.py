from __future__ import annotations

import pytest

from clip2recipe.services.errors import (
    ServiceError,
    InvalidURLError,
    FetchFailedError,
    NetworkTimeoutError,
)


class TestServiceError:
    def test_base_exception(self) -> None:
        error = ServiceError("Base service error")
        assert str(error) == "Base service error"
        assert isinstance(error, Exception)


class TestInvalidURLError:
    def test_invalid_url(self) -> None:
        error = InvalidURLError("Not a valid URL")
        assert "Not a valid URL" in str(error)
        assert isinstance(error, ServiceError)


class TestFetchFailedError:
    def test_carries_url_and_status(self) -> None:
        error = FetchFailedError("https://example.com/watch", "HTTP 503", status_code=503)
        assert str(error) == "Fetch failed for https://example.com/watch: HTTP 503"
        assert error.url == "https://example.com/watch"
        assert error.status_code == 503
        assert isinstance(error, ServiceError)

    def test_status_is_optional(self) -> None:
        assert FetchFailedError("https://example.com", "network error: down").status_code is None


class TestNetworkTimeoutError:
    def test_timeout_with_url_and_seconds(self) -> None:
        error = NetworkTimeoutError("https://example.com/video", 15.0)
        assert "https://example.com/video" in str(error)
        assert "15" in str(error)
        assert error.url == "https://example.com/video"
        assert error.timeout_seconds == 15.0

    def test_inherits_from_service_error(self) -> None:
        error = NetworkTimeoutError("https://example.com", 10.0)
        assert isinstance(error, ServiceError)

    def test_can_be_caught_as_service_error(self) -> None:
        with pytest.raises(ServiceError):
            raise NetworkTimeoutError("https://example.com", 1.0)


class TestExceptionHierarchy:
    def test_all_errors_inherit_from_service_error(self) -> None:
        assert issubclass(InvalidURLError, ServiceError)
        assert issubclass(FetchFailedError, ServiceError)
        assert issubclass(NetworkTimeoutError, ServiceError)
