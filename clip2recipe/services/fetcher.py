from __future__ import annotations

import logging
import re
from typing import Callable, Optional

import httpx

from .errors import FetchFailedError, InvalidURLError, NetworkTimeoutError
from .text import decode_html, decode_json_object_at, unescape_json_string
from .types import VideoMetadata

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Recipe"
DEFAULT_TIMEOUT_SECONDS = 15.0

PLAYER_RESPONSE_PATTERN = re.compile(r"ytInitialPlayerResponse\s*=\s*\{")
OG_TITLE_PATTERN = re.compile(r'<meta\s+property="og:title"\s+content="([^"]+)"', re.IGNORECASE)
RAW_DESCRIPTION_PATTERN = re.compile(r'"shortDescription":"([\s\S]*?)"\s*,\s*"isCrawlable"')

# (page html, parsed player response) -> value or None
Strategy = Callable[[str, Optional[dict]], Optional[str]]


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    accept_language: str = "en",
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"accept-language": accept_language},
        transport=transport,
    )


async def fetch_text(client: httpx.AsyncClient, url: str) -> str:
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.text
    except httpx.TimeoutException as error:
        timeout = client.timeout.read if client.timeout.read is not None else 0.0
        raise NetworkTimeoutError(url, timeout) from error
    except httpx.HTTPStatusError as error:
        status_code = error.response.status_code
        raise FetchFailedError(url, f"HTTP {status_code}", status_code=status_code) from error
    except httpx.HTTPError as error:
        raise FetchFailedError(url, f"network error: {error}") from error
    except (httpx.InvalidURL, ValueError) as error:
        # httpx rejects some malformed urls with a bare ValueError
        raise InvalidURLError(f"Invalid URL {url!r}: {error}") from error


def extract_player_response(page: str) -> dict | None:
    """Locate and decode the embedded ``ytInitialPlayerResponse`` object."""
    match = PLAYER_RESPONSE_PATTERN.search(page)
    if not match:
        return None
    return decode_json_object_at(page, match.end() - 1)


def _clean_string(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _video_details(player_response: dict | None) -> dict:
    if not isinstance(player_response, dict):
        return {}
    details = player_response.get("videoDetails")
    return details if isinstance(details, dict) else {}


def _title_from_player(page: str, player_response: dict | None) -> str | None:
    return _clean_string(_video_details(player_response).get("title"))


def _title_from_og_meta(page: str, player_response: dict | None) -> str | None:
    match = OG_TITLE_PATTERN.search(page)
    return _clean_string(decode_html(match.group(1))) if match else None


def _description_from_player(page: str, player_response: dict | None) -> str | None:
    description = _video_details(player_response).get("shortDescription")
    return description if isinstance(description, str) and description else None


def _description_from_raw_field(page: str, player_response: dict | None) -> str | None:
    match = RAW_DESCRIPTION_PATTERN.search(page)
    if not match:
        return None
    return unescape_json_string(match.group(1)) or None


TITLE_STRATEGIES: tuple[Strategy, ...] = (_title_from_player, _title_from_og_meta)
DESCRIPTION_STRATEGIES: tuple[Strategy, ...] = (_description_from_player, _description_from_raw_field)


def _first_hit(strategies: tuple[Strategy, ...], page: str, player_response: dict | None) -> str | None:
    for strategy in strategies:
        try:
            value = strategy(page, player_response)
        except (TypeError, ValueError, AttributeError) as error:
            logger.debug("resolver.strategy_failed strategy=%s error=%s", strategy.__name__, error)
            continue
        if value:
            return value
    return None


def parse_video_page(page: str) -> VideoMetadata:
    player_response = extract_player_response(page)
    title = _first_hit(TITLE_STRATEGIES, page, player_response) or DEFAULT_TITLE
    description = _first_hit(DESCRIPTION_STRATEGIES, page, player_response) or ""
    return VideoMetadata(title=title, description=description)


async def resolve(url: str, client: httpx.AsyncClient) -> VideoMetadata:
    """Fetch the hosting page and pull out its title and description.

    Never raises: an unreachable page resolves to the default title and an
    empty description.
    """
    try:
        page = await fetch_text(client, url)
    except Exception as error:
        logger.warning("resolver.page_unavailable url=%s error=%s", url, error)
        page = ""

    metadata = parse_video_page(page)
    logger.info(
        "resolver.done url=%s title=%r description_chars=%d",
        url,
        metadata.title,
        len(metadata.description),
    )
    return metadata
