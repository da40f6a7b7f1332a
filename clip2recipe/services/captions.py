from __future__ import annotations

import logging
import re
from functools import partial
from typing import Awaitable, Callable, Optional
from urllib.parse import urlencode

import httpx

from .fetcher import extract_player_response, fetch_text
from .ids import extract_video_id, watch_url
from .text import join_caption_items, timedtext_items, vtt_to_plain_text
from .types import CaptionTrack

logger = logging.getLogger(__name__)

TIMEDTEXT_ENDPOINT = "https://www.youtube.com/api/timedtext"
FALLBACK_LANGUAGES = ("en", "en-US", "en-GB", "es", "es-419")
PREFERRED_LANGUAGE_PATTERNS = (
    re.compile(r"^en(-|$)", re.IGNORECASE),
    re.compile(r"^es(-|$)", re.IGNORECASE),
)

Attempt = Callable[[httpx.AsyncClient, str], Awaitable[Optional[str]]]


def caption_tracks(player_response: dict | None) -> list[CaptionTrack]:
    if not isinstance(player_response, dict):
        return []
    captions = player_response.get("captions")
    renderer = captions.get("playerCaptionsTracklistRenderer") if isinstance(captions, dict) else None
    raw_tracks = renderer.get("captionTracks") if isinstance(renderer, dict) else None
    if not isinstance(raw_tracks, list):
        return []

    tracks: list[CaptionTrack] = []
    for entry in raw_tracks:
        if not isinstance(entry, dict):
            continue
        base_url = entry.get("baseUrl")
        if not isinstance(base_url, str) or not base_url:
            continue
        tracks.append(CaptionTrack(language_code=str(entry.get("languageCode") or ""), base_url=base_url))
    return tracks


def pick_track(tracks: list[CaptionTrack]) -> CaptionTrack | None:
    """English first, then Spanish, then whatever comes first."""
    for pattern in PREFERRED_LANGUAGE_PATTERNS:
        for track in tracks:
            if pattern.match(track.language_code):
                return track
    return tracks[0] if tracks else None


def with_format_hint(base_url: str, fmt: str = "vtt") -> str:
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}fmt={fmt}"


def legacy_timedtext_url(video_id: str, language: str) -> str:
    return f"{TIMEDTEXT_ENDPOINT}?{urlencode({'lang': language, 'v': video_id})}"


async def _track_as_vtt(client: httpx.AsyncClient, track: CaptionTrack) -> str | None:
    body = await fetch_text(client, with_format_hint(track.base_url))
    return vtt_to_plain_text(body) or None


async def _track_as_timedtext(client: httpx.AsyncClient, track: CaptionTrack) -> str | None:
    body = await fetch_text(client, track.base_url)
    items = timedtext_items(body)
    return join_caption_items(items) if items else None


async def _from_player_tracks(client: httpx.AsyncClient, video_id: str) -> str | None:
    page = await fetch_text(client, watch_url(video_id))
    track = pick_track(caption_tracks(extract_player_response(page)))
    if track is None:
        logger.debug("captions.no_tracks video=%s", video_id)
        return None

    for reader in (_track_as_vtt, _track_as_timedtext):
        try:
            text = await reader(client, track)
        except Exception as error:
            logger.debug("captions.track_read_failed video=%s reader=%s error=%s", video_id, reader.__name__, error)
            continue
        if text:
            logger.info("captions.track_hit video=%s lang=%s reader=%s", video_id, track.language_code, reader.__name__)
            return text
    return None


async def _from_legacy_endpoint(client: httpx.AsyncClient, video_id: str, *, language: str) -> str | None:
    body = await fetch_text(client, legacy_timedtext_url(video_id, language))
    if "<text" not in body:
        return None
    items = timedtext_items(body)
    return join_caption_items(items) if items else None


ATTEMPTS: tuple[Attempt, ...] = (
    _from_player_tracks,
    *(partial(_from_legacy_endpoint, language=lang) for lang in FALLBACK_LANGUAGES),
)


def _attempt_name(attempt: Attempt) -> str:
    if isinstance(attempt, partial):
        return f"{attempt.func.__name__}[{attempt.keywords.get('language')}]"
    return attempt.__name__


async def retrieve(url: str, client: httpx.AsyncClient) -> str:
    """Return the best caption text available for ``url``, or ``""``.

    Attempts run in the order of ``ATTEMPTS``; any failure inside one of them
    just moves on to the next.
    """
    video_id = extract_video_id(url)
    if not video_id:
        logger.info("captions.no_video_id url=%s", url)
        return ""

    for attempt in ATTEMPTS:
        try:
            text = await attempt(client, video_id)
        except Exception as error:
            logger.debug("captions.attempt_failed video=%s attempt=%s error=%s", video_id, _attempt_name(attempt), error)
            continue
        if text:
            logger.info("captions.done video=%s attempt=%s chars=%d", video_id, _attempt_name(attempt), len(text))
            return text

    logger.info("captions.unavailable video=%s", video_id)
    return ""
