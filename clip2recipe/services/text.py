from __future__ import annotations

import html
import json
import re
from typing import Any

VTT_TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")
TIMEDTEXT_ITEM_PATTERN = re.compile(r"<text[^>]*>([\s\S]*?)</text>")
VTT_SKIP_PREFIXES = ("NOTE", "STYLE", "REGION", "WEBVTT")


def normalize_whitespace(value: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def decode_html(value: str) -> str:
    return html.unescape(value)


def safe_json(raw: str) -> Any | None:
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return None


def decode_json_object_at(text: str, start: int) -> dict | None:
    """Decode the JSON object that begins at ``text[start]``.

    Trailing page content is ignored, so the object does not need to be
    isolated first.
    """
    try:
        value, _ = json.JSONDecoder().raw_decode(text, start)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def unescape_json_string(escaped: str) -> str | None:
    """Interpret ``escaped`` as the body of a JSON string literal."""
    return safe_json(f'"{escaped}"')


def _is_vtt_content_line(line: str) -> bool:
    if not line:
        return False
    if line.startswith(VTT_SKIP_PREFIXES):
        return False
    if "-->" in line:
        return False
    if line.isdigit():
        return False
    return True


def vtt_to_plain_text(content: str) -> str:
    in_header = False
    in_note_block = False
    text_lines: list[str] = []

    for raw_line in content.splitlines():
        stripped = raw_line.strip()

        if stripped.startswith("WEBVTT"):
            in_header = True
            continue

        if in_header or in_note_block:
            if not stripped:
                in_header = in_note_block = False
            continue

        if stripped.startswith("NOTE"):
            in_note_block = True
            continue

        if not _is_vtt_content_line(stripped):
            continue

        cleaned = VTT_TAG_PATTERN.sub("", stripped).strip()
        if cleaned:
            text_lines.append(cleaned)

    return normalize_whitespace(" ".join(text_lines))


def timedtext_items(xml: str) -> list[str]:
    """Return the decoded ``<text>`` payloads of a timedtext caption document."""
    return [decode_html(match.group(1)) for match in TIMEDTEXT_ITEM_PATTERN.finditer(xml)]


def join_caption_items(items: list[str]) -> str:
    return normalize_whitespace(" ".join(items))
