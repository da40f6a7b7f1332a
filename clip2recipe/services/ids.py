# clip2recipe/services/ids.py
import re
from typing import Optional

# watch?v=... plus the short-link and path forms
_YT_QUERY_RE = re.compile(r"[?&]v=([A-Za-z0-9_-]{6,})")
_YT_PATH_RE = re.compile(
    r"(?:youtu\.be/|youtube\.com/(?:embed/|shorts/|live/))([A-Za-z0-9_-]{6,})"
)


def extract_video_id(url: str) -> Optional[str]:
    """Return the video id carried by a YouTube URL, or None."""
    m = _YT_QUERY_RE.search(url or "")
    if m:
        return m.group(1)
    m = _YT_PATH_RE.search(url or "")
    if m:
        return m.group(1)
    return None


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
