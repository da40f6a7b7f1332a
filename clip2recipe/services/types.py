from dataclasses import dataclass


@dataclass(frozen=True)
class VideoMetadata:
    title: str
    description: str


@dataclass(frozen=True)
class CaptionTrack:
    language_code: str
    base_url: str
