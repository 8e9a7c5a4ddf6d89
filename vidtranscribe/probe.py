from __future__ import annotations

import json
import os
from typing import Any, List, Optional

from vidtranscribe.config import Settings
from vidtranscribe.errors import (
    MediaNotFoundError,
    ProbeFailedError,
    ProbeParseError,
    ProbeUnavailableError,
)
from vidtranscribe.logging_utils import get_logger
from vidtranscribe.runner import CommandRunner
from vidtranscribe.types import TrackDescriptor

log = get_logger(__name__)

PROBE_ENTRIES = "stream=index,codec_name,channels,channel_layout:stream_tags=language,title"


def assert_file_exists(path: str) -> None:
    """Raise MediaNotFoundError unless path is a readable file."""
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise MediaNotFoundError(f"File not found or not readable: {path}")


def build_probe_args(video_path: str) -> List[str]:
    return [
        "-v", "error",
        "-select_streams", "a",
        "-show_entries", PROBE_ENTRIES,
        "-of", "json",
        video_path,
    ]


def parse_probe_output(stdout: str) -> List[TrackDescriptor]:
    """Turn ffprobe JSON into descriptors numbered by audio-only position."""
    try:
        parsed = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ProbeParseError(f"ffprobe output is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ProbeParseError("ffprobe output is not a JSON object")
    streams = parsed.get("streams", [])
    if not isinstance(streams, list):
        raise ProbeParseError("ffprobe output has a non-list 'streams' entry")

    tracks: List[TrackDescriptor] = []
    for audio_index, stream in enumerate(streams):
        if not isinstance(stream, dict):
            raise ProbeParseError(f"ffprobe stream entry {audio_index} is not an object")
        tags = stream.get("tags") or {}
        if not isinstance(tags, dict):
            tags = {}
        tracks.append(TrackDescriptor(
            audio_index=audio_index,
            stream_index=_as_int(stream.get("index")),
            codec=stream.get("codec_name"),
            channels=_as_int(stream.get("channels")),
            channel_layout=stream.get("channel_layout"),
            language=tags.get("language"),
            title=tags.get("title"),
        ))
    return tracks


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def get_audio_tracks(video_path: str, runner: CommandRunner, settings: Settings) -> List[TrackDescriptor]:
    """List the audio streams of video_path in container order.

    Raises:
        MediaNotFoundError: video_path is missing or unreadable
        ProbeUnavailableError: ffprobe is not on PATH
        ProbeFailedError: ffprobe exited non-zero
        ProbeParseError: ffprobe output has an unexpected shape
    """
    assert_file_exists(video_path)
    if runner.which(settings.ffprobe) is None:
        raise ProbeUnavailableError(f"Required command not found on PATH: {settings.ffprobe}")

    result = runner.run(settings.ffprobe, build_probe_args(video_path))
    if result.returncode != 0:
        raise ProbeFailedError(
            f"ffprobe failed for {video_path} (exit {result.returncode}): {result.stderr.strip()}",
            details=result.stderr,
        )

    tracks = parse_probe_output(result.stdout)
    log.info("probed audio tracks", extra={"video": video_path, "count": len(tracks)})
    return tracks


def format_tracks(tracks: List[TrackDescriptor]) -> List[str]:
    if not tracks:
        return ["No audio tracks found."]
    return [t.to_line() for t in tracks]
