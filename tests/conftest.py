from __future__ import annotations

import json
import os
from typing import Callable, Dict, List, Optional, Set, Tuple, Union

import pytest

from vidtranscribe.config import Settings
from vidtranscribe.types import CommandResult

Handler = Union[CommandResult, Callable[[List[str]], CommandResult]]


class FakeRunner:
    """Records calls and answers with canned results; never shells out."""

    def __init__(self, handlers: Optional[Dict[str, Handler]] = None, missing: Optional[Set[str]] = None):
        self.handlers: Dict[str, Handler] = dict(handlers or {})
        self.missing: Set[str] = set(missing or ())
        self.calls: List[Tuple[str, List[str]]] = []

    def which(self, name: str) -> Optional[str]:
        return None if name in self.missing else f"/usr/bin/{name}"

    def run(self, name: str, args: List[str]) -> CommandResult:
        self.calls.append((name, list(args)))
        handler = self.handlers.get(name, CommandResult(0))
        if callable(handler):
            return handler(list(args))
        return handler

    def calls_to(self, name: str) -> List[List[str]]:
        return [args for called, args in self.calls if called == name]


def probe_result(*streams: dict) -> CommandResult:
    return CommandResult(0, stdout=json.dumps({"streams": list(streams)}))


def fake_ffmpeg(args: List[str]) -> CommandResult:
    with open(args[-1], "wb") as f:
        f.write(b"RIFF")
    return CommandResult(0)


def fake_mlx(args: List[str]) -> CommandResult:
    out_dir = args[args.index("--output-dir") + 1]
    name = args[args.index("--output-name") + 1]
    with open(os.path.join(out_dir, f"{name}.srt"), "w", encoding="utf-8") as f:
        f.write("1\n00:00:00,000 --> 00:00:01,000\nhello\n\n")
    return CommandResult(0)


TWO_TRACKS = (
    {"index": 1, "codec_name": "aac", "channels": 2, "channel_layout": "stereo",
     "tags": {"language": "eng", "title": "Main"}},
    {"index": 2, "codec_name": "ac3", "channels": 6, "channel_layout": "5.1(side)",
     "tags": {"language": "fre"}},
)


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="sk-test")


@pytest.fixture
def video(tmp_path) -> str:
    path = tmp_path / "movie.mkv"
    path.write_bytes(b"\x1a\x45\xdf\xa3")
    return str(path)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner({
        "ffprobe": probe_result(*TWO_TRACKS),
        "ffmpeg": fake_ffmpeg,
        "mlx_whisper": fake_mlx,
    })
