from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from vidtranscribe.errors import UnknownEngineError, UnsupportedFormatError


class AudioFormat(str, Enum):
    """Container/codec for extracted audio."""

    WAV = "wav"
    M4A = "m4a"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "AudioFormat":
        value = str(raw if raw is not None else "wav").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        raise UnsupportedFormatError(f"Unsupported format: {raw}. Use wav or m4a.")


class Engine(str, Enum):
    """Transcription engine: remote HTTP API or local subprocess."""

    CLOUD = "cloud"
    LOCAL = "local"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Engine":
        value = str(raw if raw is not None else "cloud").strip().lower()
        value = _ENGINE_ALIASES.get(value, value)
        for member in cls:
            if member.value == value:
                return member
        raise UnknownEngineError(f"Unknown --engine: {raw}. Use cloud or local.")

    @property
    def transcript_extension(self) -> str:
        # The local engine emits subtitles; the cloud engine returns plain text.
        return "srt" if self is Engine.LOCAL else "txt"


_ENGINE_ALIASES = {"openai": "cloud", "mlx": "local"}


@dataclass(frozen=True)
class TrackDescriptor:
    """One audio stream inside a video container.

    ``audio_index`` counts audio streams only; ``stream_index`` is the
    container-global index reported by the probe and is informational.
    """

    audio_index: int
    stream_index: Optional[int] = None
    codec: Optional[str] = None
    channels: Optional[int] = None
    channel_layout: Optional[str] = None
    language: Optional[str] = None
    title: Optional[str] = None

    def to_line(self) -> str:
        parts = [f"track={self.audio_index}"]
        if self.stream_index is not None:
            parts.append(f"stream={self.stream_index}")
        if self.codec:
            parts.append(f"codec={self.codec}")
        if self.channels:
            parts.append(f"channels={self.channels}")
        if self.channel_layout:
            parts.append(f"layout={self.channel_layout}")
        if self.language:
            parts.append(f"lang={self.language}")
        if self.title:
            parts.append(f"title={self.title}")
        return " | ".join(parts)


@dataclass(frozen=True)
class OutputPathSet:
    output_dir: str
    extracted_audio_path: str
    transcript_path: str


@dataclass(frozen=True)
class LocalOutputTarget:
    """Where the local engine will write: it takes a directory and a stem."""

    output_dir: str
    output_name: str
    expected_path: str


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""


@dataclass
class ExtractOptions:
    track: Optional[str] = None
    tracks: Optional[str] = None
    out: Optional[str] = None
    out_dir: Optional[str] = None
    format: AudioFormat = AudioFormat.WAV
    transcribe: bool = False
    engine: Engine = Engine.CLOUD
    language: Optional[str] = None
    prompt: Optional[str] = None


@dataclass
class TranscribeOptions:
    out: Optional[str] = None
    engine: Engine = Engine.CLOUD
    language: Optional[str] = None
    prompt: Optional[str] = None


@dataclass
class BatchOptions:
    format: AudioFormat = AudioFormat.WAV
    language: Optional[str] = None
    prompt: Optional[str] = None


@dataclass
class BatchReport:
    """Outcome of a batch run: videos that finished and (video, error) pairs that did not."""

    succeeded: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
