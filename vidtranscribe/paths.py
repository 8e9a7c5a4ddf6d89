from __future__ import annotations

import os
import re
from typing import Optional

from vidtranscribe.types import AudioFormat, Engine, LocalOutputTarget, OutputPathSet

UNDETERMINED_LANG = "und"

_UNSAFE_LANG_CHARS = re.compile(r"[^A-Za-z0-9-]+")


def safe_lang_tag(value: Optional[str]) -> str:
    """Reduce a language tag to a filesystem-safe token, ``und`` when empty."""
    lang = str(value if value is not None else "").strip()
    if not lang:
        return UNDETERMINED_LANG
    return _UNSAFE_LANG_CHARS.sub("_", lang)


def video_base_name(video_path: str) -> str:
    return os.path.splitext(os.path.basename(video_path))[0]


def _track_stem(video_path: str, audio_index: int, language: Optional[str]) -> str:
    return f"{video_base_name(video_path)}.a{audio_index}.{safe_lang_tag(language)}"


def derive_extracted_audio_path(
    video_path: str,
    audio_index: int,
    language: Optional[str],
    fmt: AudioFormat,
    output_dir: str,
    override: Optional[str] = None,
) -> str:
    """Return where the extracted track goes.

    An explicit override is returned verbatim; otherwise the name is
    ``{stem}.a{index}.{lang}.{format}`` inside output_dir.
    """
    if override:
        return override
    return os.path.join(output_dir, f"{_track_stem(video_path, audio_index, language)}.{fmt.value}")


def derive_transcript_path(
    engine: Engine,
    output_dir: str,
    video_path: str,
    audio_index: int,
    language: Optional[str],
) -> str:
    return os.path.join(
        output_dir, f"{_track_stem(video_path, audio_index, language)}.{engine.transcript_extension}"
    )


def derive_output_paths(
    video_path: str,
    audio_index: int,
    language: Optional[str],
    fmt: AudioFormat,
    engine: Engine,
    output_dir: str,
    override: Optional[str] = None,
) -> OutputPathSet:
    return OutputPathSet(
        output_dir=output_dir,
        extracted_audio_path=derive_extracted_audio_path(
            video_path, audio_index, language, fmt, output_dir, override
        ),
        transcript_path=derive_transcript_path(engine, output_dir, video_path, audio_index, language),
    )


def derive_local_output(audio_path: str, out_path: Optional[str] = None) -> LocalOutputTarget:
    """Split the desired subtitle path into the engine's directory + stem.

    The local engine writes ``<stem>.srt`` itself, so only the directory
    and stem of ``out_path`` (or of the audio file) are used.
    """
    source = out_path or audio_path
    output_dir = os.path.dirname(source) or "."
    output_name = os.path.splitext(os.path.basename(source))[0]
    return LocalOutputTarget(
        output_dir=output_dir,
        output_name=output_name,
        expected_path=os.path.join(output_dir, f"{output_name}.srt"),
    )


def batch_output_dir(video_path: str) -> str:
    """Sibling directory named after the video, used by batch runs."""
    return os.path.join(os.path.dirname(video_path), video_base_name(video_path))
