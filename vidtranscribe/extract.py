from __future__ import annotations

import os
from typing import List

from vidtranscribe.config import Settings
from vidtranscribe.errors import ExtractionFailedError, ExtractionToolUnavailableError
from vidtranscribe.logging_utils import get_logger
from vidtranscribe.runner import CommandRunner
from vidtranscribe.types import AudioFormat

log = get_logger(__name__)


def build_extract_args(video_path: str, audio_index: int, output_path: str, fmt: AudioFormat) -> List[str]:
    # -map 0:a:N picks the N-th audio stream; -vn drops video
    args = ["-y", "-i", video_path, "-map", f"0:a:{audio_index}", "-vn"]
    if fmt is AudioFormat.WAV:
        # 16 kHz mono 16-bit PCM, what speech models expect
        args += ["-acodec", "pcm_s16le", "-ar", "16000", "-ac", "1"]
    else:
        args += ["-c:a", "aac"]
    args.append(output_path)
    return args


def extract_audio(
    video_path: str,
    audio_index: int,
    output_path: str,
    fmt: AudioFormat,
    runner: CommandRunner,
    settings: Settings,
) -> str:
    """Extract one audio track with ffmpeg and return output_path.

    Raises:
        ExtractionToolUnavailableError: ffmpeg is not on PATH
        ExtractionFailedError: ffmpeg exited non-zero
    """
    if runner.which(settings.ffmpeg) is None:
        raise ExtractionToolUnavailableError(f"Required command not found on PATH: {settings.ffmpeg}")

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    log.info("extract track", extra={
        "video": video_path, "audio_index": audio_index, "output": output_path, "format": fmt.value
    })
    result = runner.run(settings.ffmpeg, build_extract_args(video_path, audio_index, output_path, fmt))
    if result.returncode != 0:
        raise ExtractionFailedError(
            f"ffmpeg failed extracting track {audio_index} from {video_path} "
            f"(exit {result.returncode}): {result.stderr.strip()}",
            details=result.stderr,
        )
    return output_path
