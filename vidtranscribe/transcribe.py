from __future__ import annotations

import os
import sys
from typing import List, Optional, TextIO

from vidtranscribe.config import Settings
from vidtranscribe.errors import (
    EngineUnavailableError,
    MissingCredentialError,
    TranscriptionFailedError,
    TranscriptNotProducedError,
)
from vidtranscribe.logging_utils import get_logger
from vidtranscribe.paths import derive_local_output
from vidtranscribe.runner import CommandRunner
from vidtranscribe.types import Engine, LocalOutputTarget
from vidtranscribe import whisper_client

log = get_logger(__name__)


def transcribe_cloud(
    audio_path: str,
    settings: Settings,
    out_path: Optional[str] = None,
    language: Optional[str] = None,
    prompt: Optional[str] = None,
    stdout: Optional[TextIO] = None,
) -> Optional[str]:
    """Transcribe via the HTTP API.

    Writes the text verbatim to out_path, or to stdout with a guaranteed
    trailing newline. Returns out_path, or None when printed.
    """
    if not settings.openai_api_key:
        raise MissingCredentialError("OPENAI_API_KEY is not set. Set it to use the cloud engine.")

    text = whisper_client.create_transcription(
        audio_path,
        api_key=settings.openai_api_key,
        model=settings.cloud_model,
        language=language or None,
        prompt=prompt or None,
        base_url=settings.openai_base_url,
        timeout=settings.request_timeout,
    )

    if out_path:
        out_dir = os.path.dirname(out_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
        log.info("transcript written", extra={"output": out_path, "chars": len(text)})
        return out_path

    stream = stdout or sys.stdout
    stream.write(text if text.endswith("\n") else f"{text}\n")
    return None


def build_local_args(
    audio_path: str,
    target: LocalOutputTarget,
    model: str,
    language: Optional[str] = None,
    prompt: Optional[str] = None,
) -> List[str]:
    args = [audio_path, "--model", model, "--task", "transcribe"]
    if language:
        args += ["--language", str(language)]
    # greedy decoding with no carry-over keeps reruns from drifting
    args += ["--temperature", "0", "--verbose", "True"]
    if prompt:
        args += ["--initial-prompt", str(prompt)]
    args += [
        "--condition-on-previous-text", "False",
        "--compression-ratio-threshold", "2.0",
        "--logprob-threshold", "-0.7",
        "--fp16", "True",
        "--output-format", "srt",
        "--output-dir", target.output_dir,
        "--output-name", target.output_name,
    ]
    return args


def transcribe_local(
    audio_path: str,
    runner: CommandRunner,
    settings: Settings,
    out_path: Optional[str] = None,
    language: Optional[str] = None,
    prompt: Optional[str] = None,
) -> str:
    """Run the local engine and return the .srt path it wrote.

    The engine names its own output file; the path is predicted from
    out_path (or audio_path) and then checked on disk.
    """
    if runner.which(settings.local_engine) is None:
        raise EngineUnavailableError(f"Required command not found on PATH: {settings.local_engine}")

    target = derive_local_output(audio_path, out_path)
    os.makedirs(target.output_dir, exist_ok=True)

    log.info("local transcription", extra={"audio": audio_path, "expected": target.expected_path})
    result = runner.run(
        settings.local_engine,
        build_local_args(audio_path, target, settings.local_model, language, prompt),
    )
    if result.returncode != 0:
        raise TranscriptionFailedError(
            f"{settings.local_engine} failed for {audio_path} (exit {result.returncode}): "
            f"{result.stderr.strip()}",
            details=result.stderr,
        )
    if not os.path.isfile(target.expected_path):
        raise TranscriptNotProducedError(
            f"{settings.local_engine} finished but did not write {target.expected_path}"
        )
    return target.expected_path


def transcribe(
    engine: Engine,
    audio_path: str,
    runner: CommandRunner,
    settings: Settings,
    out_path: Optional[str] = None,
    language: Optional[str] = None,
    prompt: Optional[str] = None,
    stdout: Optional[TextIO] = None,
) -> Optional[str]:
    """Dispatch to the selected engine; returns the written path (None for stdout)."""
    if engine is Engine.LOCAL:
        return transcribe_local(audio_path, runner, settings, out_path, language, prompt)
    return transcribe_cloud(audio_path, settings, out_path, language, prompt, stdout)
