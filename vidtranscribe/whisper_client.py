from __future__ import annotations

import os
from typing import Optional

import requests

from vidtranscribe.errors import TranscriptionFailedError
from vidtranscribe.logging_utils import get_logger

log = get_logger(__name__)


def create_transcription(
    audio_path: str,
    api_key: str,
    model: str = "whisper-1",
    language: Optional[str] = None,
    prompt: Optional[str] = None,
    base_url: str = "https://api.openai.com/v1",
    timeout: float = 600.0,
) -> str:
    """POST audio to the transcription endpoint and return plain text or raise TranscriptionFailedError."""
    url = f"{base_url}/audio/transcriptions"
    headers = {"Authorization": f"Bearer {api_key}"}
    data = {"model": model, "response_format": "text"}
    if language:
        data["language"] = language
    if prompt:
        data["prompt"] = prompt

    log.debug("transcriptions POST", extra={"url": url, "model": model, "audio": audio_path})
    try:
        with open(audio_path, "rb") as fh:
            files = {"file": (os.path.basename(audio_path), fh)}
            resp = requests.post(url, headers=headers, data=data, files=files, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        body = getattr(getattr(e, "response", None), "text", None)
        log.error("transcription request failed", extra={"audio": audio_path, "error": str(e)})
        raise TranscriptionFailedError(f"Cloud transcription failed for {audio_path}: {e}", details=body) from e
    except OSError as e:
        raise TranscriptionFailedError(f"Cannot read audio file {audio_path}: {e}") from e

    return resp.text
