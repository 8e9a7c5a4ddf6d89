from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from vidtranscribe.logging_utils import get_logger

log = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 600.0


@dataclass(frozen=True)
class Settings:
    """Runtime settings for external tools and the cloud API.

    Attributes:
        openai_api_key: Bearer credential for the cloud engine (OPENAI_API_KEY)
        openai_base_url: API root, without trailing slash
        cloud_model: Model identifier sent to the cloud API
        local_model: Model identifier passed to the local engine
        ffprobe: Probing executable name or path
        ffmpeg: Transcoding executable name or path
        local_engine: Local transcription executable name or path
        request_timeout: Cloud request timeout in seconds
    """
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    cloud_model: str = "whisper-1"
    local_model: str = "mlx-community/whisper-large-v3-mlx"
    ffprobe: str = "ffprobe"
    ffmpeg: str = "ffmpeg"
    local_engine: str = "mlx_whisper"
    request_timeout: float = DEFAULT_TIMEOUT_SEC

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            openai_api_key=env.get("OPENAI_API_KEY", "").strip(),
            openai_base_url=(env.get("OPENAI_BASE_URL") or defaults.openai_base_url).rstrip("/"),
            cloud_model=env.get("VIDTRANSCRIBE_CLOUD_MODEL") or defaults.cloud_model,
            local_model=env.get("VIDTRANSCRIBE_LOCAL_MODEL") or defaults.local_model,
            ffprobe=env.get("VIDTRANSCRIBE_FFPROBE") or defaults.ffprobe,
            ffmpeg=env.get("VIDTRANSCRIBE_FFMPEG") or defaults.ffmpeg,
            local_engine=env.get("VIDTRANSCRIBE_MLX_WHISPER") or defaults.local_engine,
            request_timeout=_parse_timeout(env.get("VIDTRANSCRIBE_TIMEOUT")),
        )


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        log.warning("invalid VIDTRANSCRIBE_TIMEOUT; using default", extra={"value": raw})
        return DEFAULT_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_TIMEOUT_SEC
