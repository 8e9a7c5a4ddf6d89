from __future__ import annotations

from typing import Optional


class VidTranscribeError(Exception):
    """Base error for the vidtranscribe pipeline."""


class MediaNotFoundError(VidTranscribeError, FileNotFoundError):
    """Raised when an input video or audio file is missing or unreadable."""


class ProbeUnavailableError(VidTranscribeError):
    """Raised when the probing tool (ffprobe) cannot be found."""


class ProbeParseError(VidTranscribeError):
    """Raised when probe output is not the expected JSON shape."""


class ProbeFailedError(VidTranscribeError):
    """Raised when the probing tool exits with a non-zero status."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.details = details


class UnsupportedFormatError(VidTranscribeError):
    """Raised for an extraction format other than wav or m4a."""


class InvalidSelectionError(VidTranscribeError):
    """Raised when a track selection cannot be parsed."""


class TrackOutOfRangeError(VidTranscribeError):
    """Raised when a selected track index is not in the inventory."""

    def __init__(self, message: str, index: int) -> None:
        super().__init__(message)
        self.index = index


class ConflictingOutputSpecError(VidTranscribeError):
    """Raised when one explicit output path is given for several tracks."""


class ExtractionToolUnavailableError(VidTranscribeError):
    """Raised when the transcoding tool (ffmpeg) cannot be found."""


class ExtractionFailedError(VidTranscribeError):
    """Raised when ffmpeg exits with a non-zero status."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.details = details


class MissingCredentialError(VidTranscribeError):
    """Raised when the cloud engine is selected without an API key."""


class EngineUnavailableError(VidTranscribeError):
    """Raised when the local transcription engine cannot be found."""


class TranscriptionFailedError(VidTranscribeError):
    """Raised when either transcription engine fails."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.details = details


class TranscriptNotProducedError(VidTranscribeError):
    """Raised when the local engine succeeds but its subtitle file is absent."""


class UnknownEngineError(VidTranscribeError):
    """Raised for an engine name other than cloud or local."""
