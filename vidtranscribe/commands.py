"""User-facing operations: list tracks, extract (+transcribe), transcribe, batch.

Every operation runs strictly sequentially. Collaborators are reached through
the injected runner and settings, and results are written one per line to
``out``.
"""
from __future__ import annotations

import os
import sys
from typing import List, Optional, Sequence, TextIO

from vidtranscribe.config import Settings
from vidtranscribe.errors import ConflictingOutputSpecError, VidTranscribeError
from vidtranscribe.extract import extract_audio
from vidtranscribe.logging_utils import get_logger
from vidtranscribe.paths import (
    batch_output_dir,
    derive_extracted_audio_path,
    derive_output_paths,
    derive_transcript_path,
)
from vidtranscribe.probe import assert_file_exists, format_tracks, get_audio_tracks
from vidtranscribe.runner import CommandRunner, SubprocessRunner
from vidtranscribe.selection import resolve_selection, validate_against_inventory
from vidtranscribe.transcribe import transcribe, transcribe_local
from vidtranscribe.types import (
    BatchOptions,
    BatchReport,
    Engine,
    ExtractOptions,
    TrackDescriptor,
    TranscribeOptions,
)

log = get_logger(__name__)


def _emit(out: TextIO, line: str) -> None:
    out.write(f"{line}\n")
    out.flush()


def list_tracks(
    video_path: str,
    runner: Optional[CommandRunner] = None,
    settings: Optional[Settings] = None,
    out: Optional[TextIO] = None,
) -> List[TrackDescriptor]:
    """Print one ``key=value | ...`` line per audio track."""
    runner = runner or SubprocessRunner()
    settings = settings or Settings.from_env()
    out = out or sys.stdout

    tracks = get_audio_tracks(video_path, runner, settings)
    for line in format_tracks(tracks):
        _emit(out, line)
    return tracks


def extract_tracks(
    video_path: str,
    options: ExtractOptions,
    runner: Optional[CommandRunner] = None,
    settings: Optional[Settings] = None,
    out: Optional[TextIO] = None,
) -> List[str]:
    """Extract the selected tracks of one video, optionally transcribing each.

    The first failure aborts the remaining tracks. Returns every path
    printed, in order (audio, then transcript when chained).
    """
    runner = runner or SubprocessRunner()
    settings = settings or Settings.from_env()
    out = out or sys.stdout

    assert_file_exists(video_path)
    selection = resolve_selection(options.track, options.tracks)
    if len(selection) > 1 and options.out:
        raise ConflictingOutputSpecError(
            "When selecting multiple tracks, use --out-dir instead of --out."
        )

    tracks = get_audio_tracks(video_path, runner, settings)
    validate_against_inventory(selection, tracks)

    output_dir = os.path.abspath(options.out_dir) if options.out_dir else (os.path.dirname(video_path) or ".")
    os.makedirs(output_dir, exist_ok=True)

    written: List[str] = []
    for audio_index in selection:
        paths = derive_output_paths(
            video_path,
            audio_index,
            tracks[audio_index].language,
            options.format,
            options.engine,
            output_dir,
            override=options.out,
        )
        audio_path = extract_audio(video_path, audio_index, paths.extracted_audio_path, options.format,
                                   runner, settings)
        _emit(out, audio_path)
        written.append(audio_path)

        if options.transcribe:
            transcript = transcribe(
                options.engine,
                audio_path,
                runner,
                settings,
                out_path=paths.transcript_path,
                language=options.language,
                prompt=options.prompt,
                stdout=out,
            )
            if transcript:
                _emit(out, transcript)
                written.append(transcript)
    return written


def transcribe_file(
    audio_path: str,
    options: TranscribeOptions,
    runner: Optional[CommandRunner] = None,
    settings: Optional[Settings] = None,
    out: Optional[TextIO] = None,
) -> Optional[str]:
    """Transcribe an existing audio file; prints the written path or the text."""
    runner = runner or SubprocessRunner()
    settings = settings or Settings.from_env()
    out = out or sys.stdout

    assert_file_exists(audio_path)
    written = transcribe(
        options.engine,
        audio_path,
        runner,
        settings,
        out_path=options.out,
        language=options.language,
        prompt=options.prompt,
        stdout=out,
    )
    if written:
        _emit(out, written)
    return written


def _batch_one(
    video_path: str,
    options: BatchOptions,
    runner: CommandRunner,
    settings: Settings,
    out: TextIO,
) -> None:
    assert_file_exists(video_path)
    output_dir = batch_output_dir(video_path)
    os.makedirs(output_dir, exist_ok=True)

    tracks = get_audio_tracks(video_path, runner, settings)
    if not tracks:
        _emit(out, f"{video_path}: no audio tracks found")
        return

    for track in tracks:
        audio_path = derive_extracted_audio_path(
            video_path, track.audio_index, track.language, options.format, output_dir
        )
        extract_audio(video_path, track.audio_index, audio_path, options.format, runner, settings)

        transcript_path = derive_transcript_path(
            Engine.LOCAL, output_dir, video_path, track.audio_index, options.language or track.language
        )
        srt_path = transcribe_local(
            audio_path,
            runner,
            settings,
            out_path=transcript_path,
            language=options.language,
            prompt=options.prompt,
        )
        _emit(out, srt_path)


def batch_subtitles(
    videos: Sequence[str],
    options: BatchOptions,
    runner: Optional[CommandRunner] = None,
    settings: Optional[Settings] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> BatchReport:
    """Create .srt subtitles for every audio track of every video.

    Always uses the local engine. A failure abandons the rest of that
    video's tracks; later videos are still processed.
    """
    runner = runner or SubprocessRunner()
    settings = settings or Settings.from_env()
    out = out or sys.stdout
    err = err or sys.stderr

    report = BatchReport()
    for raw in videos:
        video_path = os.path.abspath(str(raw))
        log.info("batch video", extra={"video": video_path})
        try:
            _batch_one(video_path, options, runner, settings, out)
        except (VidTranscribeError, OSError) as e:
            log.error("batch video failed", extra={"video": video_path, "error": str(e)})
            err.write(f"Error: {video_path}: {e}\n")
            err.flush()
            report.failed.append((video_path, str(e)))
            continue
        report.succeeded.append(video_path)

    log.info(f"Completed: {len(report.succeeded)} succeeded, {len(report.failed)} failed")
    return report
