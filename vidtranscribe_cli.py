#!/usr/bin/env python3
"""
vidtranscribe: list, extract and transcribe audio tracks of video files.

Examples:
  vidtranscribe tracks movie.mkv
  vidtranscribe extract movie.mkv --tracks 0,2 --out-dir audio/ --transcribe --engine local
  vidtranscribe transcribe movie.a0.eng.wav --out movie.a0.eng.txt
  vidtranscribe batch ep1.mkv ep2.mkv --language en
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from vidtranscribe import __version__
from vidtranscribe.commands import batch_subtitles, extract_tracks, list_tracks, transcribe_file
from vidtranscribe.config import Settings
from vidtranscribe.errors import VidTranscribeError
from vidtranscribe.logging_utils import get_logger, setup_logging
from vidtranscribe.runner import CommandRunner, SubprocessRunner
from vidtranscribe.types import AudioFormat, BatchOptions, Engine, ExtractOptions, TranscribeOptions

log = get_logger(__name__)

ERROR_MARKER = "Error:"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vidtranscribe",
        description="List/extract multi-track audio from video and transcribe with Whisper.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", type=str, default=None, help="log level (e.g., INFO, DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_tracks = sub.add_parser("tracks", help="List audio tracks in a video file")
    p_tracks.add_argument("video", help="path to video file")

    p_extract = sub.add_parser("extract", help="Extract audio track(s) from a video using ffmpeg")
    p_extract.add_argument("video", help="path to video file")
    group = p_extract.add_mutually_exclusive_group()
    group.add_argument("--track", help="0-based audio track index (from `tracks`)")
    group.add_argument("--tracks", help="comma-separated audio track indices (e.g., 0,2,3)")
    p_extract.add_argument("--out", help="output audio file path (single track only)")
    p_extract.add_argument("--out-dir", help="output directory (recommended for multi-track)")
    p_extract.add_argument("--format", default="wav", help="output format: wav or m4a (default: wav)")
    p_extract.add_argument("--transcribe", action="store_true",
                           help="after extracting, transcribe each extracted track")
    p_extract.add_argument("--engine", default="cloud",
                           help="cloud (uses OPENAI_API_KEY) or local (uses mlx_whisper); default: cloud")
    p_extract.add_argument("--language", help="language code hint (e.g., en)")
    p_extract.add_argument("--prompt", help="prompt to guide transcription")

    p_transcribe = sub.add_parser("transcribe", help="Transcribe an audio file")
    p_transcribe.add_argument("audio", help="path to audio file (wav/m4a/mp3, etc.)")
    p_transcribe.add_argument("--out", help="write transcript to a file instead of stdout")
    p_transcribe.add_argument("--engine", default="cloud",
                              help="cloud (uses OPENAI_API_KEY) or local (uses mlx_whisper); default: cloud")
    p_transcribe.add_argument("--language", help="language code hint (e.g., en)")
    p_transcribe.add_argument("--prompt", help="optional prompt to guide transcription")

    p_batch = sub.add_parser(
        "batch",
        help="Create .srt subtitles for all audio tracks of one or more videos (local engine). "
             "Writes to a sibling folder named after each video.",
    )
    p_batch.add_argument("videos", nargs="+", help="one or more video file paths")
    p_batch.add_argument("--format", default="wav", help="intermediate audio format: wav or m4a")
    p_batch.add_argument("--language", help="language code for mlx_whisper (e.g., en)")
    p_batch.add_argument("--prompt", help="optional prompt to guide transcription")
    return parser


def run(
    args: argparse.Namespace,
    runner: Optional[CommandRunner] = None,
    settings: Optional[Settings] = None,
) -> int:
    runner = runner or SubprocessRunner()
    settings = settings or Settings.from_env()

    if args.command == "tracks":
        list_tracks(args.video, runner, settings)
        return 0

    if args.command == "extract":
        options = ExtractOptions(
            track=args.track,
            tracks=args.tracks,
            out=args.out,
            out_dir=args.out_dir,
            format=AudioFormat.parse(args.format),
            transcribe=args.transcribe,
            engine=Engine.parse(args.engine),
            language=args.language,
            prompt=args.prompt,
        )
        extract_tracks(args.video, options, runner, settings)
        return 0

    if args.command == "transcribe":
        options = TranscribeOptions(
            out=args.out,
            engine=Engine.parse(args.engine),
            language=args.language,
            prompt=args.prompt,
        )
        transcribe_file(args.audio, options, runner, settings)
        return 0

    options = BatchOptions(
        format=AudioFormat.parse(args.format),
        language=args.language,
        prompt=args.prompt,
    )
    report = batch_subtitles(args.videos, options, runner, settings)
    return 0 if report.ok else 1


def main(
    argv: Optional[List[str]] = None,
    runner: Optional[CommandRunner] = None,
    settings: Optional[Settings] = None,
) -> int:
    """CLI entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        return run(args, runner, settings)
    except (VidTranscribeError, OSError) as e:
        log.debug("command failed", exc_info=True)
        sys.stderr.write(f"{ERROR_MARKER} {e}\n")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
