"""Audio track inventory, extraction and transcription for video files.

The package is split into small typed modules that the CLI script
``vidtranscribe_cli.py`` wires together. External tools (ffprobe, ffmpeg,
mlx_whisper) are reached through an injectable command runner.
"""

__version__ = "0.1.0"
