import pytest

from conftest import FakeRunner, probe_result
from vidtranscribe import __version__, whisper_client
from vidtranscribe.config import Settings
from vidtranscribe_cli import main


def test_tracks_without_audio_exits_zero(video, settings, capsys):
    assert main(["tracks", video], FakeRunner({"ffprobe": probe_result()}), settings) == 0
    assert capsys.readouterr().out == "No audio tracks found.\n"


def test_errors_go_to_stderr_with_marker(tmp_path, runner, settings, capsys):
    assert main(["tracks", str(tmp_path / "missing.mkv")], runner, settings) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: File not found")


def test_unsupported_format_fails_before_any_tool(video, runner, settings, capsys):
    assert main(["extract", video, "--track", "0", "--format", "flac"], runner, settings) == 1
    assert "Unsupported format: flac" in capsys.readouterr().err
    assert runner.calls == []


def test_unknown_engine(video, runner, settings, capsys):
    assert main(["extract", video, "--track", "0", "--engine", "other"], runner, settings) == 1
    assert "Unknown --engine: other" in capsys.readouterr().err
    assert runner.calls == []


def test_conflicting_out(video, runner, settings, capsys):
    assert main(["extract", video, "--tracks", "0,1", "--out", "foo.wav"], runner, settings) == 1
    assert "--out-dir" in capsys.readouterr().err


def test_track_and_tracks_are_exclusive(video, runner, settings):
    with pytest.raises(SystemExit):
        main(["extract", video, "--track", "0", "--tracks", "0,1"], runner, settings)


def test_transcribe_cloud_without_key(tmp_path, monkeypatch, capsys):
    audio = tmp_path / "x.wav"
    audio.write_bytes(b"RIFF")

    def forbidden(*args, **kwargs):
        raise AssertionError("network call attempted")

    monkeypatch.setattr(whisper_client.requests, "post", forbidden)
    code = main(["transcribe", str(audio), "--engine", "cloud"], FakeRunner(), Settings.from_env({}))
    assert code == 1
    assert "OPENAI_API_KEY" in capsys.readouterr().err


def test_batch_exit_code_reflects_failures(tmp_path, video, runner, settings, capsys):
    assert main(["batch", video, str(tmp_path / "missing.mkv")], runner, settings) == 1
    captured = capsys.readouterr()
    assert len(captured.out.splitlines()) == 2
    assert "Error:" in captured.err


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_extract_with_only_commas_fails(video, runner, settings, capsys):
    assert main(["extract", video, "--tracks", ","], runner, settings) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: Invalid track selection")
    assert runner.calls == []


def test_track_with_comma_fails(video, runner, settings, capsys):
    assert main(["extract", video, "--track", "0,1"], runner, settings) == 1
    assert "Invalid --track value: 0,1" in capsys.readouterr().err
    assert runner.calls_to("ffmpeg") == []
