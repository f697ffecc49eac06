import asyncio

import ffmpeg
import pytest

from kanascribe.exceptions import TranscodeError
from kanascribe.speech_pipeline import transcoder as transcoder_module
from kanascribe.speech_pipeline.schemas import TranscodeRequest
from kanascribe.speech_pipeline.transcoder import Transcoder

URL = "https://example.com/clip.webm"


def _option(args, flag):
    return args[args.index(flag) + 1]


def test_builds_mono_pcm_command(tmp_path):
    out = tmp_path / "out.wav"
    stream = Transcoder(sample_rate=16000).build_stream(TranscodeRequest(source_url=URL), out)

    args = ffmpeg.compile(stream)

    assert _option(args, "-i") == URL
    assert _option(args, "-f") == "wav"
    assert _option(args, "-acodec") == "pcm_s16le"
    assert _option(args, "-ac") == "1"
    assert _option(args, "-ar") == "16000"
    assert args[-1] == str(out)


def test_runs_ffmpeg_quietly_with_configured_binary(tmp_path, monkeypatch):
    calls = []

    def fake_run(stream, **kwargs):
        calls.append(kwargs)
        return b"", b""

    monkeypatch.setattr(transcoder_module.ffmpeg, "run", fake_run)
    out = tmp_path / "out.wav"

    result = asyncio.run(Transcoder(ffmpeg_binary="/opt/ffmpeg").transcode(URL, out))

    assert result == out
    assert calls == [{"cmd": "/opt/ffmpeg", "quiet": True, "overwrite_output": True}]


def test_ffmpeg_error_carries_stderr_tail(tmp_path, monkeypatch):
    def failing_run(stream, **kwargs):
        raise ffmpeg.Error("ffmpeg", b"", b"banner\nInput #0\nHTTP error 404 Not Found\n")

    monkeypatch.setattr(transcoder_module.ffmpeg, "run", failing_run)

    with pytest.raises(TranscodeError) as excinfo:
        Transcoder().transcode_sync(TranscodeRequest(source_url=URL), tmp_path / "out.wav")

    assert "HTTP error 404 Not Found" in str(excinfo.value)
    assert excinfo.value.source_url == URL


def test_missing_binary_is_transcode_error(tmp_path, monkeypatch):
    def missing_run(stream, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "ffmpeg")

    monkeypatch.setattr(transcoder_module.ffmpeg, "run", missing_run)

    with pytest.raises(TranscodeError, match="No such file"):
        asyncio.run(Transcoder().transcode(URL, tmp_path / "out.wav"))
