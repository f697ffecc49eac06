import json
import wave
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from kanascribe.config import Settings, get_settings
from kanascribe.exceptions import TranscodeError
from kanascribe.main import create_app
from kanascribe.services import SpeechServices
from kanascribe.speech_pipeline.kana import KanaConverter
from kanascribe.speech_pipeline.recognizer import SpeechRecognizer


def write_wav(path, frames: bytes = b"\x00\x00" * 1600, sample_rate: int = 16000,
              channels: int = 1, sampwidth: int = 2) -> Path:
    """Write a PCM WAV file. *frames* is padded to a whole frame."""
    frame_size = channels * sampwidth
    if len(frames) % frame_size:
        frames += b"\x00" * (frame_size - len(frames) % frame_size)
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sampwidth)
        wf.setframerate(sample_rate)
        wf.writeframes(frames)
    return Path(path)


class FakeKaldi:
    """
    Stand-in for vosk.KaldiRecognizer.

    The "recognized" text is whatever UTF-8 text the frames spell out, so a
    test controls the transcript through the WAV it writes.
    """

    instances = []

    def __init__(self, model, sample_rate):
        self.model = model
        self.sample_rate = sample_rate
        self.chunks = []
        self.words = False
        self.fail_on_accept = False
        FakeKaldi.instances.append(self)

    def SetWords(self, enabled):
        self.words = enabled

    def AcceptWaveform(self, data):
        if self.fail_on_accept:
            raise RuntimeError("decoder exploded")
        self.chunks.append(bytes(data))
        return False

    def FinalResult(self):
        text = b"".join(self.chunks).rstrip(b"\x00").decode("utf-8", errors="ignore")
        payload = {"text": text}
        if self.words:
            payload["result"] = [{"word": text, "conf": 1.0, "start": 0.0, "end": 0.5}]
        return json.dumps(payload, ensure_ascii=False)


class FakeAnalyzer:
    """Stand-in for pykakasi.kakasi with a fixed reading table."""

    def __init__(self, readings=None, error=None):
        self.readings = readings or {}
        self.error = error
        self.calls = []

    def convert(self, text):
        self.calls.append(text)
        if self.error:
            raise self.error
        hira = self.readings.get(text, text)
        return [{"orig": text, "hira": hira, "kana": f"KANA({hira})"}]


class FakeTranscoder:
    """
    Writes a WAV whose frames spell out ``texts[source_url]``.

    ``error`` makes it fail; ``partial`` makes it leave a half-written file
    behind before failing.
    """

    def __init__(self, texts=None, sample_rate=16000, error=None, partial=False):
        self.texts = texts or {}
        self.sample_rate = sample_rate
        self.error = error
        self.partial = partial
        self.calls = []

    async def transcode(self, source_url, output_path):
        output_path = Path(output_path)
        self.calls.append((source_url, output_path))
        if self.partial:
            output_path.write_bytes(b"RIFF")
        if self.error:
            raise TranscodeError(source_url, self.error)
        text = self.texts.get(source_url, "")
        write_wav(output_path, text.encode("utf-8"), sample_rate=self.sample_rate)
        return output_path


@pytest.fixture(autouse=True)
def reset_fake_kaldi():
    FakeKaldi.instances = []
    yield
    FakeKaldi.instances = []


@pytest.fixture
def scratch_dir(tmp_path):
    d = tmp_path / "scratch"
    d.mkdir()
    return d


@pytest.fixture
def settings(scratch_dir):
    return Settings(temp_dir=str(scratch_dir), model_path=str(scratch_dir / "no-model"))


@pytest.fixture
def analyzer():
    return FakeAnalyzer(readings={"今日は": "きょうは"})


@pytest.fixture
def transcoder():
    return FakeTranscoder()


@pytest.fixture
def recognizer():
    return SpeechRecognizer(model=object(), sample_rate=16000, session_factory=FakeKaldi)


@pytest.fixture
def services(transcoder, recognizer, analyzer):
    return SpeechServices(
        transcoder=transcoder,
        recognizer=recognizer,
        converter=KanaConverter(analyzer),
    )


@pytest.fixture
def client(services, settings):
    app = create_app(services)
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


def drive_url(file_id):
    return f"https://drive.google.com/uc?export=download&id={file_id}"
