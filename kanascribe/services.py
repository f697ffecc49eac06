"""
KanaScribe — Service Bootstrap

Loads the Vosk model and the pykakasi analyzer once per process. The
resulting SpeechServices bundle is read-only and shared by every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pykakasi
import vosk
from fastapi import Request
from loguru import logger

from kanascribe.config import Settings
from kanascribe.exceptions import ServiceInitError
from kanascribe.speech_pipeline.kana import KanaConverter
from kanascribe.speech_pipeline.recognizer import SpeechRecognizer
from kanascribe.speech_pipeline.transcoder import Transcoder

MODEL_HINT = (
    "Download a model from https://alphacephei.com/vosk/models and unzip it "
    "under 'model/' (or run: python download_models.py)."
)


@dataclass(frozen=True)
class SpeechServices:
    transcoder: Transcoder
    recognizer: SpeechRecognizer
    converter: KanaConverter


def load_speech_services(settings: Settings) -> SpeechServices:
    """
    Build the shared services. Raises ServiceInitError on any failure;
    nothing is partially initialised.
    """
    model_path = Path(settings.model_path)
    if not model_path.is_dir():
        raise ServiceInitError(f"Model folder not found at '{model_path}'. {MODEL_HINT}")

    vosk.SetLogLevel(settings.vosk_log_level)

    try:
        model = vosk.Model(str(model_path))
    except Exception as exc:
        raise ServiceInitError(f"Vosk model load failed: {exc}") from exc
    logger.info(f"[Services] ✅ Vosk model loaded from {model_path}")

    try:
        analyzer = pykakasi.kakasi()
    except Exception as exc:
        raise ServiceInitError(f"pykakasi init failed: {exc}") from exc
    logger.info("[Services] ✅ pykakasi analyzer initialised.")

    return SpeechServices(
        transcoder=Transcoder(
            sample_rate=settings.sample_rate,
            ffmpeg_binary=settings.ffmpeg_binary,
        ),
        recognizer=SpeechRecognizer(
            model,
            sample_rate=settings.sample_rate,
            chunk_frames=settings.chunk_frames,
            words=settings.recognizer_words,
        ),
        converter=KanaConverter(analyzer, target=settings.kana_target),
    )


def get_services(request: Request) -> SpeechServices:
    """FastAPI dependency returning the services loaded at startup."""
    return request.app.state.services
