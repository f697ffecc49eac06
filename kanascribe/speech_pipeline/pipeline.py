"""
KanaScribe — Speech Pipeline Orchestrator
Module : kanascribe/speech_pipeline/pipeline.py

Entry point for one /transcribe request. Runs four strictly sequential
stages:

  Stage 1 — Fetch + transcode   (ffmpeg → mono 16 kHz PCM WAV)
  Stage 2 — Read + recognize    (WaveformReader → Vosk session)
  Stage 3 — Kana conversion     (pykakasi, skipped for blank text)
  Stage 4 — Done

Any stage failure aborts the remaining ones. Whatever happens, the
temporary WAV is removed before run() returns or raises.

Usage
-----
pipeline = TranscriptionPipeline(services, settings)
result = await pipeline.process(file_id)
"""

from __future__ import annotations

import tempfile
import uuid
from pathlib import Path
from typing import Optional, TYPE_CHECKING
from urllib.parse import quote

from loguru import logger

from kanascribe.config import Settings
from kanascribe.exceptions import MissingParameterError
from kanascribe.speech_pipeline.schemas import PipelineResult

if TYPE_CHECKING:
    from kanascribe.services import SpeechServices


class TranscriptionPipeline:
    """Request-scoped orchestrator; one instance per request."""

    def __init__(self, services: "SpeechServices", settings: Settings):
        self.transcoder = services.transcoder
        self.recognizer = services.recognizer
        self.converter = services.converter
        self.settings = settings

    # ── Inputs ────────────────────────────────────────────────────────────

    def build_source_url(self, file_id: str) -> str:
        return self.settings.source_url_template.format(file_id=quote(file_id, safe=""))

    def allocate_temp_path(self) -> Path:
        base = Path(self.settings.temp_dir or tempfile.gettempdir())
        return base / f"{self.settings.temp_prefix}{uuid.uuid4().hex}.wav"

    # ── Orchestration ─────────────────────────────────────────────────────

    async def process(self, file_id: Optional[str]) -> PipelineResult:
        if not file_id:
            raise MissingParameterError("fileId")
        return await self.run(self.build_source_url(file_id))

    async def run(self, source_url: str) -> PipelineResult:
        wav_path = self.allocate_temp_path()
        logger.info(f"[Pipeline] ▶ Starting  |  temp='{wav_path.name}'")

        try:
            logger.info("[Pipeline] Stage 1/3 — Fetch + transcode")
            await self.transcoder.transcode(source_url, wav_path)

            logger.info("[Pipeline] Stage 2/3 — Speech recognition")
            transcription = await self.recognizer.transcribe_file(wav_path)

            kana: Optional[str] = None
            if transcription.text and transcription.text.strip():
                logger.info("[Pipeline] Stage 3/3 — Kana conversion")
                kana = await self.converter.convert(transcription.text)
            else:
                logger.info("[Pipeline] Empty transcription — skipping kana conversion.")

            logger.info(f"[Pipeline] ✅ Done  |  kana={kana!r}")
            return PipelineResult(transcription=transcription, kana=kana)
        finally:
            delete_temp_file(wav_path)


# ══════════════════════════════════════════════════════════════════════════════
# Temporary file helpers
# ══════════════════════════════════════════════════════════════════════════════

def delete_temp_file(path: Path) -> None:
    """Remove a temporary WAV file. Failures are logged, never raised."""
    try:
        path.unlink(missing_ok=True)
        logger.debug(f"[Pipeline] Deleted temp file: {path}")
    except Exception as exc:
        logger.warning(f"[Pipeline] Could not delete temp file {path}: {exc}")
