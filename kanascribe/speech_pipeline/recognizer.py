"""
KanaScribe — Speech Recognizer
Module : kanascribe/speech_pipeline/recognizer.py

Wraps a preloaded Vosk model. Every request gets its own KaldiRecognizer
session; the model itself is shared and never mutated.

Flow per request
----------------
1. Open the WAV with WaveformReader (header validated, no frames read yet).
2. Create a session bound to the shared model and the required sample rate.
3. Feed every chunk in order (chunk boundaries carry no meaning — the
   recognizer buffers internally).
4. Ask for the final result, release the session, return the result.

Partial results are never surfaced.
"""

from __future__ import annotations

import asyncio
import json
import traceback
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger
from vosk import KaldiRecognizer

from kanascribe.exceptions import RecognitionError
from kanascribe.speech_pipeline.schemas import TranscriptionResult
from kanascribe.speech_pipeline.wav_reader import DEFAULT_CHUNK_FRAMES, WaveformReader


class RecognizerSession:
    """One request's handle into the shared model."""

    def __init__(self, recognizer: Any):
        self._recognizer = recognizer
        self.chunks_accepted = 0

    def accept(self, chunk: bytes) -> None:
        self._require_open().AcceptWaveform(chunk)
        self.chunks_accepted += 1

    def final_result(self) -> TranscriptionResult:
        raw = self._require_open().FinalResult()
        payload = json.loads(raw) if isinstance(raw, (str, bytes)) else dict(raw)
        return TranscriptionResult(**payload)

    def close(self) -> None:
        # KaldiRecognizer frees its native handle when the last reference goes
        self._recognizer = None

    @property
    def closed(self) -> bool:
        return self._recognizer is None

    def _require_open(self) -> Any:
        if self._recognizer is None:
            raise RecognitionError("Recognizer session already released")
        return self._recognizer


class SpeechRecognizer:
    """Shared, read-only recognizer front-end bound to one model."""

    def __init__(
        self,
        model: Any,
        sample_rate: int = 16000,
        chunk_frames: int = DEFAULT_CHUNK_FRAMES,
        words: bool = False,
        session_factory: Optional[Callable[[Any, int], Any]] = None,
    ):
        self.model = model
        self.sample_rate = sample_rate
        self.chunk_frames = chunk_frames
        self.words = words
        self._session_factory = session_factory or KaldiRecognizer

    def new_session(self) -> RecognizerSession:
        recognizer = self._session_factory(self.model, self.sample_rate)
        if self.words:
            recognizer.SetWords(True)
        return RecognizerSession(recognizer)

    def transcribe_file_sync(self, wav_path: str | Path) -> TranscriptionResult:
        """
        Stream *wav_path* through a fresh session and return the final result.

        Raises
        ------
        WaveFormatError  : header does not match the recognizer contract.
        RecognitionError : the session failed while streaming or finalizing.
        """
        wav_path = Path(wav_path)

        with WaveformReader(wav_path, self.sample_rate, self.chunk_frames) as reader:
            try:
                session = self.new_session()
            except Exception as exc:
                raise RecognitionError(f"Could not create recognizer: {exc}") from exc

            try:
                for chunk in reader.chunks():
                    session.accept(chunk)
                result = session.final_result()
            except RecognitionError:
                raise
            except Exception as exc:
                logger.error(f"[Recognizer] Recognition failed on '{wav_path.name}': {exc}")
                # the traceback frames still reference the native recognizer
                traceback.clear_frames(exc.__traceback__)
                raise RecognitionError(f"Transcription failed: {exc}") from exc
            finally:
                session.close()

        logger.info(
            f"[Recognizer] ✅ {session.chunks_accepted} chunks | text={result.text!r}"
        )
        return result

    async def transcribe_file(self, wav_path: str | Path) -> TranscriptionResult:
        """Async wrapper; runs the blocking decode on the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: self.transcribe_file_sync(wav_path),
        )
