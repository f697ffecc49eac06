"""
KanaScribe — Waveform Reader
Module : kanascribe/speech_pipeline/wav_reader.py

Reads a PCM WAV container produced by the transcoder.

The header is read and validated when the reader is opened; sample data is
only touched once the caller starts iterating ``chunks()``. A header that
does not match the recognizer contract (linear PCM at the configured
sample rate) fails before a single frame is read.

Usage
-----
with WaveformReader(path, sample_rate=16000) as reader:
    for chunk in reader.chunks():
        session.accept(chunk)
"""

from __future__ import annotations

import struct
import wave
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from kanascribe.exceptions import WaveFormatError
from kanascribe.speech_pipeline.schemas import WAVE_FORMAT_PCM, WaveformFormat

DEFAULT_CHUNK_FRAMES = 4000


class WaveformReader:
    """Single-use, forward-only reader over a PCM WAV file."""

    def __init__(
        self,
        path: str | Path,
        sample_rate: int,
        chunk_frames: int = DEFAULT_CHUNK_FRAMES,
    ):
        self.path = Path(path)
        self.sample_rate = sample_rate
        self.chunk_frames = chunk_frames
        self.format: Optional[WaveformFormat] = None
        self._wav: Optional[wave.Wave_read] = None
        self._consumed = False

    # ── Context management ────────────────────────────────────────────────

    def open(self) -> "WaveformReader":
        expected = f"Expected {self.sample_rate}Hz 16-bit PCM"
        audio_format = read_format_code(self.path)
        if audio_format is not None and audio_format != WAVE_FORMAT_PCM:
            raise WaveFormatError(f"Invalid format. {expected} but got format {audio_format}.")

        try:
            wav = wave.open(str(self.path), "rb")
        except (wave.Error, EOFError) as exc:
            raise WaveFormatError(f"Invalid format. {expected} but got: {exc}.") from exc

        fmt = WaveformFormat(
            audio_format=audio_format,
            sample_rate=wav.getframerate(),
            channels=wav.getnchannels(),
            bits_per_sample=wav.getsampwidth() * 8,
        )
        if fmt.sample_rate != self.sample_rate:
            wav.close()
            raise WaveFormatError(
                f"Invalid format. {expected} but got {fmt.sample_rate}Hz, "
                f"format {fmt.audio_format}."
            )

        logger.debug(
            f"[WavReader] {self.path.name}: {fmt.sample_rate}Hz, "
            f"{fmt.channels}ch, {fmt.bits_per_sample}-bit, {wav.getnframes()} frames"
        )
        self.format = fmt
        self._wav = wav
        return self

    def close(self) -> None:
        if self._wav is not None:
            self._wav.close()
            self._wav = None

    def __enter__(self) -> "WaveformReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ── Streaming ─────────────────────────────────────────────────────────

    def chunks(self) -> Iterator[bytes]:
        """
        Yield raw frame data in file order, ``chunk_frames`` frames at a time.

        The generator ending is the end-of-stream signal. A reader can be
        iterated once only.
        """
        if self._wav is None:
            raise RuntimeError("WaveformReader is not open")
        if self._consumed:
            raise RuntimeError(f"Waveform '{self.path.name}' has already been read")
        self._consumed = True
        return self._iter_frames(self._wav)

    def _iter_frames(self, wav: wave.Wave_read) -> Iterator[bytes]:
        while True:
            data = wav.readframes(self.chunk_frames)
            if not data:
                return
            yield data


# ══════════════════════════════════════════════════════════════════════════════
# Header helpers
# ══════════════════════════════════════════════════════════════════════════════

def read_format_code(path: str | Path) -> Optional[int]:
    """
    Return the format code from the ``fmt `` chunk of a RIFF/WAVE file.

    ``None`` when the file is not RIFF/WAVE or has no ``fmt `` chunk; the
    ``wave`` module reports those cases itself.
    """
    with open(path, "rb") as fh:
        riff = fh.read(12)
        if len(riff) < 12 or riff[:4] != b"RIFF" or riff[8:12] != b"WAVE":
            return None
        while True:
            header = fh.read(8)
            if len(header) < 8:
                return None
            chunk_id, size = struct.unpack("<4sI", header)
            if chunk_id == b"fmt ":
                body = fh.read(2)
                if len(body) < 2:
                    return None
                return struct.unpack("<H", body)[0]
            # chunks are word-aligned
            fh.seek(size + (size & 1), 1)
