"""
KanaScribe — Speech Pipeline Internal Schemas

Contracts passed between the pipeline stages
(transcoder → wav_reader → recognizer → kana).
The HTTP response models live in kanascribe/schemas/__init__.py.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict

# RIFF fmt-chunk code for uncompressed linear PCM
WAVE_FORMAT_PCM = 1


# ── Transcoder input ───────────────────────────────────────────────────────

class TranscodeRequest(BaseModel):
    source_url: str


# ── Waveform header ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WaveformFormat:
    """
    Format descriptor read once from a WAV header.

    Attributes:
        audio_format    : fmt-chunk format code (1 = linear PCM).
        sample_rate     : Frames per second.
        channels        : Channel count.
        bits_per_sample : Sample width in bits.
    """
    audio_format:    int
    sample_rate:     int
    channels:        int
    bits_per_sample: int


# ── Recognizer output ──────────────────────────────────────────────────────

class TranscriptionResult(BaseModel):
    """
    Final recognizer result.

    Only ``text`` is guaranteed; any other field the recognizer emits
    (word timings, confidences) is carried through untouched.
    """
    model_config = ConfigDict(extra="allow")

    text: str = ""


# ── Pipeline output ────────────────────────────────────────────────────────

@dataclass
class PipelineResult:
    transcription: TranscriptionResult
    kana:          Optional[str] = None
