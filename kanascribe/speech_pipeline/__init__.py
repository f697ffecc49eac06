"""
KanaScribe — Speech Pipeline Module
====================================
Public API surface for kanascribe.speech_pipeline.

Exports
-------
TranscriptionPipeline  — request-scoped orchestrator
Transcoder             — URL → mono PCM WAV (ffmpeg)
WaveformReader         — validated, single-use WAV chunk reader
SpeechRecognizer       — shared Vosk model front-end
KanaConverter          — shared pykakasi front-end
delete_temp_file       — cleanup temp WAV
"""

from kanascribe.speech_pipeline.pipeline import TranscriptionPipeline, delete_temp_file
from kanascribe.speech_pipeline.transcoder import Transcoder
from kanascribe.speech_pipeline.wav_reader import WaveformReader
from kanascribe.speech_pipeline.recognizer import SpeechRecognizer, RecognizerSession
from kanascribe.speech_pipeline.kana import KanaConverter
from kanascribe.speech_pipeline.schemas import (
    PipelineResult,
    TranscriptionResult,
    WaveformFormat,
)

__all__ = [
    "TranscriptionPipeline",
    "delete_temp_file",
    "Transcoder",
    "WaveformReader",
    "SpeechRecognizer",
    "RecognizerSession",
    "KanaConverter",
    "PipelineResult",
    "TranscriptionResult",
    "WaveformFormat",
]
