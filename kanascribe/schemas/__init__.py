"""
KanaScribe — Pydantic Schemas

Request / response contracts for the HTTP API.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

from kanascribe.speech_pipeline.schemas import TranscriptionResult


class TranscribeResponse(BaseModel):
    transcription: TranscriptionResult
    kana: Optional[str] = Field(
        default=None,
        description=(
            "Reading of the recognized text in the configured kana script "
            "(hiragana or katakana); null when nothing was recognized."
        ),
    )


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
