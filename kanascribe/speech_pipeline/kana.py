"""
KanaScribe — Kana Converter
Module : kanascribe/speech_pipeline/kana.py

Converts recognized Japanese text (kanji + kana mix) into a phonetic
syllabary using a preloaded pykakasi analyzer.

Targets
-------
• "hiragana" — default, matches what callers of /transcribe expect
• "katakana"
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from loguru import logger

from kanascribe.exceptions import KanaConversionError

# pykakasi result keys per target script
_READING_KEYS = {
    "hiragana": "hira",
    "katakana": "kana",
}


class KanaConverter:
    """Thin async front-end over a shared, read-only pykakasi analyzer."""

    def __init__(self, analyzer: Any, target: str = "hiragana"):
        if target not in _READING_KEYS:
            raise ValueError(f"Unsupported kana target '{target}'")
        self.analyzer = analyzer
        self.target = target

    def convert_sync(self, text: str) -> Optional[str]:
        if not text or not text.strip():
            logger.info("[Kana] No transcription text available to convert.")
            return None

        key = _READING_KEYS[self.target]
        try:
            tokens = self.analyzer.convert(text)
            converted = "".join(token[key] for token in tokens)
        except Exception as exc:
            logger.error(f"[Kana] Conversion failed: {exc}")
            raise KanaConversionError(f"Kana conversion failed: {exc}") from exc

        logger.info(f"[Kana] Converted {self.target}: {converted!r}")
        return converted

    async def convert(self, text: str) -> Optional[str]:
        """Return *text* in the target script, or None when it is blank."""
        if not text or not text.strip():
            return self.convert_sync(text)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.convert_sync(text))
