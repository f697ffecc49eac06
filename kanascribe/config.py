"""
KanaScribe — Application Configuration
Reads settings from environment variables / .env file.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        # model_path / model_url are ours, not pydantic's
        protected_namespaces=("settings_",),
    )

    # ── App ──────────────────────────────────────────────────
    app_name: str = "KanaScribe — Speech to Kana API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # ── Server ───────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3333

    # ── Vosk ─────────────────────────────────────────────────
    model_path: str = "model/vosk-model-small-ja-0.22"
    # Archive fetched by download_models.py (the small model fits in ~100 MB RAM)
    model_url: str = "https://alphacephei.com/vosk/models/vosk-model-small-ja-0.22.zip"
    # Vosk's own log verbosity (-1 silences it, 0 = warnings+info)
    vosk_log_level: int = 0
    # Include per-word timings ("result") in the transcription payload
    recognizer_words: bool = False

    # ── Waveform contract ────────────────────────────────────
    sample_rate: int = 16000
    chunk_frames: int = 4000

    # ── Fetch / transcode ────────────────────────────────────
    ffmpeg_binary: str = "ffmpeg"
    source_url_template: str = "https://drive.google.com/uc?export=download&id={file_id}"
    temp_dir: Optional[str] = None
    temp_prefix: str = "kanascribe_"

    # ── Script conversion ────────────────────────────────────
    kana_target: Literal["hiragana", "katakana"] = "hiragana"


@lru_cache
def get_settings() -> Settings:
    """Cache-backed settings loader."""
    return Settings()
