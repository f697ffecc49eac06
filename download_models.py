"""
KanaScribe — Model Pre-downloader
==================================
Run this ONCE before starting the server to download the Vosk Japanese
model into ``model/``. The server refuses to start without it.

Usage:
    python download_models.py
    python download_models.py --url https://alphacephei.com/vosk/models/vosk-model-ja-0.22.zip

Models downloaded:
    1. vosk-model-small-ja-0.22   (~48 MB)  → model/   (default, MODEL_URL)
       vosk-model-ja-0.22         (~1 GB)   → model/   (pass --url for the big one)

Note:
    pykakasi ships its dictionaries inside the wheel — nothing to download.
"""

from __future__ import annotations

import argparse
import sys
import tempfile
import zipfile
from pathlib import Path

import httpx
from loguru import logger

# ── project root → add to path ────────────────────────────────────────────────
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from kanascribe.config import get_settings

settings = get_settings()

MODELS_DIR = ROOT / "model"


def download_vosk(url: str, dest: Path = MODELS_DIR) -> Path:
    """Download a Vosk model archive and extract it under *dest*."""
    archive_name = url.rsplit("/", 1)[-1]
    target = dest / Path(archive_name).stem

    if target.exists() and any(target.iterdir()):
        logger.info(f"[1/1] {target.name} — already present at {target}")
        return target

    dest.mkdir(parents=True, exist_ok=True)
    logger.info(f"[1/1] Downloading {url} ...")

    with tempfile.TemporaryDirectory() as tmp_dir:
        zip_path = Path(tmp_dir) / archive_name
        with httpx.stream("GET", url, follow_redirects=True, timeout=60.0) as response:
            response.raise_for_status()
            with open(zip_path, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)

        with zipfile.ZipFile(zip_path) as archive:
            archive.extractall(dest)

    logger.success(f"    ✅ Model extracted to {target}")
    return target


# ═══════════════════════════════════════════════════════════════════════════════
# Main
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Download the Vosk model for KanaScribe")
    parser.add_argument("--url", type=str, default=settings.model_url, help="Model archive URL")
    args = parser.parse_args()

    logger.info("=" * 60)
    logger.info("KanaScribe — Pre-downloading the Vosk model")
    logger.info("=" * 60)

    try:
        model_dir = download_vosk(args.url)
    except (httpx.HTTPError, zipfile.BadZipFile) as e:
        logger.error(f"    ✗  Model download failed: {e}")
        sys.exit(1)

    logger.success("\n🎉 Download complete. Point MODEL_PATH at it and start the server:")
    logger.success(f"   MODEL_PATH={model_dir.relative_to(ROOT)} python -m kanascribe")
