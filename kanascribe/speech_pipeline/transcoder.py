"""
KanaScribe — Media Transcoder
Module : kanascribe/speech_pipeline/transcoder.py

Fetches a remote audio/video resource and writes it to a local WAV file in
the format the recognizer expects:

  • mono
  • fixed sample rate (SAMPLE_RATE, default 16 kHz)
  • 16-bit little-endian linear PCM

ffmpeg does the fetching itself (it reads http/https inputs directly), so
there is no intermediate download file.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import ffmpeg
from loguru import logger

from kanascribe.exceptions import TranscodeError
from kanascribe.speech_pipeline.schemas import TranscodeRequest

# ffmpeg prints its banner + stream info to stderr; only the tail is useful
_STDERR_TAIL_LINES = 5


class Transcoder:
    """Normalizes any ffmpeg-readable source into a mono PCM WAV file."""

    def __init__(self, sample_rate: int = 16000, ffmpeg_binary: str = "ffmpeg"):
        self.sample_rate = sample_rate
        self.ffmpeg_binary = ffmpeg_binary

    def build_stream(self, request: TranscodeRequest, output_path: str | Path):
        return (
            ffmpeg
            .input(request.source_url)
            .output(
                str(output_path),
                format="wav",
                acodec="pcm_s16le",
                ac=1,
                ar=self.sample_rate,
            )
        )

    def transcode_sync(self, request: TranscodeRequest, output_path: str | Path) -> Path:
        """Blocking transcode. Returns *output_path* or raises TranscodeError."""
        output_path = Path(output_path)
        stream = self.build_stream(request, output_path)

        logger.info(f"[Transcoder] Converting '{request.source_url}' → {output_path.name}")
        try:
            ffmpeg.run(
                stream,
                cmd=self.ffmpeg_binary,
                quiet=True,
                overwrite_output=True,
            )
        except ffmpeg.Error as exc:
            diagnostic = _stderr_tail(exc.stderr) or str(exc)
            logger.error(f"[Transcoder] ffmpeg failed: {diagnostic}")
            raise TranscodeError(request.source_url, diagnostic) from exc
        except OSError as exc:
            # ffmpeg binary missing or not executable
            logger.error(f"[Transcoder] Could not start '{self.ffmpeg_binary}': {exc}")
            raise TranscodeError(request.source_url, str(exc)) from exc

        logger.info("[Transcoder] ✅ Conversion to WAV completed.")
        return output_path

    async def transcode(self, source_url: str, output_path: str | Path) -> Path:
        """Async wrapper; runs ffmpeg on the default executor."""
        request = TranscodeRequest(source_url=source_url)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: self.transcode_sync(request, output_path),
        )


def _stderr_tail(stderr: bytes | None) -> str:
    if not stderr:
        return ""
    lines = stderr.decode("utf-8", errors="replace").strip().splitlines()
    return " | ".join(line.strip() for line in lines[-_STDERR_TAIL_LINES:])
