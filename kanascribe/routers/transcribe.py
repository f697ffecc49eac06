"""
KanaScribe — Transcription Router

    GET  /transcribe?fileId=<google-drive-file-id>
        Download → WAV → Vosk → kana. Returns the raw recognizer result plus
        its phonetic rendering.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from loguru import logger

from kanascribe.config import Settings, get_settings
from kanascribe.exceptions import MissingParameterError
from kanascribe.schemas import ErrorResponse, TranscribeResponse
from kanascribe.services import SpeechServices, get_services
from kanascribe.speech_pipeline import TranscriptionPipeline

router = APIRouter(tags=["Transcription"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get(
    "/transcribe",
    response_model=TranscribeResponse,
    summary="Transcribe a remote audio file and convert it to kana",
    description=(
        "Fetches the file behind **fileId**, normalizes it to 16 kHz mono PCM, "
        "runs Japanese speech recognition and converts the recognized text to the "
        "configured kana script (KANA_TARGET). `kana` is null when no speech "
        "was recognized."
    ),
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    status_code=status.HTTP_200_OK,
)
async def transcribe(
    file_id: Optional[str] = Query(
        default=None,
        alias="fileId",
        description="Google Drive file id of the recording.",
    ),
    services: SpeechServices = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"[TranscribeRouter] GET /transcribe | fileId={file_id!r}")
    pipeline = TranscriptionPipeline(services, settings)

    try:
        result = await pipeline.process(file_id)
    except MissingParameterError as e:
        return _error(status.HTTP_400_BAD_REQUEST, str(e))
    except Exception as e:
        logger.exception(f"[TranscribeRouter] Error in /transcribe: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return TranscribeResponse(transcription=result.transcription, kana=result.kana)
