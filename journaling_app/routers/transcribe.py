# transcribe router — voice journal audio -> text through gemini
# accepts base64 data urls or fetchable http(s) urls; browser blob: urls never reach the server

import base64
import binascii
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from journaling_app.config import settings
from journaling_app.models.journal import TranscribeRequest, TranscribeResponse
from journaling_app.services import analysis_service
from journaling_app.services.analysis_service import AnalysisError
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/transcribe", tags=["transcribe"])

DEFAULT_AUDIO_MIME = "audio/webm"
FETCH_TIMEOUT_SECONDS = 30.0


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"Audio exceeds {settings.AUDIO_MAX_BYTES} bytes",
    )


def _decode_data_url(audio_url: str) -> tuple[str, str]:
    """split a data:<mime>;base64,<payload> url into (base64 payload, mime type)"""
    header, sep, payload = audio_url.partition(",")
    if not sep or ";base64" not in header:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Audio data URL must be base64 encoded")

    mime_type = header[len("data:"):].split(";")[0] or DEFAULT_AUDIO_MIME
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Audio data URL is not valid base64")

    if not raw:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Audio data URL is empty")
    if len(raw) > settings.AUDIO_MAX_BYTES:
        raise _too_large()
    return payload, mime_type


async def _fetch_remote_audio(audio_url: str) -> tuple[str, str]:
    try:
        async with httpx.AsyncClient(timeout=FETCH_TIMEOUT_SECONDS, follow_redirects=True) as client:
            resp = await client.get(audio_url)
            resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch audio from {audio_url}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch audio data")

    if len(resp.content) > settings.AUDIO_MAX_BYTES:
        raise _too_large()
    mime_type = resp.headers.get("content-type", DEFAULT_AUDIO_MIME).split(";")[0].strip() or DEFAULT_AUDIO_MIME
    return base64.b64encode(resp.content).decode("ascii"), mime_type


@router.post("", response_model=TranscribeResponse)
async def transcribe(body: TranscribeRequest, current_user: dict = Depends(get_current_user)):
    audio_url = body.audio_url.strip()

    if audio_url.startswith("blob:"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Blob URLs are not supported server-side. Please convert to base64 first.",
        )
    if audio_url.startswith("data:"):
        audio_b64, mime_type = _decode_data_url(audio_url)
    elif audio_url.startswith(("http://", "https://")):
        audio_b64, mime_type = await _fetch_remote_audio(audio_url)
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported audio URL")

    try:
        text = await analysis_service.transcribe_audio(audio_b64, mime_type)
    except AnalysisError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Transcription failed: {e}")

    logger.info(f"Transcribed {mime_type} audio for user {current_user['id']}")
    return TranscribeResponse(transcription=text)
