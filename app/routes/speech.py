"""
Text-to-speech route.
"""
from fastapi import APIRouter, HTTPException, Request

from app.models.schemas import SpeechRequest, SpeechResponse
from app.services import gemini_service
from app.core.logger import log_request, log_error
from app.core.limiter import limiter

router = APIRouter(prefix="/api")

CLIENT_FALLBACK_MESSAGE = "Speech generation prepared. Using client-side TTS as fallback."


@router.post("/text-to-speech", response_model=SpeechResponse)
@limiter.limit("20/minute")
async def text_to_speech(request: Request, req: SpeechRequest):
    """
    Synthesize speech for a block of text.

    Server-side audio is opt-in (SERVER_TTS_ENABLED). Whenever it is off
    or fails, audioUrl is null and the client reads the text with its own
    synthesizer.
    """
    log_request("/api/text-to-speech")

    if not req.text or not req.text.strip():
        raise HTTPException(status_code=400, detail="Text is required for speech generation")

    audio_url = None
    try:
        audio_url = await gemini_service.synthesize_speech(req.text, req.voice, req.language)
    except Exception as e:
        log_error("Speech synthesis", e)

    return {
        "success": True,
        "audioUrl": audio_url,
        "text": req.text,
        "voice": req.voice,
        "language": req.language,
        "message": "Speech generated." if audio_url else CLIENT_FALLBACK_MESSAGE,
    }
