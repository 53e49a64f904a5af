"""
Exercise and meal illustration routes.
"""
from fastapi import APIRouter, HTTPException, Request

from app.models.schemas import ImageRequest, ImageResponse
from app.services import image_service
from app.core.config import settings
from app.core.logger import logger, log_request
from app.core.limiter import limiter

router = APIRouter(prefix="/api")


@router.post("/generate-image", response_model=ImageResponse, response_model_exclude_none=True)
@limiter.limit("30/minute")
async def generate_image(request: Request, req: ImageRequest):
    """
    Illustrate an exercise or meal.

    Walks the provider chain and falls back to a keyword-matched stock
    photo, so any valid request gets HTTP 200 with an image URL.
    """
    log_request("/api/generate-image")

    prompt = (req.prompt or "").strip()
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt is required")

    if not settings.GOOGLE_GEMINI_API_KEY:
        logger.error("Gemini API key not found")
        raise HTTPException(status_code=500, detail="API configuration error")

    logger.info(f"Image generation request: type={req.type}, prompt={prompt[:60]}")
    return await image_service.generate_image(prompt, req.type)
