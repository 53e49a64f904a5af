"""
Fitness plan and motivational quote routes.
"""
from fastapi import APIRouter, HTTPException, Request

from app.models.profile import UserProfile
from app.models.schemas import PlanResponse, QuoteResponse
from app.services import gemini_service
from app.core.config import settings
from app.core.logger import logger, log_request
from app.core.limiter import limiter

router = APIRouter(prefix="/api")


@router.post("/generate-plan", response_model=PlanResponse)
@limiter.limit("10/minute")
async def generate_plan(request: Request, profile: UserProfile):
    """
    Generate a personalized 7-day workout and diet plan.

    Model failures never reach the caller: unusable output is replaced
    by the template plan computed from the same profile.
    """
    log_request("/api/generate-plan")
    logger.info(
        f"Profile received: goal={profile.fitnessGoal}, level={profile.fitnessLevel}, "
        f"location={profile.workoutLocation}"
    )

    missing = profile.missing_fields()
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required user profile information: {', '.join(missing)}"
        )

    if not settings.GOOGLE_GEMINI_API_KEY:
        logger.error("Gemini API key not found in environment variables")
        raise HTTPException(status_code=500, detail="API configuration error")

    plan = await gemini_service.generate_fitness_plan(profile)
    return {"success": True, "plan": plan.model_dump()}


@router.get("/motivational-quote", response_model=QuoteResponse)
@limiter.limit("30/minute")
async def motivational_quote(request: Request):
    """Short motivational quote; a static one is used when the model is unavailable."""
    log_request("/api/motivational-quote", method="GET")

    quote = await gemini_service.generate_motivational_quote()
    return {"success": True, "quote": quote}
