"""
AI Fitness Coach API - Main Entry Point

Personalized 7-day workout and diet plans, exercise/meal illustrations
and speech for the plan.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.core.config import settings
from app.core.logger import logger
from app.core.limiter import limiter
from app.routes import plan, image, speech
from app.services.image_providers import default_providers

SERVICE_NAME = "fitness-coach-api"
VERSION = "1.0.0"


# Validate configuration on startup. A missing Gemini key does not stop the
# service; the endpoints that need it answer 500 instead.
try:
    settings.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.warning(f"Configuration error: {e}")


# Create FastAPI app
app = FastAPI(
    title="AI Fitness Coach API",
    description="AI-generated workout and diet plans with image and speech support",
    version=VERSION
)

# Attach rate limiter and its error handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


app.include_router(plan.router, tags=["Plan"])
app.include_router(image.router, tags=["Image"])
app.include_router(speech.router, tags=["Speech"])


@app.get("/")
@limiter.limit("60/minute")
def root(request: Request):
    """Health check endpoint."""
    return {"message": "AI Fitness Coach API running"}


@app.get("/health")
def health():
    """
    Detailed health status.
    Returns 'degraded' if required environment variables are missing.
    """
    providers = [p.method for p in default_providers() if p.is_configured()]
    missing = [] if settings.GOOGLE_GEMINI_API_KEY else ["GOOGLE_GEMINI_API_KEY"]

    if missing:
        return JSONResponse(
            status_code=200,
            content={
                "status": "degraded",
                "service": SERVICE_NAME,
                "version": VERSION,
                "missing_config": missing,
                "image_providers": providers,
                "message": f"Missing required environment variables: {', '.join(missing)}"
            }
        )

    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "image_providers": providers,
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False
    )
