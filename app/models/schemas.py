"""
Pydantic models for request/response validation.
"""
from typing import Literal
from pydantic import BaseModel

from app.models.plan import FitnessPlan


# --- Plan Models ---

class PlanResponse(BaseModel):
    """Response model for plan generation."""
    success: bool = True
    plan: FitnessPlan


class QuoteResponse(BaseModel):
    success: bool = True
    quote: str


# --- Image Models ---

ImageKind = Literal["exercise", "meal"]


class ImageRequest(BaseModel):
    """Request model for exercise/meal illustration."""
    prompt: str | None = None
    type: ImageKind = "exercise"


class ImageResponse(BaseModel):
    """Response model for image generation; fallback fields only on the stock path."""
    success: bool = True
    imageUrl: str
    description: str
    method: str
    prompt: str | None = None
    type: ImageKind | None = None
    generated: bool | None = None
    fallback: bool | None = None
    variety: int | None = None
    error: str | None = None


# --- Speech Models ---

class SpeechRequest(BaseModel):
    """Request model for text-to-speech."""
    text: str | None = None
    voice: str = "Zephyr"
    language: str = "en-US"


class SpeechResponse(BaseModel):
    success: bool = True
    audioUrl: str | None = None
    text: str
    voice: str
    language: str
    message: str
