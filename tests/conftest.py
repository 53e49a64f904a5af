"""
Pytest fixtures for the AI Fitness Coach API tests.
"""
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Mock environment variables before importing app
os.environ["GOOGLE_GEMINI_API_KEY"] = "test-gemini-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SERVER_TTS_ENABLED"] = "false"
os.environ["POLLINATIONS_ENABLED"] = "true"
for _key in ("STABILITY_API_KEY", "GETIMG_API_KEY", "DEEPAI_API_KEY", "REPLICATE_API_KEY", "OPENAI_API_KEY"):
    os.environ.pop(_key, None)

from fastapi.testclient import TestClient
from google.genai import types

from app.main import app
from app.models.profile import UserProfile


def text_response(text: str):
    """Minimal stand-in for a Gemini text response."""
    return SimpleNamespace(text=text)


def inline_response(data: bytes, mime_type: str = "image/png") -> types.GenerateContentResponse:
    """Gemini response carrying one inline binary part."""
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))],
                )
            )
        ]
    )


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def mock_gemini():
    """Mock the shared Gemini client used by text, image and speech calls."""
    mock = MagicMock()
    mock.aio.models.generate_content = AsyncMock(return_value=text_response(""))
    with patch("app.services.gemini_service.get_client", return_value=mock), \
            patch("app.services.image_providers.get_client", return_value=mock):
        yield mock


@pytest.fixture
def sample_profile_data():
    """Profile from the documented example scenario."""
    return {
        "name": "Alex",
        "age": 30,
        "gender": "male",
        "height": 175,
        "weight": 70,
        "fitnessGoal": "weight-loss",
        "fitnessLevel": "beginner",
        "workoutLocation": "home-no-equipment",
        "dietaryPreference": "vegetarian",
    }


@pytest.fixture
def sample_profile(sample_profile_data):
    return UserProfile(**sample_profile_data)


@pytest.fixture
def gym_profile():
    return UserProfile(
        name="Sam",
        age=42,
        gender="female",
        height=168,
        weight=64.5,
        fitnessGoal="muscle-gain",
        fitnessLevel="advanced",
        workoutLocation="gym",
        dietaryPreference="non-vegetarian",
        medicalHistory="old knee injury",
        stressLevel="high",
        sleepHours=6,
        waterIntake=2.5,
    )
