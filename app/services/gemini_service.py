"""
Gemini API service for AI operations.
"""
import base64
import io
import logging
import wave
from functools import lru_cache
from typing import Optional

import httpx
from google import genai
from google.genai import errors, types
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
)

from app.core.config import settings
from app.core.logger import logger, log_ai_call, log_error, log_fallback
from app.models.plan import FitnessPlan
from app.models.profile import UserProfile
from app.services.fallback_plan import create_fallback_plan
from app.services.plan_parser import plan_from_model_text


FALLBACK_QUOTE = "Every workout brings you closer to your goals. Stay consistent, stay strong!"

# Gemini TTS returns raw 16-bit mono PCM at 24 kHz
TTS_SAMPLE_RATE = 24000
TTS_SAMPLE_WIDTH = 2


@lru_cache(maxsize=4)
def _build_client(api_key: str) -> genai.Client:
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=settings.GEMINI_TIMEOUT * 1000),
    )


def get_client() -> genai.Client:
    """
    Return the shared Gemini client.

    Raises:
        ValueError: If GOOGLE_GEMINI_API_KEY is not configured
    """
    if not settings.GOOGLE_GEMINI_API_KEY:
        raise ValueError("GOOGLE_GEMINI_API_KEY is not configured")
    return _build_client(settings.GOOGLE_GEMINI_API_KEY)


def is_rate_limited(error: BaseException) -> bool:
    return isinstance(error, errors.APIError) and error.code == 429


def _is_transient(error: BaseException) -> bool:
    if isinstance(error, errors.APIError):
        return error.code in (429, 500, 503)
    return isinstance(error, httpx.TransportError)


# Tenacity retry policy: 3 total attempts, exponential backoff 2s→10s
# Only retries transient errors: rate limits, overload and connection failures
_gemini_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception(_is_transient),
    before_sleep=before_sleep_log(logging.getLogger(__name__), logging.WARNING),
    reraise=True,
)


def first_inline_data(response) -> Optional[tuple[bytes, str]]:
    """Return (data, mime_type) of the first inline binary part of a response."""
    for candidate in response.candidates or []:
        content = candidate.content
        if not content or not content.parts:
            continue
        for part in content.parts:
            inline = part.inline_data
            if inline is not None and inline.data:
                return inline.data, inline.mime_type or ""
    return None


@_gemini_retry
async def generate_text(prompt: str, config: Optional[types.GenerateContentConfig] = None) -> str:
    """
    Call the Gemini text model.

    Retries automatically on rate limits and transient server errors
    (up to 3 attempts with exponential backoff).

    Returns:
        The response text, possibly empty
    """
    log_ai_call("Text generation", settings.GEMINI_TEXT_MODEL)

    response = await get_client().aio.models.generate_content(
        model=settings.GEMINI_TEXT_MODEL,
        contents=prompt,
        config=config,
    )
    return response.text or ""


# --- Plan Generation ---

PLAN_INSTRUCTIONS = """CRITICAL REQUIREMENTS:
1. Generate EXACTLY 7 days of workout plans (Monday through Sunday)
2. Generate EXACTLY 7 days of meal plans (Monday through Sunday)
3. Each day must have different exercises and meals
4. Include rest days and active recovery days
5. Ensure variety across the week

IMPORTANT: Respond ONLY with valid JSON in this exact format:

{
  "workoutPlan": {
    "overview": "Brief workout philosophy and approach",
    "weeklySchedule": [
      {
        "day": "Monday",
        "exercises": [
          {
            "name": "Push-ups",
            "sets": 3,
            "reps": "10-15",
            "restTime": "60 seconds",
            "instructions": "Keep body straight, lower chest to floor, push up"
          }
        ],
        "duration": "30 minutes",
        "notes": "Focus on form over speed"
      }
    ]
  },
  "dietPlan": {
    "overview": "Nutrition strategy overview",
    "dailyCalories": 2000,
    "macros": {
      "protein": "25%",
      "carbs": "45%",
      "fats": "30%"
    },
    "dailyMeals": [
      {
        "day": "Monday",
        "breakfast": {
          "name": "Oatmeal with Berries",
          "ingredients": ["Rolled oats", "Mixed berries", "Almonds", "Honey"],
          "calories": 350
        },
        "lunch": {
          "name": "Grilled Chicken Salad",
          "ingredients": ["Grilled chicken breast", "Mixed greens", "Cherry tomatoes", "Olive oil"],
          "calories": 450
        },
        "dinner": {
          "name": "Salmon with Quinoa",
          "ingredients": ["Salmon fillet", "Quinoa", "Steamed broccoli", "Lemon"],
          "calories": 500
        },
        "snacks": {
          "name": "Greek Yogurt with Nuts",
          "ingredients": ["Greek yogurt", "Mixed nuts", "Honey"],
          "calories": 200
        }
      }
    ]
  },
  "tips": [
    "Stay hydrated throughout the day",
    "Get adequate sleep for recovery",
    "Listen to your body and rest when needed"
  ],
  "motivation": "Your fitness journey starts with a single step. Stay consistent and believe in yourself!"
}"""


def _fmt(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_plan_prompt(profile: UserProfile) -> str:
    """Build the plan prompt embedding every provided profile field."""
    lines = [
        f"- Name: {profile.name}",
        f"- Age: {profile.age}",
        f"- Gender: {profile.gender or 'not specified'}",
        f"- Height: {_fmt(profile.height)}cm",
        f"- Weight: {_fmt(profile.weight)}kg",
        f"- Fitness Goal: {profile.fitnessGoal}",
        f"- Current Fitness Level: {profile.fitnessLevel}",
        f"- Workout Location: {profile.workoutLocation}",
        f"- Dietary Preference: {profile.dietaryPreference}",
    ]
    if profile.medicalHistory:
        lines.append(f"- Medical History: {profile.medicalHistory}")
    if profile.stressLevel:
        lines.append(f"- Stress Level: {profile.stressLevel}")
    if profile.sleepHours:
        lines.append(f"- Sleep Hours: {_fmt(profile.sleepHours)}")
    if profile.waterIntake:
        lines.append(f"- Water Intake: {_fmt(profile.waterIntake)}L/day")

    profile_desc = "\n".join(lines)

    return (
        "You are an expert fitness coach and nutritionist. Create a comprehensive, "
        "personalized 7-day fitness and diet plan.\n\n"
        f"User Profile:\n{profile_desc}\n\n"
        f"{PLAN_INSTRUCTIONS}"
    )


def plan_generation_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        temperature=settings.TEMPERATURE_PLAN,
        top_k=settings.TOP_K,
        top_p=settings.TOP_P,
        max_output_tokens=settings.MAX_OUTPUT_TOKENS,
    )


async def generate_fitness_plan(profile: UserProfile) -> FitnessPlan:
    """
    Generate a 7-day workout and diet plan for a validated profile.

    Never raises: model or transport failures and unusable output all
    produce the deterministic fallback plan.
    """
    try:
        text = await generate_text(build_plan_prompt(profile), plan_generation_config())
    except Exception as e:
        log_error("Plan generation", e)
        log_fallback("plan generation", "model unavailable")
        return create_fallback_plan(profile)

    logger.info(f"Gemini plan response received ({len(text)} chars)")
    return plan_from_model_text(text, profile)


# --- Motivational Quote ---

QUOTE_PROMPT = (
    "Generate a short, inspiring fitness and wellness motivational quote "
    "(maximum 20 words). Make it unique and energizing."
)


async def generate_motivational_quote() -> str:
    """Return a fresh quote, or the static one when the model is unavailable."""
    try:
        text = await generate_text(QUOTE_PROMPT)
    except Exception as e:
        log_error("Motivational quote", e)
        log_fallback("motivational quote", "model unavailable")
        return FALLBACK_QUOTE

    quote = text.strip().replace('"', "")
    return quote or FALLBACK_QUOTE


# --- Speech Synthesis ---

def pcm_to_wav(pcm: bytes, sample_rate: int = TTS_SAMPLE_RATE) -> bytes:
    """Wrap raw mono 16-bit PCM in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(TTS_SAMPLE_WIDTH)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buffer.getvalue()


async def synthesize_speech(text: str, voice: str, language: str) -> Optional[str]:
    """
    Synthesize speech with the Gemini TTS model.

    Returns:
        A data:audio/wav URL, or None when server-side speech is disabled
        or the model produced no audio
    """
    if not settings.SERVER_TTS_ENABLED:
        return None

    log_ai_call("Speech synthesis", settings.GEMINI_TTS_MODEL)

    response = await get_client().aio.models.generate_content(
        model=settings.GEMINI_TTS_MODEL,
        contents=text,
        config=types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                language_code=language,
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
                ),
            ),
        ),
    )

    inline = first_inline_data(response)
    if inline is None:
        logger.warning("Gemini TTS returned no audio data")
        return None

    pcm, mime_type = inline
    audio = pcm if mime_type.startswith("audio/wav") else pcm_to_wav(pcm)
    return f"data:audio/wav;base64,{base64.b64encode(audio).decode('ascii')}"
