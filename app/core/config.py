"""
Configuration and constants for the AI Fitness Coach API.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    # Gemini Configuration (required)
    GOOGLE_GEMINI_API_KEY: str = os.getenv("GOOGLE_GEMINI_API_KEY", "")
    GEMINI_TEXT_MODEL: str = os.getenv("GEMINI_TEXT_MODEL", "gemini-2.5-flash")
    GEMINI_IMAGE_MODEL: str = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
    GEMINI_TTS_MODEL: str = os.getenv("GEMINI_TTS_MODEL", "gemini-2.5-flash-preview-tts")
    GEMINI_TIMEOUT: int = int(os.getenv("GEMINI_TIMEOUT", 30))  # seconds

    # Optional image provider keys; a missing key skips that provider
    STABILITY_API_KEY: str = os.getenv("STABILITY_API_KEY", "")
    GETIMG_API_KEY: str = os.getenv("GETIMG_API_KEY", "")
    DEEPAI_API_KEY: str = os.getenv("DEEPAI_API_KEY", "")
    REPLICATE_API_KEY: str = os.getenv("REPLICATE_API_KEY", "")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_IMAGE_MODEL: str = "dall-e-3"

    # Feature flags
    POLLINATIONS_ENABLED: bool = _env_flag("POLLINATIONS_ENABLED", True)
    SERVER_TTS_ENABLED: bool = _env_flag("SERVER_TTS_ENABLED", False)
    RATE_LIMIT_ENABLED: bool = _env_flag("RATE_LIMIT_ENABLED", True)

    # Server Configuration
    PORT: int = int(os.getenv("PORT", 8000))
    HOST: str = "0.0.0.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # AI Generation Settings
    TEMPERATURE_PLAN: float = 0.7
    TEMPERATURE_IMAGE: float = 0.8
    TOP_K: int = 40
    TOP_P: float = 0.95
    MAX_OUTPUT_TOKENS: int = 8192

    # Image chain timing
    GEMINI_RETRY_DELAY: float = 2.0      # Fixed wait before the single 429 retry
    REPLICATE_POLL_INTERVAL: float = 1.0
    REPLICATE_MAX_POLLS: int = 30

    def validate(self) -> None:
        """Validate required configuration on startup."""
        missing = []

        if not self.GOOGLE_GEMINI_API_KEY:
            missing.append("GOOGLE_GEMINI_API_KEY")

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )


settings = Settings()
