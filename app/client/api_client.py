"""
HTTP client for the AI Fitness Coach API.

Mirrors what the web front end does: submit the profile, keep the last
profile and plan in the local store, regenerate from the saved profile
and clear both on reset.
"""
from typing import Optional

import httpx
from pydantic import ValidationError

from app.client.storage import LocalStore, PLAN_KEY, PROFILE_KEY
from app.core.logger import logger, log_error
from app.models.plan import FitnessPlan
from app.models.profile import UserProfile


class PlanClientError(RuntimeError):
    """The API rejected a request or could not be reached."""


class FitnessCoachClient:
    def __init__(
        self,
        store: LocalStore,
        base_url: str = "http://localhost:8000",
        http: Optional[httpx.Client] = None,
        timeout: float = 120.0,
    ):
        self.store = store
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_error(f"{method} {path}", e)
            raise PlanClientError(f"Network error: {e}") from e

        if response.status_code != 200:
            try:
                detail = response.json().get("detail") or response.text
            except ValueError:
                detail = response.text
            raise PlanClientError(f"{path} failed ({response.status_code}): {detail}")

        return response.json()

    # --- Plan lifecycle ---

    def generate_plan(self, profile: UserProfile) -> FitnessPlan:
        """Request a plan and persist it together with the profile."""
        data = self._request(
            "POST", "/api/generate-plan", json=profile.model_dump(mode="json", exclude_none=True)
        )
        if not data.get("success"):
            raise PlanClientError(data.get("details") or data.get("error") or "Failed to generate plan")

        plan = FitnessPlan.model_validate(data["plan"])
        self.store.set(PLAN_KEY, plan.model_dump(mode="json"))
        self.store.set(PROFILE_KEY, profile.model_dump(mode="json"))
        logger.info("Your personalized fitness plan is ready!")
        return plan

    def regenerate_plan(self) -> FitnessPlan:
        profile = self.saved_profile()
        if profile is None:
            raise PlanClientError("No user profile found. Please fill out the form again.")
        return self.generate_plan(profile)

    def reset(self) -> None:
        """Forget the saved plan and profile."""
        self.store.remove(PLAN_KEY, PROFILE_KEY)

    def saved_plan(self) -> Optional[FitnessPlan]:
        return self._load(PLAN_KEY, FitnessPlan)

    def saved_profile(self) -> Optional[UserProfile]:
        return self._load(PROFILE_KEY, UserProfile)

    def _load(self, key: str, model):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            log_error(f"loading saved {key}", e)
            return None

    # --- Other endpoints ---

    def motivational_quote(self) -> str:
        return self._request("GET", "/api/motivational-quote")["quote"]

    def generate_image(self, prompt: str, kind: str = "exercise") -> dict:
        return self._request("POST", "/api/generate-image", json={"prompt": prompt, "type": kind})

    def request_speech(self, text: str, voice: str = "Zephyr", language: str = "en-US") -> Optional[str]:
        """Ask the server for audio; returns its audio URL, or None when the client must speak."""
        data = self._request(
            "POST", "/api/text-to-speech", json={"text": text, "voice": voice, "language": language}
        )
        if not data.get("success"):
            raise PlanClientError(data.get("error") or "Speech request failed")
        return data.get("audioUrl")
