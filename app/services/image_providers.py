"""
Image generation providers, tried in order by the image chain.

Each provider turns a short exercise/meal prompt into an image reference
(a URL or a data: URL). A provider returns None when it got an answer
without an image; any other failure is raised and absorbed by the chain.
"""
import asyncio
import base64
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import httpx
from openai import AsyncOpenAI
from google.genai import types
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_fixed

from app.core.config import settings
from app.core.logger import logger, log_ai_call
from app.services.gemini_service import first_inline_data, get_client, is_rate_limited


DEEPAI_PLACEHOLDER_KEY = "quickstart-QUdJIGlzIGNvbWluZy4uLi4K"
DEMO_KEY = "demo-key"


@dataclass
class ImageResult:
    url: str
    method: str


def styled_prompt(prompt: str, kind: str, extra: str = "") -> str:
    """Keyword-style prompt used by the diffusion providers."""
    if kind == "exercise":
        base = (f"professional fitness photograph, {prompt}, person performing exercise, "
                "proper form, gym setting, high quality")
    else:
        base = (f"professional food photography, {prompt}, beautifully plated, appetizing, "
                "restaurant quality, high quality")
    if extra:
        base += f", {extra}"
    return base + ", realistic"


def describe(prompt: str, kind: str) -> str:
    what = "exercise demonstration" if kind == "exercise" else "meal visualization"
    return f"AI-generated {what}: {prompt}"


class ImageProvider:
    """Base strategy: one external image source."""

    method: str = ""
    timeout: float = 30.0

    def is_configured(self) -> bool:
        return True

    async def attempt(self, prompt: str, kind: str, http: httpx.AsyncClient) -> Optional[ImageResult]:
        raise NotImplementedError


class GeminiImageProvider(ImageProvider):
    """Gemini image model; retried once after a fixed delay on HTTP 429."""

    method = "gemini"

    def __init__(self, retry_delay: float = None):
        self.retry_delay = settings.GEMINI_RETRY_DELAY if retry_delay is None else retry_delay

    def is_configured(self) -> bool:
        return bool(settings.GOOGLE_GEMINI_API_KEY)

    @staticmethod
    def build_prompt(prompt: str, kind: str) -> str:
        if kind == "exercise":
            return (
                "Generate a professional, realistic fitness photograph showing a person "
                f"performing the exercise: {prompt}. The image should show proper form and "
                "correct posture, a clean modern gym or home workout environment, good "
                "lighting, athletic wear, and be suitable for a fitness app."
            )
        return (
            f"Generate a professional, appetizing food photograph of: {prompt}. The image "
            "should show a beautifully plated meal with good lighting, vibrant colors, a "
            "clean background, looking delicious, healthy and nutritious."
        )

    async def attempt(self, prompt, kind, http):
        client = get_client()
        config = types.GenerateContentConfig(
            temperature=settings.TEMPERATURE_IMAGE,
            top_k=settings.TOP_K,
            top_p=settings.TOP_P,
        )
        log_ai_call("Image generation", settings.GEMINI_IMAGE_MODEL)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(2),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception(is_rate_limited),
            reraise=True,
        )
        async for try_ in retrying:
            with try_:
                response = await client.aio.models.generate_content(
                    model=settings.GEMINI_IMAGE_MODEL,
                    contents=self.build_prompt(prompt, kind),
                    config=config,
                )

        inline = first_inline_data(response)
        if inline is None:
            logger.warning("No image data in Gemini response")
            return None

        data, mime_type = inline
        method = "gemini-retry" if try_.retry_state.attempt_number > 1 else "gemini"
        encoded = base64.b64encode(data).decode("ascii")
        return ImageResult(f"data:{mime_type or 'image/png'};base64,{encoded}", method)


class StabilityProvider(ImageProvider):
    """Stability AI SDXL text-to-image."""

    method = "stability-ai"
    ENDPOINT = "https://api.stability.ai/v1/generation/stable-diffusion-xl-1024-v1-0/text-to-image"

    def is_configured(self) -> bool:
        return bool(settings.STABILITY_API_KEY)

    async def attempt(self, prompt, kind, http):
        response = await http.post(
            self.ENDPOINT,
            headers={
                "Authorization": f"Bearer {settings.STABILITY_API_KEY}",
                "Accept": "application/json",
            },
            json={
                "text_prompts": [{"text": styled_prompt(prompt, kind, "4k, photography"), "weight": 1}],
                "cfg_scale": 7,
                "height": 1024,
                "width": 1024,
                "steps": 30,
                "samples": 1,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()

        artifacts = response.json().get("artifacts") or []
        if artifacts and artifacts[0].get("base64"):
            return ImageResult(f"data:image/png;base64,{artifacts[0]['base64']}", self.method)
        return None


class GetimgProvider(ImageProvider):
    """Getimg.ai stable diffusion endpoint."""

    method = "getimg-ai"
    timeout = 20.0
    ENDPOINT = "https://api.getimg.ai/v1/stable-diffusion/text-to-image"

    def is_configured(self) -> bool:
        return bool(settings.GETIMG_API_KEY)

    async def attempt(self, prompt, kind, http):
        response = await http.post(
            self.ENDPOINT,
            headers={"Authorization": f"Bearer {settings.GETIMG_API_KEY}"},
            json={
                "prompt": styled_prompt(prompt, kind),
                "model": "stable-diffusion-v1-5",
                "size": "512x512",
                "output_format": "url",
            },
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        url = data.get("url") or data.get("image")
        return ImageResult(url, self.method) if url else None


class PollinationsProvider(ImageProvider):
    """
    Keyless on-the-fly image URL service.

    Only builds the URL; the image is rendered when the client fetches it,
    so this provider always succeeds.
    """

    method = "pollinations-ai"
    BASE_URL = "https://image.pollinations.ai/prompt/"

    def is_configured(self) -> bool:
        return settings.POLLINATIONS_ENABLED

    async def attempt(self, prompt, kind, http):
        encoded = quote(styled_prompt(prompt, kind, "photography, 8k"), safe="")
        seed = int(time.time() * 1000)
        return ImageResult(
            f"{self.BASE_URL}{encoded}?width=512&height=512&nologo=true&seed={seed}",
            self.method,
        )


class DeepAIProvider(ImageProvider):
    method = "deepai"
    timeout = 20.0
    ENDPOINT = "https://api.deepai.org/api/text2img"

    def is_configured(self) -> bool:
        key = settings.DEEPAI_API_KEY
        return bool(key) and key != DEEPAI_PLACEHOLDER_KEY

    async def attempt(self, prompt, kind, http):
        response = await http.post(
            self.ENDPOINT,
            headers={"Api-Key": settings.DEEPAI_API_KEY},
            json={"text": styled_prompt(prompt, kind)},
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        url = data.get("output_url") or data.get("url")
        return ImageResult(url, self.method) if url else None


class ReplicateProvider(ImageProvider):
    """Replicate prediction job, polled until it settles."""

    method = "replicate"
    timeout = 10.0
    ENDPOINT = "https://api.replicate.com/v1/predictions"
    MODEL_VERSION = (
        "stability-ai/stable-diffusion:"
        "db21e45d3f7023abc2a46ee38a23973f6dce16bb082a930b0c49861f96d1e5bf"
    )
    PENDING = ("starting", "processing")

    def __init__(self, poll_interval: float = None, max_polls: int = None):
        self.poll_interval = settings.REPLICATE_POLL_INTERVAL if poll_interval is None else poll_interval
        self.max_polls = settings.REPLICATE_MAX_POLLS if max_polls is None else max_polls

    def is_configured(self) -> bool:
        key = settings.REPLICATE_API_KEY
        return bool(key) and key != DEMO_KEY

    async def attempt(self, prompt, kind, http):
        headers = {"Authorization": f"Token {settings.REPLICATE_API_KEY}"}
        response = await http.post(
            self.ENDPOINT,
            headers=headers,
            json={
                "version": self.MODEL_VERSION,
                "input": {
                    "prompt": styled_prompt(prompt, kind, "4k"),
                    "width": 512,
                    "height": 512,
                    "num_outputs": 1,
                    "guidance_scale": 7.5,
                    "num_inference_steps": 50,
                },
            },
            timeout=self.timeout,
        )
        response.raise_for_status()

        prediction = response.json()
        prediction_id = prediction.get("id")
        if not prediction_id:
            return None

        status = prediction.get("status")
        polls = 0
        while status in self.PENDING and polls < self.max_polls:
            await asyncio.sleep(self.poll_interval)
            polls += 1

            status_response = await http.get(
                f"{self.ENDPOINT}/{prediction_id}", headers=headers, timeout=self.timeout
            )
            if status_response.status_code != 200:
                continue

            data = status_response.json()
            status = data.get("status")
            if status == "succeeded" and data.get("output"):
                return ImageResult(data["output"][0], self.method)
            if status == "failed":
                raise RuntimeError("Replicate generation failed")

        logger.warning(f"Replicate prediction {prediction_id} did not finish (status={status})")
        return None


class DalleProvider(ImageProvider):
    """OpenAI DALL-E through the official SDK."""

    method = "dalle"
    timeout = 15.0

    def is_configured(self) -> bool:
        key = settings.OPENAI_API_KEY
        return bool(key) and key != DEMO_KEY

    @staticmethod
    def build_prompt(prompt: str, kind: str) -> str:
        if kind == "exercise":
            return (f"A professional fitness photograph showing a person performing {prompt} "
                    "exercise with proper form in a clean gym environment, high quality, realistic")
        return (f"A professional food photograph of {prompt}, beautifully plated and appetizing, "
                "restaurant quality, high quality, realistic")

    async def attempt(self, prompt, kind, http):
        client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY, http_client=http, max_retries=0)
        log_ai_call("Image generation", settings.OPENAI_IMAGE_MODEL)

        result = await client.images.generate(
            model=settings.OPENAI_IMAGE_MODEL,
            prompt=self.build_prompt(prompt, kind),
            size="1024x1024",
            quality="standard",
            n=1,
            timeout=self.timeout,
        )
        if result.data and result.data[0].url:
            return ImageResult(result.data[0].url, self.method)
        return None


def default_providers() -> list[ImageProvider]:
    """Providers in the order the chain tries them."""
    return [
        GeminiImageProvider(),
        StabilityProvider(),
        GetimgProvider(),
        PollinationsProvider(),
        DeepAIProvider(),
        ReplicateProvider(),
        DalleProvider(),
    ]
