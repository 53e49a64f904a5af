"""
Image chain: try each provider in order, then fall back to stock photos.
"""
from typing import Optional

import httpx

from app.core.logger import logger, log_error, log_fallback, log_provider_skip
from app.services.image_providers import ImageProvider, ImageResult, default_providers, describe
from app.services.stock_images import select_stock_image


class ImageGenerationError(RuntimeError):
    """Every provider failed or was skipped."""


class ImageProviderChain:
    """Prioritized list of interchangeable image providers."""

    def __init__(self, providers: list[ImageProvider] = None, http: Optional[httpx.AsyncClient] = None):
        self.providers = default_providers() if providers is None else providers
        self._http = http

    async def run(self, prompt: str, kind: str) -> ImageResult:
        """
        Return the first image any provider yields.

        Raises:
            ImageGenerationError: If no provider produced an image
        """
        if self._http is not None:
            return await self._run(prompt, kind, self._http)
        async with httpx.AsyncClient() as http:
            return await self._run(prompt, kind, http)

    async def _run(self, prompt: str, kind: str, http: httpx.AsyncClient) -> ImageResult:
        for provider in self.providers:
            if not provider.is_configured():
                log_provider_skip(provider.method, "not configured")
                continue

            logger.info(f"Attempting image provider: {provider.method}")
            try:
                result = await provider.attempt(prompt, kind, http)
            except Exception as e:
                # A provider failure never aborts the chain
                log_error(f"image provider {provider.method}", e)
                continue

            if result and result.url:
                logger.info(f"Image generated with {result.method}")
                return result
            logger.info(f"Image provider {provider.method} returned no image")

        raise ImageGenerationError("All AI image generation methods failed")


async def generate_image(prompt: str, kind: str, chain: ImageProviderChain = None) -> dict:
    """
    Illustrate an exercise or meal.

    Always returns an image reference; the `method` field names the
    provider that produced it, or "enhanced-fallback" for a stock photo.
    """
    chain = chain or ImageProviderChain()

    try:
        result = await chain.run(prompt, kind)
    except ImageGenerationError as e:
        log_fallback("image generation", "no provider produced an image")
        stock = select_stock_image(prompt, kind)
        return {
            "success": True,
            "imageUrl": stock.url,
            "description": stock.description,
            "fallback": True,
            "method": "enhanced-fallback",
            "variety": stock.variety,
            "error": str(e),
        }

    return {
        "success": True,
        "imageUrl": result.url,
        "description": describe(prompt, kind),
        "prompt": prompt,
        "type": kind,
        "generated": True,
        "method": result.method,
    }
