"""
Tests for the image provider chain and the stock photo fallback.
"""
import asyncio
import random
from urllib.parse import unquote

import httpx
import pytest
from google.genai import errors

from conftest import inline_response, text_response
from app.core.config import settings
from app.services import image_service
from app.services.image_providers import (
    DalleProvider,
    DeepAIProvider,
    GeminiImageProvider,
    GetimgProvider,
    ImageProvider,
    ImageResult,
    PollinationsProvider,
    ReplicateProvider,
    StabilityProvider,
    default_providers,
)
from app.services.image_service import ImageGenerationError, ImageProviderChain
from app.services.stock_images import (
    CURATED_MEAL,
    MEAL_CATEGORIES,
    match_category,
    select_stock_image,
    variety_index,
)


def _rate_limited():
    return errors.ClientError(429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})


def _mock_http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _run_chain(providers, handler=None, prompt="push-ups", kind="exercise"):
    async def go():
        async with _mock_http(handler or (lambda request: httpx.Response(500))) as http:
            return await ImageProviderChain(providers, http=http).run(prompt, kind)
    return asyncio.run(go())


class _Recorder(ImageProvider):
    """Provider stub that records whether it was attempted."""

    def __init__(self, method, result=None, error=None, configured=True):
        self.method = method
        self.result = result
        self.error = error
        self.configured = configured
        self.calls = 0

    def is_configured(self):
        return self.configured

    async def attempt(self, prompt, kind, http):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


class TestProviderOrder:
    """Tests for the fixed provider order."""

    def test_default_order(self):
        assert [p.method for p in default_providers()] == [
            "gemini", "stability-ai", "getimg-ai", "pollinations-ai", "deepai", "replicate", "dalle",
        ]

    def test_unconfigured_providers_are_skipped(self):
        skipped = _Recorder("stability-ai", configured=False)
        failing = _Recorder("getimg-ai", error=RuntimeError("boom"))
        empty = _Recorder("deepai", result=None)
        winner = _Recorder("dalle", result=ImageResult("https://img/ok.png", "dalle"))
        never = _Recorder("extra", result=ImageResult("https://img/no.png", "extra"))

        result = _run_chain([skipped, failing, empty, winner, never])

        assert result.method == "dalle"
        assert skipped.calls == 0
        assert failing.calls == 1
        assert empty.calls == 1
        assert never.calls == 0

    def test_all_failing_raises(self):
        with pytest.raises(ImageGenerationError):
            _run_chain([_Recorder("a", error=ValueError("x")), _Recorder("b")])


class TestGeminiImageProvider:
    """Tests for the primary Gemini image provider."""

    def test_default_retry_delay(self):
        assert GeminiImageProvider().retry_delay == 2.0

    def test_returns_data_url(self, mock_gemini):
        mock_gemini.aio.models.generate_content.return_value = inline_response(b"img", "image/jpeg")

        result = _run_chain([GeminiImageProvider(retry_delay=0)])

        assert result.method == "gemini"
        assert result.url == "data:image/jpeg;base64,aW1n"
        config = mock_gemini.aio.models.generate_content.call_args.kwargs["config"]
        assert config.temperature == 0.8

    def test_retries_once_on_rate_limit(self, mock_gemini):
        mock_gemini.aio.models.generate_content.side_effect = [_rate_limited(), inline_response(b"img")]

        result = _run_chain([GeminiImageProvider(retry_delay=0)])

        assert result.method == "gemini-retry"
        assert mock_gemini.aio.models.generate_content.call_count == 2

    def test_gives_up_after_second_rate_limit(self, mock_gemini):
        mock_gemini.aio.models.generate_content.side_effect = [_rate_limited(), _rate_limited(), None]

        with pytest.raises(ImageGenerationError):
            _run_chain([GeminiImageProvider(retry_delay=0)])
        assert mock_gemini.aio.models.generate_content.call_count == 2

    def test_other_errors_are_not_retried(self, mock_gemini):
        mock_gemini.aio.models.generate_content.side_effect = errors.ServerError(
            500, {"error": {"code": 500, "message": "oops", "status": "INTERNAL"}}
        )

        with pytest.raises(ImageGenerationError):
            _run_chain([GeminiImageProvider(retry_delay=0)])
        assert mock_gemini.aio.models.generate_content.call_count == 1

    def test_text_only_response_yields_nothing(self, mock_gemini):
        mock_gemini.aio.models.generate_content.return_value = text_response("no image")
        mock_gemini.aio.models.generate_content.return_value.candidates = []

        with pytest.raises(ImageGenerationError):
            _run_chain([GeminiImageProvider(retry_delay=0)])


class TestRestProviders:
    """Tests for the keyed REST providers."""

    def test_stability(self, monkeypatch):
        monkeypatch.setattr(settings, "STABILITY_API_KEY", "sk-test")
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"artifacts": [{"base64": "QUJD"}]})

        result = _run_chain([StabilityProvider()], handler)

        assert result.url == "data:image/png;base64,QUJD"
        assert result.method == "stability-ai"
        assert seen["auth"] == "Bearer sk-test"

    def test_getimg_error_status_moves_on(self, monkeypatch):
        monkeypatch.setattr(settings, "GETIMG_API_KEY", "key")
        monkeypatch.setattr(settings, "POLLINATIONS_ENABLED", True)

        result = _run_chain([GetimgProvider(), PollinationsProvider()], lambda r: httpx.Response(401))

        assert result.method == "pollinations-ai"

    def test_getimg_url(self, monkeypatch):
        monkeypatch.setattr(settings, "GETIMG_API_KEY", "key")

        result = _run_chain(
            [GetimgProvider()], lambda r: httpx.Response(200, json={"image": "https://getimg/x.png"})
        )

        assert result.url == "https://getimg/x.png"

    def test_pollinations_url(self, monkeypatch):
        monkeypatch.setattr(settings, "POLLINATIONS_ENABLED", True)

        result = _run_chain([PollinationsProvider()], prompt="Greek Yogurt Bowl", kind="meal")

        assert result.url.startswith("https://image.pollinations.ai/prompt/")
        assert "width=512&height=512&nologo=true&seed=" in result.url
        assert "professional food photography, Greek Yogurt Bowl" in unquote(result.url)

    def test_pollinations_can_be_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "POLLINATIONS_ENABLED", False)
        assert not PollinationsProvider().is_configured()

    @pytest.mark.parametrize("key,configured", [
        ("", False),
        ("quickstart-QUdJIGlzIGNvbWluZy4uLi4K", False),
        ("real-key", True),
    ])
    def test_deepai_placeholder_key(self, monkeypatch, key, configured):
        monkeypatch.setattr(settings, "DEEPAI_API_KEY", key)
        assert DeepAIProvider().is_configured() is configured

    def test_deepai(self, monkeypatch):
        monkeypatch.setattr(settings, "DEEPAI_API_KEY", "real-key")

        def handler(request):
            assert request.headers["Api-Key"] == "real-key"
            return httpx.Response(200, json={"output_url": "https://deepai/x.jpg"})

        assert _run_chain([DeepAIProvider()], handler).url == "https://deepai/x.jpg"

    def test_demo_keys_count_as_absent(self, monkeypatch):
        monkeypatch.setattr(settings, "REPLICATE_API_KEY", "demo-key")
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "demo-key")
        assert not ReplicateProvider().is_configured()
        assert not DalleProvider().is_configured()

    def test_dalle(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-openai")

        def handler(request):
            assert request.url.path.endswith("/images/generations")
            return httpx.Response(200, json={"created": 0, "data": [{"url": "https://dalle/x.png"}]})

        result = _run_chain([DalleProvider()], handler)

        assert result.method == "dalle"
        assert result.url == "https://dalle/x.png"


class TestReplicateProvider:
    """Tests for the job-based Replicate provider."""

    @pytest.fixture(autouse=True)
    def _key(self, monkeypatch):
        monkeypatch.setattr(settings, "REPLICATE_API_KEY", "r8-key")

    def test_default_polling(self):
        provider = ReplicateProvider()
        assert provider.poll_interval == 1.0
        assert provider.max_polls == 30

    def test_polls_until_succeeded(self):
        statuses = iter(["processing", "processing", "succeeded"])
        polls = []

        def handler(request):
            if request.method == "POST":
                return httpx.Response(201, json={"id": "job1", "status": "starting"})
            polls.append(request.url.path)
            status = next(statuses)
            output = ["https://replicate/out.png"] if status == "succeeded" else None
            return httpx.Response(200, json={"id": "job1", "status": status, "output": output})

        result = _run_chain([ReplicateProvider(poll_interval=0)], handler)

        assert result.url == "https://replicate/out.png"
        assert polls == ["/v1/predictions/job1"] * 3

    def test_failed_status_stops_polling(self):
        polls = []

        def handler(request):
            if request.method == "POST":
                return httpx.Response(201, json={"id": "job2", "status": "starting"})
            polls.append(1)
            return httpx.Response(200, json={"id": "job2", "status": "failed"})

        with pytest.raises(ImageGenerationError):
            _run_chain([ReplicateProvider(poll_interval=0)], handler)
        assert len(polls) == 1

    def test_poll_limit(self):
        polls = []

        def handler(request):
            if request.method == "POST":
                return httpx.Response(201, json={"id": "job3", "status": "starting"})
            polls.append(1)
            return httpx.Response(200, json={"id": "job3", "status": "processing"})

        with pytest.raises(ImageGenerationError):
            _run_chain([ReplicateProvider(poll_interval=0, max_polls=30)], handler)
        assert len(polls) == 30


class TestGenerateImage:
    """Tests for the public generate_image contract."""

    def test_success_payload(self):
        chain = ImageProviderChain([_Recorder("getimg-ai", result=ImageResult("https://x/y.png", "getimg-ai"))])

        data = asyncio.run(image_service.generate_image("Lentil Curry", "meal", chain))

        assert data == {
            "success": True,
            "imageUrl": "https://x/y.png",
            "description": "AI-generated meal visualization: Lentil Curry",
            "prompt": "Lentil Curry",
            "type": "meal",
            "generated": True,
            "method": "getimg-ai",
        }

    def test_total_failure_uses_stock_photo(self):
        chain = ImageProviderChain([_Recorder("gemini", error=RuntimeError("down"))])

        data = asyncio.run(image_service.generate_image("barbell squat", "exercise", chain))

        assert data["method"] == "enhanced-fallback"
        assert data["fallback"] is True
        assert "images.unsplash.com" in data["imageUrl"]
        assert data["error"] == "All AI image generation methods failed"


class TestStockImages:
    """Tests for keyword routing of stock photos."""

    def test_squat_category(self):
        assert select_stock_image("barbell squat", "exercise").category == "squat"

    def test_chicken_salad_is_protein(self):
        assert select_stock_image("grilled chicken salad", "meal").category == "protein"

    def test_plain_salad(self):
        assert match_category("Quinoa Salad Bowl", "meal")[0] == "salad"

    def test_routing_ignores_punctuation_and_case(self):
        assert match_category("Push-Ups!", "exercise")[0] == "push"
        assert match_category("OATMEAL with berries", "meal")[0] == "breakfast"

    def test_unmatched_prompt_uses_curated_list(self):
        stock = select_stock_image("mystery dish", "meal")
        assert stock.category == "general"
        assert stock.url in CURATED_MEAL

    def test_variety_picks_within_category(self):
        urls = dict((c, u) for c, _, u in MEAL_CATEGORIES)["protein"]
        for seed in range(20):
            stock = select_stock_image("chicken", "meal", random.Random(seed))
            assert stock.url in urls
            assert stock.url == urls[stock.variety % len(urls)]

    def test_variety_index_uses_character_codes(self):
        rng = random.Random(7)
        expected_random = random.Random(7).randrange(1000)
        assert variety_index("ab", rng) == (ord("a") + ord("b") + expected_random) % 10

    def test_descriptions(self):
        assert select_stock_image("plank", "exercise").description.startswith("Exercise demonstration: plank.")
        assert select_stock_image("soup", "meal").description.startswith("Nutritious meal: soup.")
