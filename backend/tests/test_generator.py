"""Tests for the Gemini response generator's retry loop."""

import asyncio

import httpx
import pytest

from pdfchat.config import Settings
from pdfchat.modules.generation import (
    ConfigurationError,
    EmptyResponseError,
    GenerationFailed,
    ModelNotFoundError,
    NoModelsAvailableError,
    RetriesExhaustedError,
    RetryableUpstreamError,
    UpstreamError,
    build_generator,
)


class TestGenerate:
    """Tests for ResponseGenerator.generate."""

    async def test_returns_text(self, make_generator, fake_gemini):
        fake_gemini.queue_text("Paris")
        generator = make_generator()

        assert await generator.generate("What is the capital of France?") == "Paris"

    async def test_request_shape(self, make_generator, fake_gemini):
        """The prompt is sent verbatim as a single user message."""
        fake_gemini.queue_text("ok")
        generator = make_generator()

        await generator.generate("What is the capital of France?")

        [call] = fake_gemini.generate_calls
        assert call["model"] == "models/gemini-2.5-flash"
        assert call["key"] == "test-key"
        assert call["body"] == {
            "contents": [
                {"role": "user", "parts": [{"text": "What is the capital of France?"}]},
            ],
        }

    async def test_calls_are_stateless(self, make_generator, fake_gemini):
        fake_gemini.queue_text("ok")
        generator = make_generator()

        await generator.generate("first")
        await generator.generate("second")

        assert [len(c["body"]["contents"]) for c in fake_gemini.generate_calls] == [1, 1]
        assert fake_gemini.list_calls == 1

    async def test_retry_bound_on_rate_limit(self, make_generator, fake_gemini, sleeper):
        """A permanently rate-limited API is tried exactly max_attempts times."""
        fake_gemini.queue(429, text="quota exceeded")
        generator = make_generator()

        with pytest.raises(RetryableUpstreamError) as exc_info:
            await generator.generate("hi")

        assert len(fake_gemini.generate_calls) == 3
        assert sleeper.delays == [1.0, 2.0]
        assert exc_info.value.status_code == 429
        assert exc_info.value.detail == "Gemini API error: 429 - quota exceeded"

    async def test_backoff_honors_retry_after(self, make_generator, fake_gemini, sleeper):
        fake_gemini.queue(503, text="busy", headers={"Retry-After": "2"})
        fake_gemini.queue_text("done")
        generator = make_generator()

        assert await generator.generate("hi") == "done"
        assert sleeper.delays == [2.0]

    async def test_backoff_is_capped(self, make_generator, fake_gemini, sleeper):
        fake_gemini.queue(429, text="later", headers={"Retry-After": "90"})
        fake_gemini.queue_text("done")
        generator = make_generator()

        await generator.generate("hi")
        assert sleeper.delays == [10.0]

    async def test_non_retryable_error_fails_immediately(self, make_generator, fake_gemini, sleeper):
        fake_gemini.queue(400, text="bad request")
        generator = make_generator()

        with pytest.raises(UpstreamError) as exc_info:
            await generator.generate("hi")

        assert len(fake_gemini.generate_calls) == 1
        assert sleeper.delays == []
        assert exc_info.value.status_code == 400

    async def test_empty_success_not_retried(self, make_generator, fake_gemini):
        fake_gemini.queue(json_body={"candidates": [{"content": {"parts": []}}]})
        generator = make_generator()

        with pytest.raises(EmptyResponseError, match="empty response"):
            await generator.generate("hi")

        assert len(fake_gemini.generate_calls) == 1

    async def test_not_found_without_override_rediscovers(self, make_generator, fake_gemini):
        """A 404 clears the cache and the next attempt uses the fresh model list."""
        fake_gemini.queue(404, text="model retired")
        fake_gemini.queue_text("Paris")
        generator = make_generator()

        original_invalidate = generator.resolver.invalidate

        def invalidate():
            original_invalidate()
            fake_gemini.set_models("models/gemini-2.0-flash")

        generator.resolver.invalidate = invalidate

        assert await generator.generate("hi") == "Paris"
        assert [c["model"] for c in fake_gemini.generate_calls] == [
            "models/gemini-2.5-flash",
            "models/gemini-2.0-flash",
        ]
        assert fake_gemini.list_calls == 2
        assert generator.resolver.cached == "models/gemini-2.0-flash"

    async def test_not_found_consumes_attempts(self, make_generator, fake_gemini, sleeper):
        fake_gemini.queue(404, text="gone")
        generator = make_generator()

        with pytest.raises(RetriesExhaustedError, match="failed after retries"):
            await generator.generate("hi")

        assert len(fake_gemini.generate_calls) == 3
        assert fake_gemini.list_calls == 3
        assert sleeper.delays == []

    async def test_not_found_with_override_is_fatal(self, make_generator, fake_gemini):
        fake_gemini.queue(404, text="no such model")
        generator = make_generator(override="gemini-legacy")

        with pytest.raises(ModelNotFoundError) as exc_info:
            await generator.generate("hi")

        assert len(fake_gemini.generate_calls) == 1
        assert fake_gemini.list_calls == 0
        assert generator.resolver.cached == "models/gemini-legacy"
        assert exc_info.value.detail == "Gemini API error: 404 - no such model"

    async def test_resolver_failure_propagates(self, make_generator, fake_gemini):
        fake_gemini.set_models()
        generator = make_generator()

        with pytest.raises(NoModelsAvailableError):
            await generator.generate("hi")

        assert fake_gemini.generate_calls == []

    async def test_cancelled_during_backoff(self, make_generator, fake_gemini):
        """Cancelling the caller stops the loop inside the backoff wait."""
        fake_gemini.queue(429, text="slow down")
        waiting = asyncio.Event()

        async def slow_sleep(delay):
            waiting.set()
            await asyncio.sleep(3600)

        generator = make_generator(sleep=slow_sleep)
        task = asyncio.create_task(generator.generate("hi"))

        await asyncio.wait_for(waiting.wait(), timeout=5)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(fake_gemini.generate_calls) == 1


class TestNetworkFailures:
    """Transport errors and malformed discovery bodies surface as UpstreamError."""

    async def test_connect_error_on_generate(self, make_generator, fake_gemini, sleeper):
        fake_gemini.generate_network_error = httpx.ConnectError("connection refused")
        generator = make_generator()

        with pytest.raises(UpstreamError) as exc_info:
            await generator.generate("hi")

        assert exc_info.value.status_code is None
        assert exc_info.value.detail == "Gemini API request failed: ConnectError: connection refused"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert len(fake_gemini.generate_calls) == 1
        assert sleeper.delays == []

    async def test_read_timeout_on_generate(self, make_generator, fake_gemini):
        fake_gemini.generate_network_error = httpx.ReadTimeout("slow")
        generator = make_generator()

        with pytest.raises(GenerationFailed, match="ReadTimeout: slow"):
            await generator.generate("hi")

    async def test_timeout_during_discovery(self, make_generator, fake_gemini):
        fake_gemini.list_network_error = httpx.ConnectTimeout("no route")
        generator = make_generator()

        with pytest.raises(UpstreamError, match="ConnectTimeout"):
            await generator.generate("hi")

        assert fake_gemini.generate_calls == []
        assert generator.resolver.cached is None

    async def test_non_json_discovery_body(self, make_generator, fake_gemini):
        fake_gemini.list_error = (200, "<html>captive portal</html>")
        generator = make_generator()

        with pytest.raises(UpstreamError, match="malformed response"):
            await generator.generate("hi")

        assert fake_gemini.generate_calls == []


class TestBuildGenerator:
    """Tests for build_generator."""

    def test_missing_api_key(self):
        settings = Settings(_env_file=None, gemini_api_key="")

        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            build_generator(settings)

    def test_uses_settings(self):
        settings = Settings(
            _env_file=None,
            gemini_api_key="k",
            gemini_model="gemini-1.5-pro",
            gemini_max_attempts=5,
        )

        generator = build_generator(settings)

        assert generator.max_attempts == 5
        assert generator.resolver.override == "gemini-1.5-pro"

    def test_blank_override_is_unset(self):
        settings = Settings(_env_file=None, gemini_api_key="k", gemini_model="  ")

        assert build_generator(settings).resolver.override is None
