"""Tests for location extraction."""

import pytest

from relief_api.exceptions import ResolutionError
from relief_api.services.location import UNKNOWN_LOCATION, LocationResolver


async def test_returns_mock_location_without_api_key(settings, fake_gemini):
    gemini = fake_gemini(configured=False)
    resolver = LocationResolver(gemini=gemini, settings=settings)

    assert await resolver.resolve("Flooding somewhere") == "Manhattan, NYC"
    assert gemini.prompts == []


async def test_returns_trimmed_answer(settings, fake_gemini):
    gemini = fake_gemini(answer="  Boston, MA\n")
    resolver = LocationResolver(gemini=gemini, settings=settings)

    assert await resolver.resolve("Flood in Boston") == "Boston, MA"
    assert 'Description: "Flood in Boston"' in gemini.prompts[0]


async def test_passes_unknown_through(settings, fake_gemini):
    resolver = LocationResolver(gemini=fake_gemini(answer="Unknown"), settings=settings)

    assert await resolver.resolve("It is raining") == UNKNOWN_LOCATION


async def test_empty_answer_is_unknown(settings, fake_gemini):
    resolver = LocationResolver(gemini=fake_gemini(answer="   "), settings=settings)

    assert await resolver.resolve("It is raining") == UNKNOWN_LOCATION


async def test_call_failure_raises_resolution_error(settings, fake_gemini):
    gemini = fake_gemini(error=RuntimeError("quota exceeded"))
    resolver = LocationResolver(gemini=gemini, settings=settings)

    with pytest.raises(ResolutionError) as exc_info:
        await resolver.resolve("Flood in Boston")

    assert exc_info.value.status_code == 502
    assert len(gemini.prompts) == 1
