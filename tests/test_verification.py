"""Tests for image verification."""

import httpx
import pytest

from relief_api.exceptions import VerificationError
from relief_api.services.verification import MOCK_REASON, ImageVerifier

IMAGE_URL = "https://images.test/flood.jpg"


def image_handler(request):
    return httpx.Response(200, content=b"\xff\xd8jpeg", headers={"content-type": "image/jpeg"})


@pytest.fixture
async def make_verifier(settings):
    verifiers = []

    def _make(gemini, handler=image_handler):
        verifier = ImageVerifier(
            gemini=gemini,
            settings=settings,
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        verifiers.append(verifier)
        return verifier

    yield _make

    for verifier in verifiers:
        await verifier.close()


async def test_mock_result_without_api_key(make_verifier, fake_gemini):
    result = await make_verifier(fake_gemini(configured=False)).verify(IMAGE_URL)

    assert result.verified is True
    assert result.reason == MOCK_REASON


async def test_authentic_image(make_verifier, fake_gemini):
    gemini = fake_gemini(answer="The image shows real flood damage.")

    result = await make_verifier(gemini).verify(IMAGE_URL)

    assert result.verified is True
    assert result.reason == "The image shows real flood damage."


async def test_manipulated_image(make_verifier, fake_gemini):
    gemini = fake_gemini(answer="This photo appears MANIPULATED around the water line.")

    result = await make_verifier(gemini).verify(IMAGE_URL)

    assert result.verified is False


async def test_download_failure_raises(make_verifier, fake_gemini):
    verifier = make_verifier(fake_gemini(answer="ok"), handler=lambda r: httpx.Response(404))

    with pytest.raises(VerificationError):
        await verifier.verify(IMAGE_URL)


async def test_model_failure_raises(make_verifier, fake_gemini):
    gemini = fake_gemini(error=RuntimeError("safety block"))

    with pytest.raises(VerificationError) as exc_info:
        await make_verifier(gemini).verify(IMAGE_URL)

    assert exc_info.value.status_code == 502
