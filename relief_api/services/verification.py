"""
Image Verification Service.

Asks Gemini whether a disaster image shows signs of manipulation. Only the
result contract ({verified, reason}) matters to the rest of the API.
"""

import logging
from typing import Optional

import httpx

from ..clients.gemini_client import GeminiClient, get_gemini_client
from ..config import Settings, get_settings
from ..exceptions import VerificationError
from ..models import ImageVerificationResult

logger = logging.getLogger(__name__)

VERIFICATION_PROMPT = (
    "Analyze this image for signs of manipulation or to verify if it depicts a real "
    "disaster context. Provide a summary of your findings."
)

MOCK_REASON = "Mock verification: Cannot verify image without API key."


class ImageVerifier:
    """Verifies disaster images with Gemini vision."""

    def __init__(
        self,
        gemini: Optional[GeminiClient] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self._gemini = gemini or get_gemini_client()
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._settings.scrape_timeout_seconds,
                follow_redirects=True,
            )
        return self._client

    async def verify(self, image_url: str) -> ImageVerificationResult:
        """
        Verify an image.

        Args:
            image_url: Publicly reachable image URL

        Returns:
            ImageVerificationResult; verified is False when the model reports
            the image as manipulated

        Raises:
            VerificationError: Download or model call failed
        """
        if not self._gemini.is_configured:
            logger.warning("GEMINI_API_KEY is not set. Returning mock image verification.")
            return ImageVerificationResult(verified=True, reason=MOCK_REASON)

        try:
            client = await self._get_client()
            response = await client.get(image_url)
            response.raise_for_status()
            mime_type = response.headers.get("content-type", "image/jpeg").split(";")[0]

            summary = await self._gemini.describe_image(
                VERIFICATION_PROMPT,
                response.content,
                mime_type,
            )
        except Exception as e:
            logger.error(f"Error with Gemini Vision API: {e}")
            raise VerificationError("Failed to verify image using Gemini API") from e

        return ImageVerificationResult(
            verified="manipulated" not in summary.lower(),
            reason=summary,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


# Singleton instance
_verifier_instance: Optional[ImageVerifier] = None


def get_image_verifier() -> ImageVerifier:
    """Get the singleton image verifier instance."""
    global _verifier_instance
    if _verifier_instance is None:
        _verifier_instance = ImageVerifier()
    return _verifier_instance
