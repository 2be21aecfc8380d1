"""
Location Resolver.

Extracts a place name from a free-text disaster description with a single
Gemini call. There is no retry and no local heuristic: the model either
names a place, answers "Unknown", or the call fails.
"""

import logging
from typing import Optional

from ..clients.gemini_client import GeminiClient, get_gemini_client
from ..config import Settings, get_settings
from ..exceptions import ResolutionError

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown"

EXTRACTION_PROMPT = (
    'Extract only the location name (e.g., "City, State" or "Neighborhood, City") '
    "from the following disaster description. If no specific location is mentioned, "
    'return "Unknown". Description: "{description}"'
)


class LocationResolver:
    """Resolves free text to a location name via Gemini."""

    def __init__(
        self,
        gemini: Optional[GeminiClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._gemini = gemini or get_gemini_client()

    async def resolve(self, text: str) -> str:
        """
        Extract the location name mentioned in a description.

        Args:
            text: Free-text disaster description

        Returns:
            The trimmed location name, or "Unknown" if none is mentioned.
            Without a configured API key the mock location is returned.

        Raises:
            ResolutionError: If the Gemini call itself fails
        """
        if not self._gemini.is_configured:
            logger.warning("GEMINI_API_KEY is not set. Returning mock location.")
            return self._settings.mock_location

        prompt = EXTRACTION_PROMPT.format(description=text)

        try:
            answer = await self._gemini.generate_text(prompt)
        except Exception as e:
            logger.error(f"Error with Gemini API: {e}")
            raise ResolutionError("Failed to extract location using Gemini API") from e

        location = (answer or "").strip()
        if not location:
            return UNKNOWN_LOCATION

        logger.info(f"Extracted location: {location}")
        return location


# Singleton instance
_resolver_instance: Optional[LocationResolver] = None


def get_location_resolver() -> LocationResolver:
    """Get the singleton location resolver instance."""
    global _resolver_instance
    if _resolver_instance is None:
        _resolver_instance = LocationResolver()
    return _resolver_instance
