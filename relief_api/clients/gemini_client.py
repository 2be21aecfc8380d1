"""
Gemini Client.

Thin async wrapper around google-generativeai used for location extraction
(text) and image verification (vision). Models are created lazily so the
service starts without credentials; callers check is_configured and fall back
to mock answers when no key is set.
"""

import logging
from typing import Dict, Optional

import google.generativeai as genai

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class GeminiClient:
    """Lazily configured Gemini text/vision client."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._models: Dict[str, genai.GenerativeModel] = {}
        self._configured = False

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.gemini_api_key)

    def _get_model(self, model_name: str) -> genai.GenerativeModel:
        """Get or create a generative model."""
        if not self._configured:
            genai.configure(api_key=self._settings.gemini_api_key)
            self._configured = True

        if model_name not in self._models:
            self._models[model_name] = genai.GenerativeModel(model_name)
            logger.info(f"Gemini model initialized: {model_name}")
        return self._models[model_name]

    async def generate_text(self, prompt: str) -> str:
        """Run a text-only prompt and return the answer text."""
        model = self._get_model(self._settings.gemini_text_model)
        response = await model.generate_content_async(prompt)
        return response.text

    async def describe_image(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        """Run a prompt against an inline image and return the answer text."""
        model = self._get_model(self._settings.gemini_vision_model)
        response = await model.generate_content_async(
            [prompt, {"mime_type": mime_type, "data": image_data}]
        )
        return response.text


# Singleton instance
_gemini_instance: Optional[GeminiClient] = None


def get_gemini_client() -> GeminiClient:
    """Get the singleton Gemini client instance."""
    global _gemini_instance
    if _gemini_instance is None:
        _gemini_instance = GeminiClient()
    return _gemini_instance
