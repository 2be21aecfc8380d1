"""
Urgency Classification.

Tags social reports as High or Normal priority by keyword match.
"""

import logging
from typing import Optional, Sequence

from ..models import Priority

logger = logging.getLogger(__name__)

# Checked in this order; the first hit decides
URGENT_KEYWORDS = (
    "urgent",
    "sos",
    "help",
    "emergency",
    "asap",
)


class UrgencyClassifier:
    """
    Keyword-based priority tagging.

    A report is High priority when any keyword appears as a substring of the
    lower-cased text, Normal otherwise. Pure and deterministic.
    """

    def __init__(self, keywords: Sequence[str] = URGENT_KEYWORDS):
        self._keywords = tuple(k.lower() for k in keywords)

    @property
    def keywords(self) -> tuple:
        return self._keywords

    def matched_keyword(self, text: str) -> Optional[str]:
        """Return the first keyword found in the text, if any."""
        text_lower = (text or "").lower()

        for keyword in self._keywords:
            if keyword in text_lower:
                return keyword

        return None

    def classify(self, text: str) -> Priority:
        keyword = self.matched_keyword(text)
        if keyword:
            logger.debug(f"Classified as {Priority.HIGH.value} (keyword: {keyword})")
            return Priority.HIGH
        return Priority.NORMAL


# Singleton instance
_classifier_instance = None


def get_classifier() -> UrgencyClassifier:
    """Get the singleton classifier instance."""
    global _classifier_instance
    if _classifier_instance is None:
        _classifier_instance = UrgencyClassifier()
    return _classifier_instance
