import pytest

from relief_api.models import Priority
from relief_api.services.urgency import URGENT_KEYWORDS, UrgencyClassifier


@pytest.fixture
def classifier():
    return UrgencyClassifier()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("We need URGENT medical assistance", Priority.HIGH),
        ("Need HELP now", Priority.HIGH),
        ("Need HELP asap", Priority.HIGH),
        ("All calm here", Priority.NORMAL),
        ("S.O.S", Priority.NORMAL),
        ("SOS trapped on roof", Priority.HIGH),
        ("Emergency services arrived", Priority.HIGH),
        ("", Priority.NORMAL),
    ],
)
def test_classify(classifier, text, expected):
    assert classifier.classify(text) == expected


def test_substring_match_counts(classifier):
    # "helpful" contains "help"
    assert classifier.classify("Volunteers were helpful") == Priority.HIGH


def test_first_keyword_in_list_order_wins(classifier):
    assert classifier.matched_keyword("asap, please help") == "help"


def test_default_keywords():
    assert URGENT_KEYWORDS == ("urgent", "sos", "help", "emergency", "asap")


def test_custom_keywords_are_lowercased():
    classifier = UrgencyClassifier(keywords=["MAYDAY"])

    assert classifier.keywords == ("mayday",)
    assert classifier.classify("mayday mayday") == Priority.HIGH
    assert classifier.classify("help") == Priority.NORMAL
