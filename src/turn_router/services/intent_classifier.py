"""Keyword-based intent classification for turn_router.

This module decides whether a user message asks for an image and, if
so, extracts the prompt for the image model. Detection is a plain
substring scan, so false positives ("a picture of health") are accepted.
"""

import re

from turn_router.interfaces.classifier import IntentClassifierInterface
from turn_router.logging import get_logger
from turn_router.models.turn import IntentResult

__all__ = [
    "IMAGE_TRIGGER_PHRASES",
    "KeywordIntentClassifier",
]

logger = get_logger(__name__)

IMAGE_TRIGGER_PHRASES: tuple[str, ...] = (
    "generate an image",
    "create an image",
    "make an image",
    "draw an image",
    "create a picture",
    "generate a picture",
    "make a picture",
    "draw a picture",
    "picture of",
    "image of",
    "photo of",
    "drawing of",
    "sketch of",
    "painting of",
    "illustration of",
    "create art",
    "generate art",
    "make art",
    "draw something",
    "create an illustration",
    "generate an illustration",
    "make an illustration",
    "can you draw",
    "can you create an image",
    "can you generate an image",
    "show me an image",
    "i want an image",
    "i need an image",
    "paint an image",
    "sketch an image",
    "design an image",
    "make a new image",
    "now make",
    "create another image",
    "generate another",
    "draw me",
    "show me a picture",
    "different building",
)

# Ordered: first match wins
_PROMPT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"(?:generate an image of|create an image of|make an image of|draw an image of"
        r"|create a picture of|generate a picture of|make a picture of|draw a picture of)"
        r"\s*(.+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:picture of|image of|photo of|drawing of|sketch of|painting of|illustration of)"
        r"\s*(.+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:generate an image|create an image|make an image|draw an image"
        r"|create a picture|generate a picture|make a picture|draw a picture):\s*(.+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:can you (?:draw|create|generate|make))"
        r"(?:\s+(?:an?\s+)?(?:image|picture|illustration))?\s+(?:of\s+)?(.+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:i want an image of|i need an image of|show me an image of|show me a picture of)"
        r"\s*(.+)",
        re.IGNORECASE,
    ),
)

# Longest first so "can you create an image" wins over "can you draw"-style prefixes
_LEADING_TRIGGER = re.compile(
    r"^(?:"
    + "|".join(re.escape(p) for p in sorted(IMAGE_TRIGGER_PHRASES, key=len, reverse=True))
    + r")[:\s]*",
    re.IGNORECASE,
)


class KeywordIntentClassifier(IntentClassifierInterface):
    """Intent classifier using a fixed list of trigger phrases.

    One strategy behind IntentClassifierInterface; a model-based
    classifier can replace it without touching the orchestrator.

    Example:
        classifier = KeywordIntentClassifier()
        result = classifier.classify("Can you draw a red bicycle?")
        # result.is_image_request is True, result.image_prompt == "a red bicycle?"
    """

    def __init__(self, trigger_phrases: tuple[str, ...] = IMAGE_TRIGGER_PHRASES) -> None:
        self._triggers = tuple(p.lower() for p in trigger_phrases)

    def classify(self, message_text: str) -> IntentResult:
        """Classify a message and extract the image prompt."""
        matched = self.find_trigger(message_text)
        if matched is None:
            return IntentResult(is_image_request=False, image_prompt=message_text.strip())

        prompt = self.extract_prompt(message_text)
        logger.debug("image_intent_detected", trigger=matched, prompt_length=len(prompt))
        return IntentResult(is_image_request=True, image_prompt=prompt)

    def find_trigger(self, message_text: str) -> str | None:
        """Return the first trigger phrase found in the message, if any."""
        lower = message_text.lower()
        return next((t for t in self._triggers if t in lower), None)

    @staticmethod
    def extract_prompt(message_text: str) -> str:
        """Extract the image description from a message.

        Tries the phrase-anchored patterns in order. Falls back to the
        message with any leading trigger phrase removed, and finally to
        the message itself.
        """
        for pattern in _PROMPT_PATTERNS:
            match = pattern.search(message_text)
            if match and match.group(1).strip():
                return match.group(1).strip()

        cleaned = _LEADING_TRIGGER.sub("", message_text.strip(), count=1).strip()
        return cleaned or message_text
