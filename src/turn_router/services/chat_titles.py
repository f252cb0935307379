"""Chat title derivation for turn_router."""

from turn_router.models.chat import DEFAULT_CHAT_TITLE, ChatDTO

__all__ = [
    "derive_title",
    "needs_title",
]


def derive_title(
    message: str,
    max_words: int = 6,
    max_length: int = 50,
    fallback: str = DEFAULT_CHAT_TITLE,
) -> str:
    """Derive a chat title from the first user message.

    Takes the first ``max_words`` space-separated words. Titles longer
    than ``max_length`` are cut and suffixed with "...".

    Args:
        message: User message text
        max_words: Number of leading words to keep
        max_length: Maximum title length before truncation
        fallback: Title for empty messages

    Returns:
        Chat title
    """
    title = " ".join(message.split(" ")[:max_words]).strip()
    if len(title) > max_length:
        title = title[:max_length] + "..."
    return title or fallback


def needs_title(
    chat: ChatDTO,
    prior_message_count: int,
    default_title: str = DEFAULT_CHAT_TITLE,
) -> bool:
    """Check if a chat should get a derived title this turn."""
    return prior_message_count == 0 or chat.title == default_title
