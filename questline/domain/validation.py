"""Input sanitation for user and collaborator supplied text."""

from questline.core.config import Constants


def sanitize_text_input(value: str | None, max_length: int = Constants.MAX_TEXT_LENGTH) -> str:
    """Trim whitespace and cap length; non-strings become empty."""
    if not isinstance(value, str):
        return ""
    return value.strip()[:max_length]
