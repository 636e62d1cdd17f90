"""Input sanitization utilities."""
import re
from typing import Optional

from globalpoll.core.constants import (
    MAX_COMMENT_LENGTH,
    MAX_CUSTOM_CATEGORY_LENGTH,
    MAX_QUESTION_LENGTH,
)
from globalpoll.core.exceptions import ValidationError

_TAG_RE = re.compile(r'<[^>]*>')
_WHITESPACE_RE = re.compile(r'\s+')


def sanitize_text(
    text: str,
    max_length: Optional[int] = None,
    reject_markup: bool = True,
    too_long_message: Optional[str] = None,
) -> str:
    """
    Strip HTML tags and normalize whitespace.

    Output is not HTML-escaped; the frontend escapes on render and double
    escaping would show entities literally.

    Args:
        text: The input text to sanitize
        max_length: Maximum length of the sanitized text
        reject_markup: Reject text that still contains ``<`` or ``>`` after
            tags were stripped (malformed or encoded tags)
        too_long_message: Message used when ``max_length`` is exceeded

    Returns:
        Sanitized text

    Raises:
        ValidationError: If text is not a string, too long, or contains markup
    """
    if not isinstance(text, str):
        raise ValidationError("Input must be a string")

    sanitized = _TAG_RE.sub('', text.strip())

    if reject_markup and ('<' in sanitized or '>' in sanitized):
        raise ValidationError("Input contains invalid HTML-like patterns")

    sanitized = _WHITESPACE_RE.sub(' ', sanitized).strip()

    if max_length is not None and len(sanitized) > max_length:
        raise ValidationError(
            too_long_message or f"Input exceeds maximum length of {max_length} characters"
        )

    return sanitized


def sanitize_question(question: str) -> str:
    """Sanitize a poll question; it must not be empty."""
    sanitized = sanitize_text(question, max_length=MAX_QUESTION_LENGTH)
    if not sanitized:
        raise ValidationError("Question is required")
    return sanitized


def sanitize_custom_category(label: Optional[str]) -> Optional[str]:
    """Sanitize a custom category label; blank labels become None."""
    if label is None:
        return None
    sanitized = sanitize_text(label, max_length=MAX_CUSTOM_CATEGORY_LENGTH)
    return sanitized or None


def sanitize_comment(content: str) -> str:
    """
    Sanitize comment content.

    The length ceiling applies here regardless of the tighter limit the
    client UI enforces.
    """
    sanitized = sanitize_text(
        content,
        max_length=MAX_COMMENT_LENGTH,
        reject_markup=False,
        too_long_message=f"Comment is too long (max {MAX_COMMENT_LENGTH} characters)",
    )
    if not sanitized:
        raise ValidationError("Comment cannot be empty")
    return sanitized
