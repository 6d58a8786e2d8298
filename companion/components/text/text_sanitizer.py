"""
Cleanup of model output before it is shown to the user or spoken aloud.

The model sometimes leaks its own planning as bold headings
(``**Maintaining persona mode**``) and embeds photo directives
(``[CAPTION: ...]``). Both are stripped here, along with the remaining
markdown punctuation.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

CAPTION_PATTERN = re.compile(r"\[CAPTION:(.*?)\]", re.IGNORECASE | re.DOTALL)
_CAPTION_WITH_SPACE = re.compile(r"\s*\[CAPTION:.*?\]\s*", re.IGNORECASE | re.DOTALL)
_BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
_MARKDOWN_CHARS = re.compile(r"[*_#`>~]")
_WHITESPACE = re.compile(r"\s+")

DEFAULT_STRATEGY_KEYWORDS: tuple[str, ...] = (
    "flow",
    "thought",
    "strategy",
    "responding",
    "acknowledging",
    "internal",
    "action",
    "context",
    "persona",
    "mode",
    "gaspol",
    "escalated",
    "maintaining",
    "embracing",
    "transitioning",
    "focusing",
    "analyzing",
    "request",
)

DEFAULT_MAX_LENGTH = 1000


def extract_caption(text: str | None) -> str | None:
    """Return the description of the first caption directive, or None."""
    if not text:
        return None
    match = CAPTION_PATTERN.search(text)
    if not match:
        return None
    caption = match.group(1).strip()
    return caption or None


class TextSanitizer:
    """Strips directives, leaked strategy headings and markdown from replies."""

    def __init__(
        self,
        strategy_keywords: Iterable[str] = DEFAULT_STRATEGY_KEYWORDS,
        max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self.strategy_keywords = tuple(k.lower() for k in strategy_keywords if k)
        self.max_length = max_length

    def _is_strategy(self, content: str) -> bool:
        lowered = content.lower()
        return any(keyword in lowered for keyword in self.strategy_keywords)

    def _replace_bold(self, match: re.Match[str]) -> str:
        content = match.group(1)
        if self._is_strategy(content):
            return ""
        return content

    def clean(self, text: str | None) -> str:
        if not text:
            return ""

        displayable = CAPTION_PATTERN.sub("", text)
        displayable = _BOLD_PATTERN.sub(self._replace_bold, displayable)
        displayable = _MARKDOWN_CHARS.sub("", displayable)
        # Unwrapping bold spans or dropping markdown can splice a directive back
        # together; a space keeps the removal from splicing another one
        displayable = _CAPTION_WITH_SPACE.sub(" ", displayable)
        displayable = _WHITESPACE.sub(" ", displayable).strip()

        return displayable[: self.max_length].rstrip()


_default_sanitizer = TextSanitizer()


def clean_response_text(text: str | None) -> str:
    return _default_sanitizer.clean(text)
