"""Helpers for reading google-genai GenerateContentResponse objects."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from google.genai import types

SAFETY_FINISH_REASONS = frozenset({"SAFETY", "IMAGE_SAFETY"})


def finish_reason(response: Any) -> str | None:
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return None
    return str(getattr(reason, "value", reason))


def is_safety_stop(response: Any) -> bool:
    return finish_reason(response) in SAFETY_FINISH_REASONS


def iter_parts(response: Any) -> Iterator[types.Part]:
    """Yield the content parts of the first candidate, in order."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        yield part


def first_inline_data(response: Any) -> types.Blob | None:
    for part in iter_parts(response):
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return inline_data
    return None
