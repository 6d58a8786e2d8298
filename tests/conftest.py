"""
Pytest configuration and shared fixtures.

Langfuse tracing is disabled before any module imports it so that the
``@observe()`` decorated services never try to export spans during tests.
"""

import os
import logging
from collections.abc import Callable
from typing import Any

import pytest
from google.genai import types

# This must be set BEFORE langfuse is imported
os.environ["LANGFUSE_TRACING_ENABLED"] = "false"

_langfuse_logger = logging.getLogger("langfuse")
_langfuse_logger.setLevel(logging.CRITICAL)
_langfuse_logger.propagate = False

from companion.entities.agent import AgentConfig  # noqa: E402

# 1x1 transparent PNG
_PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c6360000000020001e221bc330000000049454e44ae426082"
)
_PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4nGNgAAAAAgAB4iG8MwAAAABJRU5ErkJggg=="
)


def _make_response(
    parts: list[types.Part] | None = None,
    finish_reason: Any = types.FinishReason.STOP,
) -> types.GenerateContentResponse:
    content = types.Content(role="model", parts=parts) if parts is not None else None
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=content, finish_reason=finish_reason)]
    )


@pytest.fixture
def make_response() -> Callable[..., types.GenerateContentResponse]:
    """Factory for real GenerateContentResponse objects with one candidate."""
    return _make_response


@pytest.fixture
def png_bytes() -> bytes:
    return _PNG_BYTES


@pytest.fixture
def png_data_uri() -> str:
    return _PNG_DATA_URI


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("CompanionTest")


@pytest.fixture
def agent_config() -> AgentConfig:
    return AgentConfig(
        name="Nadia",
        personality="Ceria dan perhatian",
        voice="Puck",
        profile_pic=_PNG_DATA_URI,
        background="https://example.com/bg.jpg",
        blur=12,
        transparency=40,
    )
