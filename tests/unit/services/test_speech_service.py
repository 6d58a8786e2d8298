"""
Unit tests for SpeechService.
"""

import base64
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from companion.components.codec.binary_codec import decode_wav_header
from companion.components.retry.retry_policy import RetryPolicy
from companion.components.text.text_sanitizer import TextSanitizer
from companion.services.SpeechService.speech_service import SpeechService


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    return client


@pytest.fixture
def speech_service(client: MagicMock, logger: logging.Logger) -> SpeechService:
    return SpeechService(
        client=client,
        sanitizer=TextSanitizer(),
        model_name="tts-model",
        retry_policy=RetryPolicy(max_retries=1, base_delay=0.0),
        logger=logger,
    )


def _audio_part(pcm: bytes) -> types.Part:
    return types.Part.from_bytes(data=pcm, mime_type="audio/L16;rate=24000")


class TestSynthesizeSpeech:
    """Test cases for SpeechService.synthesize_speech."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "[CAPTION: cuma foto] **thought: x**"])
    async def test_nothing_to_say_makes_no_call(
        self, speech_service: SpeechService, client: MagicMock, text: str
    ) -> None:
        assert await speech_service.synthesize_speech(text) is None
        client.aio.models.generate_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_returns_base64_wav_at_24khz(
        self, speech_service: SpeechService, client: MagicMock, make_response
    ) -> None:
        pcm = b"\x01\x00\x02\x00" * 10
        client.aio.models.generate_content.return_value = make_response(
            [_audio_part(pcm)]
        )

        audio = await speech_service.synthesize_speech("Halo semuanya")

        wav = base64.b64decode(audio)
        header = decode_wav_header(wav)
        assert header.sample_rate == 24000
        assert header.channels == 1
        assert header.bits_per_sample == 16
        assert header.data_length == len(pcm)
        assert wav[44:] == pcm

    @pytest.mark.asyncio
    async def test_sends_sanitized_text_and_voice(
        self, speech_service: SpeechService, client: MagicMock, make_response
    ) -> None:
        client.aio.models.generate_content.return_value = make_response(
            [_audio_part(b"\x00\x00")]
        )

        await speech_service.synthesize_speech("**Halo** [CAPTION: foto] dunia", "Puck")

        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "tts-model"
        assert kwargs["contents"][0].parts[0].text == "Say this: Halo dunia"
        config = kwargs["config"]
        assert config.response_modalities == ["AUDIO"]
        voice = config.speech_config.voice_config.prebuilt_voice_config.voice_name
        assert voice == "Puck"

    @pytest.mark.asyncio
    async def test_default_voice_is_kore(
        self, speech_service: SpeechService, client: MagicMock, make_response
    ) -> None:
        client.aio.models.generate_content.return_value = make_response(
            [_audio_part(b"\x00\x00")]
        )

        await speech_service.synthesize_speech("Halo")

        config = client.aio.models.generate_content.call_args.kwargs["config"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"

    @pytest.mark.asyncio
    async def test_no_audio_returns_none(
        self, speech_service: SpeechService, client: MagicMock, make_response
    ) -> None:
        client.aio.models.generate_content.return_value = make_response(
            [types.Part.from_text(text="no audio here")]
        )

        assert await speech_service.synthesize_speech("Halo") is None
