from __future__ import annotations

import logging

from google import genai
from google.genai import types
from langfuse import observe

from companion.components.codec.binary_codec import as_bytes, encode_base64, encode_wav
from companion.components.genai.response_parts import first_inline_data
from companion.components.retry.retry_policy import RetryPolicy, with_retry
from companion.components.text.text_sanitizer import TextSanitizer
from companion.services.SpeechService.speech_service_interface import (
    SpeechServiceInterface,
)

DEFAULT_VOICE = "Kore"
DEFAULT_SAMPLE_RATE = 24000
SPEECH_TEMPLATE = "Say this: {text}"


class SpeechService(SpeechServiceInterface):
    """Text-to-speech through the Gemini TTS model, returned as WAV."""

    def __init__(
        self,
        client: genai.Client,
        sanitizer: TextSanitizer,
        model_name: str,
        retry_policy: RetryPolicy,
        logger: logging.Logger,
        default_voice: str = DEFAULT_VOICE,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
    ) -> None:
        self.client = client
        self.sanitizer = sanitizer
        self.model_name = model_name
        self.retry_policy = retry_policy
        self.logger = logger
        self.default_voice = default_voice
        self.sample_rate = sample_rate

    @observe()
    async def synthesize_speech(
        self, text: str, voice_name: str | None = None
    ) -> str | None:
        clean_text = self.sanitizer.clean(text)
        if not clean_text:
            return None

        voice = voice_name or self.default_voice
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
                )
            ),
        )
        contents = [
            types.Content(
                role="user",
                parts=[types.Part.from_text(text=SPEECH_TEMPLATE.format(text=clean_text))],
            )
        ]

        async def _synthesize() -> str | None:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=config,
            )
            audio = first_inline_data(response)
            if audio is None:
                self.logger.warning("Speech model returned no audio for voice %s", voice)
                return None

            pcm = as_bytes(audio.data)
            wav = encode_wav(pcm, self.sample_rate)
            self.logger.info(
                "Synthesized %d chars -> %d bytes WAV (voice=%s)",
                len(clean_text),
                len(wav),
                voice,
            )
            return encode_base64(wav)

        return await with_retry(_synthesize, self.retry_policy, logger=self.logger)
