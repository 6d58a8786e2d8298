from abc import ABC, abstractmethod


class SpeechServiceInterface(ABC):
    @abstractmethod
    async def synthesize_speech(self, text: str, voice_name: str | None = None) -> str | None:
        """
        Speak ``text`` and return a base64 encoded WAV file.

        Returns None when there is nothing to say or the model sent no audio.
        """
