from google import genai
from google.genai import types

from companion.bootstrap.components import Components
from companion.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from companion.components.http.image_fetcher import ImageFetcher
from companion.components.logger.logger_interface import LoggerInterface
from companion.components.retry.retry_policy import RetryPolicy
from companion.components.text.text_sanitizer import (
    DEFAULT_MAX_LENGTH,
    DEFAULT_STRATEGY_KEYWORDS,
    TextSanitizer,
)
from companion.entities.agent import AgentConfig
from companion.services.AgentService.agent_service import AgentService
from companion.services.AgentService.agent_service_interface import (
    AgentServiceInterface,
)
from companion.services.ConversationService.conversation_service import (
    ConversationService,
)
from companion.services.ConversationService.conversation_service_interface import (
    ConversationServiceInterface,
)
from companion.services.PhotoService.photo_service import PhotoService
from companion.services.PhotoService.photo_service_interface import (
    PhotoServiceInterface,
)
from companion.services.PromptService.prompt_service import (
    DEFAULT_TIMEZONE,
    PromptService,
)
from companion.services.PromptService.prompt_service_interface import (
    PromptServiceInterface,
)
from companion.services.ReferenceService.reference_service import ReferenceService
from companion.services.ReferenceService.reference_service_interface import (
    ReferenceServiceInterface,
)
from companion.services.RequestService.request_service import (
    ReferenceFraming,
    RequestService,
)
from companion.services.RequestService.request_service_interface import (
    RequestServiceInterface,
)
from companion.services.SpeechService.speech_service import (
    DEFAULT_SAMPLE_RATE,
    DEFAULT_VOICE,
    SpeechService,
)
from companion.services.SpeechService.speech_service_interface import (
    SpeechServiceInterface,
)

DEFAULT_TEXT_MODEL = "gemini-3-flash-preview"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_SPEECH_MODEL = "gemini-2.5-flash-preview-tts"

DEFAULT_SAFETY_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_CIVIC_INTEGRITY",
]
DEFAULT_SAFETY_THRESHOLD = "BLOCK_NONE"

DEFAULT_BACKGROUND_OPTIONS = [
    "https://images.unsplash.com/photo-1550684848-fac1c5b4e853?q=80&w=600",
    "https://images.unsplash.com/photo-1513519245088-0e12902e5a38?q=80&w=600",
    "https://images.unsplash.com/photo-1557683316-973673baf926?q=80&w=600",
    "https://images.unsplash.com/photo-1501691223387-dd0500403074?q=80&w=600",
]


def get_safety_settings(components: Components) -> list[types.SafetySetting]:
    configuration = components.get_component(ConfigurationInterface)
    categories = configuration.get_configuration(
        "SAFETY_CATEGORIES", list[str], default=DEFAULT_SAFETY_CATEGORIES
    )
    threshold = configuration.get_configuration(
        "SAFETY_THRESHOLD", str, default=DEFAULT_SAFETY_THRESHOLD
    )
    return [
        types.SafetySetting(
            category=types.HarmCategory(category),
            threshold=types.HarmBlockThreshold(threshold),
        )
        for category in categories
    ]


def get_retry_policy(components: Components) -> RetryPolicy:
    configuration = components.get_component(ConfigurationInterface)
    return RetryPolicy(
        max_retries=configuration.get_configuration("RETRY_MAX_RETRIES", int, default=1),
        base_delay=configuration.get_configuration("RETRY_BASE_DELAY", float, default=2.0),
        jitter=configuration.get_configuration("RETRY_JITTER", float, default=0.0),
    )


def get_text_sanitizer(components: Components) -> TextSanitizer:
    configuration = components.get_component(ConfigurationInterface)
    keywords = configuration.get_configuration(
        "STRATEGY_KEYWORDS", list[str], default=list(DEFAULT_STRATEGY_KEYWORDS)
    )
    max_length = configuration.get_configuration(
        "MAX_DISPLAY_LENGTH", int, default=DEFAULT_MAX_LENGTH
    )
    return TextSanitizer(strategy_keywords=keywords, max_length=max_length)


def get_agent_config(components: Components) -> AgentConfig:
    """
    Build the agent persona from configuration.

    The settings screen normally owns this snapshot; this is the fallback used
    by the CLI.
    """
    configuration = components.get_component(ConfigurationInterface)

    background_options = configuration.get_configuration(
        "BACKGROUND_OPTIONS", list[str], default=DEFAULT_BACKGROUND_OPTIONS
    )
    default_voice = configuration.get_configuration(
        "DEFAULT_VOICE", str, default=DEFAULT_VOICE
    )
    supported_voices = configuration.get_configuration(
        "SUPPORTED_VOICES", list[str], default=[DEFAULT_VOICE, "Puck"]
    )

    voice = configuration.get_configuration("AGENT_VOICE", str, default=default_voice)
    if voice not in supported_voices:
        raise ValueError(
            f"AGENT_VOICE {voice} is not one of the supported voices: {supported_voices}"
        )

    return AgentConfig(
        name=configuration.get_configuration("AGENT_NAME", str, default="Agent"),
        personality=configuration.get_configuration(
            "AGENT_PERSONALITY", str, default="Ramah, ceria, dan perhatian."
        ),
        voice=voice,
        profile_pic=configuration.get_configuration("AGENT_PROFILE_PIC", str),
        background=configuration.get_configuration(
            "AGENT_BACKGROUND", str, default=background_options[0]
        ),
        blur=configuration.get_configuration("AGENT_BLUR", int, default=12),
        transparency=configuration.get_configuration(
            "AGENT_TRANSPARENCY", int, default=40
        ),
    )


def get_prompt_service(components: Components) -> PromptServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    return PromptService(
        logger=components.get_component(LoggerInterface).get_logger("PromptService"),
        timezone=configuration.get_configuration(
            "TIMEZONE", str, default=DEFAULT_TIMEZONE
        ),
    )


def get_reference_service(components: Components) -> ReferenceServiceInterface:
    return ReferenceService(
        image_fetcher=components.get_component(ImageFetcher),
        logger=components.get_component(LoggerInterface).get_logger("ReferenceService"),
    )


def get_request_service(components: Components) -> RequestServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    framing = configuration.get_configuration(
        "REFERENCE_FRAMING", str, default=ReferenceFraming.LABELED.value
    )
    return RequestService(
        reference_service=get_reference_service(components),
        logger=components.get_component(LoggerInterface).get_logger("RequestService"),
        framing=ReferenceFraming(framing),
    )


def get_conversation_service(components: Components) -> ConversationServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    return ConversationService(
        client=components.get_component(genai.Client),
        prompt_service=get_prompt_service(components),
        request_service=get_request_service(components),
        model_name=configuration.get_configuration(
            "TEXT_MODEL_NAME", str, default=DEFAULT_TEXT_MODEL
        ),
        temperature=configuration.get_configuration(
            "LLM_TEMPERATURE", float, default=0.9
        ),
        safety_settings=get_safety_settings(components),
        retry_policy=get_retry_policy(components),
        logger=components.get_component(LoggerInterface).get_logger(
            "ConversationService"
        ),
    )


def get_photo_service(components: Components) -> PhotoServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    return PhotoService(
        client=components.get_component(genai.Client),
        reference_service=get_reference_service(components),
        text_model_name=configuration.get_configuration(
            "TEXT_MODEL_NAME", str, default=DEFAULT_TEXT_MODEL
        ),
        image_model_name=configuration.get_configuration(
            "IMAGE_MODEL_NAME", str, default=DEFAULT_IMAGE_MODEL
        ),
        safety_settings=get_safety_settings(components),
        retry_policy=get_retry_policy(components),
        logger=components.get_component(LoggerInterface).get_logger("PhotoService"),
    )


def get_speech_service(components: Components) -> SpeechServiceInterface:
    configuration = components.get_component(ConfigurationInterface)
    return SpeechService(
        client=components.get_component(genai.Client),
        sanitizer=get_text_sanitizer(components),
        model_name=configuration.get_configuration(
            "SPEECH_MODEL_NAME", str, default=DEFAULT_SPEECH_MODEL
        ),
        retry_policy=get_retry_policy(components),
        logger=components.get_component(LoggerInterface).get_logger("SpeechService"),
        default_voice=configuration.get_configuration(
            "DEFAULT_VOICE", str, default=DEFAULT_VOICE
        ),
        sample_rate=configuration.get_configuration(
            "SPEECH_SAMPLE_RATE", int, default=DEFAULT_SAMPLE_RATE
        ),
    )


def get_agent_service(components: Components) -> AgentServiceInterface:
    return AgentService(
        conversation_service=get_conversation_service(components),
        photo_service=get_photo_service(components),
        speech_service=get_speech_service(components),
        sanitizer=get_text_sanitizer(components),
        logger=components.get_component(LoggerInterface).get_logger("AgentService"),
    )
