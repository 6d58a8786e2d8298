"""
Process-wide components: configuration, logging and the remote clients.

Importing this module loads ``.env`` and, outside of tests, turns on
OpenTelemetry instrumentation of the Gen AI SDK so Langfuse receives spans for
every model call.
"""

import os
import sys
from pathlib import Path
from threading import Lock
from typing import Any, TypeVar, cast

import httpx
from dotenv import load_dotenv
from google import genai
from openinference.instrumentation.google_genai import GoogleGenAIInstrumentor

from companion.components.configuration.configuration import Configuration
from companion.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from companion.components.http.image_fetcher import ImageFetcher
from companion.components.logger.logger import Logger
from companion.components.logger.logger_interface import LoggerInterface

SUPPORTED_ENVIRONMENTS = frozenset({"development", "staging", "production"})
_TRUTHY = {"true", "1", "yes"}

T = TypeVar("T")

load_dotenv()


def _env(name: str) -> str:
    return os.getenv(name, "").strip()


def _is_test_environment() -> bool:
    """True under pytest or when TESTING is set to a truthy value."""
    running_pytest = any("pytest" in arg for arg in sys.argv)
    return running_pytest or _env("TESTING").lower() in _TRUTHY


def _validate_otel_env_vars() -> None:
    """
    Make sure spans have somewhere to go before instrumenting.

    Either Langfuse is fully configured (public key, secret key and base URL),
    or an OTLP endpoint is given together with its auth headers.

    Raises:
        RuntimeError: If neither setup is complete.
    """
    langfuse_ready = all(
        _env(name)
        for name in ("LANGFUSE_PUBLIC_KEY", "LANGFUSE_SECRET_KEY", "LANGFUSE_BASE_URL")
    )
    if langfuse_ready:
        return

    if not _env("OTEL_EXPORTER_OTLP_ENDPOINT"):
        raise RuntimeError(
            "OTEL_EXPORTER_OTLP_ENDPOINT environment variable is not set or is empty. "
            "Set it to the OTLP endpoint URL, or configure LANGFUSE_PUBLIC_KEY, "
            "LANGFUSE_SECRET_KEY and LANGFUSE_BASE_URL instead."
        )

    if not _env("OTEL_EXPORTER_OTLP_HEADERS"):
        raise RuntimeError(
            "OTEL_EXPORTER_OTLP_HEADERS environment variable is not set or is empty "
            "and the Langfuse settings (LANGFUSE_PUBLIC_KEY, LANGFUSE_SECRET_KEY, "
            "LANGFUSE_BASE_URL) are incomplete. Provide the headers, e.g. "
            "'Authorization=Basic <base64_credentials>', or the Langfuse settings."
        )


def _setup_tracing() -> None:
    _validate_otel_env_vars()
    GoogleGenAIInstrumentor().instrument()


if not _is_test_environment():
    _setup_tracing()


def _create_genai_client() -> genai.Client:
    """
    Gemini Developer API when an API key is present, Vertex AI otherwise
    (VERTEX_PROJECT_ID / VERTEX_LOCATION).
    """
    api_key = _env("GEMINI_API_KEY") or _env("GOOGLE_API_KEY")
    if api_key:
        return genai.Client(api_key=api_key)

    return genai.Client(
        vertexai=True,
        project=_env("VERTEX_PROJECT_ID") or None,
        location=_env("VERTEX_LOCATION") or "global",
    )


class ComponentsMeta(type):
    """One Components instance per environment name."""

    _registry: dict[str, "Components"] = {}
    _registry_lock: Lock = Lock()

    def __call__(cls, *args, **kwargs):
        env = kwargs.get("env", args[0] if args else None)
        if env is None:
            raise ValueError("Environment must be provided")

        with cls._registry_lock:
            instance = cls._registry.get(str(env))
            if instance is None:
                instance = super().__call__(*args, **kwargs)
                cls._registry[str(env)] = instance
        return instance


class Components(metaclass=ComponentsMeta):
    def __init__(self, env: str, config_path: str) -> None:
        if env not in SUPPORTED_ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {env}")

        self.__env = env
        self.__config_path = str(Path(__file__).resolve().parents[2] / config_path)
        self.__components: dict[type[Any], Any] = {}
        self.__register_components()

    def __register_components(self) -> None:
        configuration = Configuration(self.__env, self.__config_path)
        logger = Logger(
            log_format=configuration.get_configuration("LOG_FORMAT", str),
            log_level=configuration.get_configuration("LOG_LEVEL", str, default="INFO"),
        )

        timeout = configuration.get_configuration(
            "IMAGE_FETCH_TIMEOUT", float, default=10.0
        )
        http_client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)

        self.__components[ConfigurationInterface] = configuration
        self.__components[LoggerInterface] = logger
        self.__components[genai.Client] = _create_genai_client()
        self.__components[ImageFetcher] = ImageFetcher(
            http_client=http_client,
            timeout=timeout,
            logger=logger.get_logger("ImageFetcher"),
        )

        logger.get_logger("Components").info(
            "Components ready for %s (%d registered)",
            self.__env,
            len(self.__components),
        )

    def get_component(self, component_name: type[T]) -> T:
        try:
            return cast(T, self.__components[component_name])
        except KeyError:
            raise ValueError(f"Component {component_name} not found") from None

    async def aclose(self) -> None:
        await self.get_component(ImageFetcher).aclose()
