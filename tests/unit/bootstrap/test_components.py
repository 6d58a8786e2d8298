from unittest.mock import patch

import pytest

from companion.bootstrap import components


@pytest.fixture
def clean_tracing_env(monkeypatch):
    for name in (
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "OTEL_EXPORTER_OTLP_HEADERS",
        "LANGFUSE_PUBLIC_KEY",
        "LANGFUSE_SECRET_KEY",
        "LANGFUSE_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
class TestComponentsOTELEnvVarsValidation:
    """Test suite for OpenTelemetry/Langfuse environment variables validation."""

    def test_otel_validation_raises_error_when_endpoint_not_set(self, clean_tracing_env):
        with pytest.raises(RuntimeError) as exc_info:
            components._validate_otel_env_vars()

        assert "OTEL_EXPORTER_OTLP_ENDPOINT" in str(exc_info.value)
        assert "not set or is empty" in str(exc_info.value)

    def test_otel_validation_raises_error_when_endpoint_is_blank(self, clean_tracing_env):
        clean_tracing_env.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "   ")

        with pytest.raises(RuntimeError) as exc_info:
            components._validate_otel_env_vars()

        assert "OTEL_EXPORTER_OTLP_ENDPOINT" in str(exc_info.value)

    def test_otel_validation_raises_error_when_headers_not_set(self, clean_tracing_env):
        clean_tracing_env.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "https://example.com/otlp")

        with pytest.raises(RuntimeError) as exc_info:
            components._validate_otel_env_vars()

        assert "OTEL_EXPORTER_OTLP_HEADERS" in str(exc_info.value)
        assert "not set or is empty" in str(exc_info.value)

    def test_otel_validation_succeeds_with_direct_headers(self, clean_tracing_env):
        clean_tracing_env.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "https://example.com/otlp")
        clean_tracing_env.setenv("OTEL_EXPORTER_OTLP_HEADERS", "Authorization=Basic dGVzdA==")

        components._validate_otel_env_vars()

    def test_otel_validation_skipped_with_full_langfuse_config(self, clean_tracing_env):
        """Langfuse keys plus base URL need no OTLP variables at all."""
        clean_tracing_env.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
        clean_tracing_env.setenv("LANGFUSE_SECRET_KEY", "sk-test")
        clean_tracing_env.setenv("LANGFUSE_BASE_URL", "https://cloud.langfuse.com")

        components._validate_otel_env_vars()

    def test_partial_langfuse_config_still_requires_headers(self, clean_tracing_env):
        clean_tracing_env.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "https://example.com/otlp")
        clean_tracing_env.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
        clean_tracing_env.setenv("LANGFUSE_SECRET_KEY", "sk-test")

        with pytest.raises(RuntimeError) as exc_info:
            components._validate_otel_env_vars()

        assert "LANGFUSE_BASE_URL" in str(exc_info.value)


@pytest.mark.unit
class TestTestEnvironmentDetection:
    def test_detects_pytest(self):
        assert components._is_test_environment() is True

    def test_detects_testing_flag(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["main.py"])
        monkeypatch.setenv("TESTING", "yes")

        assert components._is_test_environment() is True

    def test_plain_run_is_not_test(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["main.py"])
        monkeypatch.delenv("TESTING", raising=False)

        assert components._is_test_environment() is False


@pytest.mark.unit
class TestCreateGenaiClient:
    def test_api_key_selects_developer_api(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "key-123")

        with patch.object(components.genai, "Client") as MockClient:
            components._create_genai_client()

        MockClient.assert_called_once_with(api_key="key-123")

    def test_without_key_falls_back_to_vertex(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("VERTEX_PROJECT_ID", "proj")
        monkeypatch.setenv("VERTEX_LOCATION", "us-central1")

        with patch.object(components.genai, "Client") as MockClient:
            components._create_genai_client()

        MockClient.assert_called_once_with(
            vertexai=True, project="proj", location="us-central1"
        )


@pytest.mark.unit
class TestComponents:
    def test_invalid_environment_is_rejected(self):
        with pytest.raises(ValueError) as exc_info:
            components.Components("qa", "configuration")

        assert "Invalid environment" in str(exc_info.value)

    def test_missing_environment_is_rejected(self):
        with pytest.raises(ValueError):
            components.Components()
