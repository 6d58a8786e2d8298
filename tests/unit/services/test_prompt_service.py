"""
Unit tests for PromptService.
"""

import logging
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from companion.entities.agent import AgentConfig
from companion.services.PromptService.prompt_service import (
    DEFAULT_SYSTEM_TEMPLATE,
    PromptService,
    format_indonesian_timestamp,
)


def _fixed_clock(tz: ZoneInfo) -> datetime:
    return datetime(2026, 10, 18, 14, 5, 9, tzinfo=tz)


@pytest.fixture
def prompt_service(logger: logging.Logger) -> PromptService:
    return PromptService(logger=logger, clock=_fixed_clock)


class TestFormatIndonesianTimestamp:
    def test_long_locale_format(self) -> None:
        moment = datetime(2026, 10, 18, 14, 5, 9)

        assert format_indonesian_timestamp(moment) == "Minggu, 18 Oktober 2026 pukul 14.05.09"

    def test_single_digit_day_is_not_padded(self) -> None:
        moment = datetime(2026, 1, 5, 8, 0, 0)

        assert format_indonesian_timestamp(moment) == "Senin, 5 Januari 2026 pukul 08.00.00"


class TestCreateSystemInstruction:
    """Test cases for PromptService.create_system_instruction."""

    def test_interpolates_name_personality_and_time(
        self, prompt_service: PromptService, agent_config: AgentConfig
    ) -> None:
        instruction = prompt_service.create_system_instruction(agent_config)

        assert "Nadia" in instruction
        assert "Ceria dan perhatian" in instruction
        assert "Minggu, 18 Oktober 2026 pukul 14.05.09" in instruction
        assert "{name}" not in instruction

    def test_contains_caption_directive(
        self, prompt_service: PromptService, agent_config: AgentConfig
    ) -> None:
        instruction = prompt_service.create_system_instruction(agent_config)

        assert "[CAPTION:" in instruction

    def test_clock_receives_configured_timezone(
        self, logger: logging.Logger, agent_config: AgentConfig
    ) -> None:
        seen: list[ZoneInfo] = []

        def clock(tz: ZoneInfo) -> datetime:
            seen.append(tz)
            return _fixed_clock(tz)

        service = PromptService(logger=logger, timezone="Asia/Makassar", clock=clock)
        service.create_system_instruction(agent_config)

        assert seen == [ZoneInfo("Asia/Makassar")]

    def test_missing_template_file_uses_default(
        self, logger: logging.Logger, agent_config: AgentConfig, tmp_path: Path
    ) -> None:
        service = PromptService(
            logger=logger,
            clock=_fixed_clock,
            template_path=tmp_path / "missing.prompt",
        )

        assert service.template == DEFAULT_SYSTEM_TEMPLATE
        assert "Nama: Nadia." in service.create_system_instruction(agent_config)

    def test_custom_template_file(
        self, logger: logging.Logger, agent_config: AgentConfig, tmp_path: Path
    ) -> None:
        template = tmp_path / "custom.prompt"
        template.write_text("{name} | {personality} | {timestamp}", encoding="utf-8")

        service = PromptService(logger=logger, clock=_fixed_clock, template_path=template)

        assert service.create_system_instruction(agent_config) == (
            "Nadia | Ceria dan perhatian | Minggu, 18 Oktober 2026 pukul 14.05.09"
        )
