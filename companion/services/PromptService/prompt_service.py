"""
System instruction rendering.

The persona template lives in ``system_instruction.prompt`` next to this
module so it can be tuned without touching code. A reduced default is used
when the file is missing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from companion.entities.agent import AgentConfig
from companion.services.PromptService.prompt_service_interface import (
    PromptServiceInterface,
)

DEFAULT_TIMEZONE = "Asia/Jakarta"

# Default template in case the file is not found
DEFAULT_SYSTEM_TEMPLATE = """IDENTITAS & STYLE:
- Nama: {name}.
- Kepribadian: {personality}.
- Gaya Bicara: Santai ala bestie Jakarta (gue/lo), asik, blak-blakan.

KESADARAN VISUAL:
- Foto REFERENSI IDENTITAS adalah wajah kamu ({name}), bukan kiriman baru dari user.

ADAPTIVE MODE:
1. MODE NORMAL secara default.
2. MODE AKRAB hanya jika user sendiri yang memulai secara eksplisit.

LOGIKA PAP:
- Gunakan tag [CAPTION: deskripsi foto] dari sudut pandang "Gue sedang...".

WAKTU: {timestamp}.
"""

_DAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
_MONTH_NAMES = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def format_indonesian_timestamp(moment: datetime) -> str:
    """Format like the id-ID long locale: ``Minggu, 18 Oktober 2026 pukul 14.05.09``."""
    return (
        f"{_DAY_NAMES[moment.weekday()]}, {moment.day} "
        f"{_MONTH_NAMES[moment.month - 1]} {moment.year} "
        f"pukul {moment:%H.%M.%S}"
    )


class PromptService(PromptServiceInterface):
    def __init__(
        self,
        logger: logging.Logger,
        timezone: str = DEFAULT_TIMEZONE,
        clock: Callable[[ZoneInfo], datetime] | None = None,
        template_path: Path | None = None,
    ) -> None:
        self.logger = logger
        self.timezone = ZoneInfo(timezone)
        self.clock = clock or (lambda tz: datetime.now(tz))
        self.template_path = template_path or (
            Path(__file__).resolve().parent / "system_instruction.prompt"
        )
        self.template = self._load_template()

    def _load_template(self) -> str:
        try:
            return self.template_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self.logger.warning(
                "System instruction template not found at %s, using default",
                self.template_path,
            )
            return DEFAULT_SYSTEM_TEMPLATE

    def create_system_instruction(self, config: AgentConfig) -> str:
        timestamp = format_indonesian_timestamp(self.clock(self.timezone))
        return self.template.format(
            name=config["name"],
            personality=config["personality"],
            timestamp=timestamp,
        )
