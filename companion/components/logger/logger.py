import logging

from companion.components.logger.logger_interface import LoggerInterface

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Logger(LoggerInterface):
    def __init__(self, log_format: str | None, log_level: str | None) -> None:
        self.log_format = log_format or DEFAULT_LOG_FORMAT
        self.log_level = logging.getLevelName((log_level or "INFO").upper())
        if not isinstance(self.log_level, int):
            raise ValueError(f"Unknown log level: {log_level}")

        logging.basicConfig(format=self.log_format, level=self.log_level)

    def get_logger(self, name: str) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(self.log_level)
        return logger
