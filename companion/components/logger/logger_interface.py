import logging
from abc import ABC, abstractmethod


class LoggerInterface(ABC):
    @abstractmethod
    def get_logger(self, name: str) -> logging.Logger:
        """Return a configured logger for the given component name."""
