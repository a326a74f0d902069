"""Logging configuration for the auth schema package."""

import logging
from enum import StrEnum

from src import settings


class ConsoleColour(StrEnum):
    """ANSI escape sequences used to tint console records.

    <https://en.wikipedia.org/wiki/ANSI_escape_code#Select_Graphic_Rendition_parameters>
    """

    RESET = "\033[0m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    LIGHT_GREY = "\033[37m"
    HIGHLIGHT_RED = "\033[41m"
    BOLD = "\033[1m"


class ConsoleFormatter(logging.Formatter):
    """Plain console formatter: ``time - logger - level - message``."""

    fmt = "{asctime} - {name} - {levelname} - {message}"

    def __init__(self) -> None:
        super().__init__(self.fmt, style="{", validate=True)


class ColourConsoleFormatter(ConsoleFormatter):
    """Console formatter that wraps each record in a level-specific colour."""

    COLOURS = {
        logging.DEBUG: ConsoleColour.LIGHT_GREY,
        logging.INFO: ConsoleColour.BLUE,
        logging.WARNING: ConsoleColour.YELLOW,
        logging.ERROR: ConsoleColour.RED,
        logging.CRITICAL: ConsoleColour.BOLD + ConsoleColour.HIGHLIGHT_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, then colour the whole line by level."""
        colour = self.COLOURS.get(record.levelno, ConsoleColour.RESET)
        return f"{colour}{super().format(record)}{ConsoleColour.RESET}"


def _build_handler(level: str, colour: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(ColourConsoleFormatter() if colour else ConsoleFormatter())
    return handler


def configure_logger(
    name: str = settings.LOGGER_NAME,
    level: str = settings.LOG_LEVEL,
    colour: bool = settings.LOG_COLOUR_ENABLED,
) -> logging.Logger:
    """Return the named logger with exactly one console handler attached."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(_build_handler(level, colour))
    return logger


LOGGER = configure_logger()
