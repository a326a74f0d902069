import logging

from src.logger import (
    LOGGER,
    ColourConsoleFormatter,
    ConsoleColour,
    ConsoleFormatter,
    configure_logger,
)


def make_record(level: int, message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("auth-schema", level, __file__, 1, message, None, None)


def test_plain_formatter_layout():
    text = ConsoleFormatter().format(make_record(logging.INFO))
    assert text.endswith(" - auth-schema - INFO - hello")


def test_colour_formatter_wraps_record_in_level_colour():
    text = ColourConsoleFormatter().format(make_record(logging.WARNING))
    assert text.startswith(ConsoleColour.YELLOW)
    assert text.endswith(ConsoleColour.RESET)
    assert "WARNING - hello" in text


def test_configure_logger_keeps_a_single_handler():
    logger = configure_logger("auth-schema-test", level="DEBUG", colour=False)
    logger = configure_logger("auth-schema-test", level="DEBUG", colour=True)
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, ColourConsoleFormatter)
    assert logger.level == logging.DEBUG


def test_package_logger_is_configured():
    assert len(LOGGER.handlers) == 1
