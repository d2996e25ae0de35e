"""Colored stderr logging for the ReelNotes CLI."""

import logging
import re
import sys

RESET = "\033[0m"
BOLD = "\033[1m"

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}

# One color per pipeline stage tag, e.g. "[STORE] Inserted note 3"
PREFIX_COLORS = {
    "EXTRACT": "\033[96m",
    "LLM": "\033[93m",
    "FORMATTER": "\033[95m",
    "PIPELINE": "\033[94m",
    "STORE": "\033[97m",
}

PREFIX_PATTERN = re.compile(r"\[(" + "|".join(PREFIX_COLORS) + r")\]")

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "aiosqlite")


def _color_prefix(match: re.Match) -> str:
    tag = match.group(1)
    return f"{PREFIX_COLORS[tag]}{BOLD}[{tag}]{RESET}"


class ColoredFormatter(logging.Formatter):
    """Colors the level name and any known ``[STAGE]`` tag in the message."""

    def format(self, record: logging.LogRecord) -> str:
        levelname, msg = record.levelname, record.msg

        color = LEVEL_COLORS.get(levelname, "")
        record.levelname = f"{color}{levelname:<7}{RESET}"
        if isinstance(msg, str):
            record.msg = PREFIX_PATTERN.sub(_color_prefix, msg)

        try:
            return super().format(record)
        finally:
            # Other handlers may format the same record
            record.levelname, record.msg = levelname, msg


def setup_colored_logging(verbose: bool = False) -> None:
    """Route all logging to stderr through a single colored handler.

    Args:
        verbose: DEBUG when set; otherwise WARNING, so stdout carries only
            command output.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(fmt="%(asctime)s %(levelname)s %(message)s", datefmt="%H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
