"""Console logging setup shared by the command-line entry points."""

from __future__ import annotations

import logging


class DungeonLogFormatter(logging.Formatter):
    """Compact ``LEVEL:topic: message`` formatter, optionally colored."""

    def __init__(self, use_color: bool = False) -> None:
        super().__init__()
        if use_color:
            self.COLORS = {
                logging.DEBUG: "\033[38;5;252m",
                logging.INFO: "\033[38;5;111m",
                logging.WARNING: "\033[38;5;229m",
                logging.ERROR: "\033[38;5;210m",
                logging.CRITICAL: "\033[38;5;217m",
            }
            self.RESET = "\033[0m"
        else:
            self.COLORS = {}
            self.RESET = ""

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        level_name = record.levelname[:5]
        topic = record.name.split(".")[-1][:12]
        prefix = f"{color}{level_name:<5}{self.RESET}:{topic:<12}: "
        message = super().format(record)
        return "\n".join(f"{prefix}{line}" for line in message.split("\n"))


def setup_logging(level: int | str = logging.WARNING, use_color: bool = False) -> None:
    """Install a single console handler on the root logger, replacing any earlier one."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, DungeonLogFormatter):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(DungeonLogFormatter(use_color=use_color))
    root_logger.addHandler(console_handler)
    if isinstance(level, str):
        level = level.upper()
    root_logger.setLevel(level)
