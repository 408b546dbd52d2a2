"""
Logging configuration with uvicorn-compatible colored output
"""

import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Uvicorn-style level prefix, colored when writing to a terminal"""

    COLORS = {
        "DEBUG": "\033[36m",      # cyan
        "INFO": "\033[32m",       # green
        "WARNING": "\033[33m",    # yellow
        "ERROR": "\033[31m",      # red
        "CRITICAL": "\033[35m",   # magenta
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_colors: Optional[bool] = None):
        super().__init__(fmt)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record):
        # pad before coloring so messages line up like uvicorn's
        prefix = f"{record.levelname}:".ljust(10)
        if self.use_colors and record.levelname in self.COLORS:
            prefix = f"{self.COLORS[record.levelname]}{prefix}{self.RESET}"
        record.levelprefix = prefix
        return super().format(record)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Setup logging with colored formatter matching uvicorn style"""
    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter("%(levelprefix)s%(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return logging.getLogger("chatrelay")
