# Colour-coded logging for optimization runs
# Author: Shengning Wang

import sys
import logging

from tqdm.auto import tqdm


class HueLogger:
    """
    A colour-coded logger whose records are written through ``tqdm.write``.

    Routing every record through tqdm keeps log lines above any active progress
    bar (repeated benchmark runs show one). Re-creating the logger clears old
    handlers, so reloading a module in a notebook never duplicates output.

    Attributes:
        logger (logging.Logger): The configured logger instance.
    """

    # ANSI Color Codes
    b = "\033[1;34m"    # major key/parameter:      bold blue
    c = "\033[1;36m"    # minor key/parameter:      bold cyan
    m = "\033[1;35m"    # value/reading:            bold magenta
    y = "\033[1;33m"    # warning/highlighting:     bold yellow
    g = "\033[1;32m"    # success/save:             bold green
    r = "\033[1;31m"    # error/critical:           bold red

    q = "\033[0m"      # quit/reset

    def __init__(self, name: str = "swarmops", level: int = logging.INFO) -> None:
        """
        Args:
            name (str): Logger name. Sub-modules log through children of it.
            level (int): Logging level (e.g., logging.INFO, logging.DEBUG).
        """
        self.logger: logging.Logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        self.logger.addHandler(self._get_handler())

    def _get_handler(self) -> logging.StreamHandler:
        """
        Constructs a stdout handler that emits formatted records via tqdm.write().

        Returns:
            logging.StreamHandler: Configured handler with ANSI color support.
        """
        # grey timestamp, blue level name
        log_format: str = f"\033[90m%(asctime)s{self.q} - {self.b}%(levelname)s{self.q} - %(message)s"
        formatter: logging.Formatter = logging.Formatter(log_format, "%H:%M:%S")

        handler: logging.StreamHandler = logging.StreamHandler(sys.stdout)
        handler.emit = lambda record: tqdm.write(formatter.format(record), file=sys.stdout)
        handler.setFormatter(formatter)
        return handler

    def set_level(self, level: int) -> None:
        """Changes the threshold of the shared logger."""
        self.logger.setLevel(level)


hue = HueLogger()
logger: logging.Logger = hue.logger
