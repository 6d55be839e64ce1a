import logging
import os

from rich.logging import RichHandler


class CenteredFormatter(logging.Formatter):
    """Pads logger names to the widest name this formatter has seen."""

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        self.longest_name_length = initial_width

    def format(self, record):
        self.longest_name_length = max(self.longest_name_length, len(record.name))
        centered = logging.makeLogRecord(record.__dict__)
        centered.name = record.name.center(self.longest_name_length)
        return super().format(centered)


def get_logger(name=None) -> logging.Logger:
    """
    Returns a logger writing through a RichHandler, one handler per name.
    """
    if name is None:
        name = "shopfront"
    logger = logging.getLogger(name)
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        formatter = CenteredFormatter("[%(name)s]  %(message)s")

        console_handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

        logger.propagate = False
        logger.debug(f"Logger for '{name}' initialized.")

    return logger
