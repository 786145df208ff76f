"""
Logging Configuration
Attaches console and file handlers to the 'quadboard' logger tree.

Library modules only call logging.getLogger(__name__); handlers are added
here, once, by whichever process embeds the engine (the CLI in __main__,
a host application, or a test).
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "quadboard"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def resolve_level(level: Union[int, str]) -> int:
    """
    Accepts either a logging constant or its name ("debug", "WARNING").

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'quadboard' logger that every engine module logs under.

    Calling it again replaces the previous handlers.

    Args:
        level: Logging level, as a constant or a name.
        log_file: Optional path to save logs to a file.

    Returns:
        The configured 'quadboard' logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Board engine logging at {logging.getLevelName(level)}.")
    return logger
