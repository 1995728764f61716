"""Core utilities."""

import logging
import math
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import cv2
import PIL

from iiif_image.core.settings.app_settings import LoggingSettings

logger = logging.getLogger(__name__)

# Handler names used to identify handlers and avoid duplicates
APP_STREAM_HANDLER_NAME = "iiif_app_stream_handler"
APP_FILE_HANDLER_NAME = "iiif_app_file_handler"

# Decimal places kept before floor/ceil, absorbs float noise from scaling and cos/sin
FLOAT_PRECISION = 6


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positive values.

    Args:
        value (float): Value to round.

    Returns:
        int: Rounded value.
    """
    return math.floor(value + 0.5)


def round_dimension(value: float) -> int:
    """
    Round a computed pixel dimension, never returning less than 1.

    Args:
        value (float): Computed dimension.

    Returns:
        int: Rounded dimension, at least 1.
    """
    return max(1, round_half_up(value))


def ceil_dimension(value: float) -> int:
    """
    Round a computed pixel dimension up to the next integer.

    Args:
        value (float): Computed dimension.

    Returns:
        int: Dimension rounded up, at least 1.
    """
    return max(1, math.ceil(round(value, FLOAT_PRECISION)))


def get_codec_versions() -> dict[str, str]:
    """
    Get versions of the imaging libraries backing the codec.

    Returns:
        dict[str, str]: Library name to version string.
    """
    return {"opencv": cv2.__version__, "pillow": PIL.__version__}


def _get_handler_by_name(root_logger: logging.Logger, name: str) -> logging.Handler | None:
    """
    Get a handler by name from a logger.

    Args:
        root_logger (logging.Logger): Logger to search.
        name (str): Handler name to find.

    Returns:
        logging.Handler | None: Handler if found, None otherwise.
    """
    for handler in root_logger.handlers:
        if getattr(handler, "name", None) == name:
            return handler
    return None


def _remove_handler_by_name(root_logger: logging.Logger, name: str) -> None:
    """
    Remove a handler by name from a logger.

    Args:
        root_logger (logging.Logger): Logger to remove from.
        name (str): Handler name to remove.
    """
    handler = _get_handler_by_name(root_logger=root_logger, name=name)
    if handler:
        root_logger.removeHandler(handler)
        handler.close()


def _get_min_level(root_level: str, loggers: dict[str, str]) -> int:
    """
    Get the minimum log level from root and all custom loggers.

    Args:
        root_level (str): The root logger level string.
        loggers (dict[str, str]): Dict of logger name to level string.

    Returns:
        int: The minimum numeric log level.
    """
    levels: list[int] = [logging.getLevelName(root_level.upper())]
    for level in loggers.values():
        levels.append(logging.getLevelName(level.upper()))
    return min(levels)


def setup_logging(settings: LoggingSettings) -> None:
    """
    Setup logging configuration for the application.

    Args:
        settings (LoggingSettings): Logging settings to configure logging.
    """
    root_logger = logging.getLogger()

    min_level = _get_min_level(
        root_level=settings.log_level,
        loggers=settings.loggers,
    )

    root_logger.setLevel(settings.log_level)

    # Remove any existing app handlers
    _remove_handler_by_name(root_logger=root_logger, name=APP_STREAM_HANDLER_NAME)
    _remove_handler_by_name(root_logger=root_logger, name=APP_FILE_HANDLER_NAME)

    formatter = logging.Formatter(
        fmt=settings.log_format,
        datefmt=settings.date_format,
    )

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if settings.rotate_logs:
            handler: logging.Handler = TimedRotatingFileHandler(
                filename=log_path,
                when="midnight",
                encoding="utf-8",
            )
        else:
            handler = logging.FileHandler(log_path)

        handler.set_name(APP_FILE_HANDLER_NAME)
    else:
        # stderr keeps stdout free for encoded images and JSON output
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(APP_STREAM_HANDLER_NAME)

    handler.setFormatter(formatter)
    handler.setLevel(min_level)
    root_logger.addHandler(handler)

    # Pillow logs every plugin import at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)

    for logger_name, level in settings.loggers.items():
        logging.getLogger(logger_name).setLevel(level)
