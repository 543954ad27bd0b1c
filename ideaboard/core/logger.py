import logging
import os
import sys

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
DEBUG = os.getenv('DEBUG', 'False').lower() in ['true', '1', 'yes']
if DEBUG:
    LOG_LEVEL = 'DEBUG'

LOG_FORMAT = '%(asctime)s - %(name)s:%(levelname)s: %(filename)s:%(lineno)s - %(message)s'


def _get_log_level() -> int:
    level = logging.getLevelName(LOG_LEVEL)
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.INFO


def get_console_handler(log_level: int = logging.INFO) -> logging.StreamHandler:
    """Returns a console handler for logging."""
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return console_handler


ideaboard_logger = logging.getLogger('ideaboard')
ideaboard_logger.setLevel(_get_log_level())
ideaboard_logger.propagate = False
if not ideaboard_logger.handlers:
    ideaboard_logger.addHandler(get_console_handler(_get_log_level()))
