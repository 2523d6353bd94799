'''
universal logger
'''
import logging
import sys

from .config import settings

# Third-party loggers that are only interesting when debugging.
NOISY_LOGGERS = ('sqlalchemy.engine', 'httpx', 'passlib')

def setup_logger():
    """
    Configures and returns the application logger.
    The level comes from LOG_LEVEL; below DEBUG the noisy libraries are kept at WARNING.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger('SS-backend')
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(module)s - %(levelname)s\n - %(message)s'
        ))
        logger.addHandler(handler)

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logger

# Create a single logger instance to be imported by other modules
log = setup_logger()
