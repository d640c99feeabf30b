import logging
import sys

from storefront.config import settings


def get_logger(name: str) -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(
            logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        )
        log.addHandler(h)
    return log
