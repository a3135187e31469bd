import logging
import sys
from typing import Union


class ContextFormatter(logging.Formatter):
    """Formatter that tolerates records without a repo field."""
    def format(self, record):
        if not hasattr(record, 'repo'):
            record.repo = '-'
        return super().format(record)


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Install a single stderr handler on the stashmark logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [repo=%(repo)s] - %(message)s"
    ))

    logger = logging.getLogger("stashmark")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
