"""
Logging setup: one stdout handler on the root logger.

Gunicorn / Uvicorn capture stdout, so nothing is written to files.
"""
import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=_FORMAT, stream=sys.stdout)
