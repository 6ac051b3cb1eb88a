"""Logging setup for the NeckRange command line and embedding applications."""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once with a single stderr handler.

    Args:
        level: Level name (e.g. 'INFO', 'DEBUG'); defaults to INFO
    """
    level_name = (level or 'INFO').upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True
    )

    # MediaPipe's absl logging is noisy at INFO
    logging.getLogger('absl').setLevel(max(numeric_level, logging.WARNING))
