# voxel_dungeon/utils/logging_utils.py
import logging
from typing import Union

import structlog
from structlog.stdlib import add_log_level, add_logger_name


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level


def setup_logging(level: Union[int, str] = logging.INFO, colors: bool = True) -> int:
    """Route structlog through stdlib logging with a console renderer.

    Generation runs bind their seed into the structlog context, so every
    event of one run carries it. Returns the numeric level in effect.
    """
    numeric_level = _resolve_level(level)
    logging.basicConfig(level=numeric_level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return numeric_level


__all__ = ["setup_logging"]
