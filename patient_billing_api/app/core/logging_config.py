"""
Logging configuration for the API process.

``setup_logging`` attaches a console handler (and a file handler when
``LOG_FILE`` is set) to the root logger, once per process.  With
``DEBUG`` enabled the level is forced to DEBUG so the analytics
snapshot sizes logged by ``statistics_service`` become visible.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, debug: bool = False) -> int:
    """Configure the root logger and return the effective level.

    Does nothing (apart from reporting the current level) if the root
    logger already has handlers, which happens when ``create_app`` runs
    more than once in the same process, as in the test suite.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        File to append log lines to.  Parent directories are created.
    debug : bool
        Force the DEBUG level regardless of ``level``.
    """
    root = logging.getLogger()
    if root.handlers:
        return root.level

    numeric_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(logfile):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return numeric_level
