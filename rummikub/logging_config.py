"""Root logger setup for the simulation CLI."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(log_dir: Path | str | None = None, level: int | str = logging.INFO) -> Path | None:
    """Send log records to stdout, and to ``rummikub-<time>.log`` under ``log_dir`` when given.

    Handlers installed by earlier calls are replaced. Returns the log file path, if any.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = None
    if log_dir is not None:
        log_file = Path(log_dir) / f"rummikub-{datetime.now():%Y%m%d-%H%M%S}.log"
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    return log_file
