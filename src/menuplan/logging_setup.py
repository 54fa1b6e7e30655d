"""Logging configuration shared by the CLI and the web server."""

import logging
import sys

from menuplan.config import settings


def setup_logging(level: str | None = None, verbose: bool = False) -> None:
    """Configure root logging once; noisy client libraries stay at WARNING."""
    if verbose:
        level = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
