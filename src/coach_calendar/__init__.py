"""
Coach Calendar - timezone-aware calendar arithmetic for the coaching application.
"""

import logging
import sys

from .main import run


def main() -> None:
    """Console entry point."""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        logger = logging.getLogger(__name__)
        logger.info("Interrupted by user")
        sys.exit(130)


__all__ = ["main", "run"]
