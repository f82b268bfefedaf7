"""Recursive search for top log files."""

import logging
import os
import re
from collections.abc import Iterator
from pathlib import Path

from top2csv.errors import DiscoveryError

logger = logging.getLogger(__name__)

LOG_NAME_PATTERN = re.compile(r"top\.log(\.[0-9])?")


def is_top_log(name: str) -> bool:
    """True for ``top.log`` and its rotations ``top.log.0`` .. ``top.log.9``."""
    return LOG_NAME_PATTERN.fullmatch(name) is not None


def _warn_unreadable(error: OSError) -> None:
    logger.warning("Not searched: %s", error)


def find_top_logs(root: Path) -> Iterator[Path]:
    """
    Yield every top log file below ``root``, in sorted order.

    Directories that cannot be listed are reported as warnings and skipped.

    Raises:
        DiscoveryError: ``root`` does not exist or is not a directory.
    """
    root = Path(root)
    if not root.exists():
        raise DiscoveryError(f"Error accessing path: {root}")
    if not root.is_dir():
        raise DiscoveryError(f"{root} is not a directory")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_warn_unreadable):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if is_top_log(filename) and path.is_file():
                yield path
