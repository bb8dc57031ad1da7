"""Lookup of episodes already present in the download directory."""

import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)


def _raise_walk_error(error: OSError) -> None:
    raise error


def iter_files(download_path: str | os.PathLike[str]):
    """Yield every file below download_path, recursively."""
    for dirpath, _dirnames, filenames in os.walk(
        download_path, onerror=_raise_walk_error
    ):
        for filename in filenames:
            yield Path(dirpath) / filename


def find_existing(
    download_path: str | os.PathLike[str], pattern: re.Pattern[str]
) -> list[Path]:
    """Return all files below download_path whose full path matches pattern."""
    matches = sorted(
        path for path in iter_files(download_path) if pattern.search(str(path))
    )
    logger.debug(
        f"Found {len(matches)} file(s) matching {pattern.pattern!r} in {download_path}"
    )
    return matches
