"""Air date parsing and the "has it aired yet" policy."""

import logging
import re
from collections.abc import Mapping
from datetime import date

from .errors import AirDateError
from .models import EpisodeEntry

logger = logging.getLogger(__name__)

# e.g. "Jan 5, 2024" or "Sep. 12, 2023"
AIRDATE_RE = re.compile(r"^([A-Za-z]{3})\.? ([0-9]{1,2}), ([0-9]{4})$")

# Fixed English abbreviations so parsing does not depend on the process locale
MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}


def parse_airdate(text: str) -> date:
    """Parse an air date like 'Jan. 5, 2024', raising AirDateError if it is not one."""
    match = AIRDATE_RE.match(text)
    if not match:
        raise AirDateError(f"Unrecognised air date format: {text!r}")

    month_name, day, year = match.groups()
    month = MONTHS.get(month_name.lower())
    if month is None:
        raise AirDateError(f"Unknown month abbreviation in air date: {text!r}")

    try:
        return date(int(year), month, int(day))
    except ValueError as e:
        raise AirDateError(f"Impossible air date {text!r}: {e}") from e


def has_aired(airdate: str, today: date) -> bool:
    """True if the air date parses and falls strictly before today."""
    try:
        return parse_airdate(airdate) < today
    except AirDateError as e:
        logger.debug(f"Ignoring episode air date: {e}")
        return False


def aired_episodes(
    episodes: Mapping[int, EpisodeEntry], today: date
) -> dict[int, EpisodeEntry]:
    """Keep only the episodes that have already aired."""
    return {
        number: entry
        for number, entry in episodes.items()
        if has_aired(entry.airdate, today)
    }


def latest_aired_episode(
    episodes: Mapping[int, EpisodeEntry], today: date
) -> int | None:
    """Highest episode number among aired episodes, or None if nothing has aired."""
    aired = aired_episodes(episodes, today)
    if not aired:
        return None
    return max(aired)
