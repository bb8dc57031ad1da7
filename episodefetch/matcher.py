"""Episode patterns and search terms shared by the library scan and torrent lookup."""

import re

from .models import EpisodeRef


def build_pattern(title: str, season: int, episode: int) -> re.Pattern[str]:
    """
    Build the case-insensitive pattern identifying one exact episode.

    The title is quoted literally, with every run of whitespace turned into a
    one-or-more wildcard gap. The season/episode token accepts optional zero
    padding and must not be followed by another digit, so S01E01 never matches
    a candidate carrying S01E10.
    """
    token = f"s0?{season}e0?{episode}(?![0-9])"
    parts = title.split()
    if not parts:
        return re.compile(token, re.IGNORECASE)

    title_pattern = ".+".join(re.escape(part) for part in parts)
    return re.compile(f"{title_pattern}.+{token}", re.IGNORECASE)


def build_search_term(title: str, season: int, episode: int) -> str:
    """Search term for the torrent index, e.g. 'Show Title S01E02'."""
    return f"{title} S{season:02d}E{episode:02d}"


def pattern_for(ref: EpisodeRef) -> re.Pattern[str]:
    return build_pattern(ref.title, ref.season, ref.episode)


def search_term_for(ref: EpisodeRef) -> str:
    return build_search_term(ref.title, ref.season, ref.episode)
