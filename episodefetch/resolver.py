import logging
from typing import TYPE_CHECKING

from .matcher import pattern_for, search_term_for
from .models import EpisodeRef, TorrentResult

if TYPE_CHECKING:
    from .fetcher import TorrentIndex

logger = logging.getLogger(__name__)


class TorrentResolver:
    """Finds the torrent for one episode on the torrent index."""

    def __init__(self, index: "TorrentIndex"):
        self.index = index

    def resolve(self, ref: EpisodeRef) -> TorrentResult | None:
        """Return the first search result whose name matches the episode, if any."""
        term = search_term_for(ref)
        logger.debug(f"Searching torrent index for '{term}'")
        results = self.index.search(term)

        if not results:
            logger.debug(f"No search results for '{term}'")
            return None

        pattern = pattern_for(ref)
        for result in results:
            if pattern.search(result.name):
                return result
            logger.debug(f"Ignoring non-matching result '{result.name}'")

        logger.debug(f"None of {len(results)} results matched {ref}")
        return None
