import logging
from collections.abc import Callable, Iterable
from datetime import date
from pathlib import Path
from typing import Protocol

from whenever import Instant

from .airdate import latest_aired_episode
from .errors import MetadataError
from .library import find_existing
from .matcher import pattern_for
from .models import (
    EpisodeEntry,
    EpisodeRef,
    RunSummary,
    ShowInfo,
    ShowOutcome,
    ShowReport,
    TorrentResult,
)
from .resolver import TorrentResolver

logger = logging.getLogger(__name__)


class MetadataProvider(Protocol):
    def get_show_info(self, show_id: str) -> ShowInfo: ...

    def get_season_episodes(
        self, show_id: str, season: int
    ) -> dict[int, EpisodeEntry]: ...


class TorrentIndex(Protocol):
    def search(self, term: str) -> list[TorrentResult]: ...


class DownloadManager(Protocol):
    def set_download_path(self, path: str) -> None: ...

    def start(self) -> None: ...

    def add_torrents(self, *magnet_links: str) -> None: ...

    def start_torrents(self) -> None: ...


class EpisodeFetcher:
    """Queues the latest episode of every tracked show that is not on disk yet."""

    def __init__(
        self,
        metadata: MetadataProvider,
        index: TorrentIndex,
        remote: DownloadManager,
        download_path: Path,
        shows: Iterable[str],
        now_func: Callable[[], Instant] = Instant.now,
    ):
        self.metadata = metadata
        self.resolver = TorrentResolver(index)
        self.remote = remote
        self.download_path = download_path
        self.shows = list(shows)
        self.now_func = now_func

    def today(self) -> date:
        """Current date in the local timezone."""
        return self.now_func().py_datetime().astimezone().date()

    def run(self) -> RunSummary:
        """Process every tracked show once.

        Failures talking to the download manager before or after the loop
        propagate; failures for a single show are logged and the next show is
        processed.
        """
        summary = RunSummary()

        self.remote.set_download_path(str(self.download_path))
        self.remote.start()

        for show_id in self.shows:
            try:
                report = self.process_show(show_id)
            except Exception as e:
                logger.error(f"Failed to process show {show_id}: {e}", exc_info=True)
                report = ShowReport(
                    show_id=show_id, outcome=ShowOutcome.FAILED, detail=str(e)
                )
            summary.reports.append(report)

        logger.debug("Starting torrent downloads")
        self.remote.start_torrents()

        logger.info(
            f"Run complete: {summary.queued} queued out of {len(self.shows)} shows"
        )
        return summary

    def process_show(self, show_id: str) -> ShowReport:
        """Run the whole lookup for one show and queue its latest episode if needed."""
        ref = self.latest_episode(show_id)
        if ref is None:
            logger.debug("No latest episode found, skipping")
            return ShowReport(show_id=show_id, outcome=ShowOutcome.NOT_AIRED)

        logger.debug(f"Checking if {ref} has already been downloaded")
        existing = find_existing(self.download_path, pattern_for(ref))
        if existing:
            logger.debug(f"Skipping, found episode at {existing[0]}")
            return ShowReport(
                show_id=show_id,
                outcome=ShowOutcome.ALREADY_PRESENT,
                episode=ref,
                detail=str(existing[0]),
            )

        logger.debug("Searching for episode torrent")
        result = self.resolver.resolve(ref)
        if result is None:
            logger.debug("Skipping, no results found")
            return ShowReport(show_id=show_id, outcome=ShowOutcome.NO_MATCH, episode=ref)

        logger.info(
            f"Adding torrent '{result.name}' with link '{result.magnet_link}' to download queue"
        )
        self.remote.add_torrents(result.magnet_link)
        return ShowReport(
            show_id=show_id,
            outcome=ShowOutcome.QUEUED,
            episode=ref,
            detail=result.name,
        )

    def latest_episode(self, show_id: str) -> EpisodeRef | None:
        """Resolve the latest aired episode of a show, or None if nothing has aired."""
        logger.debug(f"Fetching show info for ID {show_id}")
        info = self.metadata.get_show_info(show_id)

        if info.latest_episode is not None:
            if info.latest_season is None:
                raise MetadataError(
                    f"Latest episode {info.latest_episode} of '{info.title}' has no season"
                )
            return EpisodeRef(
                title=info.title, season=info.latest_season, episode=info.latest_episode
            )

        if info.latest_season is None:
            logger.debug(f"No season information for '{info.title}'")
            return None

        logger.debug(f"Fetching episodes for '{info.title}' season {info.latest_season}")
        episodes = self.metadata.get_season_episodes(show_id, info.latest_season)
        latest = latest_aired_episode(episodes, self.today())
        if latest is None:
            return None

        return EpisodeRef(title=info.title, season=info.latest_season, episode=latest)
