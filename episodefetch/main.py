import argparse
import logging
import sys

import httpx

from .config import settings, validate_download_path
from .errors import ConfigurationError, DownloadManagerError
from .fetcher import EpisodeFetcher
from .imdb import ImdbClient
from .models import ShowOutcome
from .torrent_index import TorrentIndexClient
from .transmission import TransmissionRemote

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Queue the latest episode of each tracked show in Transmission"
    )
    parser.add_argument(
        "--show",
        dest="shows",
        action="append",
        metavar="IMDB_ID",
        help="Show to track (repeatable, overrides EPISODEFETCH_SHOWS)",
    )
    parser.add_argument(
        "--download-path",
        default=settings.download_path,
        help=f"Download directory (default: {settings.download_path})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    return parser.parse_args(argv)


def run(shows: list[str], download_path: str) -> int:
    """Wire up the clients and process every show once. Returns the number queued."""
    path = validate_download_path(download_path)

    logger.info(f"Tracking {len(shows)} shows")
    logger.info(f"Download path: {path}")
    logger.info(f"Torrent index: {settings.index_url}")
    logger.info(f"Transmission: {settings.transmission_url}")

    metadata_client = httpx.Client(
        timeout=settings.http_timeout_seconds,
        headers={
            "User-Agent": "episodefetch/1.0 Metadata",
            "Accept-Language": "en-US,en;q=0.9",
        },
        follow_redirects=True,
    )
    index_client = httpx.Client(
        timeout=settings.http_timeout_seconds,
        headers={"User-Agent": "episodefetch/1.0 Torrent Search"},
        follow_redirects=True,
    )
    rpc_client = httpx.Client(timeout=settings.http_timeout_seconds)

    try:
        fetcher = EpisodeFetcher(
            metadata=ImdbClient(metadata_client, settings.imdb_url),
            index=TorrentIndexClient(
                index_client,
                settings.index_url,
                category=settings.index_category,
                filter_type=settings.index_filter,
            ),
            remote=TransmissionRemote(
                rpc_client,
                settings.transmission_url,
                username=settings.transmission_username or None,
                password=settings.transmission_password or None,
            ),
            download_path=path,
            shows=shows,
        )
        summary = fetcher.run()
    finally:
        metadata_client.close()
        index_client.close()
        rpc_client.close()

    for report in summary.reports:
        logger.info(f"{report.show_id}: {report.outcome.value} {report.detail or ''}")
    failed = summary.count(ShowOutcome.FAILED)
    if failed:
        logger.warning(f"{failed} shows failed")

    return summary.queued


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    shows = args.shows if args.shows else settings.shows
    try:
        run(shows, args.download_path)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, exiting...")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except DownloadManagerError as e:
        logger.error(f"Download manager unavailable: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
