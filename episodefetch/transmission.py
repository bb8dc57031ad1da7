import logging
from typing import Any

import httpx

from .errors import DownloadManagerError

logger = logging.getLogger(__name__)

SESSION_ID_HEADER = "X-Transmission-Session-Id"


class TransmissionRemote:
    """Client for the Transmission JSON-RPC interface."""

    def __init__(
        self,
        client: httpx.Client,
        rpc_url: str = "http://localhost:9091/transmission/rpc",
        username: str | None = None,
        password: str | None = None,
    ):
        self.client = client
        self.rpc_url = rpc_url
        self.auth = (username, password or "") if username else None
        self.session_id: str | None = None
        self.added_hashes: list[str] = []

    def call(self, method: str, arguments: dict[str, Any] | None = None) -> dict:
        """Invoke an RPC method and return its arguments."""
        payload: dict[str, Any] = {"method": method}
        if arguments is not None:
            payload["arguments"] = arguments

        try:
            response = self._post(payload)
            if response.status_code == 409:
                # Transmission hands out a new session id with a 409
                self.session_id = response.headers.get(SESSION_ID_HEADER)
                response = self._post(payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DownloadManagerError(f"Transmission {method} failed: {e}") from e

        result = data.get("result") if isinstance(data, dict) else None
        if result != "success":
            raise DownloadManagerError(f"Transmission {method} failed: {result}")

        return data.get("arguments", {})

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {SESSION_ID_HEADER: self.session_id} if self.session_id else {}
        return self.client.post(
            self.rpc_url, json=payload, headers=headers, auth=self.auth
        )

    def start(self) -> None:
        """Open the RPC session, checking the daemon is reachable.

        Each start begins a new batch, so torrents queued by an earlier run are
        not started again by start_torrents.
        """
        session = self.call("session-get")
        self.added_hashes = []
        logger.debug(
            f"Connected to Transmission {session.get('version', 'unknown version')}"
        )

    def set_download_path(self, path: str) -> None:
        logger.debug(f"Setting Transmission download directory to {path}")
        self.call("session-set", {"download-dir": path})

    def add_torrents(self, *magnet_links: str) -> None:
        """Queue magnet links, paused until start_torrents is called."""
        for link in magnet_links:
            arguments = self.call("torrent-add", {"filename": link, "paused": True})
            torrent = arguments.get("torrent-added") or arguments.get(
                "torrent-duplicate"
            )
            if torrent and torrent.get("hashString"):
                self.added_hashes.append(torrent["hashString"])
                logger.debug(
                    f"Queued torrent {torrent.get('name', link)} ({torrent['hashString']})"
                )

    def start_torrents(self) -> None:
        """Start the torrents queued by this client, or all torrents if none were."""
        if self.added_hashes:
            self.call("torrent-start", {"ids": list(self.added_hashes)})
        else:
            self.call("torrent-start")
        logger.debug(f"Started {len(self.added_hashes) or 'all'} torrents")
