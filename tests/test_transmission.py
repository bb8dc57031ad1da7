import json

import httpx
import pytest

from episodefetch.errors import DownloadManagerError
from episodefetch.transmission import SESSION_ID_HEADER, TransmissionRemote

RPC_URL = "http://transmission.local:9091/transmission/rpc"


class FakeTransmission:
    """Minimal Transmission RPC endpoint for httpx.MockTransport."""

    def __init__(self, session_id="abc123"):
        self.session_id = session_id
        self.requests = []
        self.responses = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get(SESSION_ID_HEADER) != self.session_id:
            return httpx.Response(409, headers={SESSION_ID_HEADER: self.session_id})

        payload = json.loads(request.content)
        self.requests.append(payload)
        body = self.responses.get(
            payload["method"], {"result": "success", "arguments": {}}
        )
        return httpx.Response(200, json=body)

    @property
    def methods(self):
        return [payload["method"] for payload in self.requests]


@pytest.fixture
def server():
    return FakeTransmission()


@pytest.fixture
def remote(server):
    client = httpx.Client(transport=httpx.MockTransport(server))
    return TransmissionRemote(client, RPC_URL)


def test_session_id_handshake(remote, server):
    server.responses["session-get"] = {
        "result": "success",
        "arguments": {"version": "4.0.5"},
    }

    remote.start()

    assert remote.session_id == "abc123"
    assert server.methods == ["session-get"]


def test_session_id_is_reused(remote, server):
    remote.start()
    remote.set_download_path("/srv/tv")

    assert server.methods == ["session-get", "session-set"]
    assert server.requests[1]["arguments"] == {"download-dir": "/srv/tv"}


def test_session_id_refreshed_after_expiry(remote, server):
    remote.start()
    server.session_id = "new-session"

    remote.start()

    assert remote.session_id == "new-session"
    assert server.methods == ["session-get", "session-get"]


def test_add_torrents_paused(remote, server):
    server.responses["torrent-add"] = {
        "result": "success",
        "arguments": {
            "torrent-added": {"id": 1, "hashString": "abc", "name": "Example S01E03"}
        },
    }

    remote.add_torrents("magnet:?xt=urn:btih:ABC")

    assert server.requests == [
        {
            "method": "torrent-add",
            "arguments": {"filename": "magnet:?xt=urn:btih:ABC", "paused": True},
        }
    ]
    assert remote.added_hashes == ["abc"]


def test_add_duplicate_torrent_is_remembered(remote, server):
    server.responses["torrent-add"] = {
        "result": "success",
        "arguments": {"torrent-duplicate": {"id": 7, "hashString": "dup"}},
    }

    remote.add_torrents("magnet:?xt=urn:btih:DUP")

    assert remote.added_hashes == ["dup"]


def test_start_torrents_starts_added(remote, server):
    remote.added_hashes = ["abc", "def"]

    remote.start_torrents()

    assert server.requests == [
        {"method": "torrent-start", "arguments": {"ids": ["abc", "def"]}}
    ]


def test_start_torrents_without_additions_starts_all(remote, server):
    remote.start_torrents()

    assert server.requests == [{"method": "torrent-start"}]


def test_rpc_failure_result(remote, server):
    server.responses["torrent-add"] = {"result": "invalid or corrupt torrent file"}

    with pytest.raises(DownloadManagerError, match="corrupt"):
        remote.add_torrents("magnet:?xt=urn:btih:BAD")


def test_http_error_status():
    client = httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(401))
    )
    remote = TransmissionRemote(client, RPC_URL, username="user", password="secret")

    with pytest.raises(DownloadManagerError):
        remote.start()


def test_connection_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(refuse))

    with pytest.raises(DownloadManagerError, match="connection refused"):
        TransmissionRemote(client, RPC_URL).start()


def test_basic_auth_is_sent():
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"result": "success", "arguments": {}})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    TransmissionRemote(client, RPC_URL, username="user", password="secret").start()

    assert seen[0].startswith("Basic ")


def test_second_run_does_not_restart_previous_torrents(remote, server):
    server.responses["torrent-add"] = {
        "result": "success",
        "arguments": {"torrent-added": {"id": 1, "hashString": "run1"}},
    }
    remote.start()
    remote.add_torrents("magnet:?xt=urn:btih:RUN1")
    remote.start_torrents()

    server.requests.clear()
    remote.start()
    remote.start_torrents()

    assert server.requests == [
        {"method": "session-get"},
        {"method": "torrent-start"},
    ]
