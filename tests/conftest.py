from unittest.mock import Mock

import pytest
from whenever import Instant

from episodefetch.models import ShowInfo, TorrentResult


@pytest.fixture
def fixed_time():
    """Provide a fixed time for testing (midday UTC on 2024-03-01)."""
    return Instant.from_utc(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def library(tmp_path):
    """Empty download directory."""
    path = tmp_path / "library"
    path.mkdir()
    return path


@pytest.fixture
def metadata():
    """Metadata provider exposing one show with a known latest episode."""
    provider = Mock()
    provider.get_show_info.return_value = ShowInfo(
        title="Example", latest_season=1, latest_episode=3
    )
    return provider


@pytest.fixture
def index():
    """Torrent index returning one matching result."""
    client = Mock()
    client.search.return_value = [
        TorrentResult(name="Example S01E03 720p HDTV", magnet_link="magnet:?xt=urn:btih:ABC")
    ]
    return client


@pytest.fixture
def remote():
    """Download manager recording every call."""
    return Mock()
