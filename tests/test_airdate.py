from datetime import date

import pytest

from episodefetch.airdate import (
    aired_episodes,
    has_aired,
    latest_aired_episode,
    parse_airdate,
)
from episodefetch.errors import AirDateError
from episodefetch.models import EpisodeEntry

TODAY = date(2024, 3, 1)


def test_parse_airdate():
    assert parse_airdate("Jan 5, 2024") == date(2024, 1, 5)
    assert parse_airdate("Sep. 12, 2023") == date(2023, 9, 12)
    assert parse_airdate("dec 31, 1999") == date(1999, 12, 31)


@pytest.mark.parametrize(
    "text",
    [
        "Feb 30, 2024",
        "2024-01-05",
        "January 5, 2024",
        "Jan 5 2024",
        "Xyz 5, 2024",
        " Jan 5, 2024",
        "",
    ],
)
def test_parse_airdate_rejects(text):
    with pytest.raises(AirDateError):
        parse_airdate(text)


def test_airdate_error_is_value_error():
    with pytest.raises(ValueError):
        parse_airdate("2024")


def test_has_aired():
    assert has_aired("Jan 5, 2024", TODAY)
    assert has_aired("Feb 29, 2024", TODAY)
    # Today and later have not aired yet
    assert not has_aired("Mar 1, 2024", TODAY)
    assert not has_aired("Mar 2, 2024", TODAY)
    assert not has_aired("Feb 30, 2024", TODAY)


def test_aired_episodes_filters_malformed_and_future():
    episodes = {
        1: EpisodeEntry(airdate="Jan 5, 2024"),
        2: EpisodeEntry(airdate="Feb 30, 2024"),
        3: EpisodeEntry(airdate="Mar 2, 2024"),
        4: EpisodeEntry(airdate="2024"),
    }
    assert list(aired_episodes(episodes, TODAY)) == [1]


def test_latest_aired_episode_skips_future():
    episodes = {
        1: EpisodeEntry(airdate="Jan 5, 2024"),
        2: EpisodeEntry(airdate="Jan 12, 2024"),
        3: EpisodeEntry(airdate="Mar 8, 2024"),
    }
    assert latest_aired_episode(episodes, TODAY) == 2


def test_latest_aired_episode_uses_highest_number():
    episodes = {
        10: EpisodeEntry(airdate="Jan 5, 2024"),
        2: EpisodeEntry(airdate="Jan 12, 2024"),
    }
    assert latest_aired_episode(episodes, TODAY) == 10


def test_latest_aired_episode_none_aired():
    episodes = {
        1: EpisodeEntry(airdate="Mar 8, 2024"),
        2: EpisodeEntry(airdate=""),
    }
    assert latest_aired_episode(episodes, TODAY) is None
    assert latest_aired_episode({}, TODAY) is None
