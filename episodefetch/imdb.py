import logging
import re

import httpx
from bs4 import BeautifulSoup

from .errors import MetadataError
from .models import EpisodeEntry, ShowInfo

logger = logging.getLogger(__name__)

# "Breaking Bad (TV Series 2008–2013) ⭐ 9.5 | Crime, Drama" -> "Breaking Bad (TV Series 2008–2013)"
TITLE_RATING_RE = re.compile(r"\s+(⭐|\|).*$")
# "Breaking Bad (TV Series 2008–2013) - IMDb" -> "Breaking Bad"
TITLE_SUFFIX_RE = re.compile(r"\s*(\([^)]*\))?\s*(- IMDb)?\s*$")
SEASON_LINK_RE = re.compile(r"[?&]season=(\d+)")


class ImdbClient:
    """Scrapes show and episode listings from IMDb title pages."""

    def __init__(self, client: httpx.Client, base_url: str = "https://www.imdb.com"):
        self.client = client
        self.base_url = base_url.rstrip("/")

    def fetch_episodes_page(self, show_id: str, season: int | None = None) -> str:
        """Fetch the episode guide of a show, optionally for one season."""
        url = f"{self.base_url}/title/{show_id}/episodes"
        params = {"season": str(season)} if season is not None else None

        try:
            response = self.client.get(url, params=params)
            response.raise_for_status()
            return response.text
        except Exception as e:
            logger.error(f"Failed to fetch episodes page for {show_id}: {e}")
            raise

    def get_show_info(self, show_id: str) -> ShowInfo:
        """Title and latest season of a show."""
        html = self.fetch_episodes_page(show_id)
        return self.parse_show_info(html, show_id)

    def get_season_episodes(self, show_id: str, season: int) -> dict[int, EpisodeEntry]:
        """Episode number to air date listing of one season."""
        html = self.fetch_episodes_page(show_id, season)
        return self.parse_season_episodes(html)

    def parse_show_info(self, html: str, show_id: str = "") -> ShowInfo:
        soup = BeautifulSoup(html, "lxml")

        title = self._parse_title(soup)
        if not title:
            raise MetadataError(f"No title found for show {show_id}")

        seasons = self._parse_seasons(soup)
        if not seasons:
            raise MetadataError(f"No seasons found for show {show_id}")

        return ShowInfo(title=title, latest_season=max(seasons))

    def parse_season_episodes(self, html: str) -> dict[int, EpisodeEntry]:
        soup = BeautifulSoup(html, "lxml")

        episodes = {}
        for item in soup.find_all("div", class_="list_item"):
            number_meta = item.find("meta", itemprop="episodeNumber")
            try:
                number = int(number_meta["content"])
            except (TypeError, KeyError, ValueError):
                logger.warning("Skipping episode item without a numeric episode number")
                continue

            airdate_div = item.find("div", class_="airdate")
            airdate = airdate_div.get_text().strip() if airdate_div else ""

            name_link = item.find("a", itemprop="name")
            name = name_link.get_text().strip() if name_link else None

            episodes[number] = EpisodeEntry(airdate=airdate, title=name)

        return episodes

    def _parse_title(self, soup: BeautifulSoup) -> str | None:
        og_title = soup.find("meta", property="og:title")
        if og_title and og_title.get("content"):
            text = og_title["content"]
        else:
            heading = soup.find("h1")
            if not heading:
                return None
            text = heading.get_text()

        title = TITLE_RATING_RE.sub("", text.strip())
        title = TITLE_SUFFIX_RE.sub("", title)
        return title or None

    def _parse_seasons(self, soup: BeautifulSoup) -> set[int]:
        seasons = set()

        selector = soup.find("select", id="bySeason")
        if selector:
            for option in selector.find_all("option"):
                value = option.get("value", "").strip()
                if value.isdigit():
                    seasons.add(int(value))

        if not seasons:
            for link in soup.find_all("a", href=SEASON_LINK_RE):
                seasons.add(int(SEASON_LINK_RE.search(link["href"]).group(1)))

        # Season 0 is not a real season
        seasons.discard(0)
        return seasons
