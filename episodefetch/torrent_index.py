import logging
import re

import httpx
from bs4 import BeautifulSoup

from .models import TorrentResult

logger = logging.getLogger(__name__)


class TorrentIndexClient:
    """Search client for a Nyaa-compatible torrent index."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str = "https://nyaa.si",
        category: str = "0_0",
        filter_type: str = "0",
    ):
        self.client = client
        self.base_url = base_url
        self.category = category
        self.filter_type = filter_type

    def fetch_results_page(self, term: str) -> str:
        """Fetch the HTML search results page for a term."""
        params = {
            "q": term,
            "c": self.category,
            "f": self.filter_type,
        }

        try:
            response = self.client.get(self.base_url, params=params)
            response.raise_for_status()
            return response.text
        except Exception as e:
            logger.error(f"Failed to search for '{term}': {e}")
            raise

    def search(self, term: str) -> list[TorrentResult]:
        """Search the index, returning results in the order the index lists them."""
        html = self.fetch_results_page(term)
        results = self.parse_results_page(html)
        logger.debug(f"Search for '{term}' returned {len(results)} results")
        return results

    def parse_results_page(self, html: str) -> list[TorrentResult]:
        """Parse the torrent table of a results page."""
        soup = BeautifulSoup(html, "lxml")

        table = soup.find("table", class_="torrent-list")
        if not table:
            logger.debug("No torrent table found in HTML")
            return []

        tbody = table.find("tbody")
        if not tbody:
            logger.warning("No tbody found in torrent table")
            return []

        results = []
        for row in tbody.find_all("tr"):
            result = self._parse_table_row(row)
            if result:
                results.append(result)

        return results

    def _parse_table_row(self, row) -> TorrentResult | None:
        """Extract name and magnet link from a single table row."""
        cells = row.find_all("td")
        if len(cells) < 3:
            logger.warning(f"Row has {len(cells)} cells, expected at least 3")
            return None

        # Column 1: name, Column 2: download/magnet links
        view_link = None
        for link in cells[1].find_all("a", href=re.compile(r"/view/\d+")):
            href = link.get("href", "")
            classes = link.get("class", [])

            if "#comments" in href or "comments" in classes:
                continue

            view_link = link
            break

        if not view_link:
            logger.warning("No view link found in name cell")
            return None

        name = view_link.get("title") or view_link.get_text().strip()

        magnet = cells[2].find("a", href=re.compile(r"^magnet:"))
        if not magnet:
            logger.warning(f"No magnet link found for '{name}'")
            return None

        return TorrentResult(name=name, magnet_link=magnet["href"])
