"""Pydantic models for episodefetch data structures."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShowInfo(BaseModel):
    """Show metadata needed to find its latest episode."""

    model_config = ConfigDict(extra="forbid")

    title: str
    latest_season: int | None = Field(default=None, ge=1)
    # Only set by providers that expose the latest episode directly
    latest_episode: int | None = Field(default=None, ge=1)


class EpisodeEntry(BaseModel):
    """One entry of a season's episode listing."""

    model_config = ConfigDict(extra="forbid")

    airdate: str
    title: str | None = None


class EpisodeRef(BaseModel):
    """A specific episode of a specific show."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str
    season: int = Field(ge=1)
    episode: int = Field(ge=1)

    def __str__(self) -> str:
        return f"{self.title} S{self.season:02d}E{self.episode:02d}"


class TorrentResult(BaseModel):
    """A named search result from the torrent index."""

    model_config = ConfigDict(extra="forbid")

    name: str
    magnet_link: str

    @field_validator("magnet_link")
    @classmethod
    def check_magnet(cls, value: str) -> str:
        if not value.startswith("magnet:"):
            raise ValueError(f"Not a magnet link: {value}")
        return value


class ShowOutcome(str, Enum):
    """What happened to a show during one run."""

    QUEUED = "queued"
    ALREADY_PRESENT = "already_present"
    NOT_AIRED = "not_aired"
    NO_MATCH = "no_match"
    FAILED = "failed"


class ShowReport(BaseModel):
    """Outcome of processing a single show."""

    model_config = ConfigDict(extra="forbid")

    show_id: str
    outcome: ShowOutcome
    episode: EpisodeRef | None = None
    detail: str | None = None


class RunSummary(BaseModel):
    """Ordered reports for every show processed in a run."""

    reports: list[ShowReport] = Field(default_factory=list)

    def count(self, outcome: ShowOutcome) -> int:
        return sum(1 for report in self.reports if report.outcome == outcome)

    @property
    def queued(self) -> int:
        return self.count(ShowOutcome.QUEUED)
