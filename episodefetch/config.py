import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Configuration settings for episodefetch."""

    # Shows
    shows: list[str] = Field(
        default_factory=list, description="IMDb identifiers of the shows to track"
    )
    download_path: str = Field(
        default="downloads", description="Directory episodes are downloaded to"
    )

    # Metadata
    imdb_url: str = Field(
        default="https://www.imdb.com", description="Base URL for IMDb title pages"
    )

    # Torrent index
    index_url: str = Field(
        default="https://nyaa.si", description="Base URL of the torrent index"
    )
    index_category: str = Field(
        default="0_0", description="Torrent index category to search"
    )
    index_filter: str = Field(
        default="0", description="Torrent index filter (0 = none, 2 = trusted only)"
    )

    # Transmission
    transmission_url: str = Field(
        default="http://localhost:9091/transmission/rpc",
        description="Transmission RPC endpoint",
    )
    transmission_username: str = Field(
        default="", description="Transmission RPC username"
    )
    transmission_password: str = Field(
        default="", description="Transmission RPC password"
    )

    # HTTP
    http_timeout_seconds: float = Field(
        default=30.0, description="Timeout for every HTTP request in seconds"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    class Config:
        env_prefix = "EPISODEFETCH_"
        case_sensitive = False


def validate_download_path(path: str | os.PathLike[str]) -> Path:
    """Resolve the download path, making sure it is an existing writable directory."""
    download_path = Path(path).expanduser().resolve()
    if not download_path.is_dir() or not os.access(download_path, os.W_OK):
        raise ConfigurationError(
            f"Path does not exist or is not writable: {download_path}"
        )
    return download_path


settings = Settings()
