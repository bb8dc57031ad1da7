"""Custom exceptions for episodefetch."""


class EpisodeFetchError(Exception):
    """Base exception for all episodefetch errors."""

    pass


class ConfigurationError(EpisodeFetchError):
    """Invalid configuration, such as an unusable download path."""

    pass


class MetadataError(EpisodeFetchError):
    """Metadata provider returned something that cannot be interpreted."""

    pass


class AirDateError(EpisodeFetchError, ValueError):
    """Air date text is not in the expected format or names an impossible date."""

    pass


class DownloadManagerError(EpisodeFetchError):
    """Download manager RPC call failed or was rejected."""

    pass
