"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class ConfigError(ServiceError):
    """Required configuration (API key, bot token) is missing."""


class InvalidArgument(ServiceError):
    pass


class CatalogError(ServiceError):
    pass


class ProviderError(CatalogError):
    """The catalog provider answered with a non-success HTTP status."""

    def __init__(self, status: int, status_text: str, body: str) -> None:
        self.status = status
        self.status_text = status_text
        self.body = body
        detail = body[:500] if body else ""
        super().__init__(f"Catalog request failed: {status} {status_text} - {detail}".rstrip(" -"))


class NetworkError(CatalogError):
    pass


class ResponseParseError(NetworkError):
    pass
