"""
Exception hierarchy for RSS Discord.

Fatal errors abort a run; delivery errors are reported per item.
"""


class RSSDiscordError(Exception):
    """Base class for all application errors."""


class ConfigError(RSSDiscordError):
    """Raised when the configuration file cannot be loaded or validated."""


class CursorReadError(RSSDiscordError):
    """Raised when an existing timestamp file cannot be read or parsed."""


class CursorWriteError(RSSDiscordError):
    """Raised when the timestamp file cannot be written."""


class FeedFetchError(RSSDiscordError):
    """Raised when the feed cannot be fetched or parsed."""


class DeliveryError(RSSDiscordError):
    """Raised when a message could not be delivered to the webhook."""


class DeliveryStatusError(DeliveryError):
    """
    The webhook answered with a status other than 204 No Content.

    Attributes
    ----------
    status : int
        HTTP status code returned by the endpoint.
    body : str
        Start of the response body, for diagnostics.
    """

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        message = f"unexpected status code: {status}"
        if body:
            message = f"{message} ({body})"
        super().__init__(message)


class DeliveryNetworkError(DeliveryError):
    """The webhook could not be reached (connection, DNS or timeout failure)."""
