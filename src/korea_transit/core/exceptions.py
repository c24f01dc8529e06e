"""Custom exceptions for Korea transit queries."""


class TransitError(Exception):
    """Base exception for transit query errors."""

    pass


class UpstreamError(TransitError):
    """Raised when an upstream feed cannot deliver usable records."""

    pass


class UpstreamTimeoutError(UpstreamError):
    """Raised when a feed fetch exceeds its time budget."""

    pass


class UpstreamTransportError(UpstreamError):
    """Raised when there's a network or HTTP-level error."""

    pass


class UpstreamPayloadError(UpstreamError):
    """Raised when a feed answers with an error code or an unreadable body."""

    pass


class InvalidArgumentError(TransitError):
    """Raised when tool arguments fail validation."""

    pass


class UnknownToolError(TransitError):
    """Raised when a tool name is not registered."""

    pass


class ConfigurationError(TransitError):
    """Raised when process configuration is invalid."""

    pass
