"""Exception classes for the Pub/Sub tools."""

from concurrent import futures

from google.api_core import exceptions as gexc


class PubSubToolsError(Exception):
    """Base exception for all pubsub_tools errors."""
    pass


class ConfigError(PubSubToolsError):
    """Invalid or missing configuration."""
    pass


class TransportError(PubSubToolsError):
    """Network or service failure talking to Pub/Sub."""
    pass


class Cancelled(TransportError):
    """Call abandoned because its deadline expired."""
    pass


class AlreadyExists(PubSubToolsError):
    """Topic already exists."""
    pass


class NotFound(PubSubToolsError):
    """Topic does not exist."""
    pass


class PayloadTooLarge(PubSubToolsError):
    """Message payload is over the service size limit."""
    pass


def translate(exc, action):
    """Map a google.api_core / future exception onto the pubsub_tools taxonomy.

    Returns the new exception; the caller raises it ``from exc``.
    """
    detail = '{} failed: {}'.format(action, exc)

    if isinstance(exc, (gexc.AlreadyExists, gexc.Conflict)):
        return AlreadyExists(detail)
    if isinstance(exc, gexc.NotFound):
        return NotFound(detail)
    if isinstance(exc, (gexc.DeadlineExceeded, gexc.Cancelled, futures.TimeoutError)):
        return Cancelled(detail)
    return TransportError(detail)
