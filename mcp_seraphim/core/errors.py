"""
Core errors

Only NotFoundError and UpstreamUnavailableError cross the core boundary.
StorageUnavailableError is raised by durable stores and absorbed by the cache.
"""


class SeraphimError(Exception):
    """Base class for catalog errors"""


class NotFoundError(SeraphimError):
    """Requested document or brand is absent from the listing"""


class UpstreamUnavailableError(SeraphimError):
    """Network failure, rate limiting or missing credentials"""


class StorageUnavailableError(SeraphimError):
    """Durable tier can't be read or written (quota, disabled storage)"""
