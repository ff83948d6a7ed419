"""Exception classes raised by salesboard."""


class SalesboardError(Exception):
    """Base exception for salesboard."""
    pass


class ConfigError(SalesboardError):
    """Configuration could not be loaded or is invalid."""
    pass


class DatasetError(SalesboardError):
    """The upstream snapshot could not be turned into transactions."""
    pass


class DatasetFetchError(DatasetError):
    """Network, HTTP or JSON decoding failure while fetching a snapshot."""
    pass


class DatasetFormatError(DatasetError):
    """The snapshot payload or one of its records has the wrong shape."""
    pass


class StoreError(SalesboardError):
    """The transaction store rejected a write."""
    pass
