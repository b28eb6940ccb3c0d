from typing import Optional


class GraphiteStatsError(Exception):
    """Base class for all errors raised by graphite_stats"""


class ConfigurationError(GraphiteStatsError):
    """Required configuration is missing or invalid"""


class TransportError(GraphiteStatsError):
    """A request to the store failed or returned a non-2xx status"""

    def __init__(self, message: str, status: Optional[int] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.status = status
        self.cause = cause


class DecodeError(GraphiteStatsError):
    """A response body could not be parsed into the expected shape"""


class EmptyInputError(GraphiteStatsError):
    """A series contained no usable samples"""


class SerializationError(GraphiteStatsError):
    """The final report could not be serialized"""
