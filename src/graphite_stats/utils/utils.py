from typing import TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from graphite_stats.exceptions import DecodeError

T = TypeVar("T")

logger = structlog.get_logger(__name__)


def decode_json(s: str, *, adapter: TypeAdapter[T], source: str = "response") -> T:
    """Validate a JSON document against a pydantic type adapter"""
    if not s or not s.strip():
        raise DecodeError(f"Empty {source} body")
    try:
        return adapter.validate_json(s)
    except ValidationError as e:
        logger.debug("Failed to validate JSON", source=source, body=s[:200], error_count=e.error_count())
        raise DecodeError(f"Failed to parse {source}: {e.errors()[0]['msg']}") from e
