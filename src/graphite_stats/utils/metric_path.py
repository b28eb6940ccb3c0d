from dataclasses import dataclass
from typing import Tuple

SEPARATOR = "."


@dataclass(frozen=True)
class MetricPath:
    """A dotted Graphite path such as ``base.server.snmp.cpu``"""

    segments: Tuple[str, ...]

    def __post_init__(self):
        if not self.segments:
            raise ValueError("Metric path must have at least one segment")
        if any(not segment for segment in self.segments):
            raise ValueError(f"Metric path has an empty segment: {self.segments!r}")

    @classmethod
    def parse(cls, path: str) -> "MetricPath":
        # branch nodes may be reported with a trailing separator
        return cls(tuple(path.rstrip(SEPARATOR).split(SEPARATOR)))

    def last_segment(self) -> str:
        return self.segments[-1]

    def child(self, *segments: str) -> "MetricPath":
        return MetricPath(self.segments + tuple(s for s in segments if s))

    def glob(self) -> str:
        """Discovery query matching the immediate children of this path"""
        return f"{self}{SEPARATOR}*"

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)
