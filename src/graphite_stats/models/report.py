from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from pydantic import RootModel

from graphite_stats.models.metrics import MetricStatistics, ServerStatistics


@dataclass
class BranchFailure:
    """A recoverable failure recorded while walking one server or metric"""
    server: str
    stage: str
    error: str
    metric: Optional[str] = None


@dataclass
class WalkResult:
    servers: List[Tuple[str, ServerStatistics]] = field(default_factory=list)
    failures: List[BranchFailure] = field(default_factory=list)


class Report(RootModel[List[Dict[str, Dict[str, MetricStatistics]]]]):
    """Ordered list of single-entry {server: {metric: statistics}} mappings"""

    def server_names(self) -> List[str]:
        return [name for entry in self.root for name in entry]
