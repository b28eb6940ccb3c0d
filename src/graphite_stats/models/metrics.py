from dataclasses import dataclass
from typing import Dict, Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Sample:
    timestamp: int
    value: Optional[float] = None


class MetricStatistics(BaseModel):
    count: int = Field(ge=0)
    average: float
    sum: float
    maximum: float
    minimum: float
    standard_deviation: float


ServerStatistics = Dict[str, MetricStatistics]
