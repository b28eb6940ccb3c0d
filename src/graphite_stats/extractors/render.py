from typing import List
import structlog
from .base import BaseExtractor
from graphite_stats.exceptions import DecodeError
from graphite_stats.models.metrics import Sample
from graphite_stats.models.series import SeriesRecord

logger = structlog.get_logger(__name__)

class RenderExtractor(BaseExtractor):
    """Extracts samples from a Graphite /render?format=json payload.

    Each record carries ``datapoints`` as ``[value, timestamp]`` pairs. All
    records returned for one target are concatenated in response order, so a
    wildcard target that expands to several series is reduced as one series.
    """

    def extract(self, records: List[SeriesRecord]) -> List[Sample]:
        results = []
        for record in records:
            for point in record.datapoints:
                if len(point) != 2:
                    raise DecodeError(f"Malformed datapoint in {record.target}: {point!r}")
                value, timestamp = point
                if timestamp is None:
                    raise DecodeError(f"Datapoint without timestamp in {record.target}")
                results.append(Sample(timestamp=int(timestamp), value=value))
        logger.debug(f"Extracted {len(results)} samples from {len(records)} series")
        return results
