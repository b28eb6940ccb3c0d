from abc import ABC, abstractmethod
from typing import List
from graphite_stats.models.metrics import Sample
from graphite_stats.models.series import SeriesRecord

class BaseExtractor(ABC):
    @abstractmethod
    def extract(self, records: List[SeriesRecord]) -> List[Sample]:
        """Flatten decoded series records into samples"""
        pass
