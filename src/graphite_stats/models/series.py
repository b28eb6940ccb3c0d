from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter


class PathEntry(BaseModel):
    """One node returned by a metrics/find discovery query"""

    model_config = ConfigDict(extra="ignore")

    path: str


class SeriesRecord(BaseModel):
    """One target returned by a render range query"""

    model_config = ConfigDict(extra="ignore")

    target: str
    # opaque, passed through untouched
    tags: Any = None
    datapoints: List[List[Optional[float]]] = []


PathEntryList = TypeAdapter(List[PathEntry])
SeriesRecordList = TypeAdapter(List[SeriesRecord])
