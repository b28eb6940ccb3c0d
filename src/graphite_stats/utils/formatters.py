from enum import Enum
from slugify import slugify

from graphite_stats.utils.metric_path import MetricPath

class MetricNameFormat(Enum):
    RAW = "raw"
    TITLE = "title"
    UPPER = "upper"
    SLUG = "slug"

def metric_key(path: MetricPath, format_style: MetricNameFormat = MetricNameFormat.RAW) -> str:
    """Report key for a metric: its last path segment, optionally reformatted.

    Distinct paths can share a key (``a.b.cpu`` and ``x.y.cpu`` both map to
    ``cpu``); callers writing keys into one mapping get last-write-wins.
    """
    name = path.last_segment()
    if format_style == MetricNameFormat.TITLE:
        return name.replace('_', ' ').title()
    elif format_style == MetricNameFormat.UPPER:
        return name.upper()
    elif format_style == MetricNameFormat.SLUG:
        return slugify(name)
    return name
