import math
from typing import Iterable

from graphite_stats.exceptions import EmptyInputError
from graphite_stats.models.metrics import MetricStatistics, Sample


def reduce_samples(samples: Iterable[Sample]) -> MetricStatistics:
    """Summarise a series in a single pass.

    Samples without a value are skipped, not counted as zero. Minimum and
    maximum are seeded from the first usable sample. Raises EmptyInputError
    when no sample carries a value.
    """
    count = 0
    total = 0.0
    sum_of_squares = 0.0
    maximum = minimum = 0.0

    for sample in samples:
        value = sample.value
        if value is None:
            continue
        if count == 0 or value > maximum:
            maximum = value
        if count == 0 or value < minimum:
            minimum = value
        total += value
        sum_of_squares += value * value
        count += 1

    if count == 0:
        raise EmptyInputError("no data points found")

    average = total / count
    # cancellation can push this slightly below zero
    variance = sum_of_squares / count - average * average

    return MetricStatistics(
        count=count,
        average=average,
        sum=total,
        maximum=maximum,
        minimum=minimum,
        standard_deviation=math.sqrt(max(variance, 0.0)),
    )
