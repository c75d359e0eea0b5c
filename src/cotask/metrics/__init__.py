"""cotask metrics.

Lifetime counters of scheduler activity.
"""

from cotask.metrics.accumulator import StatsAccumulator

__all__ = ["StatsAccumulator"]
