"""Processing layer - Chord aggregation and transpose search.

This layer turns decoded notes into something renderable:
- Aggregation (merge near-simultaneous notes into sound events)
- Transpose optimization (pick the best semitone shift)
"""

from .aggregate import EventAggregator, aggregate, flatten
from .transpose import ShiftConfig, ShiftOptimizer, ShiftResult, optimize

__all__ = [
    "EventAggregator",
    "aggregate",
    "flatten",
    "ShiftConfig",
    "ShiftOptimizer",
    "ShiftResult",
    "optimize",
]
