"""Output layer - Text scores, statistics, and tier placement.

This layer handles:
- Rendering sound events into the text score format
- Per-file statistics and the shared statistics log
- Copying fully playable scores into tier folders
"""

from .score import RenderedLine, ScoreRenderer, render, format_line, format_score
from .stats import Statistics, StatsLog, Tier, classify, report
from .placement import TierPlacer

__all__ = [
    "RenderedLine",
    "ScoreRenderer",
    "render",
    "format_line",
    "format_score",
    "Statistics",
    "StatsLog",
    "Tier",
    "classify",
    "report",
    "TierPlacer",
]
