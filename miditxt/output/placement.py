"""Tier placement - duplicate fully playable scores into classification folders."""

import shutil
from pathlib import Path
from typing import List, Union

from ..core.constants import DEFAULT_FULL_DIR, DEFAULT_PERFECT_DIR
from .stats import Statistics, Tier


class TierPlacer:
    """Copy converted scores into the full/perfect directories."""

    def __init__(
        self,
        full_dir: Union[str, Path] = DEFAULT_FULL_DIR,
        perfect_dir: Union[str, Path] = DEFAULT_PERFECT_DIR,
    ):
        self.full_dir = Path(full_dir)
        self.perfect_dir = Path(perfect_dir)

    def directory_for(self, tier: Tier) -> Path:
        return self.perfect_dir if tier is Tier.PERFECT else self.full_dir

    def place(self, score_path: Union[str, Path], stats: Statistics) -> List[Path]:
        """
        Copy a score into every tier directory it qualifies for.

        Directories are created on demand; existing copies are overwritten.

        Args:
            score_path: Converted text score
            stats: Statistics of that conversion

        Returns:
            Paths of the copies made
        """
        score_path = Path(score_path)
        placed: List[Path] = []

        for tier in (Tier.FULL, Tier.PERFECT):
            if tier not in stats.tiers:
                continue
            directory = self.directory_for(tier)
            directory.mkdir(parents=True, exist_ok=True)
            destination = directory / score_path.name
            shutil.copyfile(score_path, destination)
            placed.append(destination)

        return placed
