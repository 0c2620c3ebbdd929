"""
scoring.py: Points for passed traffic and the best-score bookkeeping.
"""

import logging
from typing import List

from .constants import SCREEN_HEIGHT, POINTS_NORMAL, POINTS_BOOST
from .data_models import Obstacle, ScoreState

logger = logging.getLogger(__name__)


class ScoreEngine:
    """
    Owns the ScoreState. The best score is loaded from `store` on creation
    and written back only when an episode beats it.
    """

    def __init__(self, store=None, play_height: float = SCREEN_HEIGHT):
        self.store = store
        self.play_height = play_height
        best = store.get_best() if store is not None else 0
        self.state = ScoreState(current=0, best=best)

    @property
    def current(self) -> int:
        return self.state.current

    @property
    def best(self) -> int:
        return self.state.best

    def reap_passed(self, obstacles: List[Obstacle], boost: bool) -> int:
        """
        Removes obstacles below the play area in place and awards points
        for each one. Returns the points awarded.
        """
        per_obstacle = POINTS_BOOST if boost else POINTS_NORMAL
        kept = [o for o in obstacles if o.y <= self.play_height]
        points = (len(obstacles) - len(kept)) * per_obstacle
        if points:
            obstacles[:] = kept
            self.state.current += points
        return points

    def on_episode_end(self) -> int:
        """Reconciles best with the finished episode and persists a new record."""
        if self.state.current > self.state.best:
            self.state.best = self.state.current
            logger.info("New best score: %d", self.state.best)
            if self.store is not None and not self.store.set_best(self.state.best):
                logger.warning("Best score %d was not persisted", self.state.best)
        return self.state.best

    def reset(self):
        self.state.current = 0
