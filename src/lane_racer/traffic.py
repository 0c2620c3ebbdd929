"""
traffic.py: Procedural spawning and movement of oncoming traffic.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .constants import (
    LANE_MIN_X, LANE_MAX_X, PLAYER_WIDTH, PLAYER_HEIGHT,
    BASE_SPAWN_INTERVAL_MS, SPAWN_REDUCTION_PER_POINT_MS, MAX_SPAWN_REDUCTION_MS,
    MIN_SPAWN_INTERVAL_MS, MIN_SPACING, SPAWN_ATTEMPTS,
    FAST_OBSTACLE_CHANCE, FAST_SPEED_MULTIPLIER, SPEED_NORMAL, SPEED_BOOST
)
from .data_models import Obstacle

logger = logging.getLogger(__name__)


def spawn_interval(score: int) -> float:
    """Milliseconds between spawns; shrinks with score down to a floor."""
    reduction = min(score * SPAWN_REDUCTION_PER_POINT_MS, MAX_SPAWN_REDUCTION_MS)
    return max(BASE_SPAWN_INTERVAL_MS - reduction, MIN_SPAWN_INTERVAL_MS)


def traffic_speed(boost: bool) -> float:
    return SPEED_BOOST if boost else SPEED_NORMAL


@dataclass
class TrafficSpawner:
    """
    Places new obstacles above the visible track on a score-dependent timer.

    Placement is best-effort: a candidate too close to an existing obstacle is
    resampled up to `attempts` times, after which the last sample is kept.
    """
    lane_min_x: float = LANE_MIN_X
    lane_max_x: float = LANE_MAX_X
    width: float = PLAYER_WIDTH
    height: float = PLAYER_HEIGHT
    min_spacing: float = MIN_SPACING
    attempts: int = SPAWN_ATTEMPTS
    fast_chance: float = FAST_OBSTACLE_CHANCE
    rng: random.Random = field(default_factory=random.Random)
    last_spawn_time: float = 0.0

    def reset_clock(self, now: float):
        self.last_spawn_time = now

    def is_clear(self, x: float, obstacles: Sequence[Obstacle]) -> bool:
        """True when x keeps the minimum lateral gap to every obstacle."""
        gap = self.width + self.min_spacing
        return all(abs(o.x - x) >= gap for o in obstacles)

    def pick_x(self, obstacles: Sequence[Obstacle]) -> float:
        low, high = self.lane_min_x, self.lane_max_x - self.width
        x = low
        for _ in range(self.attempts):
            x = low + self.rng.random() * (high - low)
            if self.is_clear(x, obstacles):
                return x
        logger.debug("No clear lane after %d attempts, spawning at x=%.1f", self.attempts, x)
        return x

    def spawn(self, obstacles: List[Obstacle]) -> Obstacle:
        """Creates a new obstacle just above the track and appends it."""
        x = self.pick_x(obstacles)
        multiplier = FAST_SPEED_MULTIPLIER if self.rng.random() < self.fast_chance else 1.0
        obstacle = Obstacle(x=x, y=-self.height, width=self.width, height=self.height,
                            speed_multiplier=multiplier)
        obstacles.append(obstacle)
        return obstacle

    def maybe_spawn(self, now: float, score: int, obstacles: List[Obstacle]) -> Optional[Obstacle]:
        """Spawns one obstacle if the current interval has elapsed."""
        if now - self.last_spawn_time < spawn_interval(score):
            return None
        self.last_spawn_time = now
        return self.spawn(obstacles)


def advance(obstacles: Sequence[Obstacle], boost: bool, dt_ticks: float):
    """Moves every obstacle down the track. Boosting closes in faster."""
    delta_y = traffic_speed(boost) * dt_ticks
    for obstacle in obstacles:
        obstacle.y += delta_y * obstacle.speed_multiplier
