"""
physics_core.py: The deterministic kinematic functions and collision logic.
"""

from typing import Optional, Sequence

from .constants import LANE_MIN_X, LANE_MAX_X, VELOCITY_EPSILON
from .data_models import InputState, PlayerState, Obstacle


class PlayerKinematics:
    """
    Integrates steering input into the player's lateral position.
    All rates are per nominal frame and scaled by dt_ticks.
    """

    def __init__(self, lane_min_x: float = LANE_MIN_X, lane_max_x: float = LANE_MAX_X):
        self.lane_min_x = lane_min_x
        self.lane_max_x = lane_max_x

    def steer(self, velocity: float, direction: int, player: PlayerState, dt_ticks: float) -> float:
        """
        Accelerates toward direction (-1 left, +1 right).
        Motion the other way is braked toward zero first.
        """
        if velocity * direction < 0:
            braking = player.deceleration_rate * dt_ticks * 2
            if direction < 0:
                velocity = max(0.0, velocity - braking)
            else:
                velocity = min(0.0, velocity + braking)
        return velocity + direction * player.acceleration * dt_ticks

    def coast(self, velocity: float, player: PlayerState, dt_ticks: float) -> float:
        """Exponential friction decay, snapping near-zero velocities to rest."""
        velocity *= player.friction ** dt_ticks
        if abs(velocity) < VELOCITY_EPSILON:
            velocity = 0.0
        return velocity

    def update(self, player: PlayerState, controls: InputState, dt_ticks: float):
        """Single-tick update. Mutates the player state."""
        velocity = player.velocity

        # 1. Apply steering or friction
        if controls.steer_left:
            velocity = self.steer(velocity, -1, player, dt_ticks)
        elif controls.steer_right:
            velocity = self.steer(velocity, 1, player, dt_ticks)
        else:
            velocity = self.coast(velocity, player, dt_ticks)

        # 2. Limit velocity
        velocity = max(-player.max_speed, min(player.max_speed, velocity))

        # 3. Move and keep the car on the road
        x = player.x + velocity * dt_ticks
        player.x = max(self.lane_min_x, min(x, self.lane_max_x - player.width))
        player.velocity = velocity


def boxes_overlap(ax: float, ay: float, aw: float, ah: float,
                  bx: float, by: float, bw: float, bh: float) -> bool:
    """Axis-aligned bounding box overlap. Touching edges do not overlap."""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


class CollisionDetector:
    """Finds the first obstacle the player is touching."""

    def check(self, player: PlayerState, obstacles: Sequence[Obstacle]) -> Optional[Obstacle]:
        for obstacle in obstacles:
            if boxes_overlap(player.x, player.y, player.width, player.height,
                             obstacle.x, obstacle.y, obstacle.width, obstacle.height):
                return obstacle
        return None
