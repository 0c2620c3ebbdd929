"""
data_models.py: Data structures for the game state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .constants import (
    PLAYER_START_X, PLAYER_Y, PLAYER_WIDTH, PLAYER_HEIGHT,
    MAX_SPEED, ACCELERATION, FRICTION, DECELERATION_RATE, TILT_FACTOR
)


class GameState(Enum):
    """Lifecycle of a single game episode."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVER = "over"


@dataclass
class InputState:
    """
    Snapshot of the player's controls, written by input adapters and only
    read by the core. pause_toggle and restart are one-shot requests.
    """
    steer_left: bool = False
    steer_right: bool = False
    boost: bool = False
    pause_toggle: bool = False
    restart: bool = False

    def any_drive(self) -> bool:
        """True when any input that starts a run is held."""
        return self.steer_left or self.steer_right or self.boost

    def clear_actions(self):
        self.pause_toggle = False
        self.restart = False


@dataclass
class PlayerState:
    """The player's car. x/y are the top-left corner of its box."""
    x: float = PLAYER_START_X
    y: float = PLAYER_Y
    width: float = PLAYER_WIDTH
    height: float = PLAYER_HEIGHT
    velocity: float = 0.0

    # Tunable physics
    max_speed: float = MAX_SPEED
    acceleration: float = ACCELERATION
    friction: float = FRICTION
    deceleration_rate: float = DECELERATION_RATE

    @property
    def tilt(self) -> float:
        """Orientation hint for renderers, proportional to velocity."""
        return self.velocity * TILT_FACTOR

    def reset(self):
        self.x = PLAYER_START_X
        self.y = PLAYER_Y
        self.velocity = 0.0


@dataclass
class Obstacle:
    """An oncoming car. x is fixed for its lifetime; y only grows."""
    x: float
    y: float
    width: float = PLAYER_WIDTH
    height: float = PLAYER_HEIGHT
    speed_multiplier: float = 1.0

    @property
    def fast(self) -> bool:
        return self.speed_multiplier > 1.0


@dataclass
class ScoreState:
    current: int = 0
    best: int = 0


@dataclass
class LeaderboardEntry:
    """
    A submitted score. time is epoch milliseconds. Scores are whole numbers
    when the game submits them; stored floats are still read back.
    """
    name: str
    score: Union[int, float]
    time: Union[int, float]

    def to_dict(self):
        """Prepares the entry for JSON serialization."""
        return {"name": self.name, "score": self.score, "time": self.time}


@dataclass(frozen=True)
class ObstacleView:
    x: float
    y: float
    width: float
    height: float
    fast: bool


@dataclass(frozen=True)
class RenderSnapshot:
    """Read-only view of one tick, handed to the RenderSink."""
    state: GameState
    player_x: float
    player_y: float
    player_width: float
    player_height: float
    player_tilt: float
    obstacles: List[ObstacleView] = field(default_factory=list)
    score: int = 0
    best: int = 0
    boosting: bool = False
    road_offset: float = 0.0


@dataclass
class TickResult:
    """What happened during one step of the pipeline."""
    snapshot: RenderSnapshot
    transition: Optional[tuple] = None     # (old_state, new_state)
    spawned: Optional[Obstacle] = None
    collided_with: Optional[Obstacle] = None
    points: int = 0
