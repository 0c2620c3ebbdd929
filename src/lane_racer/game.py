"""
game.py: The game world and the per-tick pipeline that drives it.

The Game owns one GameWorld and moves it through the lifecycle

    IDLE -> RUNNING <-> PAUSED
            RUNNING -> OVER -> IDLE

Only a RUNNING tick touches the player, the traffic or the score. Hosts drive
the game either by calling `step` with their own time values (tests) or by
handing `tick` to a Scheduler (the pygame client).
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

from .clock import FrameClock
from .constants import ROAD_SCROLL_FACTOR, SCREEN_HEIGHT
from .data_models import (
    GameState, InputState, PlayerState, Obstacle, ObstacleView,
    RenderSnapshot, TickResult
)
from .physics_core import PlayerKinematics, CollisionDetector
from .scoring import ScoreEngine
from .traffic import TrafficSpawner, advance, traffic_speed

logger = logging.getLogger(__name__)


class RenderSink(Protocol):
    def render(self, snapshot: RenderSnapshot) -> None: ...


class Scheduler(Protocol):
    def run(self, tick_fn: Callable[[], bool]) -> None:
        """Calls tick_fn once per frame until it returns False or the host stops."""
        ...


@dataclass
class GameWorld:
    """Everything a single game instance mutates."""
    player: PlayerState = field(default_factory=PlayerState)
    obstacles: List[Obstacle] = field(default_factory=list)
    state: GameState = GameState.IDLE
    road_offset: float = 0.0
    boosting: bool = False
    paused_at: Optional[float] = None


class Game:
    """
    Orchestrates kinematics, traffic, collision and scoring.

    Usage:
        game = Game(score_store=BestScoreStore(KeyValueStore()))
        result = game.step(controls, now_ms, dt_ticks)
        sink.render(result.snapshot)
    """

    def __init__(self, score_store=None, rng: Optional[random.Random] = None,
                 frame_clock: Optional[FrameClock] = None,
                 play_height: float = SCREEN_HEIGHT):
        self.world = GameWorld()
        self.kinematics = PlayerKinematics()
        self.collisions = CollisionDetector()
        self.spawner = TrafficSpawner(rng=rng or random.Random())
        self.score = ScoreEngine(score_store, play_height=play_height)
        self.frame_clock = frame_clock or FrameClock()

    @property
    def state(self) -> GameState:
        return self.world.state

    def _transition(self, new_state: GameState) -> tuple:
        old_state = self.world.state
        self.world.state = new_state
        logger.info("Game state %s -> %s", old_state.value, new_state.value)
        return old_state, new_state

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self, now: float) -> tuple:
        self.spawner.reset_clock(now)
        return self._transition(GameState.RUNNING)

    def pause(self, now: float) -> tuple:
        self.world.paused_at = now
        return self._transition(GameState.PAUSED)

    def resume(self, now: float) -> tuple:
        # Time spent paused does not count toward the next spawn.
        if self.world.paused_at is not None:
            self.spawner.last_spawn_time += max(0.0, now - self.world.paused_at)
        self.world.paused_at = None
        return self._transition(GameState.RUNNING)

    def end_episode(self) -> tuple:
        self.world.boosting = False
        self.score.on_episode_end()
        return self._transition(GameState.OVER)

    def restart(self, now: float) -> tuple:
        """Back to IDLE with a fresh player, empty road and zero score."""
        self.world.player.reset()
        self.world.obstacles.clear()
        self.world.road_offset = 0.0
        self.world.boosting = False
        self.world.paused_at = None
        self.score.reset()
        self.spawner.reset_clock(now)
        return self._transition(GameState.IDLE)

    # =========================================================================
    # TICK PIPELINE
    # =========================================================================

    def step(self, controls: InputState, now: float, dt_ticks: float) -> TickResult:
        """Advances the game by one tick and returns what happened."""
        world = self.world
        transition = None

        if world.state is GameState.OVER:
            if controls.restart:
                transition = self.restart(now)
            return TickResult(snapshot=self.snapshot(), transition=transition)

        if world.state is GameState.PAUSED:
            if controls.pause_toggle:
                transition = self.resume(now)
            return TickResult(snapshot=self.snapshot(), transition=transition)

        if world.state is GameState.IDLE:
            if not controls.any_drive():
                return TickResult(snapshot=self.snapshot())
            transition = self.start(now)
        elif controls.pause_toggle:
            return TickResult(snapshot=self.snapshot(), transition=self.pause(now))

        return self._running_step(controls, now, dt_ticks, transition)

    def _running_step(self, controls: InputState, now: float, dt_ticks: float,
                      transition: Optional[tuple]) -> TickResult:
        world = self.world
        world.boosting = controls.boost

        # 1. Player movement
        self.kinematics.update(world.player, controls, dt_ticks)

        # 2. Spawn and move traffic
        spawned = self.spawner.maybe_spawn(now, self.score.current, world.obstacles)
        advance(world.obstacles, controls.boost, dt_ticks)
        world.road_offset += traffic_speed(controls.boost) * ROAD_SCROLL_FACTOR * dt_ticks

        # 3. Collision ends the episode and freezes the world
        hit = self.collisions.check(world.player, world.obstacles)
        if hit is not None:
            transition = self.end_episode()
            return TickResult(snapshot=self.snapshot(), transition=transition,
                              spawned=spawned, collided_with=hit)

        # 4. Score passed traffic
        points = self.score.reap_passed(world.obstacles, controls.boost)
        return TickResult(snapshot=self.snapshot(), transition=transition,
                          spawned=spawned, points=points)

    def tick(self, controls: InputState) -> TickResult:
        """One step using the frame clock for time."""
        now, dt_ticks = self.frame_clock.tick()
        return self.step(controls, now, dt_ticks)

    def run(self, scheduler: Scheduler, controls: InputState, sink: RenderSink,
            on_tick: Optional[Callable[[TickResult], bool]] = None):
        """
        Hands the tick pipeline to the host's scheduler. `controls` is the
        shared InputState that the host's input adapter keeps current.
        """
        def tick_fn() -> bool:
            result = self.tick(controls)
            controls.clear_actions()
            sink.render(result.snapshot)
            if on_tick is not None:
                return on_tick(result)
            return True

        scheduler.run(tick_fn)

    def snapshot(self) -> RenderSnapshot:
        world = self.world
        player = world.player
        return RenderSnapshot(
            state=world.state,
            player_x=player.x,
            player_y=player.y,
            player_width=player.width,
            player_height=player.height,
            player_tilt=player.tilt,
            obstacles=[ObstacleView(o.x, o.y, o.width, o.height, o.fast) for o in world.obstacles],
            score=self.score.current,
            best=self.score.best,
            boosting=world.boosting,
            road_offset=world.road_offset,
        )
