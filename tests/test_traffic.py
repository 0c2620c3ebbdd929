"""Tests for traffic spawning and movement."""

import random

import pytest

from conftest import ScriptedRandom
from lane_racer.constants import LANE_MIN_X, LANE_MAX_X, PLAYER_WIDTH, PLAYER_HEIGHT, MIN_SPACING
from lane_racer.data_models import Obstacle
from lane_racer.traffic import TrafficSpawner, spawn_interval, advance


class TestSpawnInterval:

    @pytest.mark.parametrize("score,expected", [(0, 1000), (10, 950), (40, 800), (80, 600), (500, 600)])
    def test_interval_values(self, score, expected):
        assert spawn_interval(score) == expected

    def test_interval_never_increases_with_score(self):
        intervals = [spawn_interval(score) for score in range(300)]
        assert all(a >= b for a, b in zip(intervals, intervals[1:]))
        assert min(intervals) == 600


class TestMaybeSpawn:

    def test_waits_for_interval(self, rng):
        spawner = TrafficSpawner(rng=rng, last_spawn_time=0.0)
        obstacles = []
        assert spawner.maybe_spawn(999.0, 0, obstacles) is None
        assert obstacles == []

        spawned = spawner.maybe_spawn(1000.0, 0, obstacles)
        assert spawned is not None
        assert obstacles == [spawned]
        assert spawner.last_spawn_time == 1000.0

    def test_higher_score_spawns_sooner(self, rng):
        spawner = TrafficSpawner(rng=rng, last_spawn_time=0.0)
        assert spawner.maybe_spawn(700.0, 0, []) is None
        assert spawner.maybe_spawn(700.0, 80, []) is not None

    def test_new_obstacle_starts_above_track(self, rng):
        obstacle = TrafficSpawner(rng=rng).spawn([])
        assert obstacle.y == -PLAYER_HEIGHT
        assert obstacle.width == PLAYER_WIDTH
        assert obstacle.height == PLAYER_HEIGHT
        assert LANE_MIN_X <= obstacle.x <= LANE_MAX_X - PLAYER_WIDTH


class TestVariants:

    def test_fast_variant(self):
        obstacle = TrafficSpawner(rng=ScriptedRandom([0.5, 0.05])).spawn([])
        assert obstacle.speed_multiplier == pytest.approx(1.2)
        assert obstacle.fast
        assert obstacle.x == pytest.approx(LANE_MIN_X + 0.5 * (LANE_MAX_X - PLAYER_WIDTH - LANE_MIN_X))

    def test_normal_variant(self):
        obstacle = TrafficSpawner(rng=ScriptedRandom([0.5, 0.5])).spawn([])
        assert obstacle.speed_multiplier == 1.0
        assert not obstacle.fast

    def test_fast_share_is_roughly_ten_percent(self):
        spawner = TrafficSpawner(rng=random.Random(99))
        fast = sum(spawner.spawn([]).fast for _ in range(5000))
        assert 350 < fast < 650


class TestPlacement:

    def _candidates(self, spawner, rng_state):
        probe = random.Random()
        probe.setstate(rng_state)
        low, high = spawner.lane_min_x, spawner.lane_max_x - spawner.width
        return [low + probe.random() * (high - low) for _ in range(spawner.attempts)]

    def test_spacing_holds_whenever_a_clear_sample_was_found(self):
        gap = PLAYER_WIDTH + MIN_SPACING
        for seed in range(300):
            layout = random.Random(seed)
            existing = [Obstacle(x=layout.uniform(LANE_MIN_X, LANE_MAX_X - PLAYER_WIDTH), y=0)
                        for _ in range(layout.randint(0, 20))]
            spawner = TrafficSpawner(rng=random.Random(seed * 31 + 1))
            candidates = self._candidates(spawner, spawner.rng.getstate())

            x = spawner.pick_x(existing)

            clear = [c for c in candidates if spawner.is_clear(c, existing)]
            if clear:
                assert x == clear[0]
                assert all(abs(o.x - x) >= gap for o in existing)
            else:
                assert x == candidates[-1]

    def test_crowded_road_accepts_last_sample(self):
        """With no clear spot left, placement still succeeds."""
        existing = [Obstacle(x=x, y=0) for x in range(int(LANE_MIN_X), int(LANE_MAX_X), 20)]
        spawner = TrafficSpawner(rng=random.Random(3))
        candidates = self._candidates(spawner, spawner.rng.getstate())
        assert spawner.pick_x(existing) == candidates[-1]

    def test_empty_road_takes_first_sample(self):
        spawner = TrafficSpawner(rng=ScriptedRandom([0.0, 0.9]))
        assert spawner.pick_x([]) == LANE_MIN_X


class TestAdvance:

    def test_normal_speed(self):
        obstacle = Obstacle(x=100, y=0)
        advance([obstacle], boost=False, dt_ticks=1.0)
        assert obstacle.y == pytest.approx(5.0)

    def test_boost_and_fast_multiplier(self):
        obstacle = Obstacle(x=100, y=0, speed_multiplier=1.2)
        advance([obstacle], boost=True, dt_ticks=1.0)
        assert obstacle.y == pytest.approx(14.4)

    def test_scaled_by_dt_and_x_fixed(self):
        obstacle = Obstacle(x=100, y=10)
        advance([obstacle], boost=False, dt_ticks=0.5)
        assert obstacle.y == pytest.approx(12.5)
        assert obstacle.x == 100
