#!/usr/bin/env python3
"""
client.py

Pygame host for the game: keyboard input, a plain-rectangle renderer and the
frame scheduler. All gameplay lives in game.py.
"""

import logging
import time
from typing import Callable, Optional

import pygame

from .constants import (
    TARGET_FPS, SCREEN_WIDTH, SCREEN_HEIGHT, SHOULDER_WIDTH, CURB_WIDTH,
    LANE_MIN_X, LANE_MAX_X, LANE_COUNT, DB_FILE, HOUR_MS, HOUR_BOARD_LIMIT
)
from .data_models import GameState, InputState, RenderSnapshot, TickResult
from .game import Game
from .storage import KeyValueStore, BestScoreStore, LeaderboardStore

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)
YELLOW = (255, 255, 0)
CYAN = (0, 255, 255)
RED = (255, 50, 50)
SHOULDER = (139, 111, 71)
CURB = (160, 160, 160)
ASPHALT = (93, 93, 93)
DASH_LENGTH, DASH_GAP = 30, 20

# ----------------- Input -----------------

class KeyboardInput:
    """Translates pygame events into the shared InputState."""

    STEER_LEFT = (pygame.K_LEFT, pygame.K_a)
    STEER_RIGHT = (pygame.K_RIGHT, pygame.K_d)
    BOOST = (pygame.K_UP, pygame.K_w)
    PAUSE = (pygame.K_p, pygame.K_ESCAPE)
    RESTART = (pygame.K_r,)

    def __init__(self, controls: InputState):
        self.controls = controls
        self.quit_requested = False
        self.submit_requested = False

    def handle(self, event):
        if event.type == pygame.QUIT:
            self.quit_requested = True
        elif event.type == pygame.KEYDOWN:
            if event.key in self.PAUSE:
                self.controls.pause_toggle = True
            elif event.key in self.RESTART:
                self.controls.restart = True
            elif event.key == pygame.K_s:
                self.submit_requested = True
            elif event.key == pygame.K_q:
                self.quit_requested = True
            self._set_held(event.key, True)
        elif event.type == pygame.KEYUP:
            self._set_held(event.key, False)

    def _set_held(self, key, held: bool):
        if key in self.STEER_LEFT:
            self.controls.steer_left = held
        elif key in self.STEER_RIGHT:
            self.controls.steer_right = held
        elif key in self.BOOST:
            self.controls.boost = held

    def poll(self):
        for event in pygame.event.get():
            self.handle(event)

# ----------------- Rendering -----------------

class PygameRenderer:
    """Draws RenderSnapshots. Knows nothing about game rules."""

    def __init__(self, screen):
        self.screen = screen
        self.large_font = pygame.font.Font(None, 48)
        self.font = pygame.font.Font(None, 24)
        self.message: Optional[str] = None
        self.leaderboard = []

    def _draw_road(self, road_offset: float):
        screen = self.screen
        screen.fill(SHOULDER)
        pygame.draw.rect(screen, CURB, (SHOULDER_WIDTH, 0, CURB_WIDTH, SCREEN_HEIGHT))
        pygame.draw.rect(screen, CURB, (SCREEN_WIDTH - SHOULDER_WIDTH - CURB_WIDTH, 0,
                                        CURB_WIDTH, SCREEN_HEIGHT))
        pygame.draw.rect(screen, ASPHALT, (LANE_MIN_X, 0, LANE_MAX_X - LANE_MIN_X, SCREEN_HEIGHT))

        lane_width = (LANE_MAX_X - LANE_MIN_X) / LANE_COUNT
        period = DASH_LENGTH + DASH_GAP
        start = int(road_offset % period) - period
        for lane in range(1, LANE_COUNT):
            x = LANE_MIN_X + lane * lane_width
            for y in range(start, SCREEN_HEIGHT, period):
                pygame.draw.line(screen, WHITE, (x, y), (x, y + DASH_LENGTH), 3)

    def _draw_player(self, snap: RenderSnapshot):
        car = pygame.Surface((int(snap.player_width), int(snap.player_height)), pygame.SRCALPHA)
        car.fill((0, 0, 255))
        if snap.boosting:
            pygame.draw.rect(car, CYAN, car.get_rect(), 3)
        # Tilt is in radians; pygame rotates counter-clockwise in degrees.
        rotated = pygame.transform.rotate(car, -snap.player_tilt * 57.2958)
        center = (snap.player_x + snap.player_width / 2, snap.player_y + snap.player_height / 2)
        self.screen.blit(rotated, rotated.get_rect(center=center))

    def _center_text(self, text: str, font, color, y: int):
        surf = font.render(text, True, color)
        self.screen.blit(surf, (SCREEN_WIDTH // 2 - surf.get_width() // 2, y))

    def render(self, snap: RenderSnapshot):
        screen = self.screen
        self._draw_road(snap.road_offset)

        for o in snap.obstacles:
            color = YELLOW if o.fast else (220, 0, 0)
            pygame.draw.rect(screen, color, (o.x, o.y, o.width, o.height))

        self._draw_player(snap)

        # HUD
        self._center_text(str(snap.score), self.large_font, YELLOW, 10)
        if snap.state is GameState.RUNNING and snap.boosting:
            self._center_text("2x POINTS", self.font, CYAN, 50)

        if snap.state is GameState.IDLE:
            self._center_text("Press an arrow key to start", self.font, WHITE, SCREEN_HEIGHT // 2)
            self._center_text(f"Best: {snap.best}", self.font, WHITE, SCREEN_HEIGHT // 2 + 30)
        elif snap.state is GameState.PAUSED:
            self._center_text("PAUSED", self.large_font, WHITE, SCREEN_HEIGHT // 2 - 20)
            self._center_text("P = Resume", self.font, WHITE, SCREEN_HEIGHT // 2 + 25)
        elif snap.state is GameState.OVER:
            self._draw_game_over(snap)

        pygame.display.flip()

    def _draw_game_over(self, snap: RenderSnapshot):
        top = SCREEN_HEIGHT // 4
        self._center_text("GAME OVER", self.large_font, RED, top)
        self._center_text(f"Score: {snap.score}   Best: {snap.best}", self.font, WHITE, top + 45)
        self._center_text("R = Restart | S = Submit score | Q = Quit", self.font, WHITE, top + 75)
        if self.message:
            self._center_text(self.message, self.font, CYAN, top + 105)

        self._center_text("Last hour", self.font, YELLOW, top + 145)
        for i, entry in enumerate(self.leaderboard):
            self._center_text(f"{i + 1}. {entry.name} - {entry.score}", self.font, WHITE,
                              top + 170 + i * 22)

# ----------------- Scheduling -----------------

class PygameScheduler:
    """Runs tick_fn at the display rate until it asks to stop."""

    def __init__(self, fps: int = TARGET_FPS, before_tick: Optional[Callable[[], None]] = None):
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.before_tick = before_tick

    def run(self, tick_fn: Callable[[], bool]):
        running = True
        while running:
            self.clock.tick(self.fps)
            if self.before_tick is not None:
                self.before_tick()
            running = tick_fn()

# ----------------- Game Client -----------------

class LaneRacerClient:
    def __init__(self, username: str, db_file: str = DB_FILE):
        pygame.init()
        self.username = username
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(f"Lane Racer: {username}")

        # --- Storage ---
        self.kv = KeyValueStore(db_file)
        self.leaderboard = LeaderboardStore(self.kv)

        # --- Game Logic ---
        self.game = Game(score_store=BestScoreStore(self.kv))
        self.controls = InputState()
        self.keyboard = KeyboardInput(self.controls)
        self.renderer = PygameRenderer(self.screen)
        self.submitted = False

    def run(self):
        """The main client execution loop."""
        scheduler = PygameScheduler(before_tick=self.keyboard.poll)
        try:
            self.game.run(scheduler, self.controls, self.renderer, on_tick=self._after_tick)
        finally:
            self.kv.close()
            pygame.quit()

    def _after_tick(self, result: TickResult) -> bool:
        if result.transition is not None:
            _, new_state = result.transition
            if new_state is GameState.OVER:
                self.submitted = False
                self.renderer.message = None
                self.renderer.leaderboard = self.leaderboard.top_by_window(HOUR_MS, HOUR_BOARD_LIMIT)

        if self.keyboard.submit_requested:
            self.keyboard.submit_requested = False
            if self.game.state is GameState.OVER and not self.submitted:
                self._submit_score()

        return not self.keyboard.quit_requested

    def _submit_score(self):
        entry = self.leaderboard.submit(self.username, self.game.score.current)
        if entry is None:
            self.renderer.message = "Failed to save score."
            print("Failed to save score. Storage may be full or disabled.")
            return
        self.submitted = True
        logger.info("Saved score %s for %s", entry.score, entry.name)
        self.renderer.message = "Score saved!"
        self.renderer.leaderboard = self.leaderboard.top_by_window(HOUR_MS, HOUR_BOARD_LIMIT)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    username = input("Enter your name: ") or f"Player{time.time() * 1000 % 1000:0.0f}"
    client = LaneRacerClient(username)
    client.run()


if __name__ == "__main__":
    main()
