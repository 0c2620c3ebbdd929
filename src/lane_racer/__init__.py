"""
Lane Racer: a lane-avoidance arcade driving game.
"""

from .data_models import GameState, InputState, PlayerState, Obstacle, RenderSnapshot
from .game import Game, GameWorld

__all__ = ["Game", "GameWorld", "GameState", "InputState", "PlayerState", "Obstacle", "RenderSnapshot"]
