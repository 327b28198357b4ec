"""Pytest configuration and shared fixtures."""

import math
import os
import random

# Ensure headless pygame for all tests
os.environ['SDL_VIDEODRIVER'] = 'dummy'
os.environ['SDL_AUDIODRIVER'] = 'dummy'

import pytest

from scrolling_platformer.config import GameConfig, SpawnConfig
from scrolling_platformer.engine import GameEngine
from scrolling_platformer.entities import Enemy
from scrolling_platformer.kinds import EnemyKind
from scrolling_platformer.world import World


DT = 1 / 60


def quiet_config(**kwargs) -> GameConfig:
    """Config with random enemy/item spawns switched off."""
    return GameConfig(
        spawn=SpawnConfig(enemy_spawn_interval=math.inf, item_spawn_interval=math.inf),
        **kwargs,
    )


def place_enemy(engine, x=None, y=None, width=80.0, height=40.0, kind=EnemyKind.GROUND):
    """Stationary enemy, by default sitting on the floor under the player."""
    world = engine.world
    if x is None:
        x = world.player.x
    if y is None:
        y = world.height - height
    return world.add_enemy(Enemy(kind=kind, x=x, y=y, width=width, height=height, speed=0.0))


@pytest.fixture
def game_config():
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def world():
    """Fresh world on the stage-1 board."""
    w = World(GameConfig())
    w.reset_board(w.config.stage(1))
    return w


@pytest.fixture
def engine():
    """Started engine with no random spawns and an empty board."""
    e = GameEngine(quiet_config(), rng=random.Random(0))
    assert e.start()
    e.world.blocks = []
    e.drain_audio_events()
    return e
