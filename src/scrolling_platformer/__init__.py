"""scrolling-platformer: a two-stage auto-scrolling arcade platformer.

The simulation core (engine, world, physics, combat, spawning, progression)
is headless and deterministic under a seed. A pygame host (app.py) plays it
interactively and a Gymnasium environment (gym_env.py) exposes it for RL and
scripted play-testing.
"""

from .config import GameConfig, PlayerConfig, WorldConfig, TimingConfig, SpawnConfig, StageConfig, CONFIGS
from .kinds import EnemyKind, BlockKind, ItemKind, HorizontalIntent
from .entities import Player, Enemy, Block, Item, Projectile, overlaps
from .world import World
from .state import GamePhase, GameStateMachine
from .engine import GameEngine, GameSnapshot
from .loop import FrameLoop, FixedRateHost

__all__ = [
    "GameConfig",
    "PlayerConfig",
    "WorldConfig",
    "TimingConfig",
    "SpawnConfig",
    "StageConfig",
    "CONFIGS",
    "EnemyKind",
    "BlockKind",
    "ItemKind",
    "HorizontalIntent",
    "Player",
    "Enemy",
    "Block",
    "Item",
    "Projectile",
    "overlaps",
    "World",
    "GamePhase",
    "GameStateMachine",
    "GameEngine",
    "GameSnapshot",
    "FrameLoop",
    "FixedRateHost",
]
