"""Configuration system for the scrolling platformer.

Every tunable number of the simulation lives here, grouped the same way the
simulation is split up:
- PlayerConfig: per-tick kinematics of the player (arcade units, px/tick)
- WorldConfig: playfield size, floor, scroll rate, fall-out margin
- TimingConfig: every countdown, in seconds of elapsed time
- SpawnConfig: spawn intervals and platform-chain generation bands
- StageConfig: per-stage scroll multiplier, clear score and probability tables

Motion is expressed per tick while timers are expressed in seconds, so the
frame rate changes how fast things move but never how long a timer lasts.
"""

import math
from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, ClassVar, Optional

from .kinds import EnemyKind, ItemKind


@dataclass
class PlayerConfig:
    """Player kinematics in arcade (per-tick) units."""

    width: float = 50.0
    height: float = 50.0
    start_x: float = 100.0

    gravity: float = 0.8  # Added to velocity_y every tick (y grows downward)
    jump_strength: float = -15.0  # Initial velocity_y of a jump (negative = up)
    max_speed_x: float = 5.0  # Horizontal speed while an intent is held
    max_jumps: int = 2  # Jumps available between two ground contacts

    max_lives: int = 3

    # Projectile produced by shoot()
    projectile_width: float = 20.0
    projectile_height: float = 10.0
    projectile_speed: float = 8.0
    projectile_damage: int = 1

    # Animation
    animation_speed: int = 5  # Ticks per animation frame
    max_run_frames: int = 6
    max_jump_frames: int = 1
    frame_width: int = 32
    frame_height: int = 32

    @property
    def stomp_bounce(self) -> float:
        """Upward velocity after stomping an enemy (half a jump)."""
        return self.jump_strength / 2

    def to_dict(self) -> Dict[str, float]:
        return {
            "gravity": self.gravity,
            "jump_strength": self.jump_strength,
            "max_speed_x": self.max_speed_x,
            "max_jumps": self.max_jumps,
            "max_lives": self.max_lives,
        }


@dataclass
class WorldConfig:
    """Playfield geometry and scrolling."""

    width: float = 500.0
    height: float = 500.0
    background_scroll_speed: float = 1.0  # px/tick before the stage multiplier
    fall_margin: float = 50.0  # Player below height + margin counts as fallen

    @property
    def floor_y(self) -> float:
        return self.height


@dataclass
class TimingConfig:
    """Countdowns, all in seconds of elapsed time."""

    max_frame_delta: float = 0.1  # Clock clamp, avoids huge steps after a stall
    damage_pause: float = 0.15
    invincibility_after_damage: float = 2.0
    invincibility_item: float = 5.0
    blink_interval: float = 0.1
    shoot_cooldown: float = 0.3
    stomp_duration: float = 0.3
    break_duration: float = 0.3


@dataclass
class SpawnConfig:
    """Spawn cadence and platform-chain generation bands."""

    enemy_spawn_interval: float = 1.5
    item_spawn_interval: float = 5.0

    item_size: float = 30.0
    item_height_range: Tuple[float, float] = (100.0, 350.0)  # Above the floor

    flying_baseline_range: Tuple[float, float] = (0.4, 0.6)  # Fraction of world height
    flying_amplitude_range: Tuple[float, float] = (20.0, 50.0)
    flying_frequency_range: Tuple[float, float] = (0.05, 0.1)

    extend_threshold: float = 0.8  # Fraction of world width
    block_width_range: Tuple[float, float] = (80.0, 130.0)
    block_gap_range: Tuple[float, float] = (50.0, 100.0)
    block_height: float = 30.0
    block_y_jitter: float = 50.0
    block_y_band: Tuple[float, float] = (50.0, 400.0)  # Distance above the floor
    breakable_chance: float = 0.2
    breakable_item_chance: float = 0.5

    stage_clear_offset: float = 50.0  # Spawned this far past the right edge


@dataclass(frozen=True)
class EnemySpawnRule:
    """One row of an enemy probability table."""
    kind: EnemyKind
    weight: float
    width: float
    height: float
    speed_range: Tuple[float, float]


@dataclass(frozen=True)
class ItemSpawnRule:
    """One row of an item probability table."""
    kind: ItemKind
    weight: float


@dataclass(frozen=True)
class StageConfig:
    """Everything that differs between stages."""

    number: int
    clear_score: int
    scroll_multiplier: float
    enemy_table: Tuple[EnemySpawnRule, ...]
    item_table: Tuple[ItemSpawnRule, ...]
    initial_blocks: Tuple[Tuple[float, float, float], ...]  # (x, height above floor, width)
    background_track: str
    background_sprite: str = "background"

    TABLE_TOLERANCE: ClassVar[float] = 1e-9

    def __post_init__(self):
        for name, table in (("enemy_table", self.enemy_table), ("item_table", self.item_table)):
            total = math.fsum(rule.weight for rule in table)
            if abs(total - 1.0) > self.TABLE_TOLERANCE:
                raise ValueError(
                    f"Stage {self.number} {name} weights sum to {total}, expected 1.0"
                )
        if any(rule.kind is ItemKind.STAGE_CLEAR for rule in self.item_table):
            raise ValueError("Stage-clear items are spawned by progression, not by the item table")


STAGE_1 = StageConfig(
    number=1,
    clear_score=6000,
    scroll_multiplier=1.5,
    enemy_table=(
        EnemySpawnRule(EnemyKind.GROUND, 0.4, 80.0, 40.0, (2.0, 4.0)),
        EnemySpawnRule(EnemyKind.FLYING, 0.3, 50.0, 30.0, (1.5, 3.0)),
        EnemySpawnRule(EnemyKind.GROUND_2, 0.3, 80.0, 110.0, (2.5, 4.0)),
    ),
    item_table=(
        ItemSpawnRule(ItemKind.HEALTH, 0.7),
        ItemSpawnRule(ItemKind.INVINCIBILITY, 0.3),
    ),
    initial_blocks=(
        (50.0, 100.0, 100.0),
        (200.0, 200.0, 120.0),
        (350.0, 100.0, 80.0),
    ),
    background_track="bgm_stage1",
)

STAGE_2 = StageConfig(
    number=2,
    clear_score=12000,
    scroll_multiplier=2.0,
    enemy_table=(
        EnemySpawnRule(EnemyKind.GROUND, 0.3, 80.0, 40.0, (2.5, 5.0)),
        EnemySpawnRule(EnemyKind.FLYING, 0.3, 50.0, 30.0, (2.0, 3.5)),
        EnemySpawnRule(EnemyKind.STAGE2_GROUND, 0.4, 70.0, 90.0, (3.0, 5.0)),
    ),
    item_table=(
        ItemSpawnRule(ItemKind.HEALTH, 0.5),
        ItemSpawnRule(ItemKind.INVINCIBILITY, 0.3),
        ItemSpawnRule(ItemKind.SHOOT_ABILITY, 0.2),
    ),
    initial_blocks=(
        (40.0, 120.0, 90.0),
        (190.0, 220.0, 100.0),
        (330.0, 150.0, 110.0),
    ),
    background_track="bgm_stage2",
    background_sprite="background_stage2",
)

STAGES: Tuple[StageConfig, ...] = (STAGE_1, STAGE_2)
MAX_STAGES = len(STAGES)


@dataclass
class GameConfig:
    """Complete game configuration combining all parameter groups."""
    player: PlayerConfig = field(default_factory=PlayerConfig)
    world: WorldConfig = field(default_factory=WorldConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)
    stages: Tuple[StageConfig, ...] = STAGES

    max_continues: int = 3
    reset_score_on_continue: bool = False  # True zeroes the score on every continue

    # Scoring
    stomp_score: int = 10
    projectile_kill_score: int = 50

    # Display settings (host only)
    fps: int = 60
    seed: Optional[int] = None

    @property
    def max_stages(self) -> int:
        return len(self.stages)

    def stage(self, number: int) -> StageConfig:
        """Stage config by 1-based stage number."""
        if not 1 <= number <= len(self.stages):
            raise ValueError(f"Stage {number} out of range 1..{len(self.stages)}")
        return self.stages[number - 1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "player": self.player.to_dict(),
            "world": {"width": self.world.width, "height": self.world.height},
            "max_stages": self.max_stages,
            "max_continues": self.max_continues,
            "reset_score_on_continue": self.reset_score_on_continue,
            "fps": self.fps,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GameConfig":
        """Create from dictionary (only the top-level scalar knobs are read)."""
        player = PlayerConfig(**{
            k: v for k, v in d.get("player", {}).items()
            if k in PlayerConfig.__dataclass_fields__
        })
        return cls(
            player=player,
            max_continues=d.get("max_continues", 3),
            reset_score_on_continue=d.get("reset_score_on_continue", False),
            fps=d.get("fps", 60),
            seed=d.get("seed"),
        )


# Predefined configurations for play and testing
CONFIGS = {
    # Default arcade feel
    "default": GameConfig(),

    # Slower spawns, longer invincibility
    "relaxed": GameConfig(
        timing=TimingConfig(invincibility_after_damage=3.0, invincibility_item=7.0),
        spawn=SpawnConfig(enemy_spawn_interval=2.5, item_spawn_interval=4.0),
    ),

    # Frequent enemies, short recovery
    "frantic": GameConfig(
        timing=TimingConfig(invincibility_after_damage=1.0),
        spawn=SpawnConfig(enemy_spawn_interval=0.8, item_spawn_interval=7.0),
    ),

    # No random enemies or items (platform chain still extends)
    "no_spawns": GameConfig(
        spawn=SpawnConfig(enemy_spawn_interval=math.inf, item_spawn_interval=math.inf),
    ),
}
