"""Game entities: Player, enemies, blocks, items, projectiles.

Entities are plain data plus the small amount of behavior that only touches
their own fields. Anything that involves two entities (landing, stomping,
pickups) lives in physics.py / combat.py.

Variants are closed tags (kinds.py) with a behavior table per family instead
of subclasses: ENEMY_BEHAVIORS, BLOCK_BEHAVIORS, ITEM_BEHAVIORS.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from .config import PlayerConfig, TimingConfig, WorldConfig
from .kinds import BlockKind, EnemyKind, HorizontalIntent, ItemKind
from .timing import Timer


Color = Tuple[int, int, int]

# Fallback colors used when a sprite is unavailable
COLOR_PLAYER: Color = (220, 40, 40)
COLOR_ENEMY: Color = (40, 160, 60)
COLOR_BLOCK: Color = (139, 69, 19)
COLOR_BREAKABLE: Color = (181, 101, 29)
COLOR_PROJECTILE: Color = (50, 110, 230)


class Rect(NamedTuple):
    """Axis-aligned rectangle, (x, y) is the top-left corner, y grows down."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def scaled(self, factor: float) -> "Rect":
        """Same center, sides multiplied by factor."""
        w = self.width * factor
        h = self.height * factor
        return Rect(self.x + (self.width - w) / 2, self.y + (self.height - h) / 2, w, h)


def overlaps(a, b) -> bool:
    """Strict AABB overlap. Touching edges do not count.

    Accepts anything with x, y, width and height attributes.
    """
    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


class Box:
    """Edge accessors shared by every entity with x, y, width, height."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


class Player(Box):
    """The player character.

    Horizontal movement is level-triggered (set_intent), jumping and shooting
    are edge-triggered requests consumed by the next tick, the same way a
    jump request waits for the physics step.
    """

    def __init__(
        self,
        config: Optional[PlayerConfig] = None,
        timing: Optional[TimingConfig] = None,
        world: Optional[WorldConfig] = None,
    ):
        self.config = config or PlayerConfig()
        self.timing = timing or TimingConfig()
        self.world = world or WorldConfig()

        self.width = self.config.width
        self.height = self.config.height
        self.lives = self.config.max_lives

        self.invincibility = Timer(self.timing.invincibility_after_damage)
        self.shoot_cooldown = Timer(self.timing.shoot_cooldown)
        self.blink_visible = True
        self._blink_clock = 0.0

        self.reset()

    # ------------------------------------------------------------------
    # Resets
    # ------------------------------------------------------------------

    def reset_position(self) -> None:
        """Put the player back on the floor at the start column, at rest."""
        self.x = self.config.start_x
        self.y = self.world.floor_y - self.height
        self.velocity_y = 0.0
        self.is_jumping = False
        self.jumps_remaining = self.config.max_jumps

    def reset(self) -> None:
        """Reset all transient state. Lives are owned by progression."""
        self.reset_position()
        self.intent = HorizontalIntent.NONE
        self.speed_x = 0.0
        self.facing = HorizontalIntent.RIGHT
        self.can_shoot = False
        self.invincibility.clear()
        self.shoot_cooldown.clear()
        self.blink_visible = True
        self._blink_clock = 0.0
        self.current_frame = 0
        self.frame_counter = 0
        self._jump_requested = False
        self._shoot_requested = False

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_intent(self, intent: int) -> None:
        """Set horizontal intent (-1 left, 0 none, +1 right)."""
        if intent not in HorizontalIntent.VALUES:
            raise ValueError(f"Horizontal intent must be one of {HorizontalIntent.VALUES}, got {intent}")
        self.intent = intent
        self.speed_x = intent * self.config.max_speed_x
        if intent != HorizontalIntent.NONE:
            self.facing = intent

    def request_jump(self) -> None:
        self._jump_requested = True

    def request_shoot(self) -> None:
        self._shoot_requested = True

    def consume_jump_request(self) -> bool:
        requested = self._jump_requested
        self._jump_requested = False
        return requested

    def consume_shoot_request(self) -> bool:
        requested = self._shoot_requested
        self._shoot_requested = False
        return requested

    def clear_requests(self) -> None:
        self._jump_requested = False
        self._shoot_requested = False

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def jump(self) -> bool:
        """Jump if any jumps remain. Returns True when the jump happened."""
        if self.jumps_remaining <= 0:
            return False
        self.velocity_y = self.config.jump_strength
        self.jumps_remaining -= 1
        self.is_jumping = True
        self.current_frame = 0
        return True

    def shoot(self) -> Optional["Projectile"]:
        """Fire a projectile in the facing direction if able."""
        if not self.can_shoot or self.shoot_cooldown.active:
            return None
        cfg = self.config
        if self.facing == HorizontalIntent.RIGHT:
            px = self.right
        else:
            px = self.left - cfg.projectile_width
        py = self.center_y - cfg.projectile_height / 2
        self.shoot_cooldown.start()
        return Projectile(
            x=px,
            y=py,
            width=cfg.projectile_width,
            height=cfg.projectile_height,
            speed=cfg.projectile_speed * self.facing,
            damage=cfg.projectile_damage,
        )

    def land_on(self, surface_y: float) -> None:
        """Snap onto a surface whose top edge is at surface_y."""
        self.y = surface_y - self.height
        self.velocity_y = 0.0
        self.jumps_remaining = self.config.max_jumps
        self.is_jumping = False

    @property
    def is_invincible(self) -> bool:
        return self.invincibility.active

    def grant_invincibility(self, duration: float) -> None:
        # Never shorten a window already running
        if duration > self.invincibility.remaining:
            self.invincibility.start(duration)

    def take_damage(self) -> bool:
        """Lose a life unless invincible. Returns True if the hit landed."""
        if self.is_invincible:
            return False
        self.lives = max(self.lives - 1, 0)
        self.grant_invincibility(self.timing.invincibility_after_damage)
        self.can_shoot = False
        return True

    def heal(self) -> bool:
        """Gain a life, capped at max. Returns True if lives changed."""
        if self.lives >= self.config.max_lives:
            return False
        self.lives += 1
        return True

    # ------------------------------------------------------------------
    # Per-tick bookkeeping
    # ------------------------------------------------------------------

    def update_timers(self, dt: float) -> None:
        """Advance invincibility, blink phase and shoot cooldown."""
        self.shoot_cooldown.tick(dt)
        self.invincibility.tick(dt)
        if self.invincibility.active:
            self._blink_clock += dt
            if self._blink_clock >= self.timing.blink_interval:
                self._blink_clock = 0.0
                self.blink_visible = not self.blink_visible
        else:
            self._blink_clock = 0.0
            self.blink_visible = True

    def advance_animation(self) -> None:
        """Step the sprite animation (run frames on ground, jump frames in air)."""
        self.frame_counter += 1
        if self.frame_counter < self.config.animation_speed:
            return
        self.frame_counter = 0
        if self.is_jumping:
            self.current_frame = (self.current_frame + 1) % self.config.max_jump_frames
        elif self.speed_x != 0:
            self.current_frame = (self.current_frame + 1) % self.config.max_run_frames
        else:
            self.current_frame = 0


@dataclass
class Enemy(Box):
    """Enemy of any kind. Flying fields are unused by ground kinds."""
    kind: EnemyKind
    x: float
    y: float
    width: float
    height: float
    speed: float
    active: bool = True
    stomped: bool = False
    stomp_timer: Timer = field(default_factory=lambda: Timer(0.3))

    # FLYING only
    baseline_y: float = 0.0
    amplitude: float = 0.0
    frequency: float = 0.0
    phase: float = 0.0

    @property
    def behavior(self) -> "EnemyBehavior":
        return ENEMY_BEHAVIORS[self.kind]

    @property
    def harmful(self) -> bool:
        return self.active and not self.stomped

    def stomp(self, duration: float) -> None:
        self.stomped = True
        self.stomp_timer.start(duration)

    def move(self, scroll_multiplier: float) -> None:
        """Per-kind motion; stomped enemies stay put."""
        if self.stomped or not self.active:
            return
        self.behavior.motion(self, scroll_multiplier)
        if self.right < 0:
            self.active = False

    def update_timers(self, dt: float) -> None:
        if self.stomped and self.stomp_timer.tick(dt):
            self.active = False


def _ground_motion(enemy: Enemy, scroll_multiplier: float) -> None:
    enemy.x -= enemy.speed * scroll_multiplier


def _flying_motion(enemy: Enemy, scroll_multiplier: float) -> None:
    _ground_motion(enemy, scroll_multiplier)
    enemy.phase += enemy.frequency * scroll_multiplier
    enemy.y = enemy.baseline_y + math.sin(enemy.phase) * enemy.amplitude


@dataclass(frozen=True)
class EnemyBehavior:
    motion: Callable[[Enemy, float], None]
    sprite: str
    color: Color


ENEMY_BEHAVIORS: Dict[EnemyKind, EnemyBehavior] = {
    EnemyKind.GROUND: EnemyBehavior(_ground_motion, "enemy", COLOR_ENEMY),
    EnemyKind.FLYING: EnemyBehavior(_flying_motion, "flying_enemy", COLOR_ENEMY),
    EnemyKind.GROUND_2: EnemyBehavior(_ground_motion, "ground_enemy", COLOR_ENEMY),
    EnemyKind.STAGE2_GROUND: EnemyBehavior(_ground_motion, "stage2_enemy", COLOR_ENEMY),
}


@dataclass
class Block(Box):
    """Platform block. Breakable blocks break once when struck from below."""
    x: float
    y: float
    width: float
    height: float = 30.0
    kind: BlockKind = BlockKind.SOLID
    active: bool = True
    broken: bool = False
    break_timer: Timer = field(default_factory=lambda: Timer(0.3))
    carried_item: Optional[ItemKind] = None

    @property
    def behavior(self) -> "BlockBehavior":
        return BLOCK_BEHAVIORS[self.kind]

    @property
    def collidable(self) -> bool:
        return self.active and not self.broken

    def shatter(self, duration: float) -> bool:
        """Break the block. Only the first call on a breakable does anything."""
        if self.kind is not BlockKind.BREAKABLE or self.broken:
            return False
        self.broken = True
        self.break_timer.start(duration)
        return True

    def take_carried_item(self) -> Optional[ItemKind]:
        item, self.carried_item = self.carried_item, None
        return item

    def update_timers(self, dt: float) -> None:
        if self.broken and self.break_timer.tick(dt):
            self.active = False


@dataclass(frozen=True)
class BlockBehavior:
    sprite: str
    color: Color


BLOCK_BEHAVIORS: Dict[BlockKind, BlockBehavior] = {
    BlockKind.SOLID: BlockBehavior("block", COLOR_BLOCK),
    BlockKind.BREAKABLE: BlockBehavior("breakable_block", COLOR_BREAKABLE),
}


@dataclass
class Item(Box):
    kind: ItemKind
    x: float
    y: float
    width: float = 30.0
    height: float = 30.0
    active: bool = True

    @property
    def behavior(self) -> "ItemBehavior":
        return ITEM_BEHAVIORS[self.kind]


@dataclass(frozen=True)
class ItemBehavior:
    sprite: str
    color: Color


ITEM_BEHAVIORS: Dict[ItemKind, ItemBehavior] = {
    ItemKind.HEALTH: ItemBehavior("health_item", (255, 160, 190)),
    ItemKind.INVINCIBILITY: ItemBehavior("invincibility_item", (255, 215, 0)),
    ItemKind.SHOOT_ABILITY: ItemBehavior("shoot_item", (255, 140, 0)),
    ItemKind.STAGE_CLEAR: ItemBehavior("stage_clear_item", (150, 80, 200)),
}


@dataclass
class Projectile(Box):
    """Player shot. speed is signed (negative travels left)."""
    x: float
    y: float
    width: float
    height: float
    speed: float
    damage: int = 1
    active: bool = True

    sprite: str = "projectile"
    color: Color = COLOR_PROJECTILE

    def move(self, world_width: float) -> None:
        self.x += self.speed
        if self.right < 0 or self.left > world_width:
            self.active = False
