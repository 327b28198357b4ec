"""Interval-gated, table-driven spawning plus the endless platform chain.

Randomness comes from one seedable random.Random so a seeded run replays the
same enemies, items and platforms.
"""

import math
import random
from typing import Optional, Sequence, TypeVar

from .config import EnemySpawnRule, GameConfig, ItemSpawnRule, StageConfig
from .entities import Block, Enemy, Item
from .kinds import BlockKind, EnemyKind
from .world import World

Rule = TypeVar("Rule", EnemySpawnRule, ItemSpawnRule)


def pick_rule(table: Sequence[Rule], roll: float) -> Rule:
    """Select a table row for a uniform roll in [0, 1).

    Rows own consecutive slices of [0, 1) in table order, so a roll of 0.39
    picks the first row of a (0.4, 0.3, 0.3) table and 0.4 the second.
    """
    cumulative = 0.0
    for rule in table:
        cumulative += rule.weight
        if roll < cumulative:
            return rule
    # Floating point slack on the last boundary
    return table[-1]


class SpawnDirector:
    """Creates enemies, items and platforms for the current stage."""

    def __init__(self, world: World, config: GameConfig, rng: Optional[random.Random] = None):
        self.world = world
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.reset()

    def reset(self) -> None:
        """Restart both spawn intervals (call whenever the board is reset)."""
        self._since_enemy = 0.0
        self._since_item = 0.0

    def update(self, dt: float, stage: StageConfig) -> None:
        """Advance spawn clocks by dt and spawn whatever is due."""
        spawn = self.config.spawn

        self._since_enemy += dt
        if self._since_enemy >= spawn.enemy_spawn_interval:
            self._since_enemy = 0.0
            self.spawn_enemy(stage)

        self._since_item += dt
        if self._since_item >= spawn.item_spawn_interval:
            self._since_item = 0.0
            self.spawn_item(stage)

        self.extend_platforms(stage)

    # ------------------------------------------------------------------
    # Enemies
    # ------------------------------------------------------------------

    def spawn_enemy(self, stage: StageConfig, roll: Optional[float] = None) -> Enemy:
        """Spawn one enemy at the right edge, chosen from the stage table."""
        if roll is None:
            roll = self.rng.random()
        rule = pick_rule(stage.enemy_table, roll)
        speed = self.rng.uniform(*rule.speed_range)
        x = self.world.width

        if rule.kind is EnemyKind.FLYING:
            spawn = self.config.spawn
            lo, hi = spawn.flying_baseline_range
            baseline = self.world.height * self.rng.uniform(lo, hi)
            enemy = Enemy(
                kind=rule.kind,
                x=x,
                y=baseline,
                width=rule.width,
                height=rule.height,
                speed=speed,
                baseline_y=baseline,
                amplitude=self.rng.uniform(*spawn.flying_amplitude_range),
                frequency=self.rng.uniform(*spawn.flying_frequency_range),
                phase=self.rng.uniform(0.0, 2 * math.pi),
            )
        else:
            enemy = Enemy(
                kind=rule.kind,
                x=x,
                y=self.world.height - rule.height,
                width=rule.width,
                height=rule.height,
                speed=speed,
            )
        return self.world.add_enemy(enemy)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def spawn_item(self, stage: StageConfig, roll: Optional[float] = None) -> Item:
        """Spawn one item at the right edge, chosen from the stage table."""
        if roll is None:
            roll = self.rng.random()
        rule = pick_rule(stage.item_table, roll)
        spawn = self.config.spawn
        size = spawn.item_size
        rise = self.rng.uniform(*spawn.item_height_range)
        return self.world.add_item(Item(
            kind=rule.kind,
            x=self.world.width,
            y=self.world.height - size - rise,
            width=size,
            height=size,
        ))

    # ------------------------------------------------------------------
    # Platforms
    # ------------------------------------------------------------------

    def extend_platforms(self, stage: StageConfig) -> Optional[Block]:
        """Append a block once the chain's right-most block scrolls into view.

        Returns:
            The new block, or None if the chain is still long enough.
        """
        last = self.world.rightmost_block()
        if last is None:
            return None
        spawn = self.config.spawn
        if last.x >= self.world.width * spawn.extend_threshold:
            return None

        width = self.rng.uniform(*spawn.block_width_range)
        gap = self.rng.uniform(*spawn.block_gap_range)
        y = last.y + (self.rng.random() - 0.5) * spawn.block_y_jitter
        low_rise, high_rise = spawn.block_y_band
        y = max(self.world.height - high_rise, min(self.world.height - low_rise, y))

        block = Block(x=last.right + gap, y=y, width=width, height=spawn.block_height)
        if self.rng.random() < spawn.breakable_chance:
            block.kind = BlockKind.BREAKABLE
            if self.rng.random() < spawn.breakable_item_chance:
                block.carried_item = pick_rule(stage.item_table, self.rng.random()).kind
        return self.world.add_block(block)
