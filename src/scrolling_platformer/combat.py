"""Overlap outcomes: stomps, damage, projectile kills, pickups, block strikes."""

from typing import Callable, Dict

from .config import GameConfig
from .entities import Block, Enemy, Item, overlaps
from .interfaces import (
    AudioEvent,
    SOUND_BLOCK_BREAK,
    SOUND_COLLECT,
    SOUND_DAMAGE,
    SOUND_ENEMY_HIT,
)
from .kinds import BlockKind, ItemKind
from .progression import ProgressionController
from .world import World


def is_stomp(player, enemy: Enemy) -> bool:
    """Falling, with the player's feet strictly above the enemy's midline."""
    return player.velocity_y > 0 and player.bottom < enemy.center_y


def is_underside_strike(player, block: Block) -> bool:
    """Rising into a block from directly below it."""
    return (
        player.velocity_y < 0
        and player.left < block.right
        and player.right > block.left
        and block.top <= player.top <= block.bottom
        and player.bottom > block.bottom
    )


class CombatResolver:
    """Resolves every overlap that has a gameplay outcome for one tick."""

    def __init__(
        self,
        world: World,
        config: GameConfig,
        progression: ProgressionController,
        emit: Callable[[AudioEvent], None],
    ):
        self.world = world
        self.config = config
        self.progression = progression
        self.state = progression.state
        self._emit = emit

        self._item_handlers: Dict[ItemKind, Callable[[Item], None]] = {
            ItemKind.HEALTH: self._collect_health,
            ItemKind.INVINCIBILITY: self._collect_invincibility,
            ItemKind.SHOOT_ABILITY: self._collect_shoot_ability,
            ItemKind.STAGE_CLEAR: self._collect_stage_clear,
        }

    def resolve(self) -> None:
        """Run every overlap pass. Stops early once the run has ended."""
        for resolve_pass in (
            self.resolve_player_enemies,
            self.resolve_projectiles,
            self.resolve_block_strikes,
            self.resolve_items,
        ):
            resolve_pass()
            if not self.state.is_live:
                return

    # ------------------------------------------------------------------
    # Damage
    # ------------------------------------------------------------------

    def damage_player(self) -> bool:
        """Apply one hit to the player.

        Returns:
            True if the hit landed (the player was not invincible).
        """
        player = self.world.player
        if not player.take_damage():
            return False
        self._emit(AudioEvent("once", SOUND_DAMAGE))
        if player.lives <= 0:
            self.progression.game_over()
        else:
            self.state.enter_damage_pause()
        return True

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def resolve_player_enemies(self) -> None:
        player = self.world.player
        # Decide every contact from the pre-bounce kinematics
        contacts = [
            (enemy, is_stomp(player, enemy))
            for enemy in self.world.enemies
            if enemy.harmful and overlaps(player, enemy)
        ]
        bounced = False
        for enemy, stomping in contacts:
            if stomping:
                enemy.stomp(self.config.timing.stomp_duration)
                self.progression.add_score(self.config.stomp_score)
                self._emit(AudioEvent("once", SOUND_ENEMY_HIT))
                bounced = True
            else:
                self.damage_player()
                if not self.state.is_live:
                    break
        if bounced:
            player.velocity_y = self.config.player.stomp_bounce
            player.is_jumping = True

    def resolve_projectiles(self) -> None:
        for projectile in self.world.projectiles:
            if not projectile.active:
                continue
            for enemy in self.world.enemies:
                if enemy.harmful and overlaps(projectile, enemy):
                    projectile.active = False
                    enemy.active = False
                    self.progression.add_score(self.config.projectile_kill_score)
                    self._emit(AudioEvent("once", SOUND_ENEMY_HIT))
                    break

    def resolve_block_strikes(self) -> None:
        player = self.world.player
        for block in self.world.blocks:
            if block.kind is not BlockKind.BREAKABLE or not block.collidable:
                continue
            if not is_underside_strike(player, block):
                continue
            self.strike_block(block)
            return

    def strike_block(self, block: Block) -> bool:
        """Break a block from below. Returns False if it was already broken."""
        if not block.shatter(self.config.timing.break_duration):
            return False
        carried = block.take_carried_item()
        if carried is not None:
            size = self.config.spawn.item_size
            self.world.add_item(Item(
                kind=carried,
                x=block.x + (block.width - size) / 2,
                y=block.top - size,
                width=size,
                height=size,
            ))
        self._emit(AudioEvent("once", SOUND_BLOCK_BREAK))
        player = self.world.player
        player.velocity_y = 0.0
        player.y = block.bottom
        return True

    def resolve_items(self) -> None:
        player = self.world.player
        for item in self.world.items:
            if item.active and overlaps(player, item):
                item.active = False
                self._item_handlers[item.kind](item)
                if not self.state.is_live:
                    return

    # ------------------------------------------------------------------
    # Item effects
    # ------------------------------------------------------------------

    def _collect_health(self, item: Item) -> None:
        if self.world.player.heal():
            self._emit(AudioEvent("once", SOUND_COLLECT))

    def _collect_invincibility(self, item: Item) -> None:
        self.world.player.grant_invincibility(self.config.timing.invincibility_item)
        self._emit(AudioEvent("once", SOUND_COLLECT))

    def _collect_shoot_ability(self, item: Item) -> None:
        self.world.player.can_shoot = True
        self._emit(AudioEvent("once", SOUND_COLLECT))

    def _collect_stage_clear(self, item: Item) -> None:
        self.progression.clear_stage()
