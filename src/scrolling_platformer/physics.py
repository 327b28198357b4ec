"""Arcade physics for the scrolling platformer.

Single-axis gravity with per-tick integration: velocity first, then position,
then snap to whatever surface caught the player. Everything else moves at a
constant per-tick speed scaled by the stage scroll multiplier.
"""

from .config import GameConfig, StageConfig
from .entities import overlaps
from .world import World


class PhysicsResolver:
    """Moves every entity in a World by one tick.

    Motion (step) and countdowns (update_timers) are separate passes so the
    engine can freeze motion during a damage pause while timers keep running.
    """

    def __init__(self, world: World, config: GameConfig):
        self.world = world
        self.config = config

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------

    def step(self, stage: StageConfig) -> bool:
        """Advance all motion by one tick.

        Returns:
            True if the player fell out of the world this tick.
        """
        fell = self.update_player()
        self.update_enemies(stage.scroll_multiplier)
        self.update_scenery(stage.scroll_multiplier)
        self.update_projectiles()
        return fell

    def update_player(self) -> bool:
        """Integrate the player and resolve ground/platform contact.

        Returns:
            True if the player dropped below the world by more than the margin.
        """
        player = self.world.player
        world_cfg = self.config.world

        player.x += player.speed_x
        player.x = max(0.0, min(player.x, world_cfg.width - player.width))

        prev_bottom = player.bottom
        player.velocity_y += self.config.player.gravity
        player.y += player.velocity_y

        if player.y > world_cfg.height + world_cfg.fall_margin:
            # Fell through; nothing below the floor can catch it
            return True

        landed = False
        if player.velocity_y >= 0:
            for block in self.world.collidable_blocks():
                # Only catch the player if they were above the block before this step
                if overlaps(player, block) and prev_bottom <= block.top:
                    player.land_on(block.top)
                    landed = True
                    break

        if not landed and player.bottom >= world_cfg.floor_y:
            player.land_on(world_cfg.floor_y)

        player.advance_animation()
        return False

    def update_enemies(self, scroll_multiplier: float) -> None:
        for enemy in self.world.enemies:
            enemy.move(scroll_multiplier)

    def update_scenery(self, scroll_multiplier: float) -> None:
        """Scroll blocks, items and the background left at the stage rate."""
        shift = self.config.world.background_scroll_speed * scroll_multiplier

        for block in self.world.blocks:
            block.x -= shift
            if block.right < 0:
                block.active = False

        for item in self.world.items:
            item.x -= shift
            if item.right < 0:
                item.active = False

        self.world.background_x -= shift
        if self.world.background_x <= -self.world.width:
            self.world.background_x += self.world.width

    def update_projectiles(self) -> None:
        for projectile in self.world.projectiles:
            projectile.move(self.world.width)

    # ------------------------------------------------------------------
    # Countdowns
    # ------------------------------------------------------------------

    def update_timers(self, dt: float) -> None:
        """Advance every entity-owned countdown by dt seconds.

        Runs during damage pauses too: a pause freezes motion, not timers.
        """
        self.world.player.update_timers(dt)
        for enemy in self.world.enemies:
            enemy.update_timers(dt)
        for block in self.world.blocks:
            block.update_timers(dt)
