"""Draw a world through the Renderer contract.

Sprites come from the AssetCatalog; any sprite that is not available is
replaced by a flat rectangle in the entity's fallback color, so a missing
asset never stops a frame from being drawn.
"""

from typing import Any, Optional

from .entities import COLOR_PLAYER, Rect
from .interfaces import AssetCatalog, Renderer
from .world import World

COLOR_SKY = (135, 206, 235)


def draw_entity(
    renderer: Renderer,
    handle: Optional[Any],
    color,
    dst: Rect,
    src: Optional[Rect] = None,
) -> None:
    """Draw a sprite, or the fallback rectangle when handle is None."""
    if handle is None:
        renderer.fill_rect(color, dst)
    else:
        renderer.draw_sprite(handle, src, dst)


def draw_background(world: World, renderer: Renderer, catalog: AssetCatalog, sprite_id: str) -> None:
    """Two copies of the background side by side, scrolled by background_x."""
    handle = catalog.get(sprite_id)
    full = Rect(0, 0, world.width, world.height)
    if handle is None:
        renderer.fill_rect(COLOR_SKY, full)
        return
    renderer.draw_sprite(handle, None, Rect(world.background_x, 0, world.width, world.height))
    renderer.draw_sprite(handle, None, Rect(world.background_x + world.width, 0, world.width, world.height))


def draw_player(world: World, renderer: Renderer, catalog: AssetCatalog) -> None:
    player = world.player
    if not player.blink_visible:
        return
    cfg = player.config
    sprite_id = "player_jump" if player.is_jumping else "player_run"
    frame = player.current_frame
    if not player.is_jumping and player.speed_x == 0:
        frame = 0
    src = Rect(frame * cfg.frame_width, 0, cfg.frame_width, cfg.frame_height)
    draw_entity(renderer, catalog.get(sprite_id), COLOR_PLAYER, player.rect, src)


def draw_world(world: World, renderer: Renderer, catalog: AssetCatalog, background: str = "background") -> None:
    """Draw one frame: background, blocks, items, enemies, projectiles, player."""
    draw_background(world, renderer, catalog, background)

    for block in world.blocks:
        behavior = block.behavior
        dst = block.rect
        if block.broken:
            dst = dst.scaled(block.break_timer.progress)
        draw_entity(renderer, catalog.get(behavior.sprite), behavior.color, dst)

    for item in world.items:
        behavior = item.behavior
        draw_entity(renderer, catalog.get(behavior.sprite), behavior.color, item.rect)

    for enemy in world.enemies:
        behavior = enemy.behavior
        dst = enemy.rect
        if enemy.stomped:
            dst = dst.scaled(enemy.stomp_timer.progress)
        draw_entity(renderer, catalog.get(behavior.sprite), behavior.color, dst)

    for projectile in world.projectiles:
        draw_entity(renderer, catalog.get(projectile.sprite), projectile.color, projectile.rect)

    draw_player(world, renderer, catalog)
