"""Tests for drawing through the Renderer contract."""

import pytest

from scrolling_platformer.config import GameConfig
from scrolling_platformer.entities import COLOR_PLAYER, Block, Enemy
from scrolling_platformer.interfaces import AssetCatalog, EmptyCatalog, NullRenderer
from scrolling_platformer.kinds import BlockKind, EnemyKind
from scrolling_platformer.render import COLOR_SKY, draw_world
from scrolling_platformer.world import World


class FullCatalog(AssetCatalog):
    """Every sprite id resolves to its own name."""

    @property
    def ready(self):
        return True

    def get(self, sprite_id):
        return sprite_id


class RecordingRenderer(NullRenderer):
    def __init__(self):
        super().__init__()
        self.sprites = []

    def draw_sprite(self, handle, src_rect, dst_rect):
        super().draw_sprite(handle, src_rect, dst_rect)
        self.sprites.append((handle, src_rect, dst_rect))


@pytest.fixture
def world():
    w = World(GameConfig())
    w.reset_board(w.config.stage(1))
    return w


class TestFallbacks:
    def test_missing_sprites_become_rects(self, world):
        renderer = NullRenderer()
        draw_world(world, renderer, EmptyCatalog())
        colors = [color for color, _ in renderer.rects_filled]
        assert colors[0] == COLOR_SKY
        assert COLOR_PLAYER in colors
        # sky + 3 blocks + player
        assert len(colors) == 5
        assert renderer.sprites_drawn == 0

    def test_blinking_player_hidden(self, world):
        world.player.blink_visible = False
        renderer = NullRenderer()
        draw_world(world, renderer, EmptyCatalog())
        assert COLOR_PLAYER not in [color for color, _ in renderer.rects_filled]


class TestSprites:
    def test_all_sprites_used(self, world):
        renderer = RecordingRenderer()
        draw_world(world, renderer, FullCatalog())
        handles = [h for h, _, _ in renderer.sprites]
        # Two background copies, three blocks, one player
        assert handles.count("background") == 2
        assert handles.count("block") == 3
        assert "player_run" in handles
        assert renderer.rects_filled == []

    def test_stage_background(self, world):
        renderer = RecordingRenderer()
        draw_world(world, renderer, FullCatalog(), background="background_stage2")
        assert renderer.sprites[0][0] == "background_stage2"

    def test_background_offset(self, world):
        world.background_x = -120
        renderer = RecordingRenderer()
        draw_world(world, renderer, FullCatalog())
        first, second = renderer.sprites[0][2], renderer.sprites[1][2]
        assert first.x == -120
        assert second.x == 380

    def test_jump_sprite_in_air(self, world):
        world.player.jump()
        renderer = RecordingRenderer()
        draw_world(world, renderer, FullCatalog())
        assert renderer.sprites[-1][0] == "player_jump"

    def test_player_frame_source_rect(self, world):
        world.player.current_frame = 3
        world.player.speed_x = 5
        renderer = RecordingRenderer()
        draw_world(world, renderer, FullCatalog())
        _, src, _ = renderer.sprites[-1]
        assert src.x == 3 * 32
        assert (src.width, src.height) == (32, 32)

    def test_broken_block_shrinks(self, world):
        block = world.blocks[0]
        block.kind = BlockKind.BREAKABLE
        block.shatter(0.3)
        block.update_timers(0.15)
        renderer = RecordingRenderer()
        draw_world(world, renderer, FullCatalog())
        dst = [d for h, _, d in renderer.sprites if h == "breakable_block"][0]
        assert dst.width == pytest.approx(50)

    def test_stomped_enemy_shrinks(self, world):
        enemy = world.add_enemy(Enemy(EnemyKind.FLYING, 300, 200, 50, 30, 2.0))
        enemy.stomp(0.3)
        renderer = RecordingRenderer()
        draw_world(world, renderer, FullCatalog())
        dst = [d for h, _, d in renderer.sprites if h == "flying_enemy"][0]
        assert dst.width == pytest.approx(50)
