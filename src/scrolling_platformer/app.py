"""Pygame host: window, sprites, sound, keyboard, HUD and overlay screens.

Everything here is a collaborator of the core. Missing images fall back to
flat rectangles, missing or broken audio is logged and ignored.
"""

import argparse
import logging
import os
import time
from typing import Dict, Optional

import pygame

from .config import CONFIGS, GameConfig
from .engine import GameEngine, GameSnapshot
from .entities import Rect
from .interfaces import AssetCatalog, AudioDevice, Renderer
from .kinds import HorizontalIntent
from .loop import FrameLoop
from .state import GamePhase

logger = logging.getLogger(__name__)


SPRITE_FILES: Dict[str, str] = {
    "player_run": "images/player_run.png",
    "player_jump": "images/player_jump.png",
    "enemy": "images/enemy.png",
    "flying_enemy": "images/flying_enemy.png",
    "ground_enemy": "images/ground_enemy.png",
    "stage2_enemy": "images/stage2_enemy.png",
    "block": "images/block.png",
    "breakable_block": "images/breakable_block.png",
    "health_item": "images/health_item.png",
    "invincibility_item": "images/invincibility_item.png",
    "shoot_item": "images/shoot_item.png",
    "stage_clear_item": "images/stage_clear_item.png",
    "projectile": "images/projectile.png",
    "background": "images/background.png",
    "background_stage2": "images/background_stage2.png",
}

SOUND_FILES: Dict[str, str] = {
    "jump": "audio/jump.wav",
    "enemy_hit": "audio/enemy_hit.wav",
    "damage": "audio/hit.wav",
    "collect_item": "audio/collect_item.wav",
    "block_break": "audio/block_break.wav",
    "shoot": "audio/shoot.wav",
    "stage_clear": "audio/stage_clear.wav",
    "game_over": "audio/game_over.wav",
}

MUSIC_FILES: Dict[str, str] = {
    "bgm_stage1": "audio/bgm_stage1.mp3",
    "bgm_stage2": "audio/bgm_stage2.mp3",
}

COLOR_TEXT = (255, 255, 255)
COLOR_HUD = (255, 215, 0)
COLOR_GAME_OVER = (224, 108, 117)
COLOR_DIM = (200, 200, 200)


def _to_pygame_rect(rect: Rect) -> pygame.Rect:
    return pygame.Rect(int(rect.x), int(rect.y), int(rect.width), int(rect.height))


class PygameRenderer(Renderer):
    """Draws onto a pygame Surface (display or offscreen)."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self._fonts: Dict[int, pygame.font.Font] = {}

    def draw_sprite(self, handle, src_rect, dst_rect):
        image = handle
        if src_rect is not None:
            area = _to_pygame_rect(src_rect).clip(handle.get_rect())
            if area.width > 0 and area.height > 0:
                image = handle.subsurface(area)
        dst = _to_pygame_rect(dst_rect)
        if dst.width <= 0 or dst.height <= 0:
            return
        if image.get_size() != dst.size:
            image = pygame.transform.scale(image, dst.size)
        self.surface.blit(image, dst.topleft)

    def fill_rect(self, color, rect):
        pygame.draw.rect(self.surface, color, _to_pygame_rect(rect))

    def draw_text(self, text, position, color, size=28, center=False):
        if not pygame.font.get_init():
            return
        font = self._fonts.get(size)
        if font is None:
            font = self._fonts[size] = pygame.font.Font(None, size)
        surface = font.render(text, True, color)
        if center:
            rect = surface.get_rect(center=(int(position[0]), int(position[1])))
        else:
            rect = surface.get_rect(topleft=(int(position[0]), int(position[1])))
        self.surface.blit(surface, rect)


class ImageCatalog(AssetCatalog):
    """Loads sprite images from an asset directory.

    Files that are missing or fail to decode resolve to None and are drawn
    as fallback rectangles.
    """

    def __init__(self, asset_dir: str, files: Optional[Dict[str, str]] = None):
        self.asset_dir = asset_dir
        self.files = files or SPRITE_FILES
        self._images: Dict[str, Optional[pygame.Surface]] = {}
        self._loaded = False

    @property
    def ready(self) -> bool:
        return self._loaded

    def load(self) -> int:
        """Attempt every file. Returns how many loaded successfully."""
        loaded = 0
        for sprite_id, rel_path in self.files.items():
            path = os.path.join(self.asset_dir, rel_path)
            try:
                image = pygame.image.load(path)
                if pygame.display.get_surface() is not None:
                    image = image.convert_alpha()
                self._images[sprite_id] = image
                loaded += 1
            except (pygame.error, FileNotFoundError) as exc:
                logger.warning("sprite %s unavailable (%s), using fallback color", sprite_id, exc)
                self._images[sprite_id] = None
        self._loaded = True
        logger.info("loaded %d/%d sprites", loaded, len(self.files))
        return loaded

    def get(self, sprite_id):
        return self._images.get(sprite_id)


class PygameAudio(AudioDevice):
    """pygame.mixer sound effects plus one streamed music track."""

    def __init__(self, asset_dir: str):
        self.asset_dir = asset_dir
        self.sounds: Dict[str, pygame.mixer.Sound] = {}
        self.current_track: Optional[str] = None
        self.enabled = True
        try:
            pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("audio disabled: %s", exc)
            self.enabled = False
            return
        for track_id, rel_path in SOUND_FILES.items():
            path = os.path.join(asset_dir, rel_path)
            try:
                self.sounds[track_id] = pygame.mixer.Sound(path)
            except (pygame.error, FileNotFoundError) as exc:
                logger.warning("sound %s unavailable: %s", track_id, exc)

    def play_once(self, track_id):
        sound = self.sounds.get(track_id)
        if sound is None:
            return
        # Restart from the beginning on every call
        sound.stop()
        sound.play()

    def play_loop(self, track_id):
        if not self.enabled:
            return
        rel_path = MUSIC_FILES.get(track_id)
        if rel_path is None:
            return
        if self.current_track and self.current_track != track_id:
            self.stop_loop(self.current_track)
        pygame.mixer.music.load(os.path.join(self.asset_dir, rel_path))
        pygame.mixer.music.play(-1)
        self.current_track = track_id

    def stop_loop(self, track_id):
        if not self.enabled or self.current_track != track_id:
            return
        pygame.mixer.music.stop()
        self.current_track = None


class ScrollerApp:
    """Window, input and overlays around a GameEngine.

    Keys:
        Left/Right or A/D  move
        Space/Up/W         jump
        X or J             shoot
        Enter              start / next stage
        C                  continue after game over
        R                  restart after game over or stage clear
        Esc                quit
    """

    def __init__(self, config: Optional[GameConfig] = None, asset_dir: str = "assets"):
        self.config = config or GameConfig()

        pygame.init()
        self.screen = pygame.display.set_mode(
            (int(self.config.world.width), int(self.config.world.height))
        )
        pygame.display.set_caption("Scrolling Platformer")
        self.clock = pygame.time.Clock()

        self.catalog = ImageCatalog(asset_dir)
        self.audio = PygameAudio(asset_dir)
        self.renderer = PygameRenderer(self.screen)

        self.engine = GameEngine(self.config, asset_gate=lambda: self.catalog.ready)
        self.loop = FrameLoop(
            self.engine,
            renderer=self.renderer,
            audio=self.audio,
            catalog=self.catalog,
            hud=self.draw_hud,
        )
        self.running = False

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    _LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
    _RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
    _JUMP_KEYS = (pygame.K_SPACE, pygame.K_UP, pygame.K_w)
    _SHOOT_KEYS = (pygame.K_x, pygame.K_j)

    def handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._on_key_down(event.key)
            elif event.type == pygame.KEYUP:
                self._on_key_up(event.key)

    def _on_key_down(self, key: int) -> None:
        engine = self.engine
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key in self._LEFT_KEYS:
            engine.set_horizontal_intent(HorizontalIntent.LEFT)
        elif key in self._RIGHT_KEYS:
            engine.set_horizontal_intent(HorizontalIntent.RIGHT)
        elif key in self._JUMP_KEYS:
            engine.press_jump()
        elif key in self._SHOOT_KEYS:
            engine.press_shoot()
        elif key == pygame.K_RETURN:
            if engine.start() or engine.advance_stage():
                self.loop.resume()
        elif key == pygame.K_c:
            if engine.continue_game():
                self.loop.resume()
        elif key == pygame.K_r:
            if engine.restart():
                self.loop.resume()

    def _on_key_up(self, key: int) -> None:
        player = self.engine.player
        if key in self._LEFT_KEYS and player.intent == HorizontalIntent.LEFT:
            self.engine.set_horizontal_intent(HorizontalIntent.NONE)
        elif key in self._RIGHT_KEYS and player.intent == HorizontalIntent.RIGHT:
            self.engine.set_horizontal_intent(HorizontalIntent.NONE)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw_hud(self, snapshot: GameSnapshot) -> None:
        self.renderer.draw_text(f"Score: {snapshot.score}", (10, 10), COLOR_HUD)
        self.renderer.draw_text(f"Lives: {snapshot.lives}", (10, 34), COLOR_HUD)
        self.renderer.draw_text(
            f"Stage {snapshot.stage}  |  Continues: {snapshot.continues_remaining}",
            (10, 58), COLOR_DIM, size=24,
        )

    def draw_overlay(self) -> None:
        """Start / game over / stage clear screens on top of the frozen world."""
        snapshot = self.engine.snapshot()
        if snapshot.phase in (GamePhase.RUNNING, GamePhase.DAMAGE_PAUSE):
            return

        w, h = self.screen.get_size()
        shade = pygame.Surface((w, h), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 160))
        self.screen.blit(shade, (0, 0))
        cx, cy = w / 2, h / 2
        text = self.renderer.draw_text

        if snapshot.phase is GamePhase.IDLE:
            text("SCROLLING PLATFORMER", (cx, cy - 40), COLOR_TEXT, size=44, center=True)
            prompt = "Press Enter to start" if self.catalog.ready else "Loading..."
            text(prompt, (cx, cy + 10), COLOR_DIM, center=True)
        elif snapshot.phase is GamePhase.GAME_OVER:
            text("GAME OVER", (cx, cy - 50), COLOR_GAME_OVER, size=48, center=True)
            text(f"Score: {snapshot.score}", (cx, cy - 10), COLOR_TEXT, center=True)
            if snapshot.can_continue:
                text(f"C = Continue ({snapshot.continues_remaining})", (cx, cy + 25), COLOR_DIM, center=True)
            else:
                text("Continue (0)", (cx, cy + 25), (120, 120, 120), center=True)
            text("R = Restart", (cx, cy + 55), COLOR_DIM, center=True)
        elif snapshot.phase is GamePhase.STAGE_CLEAR:
            if snapshot.game_complete:
                text("ALL STAGES CLEAR!", (cx, cy - 40), COLOR_HUD, size=48, center=True)
            else:
                text(f"STAGE {snapshot.stage} CLEAR!", (cx, cy - 40), COLOR_HUD, size=48, center=True)
                text("Enter = Next stage", (cx, cy + 10), COLOR_DIM, center=True)
            text("R = Restart", (cx, cy + 40), COLOR_DIM, center=True)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Main game loop."""
        self.catalog.load()
        self.running = True

        while self.running:
            self.handle_events()
            if not self.loop.on_frame(time.monotonic()):
                # Keep showing the last world state under the overlay
                self.loop.present()
            self.draw_overlay()
            pygame.display.flip()
            self.clock.tick(self.config.fps)

        pygame.quit()


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Side-scrolling platformer")
    parser.add_argument("--config", default="default", choices=sorted(CONFIGS),
                        help="Preset configuration")
    parser.add_argument("--assets", default="assets", help="Asset directory (images/, audio/)")
    parser.add_argument("--seed", type=int, default=None, help="Spawn RNG seed")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    preset = CONFIGS[args.config]
    config = GameConfig(
        player=preset.player,
        world=preset.world,
        timing=preset.timing,
        spawn=preset.spawn,
        stages=preset.stages,
        max_continues=preset.max_continues,
        reset_score_on_continue=preset.reset_score_on_continue,
        fps=preset.fps,
        seed=args.seed,
    )
    print(f"CONFIG: {args.config} | seed={args.seed} | assets={args.assets}")
    ScrollerApp(config, asset_dir=args.assets).run()


if __name__ == "__main__":
    main()
