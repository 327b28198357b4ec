"""Contracts for the collaborators around the simulation core.

The core never draws, plays sound or reads devices itself. It talks to these
base classes; app.py provides pygame-backed implementations and the Null*
classes here keep headless runs (tests, gym env) free of side effects.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .entities import Color, Rect


# Audio track ids
SOUND_JUMP = "jump"
SOUND_ENEMY_HIT = "enemy_hit"
SOUND_DAMAGE = "damage"
SOUND_COLLECT = "collect_item"
SOUND_BLOCK_BREAK = "block_break"
SOUND_SHOOT = "shoot"
SOUND_STAGE_CLEAR = "stage_clear"
SOUND_GAME_OVER = "game_over"


@dataclass(frozen=True)
class AudioEvent:
    """A request for the audio device, emitted by the engine during a tick.

    action is one of "once", "loop" or "stop".
    """
    action: str
    track_id: str


class Renderer:
    """Drawing surface. Coordinates are world pixels, y grows down."""

    def begin_frame(self) -> None:
        pass

    def end_frame(self) -> None:
        pass

    def draw_sprite(self, handle: Any, src_rect: Optional[Rect], dst_rect: Rect) -> None:
        raise NotImplementedError

    def fill_rect(self, color: Color, rect: Rect) -> None:
        raise NotImplementedError

    def draw_text(self, text: str, position: Tuple[float, float], color: Color, size: int = 28,
                  center: bool = False) -> None:
        """Optional: text for HUD/overlays. Headless renderers may ignore it."""


class AudioDevice:
    """Sound output. Implementations may raise; the frame loop absorbs it."""

    def play_once(self, track_id: str) -> None:
        raise NotImplementedError

    def play_loop(self, track_id: str) -> None:
        raise NotImplementedError

    def stop_loop(self, track_id: str) -> None:
        raise NotImplementedError


class AssetCatalog:
    """Resolves sprite ids to drawable handles."""

    @property
    def ready(self) -> bool:
        raise NotImplementedError

    def get(self, sprite_id: str) -> Optional[Any]:
        raise NotImplementedError


class NullRenderer(Renderer):
    """Counts draw calls and discards them."""

    def __init__(self):
        self.sprites_drawn = 0
        self.rects_filled = []

    def draw_sprite(self, handle, src_rect, dst_rect):
        self.sprites_drawn += 1

    def fill_rect(self, color, rect):
        self.rects_filled.append((color, rect))

    def begin_frame(self):
        self.sprites_drawn = 0
        self.rects_filled = []


class NullAudio(AudioDevice):
    """Records what would have been played."""

    def __init__(self):
        self.played = []
        self.looping: Optional[str] = None

    def play_once(self, track_id):
        self.played.append(track_id)

    def play_loop(self, track_id):
        self.looping = track_id

    def stop_loop(self, track_id):
        if self.looping == track_id:
            self.looping = None


class EmptyCatalog(AssetCatalog):
    """Catalog with no sprites: everything renders as fallback rectangles."""

    @property
    def ready(self) -> bool:
        return True

    def get(self, sprite_id):
        return None
