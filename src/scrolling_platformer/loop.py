"""Frame loop: one engine tick per frame callback, then the side effects.

The loop is re-armed by the host after every frame for as long as the engine
is live. Once the game ends (game over, stage clear) it stops asking for
frames; a lifecycle entry point followed by resume() starts it again.
"""

import logging
from typing import Callable, List, Optional

from .engine import GameEngine, GameSnapshot
from .interfaces import AssetCatalog, AudioDevice, AudioEvent, EmptyCatalog, Renderer
from .render import draw_world

logger = logging.getLogger(__name__)


class FrameHost:
    """Something that calls back once per presented frame with a timestamp."""

    def request_frame(self, callback: Callable[[float], None]) -> None:
        raise NotImplementedError


class FixedRateHost(FrameHost):
    """Deterministic host: frames arrive at a fixed interval when pumped."""

    def __init__(self, fps: int = 60, start: float = 0.0):
        self.interval = 1.0 / fps
        self.now = start
        self._pending: List[Callable[[float], None]] = []

    @property
    def armed(self) -> bool:
        return bool(self._pending)

    def request_frame(self, callback):
        self._pending.append(callback)

    def pump(self, frames: int = 1) -> int:
        """Deliver up to `frames` callbacks. Returns how many were delivered."""
        delivered = 0
        for _ in range(frames):
            if not self._pending:
                break
            callbacks, self._pending = self._pending, []
            self.now += self.interval
            for callback in callbacks:
                callback(self.now)
            delivered += 1
        return delivered


class FrameLoop:
    """Runs the engine and forwards its output to the collaborators."""

    def __init__(
        self,
        engine: GameEngine,
        renderer: Optional[Renderer] = None,
        audio: Optional[AudioDevice] = None,
        catalog: Optional[AssetCatalog] = None,
        hud: Optional[Callable[[GameSnapshot], None]] = None,
    ):
        self.engine = engine
        self.renderer = renderer
        self.audio = audio
        self.catalog = catalog or EmptyCatalog()
        self.hud = hud
        self.frames = 0
        self.armed = False

    def on_frame(self, now: float) -> bool:
        """Tick once and present the result.

        Returns:
            True if another frame should be requested.
        """
        if not self.engine.is_live:
            return False
        self.engine.tick(now)
        self.frames += 1
        self.dispatch_audio()
        self.present()
        return self.engine.is_live

    def run(self, host: FrameHost) -> None:
        """Arm the loop on a host; it re-arms itself until the engine stops."""
        def callback(now: float) -> None:
            self.armed = False
            if self.on_frame(now):
                self.armed = True
                host.request_frame(callback)

        self.dispatch_audio()
        if self.engine.is_live and not self.armed:
            self.armed = True
            host.request_frame(callback)

    def resume(self, host: Optional[FrameHost] = None) -> bool:
        """Call after start/continue/restart/advance_stage.

        Resets the clock so time spent off-loop is not simulated.
        """
        self.engine.clock.reset()
        if host is not None:
            self.run(host)
        else:
            self.dispatch_audio()
        return self.engine.is_live

    def dispatch_audio(self) -> None:
        """Forward queued AudioEvents. Device failures are logged, never raised."""
        events = self.engine.drain_audio_events()
        if self.audio is None:
            return
        for event in events:
            self._play(event)

    def _play(self, event: AudioEvent) -> None:
        try:
            if event.action == "once":
                self.audio.play_once(event.track_id)
            elif event.action == "loop":
                self.audio.play_loop(event.track_id)
            elif event.action == "stop":
                self.audio.stop_loop(event.track_id)
            else:
                logger.warning("unknown audio action %r", event.action)
        except Exception as exc:  # audio never stops the game
            logger.warning("audio %s %s failed: %s", event.action, event.track_id, exc)

    def present(self) -> None:
        if self.renderer is None:
            return
        self.renderer.begin_frame()
        draw_world(
            self.engine.world, self.renderer, self.catalog,
            background=self.engine.stage_config.background_sprite,
        )
        if self.hud is not None:
            self.hud(self.engine.snapshot())
        self.renderer.end_frame()
