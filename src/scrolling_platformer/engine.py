"""Headless simulation engine.

GameEngine wires the world, state machine, resolvers, spawner and
progression together, owns the lifecycle entry points a host UI calls, and
advances everything by one tick at a time. It never draws or plays audio:
sounds are queued as AudioEvents and drained by the frame loop.
"""

import logging
import random
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional

from .combat import CombatResolver
from .config import GameConfig, StageConfig
from .interfaces import AudioEvent, SOUND_JUMP, SOUND_SHOOT
from .physics import PhysicsResolver
from .progression import ProgressionController
from .spawning import SpawnDirector
from .state import GamePhase, GameStateMachine
from .timing import Clock
from .world import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only projection of the state a UI displays."""
    phase: GamePhase
    score: int
    lives: int
    stage: int
    continues_remaining: int
    can_continue: bool
    can_advance: bool
    game_complete: bool
    invincible: bool
    can_shoot: bool

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["phase"] = self.phase.value
        return d


class GameEngine:
    """One game session: state, rules and lifecycle.

    Typical host usage:
        engine = GameEngine(config)
        engine.start()
        while engine.is_live:
            engine.tick(time.monotonic())
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        asset_gate: Optional[Callable[[], bool]] = None,
    ):
        """Create an idle engine.

        Args:
            config: Game configuration. Uses defaults if None.
            rng: Random source for spawning. Seeded from config.seed if None.
            asset_gate: Returns True once assets are ready; start() waits on it.
        """
        self.config = config or GameConfig()
        self.world = World(self.config)
        self.state = GameStateMachine(self.config.timing.damage_pause)
        self.audio_events: List[AudioEvent] = []

        self.progression = ProgressionController(self.world, self.config, self.state, self._emit)
        self.physics = PhysicsResolver(self.world, self.config)
        self.combat = CombatResolver(self.world, self.config, self.progression, self._emit)
        self.spawner = SpawnDirector(self.world, self.config, rng)
        self.clock = Clock(self.config.timing.max_frame_delta)
        self.asset_gate = asset_gate or (lambda: True)

        self.ticks = 0
        self.elapsed = 0.0

    def _emit(self, event: AudioEvent) -> None:
        self.audio_events.append(event)

    def drain_audio_events(self) -> List[AudioEvent]:
        events, self.audio_events = self.audio_events, []
        return events

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def is_live(self) -> bool:
        return self.state.is_live

    @property
    def player(self):
        return self.world.player

    @property
    def stage_config(self) -> StageConfig:
        return self.progression.stage_config

    def snapshot(self) -> GameSnapshot:
        player = self.world.player
        return GameSnapshot(
            phase=self.state.phase,
            score=self.progression.score,
            lives=player.lives,
            stage=self.progression.stage,
            continues_remaining=self.progression.continues_remaining,
            can_continue=self.progression.can_continue,
            can_advance=self.progression.can_advance,
            game_complete=self.progression.game_complete,
            invincible=player.is_invincible,
            can_shoot=player.can_shoot,
        )

    def get_state(self) -> Dict[str, Any]:
        """Snapshot plus player kinematics, for logging and observation."""
        state = self.snapshot().to_dict()
        player = self.world.player
        state["player_position"] = (player.x, player.y)
        state["player_velocity"] = (player.speed_x, player.velocity_y)
        state["player_jumps_remaining"] = player.jumps_remaining
        state["entity_count"] = self.world.entity_count
        return state

    # ------------------------------------------------------------------
    # Lifecycle entry points
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Begin stage 1 from IDLE once assets are ready."""
        if self.state.phase is not GamePhase.IDLE:
            return False
        if not self.asset_gate():
            logger.info("start requested before assets were ready")
            return False
        self.progression.new_game()
        self._after_board_reset()
        logger.info("game started")
        return True

    def continue_game(self) -> bool:
        """Spend a continue from GAME_OVER."""
        if not self.progression.continue_game():
            return False
        self._after_board_reset()
        return True

    def restart(self) -> bool:
        """Full reset from GAME_OVER or STAGE_CLEAR."""
        if not self.progression.restart():
            return False
        self._after_board_reset()
        return True

    def advance_stage(self) -> bool:
        """Next stage from STAGE_CLEAR, if one remains."""
        if not self.progression.advance_stage():
            return False
        self._after_board_reset()
        return True

    def _after_board_reset(self) -> None:
        self.spawner.reset()
        self.clock.reset()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_horizontal_intent(self, intent: int) -> None:
        """Level-triggered movement (-1, 0, +1).

        Recorded while live so a key released during a damage pause is not
        lost; motion itself stays frozen until the pause ends.
        """
        if self.state.is_live:
            self.world.player.set_intent(intent)

    def press_jump(self) -> None:
        if self.state.accepts_input:
            self.world.player.request_jump()

    def press_shoot(self) -> None:
        if self.state.accepts_input:
            self.world.player.request_shoot()

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def tick(self, now: float) -> float:
        """Advance one frame using wall-clock time.

        Args:
            now: Monotonic timestamp in seconds.

        Returns:
            The elapsed-time delta that was applied.
        """
        dt = self.clock.tick(now)
        self.step(dt)
        return dt

    def step(self, dt: float) -> None:
        """Advance one tick with an explicit elapsed-time delta."""
        if not self.state.is_live:
            return
        self.ticks += 1
        self.elapsed += dt

        # Timers run in both RUNNING and DAMAGE_PAUSE
        self.physics.update_timers(dt)

        if self.state.is_paused:
            self.state.tick(dt)
            self.world.compact()
            return

        stage = self.progression.stage_config
        self._apply_requests()

        if self.physics.step(stage):
            self.combat.damage_player()
            self.world.player.reset_position()

        if self.state.is_live:
            self.combat.resolve()

        if self.state.is_running:
            self.spawner.update(dt, stage)
            self.progression.tick()

        self.world.compact()

    def _apply_requests(self) -> None:
        player = self.world.player
        if player.consume_jump_request() and player.jump():
            self._emit(AudioEvent("once", SOUND_JUMP))
        if player.consume_shoot_request():
            projectile = player.shoot()
            if projectile is not None:
                self.world.add_projectile(projectile)
                self._emit(AudioEvent("once", SOUND_SHOOT))
