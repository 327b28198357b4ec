"""Top-level game phase with the damage-pause countdown.

One enum value plus one Timer replaces the scattered running/paused flags of
a typical browser game loop.
"""

import logging
from enum import Enum

from .timing import Timer

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Lifecycle phases of a game session."""
    IDLE = "idle"                  # Before the first start
    RUNNING = "running"            # Simulation advancing
    DAMAGE_PAUSE = "damage_pause"  # Motion frozen briefly after a hit
    GAME_OVER = "game_over"        # Out of lives
    STAGE_CLEAR = "stage_clear"    # Stage-clear item collected


# Allowed transitions; anything else is a programming error.
_TRANSITIONS = {
    GamePhase.IDLE: {GamePhase.RUNNING},
    GamePhase.RUNNING: {GamePhase.DAMAGE_PAUSE, GamePhase.GAME_OVER, GamePhase.STAGE_CLEAR},
    GamePhase.DAMAGE_PAUSE: {GamePhase.RUNNING, GamePhase.GAME_OVER, GamePhase.STAGE_CLEAR},
    GamePhase.GAME_OVER: {GamePhase.RUNNING},
    GamePhase.STAGE_CLEAR: {GamePhase.RUNNING},
}


class GameStateMachine:
    """Holds the current GamePhase and drives the damage-pause countdown."""

    def __init__(self, damage_pause: float = 0.15):
        self.phase = GamePhase.IDLE
        self.pause_timer = Timer(damage_pause)

    @property
    def is_live(self) -> bool:
        """Whether the frame loop should keep ticking."""
        return self.phase in (GamePhase.RUNNING, GamePhase.DAMAGE_PAUSE)

    @property
    def is_running(self) -> bool:
        return self.phase is GamePhase.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.phase is GamePhase.DAMAGE_PAUSE

    @property
    def accepts_input(self) -> bool:
        return self.phase is GamePhase.RUNNING

    def transition(self, target: GamePhase) -> None:
        """Move to target phase, validating against the transition table."""
        if target not in _TRANSITIONS[self.phase]:
            raise ValueError(f"Illegal phase transition {self.phase.name} -> {target.name}")
        logger.debug("phase %s -> %s", self.phase.name, target.name)
        self.phase = target
        if target is not GamePhase.DAMAGE_PAUSE:
            self.pause_timer.clear()

    def enter_damage_pause(self) -> None:
        if self.phase is GamePhase.DAMAGE_PAUSE:
            # A second hit during the pause just restarts the countdown
            self.pause_timer.start()
            return
        self.transition(GamePhase.DAMAGE_PAUSE)
        self.pause_timer.start()

    def tick(self, dt: float) -> None:
        """Count the damage pause down; resume RUNNING when it runs out."""
        if self.phase is GamePhase.DAMAGE_PAUSE:
            self.pause_timer.tick(dt)
            if self.pause_timer.expired:
                self.transition(GamePhase.RUNNING)
