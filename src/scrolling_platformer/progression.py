"""Score, stages, lives and continues.

Also owns the run-ending transitions (game over, stage clear) and the three
reset flavors (continue, restart, next stage), since each of them is mostly
bookkeeping over these counters.
"""

import logging
from typing import Callable

from .config import GameConfig, StageConfig
from .entities import Item
from .interfaces import AudioEvent, SOUND_GAME_OVER, SOUND_STAGE_CLEAR
from .kinds import ItemKind
from .state import GamePhase, GameStateMachine
from .world import World

logger = logging.getLogger(__name__)


class ProgressionController:
    """Tracks score, stage and continues, and performs stage-level resets."""

    def __init__(
        self,
        world: World,
        config: GameConfig,
        state: GameStateMachine,
        emit: Callable[[AudioEvent], None],
    ):
        self.world = world
        self.config = config
        self.state = state
        self._emit = emit

        self.score = 0
        self.stage = 1
        self.continues_remaining = config.max_continues
        self.clear_item_spawned = False

    @property
    def stage_config(self) -> StageConfig:
        return self.config.stage(self.stage)

    @property
    def can_continue(self) -> bool:
        return self.state.phase is GamePhase.GAME_OVER and self.continues_remaining > 0

    @property
    def can_advance(self) -> bool:
        return self.state.phase is GamePhase.STAGE_CLEAR and self.stage < self.config.max_stages

    @property
    def game_complete(self) -> bool:
        """Last stage cleared: only restart remains."""
        return self.state.phase is GamePhase.STAGE_CLEAR and self.stage >= self.config.max_stages

    # ------------------------------------------------------------------
    # Score
    # ------------------------------------------------------------------

    def add_score(self, points: int) -> None:
        self.score += points

    def tick(self) -> None:
        """Per-tick survival point, then the stage-clear threshold check."""
        self.score += 1
        self.check_clear_threshold()

    def check_clear_threshold(self) -> bool:
        """Spawn the stage-clear item the first time score reaches the threshold.

        Returns:
            True if the item was spawned by this call.
        """
        if self.clear_item_spawned or self.score < self.stage_config.clear_score:
            return False
        self.spawn_clear_item()
        return True

    def spawn_clear_item(self) -> Item:
        size = self.config.spawn.item_size
        item = Item(
            kind=ItemKind.STAGE_CLEAR,
            x=self.world.width + self.config.spawn.stage_clear_offset,
            y=self.world.height - size - 10.0,
            width=size,
            height=size,
        )
        self.world.add_item(item)
        self.clear_item_spawned = True
        logger.info("stage %d clear item spawned at score %d", self.stage, self.score)
        return item

    # ------------------------------------------------------------------
    # Run-ending transitions
    # ------------------------------------------------------------------

    def game_over(self) -> None:
        self.state.transition(GamePhase.GAME_OVER)
        self._emit(AudioEvent("stop", self.stage_config.background_track))
        self._emit(AudioEvent("once", SOUND_GAME_OVER))
        logger.info("game over at stage %d, score %d, %d continues left",
                    self.stage, self.score, self.continues_remaining)

    def clear_stage(self) -> None:
        self.state.transition(GamePhase.STAGE_CLEAR)
        self._emit(AudioEvent("stop", self.stage_config.background_track))
        self._emit(AudioEvent("once", SOUND_STAGE_CLEAR))
        logger.info("stage %d cleared with score %d", self.stage, self.score)

    # ------------------------------------------------------------------
    # Resets
    # ------------------------------------------------------------------

    def _enter_stage(self) -> None:
        """Fresh board and full lives for the current stage, then run."""
        self.world.reset_board(self.stage_config)
        self.world.player.lives = self.config.player.max_lives
        self.clear_item_spawned = False
        self.state.transition(GamePhase.RUNNING)
        self._emit(AudioEvent("loop", self.stage_config.background_track))

    def new_game(self) -> None:
        """Stage 1, zero score, full lives and continues."""
        self.stage = 1
        self.score = 0
        self.continues_remaining = self.config.max_continues
        self._enter_stage()

    def continue_game(self) -> bool:
        """Spend a continue after game over. No-op without continues."""
        if not self.can_continue:
            return False
        self.continues_remaining -= 1
        if self.config.reset_score_on_continue:
            self.score = 0
        self._enter_stage()
        logger.info("continue used, %d left", self.continues_remaining)
        return True

    def restart(self) -> bool:
        """Full reset from game over or stage clear."""
        if self.state.phase not in (GamePhase.GAME_OVER, GamePhase.STAGE_CLEAR):
            return False
        self.new_game()
        return True

    def advance_stage(self) -> bool:
        """Move to the next stage after a clear. No-op on the last stage."""
        if not self.can_advance:
            return False
        self.stage += 1
        self._enter_stage()
        logger.info("entered stage %d", self.stage)
        return True
