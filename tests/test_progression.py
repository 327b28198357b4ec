"""Tests for score, stage-clear threshold, stages and continues."""

import random

import pytest

from conftest import DT, quiet_config

from scrolling_platformer.config import GameConfig
from scrolling_platformer.engine import GameEngine
from scrolling_platformer.interfaces import AudioEvent, SOUND_GAME_OVER, SOUND_STAGE_CLEAR
from scrolling_platformer.kinds import ItemKind
from scrolling_platformer.state import GamePhase


def clear_items(engine):
    return [i for i in engine.world.items if i.kind is ItemKind.STAGE_CLEAR]


def end_in_game_over(engine):
    engine.progression.game_over()
    assert engine.phase is GamePhase.GAME_OVER


def end_in_clear(engine):
    engine.progression.clear_stage()
    assert engine.phase is GamePhase.STAGE_CLEAR


class TestScore:
    def test_one_point_per_running_tick(self, engine):
        for _ in range(10):
            engine.step(DT)
        assert engine.progression.score == 10

    def test_clear_item_spawns_once(self, engine):
        progression = engine.progression
        progression.score = 5999
        progression.tick()
        assert len(clear_items(engine)) == 1
        progression.tick()
        progression.add_score(500)
        progression.check_clear_threshold()
        assert len(clear_items(engine)) == 1

    def test_clear_item_placement(self, engine):
        engine.progression.score = 6000
        assert engine.progression.check_clear_threshold()
        (item,) = clear_items(engine)
        assert item.x == 550
        assert item.y == 500 - 30 - 10

    def test_six_thousand_quiet_ticks(self):
        """Untouched player on a quiet board reaches the threshold on tick 6000."""
        engine = GameEngine(quiet_config(), rng=random.Random(0))
        engine.start()
        for _ in range(5999):
            engine.step(DT)
        assert engine.progression.score == 5999
        assert clear_items(engine) == []

        engine.step(DT)
        assert engine.progression.score == 6000
        (item,) = clear_items(engine)
        assert item.x == 550

        # It scrolls in and reaches the idle player
        for _ in range(400):
            engine.step(DT)
            if not engine.is_live:
                break
        assert engine.phase is GamePhase.STAGE_CLEAR
        assert engine.player.lives == 3


class TestRunEndings:
    def test_game_over_stops_music(self, engine):
        end_in_game_over(engine)
        events = engine.drain_audio_events()
        assert AudioEvent("stop", "bgm_stage1") in events
        assert AudioEvent("once", SOUND_GAME_OVER) in events

    def test_stage_clear_stops_music(self, engine):
        end_in_clear(engine)
        events = engine.drain_audio_events()
        assert AudioEvent("stop", "bgm_stage1") in events
        assert AudioEvent("once", SOUND_STAGE_CLEAR) in events


class TestContinue:
    def test_continue_spends_one(self, engine):
        engine.progression.continues_remaining = 2
        end_in_game_over(engine)
        assert engine.continue_game()

        snap = engine.snapshot()
        assert snap.continues_remaining == 1
        assert snap.phase is GamePhase.RUNNING
        assert snap.lives == 3
        assert snap.stage == 1

    def test_continue_keeps_score_by_default(self, engine):
        engine.progression.score = 1234
        end_in_game_over(engine)
        engine.continue_game()
        assert engine.progression.score == 1234

    def test_continue_can_reset_score(self):
        engine = GameEngine(quiet_config(reset_score_on_continue=True), rng=random.Random(0))
        engine.start()
        engine.progression.score = 1234
        end_in_game_over(engine)
        engine.continue_game()
        assert engine.progression.score == 0

    def test_no_continues_left(self, engine):
        engine.progression.continues_remaining = 0
        end_in_game_over(engine)
        assert not engine.snapshot().can_continue
        assert not engine.continue_game()
        assert engine.phase is GamePhase.GAME_OVER

    def test_continue_only_after_game_over(self, engine):
        assert not engine.continue_game()
        assert engine.progression.continues_remaining == 3

    def test_continue_resets_board_and_clear_flag(self, engine):
        engine.progression.score = 7000
        engine.progression.check_clear_threshold()
        end_in_game_over(engine)
        engine.continue_game()
        assert len(engine.world.blocks) == 3
        assert not engine.progression.clear_item_spawned
        # Score already past the threshold: the item comes back next tick
        engine.step(DT)
        assert len(clear_items(engine)) == 1

    def test_continue_restarts_music(self, engine):
        end_in_game_over(engine)
        engine.drain_audio_events()
        engine.continue_game()
        assert AudioEvent("loop", "bgm_stage1") in engine.drain_audio_events()


class TestStages:
    def test_advance_to_stage_two(self, engine):
        end_in_clear(engine)
        engine.drain_audio_events()
        assert engine.advance_stage()

        assert engine.progression.stage == 2
        assert engine.stage_config.clear_score == 12000
        assert [b.x for b in engine.world.blocks] == [40, 190, 330]
        assert AudioEvent("loop", "bgm_stage2") in engine.drain_audio_events()

    def test_advance_keeps_score(self, engine):
        engine.progression.score = 6100
        end_in_clear(engine)
        engine.advance_stage()
        assert engine.progression.score == 6100

    def test_final_stage_is_complete(self, engine):
        end_in_clear(engine)
        engine.advance_stage()
        end_in_clear(engine)
        snap = engine.snapshot()
        assert snap.game_complete
        assert not snap.can_advance
        assert not engine.advance_stage()

    def test_advance_requires_stage_clear(self, engine):
        assert not engine.advance_stage()
        assert engine.progression.stage == 1

    def test_restart_from_stage_clear(self, engine):
        end_in_clear(engine)
        engine.advance_stage()
        engine.progression.score = 9000
        engine.progression.continues_remaining = 1
        end_in_clear(engine)
        assert engine.restart()

        snap = engine.snapshot()
        assert snap.stage == 1
        assert snap.score == 0
        assert snap.continues_remaining == 3
        assert snap.phase is GamePhase.RUNNING

    def test_restart_from_game_over(self, engine):
        end_in_game_over(engine)
        assert engine.restart()
        assert engine.phase is GamePhase.RUNNING

    def test_restart_ignored_while_running(self, engine):
        engine.progression.score = 50
        assert not engine.restart()
        assert engine.progression.score == 50

    def test_stage_out_of_range_is_error(self):
        with pytest.raises(ValueError):
            GameConfig().stage(3)
