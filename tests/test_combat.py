"""Tests for overlap outcomes: stomps, damage, shots, pickups, block strikes."""

import pytest

from conftest import DT, place_enemy

from scrolling_platformer.entities import Block, Enemy, Item
from scrolling_platformer.interfaces import (
    AudioEvent,
    SOUND_BLOCK_BREAK,
    SOUND_COLLECT,
    SOUND_DAMAGE,
    SOUND_ENEMY_HIT,
)
from scrolling_platformer.kinds import BlockKind, EnemyKind, ItemKind
from scrolling_platformer.combat import is_stomp, is_underside_strike
from scrolling_platformer.state import GamePhase


def falling_onto(engine, enemy):
    """Position the player so that one more tick lands it on enemy's upper half."""
    player = engine.player
    player.y = enemy.y - player.height + 5
    player.velocity_y = 2.0


class TestPredicates:
    def test_stomp_requires_falling(self, engine):
        enemy = place_enemy(engine)
        player = engine.player
        player.y = enemy.y - player.height + 5
        player.velocity_y = 0.0
        assert not is_stomp(player, enemy)
        player.velocity_y = 1.0
        assert is_stomp(player, enemy)

    def test_stomp_requires_feet_above_midline(self, engine):
        enemy = place_enemy(engine)
        player = engine.player
        player.velocity_y = 3.0
        player.y = enemy.center_y - player.height
        assert not is_stomp(player, enemy)

    def test_underside_strike(self, engine):
        block = Block(x=100, y=300, width=100, kind=BlockKind.BREAKABLE)
        player = engine.player
        player.y = 320
        player.velocity_y = -5
        assert is_underside_strike(player, block)
        player.velocity_y = 1
        assert not is_underside_strike(player, block)


class TestEnemyContact:
    def test_stomp_kills_and_bounces(self, engine):
        enemy = place_enemy(engine)
        falling_onto(engine, enemy)
        engine.step(DT)

        assert enemy.stomped
        assert engine.player.lives == 3
        assert engine.progression.score == 10 + 1
        assert engine.player.velocity_y == pytest.approx(-7.5)
        assert AudioEvent("once", SOUND_ENEMY_HIT) in engine.drain_audio_events()

    def test_landing_on_two_enemies_stomps_both(self, engine):
        first = place_enemy(engine, x=100)
        second = place_enemy(engine, x=120)
        falling_onto(engine, first)
        engine.step(DT)

        assert first.stomped and second.stomped
        assert engine.player.lives == 3
        assert engine.phase is GamePhase.RUNNING
        assert engine.progression.score == 2 * 10 + 1
        assert engine.player.velocity_y == pytest.approx(-7.5)

    def test_side_contact_damages(self, engine):
        place_enemy(engine)
        engine.step(DT)

        assert engine.player.lives == 2
        assert engine.phase is GamePhase.DAMAGE_PAUSE
        assert AudioEvent("once", SOUND_DAMAGE) in engine.drain_audio_events()

    def test_contact_outcome_is_deterministic(self, engine):
        """Same geometry, same velocity -> same outcome, never both."""
        enemy = place_enemy(engine)
        falling_onto(engine, enemy)
        engine.step(DT)
        assert enemy.stomped != (engine.player.lives < 3)

    def test_enemy_survives_contact_damage(self, engine):
        enemy = place_enemy(engine)
        engine.step(DT)
        assert enemy.active
        assert not enemy.stomped

    def test_invincible_player_takes_no_damage(self, engine):
        engine.player.grant_invincibility(5.0)
        place_enemy(engine)
        engine.step(DT)
        assert engine.player.lives == 3
        assert engine.phase is GamePhase.RUNNING

    def test_stomped_enemy_is_harmless(self, engine):
        enemy = place_enemy(engine)
        enemy.stomp(0.3)
        engine.step(DT)
        assert engine.player.lives == 3

    def test_last_life_ends_game(self, engine):
        engine.player.lives = 1
        place_enemy(engine)
        engine.step(DT)

        snap = engine.snapshot()
        assert snap.phase is GamePhase.GAME_OVER
        assert snap.lives == 0
        assert snap.can_continue


class TestProjectiles:
    def test_projectile_kill_scores_fifty(self, engine):
        player = engine.player
        player.can_shoot = True
        enemy = place_enemy(engine, x=player.right + 20)
        engine.press_shoot()
        engine.step(DT)

        assert not enemy.active
        assert engine.world.projectiles == []
        assert engine.progression.score == 50 + 1

    def test_projectile_consumed_by_first_enemy(self, engine):
        player = engine.player
        player.can_shoot = True
        first = place_enemy(engine, x=player.right + 20)
        second = place_enemy(engine, x=player.right + 20)
        engine.press_shoot()
        engine.step(DT)
        assert not first.active
        assert second.active


class TestBlockStrikes:
    def strike_setup(self, engine, carried=None):
        block = engine.world.add_block(Block(
            x=100, y=300, width=100, kind=BlockKind.BREAKABLE, carried_item=carried,
        ))
        engine.player.y = 335
        engine.player.velocity_y = -10
        return block

    def test_strike_breaks_block(self, engine):
        block = self.strike_setup(engine)
        engine.step(DT)
        assert block.broken
        assert engine.player.y == block.bottom
        assert engine.player.velocity_y == 0
        assert AudioEvent("once", SOUND_BLOCK_BREAK) in engine.drain_audio_events()

    def test_strike_releases_carried_item(self, engine):
        block = self.strike_setup(engine, carried=ItemKind.SHOOT_ABILITY)
        engine.step(DT)
        (item,) = engine.world.items
        assert item.kind is ItemKind.SHOOT_ABILITY
        assert item.bottom == block.top

    def test_breaks_only_once(self, engine):
        block = engine.world.add_block(Block(
            x=100, y=300, width=100, kind=BlockKind.BREAKABLE, carried_item=ItemKind.HEALTH,
        ))
        assert engine.combat.strike_block(block)
        assert not engine.combat.strike_block(block)
        assert len(engine.world.items) == 1

    def test_solid_block_not_struck(self, engine):
        block = engine.world.add_block(Block(x=100, y=300, width=100))
        engine.player.y = 335
        engine.player.velocity_y = -10
        engine.step(DT)
        assert not block.broken
        assert engine.player.velocity_y < 0


class TestItems:
    def give(self, engine, kind):
        player = engine.player
        return engine.world.add_item(Item(kind, x=player.x + 10, y=player.y + 10))

    def test_health(self, engine):
        engine.player.lives = 2
        self.give(engine, ItemKind.HEALTH)
        engine.step(DT)
        assert engine.player.lives == 3
        assert engine.world.items == []
        assert AudioEvent("once", SOUND_COLLECT) in engine.drain_audio_events()

    def test_health_at_max_is_consumed(self, engine):
        self.give(engine, ItemKind.HEALTH)
        engine.step(DT)
        assert engine.player.lives == 3
        assert engine.world.items == []
        assert AudioEvent("once", SOUND_COLLECT) not in engine.drain_audio_events()

    def test_invincibility(self, engine):
        self.give(engine, ItemKind.INVINCIBILITY)
        engine.step(DT)
        assert engine.player.invincibility.remaining == pytest.approx(5.0)

    def test_shoot_ability(self, engine):
        self.give(engine, ItemKind.SHOOT_ABILITY)
        engine.step(DT)
        assert engine.player.can_shoot

    def test_stage_clear(self, engine):
        self.give(engine, ItemKind.STAGE_CLEAR)
        engine.step(DT)
        assert engine.phase is GamePhase.STAGE_CLEAR
        assert engine.snapshot().can_advance
