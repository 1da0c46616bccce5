"""Tests for the per-frame update."""

from dataclasses import replace

import pytest

from bash_quest.components import Position, Tier
from bash_quest.state import new_game, pause
from bash_quest.systems import (
    TURRET_COOLDOWN, format_time, movement_system, purge_inactive,
    tier_for_time, tier_system, turret_target, update_game_state,
)


def with_enemies(state, *enemies, **changes):
    return replace(state, enemies=tuple(enemies), **changes)


class TestGating:

    def test_not_started_is_noop(self):
        state = new_game()
        assert update_game_state(state, 16) is state

    def test_paused_is_noop(self, started):
        state = pause(started)
        assert update_game_state(state, 16) is state

    def test_game_over_is_noop(self, started):
        state = replace(started, game_over=True)
        assert update_game_state(state, 16) is state


class TestTier:

    @pytest.mark.parametrize('ms, tier', [
        (0, Tier.BEGINNER),
        (59_999, Tier.BEGINNER),
        (60_000, Tier.INTERMEDIATE),
        (120_000, Tier.ADVANCED),
        (180_000, Tier.PRO),
        (900_000, Tier.PRO),
    ])
    def test_thresholds(self, ms, tier):
        assert tier_for_time(ms) == tier

    def test_never_downgrades(self):
        assert tier_system(Tier.PRO, 0) == Tier.PRO

    def test_escalates_through_update(self, started):
        state = replace(started, timer=59_990)
        assert update_game_state(state, 16).tier == Tier.INTERMEDIATE


class TestMovement:

    def test_moves_by_reference_frame(self, started, make_enemy):
        enemy = make_enemy('echo', x=600, speed=1.0)
        [moved], damage = movement_system([enemy], started.player, 32)
        assert moved.position.x == pytest.approx(598)
        assert damage == 0

    def test_contact_deals_damage_once(self, started, make_enemy):
        edge = started.player.right_edge
        enemy = make_enemy('echo', x=edge + 0.5, speed=1.0)
        state = with_enemies(started, enemy)

        after = update_game_state(state, 16)
        assert not after.enemies[0].active
        assert after.player.health == 90

        later = update_game_state(after, 16)
        assert later.player.health == 90
        assert later.enemies == ()

    def test_damage_sums_over_enemies(self, started, make_enemy, make_boss):
        edge = started.player.right_edge
        boss = replace(make_boss('cd', 'ls', 'pwd'), position=Position(edge, 100))
        state = with_enemies(started, make_enemy('echo', x=edge), boss)
        assert update_game_state(state, 16).player.health == 70

    def test_health_floors_at_zero_and_ends_game(self, started, make_enemy):
        edge = started.player.right_edge
        state = with_enemies(started, make_enemy('echo', x=edge),
                             player=replace(started.player, health=5))
        after = update_game_state(state, 16)
        assert after.player.health == 0
        assert after.game_over
        assert update_game_state(after, 16) is after


class TestTurret:

    def test_fires_at_first_regular_enemy(self, started, make_enemy, make_boss):
        boss = make_boss('cd', 'ls', 'pwd')
        first, second = make_enemy('echo'), make_enemy('cat')
        state = with_enemies(started, boss, first, second, turrets_enabled=True)

        after = update_game_state(state, 16)
        assert [e.active for e in after.enemies] == [True, False, True]
        assert after.score == 0
        assert after.particles == ()
        assert after.turret_cooldown == TURRET_COOLDOWN

    def test_waits_for_cooldown(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'),
                             turrets_enabled=True, turret_cooldown=100)
        after = update_game_state(state, 16)
        assert after.enemies[0].active
        assert after.turret_cooldown == 84

    def test_disabled_turret_only_cools_down(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'), turret_cooldown=10)
        after = update_game_state(state, 16)
        assert after.enemies[0].active
        assert after.turret_cooldown == 0

    def test_ignores_bosses(self, make_boss):
        assert turret_target([make_boss('cd', 'ls', 'pwd')]) is None


class TestFrame:

    def test_timer_accumulates(self, started):
        assert update_game_state(started, 250).timer == 250

    def test_visible_filenames_sorted(self, started, make_enemy):
        state = with_enemies(started, make_enemy('cat', filename='zeta.txt'),
                             make_enemy('cat', filename='alpha.txt'))
        assert update_game_state(state, 16).visible_filenames == ('alpha.txt', 'zeta.txt')

    def test_animation_phase_wraps(self, started):
        state = replace(started, text_animation_phase=990)
        assert update_game_state(state, 20).text_animation_phase == pytest.approx(10)

    def test_purge_inactive(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'), make_enemy('cat', active=False))
        assert [e.command.name for e in purge_inactive(state).enemies] == ['echo']
        assert purge_inactive(purge_inactive(state)) == purge_inactive(state)


@pytest.mark.parametrize('ms, text', [(0, '00:00'), (59_999, '00:59'), (61_000, '01:01'),
                                      (3_600_000, '60:00')])
def test_format_time(ms, text):
    assert format_time(ms) == text


def test_turret_holds_fire_on_fatal_tick(started, make_enemy):
    edge = started.player.right_edge
    state = with_enemies(started, make_enemy('echo', x=edge), make_enemy('cat'),
                         player=replace(started.player, health=10),
                         turrets_enabled=True)
    after = update_game_state(state, 16)
    assert after.game_over
    assert after.enemies[1].active
    assert after.turret_cooldown == 0
