"""
Frame Systems
==============
Per-tick simulation: timer and tier, enemy movement, contact damage,
turret fire, particles and the filename cache.

update_game_state() is the single entry point; the driver calls it once
per frame with the elapsed milliseconds.
"""

from dataclasses import replace
from typing import Optional, Sequence, Tuple

from loguru import logger

from .components import Enemy, Player, Tier
from .particles import REFERENCE_FRAME_MS, tick as tick_particles
from .state import GameState


TIER_UPGRADE_TIME = 60000  # ms per tier step
TURRET_COOLDOWN = 5000  # ms
TEXT_ANIMATION_PERIOD = 1000  # ms


# =============================================================================
# TIER PROGRESSION
# =============================================================================

def tier_for_time(timer_ms: float) -> Tier:
    """Tier unlocked by total play time: one step per minute, capped at PRO."""
    steps = int(timer_ms // TIER_UPGRADE_TIME)
    return Tier(min(Tier.BEGINNER + steps, Tier.PRO))


def tier_system(current: Tier, timer_ms: float) -> Tier:
    """Escalate only. Never downgrades."""
    return max(current, tier_for_time(timer_ms))


# =============================================================================
# MOVEMENT & CONTACT
# =============================================================================

def movement_system(enemies: Sequence[Enemy], player: Player,
                    delta_ms: float) -> Tuple[Tuple[Enemy, ...], int]:
    """
    Move enemies left and resolve contact with the player.

    Enemies inactive at the start of the tick are dropped. An enemy that
    reaches the player's right edge is deactivated and its damage counted
    once. Returns (enemies, total damage).
    """
    moved = []
    damage = 0
    for enemy in enemies:
        if not enemy.active:
            continue
        new_x = enemy.position.x - enemy.speed * delta_ms / REFERENCE_FRAME_MS
        if new_x <= player.right_edge:
            moved.append(replace(enemy, active=False))
            damage += enemy.damage
        else:
            moved.append(replace(enemy, position=replace(enemy.position, x=new_x)))
    return tuple(moved), damage


def damage_system(player: Player, damage: int) -> Player:
    if damage <= 0:
        return player
    return replace(player, health=max(0, player.health - damage))


# =============================================================================
# TURRETS
# =============================================================================

def turret_target(enemies: Sequence[Enemy]) -> Optional[Enemy]:
    """First active non-boss enemy in list order."""
    for enemy in enemies:
        if enemy.active and not enemy.is_boss:
            return enemy
    return None


def turret_system(enemies: Tuple[Enemy, ...], enabled: bool, cooldown: float,
                  delta_ms: float) -> Tuple[Tuple[Enemy, ...], float]:
    """
    Count down the turret and fire when ready.

    A turret kill is free: no score and no explosion.
    """
    cooldown = max(0.0, cooldown - delta_ms)
    if not enabled or cooldown != 0:
        return enemies, cooldown

    target = turret_target(enemies)
    if target is None:
        return enemies, cooldown

    logger.debug("Turret destroyed {} ({})", target.command.name, target.filename)
    enemies = tuple(
        replace(enemy, active=False) if enemy.id == target.id else enemy
        for enemy in enemies
    )
    return enemies, float(TURRET_COOLDOWN)


# =============================================================================
# FRAME UPDATE
# =============================================================================

def visible_filenames(enemies: Sequence[Enemy]) -> Tuple[str, ...]:
    """Sorted filenames of active enemies (tab-completion cache)."""
    return tuple(sorted(enemy.filename for enemy in enemies if enemy.active))


def update_game_state(state: GameState, delta_ms: float) -> GameState:
    """Advance the simulation by `delta_ms`. No-op unless running."""
    if state.game_over or state.paused or not state.started:
        return state

    timer = state.timer + delta_ms
    tier = tier_system(state.tier, timer)
    if tier != state.tier:
        logger.info("Tier escalated to {} at {}", tier.name, format_time(timer))

    enemies, damage = movement_system(state.enemies, state.player, delta_ms)
    player = damage_system(state.player, damage)
    game_over = player.health <= 0
    if game_over:
        logger.info("Game over: score {} at {}", state.score, format_time(timer))
        cooldown = max(0.0, state.turret_cooldown - delta_ms)
    else:
        enemies, cooldown = turret_system(
            enemies, state.turrets_enabled, state.turret_cooldown, delta_ms
        )

    return replace(
        state,
        timer=timer,
        tier=tier,
        enemies=enemies,
        player=player,
        game_over=game_over,
        turret_cooldown=cooldown,
        particles=tick_particles(state.particles, delta_ms),
        text_animation_phase=(state.text_animation_phase + delta_ms) % TEXT_ANIMATION_PERIOD,
        visible_filenames=visible_filenames(enemies),
    )


def purge_inactive(state: GameState) -> GameState:
    """Drop defeated enemies. Called by the driver after each tick."""
    if all(enemy.active for enemy in state.enemies):
        return state
    return replace(state, enemies=tuple(e for e in state.enemies if e.active))


def format_time(milliseconds: float) -> str:
    """MM:SS"""
    total_seconds = int(milliseconds // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f'{minutes:02d}:{seconds:02d}'
