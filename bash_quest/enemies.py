"""
Enemy Archetypes
=================
Enemy construction, the command match predicate and hit resolution.

Two archetypes:
    regular → one correct command kills it
    boss    → a chain of commands, one step per correct command
"""

import random
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from .commands import STANDALONE_COMMANDS
from .components import Command, Enemy, Particle, Position, Size
from .particles import explosion


# =============================================================================
# REGULAR
# =============================================================================
# Light and fast, with a little speed jitter so waves spread out.

ENEMY_SIZE = Size(40, 40)
ENEMY_HEALTH = 1
ENEMY_DAMAGE = 10
ENEMY_SPEED_MIN = 0.5
ENEMY_SPEED_JITTER = 0.5


def create_regular(enemy_id: str, command: Command, position: Position,
                   filename: str, rng=random) -> Enemy:
    """Create a regular enemy bound to a single command."""
    return Enemy(
        id=enemy_id,
        command=command,
        health=ENEMY_HEALTH,
        max_health=ENEMY_HEALTH,
        position=position,
        speed=ENEMY_SPEED_MIN + rng.random() * ENEMY_SPEED_JITTER,
        damage=ENEMY_DAMAGE,
        size=ENEMY_SIZE,
        filename=filename,
    )


# =============================================================================
# BOSS
# =============================================================================
# Slow, heavy, hits twice as hard. Needs the whole chain typed in order.

BOSS_SIZE = Size(80, 80)
BOSS_HEALTH = 100
BOSS_DAMAGE = ENEMY_DAMAGE * 2
BOSS_SPEED = 0.3
BOSS_SEQUENCE_LENGTH = 3


def create_boss(enemy_id: str, sequence: Sequence[Command], position: Position,
                filename: str) -> Enemy:
    """Create a boss that must be defeated one command at a time."""
    sequence = tuple(sequence)
    return Enemy(
        id=enemy_id,
        command=sequence[0],
        health=BOSS_HEALTH,
        max_health=BOSS_HEALTH,
        position=position,
        speed=BOSS_SPEED,
        damage=BOSS_DAMAGE,
        size=BOSS_SIZE,
        is_boss=True,
        filename=filename,
        command_sequence=sequence,
        sequence_index=0,
    )


# =============================================================================
# MATCHING
# =============================================================================

def matches(text: str, enemy: Enemy) -> bool:
    """
    Does submitted `text` defeat (or advance) `enemy`?

    cd/ls/pwd enemies fall to their bare command regardless of filename:
    any `cd <anything>` kills a cd enemy.
    """
    text = text.strip()
    name = enemy.command.name

    if name == 'cd' and text.startswith('cd '):
        return True
    if name in ('ls', 'pwd') and text == name:
        return True

    if name in STANDALONE_COMMANDS:
        return text == name

    return text == name or text == f'{name} {enemy.filename}'


def hit(enemy: Enemy) -> Tuple[Enemy, bool]:
    """
    Apply one successful match.

    Returns (updated enemy, defeated). Bosses advance one step and
    die only when the chain is exhausted.
    """
    if not enemy.is_boss:
        return replace(enemy, active=False), True

    index = enemy.sequence_index + 1
    if index >= len(enemy.command_sequence):
        return replace(enemy, active=False, sequence_index=index), True

    remaining = enemy.max_health * (len(enemy.command_sequence) - index)
    return replace(
        enemy,
        sequence_index=index,
        command=enemy.command_sequence[index],
        health=remaining // len(enemy.command_sequence),
    ), False


def death_particles(enemy: Enemy, rng=random) -> Tuple[Particle, ...]:
    """Explosion themed by the command that killed the enemy."""
    return explosion(enemy.position, enemy.size, enemy.command.category, rng)


def remaining_steps(enemy: Enemy) -> Optional[int]:
    if not enemy.is_boss:
        return None
    return len(enemy.command_sequence) - enemy.sequence_index
