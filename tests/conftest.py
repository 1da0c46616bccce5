"""Shared fixtures: seeded randomness, a running game and enemy builders."""

import random
from dataclasses import replace

import pytest

from bash_quest import state as game
from bash_quest.commands import find_command
from bash_quest.components import Position
from bash_quest.enemies import create_boss, create_regular


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def started() -> game.GameState:
    return game.start(game.new_game())


@pytest.fixture
def make_enemy(rng):
    """Build a regular enemy for a catalog command name."""
    counter = iter(range(1, 10_000))

    def _make(name: str, filename: str = 'notes.txt', x: float = 600.0,
              **overrides):
        enemy = create_regular(
            f'enemy-{next(counter)}', find_command(name),
            Position(x, 200), filename, rng,
        )
        return replace(enemy, **overrides) if overrides else enemy

    return _make


@pytest.fixture
def make_boss():
    counter = iter(range(1, 10_000))

    def _make(*names: str, x: float = 600.0):
        sequence = [find_command(name) for name in names]
        return create_boss(f'boss-{next(counter)}', sequence, Position(x, 150), 'boss.sh')

    return _make
