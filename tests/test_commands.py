"""Tests for the command catalog."""

import random

import pytest

from bash_quest.commands import (
    COMMANDS, STANDALONE_COMMANDS, ConfigurationError, by_tier, find_command,
    random_command, random_sequence, up_to_tier, validate_catalog,
)
from bash_quest.components import Command, Tier


class TestByTier:

    def test_beginner_commands_in_catalog_order(self):
        assert [cmd.name for cmd in by_tier(Tier.BEGINNER)] == ['cd', 'ls', 'pwd', 'echo', 'cat']

    def test_exact_tier_only(self):
        for tier in Tier:
            assert all(cmd.tier == tier for cmd in by_tier(tier))

    def test_every_tier_populated(self):
        assert all(by_tier(tier) for tier in Tier)

    def test_pro_has_compound_commands(self):
        names = [cmd.name for cmd in by_tier(Tier.PRO)]
        assert 'ls | grep' in names
        assert 'find . -name' in names


def test_up_to_tier_accumulates_lower_tiers():
    names = [cmd.name for cmd in up_to_tier(Tier.INTERMEDIATE)]
    assert names[:5] == ['cd', 'ls', 'pwd', 'echo', 'cat']
    assert 'mkdir' in names
    assert 'chmod' not in names
    assert len(up_to_tier(Tier.PRO)) == len(COMMANDS)


def test_find_command():
    assert find_command('mv').category == 'rename'
    assert find_command('nope') is None


def test_random_command_stays_in_tier():
    rng = random.Random(7)
    for _ in range(50):
        assert random_command(Tier.ADVANCED, rng).tier == Tier.ADVANCED


def test_random_sequence_length_and_tier():
    rng = random.Random(7)
    sequence = random_sequence(Tier.PRO, 3, rng)
    assert len(sequence) == 3
    assert all(cmd.tier == Tier.PRO for cmd in sequence)


def test_random_sequence_allows_repeats():
    rng = random.Random(3)
    sequences = [random_sequence(Tier.BEGINNER, 3, rng) for _ in range(200)]
    assert any(len(set(seq)) < 3 for seq in sequences)


def test_standalone_commands_take_no_filename():
    assert STANDALONE_COMMANDS == ('ls', 'pwd', 'clear', 'history')


class TestValidateCatalog:

    def test_shipped_catalog_is_valid(self):
        validate_catalog()

    def test_empty_tier_is_fatal(self):
        commands = [cmd for cmd in COMMANDS if cmd.tier != Tier.ADVANCED]
        with pytest.raises(ConfigurationError, match='ADVANCED'):
            validate_catalog(commands)

    def test_single_command_per_tier_is_enough(self):
        validate_catalog(Command(f'c{tier}', 'x', tier) for tier in Tier)
