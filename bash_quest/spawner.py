"""
Enemy Spawner
==============
Creates enemies bound to commands and, for file-system commands,
the file or directory each enemy represents in the virtual tree.

The driver calls spawn_into() on two timers: regular enemies every
ENEMY_SPAWN_INTERVAL and a boss every BOSS_SPAWN_INTERVAL.
"""

import random
import uuid
from dataclasses import replace
from typing import Tuple

from loguru import logger

from .commands import STANDALONE_COMMANDS, by_tier, random_command, random_sequence
from .components import Command, Enemy, FileSystemState, NodeKind, Position, Tier
from .enemies import BOSS_SEQUENCE_LENGTH, BOSS_SIZE, ENEMY_SIZE, create_boss, create_regular
from .filesystem import create_entry, file_from_pool
from .state import CANVAS_WIDTH, GAME_AREA_HEIGHT, GameState


ENEMY_SPAWN_INTERVAL = 3000  # ms
BOSS_SPAWN_INTERVAL = 30000  # ms

# Only cd and standalone commands spawn before this much play time
ONBOARDING_MS = 30000

# Vertical spawn band: below the top margin, above the bottom 30%
MIN_SPAWN_HEIGHT = 100
MAX_SPAWN_HEIGHT_PERCENTAGE = 0.7


# =============================================================================
# FILE-SYSTEM BINDINGS
# =============================================================================

# (parent path, new directory) for cd enemies
CD_TARGETS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    ((), 'projects'),
    (('home',), 'user'),
    (('home', 'user'), 'desktop'),
    (('var',), 'cache'),
    (('etc',), 'network'),
)

# Parent directories for cat/rm/cp/mv targets; the pool follows the path
FILE_TARGETS: Tuple[Tuple[str, ...], ...] = (
    ('home', 'user', 'documents'),
    ('home', 'user', 'pictures'),
    ('home', 'user', 'videos'),
    ('home', 'user', 'music'),
    ('home', 'user', 'downloads'),
    ('home', 'user', 'code'),
    ('etc',),
    ('var', 'log'),
)

FILE_COMMANDS = ('cat', 'rm', 'cp', 'mv')


# =============================================================================
# SYNTHESIZED FILENAMES
# =============================================================================

FILENAME_PREFIXES = (
    'data', 'config', 'user', 'system', 'app',
    'server', 'client', 'backup', 'temp', 'log',
    'file', 'doc', 'report', 'project', 'test',
)

FILENAME_SUFFIXES = (
    '', '1', '2', '3', '_old', '_new', '_backup',
    '_temp', '_final', '_draft', '_v1', '_v2',
)

FILE_EXTENSIONS = {
    Tier.BEGINNER: ('.txt', '.log', '.md', '.csv', '.json'),
    Tier.INTERMEDIATE: ('.js', '.py', '.html', '.css', '.xml'),
    Tier.ADVANCED: ('.cpp', '.java', '.go', '.rs', '.php'),
    Tier.PRO: ('.sh', '.bash', '.conf', '.yml', '.toml'),
}


def synthesize_filename(tier: Tier, rng=random) -> str:
    """Random prefix + suffix + tier-appropriate extension."""
    return (
        rng.choice(FILENAME_PREFIXES)
        + rng.choice(FILENAME_SUFFIXES)
        + rng.choice(FILE_EXTENSIONS[tier])
    )


# =============================================================================
# SELECTION
# =============================================================================

def _new_id(rng) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def _spawn_y(is_boss: bool, rng) -> float:
    height = (BOSS_SIZE if is_boss else ENEMY_SIZE).height
    max_y = GAME_AREA_HEIGHT * MAX_SPAWN_HEIGHT_PERCENTAGE
    spawn_range = max_y - MIN_SPAWN_HEIGHT - height
    return MIN_SPAWN_HEIGHT + rng.random() * spawn_range


def pick_command(tier: Tier, elapsed_ms: float, rng=random) -> Command:
    """
    Command for a regular enemy.

    During onboarding only cd and standalone commands are eligible.
    """
    if elapsed_ms >= ONBOARDING_MS:
        return random_command(tier, rng)

    eligible = [
        cmd for cmd in by_tier(tier)
        if cmd.name == 'cd' or cmd.name in STANDALONE_COMMANDS
    ]
    if not eligible:
        return random_command(tier, rng)
    return rng.choice(eligible)


def _bind(command: Command, enemy_id: str, tier: Tier, fs: FileSystemState,
          rng) -> Tuple[str, FileSystemState]:
    """Filename for the enemy and the tree with its node added."""
    name = command.name

    if name == 'cd':
        parent, dirname = rng.choice(CD_TARGETS)
        return dirname, create_entry(fs, parent, dirname, NodeKind.DIRECTORY, enemy_id)

    if name in STANDALONE_COMMANDS:
        return name, fs

    if name in FILE_COMMANDS:
        parent = rng.choice(FILE_TARGETS)
        filename = file_from_pool(parent, rng)
        return filename, create_entry(fs, parent, filename, NodeKind.FILE, enemy_id)

    # Abstract drill, nothing on disk
    return synthesize_filename(tier, rng), fs


# =============================================================================
# SPAWN FUNCTIONS
# =============================================================================

def spawn(tier: Tier, is_boss: bool, fs: FileSystemState, elapsed_ms: float,
          rng=random) -> Tuple[Enemy, FileSystemState]:
    """Create one enemy at the right edge and the updated file system."""
    enemy_id = _new_id(rng)
    position = Position(CANVAS_WIDTH, _spawn_y(is_boss, rng))

    if is_boss:
        sequence = random_sequence(tier, BOSS_SEQUENCE_LENGTH, rng)
        enemy = create_boss(enemy_id, sequence, position, synthesize_filename(tier, rng))
        logger.debug("Boss spawned: {}", ' -> '.join(cmd.name for cmd in sequence))
        return enemy, fs

    command = pick_command(tier, elapsed_ms, rng)
    filename, fs = _bind(command, enemy_id, tier, fs, rng)
    enemy = create_regular(enemy_id, command, position, filename, rng)
    logger.debug("Enemy spawned: {} {}", command.name, filename)
    return enemy, fs


def spawn_into(state: GameState, is_boss: bool = False, rng=random) -> GameState:
    """Spawn an enemy for the current tier and append it to the state."""
    enemy, fs = spawn(state.tier, is_boss, state.file_system, state.timer, rng)
    return replace(state, enemies=state.enemies + (enemy,), file_system=fs)
