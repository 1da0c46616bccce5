"""
Command Catalog
================
Static table of recognized commands grouped into difficulty tiers.
"""

import random
from typing import Iterable, Optional, Tuple

from .components import Command, Tier


# =============================================================================
# ICON CATEGORIES
# =============================================================================
# Category selects the particle preset and HUD glyph for a command.

MOVE = 'move'
LIST = 'list'
PRINT = 'print'
CREATE = 'create'
DELETE = 'delete'
COPY = 'copy'
RENAME = 'rename'
SEARCH = 'search'
PERMISSION = 'permission'
VIEW = 'view'
TRANSFORM = 'transform'
ARCHIVE = 'archive'
PIPE = 'pipe'
ADVANCED = 'advanced'


# =============================================================================
# COMMAND TABLE
# =============================================================================

COMMANDS: Tuple[Command, ...] = (
    # Beginner
    Command('cd', 'Change directory', Tier.BEGINNER, MOVE),
    Command('ls', 'List directory contents', Tier.BEGINNER, LIST),
    Command('pwd', 'Print working directory', Tier.BEGINNER, PRINT),
    Command('echo', 'Display a line of text', Tier.BEGINNER, PRINT),
    Command('cat', 'Concatenate files and print on the standard output', Tier.BEGINNER, PRINT),

    # Intermediate
    Command('mkdir', 'Make directories', Tier.INTERMEDIATE, CREATE),
    Command('rm', 'Remove files or directories', Tier.INTERMEDIATE, DELETE),
    Command('cp', 'Copy files and directories', Tier.INTERMEDIATE, COPY),
    Command('mv', 'Move (rename) files', Tier.INTERMEDIATE, RENAME),
    Command('grep', 'Print lines that match patterns', Tier.INTERMEDIATE, SEARCH),
    Command('touch', 'Change file timestamps', Tier.INTERMEDIATE, CREATE),

    # Advanced
    Command('chmod', 'Change file mode bits', Tier.ADVANCED, PERMISSION),
    Command('chown', 'Change file owner and group', Tier.ADVANCED, PERMISSION),
    Command('find', 'Search for files in a directory hierarchy', Tier.ADVANCED, SEARCH),
    Command('tail', 'Output the last part of files', Tier.ADVANCED, VIEW),
    Command('head', 'Output the first part of files', Tier.ADVANCED, VIEW),
    Command('sed', 'Stream editor for filtering and transforming text', Tier.ADVANCED, TRANSFORM),

    # Pro
    Command('ls | grep', 'Pipe ls output to grep', Tier.PRO, PIPE),
    Command('find . -name', 'Find files by name', Tier.PRO, SEARCH),
    Command('awk', 'Pattern scanning and processing language', Tier.PRO, TRANSFORM),
    Command('xargs', 'Build and execute command lines from standard input', Tier.PRO, ADVANCED),
    Command('tar', 'Tape archiver', Tier.PRO, ARCHIVE),
)

# Commands that take no filename argument
STANDALONE_COMMANDS = ('ls', 'pwd', 'clear', 'history')


class ConfigurationError(Exception):
    """Raised at startup when the catalog cannot serve every tier."""


# =============================================================================
# QUERY FUNCTIONS
# =============================================================================

def by_tier(tier: Tier, commands: Iterable[Command] = COMMANDS) -> Tuple[Command, ...]:
    """Commands whose tier is exactly `tier`, in catalog order."""
    return tuple(cmd for cmd in commands if cmd.tier == tier)


def up_to_tier(tier: Tier) -> Tuple[Command, ...]:
    """Commands unlocked at `tier`, lowest tier first."""
    return tuple(cmd for t in Tier if t <= tier for cmd in by_tier(t))


def find_command(name: str) -> Optional[Command]:
    for cmd in COMMANDS:
        if cmd.name == name:
            return cmd
    return None


def random_command(tier: Tier, rng=random) -> Command:
    """Uniform pick from the tier's commands."""
    return rng.choice(by_tier(tier))


def random_sequence(tier: Tier, length: int, rng=random) -> Tuple[Command, ...]:
    """Independent uniform draws (repeats allowed). Used for boss chains."""
    pool = by_tier(tier)
    return tuple(rng.choice(pool) for _ in range(length))


def validate_catalog(commands: Iterable[Command] = COMMANDS) -> None:
    """Fail fast if any tier would have nothing to spawn."""
    commands = tuple(commands)
    empty = [tier.name for tier in Tier if not by_tier(tier, commands)]
    if empty:
        raise ConfigurationError(
            f"No commands configured for tier(s): {', '.join(empty)}"
        )
