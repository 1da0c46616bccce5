"""
Component Definitions
======================
All game records are frozen dataclasses with no behavior.
Transitions build new records with dataclasses.replace().
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple
from enum import Enum, IntEnum


# =============================================================================
# GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class Position:
    """Play-area position in pixels."""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Velocity:
    """Movement in pixels per reference frame (16ms)."""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Size:
    """Axis-aligned bounding box."""
    width: float = 0.0
    height: float = 0.0


# =============================================================================
# COMMANDS
# =============================================================================

class Tier(IntEnum):
    """Difficulty bands. Ordering gates commands and scales score."""
    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    PRO = 4


@dataclass(frozen=True)
class Command:
    """A recognized shell command. Owned by the catalog."""
    name: str
    description: str
    tier: Tier
    category: str = 'advanced'


# =============================================================================
# FILE SYSTEM
# =============================================================================

class NodeKind(Enum):
    FILE = 'file'
    DIRECTORY = 'directory'


@dataclass(frozen=True)
class FileSystemNode:
    """
    A file or directory in the virtual tree.

    linked_enemy_id is a non-owning back-reference to the enemy
    that spawned this node; resolve it through the file system.
    """
    name: str
    kind: NodeKind = NodeKind.FILE
    children: Tuple['FileSystemNode', ...] = ()
    linked_enemy_id: Optional[str] = None

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass(frozen=True)
class FileSystemState:
    """Tree, cursor and the set of directories the player has listed."""
    root: FileSystemNode
    current_path: Tuple[str, ...] = ()
    explored: FrozenSet[str] = frozenset({'/'})


# =============================================================================
# ACTORS
# =============================================================================

@dataclass(frozen=True)
class Player:
    health: int = 100
    max_health: int = 100
    position: Position = Position()
    size: Size = Size(50, 50)
    level: int = 1
    experience: int = 0
    experience_to_next_level: int = 100

    @property
    def right_edge(self) -> float:
        return self.position.x + self.size.width


@dataclass(frozen=True)
class Enemy:
    """
    A hostile bound to a command.

    Regular enemies use `command` alone. Bosses walk through
    `command_sequence`; `command` always mirrors the current step.
    """
    id: str
    command: Command
    health: int
    max_health: int
    position: Position
    speed: float
    damage: int
    size: Size
    active: bool = True
    is_boss: bool = False
    filename: str = ''
    command_sequence: Optional[Tuple[Command, ...]] = None
    sequence_index: Optional[int] = None


# =============================================================================
# EFFECTS & SHELL
# =============================================================================

@dataclass(frozen=True)
class Particle:
    position: Position
    velocity: Velocity
    color: str
    size: float
    life: float
    max_life: float
    gravity: float = 0.0


@dataclass(frozen=True)
class PathVariable:
    """User alias created with `export NAME=value`."""
    name: str
    path: str
