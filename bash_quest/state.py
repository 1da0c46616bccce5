"""
Game State
===========
The aggregate snapshot threaded through every transition, plus
lifecycle helpers (new game, start, pause, resume, restart).

A GameState is never mutated. The driver adopts whatever value
the last transition returned.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from loguru import logger

from .commands import validate_catalog
from .components import (
    Enemy, FileSystemState, Particle, PathVariable, Player, Position, Size, Tier
)
from .filesystem import initial_file_system


# =============================================================================
# LAYOUT
# =============================================================================

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600
CONSOLE_HEIGHT = 200
GAME_AREA_HEIGHT = CANVAS_HEIGHT - CONSOLE_HEIGHT

PLAYER_WIDTH = 50
PLAYER_HEIGHT = 50
PLAYER_INITIAL_X = 100
PLAYER_INITIAL_Y = GAME_AREA_HEIGHT - PLAYER_HEIGHT - 20

MAX_SUGGESTIONS = 4


def initialize_player() -> Player:
    return Player(
        health=100,
        max_health=100,
        position=Position(PLAYER_INITIAL_X, PLAYER_INITIAL_Y),
        size=Size(PLAYER_WIDTH, PLAYER_HEIGHT),
    )


@dataclass(frozen=True)
class GameState:
    """Central game state. Passed through all transitions."""
    player: Player = field(default_factory=initialize_player)
    enemies: Tuple[Enemy, ...] = ()
    score: int = 0
    timer: float = 0.0  # ms of unpaused play
    tier: Tier = Tier.BEGINNER

    started: bool = False
    paused: bool = False
    game_over: bool = False

    # Shell line
    current_input: str = ''
    last_error: Optional[str] = None
    last_command_description: Optional[str] = None
    suggestions: Tuple[str, ...] = ()
    target_enemy: Optional[str] = None  # Enemy id, resolved on read
    tab_cycle_index: int = 0
    visible_filenames: Tuple[str, ...] = ()

    # Turrets
    turrets_enabled: bool = False
    turret_cooldown: float = 0.0

    # Effects
    particles: Tuple[Particle, ...] = ()
    text_animation_phase: float = 0.0

    # PATH variables
    path_variables: Tuple[PathVariable, ...] = ()
    show_path_tutorial: bool = True

    file_system: FileSystemState = field(default_factory=initial_file_system)


# =============================================================================
# LIFECYCLE
# =============================================================================

def new_game() -> GameState:
    """Fresh, not-yet-started game. Fails fast on a broken catalog."""
    validate_catalog()
    return GameState()


def start(state: GameState) -> GameState:
    logger.info("Game started")
    return replace(state, started=True)


def pause(state: GameState) -> GameState:
    if state.game_over or not state.started:
        return state
    return replace(state, paused=True)


def resume(state: GameState) -> GameState:
    return replace(state, paused=False)


def restart() -> GameState:
    """Discard everything and begin a new, already started game."""
    logger.info("Game restarted")
    return replace(new_game(), started=True)


# =============================================================================
# LOOKUPS
# =============================================================================

def find_enemy(state: GameState, enemy_id: Optional[str]) -> Optional[Enemy]:
    if enemy_id is None:
        return None
    for enemy in state.enemies:
        if enemy.id == enemy_id:
            return enemy
    return None


def targeted_enemy(state: GameState) -> Optional[Enemy]:
    """The enemy the partial input points at, if it is still active."""
    enemy = find_enemy(state, state.target_enemy)
    if enemy is None or not enemy.active:
        return None
    return enemy


def active_enemies(state: GameState) -> Tuple[Enemy, ...]:
    return tuple(enemy for enemy in state.enemies if enemy.active)
