"""
Shell Input Processing
=======================
Interprets the player's submitted line and turns it into a new GameState.

Precedence, first match wins:
    1. turrets on / turrets off
    2. step navigation phrase: "in <path> rmv <dir>?"  -> cd <dir>
    3. ls / ls?
    4. cd, ls, pwd
    5. export NAME=VALUE
    6. mv/cp destination checks
    7. enemy matching
    8. Command not found

Keystroke handling (suggestions, target enemy) and tab completion
live here too; they only touch the uncommitted input line.
"""

import random
import re
from dataclasses import replace
from typing import Dict, Optional, Sequence, Tuple, Union

from loguru import logger

from .commands import STANDALONE_COMMANDS, up_to_tier
from .components import PathVariable, Tier
from .enemies import death_particles, hit, matches
from .filesystem import (
    AT_ROOT, FileSystemError, change_directory, current_directory,
    describe_entries, is_explored, mark_explored, path_string, visible_entries
)
from .state import MAX_SUGGESTIONS, GameState, targeted_enemy


SCORE_BY_TIER: Dict[Tier, int] = {
    Tier.BEGINNER: 10,
    Tier.INTERMEDIATE: 20,
    Tier.ADVANCED: 30,
    Tier.PRO: 50,
}

TURRETS_ON = 'turrets on'
TURRETS_OFF = 'turrets off'

STEP_NAVIGATION = re.compile(r'^in\s+(\S+)\s+rmv\s+([^\s?]+)\??$', re.IGNORECASE)

# Commands that need a destination argument (prefix match)
DESTINATION_COMMANDS = ('mv', 'cp')


# =============================================================================
# ERROR MESSAGES
# =============================================================================

ALREADY_AT_ROOT = 'Already at root directory'


def command_not_found(raw: str) -> str:
    return f'Command not found: {raw}'


def directory_not_found(target: str) -> str:
    return f'Directory not found: {target}'


def missing_destination(command: str) -> str:
    return f'{command} requires a destination. Use a PATH variable like $TRASH'


def unknown_path_variable(name: str) -> str:
    return f'PATH variable {name} not found. Create it with: export {name}=/path'


# =============================================================================
# ENEMY MATCHING
# =============================================================================

def _defeat_first_match(text: str, state: GameState, rng) -> Optional[GameState]:
    """Hit the first active enemy matching `text`. None if nothing matched."""
    for index, enemy in enumerate(state.enemies):
        if not enemy.active or not matches(text, enemy):
            continue

        updated, defeated = hit(enemy)
        particles = state.particles
        if defeated:
            particles = particles + death_particles(enemy, rng)
            logger.debug("Defeated {} ({})", enemy.command.name, enemy.filename)
        else:
            logger.debug("Boss advanced to step {}", updated.sequence_index)

        enemies = state.enemies[:index] + (updated,) + state.enemies[index + 1:]
        return replace(
            state,
            enemies=enemies,
            score=state.score + SCORE_BY_TIER[state.tier],
            current_input='',
            last_error=None,
            last_command_description=enemy.command.description,
            particles=particles,
            target_enemy=None,
        )
    return None


# =============================================================================
# FILE-SYSTEM COMMANDS
# =============================================================================

def _change_directory(target: str, state: GameState) -> GameState:
    result = change_directory(state.file_system, target)
    if isinstance(result, FileSystemError):
        if result.kind == AT_ROOT:
            message = ALREADY_AT_ROOT
        else:
            message = directory_not_found(target)
        return replace(state, current_input='', last_error=message,
                       last_command_description=None)

    return replace(
        state,
        file_system=result,
        current_input='',
        last_error=None,
        last_command_description=f'Changed directory to {path_string(result)}',
    )


def _list_directory(state: GameState) -> GameState:
    fs = mark_explored(state.file_system)
    listing = describe_entries(current_directory(fs).children)
    return replace(
        state,
        file_system=fs,
        current_input='',
        last_error=None,
        last_command_description=f'Contents of {path_string(fs)}: {listing}',
    )


def _print_directory(state: GameState) -> GameState:
    return replace(
        state,
        current_input='',
        last_error=None,
        last_command_description=f'Current directory: {path_string(state.file_system)}',
    )


def process_file_system_command(text: str, state: GameState,
                                rng=random) -> Optional[GameState]:
    """
    Handle cd, ls and pwd. Returns None for anything else.

    Nothing after this runs for these commands. A failed cd stops here;
    a successful one also takes down the first cd/ls/pwd enemy it matches.
    """
    parts = text.split()
    if not parts:
        return None

    command = parts[0]
    if command == 'cd':
        result = _change_directory(parts[1] if len(parts) > 1 else '', state)
    elif command == 'ls':
        result = _list_directory(state)
    elif command == 'pwd':
        result = _print_directory(state)
    else:
        return None

    if result.last_error is not None:
        return result

    matched = _defeat_first_match(text, result, rng)
    if matched is None:
        return result
    return replace(matched, last_command_description=result.last_command_description)


# =============================================================================
# PATH VARIABLES
# =============================================================================

def resolve_path_variable(state: GameState, name: str) -> Optional[str]:
    for variable in state.path_variables:
        if variable.name == name:
            return variable.path
    return None


def _process_export(text: str, state: GameState) -> Optional[GameState]:
    """Upsert a PATH variable. Malformed assignments fall through (None)."""
    if not text.startswith('export ') or '=' not in text:
        return None

    parts = text[len('export '):].split('=')
    if len(parts) != 2:
        return None
    name, path = parts[0].strip(), parts[1].strip()

    variables = list(state.path_variables)
    for index, variable in enumerate(variables):
        if variable.name == name:
            variables[index] = PathVariable(name, path)
            break
    else:
        variables.append(PathVariable(name, path))

    return replace(
        state,
        path_variables=tuple(variables),
        show_path_tutorial=False,
        current_input='',
        last_error=None,
        last_command_description=f'Created PATH variable: {name}={path}',
    )


def requires_destination(text: str) -> bool:
    return text.startswith(DESTINATION_COMMANDS)


def _check_destination(text: str, state: GameState) -> Union[GameState, str]:
    """
    Validate a mv/cp destination.

    Returns an error state, or the text to match enemies against
    (command and source only).
    """
    parts = text.split()
    if len(parts) < 2:
        return text

    if len(parts) < 3:
        return replace(state, last_error=missing_destination(parts[0]),
                       last_command_description=None)

    destination = parts[2]
    if destination.startswith('$'):
        name = destination[1:]
        if resolve_path_variable(state, name) is None:
            return replace(state, last_error=unknown_path_variable(name),
                           last_command_description=None)

    return f'{parts[0]} {parts[1]}'


# =============================================================================
# SUBMIT
# =============================================================================

def process_input(raw: str, state: GameState, rng=random) -> GameState:
    """Apply one submitted line and return the resulting state."""
    text = raw.strip()

    if text == TURRETS_ON and not state.turrets_enabled:
        return replace(
            state, turrets_enabled=True, current_input='', last_error=None,
            last_command_description='Activates automatic turret system to defeat regular enemies',
        )
    if text == TURRETS_OFF and state.turrets_enabled:
        return replace(
            state, turrets_enabled=False, current_input='', last_error=None,
            last_command_description='Deactivates automatic turret system',
        )

    step = STEP_NAVIGATION.match(text)
    if step:
        return process_file_system_command(f'cd {step.group(2)}', state, rng)

    if text in ('ls?', 'ls'):
        return process_file_system_command('ls', state, rng)

    result = process_file_system_command(text, state, rng)
    if result is not None:
        return result

    result = _process_export(text, state)
    if result is not None:
        return result

    match_text = text
    if requires_destination(text):
        checked = _check_destination(text, state)
        if isinstance(checked, GameState):
            return checked
        match_text = checked

    result = _defeat_first_match(match_text, state, rng)
    if result is not None:
        return result

    return replace(
        state,
        current_input='',
        last_error=command_not_found(raw),
        last_command_description=None,
        target_enemy=None,
    )


# =============================================================================
# KEYSTROKES & COMPLETION
# =============================================================================

def generate_suggestions(text: str, tier: Tier,
                         state: Optional[GameState] = None) -> Tuple[str, ...]:
    """Up to four completions for a partial line."""
    if not text:
        return ()

    commands = [cmd.name for cmd in up_to_tier(tier) if cmd.name.startswith(text)]

    if state is not None and text.startswith('cd ') and is_explored(state.file_system):
        partial = text[3:].strip()
        fs = state.file_system
        directories = [
            f'cd {entry.name}' for entry in current_directory(fs).children
            if entry.is_directory and entry.name.startswith(partial)
        ]
        if fs.current_path:
            if '..'.startswith(partial):
                directories.insert(0, 'cd ..')
            if '/'.startswith(partial):
                directories.insert(0, 'cd /')
        return tuple((directories + commands)[:MAX_SUGGESTIONS])

    return tuple(commands[:MAX_SUGGESTIONS])


def update_input(state: GameState, text: str) -> GameState:
    """Reflect a keystroke: suggestions and target enemy, nothing committed."""
    target = None
    if text:
        for enemy in state.enemies:
            if enemy.active and enemy.command.name.startswith(text):
                target = enemy.id
                break

    return replace(
        state,
        current_input=text,
        suggestions=generate_suggestions(text, state.tier, state),
        target_enemy=target,
        text_animation_phase=0.0,
        tab_cycle_index=0,
    )


def _cycle(state: GameState, prefix: str, candidates: Sequence[str]) -> GameState:
    index = state.tab_cycle_index % len(candidates)
    text = prefix + candidates[index]
    return replace(
        state,
        current_input=text,
        suggestions=generate_suggestions(text, state.tier, state),
        tab_cycle_index=index + 1,
    )


def complete(state: GameState) -> GameState:
    """
    Tab completion.

    Cycles directory entries after `cd `, or on-screen filenames after any
    other command word. Otherwise completes the targeted enemy's command,
    then the first suggestion.
    """
    text = state.current_input

    if text.startswith('cd '):
        directories = [
            entry.name for entry in visible_entries(state.file_system)
            if entry.is_directory
        ]
        if directories:
            return _cycle(state, 'cd ', directories)
    elif ' ' in text and state.visible_filenames:
        return _cycle(state, text.rsplit(' ', 1)[0] + ' ', state.visible_filenames)

    enemy = targeted_enemy(state)
    if enemy is not None:
        name = enemy.command.name
        if text == name and name not in STANDALONE_COMMANDS:
            completion = f'{name} {enemy.filename}'
        else:
            completion = name
        return replace(state, current_input=completion,
                       suggestions=generate_suggestions(completion, state.tier, state))

    if state.suggestions:
        completion = state.suggestions[0]
        return replace(state, current_input=completion,
                       suggestions=generate_suggestions(completion, state.tier, state))

    return state
