#!/usr/bin/env python3
"""
BASH QUEST - Terminal Typing Survival
======================================
Enemies carrying shell commands march toward you. Type the command
(and its filename) to take them down.

Controls:
    type    - Edit the command line
    ENTER   - Submit command (start / restart from menus)
    TAB     - Complete filename, directory or target command
    ESC/F2  - Pause / resume
    F5      - Restart
    Ctrl-Q  - Quit (also F10)
"""

import sys
import time
import random
from dataclasses import replace
from typing import Callable, Optional

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from loguru import logger

from . import state as game
from .commands import STANDALONE_COMMANDS, ConfigurationError
from .components import Tier
from .config import Settings, get_settings
from .engine import (
    GameRenderer, HEX_COLORS, CYAN, MAGENTA, YELLOW, GREEN, RED, ORANGE,
    GRAY_LIGHT, GRAY_MED, GRAY_DARK, GRAY_DARKER, WHITE
)
from .enemies import remaining_steps
from .filesystem import find_linked_path, format_path, path_string
from .line_editor import LineEditor
from .shell import complete, process_input, update_input
from .spawner import BOSS_SPAWN_INTERVAL, ENEMY_SPAWN_INTERVAL, spawn_into
from .systems import format_time, purge_inactive, update_game_state


# =============================================================================
# CONSTANTS
# =============================================================================

# Largest delta fed to the simulation in one frame
MAX_FRAME_DELTA_MS = 100.0

TITLE_ART = [
    r"  ___   _   ___ _  _    ___  _   _ ___ ___ _____ ",
    r" | _ ) /_\ / __| || |  / _ \| | | | __/ __|_   _|",
    r" | _ \/ _ \\__ \ __ | | (_) | |_| | _|\__ \ | |  ",
    r" |___/_/ \_\___/_||_|  \__\_\\___/|___|___/ |_|  ",
]

TIER_COLORS = {
    Tier.BEGINNER: 117,
    Tier.INTERMEDIATE: GREEN,
    Tier.ADVANCED: YELLOW,
    Tier.PRO: RED,
}


# =============================================================================
# UI RENDERING
# =============================================================================

def render_player(renderer: GameRenderer, player):
    renderer.put_world(player.position.x, player.position.y, '[>_]', CYAN)


def render_enemies(renderer: GameRenderer, current: game.GameState):
    target = game.targeted_enemy(current)
    for enemy in current.enemies:
        if not enemy.active:
            continue
        x, y = enemy.position.x, enemy.position.y
        is_target = target is not None and target.id == enemy.id

        if enemy.is_boss:
            label = f'{enemy.command.name} [{remaining_steps(enemy)}]'
            glyph, color = '<<@@>>', RED
        else:
            label = enemy.command.name
            glyph, color = '<#>', YELLOW

        renderer.put_world(x, y - 20, label, WHITE if is_target else GRAY_LIGHT)
        renderer.put_world(x, y, glyph, MAGENTA if is_target else color)
        if enemy.command.name not in STANDALONE_COMMANDS:
            renderer.put_world(x, y + enemy.size.height / 2, enemy.filename, GRAY_MED)


def render_particles(renderer: GameRenderer, particles):
    for particle in particles:
        fade = particle.life / particle.max_life if particle.max_life else 0
        char = '*' if fade > 0.5 else '.'
        renderer.put_world(particle.position.x, particle.position.y, char,
                           HEX_COLORS.get(particle.color, WHITE))


def render_console(renderer: GameRenderer, current: game.GameState, line: str):
    """Render the console rows below the play area."""
    width = renderer.width
    top = renderer.console_row(0)

    renderer.draw_hline(top, '=', GRAY_DARK)
    renderer.put_string(2, top, ' BASH QUEST ', MAGENTA)
    status = (f' SCORE:{current.score}  TIME:{format_time(current.timer)}'
              f'  TIER:{current.tier.name} ')
    renderer.put_string(width - len(status) - 1, top, status, TIER_COLORS[current.tier])

    # Health bar + turrets
    player = current.player
    bar_width = 20
    filled = max(0, int(player.health / player.max_health * bar_width))
    bar = '|' * filled + '.' * (bar_width - filled)
    ratio = player.health / player.max_health
    color = GREEN if ratio > 0.6 else YELLOW if ratio > 0.3 else RED
    renderer.put_string(2, top + 1, 'HEALTH:', GRAY_MED)
    renderer.put_string(10, top + 1, f'[{bar}]', color)
    turrets = 'TURRETS:ON' if current.turrets_enabled else 'TURRETS:OFF'
    renderer.put_string(35, top + 1, turrets, GREEN if current.turrets_enabled else GRAY_DARK)

    # Where the targeted enemy's file lives
    target = game.targeted_enemy(current)
    if target is not None:
        linked = find_linked_path(current.file_system, target.id)
        if linked:
            renderer.put_string(48, top + 1, ('TARGET: ' + format_path(linked))[:width - 50], MAGENTA)

    # Prompt
    prompt = f'user@bash-quest:{path_string(current.file_system)}$ '
    renderer.put_string(2, top + 2, prompt, GREEN)
    cursor = '_' if current.text_animation_phase < 500 else ' '
    renderer.put_string(2 + len(prompt), top + 2, line + cursor, WHITE)

    # Feedback
    if current.last_error:
        renderer.put_string(2, top + 3, current.last_error[:width - 4], RED)
    elif current.last_command_description:
        renderer.put_string(2, top + 3, current.last_command_description[:width - 4], GRAY_LIGHT)

    if current.suggestions:
        renderer.put_string(2, top + 4, 'TAB> ' + '  '.join(current.suggestions), GRAY_MED)

    # PATH variables
    if current.path_variables:
        paths = '  '.join(f'${v.name}={v.path}' for v in current.path_variables)
        renderer.put_string(2, top + 5, ('PATH: ' + paths)[:width - 4], CYAN)
    elif current.show_path_tutorial:
        renderer.put_string(2, top + 5, 'TIP: export TRASH=/trash  then  mv <file> $TRASH', ORANGE)

    controls = 'ENTER:Run  TAB:Complete  ESC:Pause  F5:Restart  Ctrl-Q:Quit'
    renderer.put_string(2, top + 6, controls, GRAY_DARKER)


def render_centered(renderer: GameRenderer, y: int, text: str, color: int):
    renderer.put_string(max(0, renderer.width // 2 - len(text) // 2), y, text, color)


def render_title_screen(renderer: GameRenderer, frame: int):
    art_y = renderer.game_height // 2 - 4
    for i, line in enumerate(TITLE_ART):
        render_centered(renderer, art_y + i, line, GREEN if i % 2 == 0 else CYAN)
    render_centered(renderer, art_y + len(TITLE_ART) + 1, 'TERMINAL TYPING SURVIVAL', GRAY_MED)
    if (frame // 30) % 2 == 0:
        render_centered(renderer, art_y + len(TITLE_ART) + 3, '[ PRESS ENTER TO START ]', GREEN)


def render_game_over_screen(renderer: GameRenderer, current: game.GameState, frame: int):
    y = renderer.game_height // 2 - 2
    render_centered(renderer, y, 'G A M E   O V E R', RED)
    render_centered(renderer, y + 2, f'SCORE: {current.score}', YELLOW)
    render_centered(renderer, y + 3, f'SURVIVED: {format_time(current.timer)}', YELLOW)
    if (frame // 30) % 2 == 0:
        render_centered(renderer, y + 5, '[ ENTER - PLAY AGAIN ]', CYAN)


# =============================================================================
# GAME SESSION
# =============================================================================

class GameSession:
    """
    Composition root. Owns the GameState value and its spawn timers,
    and hands frames to the renderer. Game rules stay in the pure modules.
    """

    def __init__(self, term: Terminal, settings: Settings, rng=random):
        self.term = term
        self.settings = settings
        self.rng = rng
        self.renderer = GameRenderer(term)
        self.editor = LineEditor()
        self.request_focus: Callable[[], None] = self.editor.focus

        self.running = True
        self.frame = 0
        self.state = game.new_game()
        self._reset_timers()

    def _reset_timers(self):
        # First regular enemy arrives immediately, first boss after a full interval
        self.since_enemy_spawn = float(ENEMY_SPAWN_INTERVAL)
        self.since_boss_spawn = 0.0
        self.last_tick: Optional[float] = None

    # --- lifecycle ---------------------------------------------------------

    def start(self):
        self.state = game.start(self.state)
        self.last_tick = None
        self.request_focus()

    def restart(self):
        self.state = game.restart()
        self.editor.clear()
        self._reset_timers()
        self.request_focus()

    def toggle_pause(self):
        if self.state.paused:
            self.state = game.resume(self.state)
            # Do not replay the time spent paused
            self.last_tick = None
            self.request_focus()
        else:
            self.state = game.pause(self.state)
            self.editor.blur()

    def is_running(self) -> bool:
        current = self.state
        return current.started and not current.paused and not current.game_over

    # --- simulation --------------------------------------------------------

    def tick(self, now: float):
        """Advance one frame using wall-clock `now` (seconds)."""
        self.frame += 1
        if not self.is_running():
            return

        if self.last_tick is None:
            delta_ms = 0.0
        else:
            delta_ms = min((now - self.last_tick) * 1000.0, MAX_FRAME_DELTA_MS)
        self.last_tick = now

        current = update_game_state(self.state, delta_ms)
        if current.game_over:
            self.state = purge_inactive(current)
            self.editor.blur()
            return

        self.since_enemy_spawn += delta_ms
        if self.since_enemy_spawn >= ENEMY_SPAWN_INTERVAL:
            current = spawn_into(current, is_boss=False, rng=self.rng)
            self.since_enemy_spawn = 0.0

        self.since_boss_spawn += delta_ms
        if self.since_boss_spawn >= BOSS_SPAWN_INTERVAL:
            current = spawn_into(current, is_boss=True, rng=self.rng)
            self.since_boss_spawn = 0.0

        self.state = purge_inactive(current)

    # --- input -------------------------------------------------------------

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.editor.process_key(key)
            key = self.term.inkey(timeout=0)

        if self.editor.consume_quit():
            self.running = False
            return
        if self.editor.consume_restart():
            self.restart()
            return
        if self.editor.consume_pause():
            if self.state.started and not self.state.game_over:
                self.toggle_pause()
            return

        line = self.editor.consume_submit()
        if line is not None:
            self.submit(line)
            return

        if self.editor.consume_tab() and self.is_running():
            self.state = complete(self.state)
            self.editor.set_text(self.state.current_input)

        if self.editor.consume_changed() and self.is_running():
            self.state = update_input(self.state, self.editor.text)

    def submit(self, line: str):
        if not self.state.started:
            self.start()
        elif self.state.game_over:
            self.restart()
        elif self.is_running():
            # Destination errors leave the committed line in place
            self.state = replace(self.state, current_input=line)
            self.state = process_input(line, self.state, self.rng)
            self.editor.consume_changed()
            self.editor.set_text(self.state.current_input)

    # --- rendering ---------------------------------------------------------

    def render(self):
        if (self.term.width, self.term.height) != (self.renderer.width, self.renderer.height):
            self.renderer.resize(self.term.width, self.term.height)
            print(self.term.home + self.term.clear, end='', flush=True)

        self.renderer.begin_frame()
        current = self.state

        if not current.started:
            render_title_screen(self.renderer, self.frame)
        elif current.game_over:
            render_game_over_screen(self.renderer, current, self.frame)
        else:
            render_particles(self.renderer, current.particles)
            render_enemies(self.renderer, current)
            render_player(self.renderer, current.player)
            if current.paused:
                render_centered(self.renderer, self.renderer.game_height // 2,
                                '[ PAUSED - ESC TO RESUME ]', YELLOW)

        render_console(self.renderer, current, self.editor.text)

        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)


# =============================================================================
# MAIN LOOP
# =============================================================================

def configure_logging(settings: Settings):
    """Keep log output off the fullscreen terminal."""
    logger.remove()
    if settings.log_file is None:
        logger.disable('bash_quest')
        return
    logger.enable('bash_quest')
    logger.add(settings.log_file, level=settings.log_level)


def main():
    """Entry point. Sets up the terminal and runs the frame loop."""
    settings = get_settings()
    configure_logging(settings)
    rng = random.Random(settings.seed) if settings.seed is not None else random

    term = Terminal()
    if term.width < settings.min_width or term.height < settings.min_height:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {settings.min_width}x{settings.min_height}'
        )
        sys.exit(1)

    try:
        session = GameSession(term, settings, rng)
    except ConfigurationError as exc:
        logger.error("Startup aborted: {}", exc)
        print(f'ERROR: {exc}')
        sys.exit(1)

    frame_time = 1.0 / settings.target_fps

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        print(term.home + term.clear, end='', flush=True)

        while session.running:
            now = time.perf_counter()
            session.handle_input()
            session.tick(now)
            session.render()

            elapsed = time.perf_counter() - now
            sleep_time = frame_time - elapsed
            if sleep_time > 0.001:
                time.sleep(sleep_time * 0.9)

        print(term.normal, end='', flush=True)


if __name__ == '__main__':
    main()
