"""
Particle System
================
Explosion presets keyed by command category, and particle physics.

Particles are immutable; tick() returns a fresh tuple each frame.
"""

import random
import math
from typing import Dict, Iterable, Optional, Tuple

from .components import Particle, Position, Size, Velocity


PARTICLE_COLORS = ('#f38ba8', '#f9e2af', '#a6e3a1', '#89b4fa', '#cba6f7')
PARTICLE_COUNT = 30
PARTICLE_MAX_LIFE = 1000.0  # ms
PARTICLE_GRAVITY = 0.1  # Added to vy every tick
REFERENCE_FRAME_MS = 16.0

RANDOM_COLOR = 'random'


# =============================================================================
# EXPLOSION PRESETS
# =============================================================================
# category -> (count, color, size range, speed range, pattern, gravity)

PARTICLE_EFFECTS: Dict[str, dict] = {
    'move': {
        'count': 20, 'color': '#89b4fa', 'size': (2, 5), 'speed': (1, 3),
        'pattern': 'directional', 'gravity': -0.5,
    },
    'list': {
        'count': 30, 'color': '#a6e3a1', 'size': (1, 3), 'speed': (0.5, 2),
        'pattern': 'expand', 'gravity': 0.0,
    },
    'print': {
        'count': 25, 'color': '#cdd6f4', 'size': (1, 4), 'speed': (1, 2),
        'pattern': 'cascade', 'gravity': 0.2,
    },
    'create': {
        'count': 35, 'color': '#f9e2af', 'size': (2, 4), 'speed': (1, 3),
        'pattern': 'burst', 'gravity': -0.1,
    },
    'delete': {
        'count': 40, 'color': '#f38ba8', 'size': (2, 5), 'speed': (2, 4),
        'pattern': 'implode', 'gravity': 0.3,
    },
    'copy': {
        'count': 30, 'color': '#89dceb', 'size': (2, 4), 'speed': (1, 2.5),
        'pattern': 'duplicate', 'gravity': 0.0,
    },
    'rename': {
        'count': 25, 'color': '#cba6f7', 'size': (2, 4), 'speed': (1, 3),
        'pattern': 'transform', 'gravity': 0.1,
    },
    'default': {
        'count': PARTICLE_COUNT, 'color': RANDOM_COLOR, 'size': (2, 4), 'speed': (1, 3),
        'pattern': 'fountain', 'gravity': 0.1,
    },
}


def effect_for(category: Optional[str]) -> dict:
    """Preset for a category, falling back to the fountain default."""
    return PARTICLE_EFFECTS.get(category or 'default', PARTICLE_EFFECTS['default'])


# =============================================================================
# SPAWNING
# =============================================================================

def _radial(speed_min: float, speed_max: float, rng) -> Tuple[float, float]:
    angle = rng.uniform(0, math.pi * 2)
    speed = rng.uniform(speed_min, speed_max)
    return math.cos(angle) * speed, math.sin(angle) * speed


def _launch(pattern: str, index: int, position: Position, size: Size,
            speed: Tuple[float, float], previous: Tuple[float, float],
            rng) -> Tuple[float, float, float, float]:
    """Initial (x, y, vx, vy) for one particle of a pattern."""
    speed_min, speed_max = speed
    cx = position.x + size.width / 2
    cy = position.y + size.height / 2

    if pattern == 'directional':
        # Rightward, like leaving through a doorway
        vx = rng.uniform(speed_min, speed_max)
        vy = (rng.random() - 0.5) * speed_max
        return cx, cy, vx, vy

    if pattern == 'cascade':
        vx = (rng.random() - 0.5) * speed_max
        vy = rng.uniform(speed_min, speed_max)
        return cx, cy, vx, vy

    if pattern == 'implode':
        # Start on a ring around the enemy and fall inward
        angle = rng.uniform(0, math.pi * 2)
        radius = size.width / 2
        x = cx + math.cos(angle) * radius
        y = cy + math.sin(angle) * radius
        return x, y, -math.cos(angle) * speed_min, -math.sin(angle) * speed_min

    if pattern == 'duplicate':
        # Pairs share a spawn point inside the bounding box
        if index % 2 == 0:
            x = position.x + rng.random() * size.width
            y = position.y + rng.random() * size.height
        else:
            x, y = previous
        vx, vy = _radial(speed_min, speed_max, rng)
        return x, y, vx, vy

    if pattern in ('expand', 'burst', 'transform'):
        vx, vy = _radial(speed_min, speed_max, rng)
        return cx, cy, vx, vy

    # fountain
    vx, vy = _radial(speed_min, speed_max, rng)
    return cx, cy, vx, vy - 2  # Bias upward


def explosion(position: Position, size: Size, category: Optional[str] = None,
              rng=random) -> Tuple[Particle, ...]:
    """Spawn an explosion centered on a bounding box."""
    effect = effect_for(category)
    particles = []
    previous = (position.x, position.y)

    for index in range(effect['count']):
        x, y, vx, vy = _launch(
            effect['pattern'], index, position, size,
            effect['speed'], previous, rng
        )
        previous = (x, y)

        if effect['color'] == RANDOM_COLOR:
            color = rng.choice(PARTICLE_COLORS)
        else:
            color = effect['color']

        life = PARTICLE_MAX_LIFE * rng.uniform(0.5, 1.0)
        particles.append(Particle(
            position=Position(x, y),
            velocity=Velocity(vx, vy),
            color=color,
            size=rng.uniform(*effect['size']),
            life=life,
            max_life=life,
            gravity=effect['gravity'],
        ))

    return tuple(particles)


# =============================================================================
# PHYSICS
# =============================================================================

def tick(particles: Iterable[Particle], delta_ms: float) -> Tuple[Particle, ...]:
    """
    Advance particles by `delta_ms`.

    Global gravity and per-particle gravity both apply. Expired
    particles are dropped.
    """
    scale = delta_ms / REFERENCE_FRAME_MS
    alive = []
    for particle in particles:
        life = particle.life - delta_ms
        if life <= 0:
            continue
        vx = particle.velocity.x
        vy = particle.velocity.y + PARTICLE_GRAVITY + particle.gravity
        alive.append(Particle(
            position=Position(particle.position.x + vx * scale,
                              particle.position.y + vy * scale),
            velocity=Velocity(vx, vy),
            color=particle.color,
            size=particle.size,
            life=life,
            max_life=particle.max_life,
            gravity=particle.gravity,
        ))
    return tuple(alive)
