"""
Visual Effects
===============
Particle bursts, shockwave rings and heal pulses. Presentation only:
nothing in here touches score, health or targets.
"""

import random
from typing import Optional

from .ecs import World
from .components import (
    Position, Velocity, Gravity, Renderable, VisualEffect, EffectKind
)


def spawn_particle(
    world: World,
    x: float, y: float,
    vx: float, vy: float,
    color: str = 'primary',
    decay: float = 0.03,
    gravity: float = 0.2
) -> int:
    """Spawn a single falling particle."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(vx, vy))
    world.add_component(entity_id, VisualEffect(EffectKind.PARTICLE, decay=decay))
    world.add_component(entity_id, Renderable(color=color, layer=8))

    if gravity > 0:
        world.add_component(entity_id, Gravity(gravity))

    return entity_id


def spawn_burst(
    world: World,
    x: float, y: float,
    color: str = 'primary',
    count: int = 15,
    spread: float = 10.0,
    rng: Optional[random.Random] = None
):
    """Spray ``count`` particles from a destroyed word."""
    rng = rng or random
    for _ in range(count):
        spawn_particle(
            world, x, y,
            vx=(rng.random() - 0.5) * spread,
            vy=(rng.random() - 0.5) * spread,
            color=color,
            decay=0.02 + rng.random() * 0.02,
        )


def spawn_ring(world: World, x: float, y: float, kind: EffectKind,
               growth: float, color: str) -> int:
    """Spawn an expanding ring (shockwave or pulse)."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, VisualEffect(kind, decay=0.03, growth=growth))
    world.add_component(entity_id, Renderable(color=color, layer=7))

    return entity_id


def spawn_shockwave(world: World, x: float, y: float, color: str = 'primary') -> int:
    return spawn_ring(world, x, y, EffectKind.SHOCKWAVE, growth=20.0, color=color)


def spawn_pulse(world: World, x: float, y: float, color: str = 'heal') -> int:
    return spawn_ring(world, x, y, EffectKind.PULSE, growth=15.0, color=color)
