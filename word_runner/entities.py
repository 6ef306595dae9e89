"""
Target Archetypes
==================
Factories for the two kinds of scrolling word: hostile words that must
be typed before they reach the line, and power-up pickups.
"""

from .ecs import World
from .components import (
    Position, Scroll, Renderable, Target, TargetKind, PowerKind
)


# =============================================================================
# HOSTILE WORD
# =============================================================================
# Typed to destroy. Scores, feeds the combo, ramps difficulty.

def create_hostile(world: World, word: str, x: float, y: float,
                   base_speed: float) -> int:
    """Create a hostile word target."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Scroll(base_speed))
    world.add_component(entity_id, Target(word, TargetKind.HOSTILE))
    world.add_component(entity_id, Renderable(color='primary', layer=5))

    return entity_id


# =============================================================================
# POWER-UP
# =============================================================================
# Displayed as "_KIND". Typed to trigger its effect; no score.

POWERUP_COLORS = {
    PowerKind.CLEAR: 'primary',
    PowerKind.SLOW: 'slow',
    PowerKind.HEAL: 'heal',
}


def powerup_text(kind: PowerKind) -> str:
    return f'_{kind.value}'


def create_powerup(world: World, kind: PowerKind, x: float, y: float,
                   base_speed: float) -> int:
    """Create a power-up pickup."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Scroll(base_speed))
    world.add_component(entity_id, Target(
        powerup_text(kind), TargetKind.POWERUP, power_kind=kind
    ))
    world.add_component(entity_id, Renderable(color=POWERUP_COLORS[kind], layer=6))

    return entity_id
