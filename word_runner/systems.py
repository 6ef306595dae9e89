"""
ECS Systems
============
Functions that operate on entities with matching components.
Simulation systems come first; render systems at the bottom only read.
"""

import math
import random
from typing import List, Optional

from .ecs import World
from .components import (
    Position, Scroll, Velocity, Gravity, Target, Renderable,
    VisualEffect, EffectKind, Mote
)
from .engine import GameRenderer
from .themes import Theme


# =============================================================================
# TARGET SYSTEMS
# =============================================================================

def scroll_system(world: World, speed_multiplier: float):
    """Move every target left by its base speed times the run's multiplier."""
    for entity_id, pos, scroll in world.query(Position, Scroll):
        pos.x -= scroll.base_speed * speed_multiplier


def boundary_system(world: World, line_x: float) -> List[int]:
    """
    Find targets that have reached the defense line.

    Returns their IDs oldest first. Removal and damage are left to the
    caller so it can stop the moment health runs out.
    """
    return [
        entity_id
        for entity_id, pos, _ in world.query(Position, Target)
        if pos.x <= line_x
    ]


# =============================================================================
# EFFECT SYSTEMS
# =============================================================================

def motion_system(world: World):
    """Integrate free-moving particles, then apply gravity."""
    for entity_id, pos, vel in world.query(Position, Velocity):
        pos.x += vel.x
        pos.y += vel.y
    for entity_id, vel, grav in world.query(Velocity, Gravity):
        vel.y += grav.strength


def effect_system(world: World):
    """Fade effects, grow rings, and destroy anything fully faded."""
    motion_system(world)
    for entity_id, effect in world.query(VisualEffect):
        effect.life -= effect.decay
        effect.radius += effect.growth
        if effect.life <= 0:
            world.destroy_entity(entity_id)


# =============================================================================
# BACKDROP
# =============================================================================

_MOTE_COLORS = {
    'STAR': [255],
    'EMBER': [202, 208, 214, 166],
    'LEAF': [28, 34, 70, 64],
}


def generate_backdrop(kind: Optional[str], width: float, height: float,
                      count: int = 50,
                      rng: Optional[random.Random] = None) -> List[Mote]:
    """Scatter ``count`` motes of ``kind``; no kind means no backdrop."""
    if kind not in _MOTE_COLORS:
        return []
    rng = rng or random
    max_size = 2 if kind == 'STAR' else 4
    return [
        Mote(
            kind=kind,
            x=rng.random() * width,
            y=rng.random() * height,
            size=rng.random() * max_size + 1,
            speed=rng.random() * 0.5 + 0.1,
            angle=rng.random() * math.pi * 2,
            color=rng.choice(_MOTE_COLORS[kind]),
        )
        for _ in range(count)
    ]


def backdrop_system(motes: List[Mote], width: float, height: float):
    """Drift motes leftward, wrapping at the edges."""
    for mote in motes:
        if mote.kind == 'STAR':
            mote.x -= mote.speed
        elif mote.kind == 'EMBER':
            mote.x -= mote.speed * 2
            mote.y -= math.sin(mote.angle) * 0.5
            mote.angle += 0.05
            if mote.y < 0:
                mote.y = height
        else:
            mote.x -= mote.speed
            mote.y += math.cos(mote.angle) * 0.5
            mote.angle += 0.02
            if mote.y > height:
                mote.y = 0
        if mote.x < 0:
            mote.x = width


# =============================================================================
# RENDERING SYSTEMS
# =============================================================================

_MOTE_CHARS = {'STAR': '.', 'EMBER': '*', 'LEAF': '~'}


def render_backdrop(renderer: GameRenderer, motes: List[Mote]):
    for mote in motes:
        cx, cy = renderer.to_cell(mote.x, mote.y)
        renderer.put(cx, cy, _MOTE_CHARS.get(mote.kind, '.'), mote.color)


def render_defense_line(renderer: GameRenderer, line_x: float, theme: Theme):
    """The player's wall: a solid column with hatching."""
    cx, _ = renderer.to_cell(line_x, 0)
    for row in range(renderer.game_height):
        renderer.put(cx, row, '|', theme.primary)
        if row % 2 == 0:
            renderer.put(cx - 1, row, '/', theme.dim)


def render_targets(world: World, renderer: GameRenderer, theme: Theme):
    """Draw each word in brackets; power-ups in their own colour."""
    render_list = []
    for entity_id, pos, target, rend in world.query(Position, Target, Renderable):
        if rend.visible:
            render_list.append((rend.layer, entity_id, pos, target, rend))
    render_list.sort(key=lambda item: (item[0], item[1]))

    for _, _, pos, target, rend in render_list:
        cx, cy = renderer.to_cell(pos.x, pos.y)
        label = f'[{target.text}]'
        renderer.put_string(cx, cy, label, theme.color(rend.color))


def render_effects(world: World, renderer: GameRenderer, theme: Theme):
    """Particles as dots, rings as a sparse circle; both fade to dim."""
    for entity_id, pos, effect, rend in world.query(Position, VisualEffect, Renderable):
        color = theme.color(rend.color) if effect.life > 0.4 else theme.dim
        if effect.kind is EffectKind.PARTICLE:
            cx, cy = renderer.to_cell(pos.x, pos.y)
            renderer.put(cx, cy, '*' if effect.life > 0.5 else '.', color)
            continue

        char = 'o' if effect.kind is EffectKind.SHOCKWAVE else '+'
        points = max(12, int(effect.radius / 8))
        for i in range(points):
            angle = 2 * math.pi * i / points
            px = pos.x + math.cos(angle) * effect.radius
            py = pos.y + math.sin(angle) * effect.radius
            cx, cy = renderer.to_cell(px, py)
            renderer.put(cx, cy, char, color)
