"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class TargetKind(Enum):
    """What typing a target's text does."""
    HOSTILE = 'HOSTILE'
    POWERUP = 'POWERUP'


class PowerKind(Enum):
    """Power-up effects."""
    CLEAR = 'CLEAR'
    SLOW = 'SLOW'
    HEAL = 'HEAL'


class EffectKind(Enum):
    """Transient visual effect shapes."""
    PARTICLE = 'PARTICLE'
    SHOCKWAVE = 'SHOCKWAVE'
    PULSE = 'PULSE'


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """World position in viewport units."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Scroll:
    """Leftward drift per tick, before the run's speed multiplier."""
    base_speed: float = 1.2


@dataclass
class Velocity:
    """Free movement in units per tick (particles only)."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Gravity:
    """Added to Velocity.y every tick."""
    strength: float = 0.2


# =============================================================================
# GAMEPLAY COMPONENTS
# =============================================================================

@dataclass
class Target:
    """
    A word on screen. Hostiles and power-ups share this one shape;
    ``power_kind`` is only set when ``kind`` is POWERUP.
    """
    text: str
    kind: TargetKind = TargetKind.HOSTILE
    power_kind: Optional[PowerKind] = None

    @property
    def is_powerup(self) -> bool:
        return self.kind is TargetKind.POWERUP


# =============================================================================
# RENDERING COMPONENTS
# =============================================================================

@dataclass
class Renderable:
    """Colour token and draw order. Colours resolve through the theme."""
    color: str = 'primary'
    layer: int = 0
    visible: bool = True


# =============================================================================
# EFFECT COMPONENTS
# =============================================================================

@dataclass
class VisualEffect:
    """
    Presentation-only effect. ``life`` runs 1.0 -> 0.0 at ``decay`` per
    tick; ``growth`` widens the radius of rings.
    """
    kind: EffectKind
    life: float = 1.0
    decay: float = 0.03
    radius: float = 0.0
    growth: float = 0.0


# =============================================================================
# BACKDROP
# =============================================================================

@dataclass
class Mote:
    """One piece of theme background decoration (not an ECS entity)."""
    kind: str  # STAR / EMBER / LEAF
    x: float
    y: float
    size: float
    speed: float
    angle: float
    color: int
