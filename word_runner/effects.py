"""
Power-up Effects
=================
One-shot transitions for CLEAR and HEAL, and a timed SLOW with a
deferred reversion.

The SLOW reversion is an expiring timer value checked on every tick,
not a scheduled callback. Cancelling it is just dropping the timer, and
the reversion reads the base speed as it is when the timer runs out.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .ecs import World
from .components import Target, TargetKind, PowerKind
from .config import Tuning
from .difficulty import DifficultyController
from .particles import spawn_shockwave, spawn_pulse
from .session import SessionState

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class EffectTimer:
    """A pending reversion."""
    kind: PowerKind
    expires_at: float

    def remaining(self, now_ms: float) -> float:
        return max(0.0, self.expires_at - now_ms)


@dataclass
class EffectOutcome:
    """What an activation did, for the console and notifications."""
    kind: PowerKind
    notice: str
    points: int = 0
    removed: int = 0


NOTICES = {
    PowerKind.CLEAR: 'OS_CORE: DISK_CLEANUP_COMPLETE',
    PowerKind.SLOW: 'OS_CORE: CLOCK_CYCLES_REDUCED',
    PowerKind.HEAL: 'OS_CORE: INTEGRITY_REPAIRED',
}
SLOW_ENDED_NOTICE = 'OS_CORE: CLOCK_CYCLES_RESTORED'


# =============================================================================
# STATE MACHINE
# =============================================================================

class EffectStateMachine:
    """Applies power-up effects and expires the SLOW timer."""

    def __init__(self, tuning: Tuning, difficulty: DifficultyController):
        self.tuning = tuning
        self.difficulty = difficulty
        self.slow_timer: Optional[EffectTimer] = None

    def reset(self) -> None:
        """Forget any pending reversion (new run)."""
        self.slow_timer = None

    def activate(self, kind: PowerKind, world: World, session: SessionState,
                 now_ms: float) -> EffectOutcome:
        """Fire the effect for ``kind``."""
        logger.info("Power-up %s activated", kind.value)
        if kind is PowerKind.CLEAR:
            return self._clear(world, session)
        if kind is PowerKind.SLOW:
            return self._slow(session, now_ms)
        return self._heal(world, session)

    def update(self, session: SessionState, now_ms: float) -> Optional[str]:
        """Advance timers. Returns a notice if SLOW just ended."""
        if self.slow_timer is None or now_ms < self.slow_timer.expires_at:
            return None

        self.slow_timer = None
        self.difficulty.set_slow_mode(session, False)
        logger.info("Slow-mode ended, speed restored to %.3f",
                    session.speed_multiplier)
        return SLOW_ENDED_NOTICE

    def slow_remaining(self, now_ms: float) -> float:
        if self.slow_timer is None:
            return 0.0
        return self.slow_timer.remaining(now_ms)

    # =========================================================================
    # EFFECTS
    # =========================================================================

    def _clear(self, world: World, session: SessionState) -> EffectOutcome:
        """Wipe every hostile on screen. Power-ups stay."""
        removed = 0
        for entity_id, target in world.query(Target):
            if target.kind is TargetKind.HOSTILE:
                world.destroy_entity(entity_id)
                removed += 1

        points = removed * self.tuning.clear_bonus
        session.score += points
        spawn_shockwave(world, self.tuning.viewport_width / 2,
                        self.tuning.viewport_height / 2)
        return EffectOutcome(PowerKind.CLEAR, NOTICES[PowerKind.CLEAR],
                             points=points, removed=removed)

    def _slow(self, session: SessionState, now_ms: float) -> EffectOutcome:
        """Scale speed down; re-activation restarts the window."""
        self.slow_timer = EffectTimer(
            PowerKind.SLOW, now_ms + self.tuning.slow_duration_ms
        )
        self.difficulty.set_slow_mode(session, True)
        return EffectOutcome(PowerKind.SLOW, NOTICES[PowerKind.SLOW])

    def _heal(self, world: World, session: SessionState) -> EffectOutcome:
        session.heal(self.tuning.heal_amount)
        spawn_pulse(world, self.tuning.player_x, self.tuning.viewport_height / 2)
        return EffectOutcome(PowerKind.HEAL, NOTICES[PowerKind.HEAL])
