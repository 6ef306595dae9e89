"""
Spawn Scheduler
================
Decides each tick whether a new hostile word or power-up enters from the
right edge. Hostiles come on the run's spawn interval; power-ups come
every 15-20 seconds, with the threshold re-rolled on every check.
"""

import logging
import random
from typing import List, Optional

from .ecs import World
from .components import PowerKind
from .config import Tuning
from .entities import create_hostile, create_powerup
from .session import SessionState
from .words import WordPool

logger = logging.getLogger(__name__)


class SpawnScheduler:
    """Inserts new targets into the World based on the spawn clock."""

    def __init__(self, tuning: Tuning, pool: WordPool,
                 rng: Optional[random.Random] = None):
        self.tuning = tuning
        self.pool = pool
        self.rng = rng or random.Random()
        self._warned_empty = set()

    def update(self, world: World, session: SessionState, now_ms: float) -> List[int]:
        """Run one scheduling check. Returns IDs of anything spawned."""
        spawned = []

        if now_ms - session.last_hostile_spawn_at > session.spawn_interval_ms:
            entity_id = self._spawn_hostile(world, session)
            if entity_id is not None:
                session.last_hostile_spawn_at = now_ms
                spawned.append(entity_id)

        if now_ms - session.last_powerup_spawn_at > self._roll_powerup_interval():
            spawned.append(self._spawn_powerup(world, session))
            session.last_powerup_spawn_at = now_ms

        return spawned

    # =========================================================================
    # HOSTILES
    # =========================================================================

    def _spawn_hostile(self, world: World, session: SessionState) -> Optional[int]:
        word = self.pool.draw(session.difficulty, self.rng)
        if word is None:
            # Empty tier: skip; the clock is left alone so we retry next tick
            if session.difficulty not in self._warned_empty:
                logger.warning("No words for %s, hostile spawns skipped",
                               session.difficulty.value)
                self._warned_empty.add(session.difficulty)
            return None

        x, y = self._entry_point()
        speed = self.tuning.hostile_speed_min + self.rng.random() * self.tuning.hostile_speed_jitter
        return create_hostile(world, word, x, y, speed)

    # =========================================================================
    # POWER-UPS
    # =========================================================================

    def _roll_powerup_interval(self) -> float:
        return self.rng.uniform(self.tuning.powerup_interval_min_ms,
                                self.tuning.powerup_interval_max_ms)

    def powerup_candidates(self, session: SessionState) -> List[PowerKind]:
        """CLEAR and SLOW always; HEAL only when damaged."""
        kinds = [PowerKind.CLEAR, PowerKind.SLOW]
        if session.health < session.max_health:
            kinds.append(PowerKind.HEAL)
        return kinds

    def _spawn_powerup(self, world: World, session: SessionState) -> int:
        kind = self.rng.choice(self.powerup_candidates(session))
        x, y = self._entry_point()
        logger.debug("Power-up %s spawned", kind.value)
        return create_powerup(world, kind, x, y, self.tuning.powerup_speed)

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    def _entry_point(self):
        """Just past the right edge, random height inside the play band."""
        t = self.tuning
        x = t.viewport_width + t.spawn_margin
        y = self.rng.random() * (t.viewport_height - 2 * t.spawn_y_margin) + t.spawn_y_margin
        return x, y
