"""
Difficulty Controller
======================
Owns the pacing numbers of a run: the ratcheting base speed, the
effective speed (base, or base scaled down while slow-mode is on), and
the shrinking hostile spawn interval.
"""

from .config import Tuning
from .session import Difficulty, SessionState


class DifficultyController:
    """Writes the pacing fields of SessionState."""

    def __init__(self, tuning: Tuning):
        self.tuning = tuning

    def reset(self, session: SessionState, difficulty: Difficulty) -> None:
        """Load tier defaults at the start of a run."""
        profile = self.tuning.tier(difficulty)
        session.difficulty = difficulty
        session.base_speed_multiplier = profile.base_speed
        session.spawn_interval_ms = self.tuning.initial_spawn_interval_ms
        session.slow_mode_active = False
        self.recompute_speed(session)

    def ramp(self, session: SessionState) -> bool:
        """
        One step of progression after a hostile kill.

        Returns False once the base speed has reached the cap; from
        then on neither speed nor spawn interval moves.
        """
        if session.base_speed_multiplier >= self.tuning.max_speed_threshold:
            return False

        profile = self.tuning.tier(session.difficulty)
        session.base_speed_multiplier += profile.speed_step
        session.spawn_interval_ms = max(
            self.tuning.min_spawn_interval_ms,
            session.spawn_interval_ms - profile.interval_step,
        )
        self.recompute_speed(session)
        return True

    def recompute_speed(self, session: SessionState) -> None:
        """Derive the effective speed from base speed and slow-mode."""
        if session.slow_mode_active:
            session.speed_multiplier = session.base_speed_multiplier * self.tuning.slow_factor
        else:
            session.speed_multiplier = session.base_speed_multiplier

    def set_slow_mode(self, session: SessionState, active: bool) -> None:
        session.slow_mode_active = active
        self.recompute_speed(session)
