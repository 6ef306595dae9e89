"""
Session State
==============
Per-run mutable state. Owned by the RunController and handed to each
system call; rebuilt from scratch on every new run.
"""

from dataclasses import dataclass, field
from typing import List
from enum import Enum


class Difficulty(Enum):
    """Difficulty tier: word lengths, starting pace, and ramp steps."""
    EASY = 'EASY'
    MEDIUM = 'MEDIUM'
    HARD = 'HARD'

    @classmethod
    def parse(cls, value) -> 'Difficulty':
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


@dataclass
class SessionState:
    """Score, health, combo and pacing for one run."""
    difficulty: Difficulty = Difficulty.EASY
    score: int = 0
    health: int = 100
    max_health: int = 100
    combo: int = 0
    max_combo: int = 0

    # Pacing (written by DifficultyController)
    base_speed_multiplier: float = 1.0
    speed_multiplier: float = 1.0
    spawn_interval_ms: int = 2500
    slow_mode_active: bool = False

    # Spawn clock (written by SpawnScheduler)
    last_hostile_spawn_at: float = 0.0
    last_powerup_spawn_at: float = 0.0

    # Hostile words typed this run, submitted with the score
    words_typed: List[str] = field(default_factory=list)

    @property
    def is_dead(self) -> bool:
        return self.health <= 0

    def damage(self, amount: int) -> None:
        """Lose health, clamped at zero."""
        self.health = max(0, self.health - amount)

    def heal(self, amount: int) -> None:
        """Gain health, clamped at the maximum."""
        self.health = min(self.max_health, self.health + amount)

    def bump_combo(self) -> None:
        self.combo += 1
        self.max_combo = max(self.max_combo, self.combo)

    def break_combo(self) -> None:
        self.combo = 0
