"""
Input Resolution
=================
Matches a committed line of text against the words on screen.

The oldest target whose text equals the input wins; duplicate words on
screen are not disambiguated any further.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .ecs import World
from .components import Position, Target, TargetKind, PowerKind
from .config import Tuning
from .difficulty import DifficultyController
from .effects import EffectStateMachine, EffectOutcome
from .particles import spawn_burst
from .session import SessionState

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Result of one committed line."""
    text: str
    matched: bool
    entity_id: Optional[int] = None
    kind: Optional[TargetKind] = None
    power_kind: Optional[PowerKind] = None
    points: int = 0
    effect: Optional[EffectOutcome] = None


def normalize_input(raw: str) -> str:
    """Trim and upper-case, the form every target's text is stored in."""
    return raw.strip().upper()


class InputResolver:
    """Scores hits, drives the combo, and hands power-ups to the effects."""

    def __init__(self, tuning: Tuning, difficulty: DifficultyController,
                 effects: EffectStateMachine,
                 rng: Optional[random.Random] = None):
        self.tuning = tuning
        self.difficulty = difficulty
        self.effects = effects
        self.rng = rng

    def points_for(self, combo: int) -> int:
        """100 points, plus 100 for every full 5 of combo."""
        return self.tuning.base_points * (1 + combo // self.tuning.combo_step)

    def find_target(self, world: World, text: str) -> Optional[Tuple[int, Target, Position]]:
        """First live target (spawn order) whose text equals ``text``."""
        for entity_id, target, pos in world.query(Target, Position):
            if target.text == text:
                return entity_id, target, pos
        return None

    def resolve(self, world: World, session: SessionState, raw: str,
                now_ms: float) -> Optional[Resolution]:
        """
        Apply one committed line. Returns None for a blank line, which
        has no effect at all.
        """
        text = normalize_input(raw)
        if not text:
            return None

        found = self.find_target(world, text)
        if found is None:
            session.break_combo()
            return Resolution(text, matched=False)

        entity_id, target, pos = found
        world.destroy_entity(entity_id)

        if target.is_powerup:
            outcome = self.effects.activate(target.power_kind, world, session, now_ms)
            session.bump_combo()
            return Resolution(text, True, entity_id, target.kind,
                              target.power_kind, effect=outcome)

        points = self.points_for(session.combo)
        session.score += points
        session.bump_combo()
        session.words_typed.append(text)

        spawn_burst(world, pos.x, pos.y, rng=self.rng)
        self.difficulty.ramp(session)
        logger.debug("Hit %s for %d (combo %d)", text, points, session.combo)

        return Resolution(text, True, entity_id, target.kind, points=points)
