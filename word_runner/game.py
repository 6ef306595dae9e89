"""
Run Controller
===============
Top-level state machine: LOBBY -> PLAYING -> GAME_OVER -> LOBBY.

Owns the session, the world and every subsystem, and is the only thing
that advances the simulation. Ticks and committed input lines both run
on the caller's thread and each runs to completion before the next.
"""

import logging
import random
from collections import deque
from concurrent.futures import CancelledError, Future
from dataclasses import dataclass
from typing import List, Optional

from .ecs import World
from .components import Target
from .config import Tuning
from .difficulty import DifficultyController
from .effects import EffectStateMachine
from .errors import SubmissionFailed
from .resolver import InputResolver, Resolution
from .scoring import RunSummary
from .session import Difficulty, SessionState
from .spawner import SpawnScheduler
from .systems import (
    scroll_system, boundary_system, effect_system,
    backdrop_system, generate_backdrop
)
from .themes import get_theme
from .words import WordPool

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

PHASE_LOBBY = 'lobby'
PHASE_PLAYING = 'playing'
PHASE_GAME_OVER = 'game_over'

CONSOLE_LINES = 64
NOTICE_DURATION_MS = 4000
DAMAGE_FLASH_FRAMES = 6
BACKDROP_MOTES = 50

# Save status after game over
SAVE_PENDING = 'pending'
SAVE_DONE = 'saved'
SAVE_FAILED = 'unsaved'
SAVE_LOGIN_REQUIRED = 'login_required'


@dataclass
class Notice:
    """Advisory toast; never blocks the loop."""
    text: str
    expires_at: float


@dataclass
class PendingSubmission:
    """A score upload in flight, tagged with the run it belongs to."""
    run: int
    future: Future


# =============================================================================
# RUN CONTROLLER
# =============================================================================

class RunController:
    """Drives one game client: lobby, runs, and game-over bookkeeping."""

    def __init__(self, pool: WordPool, tuning: Optional[Tuning] = None,
                 submitter=None, theme: Optional[str] = None,
                 rng: Optional[random.Random] = None):
        self.tuning = tuning or Tuning()
        self.pool = pool
        self.submitter = submitter
        self.theme = get_theme(theme)
        self.rng = rng or random.Random()

        self.difficulty = DifficultyController(self.tuning)
        self.effects = EffectStateMachine(self.tuning, self.difficulty)
        self.spawner = SpawnScheduler(self.tuning, pool, self.rng)
        self.resolver = InputResolver(self.tuning, self.difficulty,
                                      self.effects, self.rng)

        self.phase = PHASE_LOBBY
        self.session = SessionState(health=self.tuning.max_health,
                                    max_health=self.tuning.max_health)
        self.world = World()
        self.backdrop = []
        self.now_ms = 0.0
        self.damage_flash = 0

        self.console = deque(maxlen=CONSOLE_LINES)
        self.notices: List[Notice] = []

        # Account-level, survives runs
        self.points = 0
        self.game_overs = 0
        self.save_status: Optional[str] = None
        self.last_points_awarded = 0
        self.run_number = 0
        self._pending: List[PendingSubmission] = []

        if pool.total:
            self.log(f'WORD_LIST_LOADED: {pool.total} ENTRIES.')
        else:
            self.log('CRITICAL_ERROR: WORD_LIST_UNSPECIFIED.')

    # =========================================================================
    # MESSAGES
    # =========================================================================

    def log(self, message: str):
        """Append a line to the in-game console."""
        self.console.append(f'> {message}')

    def notify(self, text: str, duration_ms: float = NOTICE_DURATION_MS):
        self.notices.append(Notice(f'SYS_MSG: {text}', self.now_ms + duration_ms))

    def _expire_notices(self):
        self.notices = [n for n in self.notices if n.expires_at > self.now_ms]

    @property
    def authenticated(self) -> bool:
        return self.submitter is not None and self.submitter.authenticated

    # =========================================================================
    # PHASE TRANSITIONS
    # =========================================================================

    def start_game(self, difficulty=Difficulty.EASY):
        """Begin a fresh run at ``difficulty`` with everything reset."""
        difficulty = Difficulty.parse(difficulty)

        self.session = SessionState(health=self.tuning.max_health,
                                    max_health=self.tuning.max_health)
        self.difficulty.reset(self.session, difficulty)
        self.effects.reset()
        self.world = World()
        self.backdrop = generate_backdrop(
            self.theme.backdrop, self.tuning.viewport_width,
            self.tuning.viewport_height, BACKDROP_MOTES, self.rng
        )
        self.damage_flash = 0
        self.save_status = None
        self.last_points_awarded = 0
        self.run_number += 1

        self.phase = PHASE_PLAYING
        self.log(f'SECTOR_INIT: {difficulty.value}_MODE')
        logger.info("Run started at %s", difficulty.value)

    def return_to_lobby(self):
        if self.phase == PHASE_GAME_OVER:
            self.phase = PHASE_LOBBY

    def _check_game_over(self):
        """Called after every health change."""
        if self.phase == PHASE_PLAYING and self.session.is_dead:
            self._trigger_game_over()

    def _trigger_game_over(self):
        session = self.session
        self.phase = PHASE_GAME_OVER
        self.game_overs += 1
        logger.info("Game over: score=%d difficulty=%s words=%d max_combo=%d",
                    session.score, session.difficulty.value,
                    len(session.words_typed), session.max_combo)

        if self.authenticated:
            summary = RunSummary(session.score, session.difficulty.value,
                                 list(session.words_typed))
            self.save_status = SAVE_PENDING
            self._pending.append(
                PendingSubmission(self.run_number, self.submitter.submit(summary))
            )
        else:
            self.save_status = SAVE_LOGIN_REQUIRED
            self.log('PROMPT: ACCOUNT_LOGIN_REQUIRED_FOR_PERSISTENCE.')
        self.log('FATAL_EXCEPTION: ABORTING_OPERATION.')

    # =========================================================================
    # FRAME TICK
    # =========================================================================

    def tick(self, now_ms: float):
        """Advance one display frame. Only PLAYING moves the simulation."""
        self.now_ms = now_ms
        self._expire_notices()
        self.poll_submission()

        if self.phase != PHASE_PLAYING:
            return

        session = self.session
        world = self.world

        notice = self.effects.update(session, now_ms)
        if notice:
            self.notify(notice)

        backdrop_system(self.backdrop, self.tuning.viewport_width,
                        self.tuning.viewport_height)

        scroll_system(world, session.speed_multiplier)
        for entity_id in boundary_system(world, self.tuning.player_x):
            world.destroy_entity(entity_id)
            self._take_hit()
            if self.phase != PHASE_PLAYING:
                world.process_dead_entities()
                return

        self.spawner.update(world, session, now_ms)
        effect_system(world)

        if self.damage_flash > 0:
            self.damage_flash -= 1
        world.process_dead_entities()

    def _take_hit(self):
        self.session.damage(self.tuning.boundary_damage)
        self.session.break_combo()
        self.damage_flash = DAMAGE_FLASH_FRAMES
        self.log('!! INTEGRITY_FRACTURE_DET !!')
        self._check_game_over()

    # =========================================================================
    # INPUT
    # =========================================================================

    def submit_text(self, raw: str) -> Optional[Resolution]:
        """Resolve one committed line. Ignored outside PLAYING."""
        if self.phase != PHASE_PLAYING:
            return None

        result = self.resolver.resolve(self.world, self.session, raw, self.now_ms)
        if result is None:
            return None
        self.world.process_dead_entities()

        if result.matched:
            if result.effect is not None:
                self.log(f'POWERUP_ACTIVE: {result.power_kind.value}')
                self.notify(result.effect.notice)
            self.log(f'CLEARED: {result.text}')
        else:
            self.log(f'UNKNOWN_SIG: {result.text}')

        self._check_game_over()
        return result

    # =========================================================================
    # SCORE SUBMISSION
    # =========================================================================

    def poll_submission(self):
        """Fold every finished submission into local state.

        Points are account-level and always count. Save status only
        follows uploads from the current run.
        """
        finished, waiting = [], []
        for pending in self._pending:
            (finished if pending.future.done() else waiting).append(pending)
        self._pending = waiting

        for pending in finished:
            self._fold_submission(pending)

    def _fold_submission(self, pending: PendingSubmission):
        current = pending.run == self.run_number
        try:
            awarded = pending.future.result()
        except SubmissionFailed as exc:
            logger.warning("Score submission failed: %s", exc)
            reason = str(exc)
        except CancelledError:
            logger.warning("Score submission cancelled")
            reason = 'CANCELLED'
        except Exception as exc:
            logger.error("Score submission crashed: %r", exc, exc_info=exc)
            reason = type(exc).__name__
        else:
            if current:
                self.save_status = SAVE_DONE
                self.last_points_awarded = awarded
            if awarded:
                self.points += awarded
                self.log(f'RANKING_SAVED. POINTS_EARNED: +{awarded}')
            else:
                self.log('RANKING_SAVED_TO_DATABANK.')
            return

        if current:
            self.save_status = SAVE_FAILED
        self.notify(f'SAVE_FAILED: {reason}')

    # =========================================================================
    # QUERIES
    # =========================================================================

    def live_targets(self) -> List[Target]:
        return [target for _, target in self.world.query(Target)]

    def slow_remaining_ms(self) -> float:
        return self.effects.slow_remaining(self.now_ms)
