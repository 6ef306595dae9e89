"""
Word Pool
==========
Candidate words bucketed into difficulty tiers by length.
"""

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from .errors import PoolUnavailable
from .session import Difficulty

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3
EASY_MAX_LENGTH = 5
MEDIUM_MAX_LENGTH = 8


def tier_for_length(length: int) -> Optional[Difficulty]:
    """Which tier a word of ``length`` letters belongs to, if any."""
    if length < MIN_WORD_LENGTH:
        return None
    if length <= EASY_MAX_LENGTH:
        return Difficulty.EASY
    if length <= MEDIUM_MAX_LENGTH:
        return Difficulty.MEDIUM
    return Difficulty.HARD


@dataclass(frozen=True)
class WordPool:
    """Read-only word tiers. Order within a tier follows the source list."""
    tiers: Dict[Difficulty, Tuple[str, ...]] = field(
        default_factory=lambda: {d: () for d in Difficulty}
    )

    @classmethod
    def from_words(cls, words: Iterable[str]) -> 'WordPool':
        buckets = {d: [] for d in Difficulty}
        for raw in words:
            word = raw.strip().upper()
            tier = tier_for_length(len(word))
            if tier is not None:
                buckets[tier].append(word)
        return cls({d: tuple(ws) for d, ws in buckets.items()})

    @classmethod
    def empty(cls) -> 'WordPool':
        return cls()

    def words_for(self, difficulty: Difficulty) -> Tuple[str, ...]:
        return self.tiers.get(difficulty, ())

    def draw(self, difficulty: Difficulty, rng: random.Random) -> Optional[str]:
        """Uniform random word for ``difficulty``, or None if that tier is empty."""
        words = self.words_for(difficulty)
        if not words:
            return None
        return words[rng.randrange(len(words))]

    @property
    def total(self) -> int:
        return sum(len(ws) for ws in self.tiers.values())


def read_word_file(path) -> list:
    """Read one word per line. Raises PoolUnavailable if unreadable."""
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise PoolUnavailable(f"cannot read word list {path}: {exc}") from exc
    return text.split('\n')


def load_word_pool(path) -> WordPool:
    """Load the word list at ``path``; any failure yields an empty pool."""
    try:
        pool = WordPool.from_words(read_word_file(path))
    except PoolUnavailable as exc:
        logger.warning("Word pool unavailable, spawning disabled: %s", exc)
        return WordPool.empty()

    if pool.total == 0:
        logger.warning("Word list %s has no usable words", path)
    else:
        logger.info("Loaded %d words from %s", pool.total, path)
    return pool
