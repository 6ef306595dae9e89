"""Pytest configuration and fixtures for WORD_RUNNER tests."""

import random
from concurrent.futures import Future

import pytest

from word_runner.config import Tuning
from word_runner.ecs import World
from word_runner.game import RunController
from word_runner.session import Difficulty, SessionState
from word_runner.words import WordPool


class FakeSubmitter:
    """Records submissions and returns a Future the test completes."""

    def __init__(self, authenticated=True):
        self.authenticated = authenticated
        self.summaries = []
        self.futures = []

    def submit(self, summary):
        future = Future()
        self.summaries.append(summary)
        self.futures.append(future)
        return future


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def tuning():
    return Tuning()


@pytest.fixture
def world():
    return World()


@pytest.fixture
def word_pool():
    """One word per tier so spawns are predictable."""
    return WordPool.from_words(['cat', 'planet', 'algorithm'])


@pytest.fixture
def session(tuning):
    return SessionState(health=tuning.max_health, max_health=tuning.max_health)


@pytest.fixture
def submitter():
    return FakeSubmitter()


@pytest.fixture
def controller(word_pool, tuning, submitter, seeded_rng):
    return RunController(word_pool, tuning, submitter, rng=seeded_rng)


@pytest.fixture
def easy_run(controller):
    controller.start_game(Difficulty.EASY)
    return controller
