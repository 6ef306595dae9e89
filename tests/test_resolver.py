"""Tests for matching typed input against on-screen words."""

import pytest

from word_runner.components import Target, VisualEffect, PowerKind
from word_runner.difficulty import DifficultyController
from word_runner.effects import EffectStateMachine
from word_runner.entities import create_hostile, create_powerup
from word_runner.resolver import InputResolver, normalize_input
from word_runner.session import Difficulty


@pytest.fixture
def resolver(tuning, seeded_rng):
    difficulty = DifficultyController(tuning)
    return InputResolver(tuning, difficulty,
                         EffectStateMachine(tuning, difficulty), seeded_rng)


@pytest.fixture
def easy_session(tuning, session):
    DifficultyController(tuning).reset(session, Difficulty.EASY)
    return session


def test_normalize_input():
    assert normalize_input('  cat\n') == 'CAT'
    assert normalize_input('   ') == ''


@pytest.mark.parametrize('combo,points', [
    (0, 100), (4, 100), (5, 200), (9, 200), (10, 300),
])
def test_points_scale_with_combo(resolver, combo, points):
    assert resolver.points_for(combo) == points


def test_hit_scores_and_ramps(resolver, world, easy_session):
    entity_id = create_hostile(world, 'CAT', 500, 300, 1.2)

    result = resolver.resolve(world, easy_session, 'cat', 0)

    assert result.matched
    assert result.entity_id == entity_id
    assert result.points == 100
    assert easy_session.score == 100
    assert easy_session.combo == 1
    assert easy_session.words_typed == ['CAT']
    assert easy_session.base_speed_multiplier == pytest.approx(1.015)
    assert easy_session.spawn_interval_ms == 2495
    assert not world.is_alive(entity_id)
    # Burst of particles where the word was
    assert world.count(VisualEffect) == 15


def test_sixth_consecutive_hit_pays_double(resolver, world, easy_session):
    for _ in range(5):
        create_hostile(world, 'CAT', 500, 300, 1.2)
        resolver.resolve(world, easy_session, 'CAT', 0)
    assert easy_session.score == 500

    create_hostile(world, 'CAT', 500, 300, 1.2)
    result = resolver.resolve(world, easy_session, 'CAT', 0)

    assert result.points == 200
    assert easy_session.score == 700
    assert easy_session.combo == 6
    assert easy_session.max_combo == 6


def test_miss_breaks_combo(resolver, world, easy_session):
    create_hostile(world, 'CAT', 500, 300, 1.2)
    easy_session.combo = 7

    result = resolver.resolve(world, easy_session, 'DOG', 0)

    assert not result.matched
    assert easy_session.combo == 0
    assert easy_session.score == 0
    assert world.count(Target) == 1


def test_blank_line_is_ignored(resolver, world, easy_session):
    easy_session.combo = 3

    assert resolver.resolve(world, easy_session, '   ', 0) is None
    assert easy_session.combo == 3


def test_duplicate_words_oldest_first(resolver, world, easy_session):
    older = create_hostile(world, 'CAT', 300, 100, 1.2)
    newer = create_hostile(world, 'CAT', 900, 200, 1.2)

    result = resolver.resolve(world, easy_session, 'CAT', 0)

    assert result.entity_id == older
    assert world.is_alive(newer)


def test_powerup_pickup_feeds_combo_without_score(resolver, world, easy_session):
    create_powerup(world, PowerKind.SLOW, 500, 300, 1.5)

    result = resolver.resolve(world, easy_session, '_slow', 0)

    assert result.matched
    assert result.power_kind is PowerKind.SLOW
    assert result.points == 0
    assert easy_session.score == 0
    assert easy_session.combo == 1
    assert easy_session.words_typed == []
    assert easy_session.base_speed_multiplier == pytest.approx(1.0)
    assert easy_session.slow_mode_active


def test_hostile_word_cannot_trigger_powerup(resolver, world, easy_session):
    create_powerup(world, PowerKind.CLEAR, 500, 300, 1.5)

    result = resolver.resolve(world, easy_session, 'CLEAR', 0)

    assert not result.matched
    assert world.count(Target) == 1
