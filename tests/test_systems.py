"""Tests for movement, boundary and backdrop systems."""

import random

import pytest

from word_runner.components import Position
from word_runner.entities import create_hostile, create_powerup
from word_runner.components import PowerKind
from word_runner.systems import (
    scroll_system, boundary_system, generate_backdrop, backdrop_system
)


def test_boundary_is_inclusive_and_oldest_first(world):
    late = create_hostile(world, 'CAT', 119, 100, 1.0)
    on_line = create_hostile(world, 'DOG', 120, 100, 1.0)
    create_hostile(world, 'SUN', 121, 100, 1.0)
    pickup = create_powerup(world, PowerKind.CLEAR, 50, 100, 1.5)

    assert boundary_system(world, 120) == [late, on_line, pickup]


def test_scroll_applies_multiplier_per_entity(world):
    hostile = create_hostile(world, 'CAT', 500, 100, 1.2)
    pickup = create_powerup(world, PowerKind.SLOW, 500, 100, 1.5)

    scroll_system(world, 0.5)

    assert world.get_component(hostile, Position).x == pytest.approx(499.4)
    assert world.get_component(pickup, Position).x == pytest.approx(499.25)


@pytest.mark.parametrize('kind', ['STAR', 'EMBER', 'LEAF'])
def test_backdrop_motes_stay_on_screen(kind):
    motes = generate_backdrop(kind, 960, 640, 50, random.Random(3))
    assert len(motes) == 50

    for _ in range(5000):
        backdrop_system(motes, 960, 640)

    for mote in motes:
        assert 0 <= mote.x <= 960


def test_plain_theme_has_no_backdrop():
    assert generate_backdrop(None, 960, 640) == []
