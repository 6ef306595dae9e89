"""
Configuration
==============
Data-driven tuning numbers and client settings.

Every gameplay number has a code default here and may be overridden in
``data/tuning.toml`` (or the file named by ``WORD_RUNNER_CONFIG``)::

    [pacing]
    initial_spawn_interval_ms = 2500

    [tiers.HARD]
    speed_step = 0.03

A missing file is not an error: the defaults are used.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, Optional

from .session import Difficulty

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / 'data' / 'tuning.toml'
DEFAULT_WORD_LIST = PACKAGE_DIR / 'data' / 'words.txt'


# =============================================================================
# TUNING
# =============================================================================

@dataclass(frozen=True)
class TierProfile:
    """Starting speed and per-kill ramp for one difficulty tier."""
    base_speed: float
    speed_step: float
    interval_step: int


DEFAULT_TIERS: Dict[Difficulty, TierProfile] = {
    Difficulty.EASY: TierProfile(base_speed=1.0, speed_step=0.015, interval_step=5),
    Difficulty.MEDIUM: TierProfile(base_speed=1.15, speed_step=0.05, interval_step=20),
    Difficulty.HARD: TierProfile(base_speed=1.35, speed_step=0.03, interval_step=10),
}


@dataclass(frozen=True)
class Tuning:
    """All gameplay constants. Times are milliseconds, distances world units."""

    # Viewport
    viewport_width: float = 960.0
    viewport_height: float = 640.0
    player_x: float = 120.0
    spawn_margin: float = 50.0
    spawn_y_margin: float = 50.0

    # Pacing
    initial_spawn_interval_ms: int = 2500
    min_spawn_interval_ms: int = 800
    max_speed_threshold: float = 5.0
    hostile_speed_min: float = 1.2
    hostile_speed_jitter: float = 0.4

    # Power-ups
    powerup_interval_min_ms: int = 15000
    powerup_interval_max_ms: int = 20000
    powerup_speed: float = 1.5
    slow_factor: float = 0.4
    slow_duration_ms: int = 8000
    heal_amount: int = 50

    # Scoring and damage
    max_health: int = 100
    boundary_damage: int = 25
    base_points: int = 100
    combo_step: int = 5
    clear_bonus: int = 50

    tiers: Dict[Difficulty, TierProfile] = field(
        default_factory=lambda: dict(DEFAULT_TIERS)
    )

    def tier(self, difficulty: Difficulty) -> TierProfile:
        return self.tiers[difficulty]


# (section, key) in the TOML file -> Tuning field
_TUNING_KEYS = {
    ('viewport', 'width'): 'viewport_width',
    ('viewport', 'height'): 'viewport_height',
    ('viewport', 'player_x'): 'player_x',
    ('viewport', 'spawn_margin'): 'spawn_margin',
    ('viewport', 'spawn_y_margin'): 'spawn_y_margin',
    ('pacing', 'initial_spawn_interval_ms'): 'initial_spawn_interval_ms',
    ('pacing', 'min_spawn_interval_ms'): 'min_spawn_interval_ms',
    ('pacing', 'max_speed_threshold'): 'max_speed_threshold',
    ('pacing', 'hostile_speed_min'): 'hostile_speed_min',
    ('pacing', 'hostile_speed_jitter'): 'hostile_speed_jitter',
    ('powerups', 'interval_min_ms'): 'powerup_interval_min_ms',
    ('powerups', 'interval_max_ms'): 'powerup_interval_max_ms',
    ('powerups', 'speed'): 'powerup_speed',
    ('powerups', 'slow_factor'): 'slow_factor',
    ('powerups', 'slow_duration_ms'): 'slow_duration_ms',
    ('powerups', 'heal_amount'): 'heal_amount',
    ('scoring', 'max_health'): 'max_health',
    ('scoring', 'boundary_damage'): 'boundary_damage',
    ('scoring', 'base_points'): 'base_points',
    ('scoring', 'combo_step'): 'combo_step',
    ('scoring', 'clear_bonus'): 'clear_bonus',
}


def tuning_from_dict(data: dict, base: Optional[Tuning] = None) -> Tuning:
    """Overlay parsed TOML tables onto ``base`` (defaults when None)."""
    base = base or Tuning()
    defaults = {f.name: getattr(base, f.name) for f in fields(base)}
    overrides = {}

    for (section, key), attr in _TUNING_KEYS.items():
        table = data.get(section)
        if isinstance(table, dict) and key in table:
            # Coerce to the default's type so ints stay ints
            overrides[attr] = type(defaults[attr])(table[key])

    tiers = dict(base.tiers)
    for name, table in (data.get('tiers') or {}).items():
        try:
            difficulty = Difficulty.parse(name)
        except ValueError:
            logger.warning("Ignoring unknown tier %r in tuning file", name)
            continue
        current = tiers[difficulty]
        tiers[difficulty] = TierProfile(
            base_speed=float(table.get('base_speed', current.base_speed)),
            speed_step=float(table.get('speed_step', current.speed_step)),
            interval_step=int(table.get('interval_step', current.interval_step)),
        )
    overrides['tiers'] = tiers

    return replace(base, **overrides)


# =============================================================================
# CLIENT SETTINGS
# =============================================================================

@dataclass(frozen=True)
class ClientSettings:
    """Where the front end finds its collaborators."""
    api_base: str = 'http://localhost:3000/api'
    token_file: str = '~/.word_runner/token'
    word_list: str = str(DEFAULT_WORD_LIST)
    theme: str = 'BRUTALIST'
    log_level: str = 'INFO'
    log_file: str = 'word_runner.log'
    request_timeout: float = 5.0


def client_from_dict(data: dict) -> ClientSettings:
    table = data.get('client') or {}
    known = {f.name for f in fields(ClientSettings)}
    settings = ClientSettings(**{k: v for k, v in table.items() if k in known})

    env_api = os.getenv('WORD_RUNNER_API')
    if env_api:
        settings = replace(settings, api_base=env_api)
    env_level = os.getenv('WORD_RUNNER_LOG_LEVEL')
    if env_level:
        settings = replace(settings, log_level=env_level)
    return settings


# =============================================================================
# LOADING
# =============================================================================

@dataclass(frozen=True)
class Config:
    tuning: Tuning
    client: ClientSettings


def load_config(path: str | Path | None = None) -> Config:
    """Load tuning and client settings.

    If *path* is ``None``, use ``WORD_RUNNER_CONFIG`` or the packaged
    ``data/tuning.toml``.
    """
    if path is None:
        path = os.getenv('WORD_RUNNER_CONFIG') or DEFAULT_CONFIG_PATH
    path = Path(path)

    if not path.exists():
        logger.info("%s not found, using default tuning", path)
        data = {}
    else:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
        logger.info("Loaded tuning from %s", path)

    return Config(tuning=tuning_from_dict(data), client=client_from_dict(data))
