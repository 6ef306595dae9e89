"""
Themes
=======
Colour tokens (ANSI 256) for each purchasable palette, and which kind of
background decoration each one floats across the play field.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class Theme:
    name: str
    primary: int
    background: int
    accent: int
    backdrop: Optional[str] = None  # STAR / EMBER / LEAF
    slow: int = 153  # light blue
    heal: int = 41   # green
    dim: int = 244
    danger: int = 196

    def color(self, token: str) -> int:
        """Resolve a colour token like ``'primary'`` or ``'heal'``."""
        value = getattr(self, token, None)
        return value if isinstance(value, int) else self.primary


THEMES: Dict[str, Theme] = {
    'BRUTALIST': Theme('BRUTALIST', primary=234, background=255, accent=160, dim=245),
    'NEON': Theme('NEON', primary=51, background=232, accent=201),
    'GALAXY': Theme('GALAXY', primary=183, background=232, accent=135, backdrop='STAR'),
    'VOLCANO': Theme('VOLCANO', primary=202, background=232, accent=220, backdrop='EMBER'),
    'VEGETAL': Theme('VEGETAL', primary=71, background=232, accent=28, backdrop='LEAF'),
}

DEFAULT_THEME = 'BRUTALIST'


def get_theme(name: Optional[str]) -> Theme:
    """Look up a theme by id; unknown ids fall back to BRUTALIST."""
    return THEMES.get((name or '').upper(), THEMES[DEFAULT_THEME])
