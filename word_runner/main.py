#!/usr/bin/env python3
"""
WORD_RUNNER - Terminal Typing Combat
=====================================
Words scroll toward your firewall. Type them before they hit it.

Controls:
    1/2/3   - Start EASY / MEDIUM / HARD (lobby)
    type    - Enter the word, ENTER to fire
    _CLEAR  - Power-up: wipe every word on screen
    _SLOW   - Power-up: slow the stream for 8 seconds
    _HEAL   - Power-up: repair 50% integrity
    R       - Back to lobby (game over)
    ESC     - Quit
"""

import logging
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .config import load_config
from .engine import GameRenderer
from .game import (
    RunController, PHASE_LOBBY, PHASE_PLAYING, PHASE_GAME_OVER,
    SAVE_PENDING, SAVE_DONE, SAVE_FAILED, SAVE_LOGIN_REQUIRED
)
from .logging_config import configure_logging
from .scoring import ScoreClient, ScoreSubmitter, load_session_token
from .session import Difficulty
from .systems import (
    render_backdrop, render_defense_line, render_targets, render_effects
)
from .words import load_word_pool

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
FRAME_MS = 1000.0 / TARGET_FPS
MIN_WIDTH = 80
MIN_HEIGHT = 24
MAX_INPUT = 32

DIFFICULTY_KEYS = {
    '1': Difficulty.EASY,
    '2': Difficulty.MEDIUM,
    '3': Difficulty.HARD,
}

TITLE_ART = [
    r" __      _____  ___ ___    ___ _   _ _  _ _  _ ___ ___ ",
    r" \ \    / / _ \| _ \   \  | _ \ | | | \| | \| | __| _ \ ",
    r"  \ \/\/ / (_) |   / |) | |   / |_| | .` | .` | _||   /",
    r"   \_/\_/ \___/|_|_\___/  |_|_\\___/|_|\_|_|\_|___|_|_\ ",
]

GAME_OVER_ART = [
    r"  ___   _   __  __ ___    _____   _____ ___ ",
    r" / __| /_\ |  \/  | __|  / _ \ \ / / __| _ \ ",
    r"| (_ |/ _ \| |\/| | _|  | (_) \ V /| _||   /",
    r" \___/_/ \_\_|  |_|___|  \___/ \_/ |___|_|_\ ",
]


# =============================================================================
# UI RENDERING
# =============================================================================

def render_hud(game: RunController, renderer: GameRenderer, line: str, frame: int):
    """Stats, console tail, latest notice and the input line."""
    theme = game.theme
    session = game.session
    ui_y = renderer.game_height
    width = renderer.width

    renderer.put_ui(0, ui_y, '=' * width, theme.dim)
    renderer.put_ui(2, ui_y, ' WORD_RUNNER ', theme.accent)
    tier = f' SECTOR:{session.difficulty.value} '
    renderer.put_ui(width - len(tier) - 2, ui_y, tier, theme.accent)

    # Row 1: score, integrity, combo, slow timer, points
    row = ui_y + 1
    renderer.put_ui(2, row, f'SCORE:{session.score:04d}', theme.primary)

    bar_width = 20
    filled = max(0, int(session.health / session.max_health * bar_width))
    bar = '|' * filled + '.' * (bar_width - filled)
    bar_color = theme.primary if session.health > 25 else theme.danger
    renderer.put_ui(16, row, 'INTEGRITY:', theme.dim)
    renderer.put_ui(27, row, f'[{bar}] {session.health:3d}%', bar_color)

    x = 55
    if session.combo > 1:
        renderer.put_ui(x, row, f'COMBO x{session.combo}', theme.accent)
        x += 11
    if session.slow_mode_active:
        renderer.put_ui(x, row, f'SLOW {game.slow_remaining_ms() / 1000:.1f}s', theme.slow)
        x += 10
    if game.authenticated:
        pts = f'PTS:{game.points}'
        renderer.put_ui(width - len(pts) - 2, row, pts, theme.dim)

    # Rows 2-3: console tail
    tail = list(game.console)[-2:]
    for i, message in enumerate(tail):
        renderer.put_ui(2, ui_y + 2 + i, message[:width - 4], theme.dim)

    # Row 4: newest notification
    if game.notices:
        renderer.put_ui(2, ui_y + 4, game.notices[-1].text[:width - 4], theme.accent)

    # Row 5: input line with blinking cursor
    cursor = '_' if (frame // 20) % 2 == 0 else ' '
    renderer.put_ui(2, ui_y + 5, f'> {line}{cursor}', theme.primary)


def render_lobby(game: RunController, renderer: GameRenderer, frame: int):
    theme = game.theme
    width = renderer.width
    height = renderer.game_height

    renderer.draw_box(0, 0, width, height, theme.dim, '#')

    art_y = max(1, height // 2 - 6)
    for i, art in enumerate(TITLE_ART):
        color = theme.primary if i % 2 == 0 else theme.accent
        renderer.put_ui(max(0, width // 2 - len(art) // 2), art_y + i, art, color)

    sub = 'TYPE THE WORDS BEFORE THEY BREACH THE FIREWALL'
    renderer.put_ui(width // 2 - len(sub) // 2, art_y + len(TITLE_ART) + 1, sub, theme.dim)

    options = '[1] EASY     [2] MEDIUM     [3] HARD'
    if (frame // 30) % 2 == 0:
        renderer.put_ui(width // 2 - len(options) // 2, art_y + len(TITLE_ART) + 3,
                        options, theme.accent)

    status = 'SESS_ACTIVE' if game.authenticated else 'GUEST_MODE'
    if game.authenticated and game.points:
        status += f'  PTS:{game.points}'
    renderer.put_ui(width // 2 - len(status) // 2, art_y + len(TITLE_ART) + 5,
                    status, theme.dim)

    tail = list(game.console)[-3:]
    for i, message in enumerate(tail):
        renderer.put_ui(2, renderer.height - 4 + i, message[:width - 4], theme.dim)
    renderer.put_ui(2, renderer.height - 1, 'Q/ESC - Quit', theme.dim)


def render_game_over(game: RunController, renderer: GameRenderer, frame: int):
    theme = game.theme
    width = renderer.width
    height = renderer.game_height

    renderer.draw_box(0, 0, width, height, theme.danger, '.')

    art_y = max(1, height // 2 - 6)
    for i, art in enumerate(GAME_OVER_ART):
        renderer.put_ui(max(0, width // 2 - len(art) // 2), art_y + i, art, theme.danger)

    session = game.session
    lines = [
        f'FINAL SCORE: {session.score:04d}',
        f'WORDS CLEARED: {len(session.words_typed)}   MAX COMBO: {session.max_combo}',
        _save_status_text(game),
    ]
    y = art_y + len(GAME_OVER_ART) + 2
    for i, text in enumerate(lines):
        renderer.put_ui(width // 2 - len(text) // 2, y + i, text, theme.accent)

    if (frame // 30) % 2 == 0:
        prompt = '[ R - LOBBY ]    [ Q - QUIT ]'
        renderer.put_ui(width // 2 - len(prompt) // 2, y + len(lines) + 2, prompt, theme.primary)

    if game.notices:
        text = game.notices[-1].text[:width - 4]
        renderer.put_ui(2, renderer.height - 1, text, theme.accent)


def _save_status_text(game: RunController) -> str:
    status = game.save_status
    if status == SAVE_PENDING:
        return 'UPLOADING RANKING...'
    if status == SAVE_DONE:
        if game.last_points_awarded:
            return f'RANKING SAVED. POINTS EARNED: +{game.last_points_awarded}'
        return 'RANKING SAVED TO DATABANK.'
    if status == SAVE_FAILED:
        return 'SCORE NOT SAVED (CONNECTION ERROR)'
    if status == SAVE_LOGIN_REQUIRED:
        return 'LOGIN REQUIRED TO SAVE SCORE (set WORD_RUNNER_TOKEN)'
    return ''


# =============================================================================
# APP STATE
# =============================================================================

class GameApp:
    """Terminal shell around a RunController: keys in, frames out."""

    def __init__(self, term: Terminal, game: RunController):
        self.term = term
        self.game = game
        self.renderer = GameRenderer(term, game.tuning.viewport_width,
                                     game.tuning.viewport_height)
        self.running = True
        self.frame = 0
        self.line = ''

    def update(self, now_ms: float):
        self.frame += 1
        self.game.tick(now_ms)

    def render(self):
        game = self.game
        theme = game.theme
        renderer = self.renderer

        if game.phase == PHASE_PLAYING:
            renderer.begin_frame(theme.background, flash=game.damage_flash > 0)
            render_backdrop(renderer, game.backdrop)
            render_defense_line(renderer, game.tuning.player_x, theme)
            render_targets(game.world, renderer, theme)
            render_effects(game.world, renderer, theme)
            render_hud(game, renderer, self.line, self.frame)
        elif game.phase == PHASE_GAME_OVER:
            renderer.begin_frame()
            render_game_over(game, renderer, self.frame)
        else:
            renderer.begin_frame()
            render_lobby(game, renderer, self.frame)

        if renderer.show_fps:
            fps_text = f'FPS:{renderer.current_fps:.0f}'
            renderer.put_ui(renderer.width - len(fps_text) - 2, 0, fps_text, theme.dim)

        output = renderer.end_frame()
        if output:
            print(output, end='', flush=True)

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            if key.name == 'KEY_ESCAPE':
                self.running = False
                return

            phase = self.game.phase
            if phase == PHASE_LOBBY:
                if not key.is_sequence and key.lower() == 'q':
                    self.running = False
                    return
                difficulty = DIFFICULTY_KEYS.get(str(key))
                if difficulty is not None:
                    self.line = ''
                    self.game.start_game(difficulty)
            elif phase == PHASE_GAME_OVER:
                if not key.is_sequence and key.lower() == 'r':
                    self.game.return_to_lobby()
                elif not key.is_sequence and key.lower() == 'q':
                    self.running = False
                    return
            else:
                self._type_key(key)

            key = self.term.inkey(timeout=0)

    def _type_key(self, key):
        if key.name == 'KEY_ENTER' or str(key) in ('\n', '\r'):
            line, self.line = self.line, ''
            self.game.submit_text(line)
        elif key.name in ('KEY_BACKSPACE', 'KEY_DELETE') or str(key) in ('\x7f', '\x08'):
            self.line = self.line[:-1]
        elif key.name == 'KEY_F1':
            self.renderer.show_fps = not self.renderer.show_fps
        elif not key.is_sequence and str(key).isprintable() and len(self.line) < MAX_INPUT:
            self.line += str(key)


# =============================================================================
# MAIN LOOP
# =============================================================================

def main():
    """Entry point. Loads config and runs the 60 FPS game loop."""
    config = load_config()
    settings = config.client
    configure_logging(level=settings.log_level, filename=settings.log_file)

    pool = load_word_pool(settings.word_list)
    token = load_session_token(settings.token_file)
    client = ScoreClient(settings.api_base, token, timeout=settings.request_timeout)
    submitter = ScoreSubmitter(client)
    game = RunController(pool, config.tuning, submitter, theme=settings.theme)

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    logger.info("Starting WORD_RUNNER (%s, theme %s)",
                'authenticated' if token else 'guest', game.theme.name)

    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            app = GameApp(term, game)

            last_time = time.perf_counter()
            accumulator = 0.0
            sim_clock_ms = 0.0
            fps_timer = 0.0
            fps_frame_count = 0

            print(term.home + term.clear, end='', flush=True)

            while app.running:
                now = time.perf_counter()
                delta = now - last_time
                last_time = now

                # Clamp delta to prevent spiral of death
                delta = min(delta, FRAME_TIME * 5)

                accumulator += delta
                fps_timer += delta

                if (term.width, term.height) != (app.renderer.width, app.renderer.height):
                    app.renderer.resize(term.width, term.height)
                    print(term.home + term.clear, end='', flush=True)

                app.handle_input()

                ticks = 0
                while accumulator >= FRAME_TIME and ticks < 4:
                    sim_clock_ms += FRAME_MS
                    app.update(sim_clock_ms)
                    accumulator -= FRAME_TIME
                    ticks += 1
                    fps_frame_count += 1

                app.render()

                if fps_timer >= 0.5:
                    app.renderer.current_fps = fps_frame_count / fps_timer
                    fps_frame_count = 0
                    fps_timer = 0.0

                elapsed = time.perf_counter() - now
                sleep_time = FRAME_TIME - elapsed
                if sleep_time > 0.001:
                    time.sleep(sleep_time * 0.9)

            print(term.normal, end='', flush=True)
    finally:
        submitter.shutdown()


if __name__ == '__main__':
    main()
