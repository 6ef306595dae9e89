"""
Rendering Engine
=================
Double-buffered terminal renderer. The simulation lives in world units;
the renderer projects them onto whatever grid the terminal offers.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")


HUD_ROWS = 6  # separator, stats, 2 console lines, notice, input


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7
    bg_color: int = -1  # -1 = terminal default

    def matches(self, other: 'Cell') -> bool:
        """Check if two cells are visually identical."""
        return (
            self.char == other.char and
            self.fg_color == other.fg_color and
            self.bg_color == other.bg_color
        )


class DoubleBuffer:
    """
    Writes to a back buffer, then swaps to front buffer, emitting only
    the cells that changed. No screen clears needed.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self, rows: int, bg_color: int = -1):
        """Blank the back buffer; the first ``rows`` rows get ``bg_color``."""
        for y, row in enumerate(self.back):
            bg = bg_color if y < rows else -1
            for cell in row:
                cell.char = ' '
                cell.fg_color = 7
                cell.bg_color = bg

    def put(self, x: int, y: int, char: str, fg_color: int = 7, bg_color: int = None):
        """Put a character; ``bg_color=None`` keeps the cell's background."""
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color
            if bg_color is not None:
                cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = None):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def present(self) -> str:
        """Swap buffers and return the escape sequence for changed cells."""
        output_parts = []
        normal = self._normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if back_cell.matches(self.front[y][x]):
                    continue
                output_parts.append(self.term.move_xy(x, y))
                output_parts.append(normal)
                if back_cell.bg_color >= 0:
                    output_parts.append(self.term.on_color(back_cell.bg_color))
                output_parts.append(self.term.color(back_cell.fg_color))
                output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


@dataclass
class GameRenderer:
    """
    Projects world coordinates onto the terminal. The bottom HUD_ROWS
    rows are reserved for the HUD.
    """
    term: Terminal
    world_width: float = 960.0
    world_height: float = 640.0
    buffer: DoubleBuffer = field(init=False)

    flash_color: int = 52  # dark red

    show_fps: bool = False
    current_fps: float = 60.0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Height of the play field (excluding HUD rows)."""
        return max(1, self.buffer.height - HUD_ROWS)

    def to_cell(self, x: float, y: float) -> Tuple[int, int]:
        """World units -> terminal cell."""
        cx = int(x / self.world_width * self.width)
        cy = int(y / self.world_height * self.game_height)
        return cx, cy

    def begin_frame(self, bg_color: int = -1, flash: bool = False):
        """Clear; the play field is tinted red while a damage flash runs."""
        if flash:
            bg_color = self.flash_color
        self.buffer.clear_back(self.game_height, bg_color)

    def end_frame(self) -> str:
        return self.buffer.present()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        """Put a character inside the play field only."""
        if 0 <= y < self.game_height:
            self.buffer.put(x, y, char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        """Put a string inside the play field, clipped at the edges."""
        if 0 <= y < self.game_height:
            self.buffer.put_string(x, y, text, fg_color)

    def put_ui(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = None):
        """Write anywhere, HUD rows included."""
        self.buffer.put_string(x, y, text, fg_color, bg_color)

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int, char: str = '#'):
        """Draw a rectangular border."""
        for i in range(w):
            self.buffer.put(x + i, y, char, color)
            self.buffer.put(x + i, y + h - 1, char, color)
        for j in range(1, h - 1):
            self.buffer.put(x, y + j, char, color)
            self.buffer.put(x + w - 1, y + j, char, color)
