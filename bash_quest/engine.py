"""
Rendering Engine
=================
Double-buffered terminal renderer. Maps the 800x400 play area onto
terminal cells and leaves the bottom rows for the console.
"""

from dataclasses import dataclass, field
from typing import Dict, List

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")

from .state import CANVAS_WIDTH, GAME_AREA_HEIGHT


# ANSI 256 color constants
CYAN = 51
MAGENTA = 201
YELLOW = 226
GREEN = 46
RED = 196
ORANGE = 208

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255

# Particle hex palette -> nearest 256-color code
HEX_COLORS: Dict[str, int] = {
    '#f38ba8': 211,
    '#f9e2af': 223,
    '#a6e3a1': 151,
    '#89b4fa': 111,
    '#cba6f7': 183,
    '#cdd6f4': 189,
    '#89dceb': 117,
}

# Rows reserved below the play area for the console
CONSOLE_ROWS = 8


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7

    def matches(self, other: 'Cell') -> bool:
        return self.char == other.char and self.fg_color == other.fg_color


class DoubleBuffer:
    """
    Writes go to the back buffer; present() emits only changed cells
    and swaps the buffers.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.char = ' '
                cell.fg_color = 7

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def present(self) -> str:
        output_parts = []
        normal = self.term.normal
        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if back_cell.matches(self.front[y][x]):
                    continue
                output_parts.append(self.term.move_xy(x, y))
                output_parts.append(normal)
                output_parts.append(self.term.color(back_cell.fg_color))
                output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


@dataclass
class GameRenderer:
    """
    Play-area aware renderer.

    World coordinates (pixels) are scaled into the rows above the
    console; console rows are addressed directly.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)

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
        """Rows available to the play area."""
        return max(1, self.buffer.height - CONSOLE_ROWS)

    def to_cell(self, x: float, y: float):
        """World pixels -> (column, row) inside the play area."""
        col = int(x / CANVAS_WIDTH * (self.width - 1))
        row = int(y / GAME_AREA_HEIGHT * (self.game_height - 1))
        return col, row

    def begin_frame(self):
        self.buffer.clear_back()

    def end_frame(self) -> str:
        return self.buffer.present()

    def put_world(self, x: float, y: float, text: str, fg_color: int = 7):
        """Draw text at a world position, clipped to the play area."""
        col, row = self.to_cell(x, y)
        if 0 <= row < self.game_height:
            self.buffer.put_string(col, row, text, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        self.buffer.put_string(x, y, text, fg_color)

    def console_row(self, offset: int) -> int:
        return self.game_height + offset

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)

    def draw_hline(self, y: int, char: str = '=', color: int = GRAY_DARK):
        self.buffer.put_string(0, y, char * self.width, color)
