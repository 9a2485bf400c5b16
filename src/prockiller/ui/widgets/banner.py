"""Banner widget.

PUBLIC API:
  - Banner: ASCII art title with tagline and version
"""

from rich.text import Text
from textual.widget import Widget

from ... import __version__

__all__ = ["Banner"]

_LETTERS: dict[str, list[str]] = {
    "P": ["██████╗ ", "██╔══██╗", "██████╔╝", "██╔═══╝ ", "██║     ", "╚═╝     "],
    "R": ["██████╗ ", "██╔══██╗", "██████╔╝", "██╔══██╗", "██║  ██║", "╚═╝  ╚═╝"],
    "O": [" ██████╗ ", "██╔═══██╗", "██║   ██║", "██║   ██║", "╚██████╔╝", " ╚═════╝ "],
    "C": [" ██████╗", "██╔════╝", "██║     ", "██║     ", "╚██████╗", " ╚═════╝"],
    "K": ["██╗  ██╗", "██║ ██╔╝", "█████╔╝ ", "██╔═██╗ ", "██║  ██╗", "╚═╝  ╚═╝"],
    "I": ["██╗", "██║", "██║", "██║", "██║", "╚═╝"],
    "L": ["██╗     ", "██║     ", "██║     ", "██║     ", "███████╗", "╚══════╝"],
    "E": ["███████╗", "██╔════╝", "█████╗  ", "██╔══╝  ", "███████╗", "╚══════╝"],
}

_COLORS = ["#ff4500", "#ff6a00", "#ff8c00", "#ffa500", "#ffb732", "#ffcc66"]

MIN_WIDTH_FULL = 50
MIN_WIDTH_COMPACT = 30


def _ascii_word(word: str) -> Text:
    text = Text()
    for row, color in enumerate(_COLORS):
        line = "".join(_LETTERS[letter][row] for letter in word)
        text.append(f"  {line}\n", style=f"bold {color}")
    return text


class Banner(Widget):
    """Title banner that shrinks with the terminal.

    Full art at 50+ columns, a one-line title with tagline at 30+,
    title only below that.
    """

    DEFAULT_CSS = """
    Banner {
        height: auto;
        margin-bottom: 1;
    }
    """

    def render(self) -> Text:
        width = self.app.size.width or 80
        version = Text(f"[{__version__}]", style="#666666")

        if width >= MIN_WIDTH_FULL:
            text = _ascii_word("PROC")
            text.append_text(_ascii_word("KILLER"))
            text.append("\n  Find and kill processes hogging your ports.  ", style="dim")
            text.append_text(version)
            return text

        title = Text("PROCKILLER ", style="bold #ff6a00")
        title.append_text(version)
        if width >= MIN_WIDTH_COMPACT:
            title.append("\nFind and kill processes.", style="dim")
        return title
