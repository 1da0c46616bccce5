"""
Console Line Editor
====================
Turns blessed keystrokes into an editable command line plus
one-shot actions (submit, tab, pause, restart, quit).

Actions are latched by process_key() and consumed once by the loop.
"""

from typing import Optional

CTRL_Q = '\x11'


class LineEditor:
    """The in-terminal text field the player types commands into."""

    def __init__(self, max_length: int = 120):
        self.text = ''
        self.max_length = max_length
        self.focused = False

        # Actions triggered since last read (consumed on read)
        self._submitted: Optional[str] = None
        self._changed = False
        self._tab = False
        self._pause = False
        self._restart = False
        self._quit = False

    def focus(self) -> None:
        """Route printable keys to the line. Passed around as a callback."""
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def set_text(self, text: str) -> None:
        """Replace the line without flagging a keystroke (tab completion)."""
        self.text = text[:self.max_length]

    def clear(self) -> None:
        self.text = ''

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        if key == CTRL_Q or key.name == 'KEY_F10':
            self._quit = True
            return
        if key.name in ('KEY_ESCAPE', 'KEY_F2'):
            self._pause = True
            return
        if key.name == 'KEY_F5':
            self._restart = True
            return

        if not self.focused:
            if key.name == 'KEY_ENTER':
                self._submitted = ''
            return

        if key.name == 'KEY_ENTER':
            self._submitted = self.text
            self.text = ''
            self._changed = True
        elif key.name == 'KEY_TAB':
            self._tab = True
        elif key.name in ('KEY_BACKSPACE', 'KEY_DELETE'):
            if self.text:
                self.text = self.text[:-1]
                self._changed = True
        elif not key.is_sequence and key.isprintable():
            if len(self.text) < self.max_length:
                self.text += str(key)
                self._changed = True

    def consume_submit(self) -> Optional[str]:
        """Return the submitted line (possibly empty) or None."""
        line = self._submitted
        self._submitted = None
        return line

    def consume_changed(self) -> bool:
        triggered = self._changed
        self._changed = False
        return triggered

    def consume_tab(self) -> bool:
        triggered = self._tab
        self._tab = False
        return triggered

    def consume_pause(self) -> bool:
        triggered = self._pause
        self._pause = False
        return triggered

    def consume_restart(self) -> bool:
        triggered = self._restart
        self._restart = False
        return triggered

    def consume_quit(self) -> bool:
        triggered = self._quit
        self._quit = False
        return triggered
