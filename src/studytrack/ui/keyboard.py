"""Non-blocking keyboard input for timer controls (POSIX terminals)."""

import select
import sys


class KeyboardHandler:
    """Reads single keypresses from stdin without blocking.

    Disabled (``get_key`` always returns None) when stdin is not a terminal
    or the platform has no termios.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.old_settings = None
        self.enabled = False
        self._setup()

    def _setup(self) -> None:
        if sys.platform == "win32" or not self.stream.isatty():
            return

        import termios
        import tty

        fd = self.stream.fileno()
        self.old_settings = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self.enabled = True

    def get_key(self) -> str | None:
        """Return the pressed key (lowercased) or None if no key is waiting."""
        if not self.enabled:
            return None
        if select.select([self.stream], [], [], 0)[0]:
            return self.stream.read(1).lower()
        return None

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.old_settings is not None:
            import termios

            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self.old_settings)
            self.old_settings = None
        self.enabled = False
