"""Input abstraction for photo_upload: taps on the page and console commands.

Events are plain strings placed on an internal :class:`queue.Queue`:

* ``'CHOOSE'`` - tap on the image area
* ``'UPLOAD'`` - tap on the upload button
* ``'QUIT'``   - leave the app

:class:`Controls` is fed directly (window clicks, tests) and
:class:`ConsoleControls` additionally reads commands from stdin on a daemon
thread so the event loop never blocks on input.
"""
from __future__ import annotations

import logging
import queue
import sys
import threading
from typing import List, Optional, TextIO

logger = logging.getLogger(__name__)

CHOOSE = "CHOOSE"
UPLOAD = "UPLOAD"
QUIT = "QUIT"

EVENTS = (CHOOSE, UPLOAD, QUIT)

COMMANDS = {
    "c": CHOOSE,
    "choose": CHOOSE,
    "u": UPLOAD,
    "upload": UPLOAD,
    "q": QUIT,
    "quit": QUIT,
    "exit": QUIT,
}


class Controls:
    """Thread-safe event queue drained by the page once per loop iteration."""

    def __init__(self) -> None:
        self._events: "queue.Queue[str]" = queue.Queue()

    def press(self, name: Optional[str]) -> None:
        if name is None:
            return
        if name not in EVENTS:
            raise KeyError(f"Unknown control event: {name}")
        self._events.put(name)

    def read_events(self) -> List[str]:
        """Return all queued events in arrival order (empty list when idle)."""
        out = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except queue.Empty:
                return out

    def close(self) -> None:
        pass


def parse_command(line: str) -> Optional[str]:
    return COMMANDS.get(line.strip().lower())


class ConsoleControls(Controls):
    """Controls that also accept typed commands (c / u / q) from a text stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__()
        self._stream = stream or sys.stdin
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._reader, name="photo-upload-console", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _reader(self) -> None:
        while not self._stop.is_set():
            line = self._stream.readline()
            if not line:
                # EOF on stdin behaves like quit
                self.press(QUIT)
                return
            event = parse_command(line)
            if event is None:
                logger.info(f"Unknown command {line.strip()!r} (use c=choose, u=upload, q=quit)")
                continue
            self.press(event)

    def close(self) -> None:
        self._stop.set()
