"""Progress messages for --verbose runs."""
import sys
import time
from typing import Optional, TextIO


class VerboseOutput:
    """Print timestamped messages to stderr when enabled.

    Each line is prefixed with the time elapsed since creation::

        [ 0:02] Start processing 'map.osm'...
    """

    def __init__(self, enabled: bool = False, stream: Optional[TextIO] = None):
        self.enabled = enabled
        self.stream = stream
        self.start_time = time.time()

    def __call__(self, message: str) -> None:
        if not self.enabled:
            return
        elapsed = int(time.time() - self.start_time)
        minutes, seconds = divmod(elapsed, 60)
        print(f"[{minutes:2d}:{seconds:02d}] {message}",
              file=self.stream or sys.stderr)
