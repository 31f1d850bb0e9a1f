import threading
from typing import Dict

FADER_DEFAULT_TOP = 50.0


class FaderBank:
    """
    Channel faders. Position is stored the way the thumb sits on its track:
    `top` in percent, 0 at the top (full level) and 100 at the bottom.
    """

    def __init__(self):
        self._tops: Dict[str, float] = {}
        self._lock = threading.Lock()

    def top(self, channel: str) -> float:
        with self._lock:
            return self._tops.get(channel, FADER_DEFAULT_TOP)

    def level(self, channel: str) -> float:
        return (100.0 - self.top(channel)) / 100.0

    def set_top(self, channel: str, top: float) -> float:
        top = max(0.0, min(100.0, float(top)))
        with self._lock:
            self._tops[channel] = top
        return top

    def drag(self, channel: str, delta_y: float, track_height: float) -> float:
        """Move the thumb by delta_y pixels on a track_height pixel track;
        returns the new level in [0, 1]."""
        if track_height <= 0:
            raise ValueError(f"track_height must be positive, got {track_height!r}")
        self.set_top(channel, self.top(channel) + delta_y * (100.0 / track_height))
        return self.level(channel)

    def levels(self) -> Dict[str, float]:
        with self._lock:
            return {ch: (100.0 - t) / 100.0 for ch, t in self._tops.items()}
