import numpy as np


class ExpRamp:
    """
    Exponential gain ramp from `start` to `end` over `seconds`, then silence.
    Same curve as an exponential ramp-to-value followed by oscillator stop.
    """

    def __init__(self, start: float, end: float, seconds: float):
        assert start > 0 and end > 0
        self.start = float(start)
        self.end = float(end)
        self.seconds = float(seconds)
        self._t = 0.0

    def finished(self) -> bool:
        return self._t >= self.seconds

    def render(self, frames: int, sr: int) -> np.ndarray:
        out = np.zeros(frames, dtype=np.float32)
        if self.finished() or frames <= 0:
            return out
        t = self._t + np.arange(frames, dtype=np.float64) / sr
        live = t < self.seconds
        ratio = self.end / self.start
        out[live] = self.start * ratio ** (t[live] / self.seconds)
        self._t += frames / sr
        return out
