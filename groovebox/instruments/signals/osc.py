import numpy as np


class _PhaseOsc:
    """Phase accumulator in cycles [0, 1); subclasses shape the phase."""

    def __init__(self, sr: int = 44100, phase: float = 0.0, gain: float = 1.0):
        self.sr = sr
        self.phase = float(phase) % 1.0
        self.gain = float(gain)

    def _phases(self, freq: float, frames: int) -> np.ndarray:
        inc = freq / self.sr
        ph = (self.phase + inc * np.arange(1, frames + 1, dtype=np.float64)) % 1.0
        if frames:
            self.phase = float(ph[-1])
        return ph

    def _shape(self, ph: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def render(self, freq: float, frames: int) -> np.ndarray:
        return (self._shape(self._phases(freq, frames)) * self.gain).astype(np.float32)

    def reset(self) -> None:
        self.phase = 0.0


class Sine(_PhaseOsc):
    def _shape(self, ph):
        return np.sin(2 * np.pi * ph)


class SawNaive(_PhaseOsc):
    """Naive saw (aliased)."""
    def _shape(self, ph):
        return 2.0 * ph - 1.0


class SquareNaive(_PhaseOsc):
    """Naive square (aliased)."""
    def _shape(self, ph):
        return np.where(ph < 0.5, 1.0, -1.0)
