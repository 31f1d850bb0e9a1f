import math
import numpy as np

def soft_clip(x: np.ndarray, drive: float = 1.5) -> np.ndarray:
    # Smooth limiter. drive ~ 1.2–2.0
    return np.tanh(drive * x) / np.tanh(drive)

def one_pole_lowpass(x: np.ndarray, cutoff_hz: float, sr: int, state: float = 0.0):
    """
    y[n] = y[n-1] + a * (x[n] - y[n-1]). Returns (y, last_state) so the filter
    keeps its memory across blocks.
    """
    a = 1.0 - math.exp(-2.0 * math.pi * float(cutoff_hz) / sr)
    y = np.empty_like(x, dtype=np.float32)
    s = float(state)
    for i in range(x.shape[0]):
        s += a * (float(x[i]) - s)
        y[i] = s
    return y, s
