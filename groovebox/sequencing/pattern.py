import threading
from typing import Iterable, List, Optional

import numpy as np

PATTERN_LENGTH = 16
RANDOM_DENSITY = 0.3


class Pattern:
    """
    Fixed-length row of step flags. Thread-safe: the clock thread reads a
    snapshot while the UI side toggles steps.
    """

    def __init__(self, length: int = PATTERN_LENGTH, steps: Optional[Iterable[bool]] = None):
        self._steps: List[bool] = [False] * int(length)
        self._lock = threading.Lock()
        if steps is not None:
            self.apply(steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __getitem__(self, index: int) -> bool:
        with self._lock:
            return self._steps[index]

    def __iter__(self):
        return iter(self.snapshot())

    def snapshot(self) -> List[bool]:
        with self._lock:
            return list(self._steps)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._steps):
            raise IndexError(f"step {index} outside pattern of {len(self._steps)}")

    def set(self, index: int, active: bool) -> None:
        self._check(index)
        with self._lock:
            self._steps[index] = bool(active)

    def toggle(self, index: int) -> bool:
        self._check(index)
        with self._lock:
            self._steps[index] = not self._steps[index]
            return self._steps[index]

    def clear(self) -> None:
        with self._lock:
            self._steps = [False] * len(self._steps)

    def randomize(self, density: float = RANDOM_DENSITY,
                  rng: Optional[np.random.Generator] = None) -> None:
        rng = rng if rng is not None else np.random.default_rng()
        flags = rng.random(len(self._steps)) > (1.0 - density)
        with self._lock:
            self._steps = [bool(f) for f in flags]

    def apply(self, steps: Iterable[bool]) -> None:
        """Copy flags onto existing positions; extra flags are ignored."""
        with self._lock:
            n = len(self._steps)
            for i, active in enumerate(steps):
                if i >= n:
                    break
                self._steps[i] = bool(active)

    def active_count(self) -> int:
        with self._lock:
            return sum(self._steps)
