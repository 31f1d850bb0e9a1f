import threading
from dataclasses import dataclass
from typing import Dict, Optional

KNOB_DEFAULT = 0.5
KNOB_SENSITIVITY = 0.005   # value per pixel of vertical drag
BANDS_MAX = 32


def clamp01(v: float) -> float:
    return max(0.0, min(1.0, float(v)))


def cutoff_hz(value: float) -> float:
    """Filter cutoff for a normalized 'cutoff' knob."""
    return 200.0 + clamp01(value) * 1800.0


@dataclass(frozen=True)
class Knob:
    """A knob on an oscillator panel (osc=...) or an effect unit (fx=...)."""
    param: str
    osc: Optional[str] = None
    fx: Optional[str] = None

    @property
    def id(self) -> str:
        if self.fx:
            return f"fx_{self.fx}_{self.param}"
        return f"osc_{self.osc}_{self.param}"

    @property
    def module(self) -> Optional[str]:
        return self.osc or self.fx


class KnobBank:
    """Normalized knob values keyed by knob id."""

    def __init__(self):
        self._values: Dict[str, float] = {}
        self._lock = threading.Lock()

    def register(self, knob: Knob, value: float = KNOB_DEFAULT) -> float:
        with self._lock:
            self._values[knob.id] = clamp01(value)
            return self._values[knob.id]

    def value(self, knob: Knob) -> float:
        with self._lock:
            return self._values.get(knob.id, KNOB_DEFAULT)

    def set(self, knob: Knob, value: float) -> float:
        with self._lock:
            self._values[knob.id] = clamp01(value)
            return self._values[knob.id]

    def drag(self, knob: Knob, delta_y: float, start_value: Optional[float] = None) -> float:
        """Dragging up (positive delta_y) turns the knob up."""
        start = self.value(knob) if start_value is None else start_value
        return self.set(knob, start + delta_y * KNOB_SENSITIVITY)

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._values)

    @staticmethod
    def display(knob: Knob, value: float) -> str:
        if knob.param == "bands":
            return str(int(value * BANDS_MAX))
        return f"{value:.2f}"

    @staticmethod
    def rotation(value: float) -> float:
        """Indicator angle in degrees, -135..+135."""
        return value * 270 - 135
