from dataclasses import dataclass
from typing import Dict, Optional, Tuple

NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
BASE_FREQ = 220.0

# Computer keyboard row laid out like a piano octave.
KEY_MAP: Dict[str, str] = {
    'a': 'C', 'w': 'C#', 's': 'D', 'e': 'D#', 'd': 'E',
    'f': 'F', 't': 'F#', 'g': 'G', 'y': 'G#', 'h': 'A',
    'u': 'A#', 'j': 'B', 'k': 'C2',
}

THEREMIN_MIN_HZ = 100.0
THEREMIN_SPAN_HZ = 1000.0
THEREMIN_MAX_VOLUME = 0.5


def key_frequency(index: int) -> float:
    return BASE_FREQ * 2 ** (index / 12)


@dataclass(frozen=True)
class PianoKey:
    note: str
    index: int
    frequency: float

    @property
    def black(self) -> bool:
        return self.note.endswith("#")


PIANO: Tuple[PianoKey, ...] = tuple(
    PianoKey(note=n, index=i, frequency=key_frequency(i)) for i, n in enumerate(NOTE_NAMES)
)
_BY_NOTE = {k.note: k for k in PIANO}


def key_for_note(note: str) -> Optional[PianoKey]:
    return _BY_NOTE.get(note)


def key_for_char(char: str) -> Optional[PianoKey]:
    """Piano key bound to a computer key. 'k' maps to C2, which the one-octave
    piano does not have."""
    note = KEY_MAP.get(char)
    return key_for_note(note) if note else None


def key_for_midi(note: int) -> PianoKey:
    return PIANO[int(note) % 12]


def theremin_pitch(x: float) -> float:
    """Horizontal hand position in [0, 1] -> pitch in Hz."""
    return max(0.0, min(1.0, x)) * THEREMIN_SPAN_HZ + THEREMIN_MIN_HZ


def theremin_volume(y: float) -> float:
    """Vertical hand position in [0, 1] (0 = top) -> volume."""
    return (1.0 - max(0.0, min(1.0, y))) * THEREMIN_MAX_VOLUME
