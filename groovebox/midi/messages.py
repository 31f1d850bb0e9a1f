from dataclasses import dataclass

# Channel names double as mixer track names.
DRUMS = "DRUMS"
SYNTH = "SYNTH"
THEREMIN = "THEREMIN"


@dataclass(frozen=True)
class NoteOn:
    note: str
    frequency: float
    channel: str = SYNTH

@dataclass(frozen=True)
class NoteOff:
    note: str
    frequency: float
    channel: str = SYNTH

@dataclass(frozen=True)
class DrumHit:
    step: int          # 1-based
    drum: str
    channel: str = DRUMS

@dataclass(frozen=True)
class ThereminMove:
    pitch: float       # Hz
    volume: float
    channel: str = THEREMIN

@dataclass(frozen=True)
class CC:
    control: str       # knob id, e.g. "osc_1_cutoff"
    value: float
    channel: str = SYNTH
