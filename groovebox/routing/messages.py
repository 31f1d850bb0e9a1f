"""
Relay wire messages. Each message knows its Socket.IO event name and renders
the JSON payload the browser client uses (camelCase keys, optional fields left
out when unset). The relay itself never validates these shapes.
"""
from dataclasses import dataclass, field, fields
from typing import ClassVar, Dict, List, Optional


class Message:
    event: ClassVar[str] = ""
    _renames: ClassVar[Dict[str, str]] = {}

    def payload(self) -> dict:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, (list, dict)):
                value = type(value)(value)
            out[self._renames.get(f.name, f.name)] = value
        return out


@dataclass(frozen=True)
class StepUpdate(Message):
    event: ClassVar[str] = "stepUpdate"
    step: int            # 1-based
    active: bool

@dataclass(frozen=True)
class Transport(Message):
    event: ClassVar[str] = "transport"
    action: str          # "play" | "stop"
    bpm: Optional[int] = None

@dataclass(frozen=True)
class Trigger(Message):
    event: ClassVar[str] = "trigger"
    _renames: ClassVar[Dict[str, str]] = {"drum": "type"}
    step: int            # 1-based
    drum: str

@dataclass(frozen=True)
class Parameter(Message):
    event: ClassVar[str] = "parameter"
    module: str
    parameter: str
    value: float

@dataclass(frozen=True)
class Fader(Message):
    event: ClassVar[str] = "fader"
    channel: str
    value: float

@dataclass(frozen=True)
class Midi(Message):
    event: ClassVar[str] = "midi"
    _renames: ClassVar[Dict[str, str]] = {"kind": "type"}
    kind: str            # "noteOn" | "noteOff"
    note: str
    frequency: Optional[float] = None

@dataclass(frozen=True)
class Bpm(Message):
    event: ClassVar[str] = "bpm"
    bpm: int

@dataclass(frozen=True)
class Record(Message):
    event: ClassVar[str] = "record"
    recording: bool

@dataclass(frozen=True)
class Theremin(Message):
    event: ClassVar[str] = "theremin"
    x: float
    y: float

@dataclass(frozen=True)
class SavePatch(Message):
    event: ClassVar[str] = "savePatch"
    name: str
    parameters: Dict[str, float] = field(default_factory=dict)

@dataclass(frozen=True)
class LoadPatch(Message):
    event: ClassVar[str] = "loadPatch"
    name: str

@dataclass(frozen=True)
class PatternUpdated(Message):
    event: ClassVar[str] = "patternUpdated"
    name: str
    steps: List[bool] = field(default_factory=list)

@dataclass(frozen=True)
class PatternLoaded(Message):
    event: ClassVar[str] = "patternLoaded"
    name: str
    steps: List[bool] = field(default_factory=list)


EVENT_NAMES = tuple(m.event for m in (
    StepUpdate, Transport, Trigger, Parameter, Fader, Midi, Bpm, Record,
    Theremin, SavePatch, LoadPatch, PatternUpdated, PatternLoaded,
))
