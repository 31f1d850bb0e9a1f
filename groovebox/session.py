"""
Groovebox application state.

One Groovebox object holds everything a page used to keep in globals: the
pattern, the sequencer and its clock, knob and fader positions, held piano
keys. Every user action goes through a method here, which updates state,
posts audio events on the bus and emits the matching relay message.
"""
import threading
from typing import Optional, Set

import numpy as np

from groovebox.controls.faders import FaderBank
from groovebox.controls.keyboard import (PianoKey, key_for_char, key_for_note,
                                         theremin_pitch, theremin_volume)
from groovebox.controls.knobs import Knob, KnobBank
from groovebox.midi.messages import CC, NoteOff, NoteOn, ThereminMove
from groovebox.routing.bus import EventBus
from groovebox.routing.link import RelayLink
from groovebox.routing.messages import (Bpm, Fader, LoadPatch, Message, Midi,
                                        Parameter, PatternLoaded, PatternUpdated,
                                        Record, SavePatch, StepUpdate, Theremin,
                                        Transport, Trigger)
from groovebox.sequencing.clock import Clock
from groovebox.sequencing.pattern import Pattern
from groovebox.sequencing.sequencer import StepSequencer

DEFAULT_BPM = 120
DEFAULT_PATCH = "current_patch"


class Groovebox:
    def __init__(self, bpm: int = DEFAULT_BPM, bus: Optional[EventBus] = None,
                 link: Optional[RelayLink] = None, clock: Optional[Clock] = None,
                 mixer=None, rng: Optional[np.random.Generator] = None):
        self.bus = bus if bus is not None else EventBus()
        self.link = link if link is not None else RelayLink()
        self.mixer = mixer
        self.rng = rng
        self.pattern = Pattern()
        self.sequencer = StepSequencer(self.pattern, self.bus,
                                       clock=clock if clock is not None else Clock(bpm=bpm),
                                       on_trigger=self._on_trigger)
        self.sequencer.clock.bpm = bpm
        self.knobs = KnobBank()
        self.faders = FaderBank()
        self.pressed: Set[str] = set()
        self._keys_lock = threading.Lock()

    # ---- state ----
    @property
    def bpm(self):
        return self.sequencer.bpm

    @property
    def playing(self) -> bool:
        return self.sequencer.running

    @property
    def recording(self) -> bool:
        return self.sequencer.recording

    def _emit(self, message: Message) -> bool:
        return self.link.emit(message)

    def _on_trigger(self, trig: Trigger) -> None:
        self._emit(trig)

    # ---- relay ----
    def connect(self, url: str) -> bool:
        self.link.on(PatternLoaded.event, self.apply_pattern)
        self.link.on(PatternUpdated.event, self._pattern_updated)
        return self.link.connect(url)

    def disconnect(self) -> None:
        self.link.disconnect()

    def _pattern_updated(self, payload) -> None:
        name = payload.get("name") if isinstance(payload, dict) else None
        print(f"[Groovebox] pattern updated on server: {name}")

    def apply_pattern(self, payload) -> None:
        """patternLoaded handler: copy the pattern's steps onto the grid."""
        steps = payload.get("steps") if isinstance(payload, dict) else None
        if isinstance(steps, (list, tuple)) and steps:
            self.pattern.apply(steps)
            print(f"[Groovebox] pattern loaded: {payload.get('name')}")

    # ---- sequencer ----
    def toggle_step(self, index: int) -> bool:
        active = self.pattern.toggle(index)
        self._emit(StepUpdate(step=index + 1, active=active))
        return active

    def clear_pattern(self) -> None:
        self.pattern.clear()
        print("[Groovebox] pattern cleared")

    def randomize_pattern(self) -> None:
        self.pattern.randomize(rng=self.rng)
        print("[Groovebox] random pattern generated")

    def play(self) -> bool:
        if not self.sequencer.start():
            return False
        self._emit(Transport(action="play", bpm=self.bpm))
        return True

    def stop(self) -> None:
        self.sequencer.stop()
        self._emit(Transport(action="stop"))

    def set_bpm(self, bpm: int) -> None:
        if self.sequencer.set_bpm(bpm):
            # the restart is a stop followed by a play, as far as listeners know
            self._emit(Transport(action="stop"))
            self._emit(Transport(action="play", bpm=bpm))
        print(f"[Groovebox] bpm set to {bpm}")
        self._emit(Bpm(bpm=bpm))

    def toggle_record(self) -> bool:
        self.sequencer.recording = not self.sequencer.recording
        print(f"[Groovebox] recording {'started' if self.recording else 'stopped'}")
        self._emit(Record(recording=self.recording))
        return self.recording

    # ---- knobs / faders / mixer ----
    def add_knob(self, knob: Knob) -> float:
        return self.knobs.register(knob)

    def set_knob(self, knob: Knob, value: float) -> float:
        value = self.knobs.set(knob, value)
        self._knob_changed(knob, value)
        return value

    def turn_knob(self, knob: Knob, delta_y: float, start_value: Optional[float] = None) -> float:
        value = self.knobs.drag(knob, delta_y, start_value)
        self._knob_changed(knob, value)
        return value

    def _knob_changed(self, knob: Knob, value: float) -> None:
        if knob.param == "cutoff":
            self.bus.post(CC(control=knob.id, value=value))
        self._emit(Parameter(module=knob.module, parameter=knob.param, value=value))

    def move_fader(self, channel: str, delta_y: float, track_height: float) -> float:
        level = self.faders.drag(channel, delta_y, track_height)
        if self.mixer is not None:
            self.mixer.set_gain(channel, level)
        self._emit(Fader(channel=channel, value=level))
        return level

    def toggle_mute(self, channel: str) -> bool:
        return self._toggle_track(channel, "mute")

    def toggle_solo(self, channel: str) -> bool:
        return self._toggle_track(channel, "solo")

    def _toggle_track(self, channel: str, what: str) -> bool:
        tr = self.mixer.track(channel) if self.mixer is not None else None
        if tr is None:
            return False
        on = not getattr(tr, what)
        getattr(self.mixer, f"set_{what}")(channel, on)
        print(f"[Groovebox] {channel} {what} {'on' if on else 'off'}")
        return on

    # ---- piano / keyboard / theremin ----
    def note_on(self, note: str) -> Optional[PianoKey]:
        key = key_for_note(note)
        if key is None:
            return None
        with self._keys_lock:
            self.pressed.add(key.note)
        self.bus.post(NoteOn(note=key.note, frequency=key.frequency))
        self._emit(Midi(kind="noteOn", note=key.note, frequency=key.frequency))
        return key

    def note_off(self, note: str) -> Optional[PianoKey]:
        key = key_for_note(note)
        if key is None:
            return None
        with self._keys_lock:
            if key.note not in self.pressed:
                return None
            self.pressed.discard(key.note)
        self.bus.post(NoteOff(note=key.note, frequency=key.frequency))
        self._emit(Midi(kind="noteOff", note=key.note))
        return key

    def key_down(self, char: str, repeat: bool = False) -> Optional[PianoKey]:
        key = key_for_char(char)
        if key is None or repeat:
            return None
        return self.note_on(key.note)

    def key_up(self, char: str) -> Optional[PianoKey]:
        key = key_for_char(char)
        return self.note_off(key.note) if key is not None else None

    def move_theremin(self, x: float, y: float) -> ThereminMove:
        x = max(0.0, min(1.0, x))
        y = max(0.0, min(1.0, y))
        move = ThereminMove(pitch=theremin_pitch(x), volume=theremin_volume(y))
        self.bus.post(move)
        self._emit(Theremin(x=x, y=y))
        return move

    # ---- patches ----
    def save_patch(self, name: str = DEFAULT_PATCH) -> bool:
        return self._emit(SavePatch(name=name, parameters=self.knobs.snapshot()))

    def load_patch(self, name: str = DEFAULT_PATCH) -> bool:
        return self._emit(LoadPatch(name=name))

    def close(self) -> None:
        self.sequencer.stop()
        self.link.disconnect()
