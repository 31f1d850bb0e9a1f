"""
The three sound sources of the groovebox. Each takes audio-side events from
the mixer (handle) and renders mono float32 blocks (render).
"""
import threading
from typing import Dict, List, Optional

import numpy as np

from groovebox.audio.dsp import one_pole_lowpass
from groovebox.controls.knobs import cutoff_hz
from groovebox.instruments.envelopes.ramp import ExpRamp
from groovebox.instruments.signals.osc import SawNaive, Sine, SquareNaive
from groovebox.midi.messages import CC, DrumHit, NoteOff, NoteOn, ThereminMove

SR = 44100


class BlipVoice:
    """Short square blip: gain 0.1 -> 0.01 over 100 ms."""

    def __init__(self, freq: float, sr: int = SR):
        self.freq = float(freq)
        self.osc = SquareNaive(sr=sr)
        self.env = ExpRamp(0.1, 0.01, 0.1)

    def finished(self) -> bool:
        return self.env.finished()

    def render(self, frames: int, sr: int) -> np.ndarray:
        return self.osc.render(self.freq, frames) * self.env.render(frames, sr)


class DrumKit:
    """Percussive blips at a random pitch in 200..1000 Hz per hit."""

    def __init__(self, sr: int = SR, rng: Optional[np.random.Generator] = None):
        self.sr = sr
        self.rng = rng if rng is not None else np.random.default_rng()
        self._voices: List[BlipVoice] = []
        self._lock = threading.Lock()

    def handle(self, e: object) -> None:
        if isinstance(e, DrumHit):
            v = BlipVoice(200.0 + self.rng.random() * 800.0, sr=self.sr)
            with self._lock:
                self._voices.append(v)

    def render(self, frames: int, sr: int) -> np.ndarray:
        mix = np.zeros(frames, dtype=np.float32)
        with self._lock:
            for v in self._voices:
                mix += v.render(frames, sr)
            self._voices = [v for v in self._voices if not v.finished()]
        return mix

    def num_active_voices(self) -> int:
        with self._lock:
            return len(self._voices)


class KeyVoice:
    """Sawtooth through a low-pass at constant gain until released."""
    GAIN = 0.2

    def __init__(self, freq: float, cutoff: float, sr: int = SR):
        self.freq = float(freq)
        self.cutoff = float(cutoff)
        self.osc = SawNaive(sr=sr)
        self._lp_state = 0.0
        self._release: Optional[ExpRamp] = None

    def note_off(self) -> None:
        if self._release is None:
            self._release = ExpRamp(self.GAIN, 0.01, 0.5)

    def finished(self) -> bool:
        return self._release is not None and self._release.finished()

    def render(self, frames: int, sr: int) -> np.ndarray:
        raw = self.osc.render(self.freq, frames)
        y, self._lp_state = one_pole_lowpass(raw, self.cutoff, sr, self._lp_state)
        if self._release is None:
            return y * self.GAIN
        return y * self._release.render(frames, sr)


class KeySynth:
    """One voice per held frequency. A 'cutoff' knob retunes every voice's filter."""

    def __init__(self, sr: int = SR, cutoff: float = 1000.0):
        self.sr = sr
        self.cutoff = float(cutoff)
        self._held: Dict[float, KeyVoice] = {}
        self._releasing: List[KeyVoice] = []
        self._lock = threading.Lock()

    def handle(self, e: object) -> None:
        with self._lock:
            if isinstance(e, NoteOn):
                old = self._held.pop(e.frequency, None)
                if old is not None:
                    old.note_off()
                    self._releasing.append(old)
                self._held[e.frequency] = KeyVoice(e.frequency, self.cutoff, sr=self.sr)
            elif isinstance(e, NoteOff):
                v = self._held.pop(e.frequency, None)
                if v is not None:
                    v.note_off()
                    self._releasing.append(v)
            elif isinstance(e, CC) and e.control.endswith("_cutoff"):
                self.cutoff = cutoff_hz(e.value)
                for v in self._held.values():
                    v.cutoff = self.cutoff

    def render(self, frames: int, sr: int) -> np.ndarray:
        mix = np.zeros(frames, dtype=np.float32)
        with self._lock:
            for v in list(self._held.values()) + self._releasing:
                mix += v.render(frames, sr)
            self._releasing = [v for v in self._releasing if not v.finished()]
        return mix

    def num_active_voices(self) -> int:
        with self._lock:
            return len(self._held) + len(self._releasing)


class ThereminSynth:
    """Single sine whose pitch and volume follow the hand; volume is ramped
    across each block to avoid zipper noise."""

    def __init__(self, sr: int = SR):
        self.osc = Sine(sr=sr)
        self.pitch = 440.0
        self.volume = 0.0
        self._last_volume = 0.0
        self._lock = threading.Lock()

    def handle(self, e: object) -> None:
        if isinstance(e, ThereminMove):
            with self._lock:
                self.pitch = float(e.pitch)
                self.volume = float(e.volume)

    def render(self, frames: int, sr: int) -> np.ndarray:
        with self._lock:
            pitch, target = self.pitch, self.volume
        start = self._last_volume
        self._last_volume = target
        if start == 0.0 and target == 0.0:
            return np.zeros(frames, dtype=np.float32)
        gain = np.linspace(start, target, frames, dtype=np.float32)
        return self.osc.render(pitch, frames) * gain
