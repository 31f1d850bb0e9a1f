from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple
import numpy as np
import threading


@dataclass
class Track:
    # Instrument must implement handle(event) and render(frames, sr)
    instrument: object
    gain: float = 1.0
    mute: bool = False
    solo: bool = False

class Mixer:
    """
    Thread-safe mixer. Routes events by `channel` to tracks and renders a mixed buffer.
    Tracks are indexed by channel name (the label under the fader).
    """
    def __init__(self):
        self._tracks: Dict[str, Track] = {}
        self._lock = threading.Lock()


    ###########################################################################
    ##                        TRACK MANAGEMENT                              ##
    ###########################################################################

    def add_track(self, channel: str, instrument: object, *, gain: float = 1.0) -> None:
        with self._lock:
            self._tracks[channel] = Track(instrument=instrument, gain=float(gain))

    def channels(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._tracks)

    def track(self, channel: str) -> Track | None:
        with self._lock:
            return self._tracks.get(channel)

    def set_gain(self, channel: str, gain: float) -> None:
        with self._lock:
            if ch := self._tracks.get(channel):
                ch.gain = float(gain)

    def set_mute(self, channel: str, mute: bool) -> None:
        with self._lock:
            if ch := self._tracks.get(channel):
                ch.mute = bool(mute)

    def set_solo(self, channel: str, solo: bool) -> None:
        with self._lock:
            if ch := self._tracks.get(channel):
                ch.solo = bool(solo)


    ###########################################################################
    ##                          EVENT ROUTING                                ##
    ###########################################################################

    def route_event(self, e: object) -> None:
        """
        Forward a single event to the track matching e.channel; unknown channels are dropped.
        """
        ch = getattr(e, "channel", None)
        with self._lock:
            tr = self._tracks.get(ch)
            inst = tr.instrument if tr else None
        if inst is not None:
            inst.handle(e)

    def route_events(self, events: Iterable[object]) -> None:
        for e in events:
            self.route_event(e)

    ###########################################################################
    ##                             RENDERING                                 ##
    ###########################################################################

    def render(self, frames: int, sr: int, channels: int = 1) -> np.ndarray:
        """
        Sum all tracks into mono (channels==1), or the same mix on both sides (channels==2).
        """
        if channels not in (1, 2):
            raise ValueError("Only mono or stereo mixing supported currently.")

        with self._lock:
            tracks = list(self._tracks.values())
            any_solo = any(t.solo for t in tracks)

        mix = np.zeros(frames if channels == 1 else (frames, 2), dtype=np.float32)

        for tr in tracks:
            if tr.mute or (any_solo and not tr.solo):
                # keep envelopes moving so muted voices still expire
                tr.instrument.render(frames, sr)
                continue

            buf = tr.instrument.render(frames, sr).astype(np.float32)
            if channels == 1:
                mix += tr.gain * buf
            else:
                mix += (tr.gain * buf)[:, None]

        return mix
