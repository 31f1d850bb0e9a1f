# audio/engine.py
import sounddevice as sd
import numpy as np
import threading
from typing import Optional

from groovebox.routing.bus import EventBus
from groovebox.audio.dsp import soft_clip
from groovebox.audio.mixer import Mixer


class AudioEngine:
    def __init__(self, mixer: Mixer, bus: EventBus, sr=44100, blocksize=256, channels=1,
                 pre_gain=1.0, limiter_drive=1.3, device: Optional[int] = None):
        self.mixer = mixer
        self.bus = bus
        self.sr = int(sr)
        self.blocksize = int(blocksize)
        self.channels = int(channels)

        # processing
        self.pre_gain = float(pre_gain)
        self.limiter_drive = float(limiter_drive)

        # coordinated shutdown
        self._stop_evt = threading.Event()

        # audio stream
        self.stream = sd.OutputStream(
            channels=self.channels,
            samplerate=self.sr,
            blocksize=self.blocksize,
            device=device,
            callback=self._cb,
            latency='low'
        )

    ###########################################################################
    ##                              LIFECYCLE                                ##
    ###########################################################################
    def start(self):
        self._stop_evt.clear()
        self.stream.start()
        print(f"[Engine] started ({self.sr} Hz, block {self.blocksize}, {self.channels} ch)")

    def stop(self):
        self._stop_evt.set()

        # abort() is immediate; stop() drains
        for op in (self.stream.abort, self.stream.stop, self.stream.close):
            try:
                op()
            except sd.PortAudioError:
                pass
        print("[Engine] stop() called")

    ###########################################################################
    ##                           AUDIO CALL BACK                             ##
    ###########################################################################

    def _cb(self, outdata, frames, time_info, status):
        if self._stop_evt.is_set():
            outdata.fill(0)
            return

        self.mixer.route_events(self.bus.drain())

        mix = self.mixer.render(frames, self.sr, channels=self.channels).astype(np.float32)
        if self.pre_gain != 1.0:
            mix *= self.pre_gain

        out = soft_clip(mix, drive=self.limiter_drive)
        peak = float(np.max(np.abs(out))) if out.size else 0.0
        if peak > 1.0:
            out /= peak

        if self.channels == 1:
            outdata[:, 0] = out
        else:
            outdata[:, :2] = out[:, :2]
