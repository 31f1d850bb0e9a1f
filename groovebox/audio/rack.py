from typing import Optional

import numpy as np

from groovebox.audio.mixer import Mixer
from groovebox.instruments.synths import DrumKit, KeySynth, ThereminSynth
from groovebox.midi.messages import DRUMS, SYNTH, THEREMIN


def build_mixer(sr: int = 44100, rng: Optional[np.random.Generator] = None) -> Mixer:
    """Standard groovebox channel strip: drums, key synth and theremin."""
    mixer = Mixer()
    mixer.add_track(DRUMS, DrumKit(sr=sr, rng=rng))
    mixer.add_track(SYNTH, KeySynth(sr=sr))
    mixer.add_track(THEREMIN, ThereminSynth(sr=sr))
    return mixer
