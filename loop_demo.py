import os
import time

from groovebox.audio.engine import AudioEngine
from groovebox.audio.rack import build_mixer
from groovebox.midi.input import start_midi_listener
from groovebox.session import Groovebox

SR = 44100
BLOCK = 256

if __name__ == "__main__":
    mixer = build_mixer(sr=SR)
    box = Groovebox(bpm=120, mixer=mixer)
    engine = AudioEngine(mixer, box.bus, sr=SR, blocksize=BLOCK, channels=1)
    engine.start()

    # RELAY_URL=http://localhost:3001 to mirror events to a running relay
    relay_url = os.environ.get("RELAY_URL")
    if relay_url:
        box.connect(relay_url)
    start_midi_listener(box)

    # four-on-the-floor with a couple of offbeats
    for i in (0, 4, 8, 12, 6, 14):
        box.toggle_step(i)
    box.play()

    print("Groovebox running. Ctrl+C to quit.")
    try:
        while True: time.sleep(1)
    except KeyboardInterrupt:
        box.close(); engine.stop()
