import queue
from typing import List, Union
from groovebox.midi.messages import NoteOn, NoteOff, DrumHit, ThereminMove, CC

Event = Union[NoteOn, NoteOff, DrumHit, ThereminMove, CC]

class EventBus:
    """Audio-side events from the UI/sequencer threads to the audio callback."""

    def __init__(self, maxsize=1024) -> None:
        self.q = queue.Queue(maxsize=maxsize)
        self.dropped = 0

    def post(self, e: Event) -> bool:
        try:
            self.q.put_nowait(e)
        except queue.Full:
            # nobody is draining (no audio engine); never block the clock
            self.dropped += 1
            return False
        return True

    def drain(self, max_events=128) -> List[Event]:
        evs = []
        try:
            while len(evs) < max_events:
                evs.append(self.q.get_nowait())
        except queue.Empty:
            pass
        return evs
