from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from groovebox.midi.messages import DrumHit
from groovebox.routing.bus import EventBus
from groovebox.routing.messages import Trigger
from groovebox.sequencing.clock import Clock
from groovebox.sequencing.pattern import Pattern

DRUM_TYPES = ("KICK", "SNARE", "HIHAT", "CLAP")


def drum_type_for_step(index: int) -> str:
    return DRUM_TYPES[index % len(DRUM_TYPES)]


@dataclass(frozen=True)
class TickResult:
    played: int                  # step index lit on this tick
    cleared: int                 # step index whose marker goes out
    next_cursor: int
    triggers: Tuple[Trigger, ...] = ()


def step_transition(steps: Sequence[bool], cursor: int) -> Optional[TickResult]:
    """
    Pure tick: where the cursor is, which marker to clear, what fires, and
    where the cursor goes next. None for an empty pattern.
    """
    n = len(steps)
    if n == 0:
        return None
    cursor %= n
    cleared = cursor - 1 if cursor > 0 else n - 1
    triggers: Tuple[Trigger, ...] = ()
    if steps[cursor]:
        triggers = (Trigger(step=cursor + 1, drum=drum_type_for_step(cursor)),)
    return TickResult(played=cursor, cleared=cleared,
                      next_cursor=(cursor + 1) % n, triggers=triggers)


class StepSequencer:
    """
    Plays a Pattern off a Clock. Each tick lights the playing marker, posts a
    DrumHit to the bus for every trigger and hands the Trigger message to
    on_trigger (the session forwards it to the relay).
    """

    def __init__(self, pattern: Pattern, bus: EventBus, clock: Optional[Clock] = None,
                 on_trigger: Optional[Callable[[Trigger], None]] = None):
        self.pattern = pattern
        self.bus = bus
        self.clock = clock if clock is not None else Clock()
        self.on_trigger = on_trigger

        self.cursor = 0
        self.playing: Optional[int] = None   # marker
        self.recording = False

    @property
    def running(self) -> bool:
        return self.clock.running

    @property
    def bpm(self):
        return self.clock.bpm

    def start(self) -> bool:
        if self.clock.running:
            return False
        self.cursor = 0
        self.clock.start(self.on_tick)
        print(f"[Sequencer] started @ {self.clock.bpm} bpm ({self.clock.period_ms:.1f} ms/step)")
        return True

    def stop(self) -> bool:
        stopped = self.clock.stop()
        self.playing = None
        self.recording = False
        if stopped:
            print("[Sequencer] stopped")
        return stopped

    def set_bpm(self, bpm) -> bool:
        """Store the tempo; a running clock is restarted so the period applies now.
        Returns True when a restart happened."""
        if bpm <= 0:
            raise ValueError(f"bpm must be positive, got {bpm!r}")
        was_running = self.clock.running
        if was_running:
            self.stop()
        self.clock.bpm = bpm
        if was_running:
            self.start()
        return was_running

    def on_tick(self) -> Optional[TickResult]:
        res = step_transition(self.pattern.snapshot(), self.cursor)
        if res is None:
            return None
        self.playing = res.played
        for trig in res.triggers:
            self.bus.post(DrumHit(step=trig.step, drum=trig.drum))
            if self.on_trigger is not None:
                self.on_trigger(trig)
        self.cursor = res.next_cursor
        return res
