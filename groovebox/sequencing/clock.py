import threading, time
from typing import Callable, Optional


def step_period_ms(bpm: float, steps_per_beat: int = 4) -> float:
    """Milliseconds between steps; sixteenth notes by default."""
    if bpm <= 0:
        raise ValueError(f"bpm must be positive, got {bpm!r}")
    return (60 / bpm) * 1000 / steps_per_beat


class Clock:
    """
    Fixed-period step clock running on its own thread.

    One schedule at a time: start() while running is a no-op. Ticks and stop()
    share a lock, so once stop() returns no further tick runs. A tick that
    overruns the period pushes the schedule back (drift, no catch-up burst).
    """

    def __init__(self, bpm=120, steps_per_beat=4):
        step_period_ms(bpm, steps_per_beat)
        self.bpm = bpm
        self.steps_per_beat = steps_per_beat
        self._lock = threading.RLock()
        self._stop_evt: Optional[threading.Event] = None
        self._th: Optional[threading.Thread] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._th is not None

    @property
    def period_ms(self) -> float:
        return step_period_ms(self.bpm, self.steps_per_beat)

    @property
    def period(self) -> float:
        """Seconds between ticks."""
        return self.period_ms / 1000.0

    def start(self, tick_fn: Callable[[], None]) -> bool:
        with self._lock:
            if self._th is not None:
                return False
            spt = self.period
            stop_evt = threading.Event()

            def run():
                next_t = time.perf_counter() + spt
                while True:
                    delay = next_t - time.perf_counter()
                    if stop_evt.wait(timeout=max(0.0, delay)):
                        break
                    with self._lock:
                        if stop_evt.is_set():
                            break
                        self.ticks += 1
                        try:
                            tick_fn()
                        except Exception as e:
                            # the schedule outlives a failing tick
                            print(f"[Clock] tick error: {e!r}")
                    next_t += spt
                    now = time.perf_counter()
                    if next_t < now:
                        next_t = now

            self._stop_evt = stop_evt
            self._th = threading.Thread(target=run, name="GrooveboxClock", daemon=True)
            self._th.start()
            return True

    def stop(self) -> bool:
        with self._lock:
            th = self._th
            if th is None:
                return False
            self._stop_evt.set()
            self._th = None
            self._stop_evt = None
        if th is not threading.current_thread():
            th.join(timeout=2.0)
            if th.is_alive():
                print("[Clock] WARNING: clock thread still alive after join()")
        return True
