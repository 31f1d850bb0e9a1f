"""
Session bookkeeping and message fan-out for the relay, kept free of any
socket code so it can be driven directly.

By default the hub only records sessions and logs what they send, which is
all the reference server did. With broadcast on, every received event is
handed back as deliveries to all other live sessions.
"""
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

from groovebox.routing.messages import PatternUpdated, StepUpdate
from groovebox.sequencing.pattern import Pattern

LIVE_PATTERN = "live"


@dataclass
class Session:
    sid: str
    connected_at: float = field(default_factory=time.time)
    messages: int = 0


@dataclass(frozen=True)
class Delivery:
    to: str
    event: str
    payload: Any


class RelayHub:
    def __init__(self, broadcast: bool = False):
        self.broadcast = bool(broadcast)
        self.sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self.pattern = Pattern()

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    def on_connect(self, sid: str) -> Session:
        with self._lock:
            s = self.sessions[sid] = Session(sid)
        print(f"[Relay] user connected: {sid} ({self.session_count} online)")
        return s

    def on_disconnect(self, sid: str) -> None:
        with self._lock:
            gone = self.sessions.pop(sid, None)
        if gone is not None:
            print(f"[Relay] user disconnected: {sid} ({self.session_count} online)")

    def on_message(self, sid: str, event: str, payload: Any) -> List[Delivery]:
        with self._lock:
            s = self.sessions.get(sid)
            if s is not None:
                s.messages += 1
        print(f"[Relay] {sid} -> {event}: {payload!r}")

        mirrored = self._mirror(event, payload)
        if not self.broadcast:
            return []

        out = []
        with self._lock:
            others = list(self.sessions)
        for other in others:
            if other == sid:
                continue
            out.append(Delivery(other, event, payload))
            if mirrored:
                msg = PatternUpdated(name=LIVE_PATTERN, steps=self.pattern.snapshot())
                out.append(Delivery(other, msg.event, msg.payload()))
        return out

    def _mirror(self, event: str, payload: Any) -> bool:
        """Track stepUpdate messages in the live pattern; anything malformed is
        still relayed, just not mirrored."""
        if event != StepUpdate.event or not isinstance(payload, dict):
            return False
        step, active = payload.get("step"), payload.get("active")
        if isinstance(step, bool) or not isinstance(step, int) or not isinstance(active, bool):
            return False
        if not 1 <= step <= len(self.pattern):
            return False
        self.pattern.set(step - 1, active)
        return True

    def health(self) -> dict:
        return {"status": "OK", "message": "Groovebox Server is running!"}
