from typing import Callable, Optional

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError, SocketIOError

from groovebox.routing.messages import Message


class RelayLink:
    """
    Client side of the relay. Without a live connection every emit is a silent
    no-op and the groovebox keeps working standalone.
    """

    def __init__(self, client: Optional[socketio.Client] = None):
        self.sio = client
        self._handlers = {}

    @property
    def connected(self) -> bool:
        return bool(self.sio is not None and self.sio.connected)

    def on(self, event: str, handler: Callable[[dict], None]) -> None:
        self._handlers[event] = handler
        if self.sio is not None:
            self.sio.on(event, handler)

    def connect(self, url: str) -> bool:
        if self.sio is None:
            self.sio = socketio.Client(reconnection=False)
            for event, handler in self._handlers.items():
                self.sio.on(event, handler)
        try:
            self.sio.connect(url)
        except SocketConnectionError as e:
            print(f"[Link] relay not available ({e}), running in standalone mode")
            return False
        print(f"[Link] connected to {url}")
        return True

    def disconnect(self) -> None:
        if self.connected:
            self.sio.disconnect()
            print("[Link] disconnected")

    def emit(self, message: Message) -> bool:
        if not self.connected:
            return False
        try:
            self.sio.emit(message.event, message.payload())
        except SocketIOError as e:
            # dropped between the connected check and the send
            print(f"[Link] emit {message.event} failed: {e}")
            return False
        return True
