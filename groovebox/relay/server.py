"""
Groovebox relay server: serves the UI entry page and a health check over
HTTP, and accepts Socket.IO connections from groovebox clients.

    PORT=3001 RELAY_BROADCAST=1 python -m groovebox.relay.server
"""
from typing import Optional, Tuple

from flask import Flask, jsonify, request, send_from_directory
from flask_socketio import SocketIO

from groovebox.config import RelayConfig
from groovebox.relay.hub import RelayHub


def create_app(config: Optional[RelayConfig] = None,
               hub: Optional[RelayHub] = None) -> Tuple[Flask, SocketIO]:
    config = config if config is not None else RelayConfig.from_env()
    hub = hub if hub is not None else RelayHub(broadcast=config.broadcast)

    app = Flask(__name__, static_folder=str(config.static_dir), static_url_path="")
    app.config["RELAY"] = config
    app.extensions["groovebox_hub"] = hub
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode="threading")

    @app.route("/")
    def index():
        return send_from_directory(config.static_dir, "index.html")

    @app.route("/api/health")
    def health():
        return jsonify(hub.health())

    @socketio.on("connect")
    def handle_connect(auth=None):
        hub.on_connect(request.sid)

    @socketio.on("disconnect")
    def handle_disconnect(*args):
        hub.on_disconnect(request.sid)

    @socketio.on("*")
    def handle_event(event, data=None):
        for d in hub.on_message(request.sid, event, data):
            socketio.emit(d.event, d.payload, to=d.to)

    return app, socketio


def main():
    config = RelayConfig.from_env()
    app, socketio = create_app(config)
    mode = "broadcast" if config.broadcast else "log only"
    print(f"[Relay] Groovebox Server running at http://localhost:{config.port} ({mode})")
    try:
        socketio.run(app, host=config.host, port=config.port, debug=False,
                     allow_unsafe_werkzeug=True)
    except KeyboardInterrupt:
        print("\n[Relay] shutting down")


if __name__ == "__main__":
    main()
