import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_PORT = 3001
DEFAULT_HOST = "0.0.0.0"
STATIC_DIR = Path(__file__).parent / "relay" / "static"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class RelayConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    broadcast: bool = False     # re-emit received events to the other sessions
    static_dir: Path = STATIC_DIR

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelayConfig":
        env = os.environ if environ is None else environ
        raw_port = env.get("PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {raw_port!r}") from None
        return cls(
            host=env.get("HOST", DEFAULT_HOST),
            port=port,
            broadcast=env.get("RELAY_BROADCAST", "").strip().lower() in _TRUTHY,
            static_dir=Path(env.get("STATIC_DIR", STATIC_DIR)),
        )
