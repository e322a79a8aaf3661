"""Backend servers registered with the proxy and the players on them."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterator

from .message import ChannelIdentifier

__all__ = ["Players", "ServerInfo", "RegisteredServer"]

_log = logging.getLogger(__name__)


class Players:
    """A set of players, keyed by player id, safe for concurrent use."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_id: dict[Any, Any] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    def __iter__(self) -> Iterator[Any]:
        with self._lock:
            snapshot = list(self._by_id.values())
        return iter(snapshot)

    def __contains__(self, player: Any) -> bool:
        with self._lock:
            return getattr(player, "id", None) in self._by_id

    def add(self, *args: Any) -> None:
        """Add players; a player with an id already present replaces it."""
        with self._lock:
            for player in args:
                self._by_id[player.id] = player

    def remove(self, *args: Any) -> None:
        """Remove players by their id; unknown players are ignored."""
        with self._lock:
            for player in args:
                self._by_id.pop(player.id, None)

    def __repr__(self) -> str:
        return f"Players({len(self)})"


@dataclass(frozen=True)
class ServerInfo:
    """Name and address (``host:port``) of a backend server."""

    name: str
    addr: str
    network: str = "tcp"


class RegisteredServer:
    """A backend server that has been registered with the proxy."""

    def __init__(self, info: ServerInfo) -> None:
        self.server_info = info
        self.players = Players()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegisteredServer):
            return NotImplemented
        return self.server_info == other.server_info

    def __hash__(self) -> int:
        return hash(self.server_info)

    def __repr__(self) -> str:
        return f"RegisteredServer({self.server_info!r})"

    def send_plugin_message(self, identifier: ChannelIdentifier, data: bytes) -> None:
        """Send a plugin message to every player on this server.

        Failures of single players are logged and otherwise ignored.
        """
        for player in self.players:
            try:
                player.send_plugin_message(identifier, data)
            except Exception:  # one broken connection must not stop the rest
                _log.debug("Sending plugin message to %r failed", player, exc_info=True)