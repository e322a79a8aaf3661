"""Registries of the proxy: backend servers, players and plugin channels."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from .message import ChannelIdentifier
from .server import RegisteredServer, ServerInfo

__all__ = ["DUPLICATE_LOGIN_REASON", "ChannelRegistrar", "Proxy"]

_log = logging.getLogger(__name__)

# Translated chat component used to kick a duplicate login.
DUPLICATE_LOGIN_REASON = {"translate": "multiplayer.disconnect.duplicate_login"}


def _valid_host_port(addr: str) -> bool:
    host, sep, port = addr.rpartition(":")
    if not sep or not host or not port.isdigit():
        return False
    return 0 <= int(port) <= 65535


class ChannelRegistrar:
    """Plugin channel identifiers the proxy listens on, keyed by their id."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._identifiers: dict[str, ChannelIdentifier] = {}

    def register(self, *args: ChannelIdentifier) -> None:
        """Register identifiers to listen on."""
        with self._lock:
            for identifier in args:
                self._identifiers[identifier.id()] = identifier

    def unregister(self, *args: ChannelIdentifier) -> None:
        """Stop listening on the given identifiers."""
        with self._lock:
            for identifier in args:
                self._identifiers.pop(identifier.id(), None)

    def legacy_channel_ids(self) -> set[str]:
        """Return the ids of all registered channels."""
        with self._lock:
            return {identifier.id() for identifier in self._identifiers.values()}

    def from_id(self, channel: str) -> Optional[ChannelIdentifier]:
        """Return the identifier registered for ``channel`` or None."""
        with self._lock:
            return self._identifiers.get(channel)


class Proxy:
    """Keeps track of the registered backend servers and connected players.

    Players are objects with ``id`` and ``username`` attributes, a
    ``disconnect(reason)`` method and a writable
    ``disconnect_due_to_duplicate_connection`` flag.
    """

    def __init__(self, *, online_mode: bool = False,
                 online_mode_kick_existing_players: bool = False) -> None:
        self.online_mode = online_mode
        self.online_mode_kick_existing_players = online_mode_kick_existing_players
        self.channel_registrar = ChannelRegistrar()
        self._servers_lock = threading.RLock()
        self._servers: dict[str, RegisteredServer] = {}
        self._players_lock = threading.RLock()
        self._player_names: dict[str, Any] = {}
        self._player_ids: dict[Any, Any] = {}

    # Servers

    def register(self, info: Optional[ServerInfo]) -> tuple[Optional[RegisteredServer], bool]:
        """Register a server.

        Returns the new server and True; the already registered server of that
        name and False; or None and False if ``info`` is invalid.
        """
        if info is None or not info.name or not _valid_host_port(info.addr):
            return None, False
        name = info.name.lower()
        with self._servers_lock:
            existing = self._servers.get(name)
            if existing is not None:
                return existing, False
            server = RegisteredServer(info)
            self._servers[name] = server
        _log.debug("Registered new server %s (%s)", info.name, info.addr)
        return server, True

    def unregister(self, info: Optional[ServerInfo]) -> bool:
        """Unregister the server exactly matching ``info``; True if found."""
        if info is None:
            return False
        name = info.name.lower()
        with self._servers_lock:
            server = self._servers.get(name)
            if server is None or server.server_info != info:
                return False
            del self._servers[name]
        _log.info("Unregistered backend server %s (%s)", info.name, info.addr)
        return True

    def server(self, name: str) -> Optional[RegisteredServer]:
        """Return the server registered under ``name`` (any case) or None."""
        with self._servers_lock:
            return self._servers.get(name.lower())

    def servers(self) -> list[RegisteredServer]:
        """Return all registered servers."""
        with self._servers_lock:
            return list(self._servers.values())

    # Players

    def player(self, player_id: Any) -> Any:
        """Return the online player with this id or None."""
        with self._players_lock:
            return self._player_ids.get(player_id)

    def player_by_name(self, username: str) -> Any:
        """Return the online player by name, case-insensitively, or None."""
        with self._players_lock:
            return self._player_names.get(username.lower())

    def players(self) -> list[Any]:
        """Return all online players."""
        with self._players_lock:
            return list(self._player_ids.values())

    def player_count(self) -> int:
        """Return the number of online players."""
        with self._players_lock:
            return len(self._player_ids)

    def can_register_connection(self, player: Any) -> bool:
        """Whether ``player`` could be registered right now."""
        if self.online_mode and self.online_mode_kick_existing_players:
            return True
        with self._players_lock:
            return (player.username.lower() not in self._player_names
                    and player.id not in self._player_ids)

    def register_connection(self, player: Any) -> bool:
        """Register ``player``; False if a player of that name or id is online.

        When existing players are to be kicked, a player with the same id is
        disconnected first, repeatedly until the registration succeeds.
        """
        lower_name = player.username.lower()
        while True:
            with self._players_lock:
                if self.online_mode_kick_existing_players:
                    existing = self._player_ids.get(player.id)
                else:
                    if lower_name in self._player_names or player.id in self._player_ids:
                        return False
                    existing = None
                if existing is None:
                    self._player_ids[player.id] = player
                    self._player_names[lower_name] = player
                    return True
            # Disconnecting unregisters the existing player, which needs the lock.
            existing.disconnect_due_to_duplicate_connection = True
            existing.disconnect(DUPLICATE_LOGIN_REASON)

    def unregister_connection(self, player: Any) -> bool:
        """Remove ``player``; True if it was registered by id."""
        with self._players_lock:
            found = player.id in self._player_ids
            self._player_names.pop(player.username.lower(), None)
            self._player_ids.pop(player.id, None)
            return found

    def disconnect_all(self, reason: Any) -> None:
        """Disconnect all players in parallel and wait until all are done."""
        threads = [
            threading.Thread(target=p.disconnect, args=(reason,), daemon=True)
            for p in self.players()
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()