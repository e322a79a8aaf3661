"""Handling of the BungeeCord plugin messaging channel."""

from __future__ import annotations

import io
import json
import logging
import re
import struct
from typing import Any, Callable, Optional

from .forwarding import split_host_port
from .message import ChannelIdentifier, LegacyChannelIdentifier, MinecraftChannelIdentifier
from .registry import Proxy
from .server import RegisteredServer

__all__ = [
    "MINECRAFT_1_13_PROTOCOL",
    "BUNGEECORD_MODERN_CHANNEL",
    "BUNGEECORD_LEGACY_CHANNEL",
    "BungeeCordMessageRecorder",
    "bungee_cord_channel",
]

_log = logging.getLogger(__name__)

MINECRAFT_1_13_PROTOCOL = 393

BUNGEECORD_MODERN_CHANNEL = MinecraftChannelIdentifier(namespace="bungeecord", name="main")
BUNGEECORD_LEGACY_CHANNEL = LegacyChannelIdentifier("BungeeCord")

_ALL = "ALL"
_PORT = re.compile(r"[+-]?\d+")

_LEGACY_COLORS = {
    "0": "black", "1": "dark_blue", "2": "dark_green", "3": "dark_aqua",
    "4": "dark_red", "5": "dark_purple", "6": "gold", "7": "gray",
    "8": "dark_gray", "9": "blue", "a": "green", "b": "aqua",
    "c": "red", "d": "light_purple", "e": "yellow", "f": "white",
}
_LEGACY_FORMATS = {
    "k": "obfuscated", "l": "bold", "m": "strikethrough", "n": "underlined", "o": "italic",
}


def _bungee_identifier(protocol: int) -> ChannelIdentifier:
    if protocol >= MINECRAFT_1_13_PROTOCOL:
        return BUNGEECORD_MODERN_CHANNEL
    return BUNGEECORD_LEGACY_CHANNEL


def bungee_cord_channel(protocol: int) -> str:
    """Return the BungeeCord channel name used with the given protocol version."""
    return _bungee_identifier(protocol).id()


def _legacy_to_component(text: str, char: str = "\u00a7") -> dict[str, Any]:
    """Turn legacy formatted text (``§c`` style codes) into a chat component."""
    segments = text.split(char)
    parts: list[dict[str, Any]] = []
    style: dict[str, Any] = {}
    if segments[0]:
        parts.append({"text": segments[0]})
    for segment in segments[1:]:
        code, rest = segment[:1].lower(), segment[1:]
        if code in _LEGACY_COLORS:
            style = {"color": _LEGACY_COLORS[code]}
        elif code in _LEGACY_FORMATS:
            style = {**style, _LEGACY_FORMATS[code]: True}
        elif code == "r":
            style = {}
        else:
            rest = char + segment
        if rest:
            parts.append({"text": rest, **style})
    if not parts:
        return {"text": ""}
    if len(parts) == 1 and len(parts[0]) == 1:
        return parts[0]
    return {"text": "", "extra": parts}


class _Truncated(Exception):
    """The message ended before a field could be read."""


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)

    def read_exact(self, n: int) -> bytes:
        chunk = self._buf.read(n)
        if len(chunk) != n:
            raise _Truncated
        return chunk

    def read_utf(self) -> str:
        (length,) = struct.unpack(">H", self.read_exact(2))
        return self.read_exact(length).decode("utf-8", "replace")

    def read_int16(self) -> int:
        (value,) = struct.unpack(">h", self.read_exact(2))
        return value


class _Response:
    def __init__(self) -> None:
        self._parts: list[bytes] = []

    def utf(self, value: str) -> "_Response":
        encoded = value.encode("utf-8")
        if len(encoded) > 0xFFFF:
            raise ValueError("string too long for a UTF field")
        self._parts += [struct.pack(">H", len(encoded)), encoded]
        return self

    def int16(self, value: int) -> "_Response":
        self._parts.append(struct.pack(">H", value & 0xFFFF))
        return self

    def int32(self, value: int) -> "_Response":
        self._parts.append(struct.pack(">I", value & 0xFFFFFFFF))
        return self

    def __bytes__(self) -> bytes:
        return b"".join(self._parts)


def _host_port(addr: Any) -> tuple[str, int]:
    """Split an address (``host:port`` string or ``(host, port)``) into its parts."""
    if isinstance(addr, tuple):
        return str(addr[0]), int(addr[1])
    host, port = split_host_port(str(addr))
    if not _PORT.fullmatch(port):
        raise ValueError(f"invalid port {port!r}")
    return host, int(port)


_SUBCHANNELS = {
    "ForwardToPlayer": "_forward_to_player",
    "Forward": "_forward_to_server",
    "Connect": "_connect",
    "ConnectOther": "_connect_other",
    "IP": "_ip",
    "IPOther": "_ip_other",
    "UUID": "_uuid",
    "UUIDOther": "_uuid_other",
    "PlayerCount": "_player_count",
    "PlayerList": "_player_list",
    "GetServers": "_get_servers",
    "GetServer": "_get_server",
    "Message": "_message",
    "MessageRaw": "_message_raw",
    "ServerIP": "_server_ip",
    "KickPlayer": "_kick",
}


class BungeeCordMessageRecorder:
    """Answers BungeeCord plugin channel requests sent by a player's backend server.

    ``player`` has ``username``, ``id`` (a UUID), ``remote_addr`` and
    ``current_server`` (a server connection with ``protocol``, ``server`` and
    ``send_plugin_message(identifier, data)``, or None). Players looked up
    through ``proxy`` also offer ``send_message(component)``,
    ``disconnect(reason)`` and ``connect_with_indication(server, timeout=...)``.
    """

    def __init__(
        self,
        player: Any,
        proxy: Proxy,
        *,
        enabled: bool = True,
        connection_timeout: float = 5.0,
        legacy_decoder: Optional[Callable[[str], Any]] = None,
        json_decoder: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.player = player
        self.proxy = proxy
        self.enabled = enabled
        self.connection_timeout = connection_timeout
        self.legacy_decoder = legacy_decoder or _legacy_to_component
        self.json_decoder = json_decoder or json.loads

    def process(self, channel: str, data: bytes) -> bool:
        """Handle a plugin message; True if it was a BungeeCord channel message."""
        if not self.enabled:
            return False
        folded = channel.lower()
        if folded not in (BUNGEECORD_MODERN_CHANNEL.id().lower(),
                          BUNGEECORD_LEGACY_CHANNEL.id().lower()):
            return False
        reader = _Reader(data)
        try:
            subchannel = reader.read_utf()
        except _Truncated:
            return False
        handler_name = _SUBCHANNELS.get(subchannel)
        if handler_name is not None:
            try:
                getattr(self, handler_name)(reader)
            except _Truncated:
                pass
        return True

    # Helpers

    def _read_server(self, reader: _Reader) -> Optional[RegisteredServer]:
        return self.proxy.server(reader.read_utf())

    def _read_player(self, reader: _Reader) -> Any:
        return self.proxy.player_by_name(reader.read_utf())

    def _prepare_forward(self, reader: _Reader) -> bytes:
        try:
            channel = reader.read_utf()
            length = reader.read_int16()
            if length < 0:
                return b""
            payload = reader.read_exact(length)
        except _Truncated:
            return b""
        return channel.encode("utf-8") + struct.pack(">h", length) + payload

    def _send_server_response(self, data: bytes) -> None:
        if not data:
            return
        conn = getattr(self.player, "current_server", None)
        if conn is None:
            return
        try:
            conn.send_plugin_message(_bungee_identifier(conn.protocol), data)
        except Exception:
            _log.debug("Sending BungeeCord response failed", exc_info=True)

    def _connect_player(self, player: Any, server: RegisteredServer) -> None:
        try:
            player.connect_with_indication(server, timeout=self.connection_timeout)
        except Exception:
            _log.debug("Connecting %r to %r failed", player, server, exc_info=True)

    # Sub-channels

    def _forward_to_player(self, reader: _Reader) -> None:
        if self._read_player(reader) is not None:
            self._send_server_response(self._prepare_forward(reader))

    def _forward_to_server(self, reader: _Reader) -> None:
        target = reader.read_utf()
        forward = self._prepare_forward(reader)
        if target.lower() == _ALL.lower():
            servers = self.proxy.servers()
        else:
            server = self.proxy.server(target)
            servers = [server] if server is not None else []
        for server in servers:
            server.send_plugin_message(BUNGEECORD_LEGACY_CHANNEL, forward)

    def _connect(self, reader: _Reader) -> None:
        server = self._read_server(reader)
        if server is not None:
            self._connect_player(self.player, server)

    def _connect_other(self, reader: _Reader) -> None:
        player = self._read_player(reader)
        if player is None:
            return
        server = self._read_server(reader)
        if server is not None:
            self._connect_player(player, server)

    def _ip(self, reader: _Reader) -> None:
        try:
            host, port = _host_port(self.player.remote_addr)
        except ValueError:
            return
        self._send_server_response(bytes(_Response().utf("IP").utf(host).int32(port)))

    def _ip_other(self, reader: _Reader) -> None:
        player = self._read_player(reader)
        if player is None:
            return
        try:
            host, port = _host_port(player.remote_addr)
        except ValueError:
            return
        response = _Response().utf("IPOther").utf(player.username).utf(host).int32(port)
        self._send_server_response(bytes(response))

    def _player_count(self, reader: _Reader) -> None:
        target = reader.read_utf()
        if target.lower() == _ALL.lower():
            name, count = _ALL, self.proxy.player_count()
        else:
            server = self.proxy.server(target)
            if server is None:
                return
            name, count = server.server_info.name, len(server.players)
        response = _Response().utf("PlayerCount").utf(name).int32(count)
        self._send_server_response(bytes(response))

    def _player_list(self, reader: _Reader) -> None:
        target = reader.read_utf()
        if target.lower() == _ALL.lower():
            name, players = _ALL, self.proxy.players()
        else:
            server = self.proxy.server(target)
            if server is None:
                return
            name, players = server.server_info.name, list(server.players)
        names = ", ".join(p.username for p in players)
        response = _Response().utf("PlayerList").utf(name).utf(names)
        self._send_server_response(bytes(response))

    def _get_servers(self, reader: _Reader) -> None:
        names = ", ".join(s.server_info.name for s in self.proxy.servers())
        self._send_server_response(bytes(_Response().utf("GetServers").utf(names)))

    def _get_server(self, reader: _Reader) -> None:
        conn = getattr(self.player, "current_server", None)
        if conn is None:
            return
        name = conn.server.server_info.name
        self._send_server_response(bytes(_Response().utf("GetServer").utf(name)))

    def _deliver_message(self, reader: _Reader, decoder: Callable[[str], Any]) -> None:
        target = reader.read_utf()
        text = reader.read_utf()
        try:
            component = decoder(text)
        except ValueError:
            return
        if target.lower() == _ALL.lower():
            recipients = self.proxy.players()
        else:
            server = self.proxy.server(target)
            if server is None:
                return
            recipients = list(server.players)
        for player in recipients:
            try:
                player.send_message(component)
            except Exception:
                _log.debug("Sending message to %r failed", player, exc_info=True)

    def _message(self, reader: _Reader) -> None:
        self._deliver_message(reader, self.legacy_decoder)

    def _message_raw(self, reader: _Reader) -> None:
        self._deliver_message(reader, self.json_decoder)

    def _uuid(self, reader: _Reader) -> None:
        response = _Response().utf("UUID").utf(self.player.id.hex)
        self._send_server_response(bytes(response))

    def _uuid_other(self, reader: _Reader) -> None:
        player = self._read_player(reader)
        if player is None:
            return
        response = _Response().utf("UUIDOther").utf(player.username).utf(player.id.hex)
        self._send_server_response(bytes(response))

    def _server_ip(self, reader: _Reader) -> None:
        server = self._read_server(reader)
        if server is None:
            return
        try:
            host, port = _host_port(server.server_info.addr)
        except ValueError:
            return
        response = (_Response().utf("ServerIP").utf(server.server_info.name)
                    .utf(host).int16(port))
        self._send_server_response(bytes(response))

    def _kick(self, reader: _Reader) -> None:
        player = self._read_player(reader)
        if player is None:
            return
        text = reader.read_utf()
        try:
            reason = self.legacy_decoder(text)
        except ValueError:
            reason = {"text": ""}
        player.disconnect(reason)