"""Events fired by the proxy during the life of connections and servers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional

from .settings import PlayerSettings

__all__ = [
    "PingEvent",
    "ConnectionHandshakeEvent",
    "GameProfileRequestEvent",
    "PlayerModInfoEvent",
    "PermissionsSetupEvent",
    "PreLoginResult",
    "PreLoginEvent",
    "LoginEvent",
    "LoginStatus",
    "DisconnectEvent",
    "PostLoginEvent",
    "PlayerChooseInitialServerEvent",
    "ServerPreConnectEvent",
    "ServerKickResult",
    "DisconnectPlayerKickResult",
    "RedirectPlayerKickResult",
    "NotifyKickResult",
    "KickedFromServerEvent",
    "ServerConnectedEvent",
    "ServerPostConnectEvent",
    "PluginMessageEvent",
    "PlayerSettingsChangedEvent",
    "PlayerChatEvent",
    "CommandExecuteEvent",
    "TabCompleteEvent",
    "PlayerAvailableCommandsEvent",
    "PreShutdownEvent",
    "ReadyEvent",
    "ShutdownEvent",
]


@dataclass
class PingEvent:
    """Fired when a remote client sends a server list ping.

    ``ping`` is pre-initialised by the proxy and may be replaced.
    """

    connection: Any
    ping: Any = None


@dataclass(frozen=True)
class ConnectionHandshakeEvent:
    """Fired when a handshake is established between a client and the proxy."""

    connection: Any


class GameProfileRequestEvent:
    """Fired after pre-login to set up the game profile of a user.

    Unless a profile with a non-empty name is set, the original profile
    created by the proxy is used.
    """

    def __init__(self, connection: Any, original: Any, online_mode: bool) -> None:
        self.connection = connection
        self.original = original
        self.online_mode = online_mode
        self._use: Any = None

    @property
    def game_profile(self) -> Any:
        """The profile the connection will be initialised with."""
        if self._use is None or not getattr(self._use, "name", ""):
            return self.original
        return self._use

    @game_profile.setter
    def game_profile(self, profile: Any) -> None:
        self._use = profile

    def __repr__(self) -> str:
        return (
            f"GameProfileRequestEvent(original={self.original!r}, "
            f"online_mode={self.online_mode!r}, game_profile={self.game_profile!r})"
        )


@dataclass(frozen=True)
class PlayerModInfoEvent:
    """Fired when a Forge client sends its mod list while connecting."""

    player: Any
    mod_info: Any


class PermissionsSetupEvent:
    """Fired once the permissions of a subject are being initialised."""

    def __init__(self, subject: Any, default_func: Callable[[str], Any]) -> None:
        self.subject = subject
        self.default_func = default_func
        self._fn: Optional[Callable[[str], Any]] = None

    @property
    def func(self) -> Callable[[str], Any]:
        """The permission function used for the subject."""
        return self.default_func if self._fn is None else self._fn

    @func.setter
    def func(self, fn: Optional[Callable[[str], Any]]) -> None:
        # Setting None keeps the current function.
        if fn is None:
            return
        self._fn = fn


class PreLoginResult(IntEnum):
    """Outcome of a pre-login."""

    ALLOWED = 0
    DENIED = 1
    FORCE_ONLINE_MODE = 2
    FORCE_OFFLINE_MODE = 3


@dataclass
class PreLoginEvent:
    """Fired before a connection logs in; decides how the login proceeds."""

    connection: Any
    username: str
    result: PreLoginResult = PreLoginResult.ALLOWED
    reason: Any = None

    def deny(self, reason: Any) -> None:
        self.result = PreLoginResult.DENIED
        self.reason = reason

    def allow(self) -> None:
        self.result = PreLoginResult.ALLOWED
        self.reason = None

    def force_online_mode(self) -> None:
        self.result = PreLoginResult.FORCE_ONLINE_MODE
        self.reason = None

    def force_offline_mode(self) -> None:
        self.result = PreLoginResult.FORCE_OFFLINE_MODE
        self.reason = None


@dataclass
class LoginEvent:
    """Fired when a player logs in; may deny the login with a reason."""

    player: Any
    denied: bool = False
    reason: Any = None

    def deny(self, reason: Any) -> None:
        self.denied = True
        self.reason = reason

    def allow(self) -> None:
        self.denied = False
        self.reason = None

    @property
    def allowed(self) -> bool:
        return not self.denied


class LoginStatus(IntEnum):
    """How a player's session ended."""

    SUCCESSFUL = 0
    CONFLICTING = 1
    CANCELED_BY_USER = 2
    CANCELED_BY_PROXY = 3
    CANCELED_BY_USER_BEFORE_COMPLETE = 4


@dataclass(frozen=True)
class DisconnectEvent:
    """Fired when a player disconnects."""

    player: Any
    login_status: LoginStatus


@dataclass(frozen=True)
class PostLoginEvent:
    """Fired after a player has logged in."""

    player: Any


@dataclass
class PlayerChooseInitialServerEvent:
    """Fired to choose the first server a player connects to.

    ``initial_server`` is None if no server is configured.
    """

    player: Any
    initial_server: Any = None


class ServerPreConnectEvent:
    """Fired before a player connects to a server."""

    def __init__(self, player: Any, server: Any) -> None:
        self.player = player
        self.original_server = server
        self.server: Any = server

    def allow(self, server: Any) -> None:
        """Allow the player to connect to the given server."""
        self.server = server

    def deny(self) -> None:
        """Cancel the connection to another server."""
        self.server = None

    @property
    def allowed(self) -> bool:
        return self.server is not None

    def __repr__(self) -> str:
        return (
            f"ServerPreConnectEvent(player={self.player!r}, "
            f"original_server={self.original_server!r}, server={self.server!r})"
        )


class ServerKickResult:
    """Base of the possible results of a KickedFromServerEvent."""

    __slots__ = ()


@dataclass(frozen=True)
class DisconnectPlayerKickResult(ServerKickResult):
    """Disconnect the player with the given reason."""

    reason: Any = None


@dataclass(frozen=True)
class RedirectPlayerKickResult(ServerKickResult):
    """Redirect the player to another server, with an optional message."""

    server: Any
    message: Any = None


@dataclass(frozen=True)
class NotifyKickResult(ServerKickResult):
    """Notify the player with a message and do nothing else.

    Only valid while connecting to a different server; otherwise it is
    treated like a disconnect.
    """

    message: Any = None


@dataclass
class KickedFromServerEvent:
    """Fired when a player is kicked from a server."""

    player: Any
    server: Any
    original_reason: Any
    kicked_during_server_connect: bool
    result: Optional[ServerKickResult]


@dataclass(frozen=True)
class ServerConnectedEvent:
    """Fired before a player fully transitions to the target server."""

    player: Any
    server: Any
    previous_server: Any = None


@dataclass(frozen=True)
class ServerPostConnectEvent:
    """Fired after a player has connected to a server."""

    player: Any
    previous_server: Any = None


@dataclass
class PluginMessageEvent:
    """Fired when a plugin message is sent to the proxy by a player or server."""

    source: Any
    target: Any
    identifier: Any
    data: bytes
    forward: bool = True

    @property
    def allowed(self) -> bool:
        return self.forward


@dataclass(frozen=True)
class PlayerSettingsChangedEvent:
    """Fired when a player's client settings are set or updated."""

    player: Any
    settings: PlayerSettings


@dataclass
class PlayerChatEvent:
    """Fired when a player sends a chat message not starting with ``/``."""

    player: Any
    message: str
    allowed: bool = True


@dataclass
class CommandExecuteEvent:
    """Fired when someone wants to execute a command.

    ``command`` is the command line without the leading ``/`` and may be
    changed; ``original_command`` keeps what was first given.
    """

    source: Any
    command: str
    original_command: Optional[str] = None
    forward: bool = False
    allowed: bool = True

    def __post_init__(self) -> None:
        if self.original_command is None:
            self.original_command = self.command


@dataclass
class TabCompleteEvent:
    """Fired after a server's tab complete response, for clients up to 1.12.2."""

    player: Any
    partial_message: str
    suggestions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PlayerAvailableCommandsEvent:
    """Lets plugins modify the commands shown to a 1.13+ client."""

    player: Any
    root_node: Any


@dataclass
class PreShutdownEvent:
    """Fired before the proxy begins to shut down; ``reason`` may be None."""

    reason: Any = None


@dataclass(frozen=True)
class ReadyEvent:
    """Fired once the proxy is initialised and ready to serve connections."""


@dataclass(frozen=True)
class ShutdownEvent:
    """Fired after the proxy stopped accepting connections, before it exits."""