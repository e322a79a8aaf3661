# mcgate

Building blocks for a Minecraft Java edition proxy, in plain Python with no
third-party dependencies.

## Modules

- `mcgate.message`: plugin-messaging channel identifiers.
  `LegacyChannelIdentifier` (a bare name) and `MinecraftChannelIdentifier`
  (`namespace:name`), both with `id()`; `new_channel_identifier(namespace, name)`
  and `new_default_namespace(name)` raise `ChannelIdentifierError` for an
  empty namespace or name.
- `mcgate.settings`: the client settings a player reports. `ClientSettings`
  holds the raw values; `PlayerSettings` reads them as `locale` (a language
  tag such as `en-US`), `view_distance`, `chat_mode` (`ChatMode`),
  `chat_colors`, `skin_parts` (`SkinParts` with `cape`, `jacket`, `hat`, ...)
  and `main_hand` (`MainHand`). `DEFAULT_SETTINGS` holds the defaults.
- `mcgate.commandline`: `trim_spaces(s)` strips a command line and collapses
  runs of whitespace into one space.
- `mcgate.events`: the events of a proxy's life: ping, handshake, pre-login
  and login (`PreLoginEvent`, `LoginEvent`, `LoginStatus`), server switching
  (`ServerPreConnectEvent`, `KickedFromServerEvent` with its
  `DisconnectPlayerKickResult`, `RedirectPlayerKickResult` and
  `NotifyKickResult`, `ServerConnectedEvent`, `ServerPostConnectEvent`),
  chat, commands, tab completion, plugin messages and shutdown.
- `mcgate.server`: `ServerInfo` (name and `host:port` address),
  `RegisteredServer` and its thread-safe `Players` set;
  `RegisteredServer.send_plugin_message` sends to every player on the server.
- `mcgate.registry`: `Proxy`, the registry of backend servers (looked up
  case-insensitively) and connected players, including the handling of
  duplicate logins, plus `ChannelRegistrar` for the plugin channels the proxy
  listens on.
- `mcgate.bungee`: `BungeeCordMessageRecorder`, which answers the BungeeCord
  plugin channel sub-channels (`Forward`, `Connect`, `IP`, `UUID`,
  `PlayerCount`, `PlayerList`, `GetServers`, `GetServer`, `Message`,
  `MessageRaw`, `ServerIP`, `KickPlayer` and their "Other" variants), and
  `bungee_cord_channel(protocol)`, which picks `bungeecord:main` for
  protocol 393 (1.13) and later, `BungeeCord` before.
- `mcgate.forwarding`: player information forwarding.
  `create_velocity_forwarding_data` builds the HMAC-SHA256 signed payload for
  the `velocity:player_info` channel; `create_legacy_forwarding_address`
  builds the null-separated handshake address of BungeeCord-style forwarding.

## Example

```python
from uuid import UUID

from mcgate.forwarding import create_legacy_forwarding_address
from mcgate.message import new_default_namespace
from mcgate.registry import Proxy
from mcgate.server import ServerInfo

channel = new_default_namespace("brand")
print(channel.id())  # minecraft:brand

proxy = Proxy()
server, created = proxy.register(ServerInfo("lobby", "localhost:25566"))
assert created
assert proxy.server("LOBBY") is server

address = create_legacy_forwarding_address(
    "localhost:25566",
    "203.0.113.5:50000",
    UUID("00000000-0000-0000-0000-000000000001"),
    [],
)
print(address.split("\0"))
# ['localhost:25566', '203.0.113.5', '00000000000000000000000000000001', '[]']
```

## What the package does not do

There is no network listener, no packet encoding or decoding, no encryption
or compression, and no login or play session handling. `Proxy` is a registry
of servers and players, not a running server; players and server connections
are any objects that offer the attributes and methods the classes document
(such as `id`, `username`, `disconnect(reason)` and
`send_plugin_message(identifier, data)`). There is no command to start.

## Running the tests

```
pip install -e ".[test]"
pytest
```