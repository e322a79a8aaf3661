"""Player information forwarding to backend servers."""

from __future__ import annotations

import hashlib
import hmac
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union
from uuid import UUID

__all__ = [
    "VELOCITY_IP_FORWARDING_CHANNEL",
    "VELOCITY_FORWARDING_VERSION",
    "Property",
    "split_host_port",
    "create_velocity_forwarding_data",
    "create_legacy_forwarding_address",
]

VELOCITY_IP_FORWARDING_CHANNEL = "velocity:player_info"
VELOCITY_FORWARDING_VERSION = 1


@dataclass(frozen=True)
class Property:
    """A game profile property, e.g. the skin textures."""

    name: str
    value: str
    signature: str = ""


def split_host_port(addr: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port`` into host and port strings."""
    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise ValueError(f"address {addr}: missing ']' in address")
        host, rest = addr[1:end], addr[end + 1:]
        if not rest.startswith(":"):
            raise ValueError(f"address {addr}: missing port in address")
        port = rest[1:]
    else:
        host, sep, port = addr.rpartition(":")
        if not sep:
            raise ValueError(f"address {addr}: missing port in address")
        if ":" in host:
            raise ValueError(f"address {addr}: too many colons in address")
    if "[" in port or "]" in port:
        raise ValueError(f"address {addr}: unexpected bracket in address")
    return host, port


def _as_property(prop: Union[Property, Mapping]) -> Property:
    if isinstance(prop, Mapping):
        return Property(prop["name"], prop["value"], prop.get("signature", "") or "")
    return prop


def _varint(value: int) -> bytes:
    value &= 0xFFFFFFFF
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _string(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return _varint(len(encoded)) + encoded


def _properties(props: Iterable[Property]) -> bytes:
    props = list(props)
    out = [_varint(len(props))]
    for prop in props:
        out += [_string(prop.name), _string(prop.value)]
        if prop.signature:
            out += [b"\x01", _string(prop.signature)]
        else:
            out.append(b"\x00")
    return b"".join(out)


def create_velocity_forwarding_data(
    hmac_secret: Union[bytes, str],
    address: str,
    profile_id: UUID,
    name: str,
    properties: Optional[Iterable[Union[Property, Mapping]]] = None,
) -> bytes:
    """Return the HMAC-SHA256 signed player info for modern forwarding."""
    mac_key = hmac_secret.encode() if isinstance(hmac_secret, str) else hmac_secret
    props = [_as_property(p) for p in properties or ()]
    forwarded = b"".join([
        _varint(VELOCITY_FORWARDING_VERSION),
        _string(address),
        profile_id.bytes,
        _string(name),
        _properties(props),
    ])
    mac = hmac.new(mac_key, forwarded, hashlib.sha256).digest()
    return mac + forwarded


def create_legacy_forwarding_address(
    server_addr: str,
    player_addr: str,
    profile_id: UUID,
    properties: Optional[Iterable[Union[Property, Mapping]]],
) -> str:
    """Return the handshake address carrying BungeeCord-style forwarded info.

    The original address, the player's IP, the undashed id and the JSON
    encoded profile properties are joined by null characters.
    """
    try:
        player_ip = split_host_port(player_addr)[0]
    except ValueError:
        player_ip = ""
    encoded: Any
    if properties is None:
        encoded = None
    else:
        encoded = []
        for prop in map(_as_property, properties):
            entry = {"name": prop.name, "value": prop.value}
            if prop.signature:
                entry["signature"] = prop.signature
            encoded.append(entry)
    props_json = json.dumps(encoded, separators=(",", ":"))
    return "\0".join([server_addr, player_ip, profile_id.hex, props_json])