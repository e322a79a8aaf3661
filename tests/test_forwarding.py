import hashlib
import hmac
import json
import uuid

import pytest

from mcgate.forwarding import (
    VELOCITY_FORWARDING_VERSION,
    VELOCITY_IP_FORWARDING_CHANNEL,
    Property,
    create_legacy_forwarding_address,
    create_velocity_forwarding_data,
    split_host_port,
)

PROFILE_ID = uuid.UUID("0123456789abcdef0123456789abcdef")
SECRET = b"secret"


def read_varint(buf, pos):
    result, shift = 0, 0
    while True:
        byte = buf[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        shift += 7
        if not byte & 0x80:
            return result, pos


def read_string(buf, pos):
    n, pos = read_varint(buf, pos)
    return buf[pos:pos + n].decode("utf-8"), pos + n


def parse_payload(payload):
    version, pos = read_varint(payload, 0)
    address, pos = read_string(payload, pos)
    pid = uuid.UUID(bytes=payload[pos:pos + 16])
    pos += 16
    name, pos = read_string(payload, pos)
    count, pos = read_varint(payload, pos)
    props = []
    for _ in range(count):
        pname, pos = read_string(payload, pos)
        value, pos = read_string(payload, pos)
        signed = payload[pos]
        pos += 1
        signature = ""
        if signed:
            signature, pos = read_string(payload, pos)
        props.append(Property(pname, value, signature))
    assert pos == len(payload)
    return version, address, pid, name, props


def test_channel_constant():
    data = create_velocity_forwarding_data(SECRET, "a:1", PROFILE_ID, "Bob", [])
    assert data[32] == 1
    assert parse_payload(data[32:])[0] == VELOCITY_FORWARDING_VERSION
    assert VELOCITY_IP_FORWARDING_CHANNEL == "velocity:player_info"


def test_velocity_data_is_signed():
    data = create_velocity_forwarding_data(SECRET, "127.0.0.1:25565", PROFILE_ID, "Alice", [])
    mac, payload = data[:32], data[32:]
    assert mac == hmac.new(SECRET, payload, hashlib.sha256).digest()
    assert len(payload) > 0


def test_velocity_payload_fields():
    data = create_velocity_forwarding_data(SECRET, "127.0.0.1:25565", PROFILE_ID, "Alice", None)
    assert parse_payload(data[32:]) == (
        VELOCITY_FORWARDING_VERSION, "127.0.0.1:25565", PROFILE_ID, "Alice", []
    )


def test_velocity_properties_round_trip():
    props = [Property("textures", "abc", "sig"), Property("plain", "v")]
    data = create_velocity_forwarding_data(SECRET, "a:1", PROFILE_ID, "Bob", props)
    assert parse_payload(data[32:])[4] == props


def test_velocity_accepts_mapping_properties():
    data = create_velocity_forwarding_data(
        SECRET, "a:1", PROFILE_ID, "Bob", [{"name": "n", "value": "v", "signature": "s"}]
    )
    assert parse_payload(data[32:])[4] == [Property("n", "v", "s")]


def test_velocity_str_secret_matches_bytes():
    as_str = create_velocity_forwarding_data("secret", "a:1", PROFILE_ID, "Bob", [])
    as_bytes = create_velocity_forwarding_data(SECRET, "a:1", PROFILE_ID, "Bob", [])
    assert as_str == as_bytes


def test_velocity_secret_changes_only_mac():
    one = create_velocity_forwarding_data(b"secret", "a:1", PROFILE_ID, "Bob", [])
    two = create_velocity_forwarding_data(b"token", "a:1", PROFILE_ID, "Bob", [])
    assert one[32:] == two[32:]
    assert one[:32] != two[:32]


def test_velocity_long_address_varint():
    address = "a" * 200
    data = create_velocity_forwarding_data(SECRET, address, PROFILE_ID, "Bob", [])
    payload = data[32:]
    assert payload[1:3] == b"\xc8\x01"
    assert parse_payload(payload)[1] == address


def test_legacy_address_parts():
    props = [Property("textures", "v", "s")]
    result = create_legacy_forwarding_address("10.0.0.1:25565", "127.0.0.1:5000", PROFILE_ID, props)
    server, ip, pid, props_json = result.split("\0")
    assert server == "10.0.0.1:25565"
    assert ip == "127.0.0.1"
    assert pid == PROFILE_ID.hex
    assert json.loads(props_json) == [{"name": "textures", "value": "v", "signature": "s"}]


def test_legacy_address_omits_empty_signature():
    result = create_legacy_forwarding_address("s:1", "p:2", PROFILE_ID, [Property("n", "v")])
    assert json.loads(result.split("\0")[3]) == [{"name": "n", "value": "v"}]


def test_legacy_address_ipv6_player():
    result = create_legacy_forwarding_address("s:1", "[::1]:4000", PROFILE_ID, [])
    assert result.split("\0")[1] == "::1"
    assert json.loads(result.split("\0")[3]) == []


def test_legacy_address_bad_player_addr_and_no_properties():
    result = create_legacy_forwarding_address("s:1", "garbage", PROFILE_ID, None)
    parts = result.split("\0")
    assert parts[1] == ""
    assert json.loads(parts[3]) is None


@pytest.mark.parametrize(
    "addr, expected",
    [
        ("localhost:25565", ("localhost", "25565")),
        ("[::1]:80", ("::1", "80")),
        ("10.0.0.1:", ("10.0.0.1", "")),
    ],
)
def test_split_host_port(addr, expected):
    assert split_host_port(addr) == expected


@pytest.mark.parametrize("addr", ["localhost", "a:b:c", "[::1", "[::1]80"])
def test_split_host_port_errors(addr):
    with pytest.raises(ValueError):
        split_host_port(addr)