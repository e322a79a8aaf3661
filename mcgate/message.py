"""Channel identifiers used for plugin messaging."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = [
    "DEFAULT_NAMESPACE",
    "VALID_IDENTIFIER_REGEX",
    "ChannelIdentifierError",
    "ChannelIdentifier",
    "LegacyChannelIdentifier",
    "MinecraftChannelIdentifier",
    "new_channel_identifier",
    "new_default_namespace",
]

DEFAULT_NAMESPACE = "minecraft"

# Unanchored and allowing empty matches, so any string passes the check.
VALID_IDENTIFIER_REGEX = re.compile(r"[a-z0-9\\-_]*")


class ChannelIdentifierError(ValueError):
    """Raised when a channel identifier cannot be created."""


class ChannelIdentifier(ABC):
    """A channel identifier for use with plugin messaging."""

    @abstractmethod
    def id(self) -> str:
        """Return the channel identifier string."""

    def __str__(self) -> str:
        return self.id()


@dataclass(frozen=True, eq=True)
class LegacyChannelIdentifier(ChannelIdentifier):
    """A legacy channel identifier (Minecraft 1.12 and below): a bare name."""

    name: str

    def id(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.id()


@dataclass(frozen=True, eq=True)
class MinecraftChannelIdentifier(ChannelIdentifier):
    """A Minecraft 1.13+ channel identifier of the form ``namespace:name``."""

    namespace: str
    name: str

    def id(self) -> str:
        return f"{self.namespace}:{self.name}"

    def __str__(self) -> str:
        return self.id()


def new_channel_identifier(namespace: str, name: str) -> MinecraftChannelIdentifier:
    """Return a validated namespaced channel identifier."""
    if not namespace:
        raise ChannelIdentifierError("namespace cannot be empty")
    if not name:
        raise ChannelIdentifierError("name cannot be empty")
    if VALID_IDENTIFIER_REGEX.search(namespace) is None:
        raise ChannelIdentifierError(
            f"namespace does not match regex {VALID_IDENTIFIER_REGEX.pattern}"
        )
    if VALID_IDENTIFIER_REGEX.search(name) is None:
        raise ChannelIdentifierError(
            f"name does not match regex {VALID_IDENTIFIER_REGEX.pattern}"
        )
    return MinecraftChannelIdentifier(namespace=namespace, name=name)


def new_default_namespace(name: str) -> MinecraftChannelIdentifier:
    """Return a channel identifier in the default ``minecraft`` namespace."""
    return new_channel_identifier(DEFAULT_NAMESPACE, name)