"""Client settings reported by a player."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "ChatMode",
    "MainHand",
    "SkinParts",
    "ClientSettings",
    "PlayerSettings",
    "DEFAULT_SETTINGS",
]


class ChatMode(str, Enum):
    """The chat visibility setting of a client."""

    SHOWN = "shown"
    COMMANDS_ONLY = "commandsOnly"
    HIDDEN = "hidden"


class MainHand(str, Enum):
    """The primary hand of a client."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class SkinParts:
    """Bitmask of the skin parts a client shows."""

    bitmask: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "bitmask", self.bitmask & 0xFF)

    def _bit(self, n: int) -> bool:
        return (self.bitmask >> n) & 1 == 1

    @property
    def cape(self) -> bool:
        return self._bit(0)

    @property
    def jacket(self) -> bool:
        return self._bit(1)

    @property
    def left_sleeve(self) -> bool:
        return self._bit(2)

    @property
    def right_sleeve(self) -> bool:
        return self._bit(3)

    @property
    def left_pants(self) -> bool:
        return self._bit(4)

    @property
    def right_pants(self) -> bool:
        return self._bit(5)

    @property
    def hat(self) -> bool:
        return self._bit(6)


@dataclass
class ClientSettings:
    """Raw client settings as sent by the client."""

    locale: str = ""
    view_distance: int = 0
    chat_visibility: int = 0
    chat_colors: bool = False
    skin_parts: int = 0
    main_hand: int = 0


def _canonical_locale(locale: str) -> str:
    parts = [p for p in locale.replace("_", "-").split("-") if p]
    if not parts:
        return ""
    out = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 2 and part.isalpha():
            out.append(part.upper())
        elif len(part) == 4 and part.isalpha():
            out.append(part.title())
        else:
            out.append(part.lower())
    return "-".join(out)


class PlayerSettings:
    """Read-only view of the client settings a player gave."""

    __slots__ = ("_raw", "_locale")

    def __init__(self, raw: ClientSettings) -> None:
        self._raw = raw
        self._locale = _canonical_locale(raw.locale)

    @property
    def locale(self) -> str:
        """Locale of the client as a language tag, e.g. ``en-US``."""
        return self._locale

    @property
    def view_distance(self) -> int:
        return self._raw.view_distance

    @property
    def chat_mode(self) -> ChatMode:
        visibility = self._raw.chat_visibility
        if visibility <= 0 or visibility > 2:
            return ChatMode.SHOWN
        if visibility == 1:
            return ChatMode.COMMANDS_ONLY
        return ChatMode.HIDDEN

    @property
    def chat_colors(self) -> bool:
        return self._raw.chat_colors

    @property
    def skin_parts(self) -> SkinParts:
        return SkinParts(self._raw.skin_parts)

    @property
    def main_hand(self) -> MainHand:
        return MainHand.LEFT if self._raw.main_hand == 0 else MainHand.RIGHT

    def __repr__(self) -> str:
        return f"PlayerSettings({self._raw!r})"


DEFAULT_SETTINGS = PlayerSettings(
    ClientSettings(
        locale="en_US",
        view_distance=10,
        chat_colors=True,
        skin_parts=127,
        main_hand=1,
    )
)