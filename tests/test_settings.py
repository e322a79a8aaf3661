import pytest

from mcgate.settings import (
    DEFAULT_SETTINGS,
    ChatMode,
    ClientSettings,
    MainHand,
    PlayerSettings,
    SkinParts,
)

ALL_PARTS = ["cape", "jacket", "left_sleeve", "right_sleeve", "left_pants", "right_pants", "hat"]


def test_default_settings():
    built = PlayerSettings(
        ClientSettings(
            locale="en_US",
            view_distance=10,
            chat_colors=True,
            skin_parts=127,
            main_hand=1,
            chat_visibility=0,
        )
    )
    assert built.locale == "en-US"
    assert built.view_distance == 10
    assert built.chat_colors is True
    assert built.main_hand is MainHand.RIGHT
    assert built.chat_mode is ChatMode.SHOWN
    assert DEFAULT_SETTINGS.locale == built.locale
    assert DEFAULT_SETTINGS.view_distance == built.view_distance
    assert DEFAULT_SETTINGS.chat_colors == built.chat_colors
    assert DEFAULT_SETTINGS.main_hand is built.main_hand
    assert DEFAULT_SETTINGS.chat_mode is built.chat_mode
    assert DEFAULT_SETTINGS.skin_parts == SkinParts(127)


def test_all_skin_parts_shown_for_127():
    parts = SkinParts(127)
    assert parts.cape is True
    assert parts.jacket is True
    assert parts.left_sleeve is True
    assert parts.right_sleeve is True
    assert parts.left_pants is True
    assert parts.right_pants is True
    assert parts.hat is True


def test_no_skin_parts_for_zero():
    parts = SkinParts(0)
    assert parts.cape is False
    assert parts.jacket is False
    assert parts.left_sleeve is False
    assert parts.right_sleeve is False
    assert parts.left_pants is False
    assert parts.right_pants is False
    assert parts.hat is False


@pytest.mark.parametrize("bit,name", list(enumerate(ALL_PARTS)))
def test_single_skin_part_bit(bit, name):
    parts = SkinParts(1 << bit)
    assert getattr(parts, name) is True
    assert [n for n in ALL_PARTS if getattr(parts, n)] == [name]


@pytest.mark.parametrize(
    "visibility,mode",
    [
        (0, ChatMode.SHOWN),
        (-1, ChatMode.SHOWN),
        (1, ChatMode.COMMANDS_ONLY),
        (2, ChatMode.HIDDEN),
        (3, ChatMode.SHOWN),
    ],
)
def test_chat_mode(visibility, mode):
    settings = PlayerSettings(ClientSettings(chat_visibility=visibility))
    assert settings.chat_mode is mode


@pytest.mark.parametrize("hand,expected", [(0, MainHand.LEFT), (1, MainHand.RIGHT), (5, MainHand.RIGHT)])
def test_main_hand(hand, expected):
    assert PlayerSettings(ClientSettings(main_hand=hand)).main_hand is expected


def test_enum_values_match_wire_names():
    assert ChatMode("commandsOnly") is ChatMode.COMMANDS_ONLY
    assert ChatMode("shown") is ChatMode.SHOWN
    assert ChatMode("hidden") is ChatMode.HIDDEN
    assert MainHand("left") is MainHand.LEFT
    assert MainHand("right") is MainHand.RIGHT
    with pytest.raises(ValueError):
        ChatMode("visible")


def test_settings_pass_through_raw_values():
    raw = ClientSettings(locale="de_DE", view_distance=7, chat_colors=False, skin_parts=3)
    settings = PlayerSettings(raw)
    assert settings.view_distance == 7
    assert settings.chat_colors is False
    assert settings.skin_parts == SkinParts(3)
    assert settings.locale == "de-DE"