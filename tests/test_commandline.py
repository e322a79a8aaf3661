import pytest

from mcgate.commandline import trim_spaces


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  server   lobby  ", "server lobby"),
        ("send\t\tall\nlobby", "send all lobby"),
        ("glist", "glist"),
        ("", ""),
        ("   ", ""),
    ],
)
def test_trim_spaces(raw, expected):
    assert trim_spaces(raw) == expected


def test_trim_spaces_is_idempotent():
    once = trim_spaces("  a   b \t c  ")
    assert trim_spaces(once) == once


def test_result_has_no_double_spaces_or_edges():
    result = trim_spaces("\n x  y   z \t")
    assert "  " not in result
    assert result == result.strip()
    assert result.split(" ") == ["x", "y", "z"]