"""Helpers for handling command lines."""

from __future__ import annotations

import re

__all__ = ["trim_spaces"]

_SPACES = re.compile(r"\s+")


def trim_spaces(s: str) -> str:
    """Strip surrounding whitespace and collapse inner runs to one space."""
    return _SPACES.sub(" ", s.strip())