"""Canonical enumerations."""

from __future__ import annotations

from enum import Enum


class Tier(str, Enum):
    BELOW = "Below"
    MINOR = "Minor"
    MODERATE = "Moderate"
    MAJOR = "Major"
