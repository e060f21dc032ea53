"""Base card information data model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CardInfo:
    """Base card information: identity fields only."""

    atr: bytes = b""
