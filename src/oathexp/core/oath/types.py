"""OATH credential types and algorithms.

The card packs both into a single byte: credential type in the high
nibble, hash algorithm in the low nibble. Both tables are closed; values
outside them are rejected rather than defaulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from oathexp.core.oath.errors import UnsupportedAlgorithm

TYPE_MASK = 0xF0
ALGORITHM_MASK = 0x0F


class _Parse(IntEnum):
    @classmethod
    def parse(cls, value: int | str | IntEnum):
        """Accept a member, its numeric value, or its name (any case)."""
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, str):
                return cls[value.strip().upper()]
            return cls(value)
        except (KeyError, ValueError):
            raise UnsupportedAlgorithm(
                f"unsupported {cls.__name__.lower()}: {value!r}"
            ) from None


class OathType(_Parse):
    HOTP = 0x10
    TOTP = 0x20


class Algorithm(_Parse):
    SHA1 = 0x01
    SHA256 = 0x02
    SHA512 = 0x03


def pack_type_algorithm(oath_type: OathType, algorithm: Algorithm) -> int:
    return OathType.parse(oath_type) | Algorithm.parse(algorithm)


def unpack_type_algorithm(value: int) -> tuple[OathType, Algorithm]:
    """Split a device-reported type/algorithm byte."""
    return OathType.parse(value & TYPE_MASK), Algorithm.parse(value & ALGORITHM_MASK)


@dataclass(frozen=True)
class Credential:
    """A credential as reported by LIST."""

    name: str
    type: OathType
    algorithm: Algorithm


@dataclass
class AppletInfo:
    """Data returned when the OATH applet is selected."""

    version: bytes = b""
    salt: bytes = b""
    locked: bool = False

    @property
    def version_string(self) -> str:
        return ".".join(str(b) for b in self.version)
