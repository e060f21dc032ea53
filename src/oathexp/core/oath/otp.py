"""HOTP/TOTP code derivation (RFC 4226 dynamic truncation, RFC 6238 time steps)."""

from __future__ import annotations

from datetime import datetime, timezone

from cryptography.hazmat.primitives import hashes, hmac

from oathexp.core.oath.types import Algorithm

DEFAULT_PERIOD = 30
DEFAULT_DIGITS = 6
MAX_DIGITS = 10

# The applet refuses shorter keys; zero padding does not change the HMAC.
HMAC_MINIMUM_KEY_SIZE = 14

_HASHES: dict[Algorithm, type[hashes.HashAlgorithm]] = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


def _hash(algorithm: Algorithm | int | str) -> hashes.HashAlgorithm:
    return _HASHES[Algorithm.parse(algorithm)]()


def hmac_digest(secret: bytes, message: bytes, algorithm: Algorithm | int | str) -> bytes:
    h = hmac.HMAC(secret, _hash(algorithm))
    h.update(message)
    return h.finalize()


def shorten_key(secret: bytes, algorithm: Algorithm | int | str) -> bytes:
    """Bring *secret* into the size range the applet accepts.

    Keys longer than the hash block size are replaced by their digest and
    short keys are zero-padded to HMAC_MINIMUM_KEY_SIZE. HMAC applies the
    same transformations internally, so codes are unaffected.
    """
    h = _hash(algorithm)
    if len(secret) > h.block_size:
        digest = hashes.Hash(h)
        digest.update(secret)
        secret = digest.finalize()
    return secret.ljust(HMAC_MINIMUM_KEY_SIZE, b"\x00")


def time_step(timestamp: datetime | float | int, period: int = DEFAULT_PERIOD) -> int:
    """TOTP moving factor: whole *period*s elapsed since the Unix epoch.

    Naive datetimes are taken as UTC.
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        timestamp = timestamp.timestamp()
    if timestamp < 0:
        raise ValueError(f"timestamp before the epoch: {timestamp}")
    return int(timestamp // period)


def truncate(mac: bytes) -> int:
    """RFC 4226 dynamic truncation to a 31-bit integer."""
    offset = mac[-1] & 0x0F
    if offset + 4 > len(mac):
        raise ValueError(f"MAC too short for truncation: {len(mac)} bytes")
    return int.from_bytes(mac[offset : offset + 4], "big") & 0x7FFFFFFF


def format_code(value: int, digits: int = DEFAULT_DIGITS) -> str:
    """Reduce a truncated value to *digits* decimal digits, zero-padded."""
    if not 1 <= digits <= MAX_DIGITS:
        raise ValueError(f"digits must be 1..{MAX_DIGITS}, got {digits}")
    return str(value % 10**digits).zfill(digits)


def compute(
    secret: bytes,
    moving_factor: int,
    algorithm: Algorithm | int | str = Algorithm.SHA256,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """Compute an OTP code for *moving_factor* (HOTP counter or TOTP step)."""
    if not 0 <= moving_factor < 1 << 64:
        raise ValueError(f"moving factor out of range: {moving_factor}")
    mac = hmac_digest(secret, moving_factor.to_bytes(8, "big"), algorithm)
    return format_code(truncate(mac), digits)
