#!/usr/bin/env python3
"""Standalone HOTP/TOTP code derivation debugger.

Takes a secret and a moving factor (HOTP counter, or a timestamp for
TOTP), computes and displays every step: HMAC input, full HMAC, dynamic
truncation offset and value, final code, and the CALCULATE APDU an OATH
applet would receive.  No project dependencies: only the 'cryptography'
library is required.

Usage examples:

  TOTP at a given time, ASCII secret:
    python otp_debug.py totp --text 123 --time 2013-01-01T00:00:00Z

  HOTP counter 1, hex secret, SHA1, 8 digits:
    python otp_debug.py hotp --secret 3132333435363738393031323334353637383930 \\
      --counter 1 --algorithm sha1 --digits 8

  Check a full (untruncated) card response against a secret:
    python otp_debug.py totp --text 123 --time 1356998400 \\
      --response <card response hex>
"""

from __future__ import annotations

import argparse
import base64
import sys
from datetime import datetime, timezone

from cryptography.hazmat.primitives import hashes, hmac

_HASHES = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha512": hashes.SHA512,
}

_ALGORITHM_IDS = {"sha1": 0x01, "sha256": 0x02, "sha512": 0x03}
_TYPE_IDS = {"hotp": 0x10, "totp": 0x20}


def _hex(data: bytes) -> str:
    return data.hex().upper()


def _hex_spaced(data: bytes) -> str:
    return " ".join(f"{b:02X}" for b in data)


def _hmac(algorithm: str, key: bytes, message: bytes) -> bytes:
    h = hmac.HMAC(key, _HASHES[algorithm]())
    h.update(message)
    return h.finalize()


def _tlv(tag: int, value: bytes) -> bytes:
    return bytes([tag, len(value)]) + value


def parse_time(s: str) -> float:
    try:
        return float(s)
    except ValueError:
        pass
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def parse_hex(s: str) -> bytes:
    s = s.replace(" ", "").replace(":", "")
    if s.lower().startswith("0x"):
        s = s[2:]
    return bytes.fromhex(s)


# ---------------------------------------------------------------------------
# Derivation debug
# ---------------------------------------------------------------------------


def debug_otp(
    kind: str,
    secret: bytes,
    moving_factor: int,
    algorithm: str,
    digits: int,
    name: str,
    response: bytes | None,
) -> None:
    print("=" * 72)
    print(f"{kind.upper()} Code Derivation Debug")
    print("=" * 72)

    # -- Inputs -------------------------------------------------------------
    print("\n--- Inputs ---\n")
    print(f"  Secret ({len(secret)} bytes): {_hex(secret) or '(empty)'}")
    print(f"  Algorithm:     HMAC-{algorithm.upper()}")
    print(f"  Digits:        {digits}")
    print(f"  Moving factor: {moving_factor} (0x{moving_factor:X})")

    message = moving_factor.to_bytes(8, "big")
    print(f"  HMAC message:  {_hex_spaced(message)}")

    # -- HMAC ---------------------------------------------------------------
    print("\n--- HMAC ---\n")
    mac = _hmac(algorithm, secret, message)
    for i in range(0, len(mac), 16):
        label = "  MAC:" if i == 0 else "      "
        print(f"{label} {_hex_spaced(mac[i : i + 16])}")

    # -- Dynamic truncation -------------------------------------------------
    print("\n--- Dynamic Truncation ---\n")
    offset = mac[-1] & 0x0F
    window = mac[offset : offset + 4]
    value = int.from_bytes(window, "big") & 0x7FFFFFFF
    print(f"  Last byte:     {mac[-1]:02X} -> offset {offset}")
    print(f"  Bytes [{offset}..{offset + 3}]:  {_hex_spaced(window)}")
    print(f"  31-bit value:  {value} (0x{value:08X})")
    code = str(value % 10**digits).zfill(digits)
    print(f"  mod 10^{digits}:      {code}")

    # -- Card command -------------------------------------------------------
    print("\n--- CALCULATE APDU ---\n")
    challenge = b"" if kind == "hotp" else message
    data = _tlv(0x71, name.encode("utf-8")) + _tlv(0x74, challenge)
    apdu = bytes([0x00, 0xA2, 0x00, 0x01, len(data)]) + data
    print(f"  {_hex_spaced(apdu)}")
    if kind == "hotp":
        print("  (HOTP: empty challenge, the card uses its own counter)")
    print(f"  Expected response: 76 05 {digits:02X} {_hex_spaced(value.to_bytes(4, 'big'))} 90 00")

    key_header = bytes([_TYPE_IDS[kind] | _ALGORITHM_IDS[algorithm], digits])
    print(f"  PUT KEY header:    {_hex_spaced(key_header)}")

    # -- Optional response check -------------------------------------------
    if response is not None:
        print("\n--- Card Response Check ---\n")
        if response[:1] == bytes([digits]) and len(response) > 1:
            response = response[1:]
        if len(response) == 4:
            got = int.from_bytes(response, "big") & 0x7FFFFFFF
            match = got % 10**digits == value % 10**digits
        else:
            match = response == mac
        print(f"  Card:     {_hex_spaced(response)}")
        print(f"  Match:    {'YES' if match else 'NO'}")
        if not match:
            sys.exit(1)

    print(f"\n  CODE: {code}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="HOTP/TOTP code derivation debugger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("kind", choices=["hotp", "totp"], help="OTP type")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--secret", default=None, help="Secret as hex")
    group.add_argument("--text", default=None, help="Secret as UTF-8 text")
    group.add_argument("--b32", default=None, help="Secret as base32")
    parser.add_argument("--counter", type=int, default=None, help="HOTP counter")
    parser.add_argument(
        "--time", default=None,
        help="TOTP time: Unix seconds or ISO 8601 (default: now)",
    )
    parser.add_argument("--period", type=int, default=30, help="TOTP period (default 30)")
    parser.add_argument(
        "--algorithm", choices=sorted(_HASHES), default="sha256",
        help="HMAC hash (default sha256)",
    )
    parser.add_argument("--digits", type=int, default=6, help="Code length (default 6)")
    parser.add_argument("--name", default="debug", help="Credential name for the APDU")
    parser.add_argument(
        "--response", default=None,
        help="Card response to check: truncated (4/5 bytes) or full HMAC, hex",
    )

    args = parser.parse_args()

    if args.secret is not None:
        secret = parse_hex(args.secret)
    elif args.text is not None:
        secret = args.text.encode("utf-8")
    elif args.b32 is not None:
        s = args.b32.replace(" ", "").upper()
        secret = base64.b32decode(s + "=" * (-len(s) % 8))
    else:
        secret = b""

    if not 1 <= args.digits <= 10:
        parser.error("--digits must be 1..10")

    if args.kind == "hotp":
        if args.counter is None:
            parser.error("hotp needs --counter")
        moving_factor = args.counter
    else:
        now = datetime.now(timezone.utc).timestamp()
        ts = parse_time(args.time) if args.time else now
        moving_factor = int(ts // args.period)

    response = parse_hex(args.response) if args.response else None
    debug_otp(
        args.kind, secret, moving_factor, args.algorithm,
        args.digits, args.name, response,
    )


if __name__ == "__main__":
    main()
