"""OATH TLV records: building command payloads and parsing responses.

Framing is plain simple-TLV (see core.smartcard.tlv); this module knows
which tags the applet speaks and what their values mean. Any tag outside
TAG_NAMES is a protocol error.
"""

from __future__ import annotations

from oathexp.core.oath import otp, tags
from oathexp.core.oath.types import (
    AppletInfo,
    Credential,
    pack_type_algorithm,
    unpack_type_algorithm,
)
from oathexp.core.smartcard import ProtocolError
from oathexp.core.smartcard.tlv import TLV
from oathexp.core.smartcard.tlv import parse as parse_tlv

TRUNCATED_LENGTH = 4


def decode(data: bytes) -> list[TLV]:
    """Parse *data* into records, rejecting unknown tags."""
    nodes = parse_tlv(data)
    for node in nodes:
        if node.tag not in tags.TAG_NAMES:
            raise ProtocolError(f"unexpected tag {node.tag:02X} in response")
    return nodes


def _decode_name(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"credential name is not UTF-8: {raw.hex().upper()}") from exc


# -- builders --


def name_tlv(name: str) -> TLV:
    return TLV(tags.NAME, name.encode("utf-8"))


def key_tlv(oath_type, algorithm, digits: int, secret: bytes) -> TLV:
    """KEY: type/algorithm byte | digits | secret."""
    header = bytes([pack_type_algorithm(oath_type, algorithm), digits])
    return TLV(tags.KEY, header + otp.shorten_key(secret, algorithm))


def challenge_tlv(moving_factor: int | None) -> TLV:
    """CHALLENGE: 8-byte big-endian moving factor, empty for a card-held counter."""
    if moving_factor is None:
        return TLV(tags.CHALLENGE)
    return TLV(tags.CHALLENGE, moving_factor.to_bytes(8, "big"))


# -- parsers --


def parse_name_list_entry(value: bytes) -> Credential:
    if not value:
        raise ProtocolError("empty name list entry")
    oath_type, algorithm = unpack_type_algorithm(value[0])
    return Credential(name=_decode_name(value[1:]), type=oath_type, algorithm=algorithm)


def _digits(value: bytes) -> int:
    digits = value[0]
    if not 1 <= digits <= otp.MAX_DIGITS:
        raise ProtocolError(f"invalid digit count {digits}")
    return digits


def parse_code(node: TLV) -> str | None:
    """Render a result record as a code; None for NO_RESPONSE."""
    if node.tag == tags.NO_RESPONSE:
        return None
    if node.tag == tags.TRUNCATED_RESPONSE:
        if len(node.value) != 1 + TRUNCATED_LENGTH:
            raise ProtocolError(
                f"truncated response must be 5 bytes, got {len(node.value)}"
            )
        value = int.from_bytes(node.value[1:], "big") & 0x7FFFFFFF
        return otp.format_code(value, _digits(node.value))
    if node.tag == tags.RESPONSE:
        if len(node.value) < 1 + 20:
            raise ProtocolError(f"full response too short: {len(node.value)} bytes")
        return otp.format_code(otp.truncate(node.value[1:]), _digits(node.value))
    raise ProtocolError(f"expected a code record, got tag {node.tag:02X}")


def parse_select(data: bytes) -> AppletInfo:
    """SELECT response: VERSION, NAME (device salt), optional CHALLENGE."""
    info = AppletInfo()
    for node in decode(data):
        if node.tag == tags.VERSION:
            info.version = node.value
        elif node.tag == tags.NAME:
            info.salt = node.value
        elif node.tag == tags.CHALLENGE:
            info.locked = True
    return info


def parse_list(data: bytes) -> dict[str, Credential]:
    """LIST response: zero or more NAME_LIST records, in card order."""
    credentials: dict[str, Credential] = {}
    for node in decode(data):
        if node.tag != tags.NAME_LIST:
            raise ProtocolError(f"unexpected tag {node.tag:02X} in LIST response")
        cred = parse_name_list_entry(node.value)
        credentials[cred.name] = cred
    return credentials


def parse_calculate(data: bytes) -> str:
    nodes = decode(data)
    if len(nodes) != 1:
        raise ProtocolError(f"CALCULATE returned {len(nodes)} records, expected 1")
    code = parse_code(nodes[0])
    if code is None:
        raise ProtocolError("CALCULATE returned no response")
    return code


def parse_calculate_all(data: bytes) -> dict[str, str | None]:
    """CALCULATE ALL response: NAME followed by one result record, repeated."""
    nodes = decode(data)
    codes: dict[str, str | None] = {}
    it = iter(nodes)
    for node in it:
        if node.tag != tags.NAME:
            raise ProtocolError(f"expected name, got tag {node.tag:02X}")
        name = _decode_name(node.value)
        result = next(it, None)
        if result is None:
            raise ProtocolError(f"no result record for '{name}'")
        codes[name] = parse_code(result)
    return codes
