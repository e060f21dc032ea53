"""Human-readable OATH session formatting."""

from __future__ import annotations

from oathexp.app.oath.cardinfo import OathCardInfo
from oathexp.core.oath import AppletInfo, Credential


def _hex(data: bytes) -> str:
    return data.hex(" ").upper() if data else ""


def format_applet(info: AppletInfo) -> str:
    lines = [
        f"  Version:  {info.version_string or '(unknown)'}",
        f"  Salt:     {_hex(info.salt) or '(none)'}",
    ]
    if info.locked:
        lines.append("  Locked:   access code required")
    return "\n".join(lines)


def format_credentials(
    credentials: dict[str, Credential],
    codes: dict[str, str | None] | None = None,
) -> str:
    """One line per credential: name, type, algorithm and code if known.

    Names present only in *codes* (no LIST data) are shown without type.
    """
    codes = codes or {}
    names = list(credentials) + [n for n in codes if n not in credentials]
    if not names:
        return "  (no credentials)"
    width = max(len(n) for n in names)
    lines = []
    for name in names:
        cred = credentials.get(name)
        kind = f"{cred.type.name:4s} {cred.algorithm.name:6s}" if cred else " " * 11
        if name in codes:
            code = codes[name] if codes[name] is not None else "(calculate)"
        else:
            code = ""
        lines.append(f"  {name:{width}s}  {kind}  {code}".rstrip())
    return "\n".join(lines)


def format_card_info(info: OathCardInfo) -> str:
    sections = []
    if info.atr:
        sections.append(f"ATR: {_hex(info.atr)}")
    if info.applet is not None:
        sections.append("--- OATH applet ---\n" + format_applet(info.applet))
    sections.append("--- Credentials ---\n" + format_credentials(info.credentials, info.codes))
    return "\n".join(sections)
