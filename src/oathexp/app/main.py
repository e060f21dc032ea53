# filename : main.py
# created  : 06/23/2025


import logging

from oathexp.app import oath

lg = logging.getLogger(__name__)


def main(
    file: str | None = None,
    interactive: bool = False,
    reader: str | None = None,
) -> bool:
    lg.debug("oathexp v1")
    return oath.session(file=file, interactive=interactive, reader=reader)
