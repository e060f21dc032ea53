# filename : scripts.py
# created  : 06/23/2025


import logging
import sys

import click

from oathexp.core.smartcard.logging import configure

lg = logging.getLogger(__name__)


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw APDUs).")
@click.option(
    "-r",
    "--reader",
    envvar="OATHEXP_READER",
    default=None,
    help="Use only readers whose name contains this text.",
)
@click.option(
    "-f",
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Run commands from a scenario file.",
)
@click.option(
    "-i",
    "--interactive",
    is_flag=True,
    help="Interactive REPL.",
)
def oathexp(verbose, reader, file, interactive):
    """Explore the OATH applet of a smartcard.

    Without -f or -i, selects the applet and shows every credential with
    its current code.
    """
    configure(verbose)

    if file and interactive:
        raise click.UsageError("-f and -i are mutually exclusive")

    from oathexp.app.main import main
    if not main(file=file, interactive=interactive, reader=reader):
        sys.exit(1)
