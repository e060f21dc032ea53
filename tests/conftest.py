import pytest

from simulator import SimulatedOathCard
from vectors import REFERENCE_CODES, REFERENCE_NAMES

from oathexp.core.base import Agent
from oathexp.core.oath import OathApplet


@pytest.fixture
def card():
    return SimulatedOathCard()


@pytest.fixture
def agent(card):
    agent = Agent(card)
    agent.connect()
    return agent


@pytest.fixture
def applet(agent):
    applet = OathApplet(agent.transmit)
    applet.select()
    return applet


@pytest.fixture
def reference_applet(applet):
    """Applet holding foo/bar/qux with the reference secrets."""
    for secret in REFERENCE_CODES:
        applet.put(REFERENCE_NAMES[secret], secret)
    return applet
