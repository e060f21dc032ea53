from types import SimpleNamespace

import pytest

from simulator import ATR, SimulatedOathCard
from vectors import T1

from oathexp.core.base import Agent, Message
from oathexp.core.generic import AtrMessage, RawAPDUMessage
from oathexp.core.oath import (
    CalculateAllMessage,
    CalculateMessage,
    DeleteMessage,
    ListMessage,
    NotSelected,
    OathTerminal,
    PutMessage,
    ResetMessage,
    SelectAppletMessage,
    SessionState,
    redact_command,
)
from oathexp.core.oath import records
from oathexp.core.oath.protocol import INS_PUT
from oathexp.core.oath.types import Algorithm, OathType
from oathexp.core.smartcard import APDU, TRACE, TransportError
from oathexp.core.smartcard.observer import LoggingCardObserver
from oathexp.core.smartcard.tlv import encode


@pytest.fixture
def terminal(card):
    terminal = OathTerminal(Agent(card))
    terminal.connect()
    return terminal


# -- agent --


def test_agent_reader_filter_is_case_insensitive(card):
    Agent(card, reader="oath").connect()
    assert card.connected


def test_agent_no_matching_reader(card):
    with pytest.raises(TransportError):
        Agent(card, reader="nope").connect()
    assert not card.connected


def test_agent_transmit_wraps_failures(card):
    agent = Agent(card)
    with pytest.raises(TransportError):
        agent.transmit(APDU(0x00, 0xA1, 0x00, 0x00))


# -- terminal --


def test_atr_message(terminal):
    assert terminal.send(AtrMessage()).atr == ATR


def test_message_round_trip(terminal):
    info = terminal.send(SelectAppletMessage()).info
    assert info.version_string == "4.3.5"
    assert terminal.send(PutMessage(name="foo", secret=b"123")).success
    assert terminal.send(PutMessage(name="ctr", secret=b"1", type=OathType.HOTP)).success
    assert list(terminal.send(ListMessage()).credentials) == ["foo", "ctr"]

    result = terminal.send(CalculateMessage(name="foo", timestamp=T1))
    assert (result.name, result.code) == ("foo", "947217")
    assert terminal.send(CalculateAllMessage(timestamp=T1)).codes == {
        "foo": "947217",
        "ctr": None,
    }

    assert terminal.send(DeleteMessage(name="ctr")).success
    assert terminal.send(ResetMessage()).success
    assert terminal.send(ListMessage()).credentials == {}


def test_unsupported_message(terminal):
    class Unknown(Message):
        pass

    with pytest.raises(ValueError):
        terminal.send(Unknown())


def test_supported_messages_include_generic(terminal):
    supported = terminal.supported_messages
    assert AtrMessage in supported
    assert RawAPDUMessage in supported
    assert CalculateAllMessage in supported


def test_disconnect_deselects(terminal, card):
    terminal.send(SelectAppletMessage())
    terminal.disconnect()
    assert terminal.applet.state is SessionState.UNSELECTED
    assert not card.connected


def test_raw_select_deselects(terminal):
    terminal.send(SelectAppletMessage())
    result = terminal.send(
        RawAPDUMessage(0x00, 0xA4, 0x04, 0x00, bytes.fromhex("A000000003000000"))
    )
    assert result.sw == 0x6A82
    with pytest.raises(NotSelected):
        terminal.send(ListMessage())


def test_raw_apdu_keeps_session(terminal):
    terminal.send(SelectAppletMessage())
    result = terminal.send(RawAPDUMessage(0x00, 0xA1, 0x00, 0x00))
    assert (result.data, result.sw) == (b"", 0x9000)
    assert terminal.send(ListMessage()).credentials == {}


def test_raw_apdu_transport_failure_deselects(terminal, card):
    terminal.send(SelectAppletMessage())
    card.fail = True
    with pytest.raises(TransportError):
        terminal.send(RawAPDUMessage(0x00, 0xA1, 0x00, 0x00))
    assert terminal.applet.state is SessionState.UNSELECTED


# -- key redaction --


PUT_COMMAND = bytes.fromhex("0001000017" "7103666F6F" "7310" "2206" "313233" + "00" * 11)


def test_redact_masks_secret():
    redacted = redact_command(PUT_COMMAND)
    assert redacted[:14] == PUT_COMMAND[:14]
    assert redacted[14:] == b"\xff" * 14


@pytest.mark.parametrize("command", ["00A10000", "00020000057103666F6F", "0001"])
def test_redact_leaves_other_commands(command):
    raw = bytes.fromhex(command)
    assert redact_command(raw) == raw


def test_redact_masks_secret_in_extended_apdu():
    secret = bytes(range(0x20, 0x40))
    key = records.key_tlv(OathType.TOTP, Algorithm.SHA256, 6, secret)
    data = encode(records.name_tlv("n" * 220), key)
    command = APDU(0x00, INS_PUT, 0x00, 0x00, data).to_bytes()
    assert command[4:7] == b"\x00" + len(data).to_bytes(2, "big")

    redacted = redact_command(command)
    assert secret not in redacted
    assert len(redacted) == len(command)
    assert redacted[-len(secret):] == b"\xff" * len(secret)
    assert redacted[:-len(secret)] == command[:-len(secret)]


def test_observer_logs_redacted_command(caplog):
    caplog.set_level(TRACE)
    observer = LoggingCardObserver(redact_command)
    observer.update(None, SimpleNamespace(type="command", args=[list(PUT_COMMAND)]))
    logged = " ".join(r.getMessage() for r in caplog.records)
    assert "31 32 33" not in logged
    assert "22 06 FF FF" in logged
