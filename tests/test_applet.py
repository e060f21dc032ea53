import pytest

from simulator import SimulatedOathCard
from vectors import REFERENCE_CODES, REFERENCE_NAMES, T1, T2, T3

from oathexp.core.base import Agent
from oathexp.core.oath import (
    Algorithm,
    NotSelected,
    OathApplet,
    OathType,
    SessionState,
    UnsupportedAlgorithm,
    otp,
)
from oathexp.core.smartcard import (
    NoSpace,
    NoSuchObject,
    StatusError,
    TransportError,
    WrongSyntax,
)

TIMESTAMPS = (T1, T2, T3)


def _applet(card: SimulatedOathCard) -> OathApplet:
    agent = Agent(card)
    agent.connect()
    applet = OathApplet(agent.transmit)
    applet.select()
    return applet


# -- session --


def test_select_reports_applet_info(agent):
    applet = OathApplet(agent.transmit)
    assert applet.state is SessionState.UNSELECTED
    info = applet.select()
    assert applet.state is SessionState.SELECTED
    assert info.version_string == "4.3.5"
    assert not info.locked
    assert applet.info is info


def test_select_locked_applet():
    applet = _applet(SimulatedOathCard(locked=True))
    assert applet.info.locked
    with pytest.raises(StatusError) as exc:
        applet.list()
    assert exc.value.sw == 0x6982


@pytest.mark.parametrize(
    "operation",
    [
        lambda a: a.list(),
        lambda a: a.put("foo", b"123"),
        lambda a: a.delete("foo"),
        lambda a: a.reset(),
        lambda a: a.calculate("foo", T1),
        lambda a: a.calculate("foo", T1, type=OathType.TOTP),
        lambda a: a.calculate_all(T1),
    ],
)
def test_operations_require_selection(agent, card, operation):
    applet = OathApplet(agent.transmit)
    with pytest.raises(NotSelected):
        operation(applet)
    assert card.commands == []


def test_deselect(applet):
    applet.deselect()
    assert applet.state is SessionState.UNSELECTED
    assert applet.info is None
    with pytest.raises(NotSelected):
        applet.list()


def test_transport_failure_invalidates_session(applet, card):
    card.fail = True
    with pytest.raises(TransportError):
        applet.list()
    assert applet.state is SessionState.UNSELECTED

    card.fail = False
    with pytest.raises(NotSelected):
        applet.list()
    applet.select()
    assert applet.list() == {}


# -- list / put --


def test_list_empty(applet):
    assert applet.list() == {}


def test_put_defaults(applet):
    assert applet.put("foo", b"123") is True
    cred = applet.list()["foo"]
    assert cred.type is OathType.TOTP
    assert cred.algorithm is Algorithm.SHA256


@pytest.mark.parametrize("oath_type", list(OathType))
@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_put_type_and_algorithm(applet, oath_type, algorithm):
    applet.put("foo", b"123", type=oath_type, algorithm=algorithm)
    cred = applet.list()["foo"]
    assert (cred.type, cred.algorithm) == (oath_type, algorithm)


def test_put_accepts_names(applet):
    applet.put("foo", b"123", type="hotp", algorithm="sha512")
    cred = applet.list()["foo"]
    assert (cred.type, cred.algorithm) == (OathType.HOTP, Algorithm.SHA512)


def test_put_unknown_algorithm(applet, card):
    with pytest.raises(UnsupportedAlgorithm):
        applet.put("foo", b"123", algorithm="md5")
    assert card.credentials == {}


@pytest.mark.parametrize("digits", [0, 5, 9, 10])
def test_put_digits_range(applet, card, digits):
    with pytest.raises(WrongSyntax) as exc:
        applet.put("foo", b"123", digits=digits)
    assert exc.value.sw is None
    assert card.credentials == {}


def test_put_overwrites(applet, card):
    applet.put("foo", b"123")
    applet.put("foo", b"456", type=OathType.HOTP)
    assert list(applet.list()) == ["foo"]
    assert applet.list()["foo"].type is OathType.HOTP


def test_put_sends_shortened_key(applet, card):
    applet.put("foo", b"123")
    assert card.credentials[b"foo"].key == b"123" + bytes(11)


def test_put_without_secret_stores_empty_key(applet, card):
    applet.put("foo")
    assert card.credentials[b"foo"].key == bytes(otp.HMAC_MINIMUM_KEY_SIZE)
    expected = otp.compute(bytes(otp.HMAC_MINIMUM_KEY_SIZE), otp.time_step(T1))
    assert applet.calculate("foo", T1) == expected


def test_put_name_rejected_by_card(applet):
    with pytest.raises(WrongSyntax):
        applet.put("x" * 65, b"123")


def test_put_name_too_long_to_encode(applet, card):
    card.commands.clear()
    with pytest.raises(WrongSyntax) as exc:
        applet.put("x" * 256, b"123")
    assert exc.value.sw is None
    assert card.commands == []


@pytest.mark.parametrize(
    "operation",
    [
        lambda a, name: a.delete(name),
        lambda a, name: a.calculate(name, T1, type=OathType.TOTP),
    ],
)
def test_name_too_long_rejected_locally(applet, card, operation):
    card.commands.clear()
    with pytest.raises(WrongSyntax):
        operation(applet, "\u00e9" * 128)
    assert card.commands == []


def test_put_store_full():
    applet = _applet(SimulatedOathCard(capacity=2))
    applet.put("a", b"1")
    applet.put("b", b"2")
    with pytest.raises(NoSpace):
        applet.put("c", b"3")
    assert list(applet.list()) == ["a", "b"]


def test_list_keeps_card_order(applet):
    for name in ("zeta", "alpha", "mu"):
        applet.put(name, b"123")
    assert list(applet.list()) == ["zeta", "alpha", "mu"]


def test_unicode_names(applet):
    applet.put("bjørn@example.org", b"123")
    assert "bjørn@example.org" in applet.list()


# -- calculate --


@pytest.mark.parametrize("secret, codes", REFERENCE_CODES.items())
def test_calculate_reference_codes(reference_applet, secret, codes):
    name = REFERENCE_NAMES[secret]
    for timestamp, expected in zip(TIMESTAMPS, codes):
        assert reference_applet.calculate(name, timestamp) == expected


@pytest.mark.parametrize("index", range(3))
def test_calculate_all_reference_codes(reference_applet, index):
    expected = {REFERENCE_NAMES[s]: codes[index] for s, codes in REFERENCE_CODES.items()}
    assert reference_applet.calculate_all(TIMESTAMPS[index]) == expected


def test_calculate_all_matches_calculate(reference_applet):
    codes = reference_applet.calculate_all(T2)
    for name, code in codes.items():
        assert reference_applet.calculate(name, T2) == code


def test_calculate_with_type_skips_list(reference_applet, card):
    card.commands.clear()
    assert reference_applet.calculate("foo", T1, type=OathType.TOTP) == "947217"
    assert card.commands_with_ins(0xA1) == []


def test_calculate_unix_seconds(reference_applet):
    assert reference_applet.calculate("foo", T1.timestamp()) == "947217"


def test_calculate_full_response(reference_applet, card):
    assert reference_applet.calculate("foo", T3, truncate=False) == "204573"
    assert card.commands_with_ins(0xA2)[-1][3] == 0x00


def test_calculate_is_repeatable(reference_applet):
    assert reference_applet.calculate("bar", T2) == reference_applet.calculate("bar", T2)


def test_calculate_eight_digits(applet):
    applet.put("foo", b"123", digits=8)
    code = applet.calculate("foo", T1)
    assert len(code) == 8
    assert code[-6:] == "947217"


def test_calculate_missing(applet):
    with pytest.raises(NoSuchObject):
        applet.calculate("nope", T1)


def test_calculate_missing_with_type(applet):
    with pytest.raises(NoSuchObject) as exc:
        applet.calculate("nope", T1, type=OathType.TOTP)
    assert exc.value.sw == 0x6A82


def test_hotp_uses_card_counter(applet, card):
    applet.put("counter", b"12345678901234567890", type=OathType.HOTP,
               algorithm=Algorithm.SHA1)
    assert applet.calculate("counter") == "755224"
    assert applet.calculate("counter") == "287082"
    assert card.credentials[b"counter"].counter == 2
    # the challenge record is sent empty
    assert card.commands_with_ins(0xA2)[-1].endswith(b"\x74\x00")


def test_calculate_all_hotp_needs_calculate(applet, card):
    applet.put("foo", b"123")
    applet.put("counter", b"123", type=OathType.HOTP)
    codes = applet.calculate_all(T1)
    assert codes == {"foo": "947217", "counter": None}
    assert card.credentials[b"counter"].counter == 0


def test_calculate_all_empty(applet):
    assert applet.calculate_all(T1) == {}


def test_calculate_all_defaults_to_now(applet, monkeypatch):
    monkeypatch.setattr("oathexp.core.oath.applet.time.time", lambda: T1.timestamp())
    applet.put("foo", b"123")
    assert applet.calculate_all() == {"foo": "947217"}
    assert applet.calculate("foo") == "947217"


# -- delete / reset --


def test_delete(reference_applet):
    assert reference_applet.delete("bar") is True
    assert list(reference_applet.list()) == ["foo", "qux"]


def test_delete_all(reference_applet):
    for name in list(reference_applet.list()):
        reference_applet.delete(name)
    assert reference_applet.list() == {}


def test_delete_missing(applet):
    with pytest.raises(NoSuchObject):
        applet.delete("nope")


def test_reset(reference_applet, card):
    assert reference_applet.reset() is True
    assert reference_applet.list() == {}
    assert card.commands_with_ins(0x04)[-1][:4] == bytes.fromhex("0004DEAD")


def test_reset_empty(applet):
    assert applet.reset() is True
    assert applet.list() == {}


# -- continuation --


@pytest.mark.parametrize("chunk", [16, 32, 100])
def test_chunked_responses(chunk):
    plain = _applet(SimulatedOathCard())
    chunked_card = SimulatedOathCard(chunk=chunk)
    chunked = _applet(chunked_card)
    for applet in (plain, chunked):
        for i in range(12):
            applet.put(f"credential-{i:02d}@example.org", bytes([i]) * 20)
    assert chunked.list() == plain.list()
    assert chunked.calculate_all(T2) == plain.calculate_all(T2)
    assert chunked_card.commands_with_ins(0xC0)
