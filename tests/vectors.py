"""Reference timestamps and codes shared by the tests."""

from datetime import datetime, timezone

T1 = datetime(2013, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
T2 = datetime(2014, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
T3 = datetime(2015, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

# secret -> codes at T1, T2, T3 (TOTP, SHA256, 6 digits)
REFERENCE_CODES = {
    b"123": ("947217", "904502", "204573"),
    b"456": ("576740", "958008", "329294"),
    b"789": ("129094", "552048", "169757"),
}

REFERENCE_NAMES = {b"123": "foo", b"456": "bar", b"789": "qux"}
