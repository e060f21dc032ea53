"""OATH applet TLV tags."""

NAME = 0x71
NAME_LIST = 0x72
KEY = 0x73
CHALLENGE = 0x74
RESPONSE = 0x75
TRUNCATED_RESPONSE = 0x76
NO_RESPONSE = 0x77
VERSION = 0x79
ALGORITHM = 0x7B

TAG_NAMES: dict[int, str] = {
    NAME: "Name",
    NAME_LIST: "Name List Entry",
    KEY: "Key",
    CHALLENGE: "Challenge",
    RESPONSE: "Response",
    TRUNCATED_RESPONSE: "Truncated Response",
    NO_RESPONSE: "No Response",
    VERSION: "Version",
    ALGORITHM: "Algorithm",
}
