from oathexp.core.base.agent import Agent, Transport
from oathexp.core.base.iso7816 import ISO7816
from oathexp.core.base.terminal import Message, Result, Terminal, handles

__all__ = ["Agent", "ISO7816", "Message", "Result", "Terminal", "Transport", "handles"]
