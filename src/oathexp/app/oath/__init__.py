from oathexp.app.oath.runner import OathRunner
from oathexp.app.oath.session import session

__all__ = ["OathRunner", "session"]
