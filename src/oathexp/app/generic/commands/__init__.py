from oathexp.app.generic.commands import session, state

COMMAND_MODULES = [session, state]
