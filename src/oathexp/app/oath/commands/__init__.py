from oathexp.app.oath.commands import oath, state

COMMAND_MODULES = [oath, state]
