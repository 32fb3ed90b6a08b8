"""Herald: streaming conversation-protocol interpreter.

Consumes the server-sent event stream of a single agent turn and
reconstructs an ordered, typed content model while the turn is still
in progress.
"""

__version__ = "0.1.0"
