"""
exceptions.py - Errors raised by the rotating Connect Four engine

Every error leaves the game exactly as it was before the failing call.
"""


class Connect4Error(Exception):
    """Base class for every engine error."""


class InvalidMoveError(Connect4Error, ValueError):
    """Column out of range, column full, or a token that is not a colour."""


class TerminalStateError(Connect4Error):
    """A move or rotation was attempted after the game ended."""


class ConstructionError(Connect4Error, ValueError):
    """Board dimensions below 1."""
