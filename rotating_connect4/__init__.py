"""
rotating_connect4 - Connect Four with whole-board rotations

This package provides the game engine (board, gravity drops, win detection,
quarter-turn rotation with re-settling), a gymnasium environment built on
it, and a command-line interface for playing.
"""

# Version number
__version__ = '0.2.0'
