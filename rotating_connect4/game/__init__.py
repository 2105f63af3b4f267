"""
rotating_connect4.game - Core game mechanics for rotating Connect Four

This package contains the board representation, the game engine and the
gymnasium environment.
"""

from rotating_connect4.game.board import Board
from rotating_connect4.game.rules import ConnectFourGame, ConnectFourEnv

__all__ = ['Board', 'ConnectFourGame', 'ConnectFourEnv']
