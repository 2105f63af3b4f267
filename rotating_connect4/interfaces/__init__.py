"""
rotating_connect4.interfaces - User interfaces for rotating Connect Four

This package contains the command-line interface used to play games
against another person or a random opponent.
"""

# Don't import anything here to avoid circular imports
__all__ = []
