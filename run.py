#!/usr/bin/env python3
"""
run.py - Main entry point for rotating Connect Four

Examples:
    python run.py play --rotations 4
    python run.py play --ai random --width 7 --height 7
    python run.py position "......./......./......./......./XXX..../OOO...."
    python run.py benchmark --games 500
"""

import os
import sys

# Add the project root to Python path to ensure imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rotating_connect4.interfaces.cli import main


if __name__ == "__main__":
    sys.exit(main())
