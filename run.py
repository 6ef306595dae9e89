#!/usr/bin/env python3
"""
WORD_RUNNER Launcher
=====================
Run this script to start the game.
"""

from word_runner.main import main

if __name__ == "__main__":
    main()
