#!/usr/bin/env python3
"""
BASH QUEST Launcher
====================
Run this script to start the game.
"""

from bash_quest.main import main

if __name__ == "__main__":
    main()
