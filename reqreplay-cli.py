#!/usr/bin/env python3
"""
reqreplay - Replay script generator for captured HTTP requests

This is a convenience wrapper that calls the packaged CLI.
The actual implementation is in src/reqreplay/cli.py

Usage:
    python reqreplay-cli.py generate session.json --index 0 --output replay.py
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from reqreplay.cli import main

if __name__ == '__main__':
    main()
