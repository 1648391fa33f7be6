#!/usr/bin/env python3
"""Run the alias sync from a source checkout: ``python main.py [--apply]``."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from unifi_alias_sync.cli import main

if __name__ == "__main__":
    sys.exit(main())
