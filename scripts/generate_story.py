#!/usr/bin/env python3
"""
Generate the imports risers & decliners story from a CSV file.

Usage:
    python scripts/generate_story.py --data data/imports.csv --output output/story.html
    python scripts/generate_story.py --variant reveal --metric value
    python scripts/generate_story.py --snapshots output/snapshots -v

See `importstory.cli` for all options.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from importstory.cli import main

if __name__ == "__main__":
    sys.exit(main())
