#!/usr/bin/env python3
"""
Start PhotoPost from a source checkout without installing it.

  python src/run_gui.py                      # gallery window
  python src/run_gui.py --config my.json     # with a settings file
  python src/run_gui.py render -i a.jpg -o b.jpg --effect sepia
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from photopost.cli import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
