#!/usr/bin/env python
# run_benchmark.py - Reset the schema, generate stores and time the holiday queries

import sys
from pathlib import Path

# Make the package importable when run from a source checkout
root_dir = str(Path(__file__).parent)
if root_dir not in sys.path:
    sys.path.append(root_dir)

from holiday_bench.main import main

if __name__ == "__main__":
    sys.exit(main())
