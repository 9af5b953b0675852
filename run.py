#!/usr/bin/env python3
"""Run the chamber console.

Usage:
    python run.py                    # default database (CHAMBER_DB_PATH or chamber.duckdb)
    python run.py sitting.duckdb     # console over another database file
"""

import os
import subprocess
import sys
from pathlib import Path

console = Path(__file__).parent / "web" / "streamlit" / "app.py"
env = dict(os.environ)
if len(sys.argv) > 1:
    env["CHAMBER_DB_PATH"] = sys.argv[1]

subprocess.run([sys.executable, "-m", "streamlit", "run", str(console)], env=env, check=False)
