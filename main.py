"""Source-checkout launcher: `python main.py deploy --network testnet`.

Puts `src/` on the import path and hands over to `cli.__main__`, the same
entry point the installed `agxcl` script ends up in.
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"

if __name__ == "__main__":
    sys.path.insert(0, str(SRC_DIR))
    runpy.run_module("cli.__main__", run_name="__main__", alter_sys=True)
