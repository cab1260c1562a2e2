import os
import sys
from pathlib import Path

# Ensure project root is on sys.path so `key_vault`, `experiments` and `main` import.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("MPLBACKEND", "Agg")
