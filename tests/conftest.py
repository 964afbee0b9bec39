import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("LOG_TO_STDOUT", "0")
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
