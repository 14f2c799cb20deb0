"""config_loading.py"""
import sys
from pathlib import Path

from bindery.config import loader

sys.path.insert(0, str(Path(__file__).parent))
app = loader(Path(__file__).parent / "bindery.yaml")

if __name__ == "__main__":
    app.run()
