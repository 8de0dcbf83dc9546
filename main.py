"""
Entry point for the quiz server.

Run with:
    python main.py
    quiz serve --port 3030
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from src.cli.main import serve

if __name__ == "__main__":
    serve(host=None, port=None)
