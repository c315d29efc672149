from pathlib import Path

from grocery.utilities.config import GROCERY_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(GROCERY_DATA_DIR).resolve()
GROCERY_LISTS_FILE = DATA_DIR / 'grocery_lists.json'

__all__ = ['DATA_DIR', 'GROCERY_LISTS_FILE']
