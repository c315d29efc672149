"""Configuration management for the grocery list service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Persistence
BASE_DIR: Final[Path] = Path(__file__).parent.parent
GROCERY_DATA_DIR: Final[Path] = Path(os.getenv('GROCERY_DATA_DIR', str(BASE_DIR / 'data')))
# Empty -> use the local JSON file store instead of a remote one
GROCERY_STORE_URL: Final[str] = os.getenv('GROCERY_STORE_URL', '').rstrip('/')
STORE_TIMEOUT_SECONDS: Final[float] = float(os.getenv('STORE_TIMEOUT_SECONDS', '10'))
REGENERATE_TIMEOUT_SECONDS: Final[float] = float(os.getenv('REGENERATE_TIMEOUT_SECONDS', '15'))

# Plain-text export
EXPORT_INCLUDE_HEADERS: Final[bool] = os.getenv('EXPORT_INCLUDE_HEADERS', 'False').lower() == 'true'
EXPORT_INCLUDE_QUANTITIES: Final[bool] = os.getenv('EXPORT_INCLUDE_QUANTITIES', 'False').lower() == 'true'
