import os
from pathlib import Path

from .constants import DATA_DIR, DB_FILE_NAME

BASE_DIR = Path(__file__).resolve().parent

# SHOPBOOKS_DATA_DIR overrides the bundled data directory (tests, portable installs)
DATA_PATH = Path(os.environ.get("SHOPBOOKS_DATA_DIR") or (BASE_DIR / DATA_DIR))
DB_PATH = DATA_PATH / DB_FILE_NAME
