from __future__ import annotations

from pathlib import Path
from typing import Tuple


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "photobook.db"

# Monthly curation
MAX_PHOTOS_PER_BOOK = 20
MAX_PHOTOS_PER_DAY = 3

SCORE_MILESTONE = 50
SCORE_CAPTION = 30
SCORE_TAGS = 10

# A photo this many days either side of a milestone illustrates it
MILESTONE_MATCH_DAYS = 3

DEFAULT_LAYOUT = "classic"
DEFAULT_COVER_THEME = "coral"
DEFAULT_SUBJECT_NAME = "Baby"

PDF_MIME_TYPE = "application/pdf"

MONTH_NAMES: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "photobook.db"
