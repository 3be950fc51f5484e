from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, FrozenSet, List, Optional, Tuple

from ..config import MONTH_NAMES


REQUIRED_RECORD_KEYS = {"id", "type", "date"}
REQUIRED_MILESTONE_KEYS = {"id", "event_date"}


class RecordType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
    TEXT = "text"
    VOICE = "voice"


@dataclass(frozen=True)
class Record:
    id: str
    type: RecordType
    date: str
    media_refs: Tuple[str, ...] = ()
    caption: Optional[str] = None
    tags: FrozenSet[str] = frozenset()
    derived_labels: FrozenSet[str] = frozenset()
    linked_milestone_id: Optional[str] = None

    @property
    def has_media(self) -> bool:
        return len(self.media_refs) > 0


@dataclass(frozen=True)
class MilestoneRecord:
    id: str
    event_date: str
    is_completed: bool = False
    celebration_date: Optional[str] = None
    custom_title: Optional[str] = None

    @property
    def effective_date(self) -> str:
        return self.celebration_date or self.event_date


@dataclass(frozen=True)
class Profile:
    display_name: Optional[str] = None
    birth_date: Optional[str] = None


@dataclass(frozen=True)
class Period:
    year: int
    month: int  # 1-12

    def __post_init__(self) -> None:
        if not 1 <= int(self.month) <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def label(self) -> str:
        return f"{self.month_name} {self.year}"

    @classmethod
    def current(cls, today: Optional[date] = None) -> "Period":
        today = today or date.today()
        return cls(year=today.year, month=today.month)


def parse_period(value: str) -> Period:
    text = (value or "").strip()
    parts = text.split("-")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Period must look like YYYY-MM: {value!r}")
    return Period(year=int(parts[0]), month=int(parts[1]))


def parse_calendar_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 date or timestamp; ``None`` when it cannot be read.

    Aware timestamps are converted to naive UTC so everything compares.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def date_sort_key(value: Optional[str]) -> tuple:
    # Readable dates first in time order, anything else after them by raw text
    parsed = parse_calendar_date(value)
    if parsed is None:
        return (1, datetime.min, str(value or ""))
    return (0, parsed, "")


def format_long_date(value: Optional[str]) -> str:
    """Render ``2024-06-15`` as ``15 June 2024``; unreadable text comes back as-is."""
    parsed = parse_calendar_date(value)
    if parsed is None:
        return str(value or "")
    return f"{parsed.day} {MONTH_NAMES[parsed.month - 1]} {parsed.year}"


def _string_set(raw: Any) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        raw = [raw]
    return frozenset(str(item) for item in raw if str(item).strip())


def _optional_str(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    return str(raw)


def record_from_dict(row: dict) -> Record:
    missing = REQUIRED_RECORD_KEYS - set(row)
    if missing:
        raise ValueError(f"Record missing keys: {', '.join(sorted(missing))}")
    try:
        record_type = RecordType(str(row["type"]).strip().lower())
    except ValueError:
        raise ValueError(f"Unsupported record type: {row['type']}") from None
    media = row.get("media_refs") or []
    if isinstance(media, str):
        media = [media]
    return Record(
        id=str(row["id"]),
        type=record_type,
        date=str(row["date"]),
        media_refs=tuple(str(ref) for ref in media if ref),
        caption=_optional_str(row.get("caption")),
        tags=_string_set(row.get("tags")),
        derived_labels=_string_set(row.get("derived_labels")),
        linked_milestone_id=_optional_str(row.get("linked_milestone_id")),
    )


def milestone_from_dict(row: dict) -> MilestoneRecord:
    missing = REQUIRED_MILESTONE_KEYS - set(row)
    if missing:
        raise ValueError(f"Milestone missing keys: {', '.join(sorted(missing))}")
    return MilestoneRecord(
        id=str(row["id"]),
        event_date=str(row["event_date"]),
        is_completed=bool(row.get("is_completed", False)),
        celebration_date=_optional_str(row.get("celebration_date")),
        custom_title=_optional_str(row.get("custom_title")),
    )


def _load_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"JSON not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            return json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def _load_rows(path: Path) -> List[dict]:
    rows = _load_json(path)
    if not isinstance(rows, list):
        raise ValueError(f"{path} must contain a JSON list")
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(f"{path} item {index} is not an object")
    return rows


def load_records(path: Path) -> List[Record]:
    return [record_from_dict(row) for row in _load_rows(path)]


def load_milestones(path: Path) -> List[MilestoneRecord]:
    return [milestone_from_dict(row) for row in _load_rows(path)]


def load_profile(path: Path) -> Profile:
    data = _load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return Profile(
        display_name=_optional_str(data.get("display_name")),
        birth_date=_optional_str(data.get("birth_date")),
    )
