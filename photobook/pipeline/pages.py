from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import DEFAULT_COVER_THEME


class PageType(str, Enum):
    TITLE = "title"
    PHOTO = "photo"
    MILESTONE = "milestone"
    BLANK = "blank"


@dataclass(frozen=True)
class Page:
    id: str
    type: PageType
    source_record_id: Optional[str] = None
    source_milestone_id: Optional[str] = None
    media_ref: Optional[str] = None
    caption: Optional[str] = None
    date: Optional[str] = None
    title: Optional[str] = None

    def __post_init__(self) -> None:
        if self.type == PageType.TITLE and self.source_record_id is not None:
            raise ValueError("Title pages cannot reference a source record")

    @property
    def is_title(self) -> bool:
        return self.type == PageType.TITLE


@dataclass(frozen=True)
class Cover:
    title: str
    photo_ref: Optional[str] = None
    subject_name: Optional[str] = None
    date_range_label: Optional[str] = None
    color_theme_id: str = DEFAULT_COVER_THEME


def new_page_id(page_type: PageType | str) -> str:
    kind = PageType(page_type).value
    return f"page-{kind}-{uuid.uuid4().hex[:12]}"
