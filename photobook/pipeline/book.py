from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..config import DEFAULT_LAYOUT, MAX_PHOTOS_PER_BOOK, MILESTONE_MATCH_DAYS
from .curate import curate
from .pages import Cover, Page, PageType, new_page_id
from .records import (
    MilestoneRecord,
    Period,
    Profile,
    Record,
    RecordType,
    date_sort_key,
    format_long_date,
    parse_calendar_date,
)


logger = logging.getLogger(__name__)

COVER_FIELDS = {f.name for f in dataclasses.fields(Cover)}


def default_title(profile: Profile) -> str:
    if profile.display_name:
        return f"{profile.display_name}'s First Year"
    return "My First Year"


def monthly_title(profile: Profile, period: Period) -> str:
    if profile.display_name:
        return f"{profile.display_name}'s {period.label}"
    return f"{period.label} Memories"


def default_cover(profile: Profile) -> Cover:
    return Cover(title=default_title(profile), subject_name=profile.display_name)


def _within_days(first: Optional[str], second: Optional[str], days: int) -> bool:
    a = parse_calendar_date(first)
    b = parse_calendar_date(second)
    if a is None or b is None:
        return False
    return abs((a - b).total_seconds()) / 86400 <= days


def build_default_pages(
    records: Iterable[Record],
    milestones: Iterable[MilestoneRecord],
    profile: Profile,
) -> List[Page]:
    """Title page, milestone pages, then every other photo in date order.

    Each completed milestone takes the first photo (by date) within
    ``MILESTONE_MATCH_DAYS`` of it; the page is only emitted when that photo
    has media. Nothing is scored or capped here.
    """
    pages: List[Page] = [
        Page(
            id=new_page_id(PageType.TITLE),
            type=PageType.TITLE,
            title=default_title(profile),
            caption=f"Born {format_long_date(profile.birth_date)}" if profile.birth_date else None,
        )
    ]

    photos = sorted(
        (r for r in records if r.type == RecordType.PHOTO),
        key=lambda r: date_sort_key(r.date),
    )

    for milestone in milestones:
        if not milestone.is_completed:
            continue
        nearby = next(
            (r for r in photos if _within_days(milestone.effective_date, r.date, MILESTONE_MATCH_DAYS)),
            None,
        )
        if nearby is None or not nearby.has_media:
            continue
        pages.append(
            Page(
                id=f"page-milestone-{milestone.id}",
                type=PageType.MILESTONE,
                source_record_id=nearby.id,
                source_milestone_id=milestone.id,
                media_ref=nearby.media_refs[0],
                caption=milestone.custom_title or nearby.caption,
                date=milestone.effective_date,
                title=milestone.custom_title,
            )
        )

    used = {page.source_record_id for page in pages if page.source_record_id}
    for record in photos:
        if record.id in used or not record.has_media:
            continue
        pages.append(
            Page(
                id=f"page-photo-{record.id}",
                type=PageType.PHOTO,
                source_record_id=record.id,
                media_ref=record.media_refs[0],
                caption=record.caption,
                date=record.date,
            )
        )
    return pages


def build_monthly_pages(records: Iterable[Record], period: Period, profile: Profile) -> List[Page]:
    title_page = Page(
        id=new_page_id(PageType.TITLE),
        type=PageType.TITLE,
        title=monthly_title(profile, period),
        caption=f"A curated collection of {MAX_PHOTOS_PER_BOOK} special moments",
    )
    return [title_page] + curate(records, period)


@dataclass
class Book:
    """The editable photo book: ordered pages plus a single cover.

    Every edit is a silent no-op when it names a page that is not there, so
    UI actions racing a regeneration never error. Title pages cannot be
    moved, removed or added through the editing calls.
    """

    cover: Cover
    pages: List[Page] = field(default_factory=list)
    layout_template_id: str = DEFAULT_LAYOUT
    generating: bool = False
    exporting: bool = False

    @classmethod
    def for_profile(cls, profile: Profile, layout_template_id: str = DEFAULT_LAYOUT) -> "Book":
        return cls(cover=default_cover(profile), layout_template_id=layout_template_id)

    def regenerate_default(
        self,
        records: Iterable[Record],
        milestones: Iterable[MilestoneRecord],
        profile: Profile,
    ) -> List[Page]:
        self.pages = build_default_pages(records, milestones, profile)
        return list(self.pages)

    def curate_for_period(self, records: Iterable[Record], period: Period, profile: Profile) -> List[Page]:
        self.pages = build_monthly_pages(records, period, profile)
        self.set_cover(title=monthly_title(profile, period), date_range_label=period.label)
        return list(self.pages)

    def index_of(self, page_id: str) -> Optional[int]:
        for index, page in enumerate(self.pages):
            if page.id == page_id:
                return index
        return None

    def get_page(self, page_id: str) -> Optional[Page]:
        index = self.index_of(page_id)
        return None if index is None else self.pages[index]

    def reorder(self, from_index: int, to_index: int) -> None:
        size = len(self.pages)
        if not (0 <= from_index < size and 0 <= to_index < size):
            logger.debug("Ignoring reorder %s -> %s on %s pages", from_index, to_index, size)
            return
        if from_index == to_index:
            return
        if self.pages[from_index].is_title or self.pages[to_index].is_title:
            logger.info("Refusing to move a title page (%s -> %s)", from_index, to_index)
            return
        page = self.pages.pop(from_index)
        self.pages.insert(to_index, page)

    def remove(self, page_id: str) -> None:
        index = self.index_of(page_id)
        if index is None:
            return
        if self.pages[index].is_title:
            logger.info("Refusing to remove title page %s", page_id)
            return
        del self.pages[index]

    def add(
        self,
        page_type: PageType | str,
        media_ref: Optional[str] = None,
        caption: Optional[str] = None,
        date: Optional[str] = None,
        title: Optional[str] = None,
        source_record_id: Optional[str] = None,
        source_milestone_id: Optional[str] = None,
    ) -> Optional[Page]:
        kind = PageType(page_type)
        if kind == PageType.TITLE:
            logger.info("Title pages are generated, not added")
            return None
        page = Page(
            id=new_page_id(kind),
            type=kind,
            source_record_id=source_record_id,
            source_milestone_id=source_milestone_id,
            media_ref=media_ref,
            caption=caption,
            date=date,
            title=title,
        )
        self.pages.append(page)
        return page

    def set_caption(self, page_id: str, caption: Optional[str]) -> None:
        index = self.index_of(page_id)
        if index is None:
            return
        self.pages[index] = dataclasses.replace(self.pages[index], caption=caption)

    def set_cover(self, **updates) -> Cover:
        unknown = set(updates) - COVER_FIELDS
        if unknown:
            logger.warning("Ignoring unknown cover fields: %s", ", ".join(sorted(unknown)))
        known = {key: value for key, value in updates.items() if key in COVER_FIELDS}
        self.cover = dataclasses.replace(self.cover, **known)
        return self.cover

    def set_layout(self, layout_template_id: str) -> None:
        self.layout_template_id = layout_template_id

    def clear(self) -> None:
        self.pages = []
