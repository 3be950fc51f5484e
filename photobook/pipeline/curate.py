"""Score-driven selection of the photos that make up a monthly book.

The pass is deliberately simple and deterministic:

1. keep photo records with media whose date falls in the requested month
2. score each one (milestone +50, caption +30, tags or labels +10)
3. order by score descending, then by date ascending (stable for full ties)
4. walk that order once, accepting at most ``MAX_PHOTOS_PER_DAY`` records per
   exact date until ``MAX_PHOTOS_PER_BOOK`` are taken
5. put the accepted records back into date order and turn them into pages
"""
from __future__ import annotations

from typing import Dict, Iterable, List

from ..config import (
    MAX_PHOTOS_PER_BOOK,
    MAX_PHOTOS_PER_DAY,
    SCORE_CAPTION,
    SCORE_MILESTONE,
    SCORE_TAGS,
)
from .pages import Page, PageType
from .records import Period, Record, RecordType, date_sort_key


def is_eligible(record: Record, period: Period) -> bool:
    if record.type != RecordType.PHOTO or not record.has_media:
        return False
    return record.date.startswith(period.key)


def score_record(record: Record) -> int:
    score = 0
    if record.linked_milestone_id:
        score += SCORE_MILESTONE
    if record.caption and record.caption.strip():
        score += SCORE_CAPTION
    if record.tags or record.derived_labels:
        score += SCORE_TAGS
    return score


def rank_records(records: Iterable[Record]) -> List[Record]:
    # sorted() is stable, so records equal on score and date keep input order
    return sorted(records, key=lambda r: (-score_record(r), date_sort_key(r.date)))


def select_diverse(
    ranked: Iterable[Record],
    max_total: int = MAX_PHOTOS_PER_BOOK,
    max_per_day: int = MAX_PHOTOS_PER_DAY,
) -> List[Record]:
    selected: List[Record] = []
    per_day: Dict[str, int] = {}
    for record in ranked:
        if len(selected) >= max_total:
            break
        count = per_day.get(record.date, 0)
        if count >= max_per_day:
            continue
        selected.append(record)
        per_day[record.date] = count + 1
    return selected


def page_from_record(record: Record) -> Page:
    page_type = PageType.MILESTONE if record.linked_milestone_id else PageType.PHOTO
    return Page(
        id=f"page-curated-{record.id}",
        type=page_type,
        source_record_id=record.id,
        source_milestone_id=record.linked_milestone_id,
        media_ref=record.media_refs[0],
        caption=record.caption,
        date=record.date,
    )


def curate(records: Iterable[Record], period: Period) -> List[Page]:
    eligible = [record for record in records if is_eligible(record, period)]
    if not eligible:
        return []
    selected = select_diverse(rank_records(eligible))
    selected.sort(key=lambda r: date_sort_key(r.date))
    return [page_from_record(record) for record in selected]
