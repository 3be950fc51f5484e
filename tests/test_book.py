from __future__ import annotations

import unittest

from photobook.pipeline.book import Book, build_default_pages
from photobook.pipeline.pages import Cover, Page, PageType
from photobook.pipeline.records import MilestoneRecord, Period, Profile, Record, RecordType


def _photo(record_id: str, date: str, media: bool = True, caption: str | None = None) -> Record:
    return Record(
        id=record_id,
        type=RecordType.PHOTO,
        date=date,
        media_refs=(f"{record_id}.jpg",) if media else (),
        caption=caption,
    )


class EditingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.book = Book(cover=Cover(title="Mia's First Year"))
        self.book.pages = [
            Page(id="title", type=PageType.TITLE, title="Mia's First Year"),
            Page(id="p1", type=PageType.PHOTO, media_ref="1.jpg"),
            Page(id="p2", type=PageType.PHOTO, media_ref="2.jpg"),
            Page(id="p3", type=PageType.MILESTONE, media_ref="3.jpg"),
        ]

    def ids(self) -> list[str]:
        return [page.id for page in self.book.pages]

    def test_reorder_moves_page(self) -> None:
        self.book.reorder(3, 1)
        self.assertEqual(self.ids(), ["title", "p3", "p1", "p2"])

    def test_reorder_same_index_is_unchanged(self) -> None:
        before = list(self.book.pages)
        self.book.reorder(2, 2)
        self.assertEqual(self.book.pages, before)

    def test_reorder_never_moves_title_page(self) -> None:
        self.book.reorder(0, 2)
        self.book.reorder(2, 0)
        self.assertEqual(self.ids(), ["title", "p1", "p2", "p3"])

    def test_reorder_out_of_range_is_ignored(self) -> None:
        self.book.reorder(1, 9)
        self.book.reorder(-1, 2)
        self.assertEqual(self.ids(), ["title", "p1", "p2", "p3"])

    def test_remove_missing_page_is_safe(self) -> None:
        self.book.remove("does-not-exist")
        self.assertEqual(self.ids(), ["title", "p1", "p2", "p3"])

    def test_remove_deletes_page(self) -> None:
        self.book.remove("p2")
        self.assertEqual(self.ids(), ["title", "p1", "p3"])

    def test_remove_keeps_title_page(self) -> None:
        self.book.remove("title")
        self.assertEqual(self.ids()[0], "title")

    def test_add_appends_with_fresh_id(self) -> None:
        first = self.book.add(PageType.PHOTO, media_ref="new.jpg", caption="Added")
        second = self.book.add("blank")
        self.assertIsNotNone(first)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(self.book.pages[-2:], [first, second])
        self.assertTrue(first.id.startswith("page-photo-"))

    def test_add_refuses_title_pages(self) -> None:
        self.assertIsNone(self.book.add(PageType.TITLE, title="Second title"))
        self.assertEqual(len(self.book.pages), 4)

    def test_set_caption(self) -> None:
        long_caption = "x" * 5000
        self.book.set_caption("p1", long_caption)
        self.book.set_caption("missing", "ignored")
        self.assertEqual(self.book.get_page("p1").caption, long_caption)
        self.assertEqual(self.ids(), ["title", "p1", "p2", "p3"])

    def test_set_cover_merges_fields(self) -> None:
        self.book.set_cover(color_theme_id="navy", date_range_label="2024")
        self.assertEqual(self.book.cover.title, "Mia's First Year")
        self.assertEqual(self.book.cover.color_theme_id, "navy")
        self.assertEqual(self.book.cover.date_range_label, "2024")

    def test_set_cover_ignores_unknown_field(self) -> None:
        with self.assertLogs("photobook.pipeline.book", level="WARNING"):
            cover = self.book.set_cover(colour="red", color_theme_id="sage")
        self.assertEqual(cover.color_theme_id, "sage")
        self.assertEqual(cover.title, "Mia's First Year")
        self.assertFalse(hasattr(cover, "colour"))

    def test_clear_keeps_cover(self) -> None:
        self.book.set_cover(color_theme_id="gold")
        self.book.clear()
        self.assertEqual(self.book.pages, [])
        self.assertEqual(self.book.cover.color_theme_id, "gold")


class RegenerateTests(unittest.TestCase):
    def test_default_book_pairs_milestones_then_photos(self) -> None:
        records = [
            _photo("late", "2024-03-20"),
            _photo("steps", "2024-03-02", caption="Look at her go"),
            _photo("early", "2024-01-05"),
            _photo("no-media", "2024-02-01", media=False),
            Record(id="note", type=RecordType.TEXT, date="2024-03-01"),
        ]
        milestones = [
            MilestoneRecord(id="m-steps", event_date="2024-03-01", is_completed=True, custom_title="First steps"),
            MilestoneRecord(id="m-open", event_date="2024-03-19", is_completed=False),
        ]
        profile = Profile(display_name="Mia", birth_date="2023-06-15")

        pages = build_default_pages(records, milestones, profile)

        self.assertEqual(pages[0].type, PageType.TITLE)
        self.assertEqual(pages[0].title, "Mia's First Year")
        self.assertEqual(pages[0].caption, "Born 15 June 2023")
        self.assertIsNone(pages[0].source_record_id)

        milestone_page = pages[1]
        self.assertEqual(milestone_page.type, PageType.MILESTONE)
        self.assertEqual(milestone_page.source_record_id, "steps")
        self.assertEqual(milestone_page.caption, "First steps")
        self.assertEqual(milestone_page.date, "2024-03-01")

        self.assertEqual([p.source_record_id for p in pages[2:]], ["early", "late"])

    def test_first_nearby_photo_without_media_skips_milestone(self) -> None:
        records = [_photo("blank-shot", "2024-05-01", media=False), _photo("good", "2024-05-02")]
        milestones = [MilestoneRecord(id="m", event_date="2024-05-02", is_completed=True)]
        pages = build_default_pages(records, milestones, Profile())
        self.assertEqual([p.type for p in pages], [PageType.TITLE, PageType.PHOTO])
        self.assertEqual(pages[0].title, "My First Year")
        self.assertIsNone(pages[0].caption)

    def test_celebration_date_takes_precedence(self) -> None:
        records = [_photo("party", "2024-08-10")]
        milestones = [
            MilestoneRecord(
                id="m",
                event_date="2024-07-01",
                celebration_date="2024-08-08",
                is_completed=True,
            )
        ]
        pages = build_default_pages(records, milestones, Profile())
        self.assertEqual(pages[1].type, PageType.MILESTONE)
        self.assertEqual(pages[1].date, "2024-08-08")
        self.assertEqual(pages[1].caption, None)

    def test_curate_for_period_sets_title_and_cover(self) -> None:
        book = Book.for_profile(Profile(display_name="Leo"))
        records = [_photo("a", "2024-07-03"), _photo("b", "2024-08-01")]
        pages = book.curate_for_period(records, Period(2024, 7), Profile(display_name="Leo"))
        self.assertEqual(pages[0].title, "Leo's July 2024")
        self.assertEqual(pages[0].caption, "A curated collection of 20 special moments")
        self.assertEqual([p.source_record_id for p in pages[1:]], ["a"])
        self.assertEqual(book.cover.title, "Leo's July 2024")
        self.assertEqual(book.cover.date_range_label, "July 2024")

    def test_curate_for_period_without_name(self) -> None:
        book = Book.for_profile(Profile())
        pages = book.curate_for_period([], Period(2024, 2), Profile())
        self.assertEqual(len(pages), 1)
        self.assertEqual(pages[0].title, "February 2024 Memories")


if __name__ == "__main__":
    unittest.main()
