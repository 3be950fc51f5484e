from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

import fitz

from photobook import config
from photobook.models import reset_engine
from photobook.pipeline.book import Book
from photobook.pipeline.pages import Cover, Page, PageType
from photobook.pipeline.render_html import render_book, render_sections
from photobook.pipeline.render_pdf import PdfConverter, html_to_pdf, split_sections


class PdfConversionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        config.set_out_dir(Path(self.temp_dir.name))
        reset_engine()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_html_to_pdf_writes_pages(self) -> None:
        out = Path(self.temp_dir.name) / "simple.pdf"
        html_to_pdf("<h1>Hello</h1><p>World</p>", out)
        self.assertTrue(out.exists())
        with fitz.open(out) as doc:
            self.assertGreaterEqual(doc.page_count, 1)
            self.assertIn("Hello", doc.load_page(0).get_text())

    def _photo_book(self, media_ref: str | None = None) -> Book:
        return Book(
            cover=Cover(title="Mia's First Year", subject_name="Mia"),
            pages=[
                Page(id="t", type=PageType.TITLE),
                Page(id="a", type=PageType.PHOTO, caption="AAA", media_ref=media_ref),
                Page(id="b", type=PageType.PHOTO, caption="BBB"),
                Page(id="blank", type=PageType.BLANK),
                Page(id="d", type=PageType.PHOTO, caption="DDD"),
            ],
        )

    def test_each_section_starts_a_new_page(self) -> None:
        book = self._photo_book()
        out = Path(self.temp_dir.name) / "book.pdf"
        html_to_pdf(render_book(book), out)
        self.assertEqual(len(split_sections(render_book(book))), len(render_sections(book)))
        with fitz.open(out) as doc:
            self.assertEqual(doc.page_count, len(render_sections(book)))
            texts = [page.get_text() for page in doc]
        self.assertIn("Mia", texts[0])
        self.assertIn("AAA", texts[1])
        self.assertNotIn("BBB", texts[1])
        self.assertIn("BBB", texts[2])
        self.assertEqual(texts[3].strip(), "")
        self.assertIn("DDD", texts[4])

    def _write_png(self) -> Path:
        path = Path(self.temp_dir.name) / "photos" / "img.png"
        path.parent.mkdir()
        pixmap = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 8, 8), 0)
        pixmap.clear_with(180)
        pixmap.save(str(path))
        return path

    def test_absolute_image_path_is_embedded(self) -> None:
        image = self._write_png()
        out = Path(self.temp_dir.name) / "abs.pdf"
        html_to_pdf(render_book(self._photo_book(str(image))), out)
        with fitz.open(out) as doc:
            self.assertGreaterEqual(len(doc.load_page(1).get_images()), 1)

    def test_file_uri_image_is_embedded(self) -> None:
        image = self._write_png()
        out = Path(self.temp_dir.name) / "uri.pdf"
        html_to_pdf(render_book(self._photo_book(image.as_uri())), out)
        with fitz.open(out) as doc:
            self.assertGreaterEqual(len(doc.load_page(1).get_images()), 1)

    def test_relative_image_resolves_against_media_dir(self) -> None:
        image = self._write_png()
        out = Path(self.temp_dir.name) / "rel.pdf"
        html_to_pdf(render_book(self._photo_book(image.name)), out, media_dir=image.parent)
        with fitz.open(out) as doc:
            self.assertGreaterEqual(len(doc.load_page(1).get_images()), 1)

    def test_converter_uses_work_dir_under_out_dir(self) -> None:
        book = Book(
            cover=Cover(title="Ava's First Year", subject_name="Ava"),
            pages=[Page(id="t", type=PageType.TITLE), Page(id="b", type=PageType.BLANK)],
        )
        path = PdfConverter()(render_book(book), "ava-photo-book")
        self.assertEqual(path.name, "ava-photo-book.pdf")
        self.assertEqual(path.parent, Path(self.temp_dir.name) / ".work")
        self.assertTrue(path.exists())


if __name__ == "__main__":
    unittest.main()
