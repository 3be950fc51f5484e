from __future__ import annotations

from pathlib import Path
from typing import List

import fitz  # PyMuPDF

from ..storage import artifact_path


PREVIEW_TYPES = ("preview_1", "preview_2", "preview_3")


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int = 1200) -> None:
    page = doc.load_page(page_index)

    # Scale so the short side of the image reaches at least min_px
    rect = page.rect
    short_side = min(rect.width, rect.height)
    zoom = max(1.0, min_px / float(short_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(out_path))


def render_previews(slug: str, pdf_path: Path, base_dir: Path | None = None) -> List[Path]:
    """PNG thumbnails of the first pages of an exported book, cover first."""
    previews: List[Path] = []
    with fitz.open(pdf_path) as doc:
        count = min(len(PREVIEW_TYPES), doc.page_count)
        for index in range(count):
            out_path = artifact_path(slug, PREVIEW_TYPES[index], base_dir=base_dir)
            _render_page_to_png(doc, index, out_path)
            previews.append(out_path)
    return previews
