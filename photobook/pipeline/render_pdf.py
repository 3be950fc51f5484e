from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse

import fitz  # PyMuPDF

from .. import config
from ..storage import artifact_path


logger = logging.getLogger(__name__)

PAGE_SIZE = "a4"
MARGIN = 36
WORK_DIR_NAME = ".work"

HEAD_RE = re.compile(r"<head\b[^>]*>(.*?)</head>", re.IGNORECASE | re.DOTALL)
SECTION_RE = re.compile(r"<section\b.*?</section>", re.IGNORECASE | re.DOTALL)
IMG_SRC_RE = re.compile(r'(<img\b[^>]*?\bsrc=")([^"]*)(")', re.IGNORECASE)


def split_sections(markup: str) -> List[str]:
    """
    Split a rendered book into one standalone document per ``<section>``.
    Each chunk keeps the original ``<head>`` so the stylesheet still applies.
    Markup without sections comes back as a single chunk.
    """
    sections = SECTION_RE.findall(markup)
    if not sections:
        return [markup]
    head_match = HEAD_RE.search(markup)
    head = head_match.group(1) if head_match else ""
    return [f"<html><head>{head}</head><body>{section}</body></html>" for section in sections]


def _local_path(src: str) -> Optional[Path]:
    parsed = urlparse(src)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if not parsed.scheme and Path(src).is_absolute():
        return Path(src)
    return None


def embed_local_images(markup: str, archive: fitz.Archive) -> str:
    """
    Add images referenced by absolute path or ``file://`` URI to ``archive``
    and point their ``src`` at the archived name. Relative refs are left alone.
    """
    names: dict[Path, str] = {}

    def replace(match: re.Match) -> str:
        src = html.unescape(match.group(2))
        path = _local_path(src)
        if path is None:
            return match.group(0)
        if path not in names:
            if not path.is_file():
                logger.warning("Image not found: %s", src)
                return match.group(0)
            name = f"media-{len(names) + 1}{path.suffix.lower()}"
            archive.add((path.read_bytes(), name))
            names[path] = name
        return f"{match.group(1)}{names[path]}{match.group(3)}"

    return IMG_SRC_RE.sub(replace, markup)


def html_to_pdf(markup: str, output_path: Path, media_dir: Optional[Path] = None) -> Path:
    """
    Lay the markup out onto A4 pages with PyMuPDF's Story engine.

    Every ``<section>`` starts on a fresh page; a section that does not fit
    continues onto further pages. Relative image paths resolve against
    ``media_dir`` when it is given; absolute paths and ``file://`` URIs are
    embedded directly.
    """
    archive = fitz.Archive()
    if media_dir:
        archive.add(str(media_dir))
    markup = embed_local_images(markup, archive)

    mediabox = fitz.paper_rect(PAGE_SIZE)
    where = mediabox + (MARGIN, MARGIN, -MARGIN, -MARGIN)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    writer = fitz.DocumentWriter(str(output_path))
    try:
        for chunk in split_sections(markup):
            story = fitz.Story(html=chunk, archive=archive)
            more = 1
            while more:
                device = writer.begin_page(mediabox)
                more, _ = story.place(where)
                story.draw(device)
                writer.end_page()
    finally:
        writer.close()
    return output_path


class PdfConverter:
    """Converter that writes ``<slug>.pdf`` into a working directory."""

    def __init__(self, work_dir: Path | None = None, media_dir: Path | None = None) -> None:
        self.work_dir = work_dir
        self.media_dir = media_dir

    def __call__(self, markup: str, slug: str) -> Path:
        work_dir = self.work_dir or config.OUT_DIR / WORK_DIR_NAME
        path = artifact_path(slug, "pdf", base_dir=work_dir)
        return html_to_pdf(markup, path, media_dir=self.media_dir)
