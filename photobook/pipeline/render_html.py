from __future__ import annotations

import html
from typing import Callable, Dict, List, Optional

from .book import Book
from .pages import Cover, Page, PageType
from .records import format_long_date
from .themes import DEFAULT_REGISTRY, ColorTheme, StyleRules, ThemeRegistry


MILESTONE_BADGE = "✨ Milestone"


def _e(text: Optional[str]) -> str:
    return html.escape(str(text), quote=True)


def stylesheet(rules: StyleRules) -> str:
    blocks: List[str] = []
    for selector, declarations in rules.items():
        body = " ".join(f"{prop}: {value};" for prop, value in declarations.items())
        blocks.append(f"{selector} {{ {body} }}")
    return "\n".join(blocks)


def _image(src: Optional[str], css_class: str) -> str:
    if not src:
        return ""
    return f'<img src="{_e(src)}" class="{css_class}" />'


def _date_line(value: Optional[str]) -> str:
    if not value:
        return ""
    return f'<p class="date">{_e(format_long_date(value))}</p>'


def _caption_line(value: Optional[str]) -> str:
    if not value:
        return ""
    return f'<p class="caption">{_e(value)}</p>'


def _cover_section(cover: Cover, theme: ColorTheme) -> str:
    fg = theme.foreground_color
    parts = [
        f'<section class="page title-page" style="background: {theme.background_color};">',
        _image(cover.photo_ref, "cover-photo"),
        f'<h1 style="color: {fg};">{_e(cover.title)}</h1>',
    ]
    if cover.subject_name:
        parts.append(f'<p class="subtitle" style="color: {fg}; opacity: 0.9;">{_e(cover.subject_name)}</p>')
    if cover.date_range_label:
        parts.append(f'<p class="date-range" style="color: {fg}; opacity: 0.8;">{_e(cover.date_range_label)}</p>')
    parts.append("</section>")
    return "".join(parts)


def _page_title(page: Page, cover: Cover, theme: ColorTheme) -> str:
    return _cover_section(cover, theme)


def _page_photo(page: Page, cover: Cover, theme: ColorTheme) -> str:
    return "".join(
        [
            '<section class="page photo-page">',
            _image(page.media_ref, "photo"),
            _caption_line(page.caption),
            _date_line(page.date),
            "</section>",
        ]
    )


def _page_milestone(page: Page, cover: Cover, theme: ColorTheme) -> str:
    return "".join(
        [
            '<section class="page photo-page milestone-page">',
            _image(page.media_ref, "photo"),
            f'<div class="milestone-badge">{MILESTONE_BADGE}</div>',
            f"<h2>{_e(page.title)}</h2>" if page.title else "",
            _caption_line(page.caption),
            _date_line(page.date),
            "</section>",
        ]
    )


def _page_blank(page: Page, cover: Cover, theme: ColorTheme) -> str:
    return '<section class="page blank-page"></section>'


PAGE_RENDERERS: Dict[PageType, Callable[[Page, Cover, ColorTheme], str]] = {
    PageType.TITLE: _page_title,
    PageType.PHOTO: _page_photo,
    PageType.MILESTONE: _page_milestone,
    PageType.BLANK: _page_blank,
}


def render_sections(book: Book, registry: ThemeRegistry = DEFAULT_REGISTRY) -> List[str]:
    theme = registry.get_color_theme(book.cover.color_theme_id)
    sections: List[str] = []
    # A leading title page stands in for the cover; otherwise the cover comes first on its own
    if not (book.pages and book.pages[0].is_title):
        sections.append(_cover_section(book.cover, theme))
    for page in book.pages:
        sections.append(PAGE_RENDERERS[page.type](page, book.cover, theme))
    return sections


def render_book(book: Book, registry: ThemeRegistry = DEFAULT_REGISTRY) -> str:
    """Render the book as one self-contained HTML document, one section per page."""
    styles = stylesheet(registry.get_layout_styles(book.layout_template_id))
    body = "\n".join(render_sections(book, registry))
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"<title>{_e(book.cover.title)}</title>\n"
        f"<style>\n{styles}\n</style>\n"
        "</head>\n"
        f"<body>\n{body}\n</body>\n"
        "</html>\n"
    )
