from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol

from slugify import slugify

from .. import config
from ..config import DEFAULT_SUBJECT_NAME, PDF_MIME_TYPE
from ..models import EventType
from ..storage import record_artifacts
from .book import Book
from .pages import Page
from .records import MilestoneRecord, Period, Profile, Record
from .render_html import render_book
from .render_pdf import PdfConverter
from .themes import DEFAULT_REGISTRY, ThemeRegistry


logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    OK = "OK"
    FAILED = "FAILED"
    BUSY = "BUSY"


class ExportStatus(str, Enum):
    EXPORTED = "EXPORTED"
    REFUSED = "REFUSED"
    EMPTY = "EMPTY"
    BUSY = "BUSY"
    NOT_SHARED = "NOT_SHARED"


@dataclass
class GenerationResult:
    status: GenerationStatus
    pages: List[Page] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == GenerationStatus.OK


@dataclass
class ExportResult:
    status: ExportStatus
    path: Optional[Path] = None


class ShareSink(Protocol):
    def is_available(self) -> bool: ...

    def share(self, path: Path, mime_type: str, dialog_title: str) -> Optional[Path]: ...


Converter = Callable[[str, str], Path]
Analytics = Callable[..., None]


class DirectorySink:
    """Saves exported files into the output directory and logs them."""

    def __init__(self, out_dir: Path | None = None, record: bool = True) -> None:
        self.out_dir = out_dir
        self.record = record
        self.saved: List[Path] = []

    def is_available(self) -> bool:
        return True

    def share(self, path: Path, mime_type: str, dialog_title: str) -> Path:
        target_dir = self.out_dir or config.OUT_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / path.name
        if path.resolve() != target.resolve():
            shutil.move(str(path), str(target))
        logger.info("Saved %s (%s) as %s", dialog_title, mime_type, target)
        self.saved.append(target)
        if self.record:
            record_artifacts([("pdf", target)], mime_type=mime_type)
        return target


class PhotoBookSession:
    """One editing session over a photo book and its collaborators.

    Generation never raises: failures are logged and returned as a FAILED
    ``GenerationResult`` with ``generating`` back to False. Export raises
    whatever the converter or sink raise, but always clears ``exporting``.
    A call made while the same operation is still running is rejected.
    """

    def __init__(
        self,
        records: Callable[[], Iterable[Record]],
        milestones: Callable[[], Iterable[MilestoneRecord]],
        profile: Callable[[], Profile],
        entitlement: Callable[[], bool],
        converter: Optional[Converter] = None,
        sink: Optional[ShareSink] = None,
        registry: ThemeRegistry = DEFAULT_REGISTRY,
        analytics: Optional[Analytics] = None,
        book: Optional[Book] = None,
    ) -> None:
        self.records = records
        self.milestones = milestones
        self.profile = profile
        self.entitlement = entitlement
        self.converter: Converter = converter or PdfConverter()
        self.sink: ShareSink = sink or DirectorySink()
        self.registry = registry
        self.analytics = analytics
        self.book = book or Book.for_profile(profile(), layout_template_id=registry.default_layout)
        self.monthly_book_enabled = False
        self.selected_month = Period.current()

    @property
    def generating(self) -> bool:
        return self.book.generating

    @property
    def exporting(self) -> bool:
        return self.book.exporting

    def can_export_pdf(self) -> bool:
        return bool(self.entitlement())

    def subject_name(self) -> str:
        return self.profile().display_name or DEFAULT_SUBJECT_NAME

    def dialog_title(self) -> str:
        return f"{self.subject_name()}'s Photo Book"

    def file_slug(self) -> str:
        return slugify(f"{self.subject_name()} photo book")

    def set_selected_month(self, period: Period) -> None:
        self.selected_month = period

    def set_monthly_book_enabled(self, enabled: bool) -> None:
        self.monthly_book_enabled = bool(enabled)

    def generate(self) -> GenerationResult:
        if self.monthly_book_enabled:
            return self.generate_monthly_book()
        return self.generate_photo_book()

    def generate_photo_book(self) -> GenerationResult:
        return self._generate(
            "default",
            lambda: self.book.regenerate_default(self.records(), self.milestones(), self.profile()),
        )

    def generate_monthly_book(self) -> GenerationResult:
        period = self.selected_month
        return self._generate(
            f"monthly:{period.key}",
            lambda: self.book.curate_for_period(self.records(), period, self.profile()),
        )

    def _generate(self, mode: str, build: Callable[[], List[Page]]) -> GenerationResult:
        if self.book.generating:
            logger.info("Generation already running; ignoring %s request", mode)
            return GenerationResult(GenerationStatus.BUSY, pages=list(self.book.pages))
        self.book.generating = True
        try:
            pages = build()
        except Exception as exc:
            logger.exception("Photo book generation failed (%s)", mode)
            return GenerationResult(GenerationStatus.FAILED, pages=list(self.book.pages), error=str(exc))
        finally:
            self.book.generating = False
        self._track(EventType.GENERATED, mode)
        return GenerationResult(GenerationStatus.OK, pages=pages)

    def preview(self) -> str:
        return render_book(self.book, self.registry)

    def export_pdf(self) -> ExportResult:
        if not self.entitlement():
            logger.info("PDF export refused: not entitled")
            return ExportResult(ExportStatus.REFUSED)
        if self.book.exporting:
            logger.info("Export already running; ignoring request")
            return ExportResult(ExportStatus.BUSY)
        if not self.book.pages:
            return ExportResult(ExportStatus.EMPTY)

        self.book.exporting = True
        try:
            markup = render_book(self.book, self.registry)
            path = self.converter(markup, self.file_slug())
            if not self.sink.is_available():
                logger.warning("Sharing is not available; PDF left at %s", path)
                return ExportResult(ExportStatus.NOT_SHARED, path)
            saved = self.sink.share(path, PDF_MIME_TYPE, self.dialog_title())
            if saved is not None:
                path = saved
        finally:
            self.book.exporting = False
        self._track(EventType.EXPORTED, "pdf")
        return ExportResult(ExportStatus.EXPORTED, path)

    def _track(self, event: EventType, mode: str) -> None:
        if self.analytics is None:
            return
        try:
            self.analytics(
                event,
                page_count=len(self.book.pages),
                layout=self.book.layout_template_id,
                cover_theme=self.book.cover.color_theme_id,
                mode=mode,
            )
        except Exception:
            logger.exception("Failed to record %s event", event.value)
