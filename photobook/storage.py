from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from . import config
from .models import BookEvent, EventType, ExportArtifact, get_session, init_db


ARTIFACT_SUFFIXES = {
    "pdf": ".pdf",
    "html": ".html",
    "preview_1": "_preview_1.png",
    "preview_2": "_preview_2.png",
    "preview_3": "_preview_3.png",
}


def export_dir(base_dir: Path | None = None) -> Path:
    path = base_dir or config.OUT_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def artifact_path(slug: str, artifact_type: str, base_dir: Path | None = None) -> Path:
    suffix = ARTIFACT_SUFFIXES[artifact_type]
    return export_dir(base_dir) / f"{slug}{suffix}"


def record_artifacts(artifacts: Iterable[tuple[str, Path]], mime_type: Optional[str] = None) -> None:
    init_db()
    with get_session() as session:
        for artifact_type, path in artifacts:
            try:
                stored = str(path.relative_to(config.OUT_DIR))
            except ValueError:
                stored = str(path)
            session.add(ExportArtifact(type=artifact_type, path=stored, mime_type=mime_type))
        session.commit()


def record_event(
    event: EventType,
    page_count: int,
    layout: Optional[str] = None,
    cover_theme: Optional[str] = None,
    mode: Optional[str] = None,
) -> None:
    init_db()
    with get_session() as session:
        session.add(
            BookEvent(
                event=event,
                page_count=page_count,
                layout=layout,
                cover_theme=cover_theme,
                mode=mode,
            )
        )
        session.commit()
