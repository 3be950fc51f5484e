from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from . import config
from .models import reset_engine
from .pipeline.export import DirectorySink, ExportStatus, PhotoBookSession
from .pipeline.records import Profile, load_milestones, load_profile, load_records, parse_period
from .pipeline.render_pdf import PdfConverter
from .pipeline.render_preview import render_previews
from .pipeline.themes import DEFAULT_REGISTRY
from .storage import artifact_path, record_artifacts, record_event

app = typer.Typer(help="Photo book curation and export")


def _session(
    records: Path,
    milestones: Optional[Path],
    profile: Optional[Path],
    entitled: bool,
    media_dir: Optional[Path] = None,
    track: bool = True,
) -> PhotoBookSession:
    loaded_records = load_records(records)
    loaded_milestones = load_milestones(milestones) if milestones else []
    loaded_profile = load_profile(profile) if profile else Profile()
    return PhotoBookSession(
        records=lambda: loaded_records,
        milestones=lambda: loaded_milestones,
        profile=lambda: loaded_profile,
        entitlement=lambda: entitled,
        converter=PdfConverter(media_dir=media_dir),
        sink=DirectorySink(),
        analytics=record_event if track else None,
    )


def _apply_options(
    session: PhotoBookSession,
    month: Optional[str],
    layout: Optional[str],
    theme: Optional[str],
) -> None:
    if layout:
        if not DEFAULT_REGISTRY.has_layout(layout):
            raise typer.BadParameter(f"Unknown layout: {layout}", param_hint="--layout")
        session.book.set_layout(layout)
    if theme:
        if not DEFAULT_REGISTRY.has_cover_theme(theme):
            raise typer.BadParameter(f"Unknown cover theme: {theme}", param_hint="--theme")
        session.book.set_cover(color_theme_id=theme)
    if month:
        try:
            session.set_selected_month(parse_period(month))
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--month") from exc
        session.set_monthly_book_enabled(True)


@app.command()
def build(
    records: Path = typer.Option(..., "--records", help="JSON list of journal records"),
    milestones: Optional[Path] = typer.Option(None, "--milestones", help="JSON list of milestones"),
    profile: Optional[Path] = typer.Option(None, "--profile", help="JSON profile with display_name/birth_date"),
    month: Optional[str] = typer.Option(None, "--month", help="Curate a monthly book, e.g. 2024-07"),
    layout: Optional[str] = typer.Option(None, "--layout", help="Layout template id"),
    theme: Optional[str] = typer.Option(None, "--theme", help="Cover color theme id"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    media_dir: Optional[Path] = typer.Option(None, "--media-dir", help="Directory relative image paths resolve against"),
    entitled: bool = typer.Option(True, "--entitled/--not-entitled", help="Whether PDF export is allowed"),
    previews: bool = typer.Option(False, "--previews", help="Also write PNG previews"),
) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()
    session = _session(records, milestones, profile, entitled, media_dir=media_dir)
    _apply_options(session, month, layout, theme)

    result = session.generate()
    if not result.ok:
        typer.echo(f"Generation failed: {result.error}")
        raise typer.Exit(code=1)
    typer.echo(f"Pages: {len(result.pages)}")

    exported = session.export_pdf()
    if exported.status == ExportStatus.REFUSED:
        typer.echo("PDF export requires an upgraded plan")
        raise typer.Exit(code=2)
    if exported.status == ExportStatus.EMPTY:
        typer.echo("Nothing to export")
        return
    typer.echo(f"{exported.status.value}: {exported.path}")

    if previews and exported.path is not None:
        images = render_previews(session.file_slug(), exported.path)
        record_artifacts([(f"preview_{i + 1}", path) for i, path in enumerate(images)], mime_type="image/png")
        for path in images:
            typer.echo(f"Preview: {path}")


@app.command()
def preview(
    records: Path = typer.Option(..., "--records", help="JSON list of journal records"),
    milestones: Optional[Path] = typer.Option(None, "--milestones", help="JSON list of milestones"),
    profile: Optional[Path] = typer.Option(None, "--profile", help="JSON profile with display_name/birth_date"),
    month: Optional[str] = typer.Option(None, "--month", help="Curate a monthly book, e.g. 2024-07"),
    layout: Optional[str] = typer.Option(None, "--layout", help="Layout template id"),
    theme: Optional[str] = typer.Option(None, "--theme", help="Cover color theme id"),
    html_out: Optional[Path] = typer.Option(None, "--html-out", help="Where to write the HTML document"),
) -> None:
    session = _session(records, milestones, profile, entitled=False, track=False)
    _apply_options(session, month, layout, theme)
    result = session.generate()
    if not result.ok:
        typer.echo(f"Generation failed: {result.error}")
        raise typer.Exit(code=1)
    markup = session.preview()
    target = html_out or artifact_path(session.file_slug(), "html")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(markup, encoding="utf-8")
    typer.echo(f"Pages: {len(result.pages)}")
    typer.echo(f"HTML: {target}")


@app.command()
def themes() -> None:
    typer.echo("Layouts:")
    for layout in DEFAULT_REGISTRY.layouts:
        typer.echo(f"  {layout.id:<10} {layout.icon} {layout.display_name} - {layout.description}")
    typer.echo("Cover themes:")
    for theme in DEFAULT_REGISTRY.cover_themes:
        typer.echo(f"  {theme.id:<10} {theme.background_color} / {theme.foreground_color}")


if __name__ == "__main__":
    app()
