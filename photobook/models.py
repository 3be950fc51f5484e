from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel, create_engine, Session

from . import config


class EventType(str, Enum):
    GENERATED = "photo_book_generated"
    EXPORTED = "photo_book_exported"


class BookEvent(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    event: EventType = Field(index=True)
    page_count: int = 0
    layout: Optional[str] = None
    cover_theme: Optional[str] = None
    mode: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ExportArtifact(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    type: str
    path: str
    mime_type: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


engine = create_engine(f"sqlite:///{config.DB_PATH}")


def reset_engine() -> None:
    global engine
    engine = create_engine(f"sqlite:///{config.DB_PATH}")


def init_db() -> None:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
