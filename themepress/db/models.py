"""SQLAlchemy ORM models."""
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from themepress.infrastructure.database.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Theme(Base):
    __tablename__ = "themes"

    id = Column(String(100), primary_key=True)
    name = Column(String(150), nullable=False)
    version = Column(String(50))
    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=False)
    draft_owner = Column(String(100))
    draft_updated_at = Column(DateTime(timezone=True))
    draft_base_snapshot = Column(Integer)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    files = relationship("ThemeFile", back_populates="theme", cascade="all, delete-orphan")
    snapshots = relationship("PublishedSnapshot", back_populates="theme", cascade="all, delete-orphan")


class ThemeFile(Base):
    """One logical file of a theme; content lives only in its versions."""

    __tablename__ = "theme_files"
    __table_args__ = (UniqueConstraint("theme_id", "file_path", name="uq_theme_files_theme_path"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    theme_id = Column(String(100), ForeignKey("themes.id"), nullable=False, index=True)
    file_path = Column(String(500), nullable=False)
    file_type = Column(String(20), nullable=False, default="other")
    current_checksum = Column(String(64), nullable=False)
    deleted_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    theme = relationship("Theme", back_populates="files")
    versions = relationship(
        "ThemeFileVersion",
        back_populates="theme_file",
        cascade="all, delete-orphan",
        order_by="ThemeFileVersion.version_number",
    )


class ThemeFileVersion(Base):
    __tablename__ = "theme_file_versions"
    __table_args__ = (
        UniqueConstraint("theme_file_id", "version_number", name="uq_theme_file_versions_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    theme_file_id = Column(Integer, ForeignKey("theme_files.id"), nullable=False, index=True)
    version_number = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    content_size = Column(Integer, nullable=False)
    checksum = Column(String(64), nullable=False)
    author = Column(String(100), nullable=False)
    change_summary = Column(String(255))
    created_at = Column(DateTime(timezone=True), nullable=False)

    theme_file = relationship("ThemeFile", back_populates="versions")


class PublishedSnapshot(Base):
    __tablename__ = "published_snapshots"
    __table_args__ = (
        UniqueConstraint("theme_id", "snapshot_number", name="uq_published_snapshots_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    theme_id = Column(String(100), ForeignKey("themes.id"), nullable=False, index=True)
    snapshot_number = Column(Integer, nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=False)
    published_by = Column(String(100), nullable=False)
    checksum = Column(String(64), nullable=False)
    file_count = Column(Integer, nullable=False, default=0)

    theme = relationship("Theme", back_populates="snapshots")
    files = relationship(
        "PublishedFile",
        back_populates="snapshot",
        cascade="all, delete-orphan",
        order_by="PublishedFile.file_path",
    )


class PublishedFile(Base):
    __tablename__ = "published_files"
    __table_args__ = (UniqueConstraint("snapshot_id", "file_path", name="uq_published_files_path"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    snapshot_id = Column(Integer, ForeignKey("published_snapshots.id"), nullable=False, index=True)
    file_path = Column(String(500), nullable=False)
    file_type = Column(String(20), nullable=False, default="other")
    content = Column(Text, nullable=False)
    checksum = Column(String(64), nullable=False)

    snapshot = relationship("PublishedSnapshot", back_populates="files")


class ThemeActiveSnapshot(Base):
    """The per-theme active pointer; swapping it never touches snapshot content."""

    __tablename__ = "theme_active_snapshots"

    theme_id = Column(String(100), ForeignKey("themes.id"), primary_key=True)
    snapshot_id = Column(Integer, ForeignKey("published_snapshots.id"), nullable=False)
    activated_at = Column(DateTime(timezone=True), nullable=False)
    activated_by = Column(String(100), nullable=False)

    snapshot = relationship("PublishedSnapshot")
