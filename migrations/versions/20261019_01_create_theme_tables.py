"""create theme file store and snapshot tables

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "themes",
        sa.Column("id", sa.String(length=100), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("version", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("draft_owner", sa.String(length=100), nullable=True),
        sa.Column("draft_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("draft_base_snapshot", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "theme_files",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("theme_id", sa.String(length=100), nullable=False),
        sa.Column("file_path", sa.String(length=500), nullable=False),
        sa.Column("file_type", sa.String(length=20), nullable=False),
        sa.Column("current_checksum", sa.String(length=64), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["theme_id"], ["themes.id"]),
        sa.UniqueConstraint("theme_id", "file_path", name="uq_theme_files_theme_path"),
    )
    op.create_index("ix_theme_files_theme_id", "theme_files", ["theme_id"])

    op.create_table(
        "theme_file_versions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("theme_file_id", sa.Integer(), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("content_size", sa.Integer(), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.Column("author", sa.String(length=100), nullable=False),
        sa.Column("change_summary", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["theme_file_id"], ["theme_files.id"]),
        sa.UniqueConstraint("theme_file_id", "version_number", name="uq_theme_file_versions_number"),
    )
    op.create_index("ix_theme_file_versions_theme_file_id", "theme_file_versions", ["theme_file_id"])

    op.create_table(
        "published_snapshots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("theme_id", sa.String(length=100), nullable=False),
        sa.Column("snapshot_number", sa.Integer(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("published_by", sa.String(length=100), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.Column("file_count", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["theme_id"], ["themes.id"]),
        sa.UniqueConstraint("theme_id", "snapshot_number", name="uq_published_snapshots_number"),
    )
    op.create_index("ix_published_snapshots_theme_id", "published_snapshots", ["theme_id"])

    op.create_table(
        "published_files",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("snapshot_id", sa.Integer(), nullable=False),
        sa.Column("file_path", sa.String(length=500), nullable=False),
        sa.Column("file_type", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(["snapshot_id"], ["published_snapshots.id"]),
        sa.UniqueConstraint("snapshot_id", "file_path", name="uq_published_files_path"),
    )
    op.create_index("ix_published_files_snapshot_id", "published_files", ["snapshot_id"])

    op.create_table(
        "theme_active_snapshots",
        sa.Column("theme_id", sa.String(length=100), primary_key=True),
        sa.Column("snapshot_id", sa.Integer(), nullable=False),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("activated_by", sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(["theme_id"], ["themes.id"]),
        sa.ForeignKeyConstraint(["snapshot_id"], ["published_snapshots.id"]),
    )


def downgrade() -> None:
    op.drop_table("theme_active_snapshots")
    op.drop_index("ix_published_files_snapshot_id", table_name="published_files")
    op.drop_table("published_files")
    op.drop_index("ix_published_snapshots_theme_id", table_name="published_snapshots")
    op.drop_table("published_snapshots")
    op.drop_index("ix_theme_file_versions_theme_file_id", table_name="theme_file_versions")
    op.drop_table("theme_file_versions")
    op.drop_index("ix_theme_files_theme_id", table_name="theme_files")
    op.drop_table("theme_files")
    op.drop_table("themes")
