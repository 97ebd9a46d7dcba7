"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ThemeResponse(BaseModel):
    id: str
    name: str
    version: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    draft_owner: Optional[str] = None
    draft_updated_at: Optional[datetime] = None
    draft_base_snapshot: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ThemePackageResponse(BaseModel):
    slug: str
    name: str
    version: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FileWriteRequest(BaseModel):
    path: str = Field(..., min_length=1, max_length=500)
    content: str
    change_summary: Optional[str] = Field(default=None, max_length=255)


class FileRenameRequest(BaseModel):
    old_path: str = Field(..., min_length=1, max_length=500)
    new_path: str = Field(..., min_length=1, max_length=500)


class FileRestoreRequest(BaseModel):
    path: str = Field(..., min_length=1, max_length=500)
    version_number: int = Field(..., ge=1)


class FileVersionSummary(BaseModel):
    version_number: int
    checksum: str
    content_size: int
    author: str
    change_summary: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FileVersionResponse(FileVersionSummary):
    file_path: str
    content: str


class FileHistoryResponse(BaseModel):
    path: str
    total: int
    limit: int
    offset: int
    versions: list[FileVersionSummary]


class SearchHitResponse(BaseModel):
    file_path: str
    line: int
    column: int
    text: str

    model_config = ConfigDict(from_attributes=True)


class SectionUpdateRequest(BaseModel):
    settings: dict[str, Any] = Field(default_factory=dict)
    replace: bool = False


class SectionBlocksRequest(BaseModel):
    blocks: Optional[list[dict[str, Any]]] = None


class SectionCreateRequest(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    settings: dict[str, Any] = Field(default_factory=dict)
    section_id: Optional[str] = Field(default=None, max_length=100)
    position: Optional[int] = Field(default=None, ge=0)


class SectionOrderRequest(BaseModel):
    order: list[str]


class TemplateDocumentResponse(BaseModel):
    template_name: str
    document: dict[str, Any]
    warnings: list[str] = Field(default_factory=list)
    version_number: Optional[int] = None
    checksum: Optional[str] = None


class SnapshotFileResponse(BaseModel):
    file_path: str
    file_type: str
    checksum: str

    model_config = ConfigDict(from_attributes=True)


class SnapshotResponse(BaseModel):
    theme_id: str
    snapshot_number: int
    published_at: datetime
    published_by: str
    checksum: str
    files: list[SnapshotFileResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class SnapshotSummaryResponse(BaseModel):
    snapshot_number: int
    published_at: datetime
    published_by: str
    checksum: str
    file_count: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class SnapshotDiffResponse(BaseModel):
    from_number: int
    to_number: int
    added: list[str]
    removed: list[str]
    changed: list[str]

    model_config = ConfigDict(from_attributes=True)


class RollbackRequest(BaseModel):
    snapshot_number: int = Field(..., ge=1)


class RenderRequest(BaseModel):
    context: dict[str, Any] = Field(default_factory=dict)


class SectionErrorResponse(BaseModel):
    section_id: str
    section_type: str
    kind: str
    message: str
    lineno: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class RenderResponse(BaseModel):
    html: str
    assets: dict[str, str] = Field(default_factory=dict)
    section_errors: list[SectionErrorResponse] = Field(default_factory=list)


class SyncReportResponse(BaseModel):
    theme_id: str
    scanned: int
    written: int
    unchanged: int
    skipped: list[str]
    last_path: Optional[str] = None
    cancelled: bool
    published_snapshot: Optional[int] = None
