"""Authoring endpoints for theme drafts, snapshots and previews."""
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query

from themepress.interfaces.http.deps import get_author, get_theme_service
from themepress.interfaces.http.errors import http_error
from themepress.modules.common.exceptions import ThemePressError
from themepress.modules.drafts import DocumentSaveResult
from themepress.modules.publishing import PublishedSnapshot
from themepress.modules.rendering import RenderResult
from themepress.modules.themes import ThemeService, ThemeSyncResult
from themepress.schemas import (
    FileHistoryResponse,
    FileRenameRequest,
    FileRestoreRequest,
    FileVersionResponse,
    FileVersionSummary,
    FileWriteRequest,
    RenderRequest,
    RenderResponse,
    RollbackRequest,
    SearchHitResponse,
    SectionBlocksRequest,
    SectionCreateRequest,
    SectionErrorResponse,
    SectionOrderRequest,
    SectionUpdateRequest,
    SnapshotDiffResponse,
    SnapshotResponse,
    SnapshotSummaryResponse,
    SuccessResponse,
    SyncReportResponse,
    TemplateDocumentResponse,
    ThemePackageResponse,
    ThemeResponse,
)

router = APIRouter()


def _document_response(result: DocumentSaveResult) -> TemplateDocumentResponse:
    return TemplateDocumentResponse(
        template_name=result.template_name,
        document=result.document.to_dict(),
        warnings=result.warnings,
        version_number=result.version_number,
        checksum=result.checksum,
    )


def _snapshot_response(snapshot: PublishedSnapshot) -> SnapshotResponse:
    return SnapshotResponse.model_validate(snapshot)


def _render_response(result: RenderResult) -> RenderResponse:
    return RenderResponse(
        html=result.html,
        assets=dict(result.assets),
        section_errors=[SectionErrorResponse.model_validate(error) for error in result.section_errors],
    )


def _sync_response(result: ThemeSyncResult) -> SyncReportResponse:
    report = result.report
    return SyncReportResponse(
        theme_id=report.theme_id,
        scanned=report.scanned,
        written=report.written,
        unchanged=report.unchanged,
        skipped=list(report.skipped),
        last_path=report.last_path,
        cancelled=report.cancelled,
        published_snapshot=result.published.snapshot_number if result.published else None,
    )


@router.get("", response_model=List[ThemeResponse])
async def list_themes(service: ThemeService = Depends(get_theme_service)):
    return [ThemeResponse.model_validate(theme) for theme in await service.list_themes()]


@router.get("/available", response_model=List[ThemePackageResponse])
async def list_available_themes(service: ThemeService = Depends(get_theme_service)):
    return [ThemePackageResponse.model_validate(package) for package in service.available_themes()]


@router.post("/sync", response_model=List[SyncReportResponse])
async def sync_all_themes(
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        results = await service.sync_all(author=author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return [_sync_response(result) for result in results]


@router.get("/{theme_id}", response_model=ThemeResponse)
async def get_theme(theme_id: str, service: ThemeService = Depends(get_theme_service)):
    try:
        return ThemeResponse.model_validate(await service.get_theme(theme_id))
    except ThemePressError as exc:
        raise http_error(exc) from exc


@router.post("/{theme_id}/sync", response_model=SyncReportResponse)
async def sync_theme(
    theme_id: str,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        result = await service.sync_theme(theme_id, author=author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _sync_response(result)


@router.post("/{theme_id}/activate", response_model=ThemeResponse)
async def activate_theme(theme_id: str, service: ThemeService = Depends(get_theme_service)):
    try:
        return ThemeResponse.model_validate(await service.activate_theme(theme_id))
    except ThemePressError as exc:
        raise http_error(exc) from exc


@router.get("/{theme_id}/files")
async def get_file_tree(theme_id: str, service: ThemeService = Depends(get_theme_service)) -> dict[str, Any]:
    return await service.file_tree(theme_id)


@router.get("/{theme_id}/files/content", response_model=FileVersionResponse)
async def read_file(
    theme_id: str,
    path: str = Query(..., min_length=1),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        return FileVersionResponse.model_validate(await service.read_file(theme_id, path))
    except ThemePressError as exc:
        raise http_error(exc) from exc


@router.put("/{theme_id}/files", response_model=FileVersionResponse)
async def save_file(
    theme_id: str,
    payload: FileWriteRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        version = await service.save_file(
            theme_id, payload.path, payload.content, author, change_summary=payload.change_summary
        )
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return FileVersionResponse.model_validate(version)


@router.delete("/{theme_id}/files", response_model=SuccessResponse)
async def delete_file(
    theme_id: str,
    path: str = Query(..., min_length=1),
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        await service.delete_file(theme_id, path, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return SuccessResponse(message=f"Deleted {path}")


@router.post("/{theme_id}/files/rename", response_model=FileVersionResponse)
async def rename_file(
    theme_id: str,
    payload: FileRenameRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        version = await service.rename_file(theme_id, payload.old_path, payload.new_path, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return FileVersionResponse.model_validate(version)


@router.post("/{theme_id}/files/restore", response_model=FileVersionResponse)
async def restore_file(
    theme_id: str,
    payload: FileRestoreRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        version = await service.restore_file(theme_id, payload.path, payload.version_number, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return FileVersionResponse.model_validate(version)


@router.get("/{theme_id}/files/history", response_model=FileHistoryResponse)
async def file_history(
    theme_id: str,
    path: str = Query(..., min_length=1),
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        page = await service.history(theme_id, path, limit=limit, offset=offset)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return FileHistoryResponse(
        path=path,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        versions=[FileVersionSummary.model_validate(version) for version in page.versions],
    )


@router.get("/{theme_id}/search", response_model=List[SearchHitResponse])
async def search_files(
    theme_id: str,
    q: str = Query(..., min_length=1),
    service: ThemeService = Depends(get_theme_service),
):
    return [SearchHitResponse.model_validate(hit) for hit in await service.search(theme_id, q)]


@router.get("/{theme_id}/templates/{template_name}", response_model=TemplateDocumentResponse)
async def get_template(theme_id: str, template_name: str, service: ThemeService = Depends(get_theme_service)):
    try:
        document = await service.load_template(theme_id, template_name)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return TemplateDocumentResponse(
        template_name=template_name,
        document=document.to_dict(),
        warnings=document.warnings(),
    )


@router.post("/{theme_id}/templates/{template_name}/sections", response_model=TemplateDocumentResponse)
async def add_section(
    theme_id: str,
    template_name: str,
    payload: SectionCreateRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        result = await service.add_section(
            theme_id,
            template_name,
            payload.type,
            author,
            settings=payload.settings,
            section_id=payload.section_id,
            position=payload.position,
        )
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _document_response(result)


@router.patch(
    "/{theme_id}/templates/{template_name}/sections/{section_id}",
    response_model=TemplateDocumentResponse,
)
async def update_section(
    theme_id: str,
    template_name: str,
    section_id: str,
    payload: SectionUpdateRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        result = await service.update_section(
            theme_id, template_name, section_id, payload.settings, author, replace=payload.replace
        )
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _document_response(result)


@router.put(
    "/{theme_id}/templates/{template_name}/sections/{section_id}/blocks",
    response_model=TemplateDocumentResponse,
)
async def update_section_blocks(
    theme_id: str,
    template_name: str,
    section_id: str,
    payload: SectionBlocksRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        result = await service.update_blocks(theme_id, template_name, section_id, payload.blocks, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _document_response(result)


@router.delete(
    "/{theme_id}/templates/{template_name}/sections/{section_id}",
    response_model=TemplateDocumentResponse,
)
async def remove_section(
    theme_id: str,
    template_name: str,
    section_id: str,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        result = await service.remove_section(theme_id, template_name, section_id, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _document_response(result)


@router.put("/{theme_id}/templates/{template_name}/order", response_model=TemplateDocumentResponse)
async def reorder_sections(
    theme_id: str,
    template_name: str,
    payload: SectionOrderRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        result = await service.reorder_sections(theme_id, template_name, payload.order, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _document_response(result)


@router.post("/{theme_id}/preview/{template_name}", response_model=RenderResponse)
async def preview_template(
    theme_id: str,
    template_name: str,
    payload: Optional[RenderRequest] = None,
    service: ThemeService = Depends(get_theme_service),
):
    context = payload.context if payload else {}
    try:
        result = await service.preview_template(theme_id, template_name, context)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _render_response(result)


@router.post("/{theme_id}/publish", response_model=SnapshotResponse)
async def publish_theme(
    theme_id: str,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        snapshot = await service.publish(theme_id, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _snapshot_response(snapshot)


@router.post("/{theme_id}/rollback", response_model=SnapshotResponse)
async def rollback_theme(
    theme_id: str,
    payload: RollbackRequest,
    author: str = Depends(get_author),
    service: ThemeService = Depends(get_theme_service),
):
    try:
        snapshot = await service.rollback(theme_id, payload.snapshot_number, author)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _snapshot_response(snapshot)


@router.get("/{theme_id}/snapshots", response_model=List[SnapshotSummaryResponse])
async def list_snapshots(theme_id: str, service: ThemeService = Depends(get_theme_service)):
    return [SnapshotSummaryResponse.model_validate(item) for item in await service.list_snapshots(theme_id)]


@router.get("/{theme_id}/snapshots/active", response_model=SnapshotResponse)
async def active_snapshot(theme_id: str, service: ThemeService = Depends(get_theme_service)):
    try:
        snapshot = await service.snapshots.require_active_snapshot(theme_id)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _snapshot_response(snapshot)


@router.get("/{theme_id}/snapshots/{snapshot_number}", response_model=SnapshotResponse)
async def get_snapshot(theme_id: str, snapshot_number: int, service: ThemeService = Depends(get_theme_service)):
    try:
        snapshot = await service.get_snapshot(theme_id, snapshot_number)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return _snapshot_response(snapshot)


@router.get("/{theme_id}/snapshots/{from_number}/diff/{to_number}", response_model=SnapshotDiffResponse)
async def diff_snapshots(
    theme_id: str,
    from_number: int,
    to_number: int,
    service: ThemeService = Depends(get_theme_service),
):
    try:
        diff = await service.diff_snapshots(theme_id, from_number, to_number)
    except ThemePressError as exc:
        raise http_error(exc) from exc
    return SnapshotDiffResponse.model_validate(diff)
