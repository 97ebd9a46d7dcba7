from datetime import datetime, timezone

from themepress.db.models import PublishedFile
from themepress.infrastructure.database.repositories import SqlSnapshotRepository, SqlThemeRepository


class TestAsyncRepository:
    async def test_add_flushes_and_stage_defers(self, container):
        async with container.session_factory() as session:
            themes = SqlThemeRepository(session)
            snapshots = SqlSnapshotRepository(session)
            theme = await themes.ensure("demo")
            snapshot = await snapshots.create_snapshot(
                theme_id=theme.id,
                snapshot_number=1,
                published_at=datetime.now(timezone.utc),
                published_by="tester",
                checksum="0" * 64,
                file_count=1,
            )
            assert snapshot.id is not None

            staged = snapshots.stage(
                PublishedFile(
                    snapshot_id=snapshot.id,
                    file_path="layout/theme.html",
                    file_type="layout",
                    content="x",
                    checksum="1" * 64,
                )
            )
            assert staged in session.new
            assert staged.id is None

            await session.flush()
            assert staged.id is not None
            assert [f.file_path for f in await snapshots.list_files(snapshot.id)] == ["layout/theme.html"]
            await session.rollback()
