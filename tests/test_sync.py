from sync_themes import sync_themes
from themepress.core.checksum import content_checksum


class TestSyncFromSource:
    async def test_first_sync_writes_every_file(self, file_store, demo_package, demo_files):
        report = await file_store.sync_from_source("demo", demo_package)

        assert report.scanned == len(demo_files)
        assert report.written == len(demo_files)
        assert report.unchanged == 0
        assert await file_store.current_tree("demo") == demo_files

    async def test_unchanged_source_creates_no_versions(self, file_store, demo_package, demo_files):
        await file_store.sync_from_source("demo", demo_package)

        report = await file_store.sync_from_source("demo", demo_package)

        assert report.written == 0
        assert report.unchanged == len(demo_files)
        assert not report.changed
        page = await file_store.history("demo", "sections/hero.html")
        assert page.total == 1

    async def test_only_changed_files_are_written(self, file_store, demo_package):
        await file_store.sync_from_source("demo", demo_package)
        (demo_package / "sections" / "hero.html").write_text("<h1>New</h1>", encoding="utf-8")

        report = await file_store.sync_from_source("demo", demo_package)

        assert report.written == 1
        latest = await file_store.latest_version("demo", "sections/hero.html")
        assert latest.version_number == 2
        assert latest.checksum == content_checksum("<h1>New</h1>")

    async def test_binary_and_hidden_files_are_skipped(self, file_store, demo_package):
        (demo_package / "assets" / "logo.png").write_bytes(b"\xff\xd8\xff\xe0binary")
        (demo_package / ".git").mkdir()
        (demo_package / ".git" / "HEAD").write_text("ref: main", encoding="utf-8")

        report = await file_store.sync_from_source("demo", demo_package)

        assert report.skipped == ["assets/logo.png"]
        tree = await file_store.current_tree("demo")
        assert "assets/logo.png" not in tree
        assert not any(path.startswith(".git") for path in tree)

    async def test_missing_source_directory_is_empty(self, file_store, tmp_path):
        report = await file_store.sync_from_source("demo", tmp_path / "nowhere")

        assert report.scanned == 0

    async def test_cancel_and_resume(self, file_store):
        source = {f"sections/s{i}.html": f"<p>{i}</p>" for i in range(5)}

        first = await file_store.sync_from_source(
            "demo", source, batch_size=2, should_continue=lambda report: report.scanned < 2
        )

        assert first.cancelled
        assert first.written == 2
        assert first.last_path == "sections/s1.html"

        second = await file_store.sync_from_source("demo", source, batch_size=2, start_after=first.last_path)

        assert not second.cancelled
        assert second.scanned == 3
        assert second.written == 3
        assert await file_store.current_tree("demo") == source

    async def test_mapping_source_with_invalid_paths(self, file_store):
        report = await file_store.sync_from_source("demo", {"../evil.html": "x", "ok.txt": "fine"})

        assert report.skipped == ["../evil.html"]
        assert await file_store.current_tree("demo") == {"ok.txt": "fine"}


class TestSyncCommand:
    async def test_activate_and_publish(self, container, demo_package):
        snapshot = await sync_themes("demo", True, "ops", container=container)

        assert snapshot.snapshot_number == 1
        assert snapshot.published_by == "ops"
        assert (await container.theme_service().active_theme()).id == "demo"

    async def test_publish_skipped_when_sync_already_published(self, container, demo_package):
        container.settings.themes.auto_publish_on_sync = True
        await sync_themes("demo", True, "ops", container=container)
        (demo_package / "sections" / "hero.html").write_text("<h2>{{ section.settings.title }}</h2>", encoding="utf-8")

        snapshot = await sync_themes("demo", True, "ops", container=container)

        summaries = await container.snapshot_manager().list_snapshots("demo")
        assert snapshot.snapshot_number == 2
        assert [s.snapshot_number for s in summaries] == [2, 1]
