import json

import pytest

from themepress.modules.drafts import InvalidTemplateDocumentError, SectionNotFoundError, TemplateNotFoundError


class TestTemplateDocumentEdits:
    async def test_update_section_saves_new_version(self, drafts, seed_theme):
        await seed_theme()

        result = await drafts.update_section("demo", "index", "hero", {"title": "Updated"}, "alice")

        assert result.version_number == 2
        assert result.warnings == []
        stored = json.loads(await drafts.files.read("demo", "templates/index.json"))
        assert stored["sections"]["hero"]["settings"]["title"] == "Updated"

    async def test_edit_that_changes_nothing_creates_no_version(self, drafts, seed_theme):
        await seed_theme()
        first = await drafts.update_section("demo", "index", "hero", {"title": "Again"}, "alice")

        second = await drafts.update_section("demo", "index", "hero", {"title": "Again"}, "alice")

        assert second.version_number == first.version_number

    async def test_update_blocks_saves_one_version(self, drafts, seed_theme):
        await seed_theme()
        blocks = [{"type": "slide", "settings": {"caption": "One"}}]

        result = await drafts.update_blocks("demo", "index", "hero", blocks, "alice")

        assert result.version_number == 2
        assert result.document.sections["hero"].blocks == blocks
        page = await drafts.files.history("demo", "templates/index.json")
        assert page.total == 2

    async def test_update_blocks_rejects_non_list(self, drafts, seed_theme):
        await seed_theme()

        with pytest.raises(InvalidTemplateDocumentError):
            await drafts.update_blocks("demo", "index", "hero", {"type": "slide"}, "alice")

    async def test_add_section_creates_missing_template(self, drafts):
        result = await drafts.add_section("demo", "product", "gallery", "alice", settings={"columns": 3})

        assert result.version_number == 1
        document = await drafts.load_document("demo", "product")
        assert document.order == ["gallery"]
        assert document.sections["gallery"].settings == {"columns": 3}

    async def test_remove_and_reorder(self, drafts, seed_theme):
        await seed_theme()

        await drafts.reorder_sections("demo", "index", ["text", "hero"], "alice")
        result = await drafts.remove_section("demo", "index", "hero", "alice")

        assert result.document.order == ["text"]
        assert result.version_number == 3

    async def test_dangling_order_is_saved_with_warning(self, drafts, seed_theme):
        await seed_theme()

        def add_ghost(document):
            document.order.append("ghost")

        result = await drafts.update_template_document("demo", "index", add_ghost, "alice")

        assert result.warnings == ["Order references unknown section 'ghost'"]
        document = await drafts.load_document("demo", "index")
        assert document.order[-1] == "ghost"

    async def test_unknown_template_and_section(self, drafts, seed_theme):
        await seed_theme()

        with pytest.raises(TemplateNotFoundError):
            await drafts.load_document("demo", "missing")
        with pytest.raises(TemplateNotFoundError):
            await drafts.update_section("demo", "missing", "hero", {}, "alice")
        with pytest.raises(SectionNotFoundError):
            await drafts.update_section("demo", "index", "ghost", {}, "alice")

    async def test_returned_document_is_private(self, drafts, seed_theme):
        await seed_theme()

        result = await drafts.update_section("demo", "index", "hero", {"title": "Mine"}, "alice")
        result.document.sections["hero"].settings["title"] = "mutated"

        document = await drafts.load_document("demo", "index")
        assert document.sections["hero"].settings["title"] == "Mine"


class TestWorkspace:
    async def test_workspace_tracks_owner_and_edits(self, drafts):
        empty = await drafts.workspace("demo")
        assert empty.owner is None

        await drafts.save_file("demo", "sections/hero.html", "<h1>x</h1>", "alice")
        await drafts.save_file("demo", "sections/hero.html", "<h1>y</h1>", "bob")

        workspace = await drafts.workspace("demo")
        assert workspace.owner == "alice"
        assert workspace.updated_at is not None
        assert workspace.base_snapshot_number is None

    async def test_current_tree_reflects_saves_and_deletes(self, drafts):
        await drafts.save_file("demo", "a.txt", "a", "alice")
        await drafts.save_file("demo", "b.txt", "b", "alice")
        await drafts.delete_file("demo", "a.txt", "alice")

        assert await drafts.current_tree("demo") == {"b.txt": "b"}
