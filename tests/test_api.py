import pytest
from fastapi.testclient import TestClient

from themepress.core.container import ApplicationContainer
from themepress.main import create_app

ADMIN = "/api/admin/themes"
AUTHOR = {"X-Theme-Author": "alice"}


@pytest.fixture
def client(settings, demo_package):
    app = create_app(ApplicationContainer.build(settings))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def live_client(client):
    """Client with the demo theme synced, activated and published once."""
    assert client.post(f"{ADMIN}/demo/sync", headers=AUTHOR).status_code == 200
    assert client.post(f"{ADMIN}/demo/activate").status_code == 200
    assert client.post(f"{ADMIN}/demo/publish", headers=AUTHOR).status_code == 200
    return client


class TestThemeLifecycle:
    def test_sync_activate_publish_and_serve(self, client):
        response = client.post(f"{ADMIN}/sync", headers=AUTHOR)
        assert response.status_code == 200
        [report] = response.json()
        assert (report["theme_id"], report["written"]) == ("demo", 8)

        assert client.get(f"{ADMIN}/available").json()[0]["name"] == "Demo"
        assert client.post(f"{ADMIN}/demo/activate").json()["is_active"] is True
        assert client.get("/").status_code == 404

        response = client.post(f"{ADMIN}/demo/publish", headers=AUTHOR)
        assert response.status_code == 200
        snapshot = response.json()
        assert snapshot["snapshot_number"] == 1
        assert snapshot["published_by"] == "alice"
        assert len(snapshot["files"]) == 8

        page = client.get("/")
        assert page.status_code == 200
        assert "<h1>Welcome</h1>" in page.text
        assert "<style>body { color: red; }</style>" in page.text

        asset = client.get("/assets/theme.css")
        assert asset.status_code == 200
        assert asset.headers["content-type"].startswith("text/css")
        assert asset.text == "body { color: red; }"

    def test_author_defaults_when_header_missing(self, client):
        client.post(f"{ADMIN}/demo/sync")

        version = client.get(f"{ADMIN}/demo/files/content", params={"path": "layout/theme.html"}).json()

        assert version["author"] == "system"
        assert version["version_number"] == 1

    def test_unknown_theme(self, client):
        assert client.get(f"{ADMIN}/nope").status_code == 404
        assert client.post(f"{ADMIN}/nope/sync").status_code == 404

    def test_publishing_an_empty_draft_conflicts(self, client):
        response = client.post(f"{ADMIN}/ghost/publish", headers=AUTHOR)

        assert response.status_code == 409


class TestDraftEditing:
    def test_invalid_path_is_rejected(self, client):
        response = client.put(f"{ADMIN}/demo/files", json={"path": "../secrets.txt", "content": "x"}, headers=AUTHOR)

        assert response.status_code == 400

    def test_file_history(self, live_client):
        for body in ("a", "b"):
            response = live_client.put(
                f"{ADMIN}/demo/files",
                json={"path": "snippets/note.html", "content": body, "change_summary": f"set {body}"},
                headers=AUTHOR,
            )
            assert response.status_code == 200

        history = live_client.get(f"{ADMIN}/demo/files/history", params={"path": "snippets/note.html"}).json()

        assert history["total"] == 2
        assert [v["version_number"] for v in history["versions"]] == [2, 1]
        assert history["versions"][0]["change_summary"] == "set b"

    def test_section_edits_show_in_preview_only(self, live_client):
        response = live_client.patch(
            f"{ADMIN}/demo/templates/index/sections/hero", json={"settings": {"title": "Draft"}}, headers=AUTHOR
        )
        assert response.status_code == 200
        assert response.json()["document"]["sections"]["hero"]["settings"]["title"] == "Draft"

        preview = live_client.post(f"{ADMIN}/demo/preview/index", json={"context": {}})
        assert preview.status_code == 200
        assert "<h1>Draft</h1>" in preview.json()["html"]
        assert "<h1>Welcome</h1>" in live_client.get("/").text

    def test_section_blocks_route(self, live_client):
        blocks = [{"type": "slide", "settings": {"caption": "A"}}]

        response = live_client.put(
            f"{ADMIN}/demo/templates/index/sections/hero/blocks", json={"blocks": blocks}, headers=AUTHOR
        )

        assert response.status_code == 200
        assert response.json()["document"]["sections"]["hero"]["blocks"] == blocks

    def test_unknown_section(self, live_client):
        response = live_client.patch(
            f"{ADMIN}/demo/templates/index/sections/nope", json={"settings": {}}, headers=AUTHOR
        )

        assert response.status_code == 404

    def test_preview_reports_section_errors(self, live_client):
        live_client.put(
            f"{ADMIN}/demo/files", json={"path": "sections/rich-text.html", "content": "{% if %}"}, headers=AUTHOR
        )

        body = live_client.post(f"{ADMIN}/demo/preview/index").json()

        assert [e["section_id"] for e in body["section_errors"]] == ["text"]
        assert "<h1>Welcome</h1>" in body["html"]


class TestStorefront:
    def test_missing_page(self, live_client):
        assert live_client.get("/pages/nope").status_code == 404

    def test_missing_asset(self, live_client):
        assert live_client.get("/assets/missing.js").status_code == 404

    def test_broken_layout_renders_error_page(self, live_client):
        live_client.put(f"{ADMIN}/demo/files", json={"path": "layout/theme.html", "content": "{% for %}"}, headers=AUTHOR)
        assert live_client.post(f"{ADMIN}/demo/publish", headers=AUTHOR).status_code == 200

        response = live_client.get("/")

        assert response.status_code == 500
        assert "This page could not be displayed" in response.text

    def test_rollback_restores_previous_page(self, live_client):
        before = live_client.get("/").text
        live_client.put(
            f"{ADMIN}/demo/files",
            json={"path": "sections/rich-text.html", "content": "<div>{{ section.settings.body }}</div>"},
            headers=AUTHOR,
        )
        live_client.post(f"{ADMIN}/demo/publish", headers=AUTHOR)
        assert live_client.get("/").text != before

        response = live_client.post(f"{ADMIN}/demo/rollback", json={"snapshot_number": 1}, headers=AUTHOR)

        assert response.status_code == 200
        assert live_client.get("/").text == before
        summaries = live_client.get(f"{ADMIN}/demo/snapshots").json()
        assert [(s["snapshot_number"], s["is_active"]) for s in summaries] == [(2, False), (1, True)]
        diff = live_client.get(f"{ADMIN}/demo/snapshots/1/diff/2").json()
        assert diff["changed"] == ["sections/rich-text.html"]
        assert live_client.get(f"{ADMIN}/demo/snapshots/9").status_code == 404
