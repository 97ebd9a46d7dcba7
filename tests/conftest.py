import json
from pathlib import Path

import pytest

from themepress.core.config import DatabaseSettings, Settings, ThemeSettings
from themepress.core.container import ApplicationContainer
from themepress.infrastructure.database.session import init_db

DEMO_LAYOUT = (
    "<html><head>{{ content_for_header }}</head>"
    "<body>{{ content_for_layout }}<footer>{{ theme_settings.accent }}</footer>{{ content_for_footer }}</body></html>"
)

DEMO_THEME = {
    "config/theme.json": json.dumps({"name": "Demo", "version": "1.0.0", "description": "Demo theme"}),
    "config/settings_data.json": json.dumps({"current": {"accent": "#ff0000"}}),
    "layout/theme.html": DEMO_LAYOUT,
    "templates/index.json": json.dumps(
        {
            "order": ["hero", "text"],
            "sections": {
                "hero": {"type": "hero", "settings": {"title": "Welcome"}},
                "text": {"type": "rich-text", "settings": {"body": "Hello"}},
            },
        }
    ),
    "sections/hero.html": '<h1>{{ section.settings.title }}</h1>{% schema %}{"name": "Hero"}{% endschema %}',
    "sections/rich-text.html": "<p>{{ section.settings.body }}</p>",
    "assets/theme.css": "body { color: red; }",
    "assets/theme.js": "console.log('demo');",
}


def write_package(root: Path, files: dict[str, str]) -> Path:
    for path, content in files.items():
        target = root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    themes_root = tmp_path / "themes"
    themes_root.mkdir()
    return Settings(
        environment="test",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'themepress.db'}"),
        themes=ThemeSettings(root=themes_root),
    )


@pytest.fixture
def demo_files() -> dict[str, str]:
    return dict(DEMO_THEME)


@pytest.fixture
def demo_package(settings: Settings, demo_files: dict[str, str]) -> Path:
    return write_package(settings.themes.root / "demo", demo_files)


@pytest.fixture
async def container(settings: Settings):
    container = ApplicationContainer.build(settings)
    await init_db(container.engine)
    yield container
    await container.dispose()


@pytest.fixture
def file_store(container: ApplicationContainer):
    return container.file_store()


@pytest.fixture
def drafts(container: ApplicationContainer):
    return container.draft_service()


@pytest.fixture
def snapshots(container: ApplicationContainer):
    return container.snapshot_manager()


@pytest.fixture
def themes(container: ApplicationContainer):
    return container.theme_service()


@pytest.fixture
def seed_theme(file_store, demo_files):
    """Write the demo theme straight into the store as theme ``demo``."""

    async def _seed(theme_id: str = "demo", files: dict[str, str] | None = None) -> str:
        for path, content in (files or demo_files).items():
            await file_store.write(theme_id, path, content, "tester")
        return theme_id

    return _seed


@pytest.fixture
def make_package(settings: Settings):
    """Write a packaged theme directory under the configured themes root."""

    def _make(slug: str, files: dict[str, str]) -> Path:
        return write_package(settings.themes.root / slug, files)

    return _make
