import pytest

from themepress.modules.common.exceptions import InvalidPathError
from themepress.modules.files import determine_file_type, layout_path, section_path, template_path, validate_path


class TestValidatePath:
    @pytest.mark.parametrize(
        "path",
        ["templates/index.json", "sections/hero.html", "assets/img/logo.svg", "README.md", "a..b/c.txt"],
    )
    def test_accepts_clean_relative_paths(self, path):
        assert validate_path(path) == path

    @pytest.mark.parametrize(
        "path",
        [
            "",
            "../secrets.txt",
            "templates/../../etc/passwd",
            "/etc/passwd",
            "~/notes.txt",
            "C:/Windows/win.ini",
            "sections\\hero.html",
            "templates//index.json",
            "./templates/index.json",
            "templates/index.json/",
            "bad\0name",
        ],
    )
    def test_rejects_unsafe_paths(self, path):
        with pytest.raises(InvalidPathError):
            validate_path(path)

    def test_rejects_overlong_paths(self):
        with pytest.raises(InvalidPathError):
            validate_path("a/" * 300 + "b")


class TestFileTypes:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("templates/index.json", "template"),
            ("sections/hero.html", "section"),
            ("layout/theme.html", "layout"),
            ("assets/theme.css", "asset"),
            ("config/settings_data.json", "config"),
            ("locales/en.json", "other"),
        ],
    )
    def test_file_type_follows_prefix(self, path, expected):
        assert determine_file_type(path) == expected

    def test_conventional_paths(self):
        assert template_path("index") == "templates/index.json"
        assert section_path("rich-text") == "sections/rich-text.html"
        assert layout_path("theme") == "layout/theme.html"

    def test_conventional_paths_are_validated(self):
        with pytest.raises(InvalidPathError):
            section_path("../../config/secrets")
