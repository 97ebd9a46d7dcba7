import json
import logging

import pytest

from themepress.modules.common.exceptions import ContentNotFoundError
from themepress.modules.drafts import TemplateDocument, TemplateNotFoundError
from themepress.modules.rendering import (
    LayoutResolutionError,
    MappingResolver,
    ResolverTemplateSource,
    TemplateRenderer,
    strip_schema,
)

LAYOUT = "<html><body>{{ content_for_layout }}<footer>site footer</footer></body></html>"
HERO = "<h1>{{section.settings.title}}</h1>"


def hero_document(order=("hero",)):
    return TemplateDocument.from_dict(
        {"order": list(order), "sections": {"hero": {"type": "hero", "settings": {"title": "Hi"}}}}
    )


@pytest.fixture
def renderer():
    return TemplateRenderer()


class TestComposition:
    def test_renders_sections_into_layout(self, renderer):
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/hero.html": HERO})

        result = renderer.render(hero_document(), "layout/theme.html", resolver, {})

        assert result.html == "<html><body><h1>Hi</h1><footer>site footer</footer></body></html>"
        assert result.section_errors == ()

    def test_unknown_order_entries_are_skipped_silently(self, renderer):
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/hero.html": HERO})

        result = renderer.render(hero_document(("hero", "ghost")), "layout/theme.html", resolver, {})

        assert "<h1>Hi</h1>" in result.html
        assert result.section_errors == ()

    def test_sections_render_in_order(self, renderer):
        document = TemplateDocument.from_dict(
            {
                "order": ["b", "a"],
                "sections": {"a": {"type": "text", "settings": {"v": "A"}}, "b": {"type": "text", "settings": {"v": "B"}}},
            }
        )
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/text.html": "<p>{{ section.settings.v }}</p>"})

        result = renderer.render(document, "layout/theme.html", resolver)

        assert "<p>B</p>\n<p>A</p>" in result.html

    def test_section_context_includes_global_context(self, renderer):
        resolver = MappingResolver(
            {
                "layout/theme.html": "{{ site.title }}|{{ content_for_layout }}",
                "sections/hero.html": "{{ section.id }}:{{ section.type }}:{{ page.title }}:{{ section.blocks | length }}",
            }
        )

        result = renderer.render(
            hero_document(), "layout/theme.html", resolver, {"site": {"title": "Shop"}, "page": {"title": "Home"}}
        )

        assert result.html == "Shop|hero:hero:Home:0"

    def test_settings_are_escaped(self, renderer):
        document = TemplateDocument.from_dict(
            {"order": ["hero"], "sections": {"hero": {"type": "hero", "settings": {"title": "<script>x</script>"}}}}
        )
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/hero.html": HERO})

        result = renderer.render(document, "layout/theme.html", resolver)

        assert "<script>x</script>" not in result.html
        assert "&lt;script&gt;x&lt;/script&gt;" in result.html

    def test_rendering_is_deterministic(self, renderer):
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/hero.html": HERO})
        document = hero_document(("hero", "ghost"))

        first = renderer.render(document, "layout/theme.html", resolver, {"page": {"title": "x"}})
        second = renderer.render(document, "layout/theme.html", resolver, {"page": {"title": "x"}})

        assert first.html == second.html
        assert first == second


class TestSectionIsolation:
    def test_syntax_error_becomes_inline_marker(self, renderer):
        document = TemplateDocument.from_dict(
            {
                "order": ["hero", "broken"],
                "sections": {
                    "hero": {"type": "hero", "settings": {"title": "Hi"}},
                    "broken": {"type": "broken", "settings": {}},
                },
            }
        )
        resolver = MappingResolver(
            {
                "layout/theme.html": LAYOUT,
                "sections/hero.html": HERO,
                "sections/broken.html": "<p>{% if section.settings.title %}unclosed</p>",
            }
        )

        result = renderer.render(document, "layout/theme.html", resolver)

        assert "<h1>Hi</h1>" in result.html
        assert 'class="section-error" data-section-id="broken"' in result.html
        assert "<footer>site footer</footer>" in result.html
        [error] = result.section_errors
        assert (error.section_id, error.kind) == ("broken", "syntax")
        assert error.lineno == 1

    def test_runtime_error_is_isolated(self, renderer):
        document = TemplateDocument.from_dict(
            {"order": ["calc"], "sections": {"calc": {"type": "calc", "settings": {"n": 1}}}}
        )
        resolver = MappingResolver(
            {"layout/theme.html": LAYOUT, "sections/calc.html": "{{ section.settings.n + 'x' }}"}
        )

        result = renderer.render(document, "layout/theme.html", resolver)

        assert [e.kind for e in result.section_errors] == ["runtime"]
        assert "<footer>site footer</footer>" in result.html

    def test_missing_section_source_leaves_empty_slot(self, renderer):
        document = TemplateDocument.from_dict(
            {
                "order": ["missing", "hero"],
                "sections": {
                    "missing": {"type": "nowhere", "settings": {}},
                    "hero": {"type": "hero", "settings": {"title": "Hi"}},
                },
            }
        )
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/hero.html": HERO})

        result = renderer.render(document, "layout/theme.html", resolver)

        assert "<h1>Hi</h1>" in result.html
        assert "section-error" not in result.html
        [error] = result.section_errors
        assert (error.section_id, error.section_type, error.kind) == ("missing", "nowhere", "missing_source")

    def test_schema_blocks_are_stripped(self, renderer):
        source = '<h1>{{ section.settings.title }}</h1>\n{% schema %}\n{"name": "Hero", "settings": []}\n{% endschema %}'
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/hero.html": source})

        result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert result.section_errors == ()
        assert "Hero" not in result.html
        assert strip_schema("a{%- schema -%}x{%- endschema -%}b") == "ab"


class TestLayout:
    def test_missing_layout_is_fatal(self, renderer):
        resolver = MappingResolver({"sections/hero.html": HERO})

        with pytest.raises(LayoutResolutionError) as excinfo:
            renderer.render(hero_document(), "layout/theme.html", resolver)

        assert excinfo.value.layout_path == "layout/theme.html"

    def test_layout_syntax_error_is_fatal(self, renderer):
        resolver = MappingResolver({"layout/theme.html": "{% for %}{{ content_for_layout }}", "sections/hero.html": HERO})

        with pytest.raises(LayoutResolutionError):
            renderer.render(hero_document(), "layout/theme.html", resolver)

    def test_layout_without_placeholder_discards_sections(self, renderer, caplog):
        resolver = MappingResolver({"layout/theme.html": "<main>static</main>", "sections/hero.html": HERO})

        with caplog.at_level(logging.WARNING, logger="themepress"):
            result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert result.html == "<main>static</main>"
        assert "no content placeholder" in caplog.text

    def test_placeholder_is_substituted_once(self, renderer):
        layout = "<a>{{ content_for_layout }}</a><b>{{ content_for_layout }}</b>"
        resolver = MappingResolver({"layout/theme.html": layout, "sections/hero.html": HERO})

        result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert result.html == "<a><h1>Hi</h1></a><b></b>"

    def test_custom_placeholder_token(self):
        renderer = TemplateRenderer(placeholder_token="<!-- CONTENT -->")
        resolver = MappingResolver(
            {"layout/theme.html": "<main><!-- CONTENT --></main>", "sections/hero.html": HERO}
        )

        result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert result.html == "<main><h1>Hi</h1></main>"

    def test_content_variable_without_token_stays_empty(self, renderer, caplog):
        layout = "<main>{{content_for_layout}}</main><aside>{{content_for_layout}}</aside>"
        resolver = MappingResolver({"layout/theme.html": layout, "sections/hero.html": HERO})

        with caplog.at_level(logging.WARNING, logger="themepress"):
            result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert result.html == "<main></main><aside></aside>"
        assert "no content placeholder" in caplog.text

    def test_custom_token_is_the_only_content_slot(self):
        renderer = TemplateRenderer(placeholder_token="<!--CONTENT-->")
        resolver = MappingResolver(
            {
                "layout/theme.html": "<main><!--CONTENT--></main><p>{{ content_for_layout }}</p>",
                "sections/hero.html": HERO,
            }
        )

        result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert result.html == "<main><h1>Hi</h1></main><p></p>"
        assert result.html.count("<h1>Hi</h1>") == 1

    def test_section_output_is_not_reparsed_by_layout(self, renderer):
        document = TemplateDocument.from_dict(
            {"order": ["hero"], "sections": {"hero": {"type": "hero", "settings": {"title": "{{ 7 * 7 }}"}}}}
        )
        resolver = MappingResolver({"layout/theme.html": LAYOUT, "sections/hero.html": "{{ section.settings.title }}"})

        result = renderer.render(document, "layout/theme.html", resolver)

        assert "{{ 7 * 7 }}" in result.html
        assert "49" not in result.html


class TestAssets:
    LAYOUT = "<head>{{ content_for_header }}</head><body>{{ content_for_layout }}{{ content_for_footer }}</body>"

    def test_assets_are_embedded(self, renderer):
        resolver = MappingResolver(
            {
                "layout/theme.html": self.LAYOUT,
                "sections/hero.html": HERO,
                "assets/theme.css": "h1 { color: red; }",
                "assets/theme.js": "console.log(1);",
            }
        )

        result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert "<style>h1 { color: red; }</style>" in result.html
        assert "<script>console.log(1);</script>" in result.html
        assert dict(result.assets) == {"assets/theme.css": "h1 { color: red; }", "assets/theme.js": "console.log(1);"}

    def test_assets_can_be_referenced(self):
        renderer = TemplateRenderer(embed_assets=False, asset_url_prefix="/static/theme/")
        resolver = MappingResolver(
            {"layout/theme.html": self.LAYOUT, "sections/hero.html": HERO, "assets/theme.css": "x", "assets/theme.js": "y"}
        )

        result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert '<link rel="stylesheet" href="/static/theme/theme.css">' in result.html
        assert '<script src="/static/theme/theme.js"></script>' in result.html

    def test_missing_assets_leave_slots_empty(self, renderer):
        resolver = MappingResolver({"layout/theme.html": self.LAYOUT, "sections/hero.html": HERO})

        result = renderer.render(hero_document(), "layout/theme.html", resolver)

        assert result.html == "<head></head><body><h1>Hi</h1></body>"
        assert dict(result.assets) == {}


class TestFilters:
    def render_snippet(self, renderer, snippet, settings=None):
        document = TemplateDocument.from_dict(
            {"order": ["s"], "sections": {"s": {"type": "snippet", "settings": settings or {}}}}
        )
        resolver = MappingResolver({"layout/theme.html": "{{ content_for_layout }}", "sections/snippet.html": snippet})
        result = renderer.render(document, "layout/theme.html", resolver)
        assert result.section_errors == ()
        return result.html

    @pytest.mark.parametrize(
        ("snippet", "expected"),
        [
            ("{{ 'logo.png' | asset_url }}", "/assets/logo.png"),
            ("{{ 'hero.jpg' | image_url }}", "/images/hero.jpg"),
            ("{{ '<b>bold</b> text' | strip_html }}", "bold text"),
            ("{{ 'one two three four' | truncatewords(2) }}", "one two..."),
            ("{{ 'short' | truncatewords(5) }}", "short"),
            ("{{ 'a\nb' | strip_newlines }}", "a b"),
            ("{{ 'a & b' | url_encode }}", "a+%26+b"),
            ("{{ 'a+%26+b' | url_decode }}", "a &amp; b"),
            ("{{ '2024-03-05' | date('%Y/%m/%d') }}", "2024/03/05"),
            ("{{ 'not a date' | date }}", "not a date"),
            ("{{ [1, 2, 3, 4] | limit(2) | join(',') }}", "1,2"),
            ("{{ [1, 2, 3, 4] | offset(3) | join(',') }}", "4"),
        ],
    )
    def test_filter_output(self, renderer, snippet, expected):
        assert self.render_snippet(renderer, snippet) == expected

    def test_newline_to_br_escapes_content(self, renderer):
        html = self.render_snippet(renderer, "{{ section.settings.body | newline_to_br }}", {"body": "<i>a</i>\nb"})

        assert html == "&lt;i&gt;a&lt;/i&gt;<br>b"

    def test_where_and_json(self, renderer):
        items = [{"tag": "a", "n": 1}, {"tag": "b", "n": 2}, {"tag": "a", "n": 3}]
        html = self.render_snippet(
            renderer,
            "{% for item in section.settings.items | where('tag', 'a') %}{{ item.n }}{% endfor %}|{{ section.settings.meta | json }}",
            {"items": items, "meta": {"b": 1, "a": "<x>"}},
        )

        assert html == '13|{"a": "\\u003cx\\u003e", "b": 1}'

    def test_time_ago(self):
        from datetime import datetime, timedelta, timezone

        from themepress.modules.rendering.filters import time_ago

        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert time_ago(now - timedelta(seconds=10), now=now) == "just now"
        assert time_ago(now - timedelta(minutes=5), now=now) == "5 minutes ago"
        assert time_ago(now - timedelta(hours=1), now=now) == "1 hour ago"
        assert time_ago(now - timedelta(days=3), now=now) == "3 days ago"
        assert time_ago("garbage", now=now) == "garbage"

    def test_filter_tables_are_per_renderer(self):
        shouting = TemplateRenderer(extra_filters={"shout": lambda value: str(value).upper()})
        plain = TemplateRenderer()

        assert "shout" in shouting.filters
        assert "shout" not in plain.filters
        assert self.render_snippet(shouting, "{{ 'hi' | shout }}") == "HI"
        with pytest.raises(TypeError):
            shouting.filters["other"] = str


class TestTemplateSource:
    def test_render_template_reads_document_layout_and_settings(self, renderer):
        resolver = MappingResolver(
            {
                "templates/page.json": json.dumps(
                    {
                        "layout": "alternate",
                        "settings": {"wide": True},
                        "order": ["hero"],
                        "sections": {"hero": {"type": "hero", "settings": {"title": "Hi"}}},
                    }
                ),
                "layout/alternate.html": "<div data-accent='{{ theme_settings.accent }}' data-wide='{{ template_settings.wide }}' data-t='{{ template }}'>{{ content_for_layout }}</div>",
                "sections/hero.html": HERO,
                "config/settings_data.json": json.dumps({"current": {"accent": "blue"}}),
            }
        )

        result = renderer.render_template(ResolverTemplateSource(resolver), "page", {})

        assert result.html == "<div data-accent='blue' data-wide='True' data-t='page'><h1>Hi</h1></div>"

    def test_missing_template(self, renderer):
        with pytest.raises(TemplateNotFoundError):
            renderer.render_template(ResolverTemplateSource(MappingResolver({})), "index")

    def test_mapping_resolver_is_read_only(self):
        files = {"a.txt": "a"}
        resolver = MappingResolver(files)
        files["a.txt"] = "changed"

        assert resolver.resolve("a.txt") == "a"
        with pytest.raises(ContentNotFoundError):
            resolver.resolve("b.txt")
