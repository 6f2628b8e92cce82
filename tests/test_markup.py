"""
Markup helper and page trees.
"""
import pytest
from markupsafe import Markup

from markup import h, render_html
from pages import ALLOWED_PATHS, PAGE_TITLES, build_page, not_found


class TestMarkup:
    def test_nested_render(self):
        tree = h("div", {"id": "app", "class": "layout"}, h("span", None, "TX-2"), "!")
        assert render_html(tree) == '<div id="app" class="layout"><span>TX-2</span>!</div>'

    def test_escapes_text_and_attributes(self):
        html = render_html(h("a", {"title": '"<x>"'}, "<script>"))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert 'title="&#34;&lt;x&gt;&#34;"' in html

    def test_markup_passes_through(self):
        assert render_html(h("p", None, Markup("<b>ok</b>"))) == "<p><b>ok</b></p>"

    def test_none_and_false_props_omitted_true_is_bare(self):
        html = render_html(h("button", {"class": None, "hidden": False, "disabled": True}))
        assert html == "<button disabled></button>"

    def test_void_elements_have_no_closing_tag(self):
        assert render_html(h("img", {"src": "/x.svg"})) == '<img src="/x.svg">'

    def test_children_flattened_and_none_skipped(self):
        tree = h("ul", None, [h("li", None, "a"), [h("li", None, "b")]], None)
        assert render_html(tree) == "<ul><li>a</li><li>b</li></ul>"

    def test_numbers_render_as_text(self):
        assert render_html(h("span", None, 42)) == "<span>42</span>"

    def test_find_and_text(self):
        tree = h("div", None, h("p", {"id": "x"}, "hello ", h("b", None, "world")))
        assert tree.find("x").text() == "hello world"
        assert tree.find("missing") is None


class TestPages:
    @pytest.mark.parametrize("path", sorted(ALLOWED_PATHS))
    def test_every_page_has_layout(self, path):
        tree = build_page(path)
        assert tree.find("app") is not None
        html = render_html(tree)
        assert "<header>" in html and "<footer>" in html
        assert path in PAGE_TITLES

    def test_unknown_page(self):
        assert build_page("/nope") is None

    def test_active_nav_link(self):
        html = render_html(build_page("/docs"))
        assert '<a href="/docs" class="active">Docs</a>' in html
        assert '<a href="/">Home</a>' in html

    def test_home_has_all_sections(self):
        tree = build_page("/")
        for section in ("hero", "why", "docs", "docs-content", "docs-deepdive", "examples",
                        "hud-widget"):
            assert tree.find(section) is not None, section

    def test_hud_widget_shows_counter(self):
        tree = build_page("/", count=7)
        assert tree.find("hud-count").text() == "7"

    def test_code_samples_are_escaped(self):
        html = render_html(build_page("/docs"))
        assert "world.getComponent&lt;Counter&gt;" in html

    def test_not_found_tree(self):
        text = not_found().text()
        assert "SYSTEM CRASH // 404" in text
        assert "Signal Lost" in text
