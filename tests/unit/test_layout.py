"""Tests for layout declaration and compilation."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from uiforge.core.config import UiForgeConfig
from uiforge.core.declarations import field, resource
from uiforge.core.errors import LayoutError
from uiforge.core.ir import LayoutTag
from uiforge.core.layout import (
    compile_layout,
    edit_layout,
    group,
    index_columns,
    inline,
    section,
    sections,
    show_layout,
    stacked,
)
from uiforge.core.naming import NamingPolicy
from uiforge.core.registry import build_registry


class Abc(BaseModel):
    a: str
    b: int
    c: bool


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry(blog):
    return build_registry(
        [
            resource("post", schema=blog.Post, context=blog.context, order_by="title"),
            resource("author", schema=blog.Author, context=blog.context),
        ],
        NamingPolicy.conventional(),
    )


def _tags(node) -> list[str]:
    return [child.tag.value for child in node.inner_elements]


# ---------------------------------------------------------------------------
# Default layouts
# ---------------------------------------------------------------------------


class TestDefaultLayouts:
    def test_show_and_form_wrap_fields_in_one_stacked_container(self) -> None:
        resources = build_registry([resource("abc", schema=Abc)])

        for tag in ("show", "form"):
            root = compile_layout("abc", tag, None, resources)
            assert root.tag == LayoutTag(tag)
            assert root.name == "abc"
            assert _tags(root) == ["stacked"]
            (container,) = root.inner_elements
            assert [leaf.tag for leaf in container.inner_elements] == [LayoutTag.FIELD] * 3
            assert root.field_names() == ["a", "b", "c"]

    def test_inline_container_from_config(self) -> None:
        resources = build_registry([resource("abc", schema=Abc)])
        config = UiForgeConfig(default_fields_layout="inline")

        root = compile_layout("abc", "form", None, resources, config)
        assert _tags(root) == ["inline"]

    def test_index_excludes_associations_and_omitted(self, registry) -> None:
        root = compile_layout("post", "index", None, registry)

        assert root.field_names() == [
            "id",
            "title",
            "body",
            "status",
            "views",
            "rating",
            "published_at",
            "settings",
            "author_id",
        ]
        assert all(child.tag == LayoutTag.FIELD for child in root.inner_elements)

    def test_index_order_by_from_resource(self, registry) -> None:
        root = compile_layout("post", "index", None, registry)
        assert root.opts["order_by"] == "title"

    def test_index_columns_option(self, blog) -> None:
        resources = build_registry(
            [resource("post", schema=blog.Post, columns=["title", "status"])]
        )
        root = compile_layout("post", "index", None, resources)
        assert root.field_names() == ["title", "status"]

    def test_show_includes_resolved_associations(self, registry) -> None:
        root = compile_layout("post", "show", None, registry)

        assert "author" in root.field_names()
        assert "comments" in root.field_names()
        assert "inserted_at" not in root.field_names()

    def test_show_skips_unresolved_associations(self, blog) -> None:
        resources = build_registry([resource("author", schema=blog.Author)])
        root = compile_layout("author", "show", None, resources)

        assert root.field_names() == ["id", "name", "email"]

    def test_embedded_resource_defaults(self, registry) -> None:
        root = compile_layout("post__comments", "form", None, registry)
        assert root.field_names() == ["body", "rating", "reply"]


# ---------------------------------------------------------------------------
# Declared layouts
# ---------------------------------------------------------------------------


class TestDeclaredLayouts:
    def test_bare_names_become_field_leaves(self, registry) -> None:
        root = compile_layout("post", "index", index_columns("post", "title", "status"), registry)

        assert _tags(root) == ["field", "field"]
        assert root.field_names() == ["title", "status"]

    def test_group_config(self, registry) -> None:
        root = compile_layout(
            "post", "show", show_layout("post", group("Overview", "title", "body")), registry
        )
        (box,) = root.inner_elements

        assert box.tag == LayoutTag.GROUP
        assert box.config == {"title": "Overview", "group_id": "overview-1"}
        assert box.name == "overview-1"

    def test_sections_and_tabs(self, registry) -> None:
        layout = edit_layout(
            "post",
            sections(
                section("Main", "title", "body"),
                section("Details", "status", group("Stats", "views", "rating"), default=True),
            ),
            inline("author", field("published_at", readonly=True)),
            edit_title="Edit post",
        )
        root = compile_layout("post", "form", layout, registry)

        assert root.opts == {"edit_title": "Edit post"}
        assert _tags(root) == ["sections", "inline"]

        tabs, row = root.inner_elements
        main, details = tabs.inner_elements
        assert tabs.config["sections_id"] == "sections-1"
        assert tabs.config["sections_index"] == 1
        assert tabs.config["tabs"] == [
            {"tab_id": "main-2", "label": "Main", "active": False},
            {"tab_id": "details-3", "label": "Details", "active": True},
        ]
        assert main.config == {
            "label": "Main",
            "tab_id": "main-2",
            "tab_index": 1,
            "tab_parent_id": None,
            "sections_id": "sections-1",
            "sections_index": 1,
            "active": False,
        }
        assert details.config["tab_index"] == 2
        assert details.config["active"] is True
        assert details.inner_elements[1].config["group_id"] == "stats-4"
        assert row.name == "inline-5"

    def test_first_section_active_by_default(self, registry) -> None:
        layout = show_layout("post", sections(section("A", "title"), section("B", "body")))
        root = compile_layout("post", "show", layout, registry)

        assert [s.config["active"] for s in root.inner_elements[0].inner_elements] == [True, False]

    def test_nested_sections_record_parent_tab(self, registry) -> None:
        layout = show_layout(
            "post",
            sections(section("Outer", sections(section("Inner", "title")))),
        )
        root = compile_layout("post", "show", layout, registry)

        outer = root.inner_elements[0].inner_elements[0]
        inner_sections = outer.inner_elements[0]
        inner = inner_sections.inner_elements[0]
        assert inner.config["tab_parent_id"] == outer.config["tab_id"]
        assert inner_sections.config["sections_index"] == 2

    def test_compiles_are_deterministic(self, registry) -> None:
        layout = edit_layout("post", sections(section("Main", "title"), section("More", "body")))

        first = compile_layout("post", "form", layout, registry)
        second = compile_layout("post", "form", layout, registry)
        assert first == second

    def test_leaf_overrides_stay_on_the_leaf(self, registry) -> None:
        layout = edit_layout("post", stacked(field("title", readonly=True)))
        root = compile_layout("post", "form", layout, registry)

        assert root.effective_opts("title") == {"readonly": True}
        assert registry["post"].fields["title"].readonly is False

    def test_opts_propagate_to_descendants(self, registry) -> None:
        layout = show_layout(
            "author",
            stacked("name", field("posts", order_by="title"), where=[("status", "published")]),
            page_title="Author",
        )
        root = compile_layout("author", "show", layout, registry)
        opts = root.effective_opts("posts")

        assert opts["order_by"] == "title"
        assert opts["where"] == [("status", "published")]
        assert opts["page_title"] == "Author"
        assert "order_by" not in root.effective_opts("name")

    def test_unresolved_association_still_compiles(self, blog) -> None:
        resources = build_registry([resource("author", schema=blog.Author)])
        root = compile_layout("author", "show", show_layout("author", "name", "posts"), resources)

        assert root.field_names() == ["name", "posts"]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestLayoutValidation:
    def test_unknown_field(self, registry) -> None:
        with pytest.raises(LayoutError, match="Unknown field 'subtitle'"):
            compile_layout("post", "show", show_layout("post", "title", "subtitle"), registry)

    def test_omitted_field(self, registry) -> None:
        with pytest.raises(LayoutError, match="omitted"):
            compile_layout("post", "index", index_columns("post", "inserted_at"), registry)

    def test_section_outside_sections(self, registry) -> None:
        with pytest.raises(LayoutError, match="inside 'sections'"):
            compile_layout("post", "form", edit_layout("post", section("Main", "title")), registry)

    def test_sections_only_hold_sections(self, registry) -> None:
        with pytest.raises(LayoutError, match="may only contain 'section'"):
            compile_layout("post", "form", edit_layout("post", sections("title")), registry)

    def test_index_columns_must_be_fields(self, registry) -> None:
        with pytest.raises(LayoutError, match="Index columns must be fields"):
            compile_layout("post", "index", index_columns("post", stacked("title")), registry)

    def test_root_must_match_tag(self, registry) -> None:
        with pytest.raises(LayoutError, match="Expected a 'show' root"):
            compile_layout("post", "show", edit_layout("post", "title"), registry)

    def test_unknown_leaf_option(self, registry) -> None:
        with pytest.raises(LayoutError, match="Unknown option"):
            compile_layout(
                "post", "form", edit_layout("post", field("title", colour="red")), registry
            )

    def test_invalid_index_order_by(self, registry) -> None:
        with pytest.raises(LayoutError, match="Invalid order_by"):
            layout = index_columns("post", "title", order_by=[("a", "b", "c")])
            compile_layout("post", "index", layout, registry)

    def test_error_names_resource_and_tag(self, registry) -> None:
        with pytest.raises(LayoutError) as exc_info:
            compile_layout("post", "show", show_layout("post", "nope"), registry)
        assert "resource 'post' (show layout)" in str(exc_info.value)
