"""Tests for CRUD operation resolution."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from uiforge.adapters import DeclarativeAdapter, SimpleSchemaAdapter
from uiforge.core.declarations import resource
from uiforge.core.errors import OperationResolutionError
from uiforge.core.ir import ActionKind, ActionMeta, OperationName
from uiforge.core.operations import resolve_operation, resolve_operations, select_action

# ---------------------------------------------------------------------------
# Selection policy
# ---------------------------------------------------------------------------


class TestSelectAction:
    def test_primary_wins(self) -> None:
        actions = [
            ActionMeta(name="list", kind=ActionKind.READ),
            ActionMeta(name="index", kind=ActionKind.READ, primary=True),
        ]
        assert select_action(actions).name == "index"

    def test_first_when_no_primary(self) -> None:
        actions = [
            ActionMeta(name="update", kind=ActionKind.UPDATE),
            ActionMeta(name="restock", kind=ActionKind.UPDATE),
        ]
        assert select_action(actions).name == "update"

    def test_empty(self) -> None:
        assert select_action([]) is None


# ---------------------------------------------------------------------------
# Declarative backend
# ---------------------------------------------------------------------------


class TestDeclarativeOperations:
    @pytest.fixture
    def adapter(self) -> DeclarativeAdapter:
        return DeclarativeAdapter()

    def test_primary_read_action_for_list(self, adapter, inventory) -> None:
        declaration = resource("product", schema=inventory.Product, context=inventory.domain)
        ref = resolve_operation(adapter, declaration, OperationName.LIST)

        assert ref.action.name == "index"
        assert ref.target is inventory.Product
        assert ref.context is inventory.domain
        assert ref.action_kind == ActionKind.READ

    def test_paginated_list_filters_candidates(self, adapter, inventory) -> None:
        declaration = resource("product", schema=inventory.Product)
        ref = resolve_operation(adapter, declaration, "list_paginated")

        assert ref.action.name == "paged"
        assert ref.action.pagination is True

    def test_fallback_to_first(self, adapter, inventory) -> None:
        declaration = resource("product", schema=inventory.Product)
        assert resolve_operation(adapter, declaration, "update").action.name == "update"
        assert resolve_operation(adapter, declaration, "change").action.name == "update"

    def test_named_action_restricts_candidates(self, adapter, inventory) -> None:
        declaration = resource(
            "product",
            schema=inventory.Product,
            operations={"update_action": "restock"},
        )
        assert resolve_operation(adapter, declaration, "update").action.name == "restock"

    def test_generic_key_takes_precedence_over_alias(self, adapter, inventory) -> None:
        declaration = resource(
            "product",
            schema=inventory.Product,
            operations={"list": "list", "read_action": "paged"},
        )
        assert resolve_operation(adapter, declaration, "list").action.name == "list"

    def test_wrong_kind_raises(self, adapter, inventory) -> None:
        declaration = resource(
            "product", schema=inventory.Product, operations={"destroy_action": "restock"}
        )
        with pytest.raises(OperationResolutionError) as exc_info:
            resolve_operation(adapter, declaration, "delete")

        message = str(exc_info.value)
        assert "resource 'product'" in message
        assert "'restock'" in message
        assert "'destroy'" in message

    def test_unknown_named_action_is_reported(self, adapter, inventory) -> None:
        declaration = resource(
            "product", schema=inventory.Product, operations={"get_action": "lookup"}
        )
        with pytest.raises(OperationResolutionError) as exc_info:
            resolve_operation(adapter, declaration, "get")
        assert exc_info.value.context.searched == ("lookup",)

    def test_operation_without_action_kind(self, adapter, inventory, monkeypatch) -> None:
        monkeypatch.setattr(OperationName, "action_kind", property(lambda self: None))
        declaration = resource("product", schema=inventory.Product)

        with pytest.raises(OperationResolutionError, match="no backend action kind"):
            resolve_operation(adapter, declaration, "list")

    def test_no_paginated_candidate_raises(self, adapter, inventory) -> None:
        declaration = resource(
            "product", schema=inventory.Product, operations={"list_paginated": "index"}
        )
        with pytest.raises(OperationResolutionError, match="pagination is not supported"):
            resolve_operation(adapter, declaration, "list_paginated")

    def test_interface_name_through_domain(self, adapter, inventory) -> None:
        declaration = resource(
            "product",
            context=inventory.domain,
            operations={"read_action": "list_products"},
        )
        ref = resolve_operation(adapter, declaration, "list")

        assert ref.target is inventory.Product
        assert ref.action.name == "list"

    def test_default_new(self, adapter, inventory) -> None:
        declaration = resource("product", schema=inventory.Product)
        ref = resolve_operation(adapter, declaration, "new")
        entity = ref.handler({"name": "Bolt"}, {})

        assert isinstance(entity, inventory.Product)
        assert entity.name == "Bolt"
        assert ref.action_kind is None

    def test_resolve_all(self, adapter, inventory) -> None:
        refs = resolve_operations(adapter, resource("category", schema=inventory.Category))
        assert set(refs) == set(OperationName)
        assert refs[OperationName.DELETE].action.name == "destroy"


# ---------------------------------------------------------------------------
# Simple-schema backend
# ---------------------------------------------------------------------------


class TestSimpleSchemaOperations:
    @pytest.fixture
    def adapter(self) -> SimpleSchemaAdapter:
        return SimpleSchemaAdapter()

    def test_conventional_functions(self, adapter, blog) -> None:
        refs = resolve_operations(adapter, resource("post", schema=blog.Post, context=blog.context))

        assert refs[OperationName.LIST].handler is blog.context.list_posts
        assert refs[OperationName.LIST_PAGINATED].handler is blog.context.list_posts_paginated
        assert refs[OperationName.GET].handler is blog.context.get_post
        assert refs[OperationName.DELETE].handler is blog.context.delete_post
        assert refs[OperationName.CHANGE].action.name == "change_post"

    def test_fetch_fallback(self, adapter, blog) -> None:
        context = SimpleNamespace(fetch_post=lambda id, opts: None)
        declaration = resource("post", schema=blog.Post, context=context)
        assert resolve_operation(adapter, declaration, "get").action.name == "fetch_post"

    def test_wrong_arity_is_not_a_candidate(self, adapter, blog) -> None:
        context = SimpleNamespace(get_post=lambda id: None)
        declaration = resource("post", schema=blog.Post, context=context)

        with pytest.raises(OperationResolutionError, match="it is of the wrong type"):
            resolve_operation(adapter, declaration, "get")

    def test_missing_function_reports_searched_names(self, adapter, blog) -> None:
        declaration = resource("post", schema=blog.Post, context=SimpleNamespace())

        with pytest.raises(OperationResolutionError) as exc_info:
            resolve_operation(adapter, declaration, "list")

        assert exc_info.value.context.searched == ("list_posts", "list_post")
        assert "searched: list_posts, list_post" in str(exc_info.value)

    def test_named_function(self, adapter, blog) -> None:
        context = SimpleNamespace(published_posts=lambda opts: [])
        declaration = resource(
            "post",
            schema=blog.Post,
            context=context,
            operations={"list_function": "published_posts"},
        )
        assert resolve_operation(adapter, declaration, "list").handler is context.published_posts

    def test_callable_override(self, adapter, blog) -> None:
        def top_posts(opts):
            return []

        declaration = resource(
            "post", schema=blog.Post, context=blog.context, operations={"list": top_posts}
        )
        ref = resolve_operation(adapter, declaration, "list")

        assert ref.handler is top_posts
        assert ref.action.name == "top_posts"

    def test_callable_override_arity(self, adapter, blog) -> None:
        declaration = resource(
            "post", schema=blog.Post, context=blog.context, operations={"get": lambda id: None}
        )
        with pytest.raises(OperationResolutionError, match="does not fit"):
            resolve_operation(adapter, declaration, "get")

    def test_new_override(self, adapter, blog) -> None:
        def new_post(attrs, opts):
            return blog.Post(title="Untitled", **attrs)

        declaration = resource(
            "post", schema=blog.Post, context=blog.context, operations={"new": new_post}
        )
        assert resolve_operation(adapter, declaration, "new").handler is new_post

    def test_new_function_by_name(self, adapter, blog) -> None:
        context = SimpleNamespace(make_post=lambda attrs, opts: blog.Post(title="Draft"))
        declaration = resource(
            "post", schema=blog.Post, context=context, operations={"new_function": "make_post"}
        )
        assert resolve_operation(adapter, declaration, "new").handler is context.make_post

    def test_new_function_name_not_on_context(self, adapter, blog) -> None:
        declaration = resource(
            "post", schema=blog.Post, context=SimpleNamespace(), operations={"new": "make_post"}
        )
        with pytest.raises(OperationResolutionError, match="function of 2 arguments"):
            resolve_operation(adapter, declaration, "new")

    def test_new_override_with_wrong_arity(self, adapter, blog) -> None:
        declaration = resource(
            "post", schema=blog.Post, context=blog.context, operations={"new_function": lambda a: a}
        )
        with pytest.raises(OperationResolutionError, match="function of 2 arguments"):
            resolve_operation(adapter, declaration, "new")

    def test_default_new_constructs_blank_entity(self, adapter, blog) -> None:
        declaration = resource("post", schema=blog.Post, context=blog.context)
        entity = resolve_operation(adapter, declaration, "new").handler({"title": "Hi"}, {})

        assert isinstance(entity, blog.Post)
        assert entity.title == "Hi"

    def test_no_context_yields_placeholders(self, adapter, blog) -> None:
        refs = resolve_operations(adapter, resource("post", schema=blog.Post))

        assert refs[OperationName.LIST].undefined is True
        assert refs[OperationName.LIST].handler is None
        # blank entities can still be built from the schema
        assert refs[OperationName.NEW].undefined is False

    def test_nothing_at_all_yields_placeholders(self, adapter) -> None:
        refs = resolve_operations(adapter, resource("note"))
        assert all(ref.undefined for ref in refs.values())

    def test_disabled_operations_are_left_out(self, adapter, blog) -> None:
        context = SimpleNamespace(
            list_posts=lambda opts: [], get_post=lambda id, opts: None
        )
        declaration = resource(
            "post",
            schema=blog.Post,
            context=context,
            operations={
                "list_paginated": False,
                "create": False,
                "update": False,
                "change": False,
                "delete": False,
            },
        )
        refs = resolve_operations(adapter, declaration)

        assert set(refs) == {OperationName.LIST, OperationName.GET, OperationName.NEW}
        with pytest.raises(OperationResolutionError, match="disabled"):
            resolve_operation(adapter, declaration, "delete")
