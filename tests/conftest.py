"""Shared pytest fixtures for uiforge tests.

Two sample backends are provided:

- ``blog``: pydantic schemas with convention-named context functions
  (simple-schema backend)
- ``inventory``: declarative resources grouped in a domain
  (declarative backend)
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import Annotated, Any, Literal

import pytest
from pydantic import BaseModel

from uiforge.adapters import (
    Action,
    Attribute,
    BelongsTo,
    DeclarativeResource,
    Domain,
    HasMany,
    Interface,
    Relationship,
    ResourceDefinition,
)
from uiforge.core.ir import ActionKind, RelationshipKind


def crud_functions(module: str, source: str) -> dict[str, Any]:
    """Context functions following the simple-schema naming convention."""

    def list_all(opts):
        return []

    def list_paginated(opts):
        return []

    def get_one(id, opts):
        return None

    def create(attrs):
        return attrs

    def update(entity, attrs):
        return entity

    def change(entity, attrs):
        return attrs

    def delete(entity):
        return entity

    return {
        f"list_{source}": list_all,
        f"list_{source}_paginated": list_paginated,
        f"get_{module}": get_one,
        f"create_{module}": create,
        f"update_{module}": update,
        f"change_{module}": change,
        f"delete_{module}": delete,
    }


# ---------------------------------------------------------------------------
# Simple-schema blog backend
# ---------------------------------------------------------------------------


class Reply(BaseModel):
    body: str
    signed: bool = False


class Comment(BaseModel):
    body: str
    rating: int | None = None
    reply: Reply | None = None


class Post(BaseModel):
    id: int | None = None
    title: str
    body: str = ""
    status: Literal["draft", "published"] = "draft"
    views: int = 0
    rating: Decimal | None = None
    published_at: datetime | None = None
    settings: dict[str, str] = {}
    author_id: Annotated[int | None, BelongsTo(lambda: Author)] = None
    comments: list[Comment] = []
    inserted_at: datetime | None = None


class Author(BaseModel):
    id: int | None = None
    name: str
    email: str | None = None
    posts: Annotated[list[Post], HasMany(Post, foreign_key="author_id")] = []


@pytest.fixture
def blog() -> SimpleNamespace:
    """Blog schemas and a context module exposing their CRUD functions."""
    context = SimpleNamespace(
        **crud_functions("post", "posts"),
        **crud_functions("author", "authors"),
    )
    return SimpleNamespace(
        Post=Post,
        Author=Author,
        Comment=Comment,
        Reply=Reply,
        context=context,
    )


# ---------------------------------------------------------------------------
# Declarative inventory backend
# ---------------------------------------------------------------------------


class Category(DeclarativeResource):
    definition = ResourceDefinition(
        attributes=[
            Attribute(name="id", type="uuid", allow_nil=False),
            Attribute(name="name", type="string", allow_nil=False),
        ],
        actions=[
            Action(name="read", kind=ActionKind.READ, primary=True, pagination=True),
            Action(name="create", kind=ActionKind.CREATE, primary=True),
            Action(name="update", kind=ActionKind.UPDATE, primary=True),
            Action(name="destroy", kind=ActionKind.DESTROY, primary=True),
        ],
    )


class Product(DeclarativeResource):
    definition = ResourceDefinition(
        attributes=[
            Attribute(name="id", type="uuid", allow_nil=False),
            Attribute(name="reference", type="string"),
            Attribute(name="name", type="string", allow_nil=False),
            Attribute(name="quantity", type="decimal"),
            Attribute(name="status", type="atom", one_of=("active", "discontinued")),
            Attribute(name="attrs", type="map"),
            Attribute(name="category_id", type="uuid"),
            Attribute(name="inserted_at", type="utc_datetime_usec"),
        ],
        relationships=[
            Relationship(
                name="category",
                kind=RelationshipKind.MANY_TO_ONE,
                destination=Category,
            ),
        ],
        actions=[
            Action(name="list", kind=ActionKind.READ),
            Action(name="index", kind=ActionKind.READ, primary=True),
            Action(name="paged", kind=ActionKind.READ, pagination=True),
            Action(name="create", kind=ActionKind.CREATE, primary=True),
            Action(name="update", kind=ActionKind.UPDATE),
            Action(name="restock", kind=ActionKind.UPDATE),
            Action(name="destroy", kind=ActionKind.DESTROY),
        ],
    )


@pytest.fixture
def inventory() -> SimpleNamespace:
    """Declarative inventory resources and their domain."""
    domain = Domain(
        name="inventory",
        resources=[Category, Product],
        interfaces=[Interface(name="list_products", resource=Product, action="list")],
    )
    return SimpleNamespace(Product=Product, Category=Category, domain=domain)
