"""
Layout declaration builders.

Layouts are declared as nested builder calls and compiled against a
resource later:

    edit_layout(
        "product",
        sections(
            section("Main", "reference", "name", default=True),
            section("Stock", inline("quantity", field("price", readonly=True))),
        ),
        edit_title="Edit product",
    )

Bare strings and `field(...)` declarations become field leaves. Lists of
children are flattened, so `fields([...])` can be passed directly.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from ..declarations import FieldDeclaration
from ..ir import LayoutTag

Child = Union[str, FieldDeclaration, "LayoutDeclaration"]


class LayoutDeclaration(BaseModel):
    """
    Uncompiled layout node.

    Attributes:
        tag: Node kind
        resource: Resource name, set on root declarations only
        title: Group title or section label
        default: Marks the initially active section
        children: Nested declarations and field leaves
        opts: Options declared on this node
    """

    tag: LayoutTag
    resource: str | None = None
    title: str | None = None
    default: bool = False
    children: tuple[FieldDeclaration | LayoutDeclaration, ...] = ()
    opts: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


LayoutDeclaration.model_rebuild()


def _flatten(children: Iterable[Any]) -> tuple[FieldDeclaration | LayoutDeclaration, ...]:
    flat: list[FieldDeclaration | LayoutDeclaration] = []
    for child in children:
        if isinstance(child, str):
            flat.append(FieldDeclaration(key=child))
        elif isinstance(child, FieldDeclaration | LayoutDeclaration):
            flat.append(child)
        elif isinstance(child, Iterable):
            flat.extend(_flatten(child))
        else:
            raise TypeError(f"Unsupported layout element: {child!r}")
    return tuple(flat)


def _node(tag: LayoutTag, children: Iterable[Any], **values: Any) -> LayoutDeclaration:
    return LayoutDeclaration(tag=tag, children=_flatten(children), **values)


# =============================================================================
# Roots
# =============================================================================


def index_columns(resource: str, *columns: Child, **opts: Any) -> LayoutDeclaration:
    """
    Columns of a resource's index page.

    Options such as `page_title`, `order_by` or `where` are kept on the
    compiled root node.
    """
    return _node(LayoutTag.INDEX, columns, resource=resource, opts=opts)


def edit_layout(resource: str, *children: Child, **opts: Any) -> LayoutDeclaration:
    """Layout of a resource's new/edit form."""
    return _node(LayoutTag.FORM, children, resource=resource, opts=opts)


def show_layout(resource: str, *children: Child, **opts: Any) -> LayoutDeclaration:
    """Layout of a resource's detail page."""
    return _node(LayoutTag.SHOW, children, resource=resource, opts=opts)


# =============================================================================
# Containers
# =============================================================================


def stacked(*children: Child, **opts: Any) -> LayoutDeclaration:
    return _node(LayoutTag.STACKED, children, opts=opts)


def inline(*children: Child, **opts: Any) -> LayoutDeclaration:
    return _node(LayoutTag.INLINE, children, opts=opts)


def group(title: str, *children: Child, **opts: Any) -> LayoutDeclaration:
    """Titled box around its children."""
    return _node(LayoutTag.GROUP, children, title=title, opts=opts)


def sections(*children: LayoutDeclaration, **opts: Any) -> LayoutDeclaration:
    """Tabbed container; only `section` children are allowed."""
    return _node(LayoutTag.SECTIONS, children, opts=opts)


def section(label: str, *children: Child, default: bool = False, **opts: Any) -> LayoutDeclaration:
    """One tab of a `sections` container."""
    return _node(LayoutTag.SECTION, children, title=label, default=default, opts=opts)
