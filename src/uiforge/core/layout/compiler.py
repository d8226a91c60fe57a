"""
Layout compiler.

Validates a layout declaration against a resolved resource and produces an
immutable LayoutNode tree. Nesting rules:

- roots (`index`, `show`, `form`) hold containers and field leaves
- `index` roots hold field leaves only, one per column
- `sections` holds `section` children only
- `section` may appear only directly inside `sections`
- every field leaf names a known, non-omitted field

When no declaration exists for a tag, a default layout is synthesized from
the resource's field order.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from ..config import FieldsLayout, UiForgeConfig
from ..declarations import FieldDeclaration
from ..errors import LayoutError, QueryError, make_layout_error
from ..field_resolver import DATA_KEYS, FIELD_KEYS
from ..ir import LayoutNode, LayoutTag, ResourceSpec
from ..query import parse_order_by
from ..strings import slugify
from .dsl import LayoutDeclaration

logger = logging.getLogger(__name__)


class _LayoutBuilder:
    """Compiles one declaration; holds the per-compile id counter."""

    def __init__(self, resource: ResourceSpec, tag: LayoutTag):
        self.resource = resource
        self.tag = tag
        self._ids: Iterator[int] = itertools.count(1)
        self._sections_count: Iterator[int] = itertools.count(1)

    def error(self, message: str) -> LayoutError:
        return make_layout_error(message, self.resource.name, self.tag.value)

    def next_id(self, prefix: str) -> str:
        return f"{slugify(prefix) or self.tag.value}-{next(self._ids)}"

    # -------------------------------------------------------------------------
    # Leaves
    # -------------------------------------------------------------------------

    def leaf(self, declaration: FieldDeclaration) -> LayoutNode:
        key = declaration.key
        spec = self.resource.get_field(key)
        if spec is None:
            raise self.error(f"Unknown field '{key}'")
        if spec.omitted:
            raise self.error(f"Field '{key}' is omitted and cannot be laid out")

        unknown = sorted(set(declaration.overrides) - FIELD_KEYS - DATA_KEYS)
        if unknown:
            raise self.error(f"Unknown option(s) on field '{key}': {', '.join(unknown)}")

        return LayoutNode(tag=LayoutTag.FIELD, name=key, opts=dict(declaration.overrides))

    # -------------------------------------------------------------------------
    # Containers
    # -------------------------------------------------------------------------

    def child(
        self,
        declaration: FieldDeclaration | LayoutDeclaration,
        parent: LayoutTag,
        tab_parent: str | None,
    ) -> LayoutNode:
        if isinstance(declaration, FieldDeclaration):
            return self.leaf(declaration)

        tag = declaration.tag
        if tag == LayoutTag.SECTION:
            raise self.error(
                f"'section' must be placed inside 'sections', found in '{parent.value}'"
            )
        if tag.is_root:
            raise self.error(f"'{tag.value}' can only be used as a layout root")

        if tag == LayoutTag.SECTIONS:
            return self.sections(declaration, tab_parent)

        config: dict[str, Any] = {}
        if tag == LayoutTag.GROUP:
            title = declaration.title or ""
            name = self.next_id(title or "group")
            config = {"title": title, "group_id": name}
        else:
            name = self.next_id(tag.value)

        return LayoutNode(
            tag=tag,
            name=name,
            config=config,
            opts=dict(declaration.opts),
            inner_elements=self.children(declaration, tab_parent),
        )

    def children(
        self, declaration: LayoutDeclaration, tab_parent: str | None
    ) -> tuple[LayoutNode, ...]:
        return tuple(self.child(c, declaration.tag, tab_parent) for c in declaration.children)

    def sections(self, declaration: LayoutDeclaration, tab_parent: str | None) -> LayoutNode:
        for c in declaration.children:
            if not isinstance(c, LayoutDeclaration) or c.tag != LayoutTag.SECTION:
                found = c.key if isinstance(c, FieldDeclaration) else c.tag.value
                raise self.error(f"'sections' may only contain 'section' elements, found '{found}'")

        sections_id = self.next_id("sections")
        sections_index = next(self._sections_count)
        declared = list(declaration.children)
        active_index = next((i for i, s in enumerate(declared) if s.default), 0)

        nodes = []
        for index, decl in enumerate(declared, start=1):
            label = decl.title or ""
            tab_id = self.next_id(label or "section")
            config = {
                "label": label,
                "tab_id": tab_id,
                "tab_index": index,
                "tab_parent_id": tab_parent,
                "sections_id": sections_id,
                "sections_index": sections_index,
                "active": index - 1 == active_index,
            }
            nodes.append(
                LayoutNode(
                    tag=LayoutTag.SECTION,
                    name=tab_id,
                    config=config,
                    opts=dict(decl.opts),
                    inner_elements=self.children(decl, tab_id),
                )
            )

        tabs = [
            {"tab_id": n.config["tab_id"], "label": n.config["label"], "active": n.config["active"]}
            for n in nodes
        ]
        return LayoutNode(
            tag=LayoutTag.SECTIONS,
            name=sections_id,
            config={"sections_id": sections_id, "sections_index": sections_index, "tabs": tabs},
            opts=dict(declaration.opts),
            inner_elements=tuple(nodes),
        )

    # -------------------------------------------------------------------------
    # Roots
    # -------------------------------------------------------------------------

    def root(self, declaration: LayoutDeclaration) -> LayoutNode:
        if declaration.tag != self.tag:
            raise self.error(f"Expected a '{self.tag.value}' root, got '{declaration.tag.value}'")

        opts = dict(declaration.opts)
        if self.tag == LayoutTag.INDEX:
            for c in declaration.children:
                if not isinstance(c, FieldDeclaration):
                    raise self.error(f"Index columns must be fields, found '{c.tag.value}'")
            if "order_by" not in opts and "order_by" in self.resource.opts:
                opts["order_by"] = self.resource.opts["order_by"]
            if "order_by" in opts:
                self.check_order_by(opts["order_by"])

        return LayoutNode(
            tag=self.tag,
            name=self.resource.name,
            opts=opts,
            inner_elements=self.children(declaration, None),
        )

    def check_order_by(self, order_by: Any) -> None:
        try:
            parse_order_by(order_by)
        except (QueryError, TypeError, ValueError) as e:
            raise self.error(f"Invalid order_by {order_by!r}: {e}") from e


def default_declaration(
    resource: ResourceSpec,
    tag: LayoutTag,
    fields_layout: FieldsLayout = FieldsLayout.STACKED,
) -> LayoutDeclaration:
    """
    Layout used when none is declared for a tag.

    Index pages list every non-association field (or the resource's
    `columns` option). Show and form pages wrap every field in one
    container; association fields are included only when their target
    resource is known.
    """
    if tag == LayoutTag.INDEX:
        columns = resource.opts.get("columns")
        if columns is None:
            columns = [k for k in resource.visible_keys() if not resource.fields[k].is_association]
        keys = [c if isinstance(c, FieldDeclaration) else FieldDeclaration(key=c) for c in columns]
        return LayoutDeclaration(tag=tag, resource=resource.name, children=tuple(keys))

    keys = [
        FieldDeclaration(key=k)
        for k in resource.visible_keys()
        if not resource.fields[k].is_association or resource.fields[k].target_resource
    ]
    container_tag = LayoutTag(FieldsLayout(fields_layout).value)
    container = LayoutDeclaration(tag=container_tag, children=tuple(keys))
    return LayoutDeclaration(tag=tag, resource=resource.name, children=(container,))


def compile_layout(
    resource_name: str,
    tag: LayoutTag | str,
    declaration: LayoutDeclaration | None,
    resources: Mapping[str, ResourceSpec],
    config: UiForgeConfig | None = None,
) -> LayoutNode:
    """
    Compile a layout declaration, or the default one, into a LayoutNode tree.

    Args:
        resource_name: Resource the layout belongs to
        tag: One of index/show/form
        declaration: Declared layout, or None to synthesize the default
        resources: Resource registry
        config: Configuration (default fields container)

    Raises:
        LayoutError: If the declaration is malformed or names unknown fields
    """
    tag = LayoutTag(tag)
    if not tag.is_root:
        raise make_layout_error(f"'{tag.value}' is not a layout root", resource_name, tag.value)

    resource = resources.get(resource_name)
    if resource is None:
        raise make_layout_error(f"Unknown resource '{resource_name}'", resource_name, tag.value)

    if declaration is None:
        config = config or UiForgeConfig()
        declaration = default_declaration(resource, tag, config.default_fields_layout)
        logger.debug(f"{resource_name}: default {tag.value} layout")

    node = _LayoutBuilder(resource, tag).root(declaration)
    logger.debug(f"{resource_name}: compiled {tag.value} layout with fields {node.field_names()}")
    return node
