"""
Layout tree types for uiforge IR.

A compiled layout is an immutable tree of LayoutNode values rooted at an
`index`, `show` or `form` node. Containers order their children; `field`
leaves name a non-omitted field of the resource.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LayoutTag(str, Enum):
    """Node tags of a compiled layout tree."""

    INDEX = "index"
    SHOW = "show"
    FORM = "form"
    FIELD = "field"
    STACKED = "stacked"
    INLINE = "inline"
    GROUP = "group"
    SECTIONS = "sections"
    SECTION = "section"

    @property
    def is_root(self) -> bool:
        return self in (LayoutTag.INDEX, LayoutTag.SHOW, LayoutTag.FORM)


class LayoutNode(BaseModel):
    """
    One node of a compiled layout tree.

    Attributes:
        tag: Node kind
        name: Container id, field key, or resource name for root nodes
        config: Tag specific static configuration (titles, tab ids)
        opts: Options declared on this node (order_by, where, overrides)
        inner_elements: Ordered children; empty for `field` leaves
    """

    tag: LayoutTag
    name: str
    config: dict[str, Any] = Field(default_factory=dict)
    opts: dict[str, Any] = Field(default_factory=dict)
    inner_elements: tuple[LayoutNode, ...] = ()

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def walk(
        self, inherited: dict[str, Any] | None = None
    ) -> Iterator[tuple[LayoutNode, dict[str, Any]]]:
        """
        Depth-first walk yielding each node with its effective options.

        Effective options merge the opts of every ancestor with the node's
        own; nearer declarations win.
        """
        effective = {**(inherited or {}), **self.opts}
        yield self, effective
        for child in self.inner_elements:
            yield from child.walk(effective)

    def field_names(self) -> list[str]:
        """Field keys of every leaf, in tree order."""
        return [node.name for node, _ in self.walk() if node.tag == LayoutTag.FIELD]

    def effective_opts(self, field_name: str) -> dict[str, Any]:
        """Options a field leaf inherits from its ancestors plus its own."""
        for node, effective in self.walk():
            if node.tag == LayoutTag.FIELD and node.name == field_name:
                return effective
        return {}

    def find(self, tag: LayoutTag) -> list[LayoutNode]:
        """All nodes with the given tag, in tree order."""
        return [node for node, _ in self.walk() if node.tag == tag]


LayoutNode.model_rebuild()
