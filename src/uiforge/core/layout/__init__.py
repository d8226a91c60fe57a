"""
Layout declarations and compilation.

Builders produce LayoutDeclaration values; `compile_layout` turns one into
a validated LayoutNode tree for a resolved resource.
"""

from ..declarations import field, fields
from .compiler import compile_layout, default_declaration
from .dsl import (
    LayoutDeclaration,
    edit_layout,
    group,
    index_columns,
    inline,
    section,
    sections,
    show_layout,
    stacked,
)

__all__ = [
    "LayoutDeclaration",
    "compile_layout",
    "default_declaration",
    "edit_layout",
    "field",
    "fields",
    "group",
    "index_columns",
    "inline",
    "section",
    "sections",
    "show_layout",
    "stacked",
]
