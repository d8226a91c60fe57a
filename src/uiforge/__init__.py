"""
uiforge - resource metadata resolution and layout compilation.

Turns backend schemas plus light declarations into fully resolved UI
resources (fields, associations, CRUD operation references) and validated
layout trees for generated CRUD interfaces.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.compiler import compile_app
from .core.config import UiForgeConfig, find_config, load_config
from .core.declarations import field, fields, resource
from .core.errors import (
    ConfigError,
    ConfigurationError,
    EmbedCycleError,
    LayoutError,
    OperationResolutionError,
    QueryError,
    RegistryError,
    UiForgeError,
)
from .core.layout import (
    edit_layout,
    group,
    index_columns,
    inline,
    section,
    sections,
    show_layout,
    stacked,
)
from .core.logging import setup_logging
from .core.query import translate

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    # Compile
    "compile_app",
    "resource",
    "field",
    "fields",
    # Layouts
    "index_columns",
    "edit_layout",
    "show_layout",
    "stacked",
    "inline",
    "group",
    "sections",
    "section",
    # Queries
    "translate",
    # Ambient
    "UiForgeConfig",
    "find_config",
    "load_config",
    "setup_logging",
    # Errors
    "UiForgeError",
    "ConfigurationError",
    "OperationResolutionError",
    "LayoutError",
    "EmbedCycleError",
    "RegistryError",
    "ConfigError",
    "QueryError",
]
