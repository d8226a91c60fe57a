"""
Application compile entry point.

`compile_app` threads one immutable AppSchema through the whole build:

    app = compile_app(
        [resource("product", schema=Product, context=inventory)],
        layouts=[index_columns("product", "reference", "name")],
    )
    app.get_layout("product", "index")

Every resource, declared or embedded, gets an `index`, `show` and `form`
layout; undeclared ones are synthesized.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import UiForgeConfig
from .declarations import ResourceDeclaration
from .errors import RegistryError, make_layout_error
from .ir import AppSchema, LayoutNode, LayoutTag
from .layout import LayoutDeclaration, compile_layout
from .logging import log_with_context
from .registry import build_registry
from .routes import route_manifest

logger = logging.getLogger(__name__)

ROOT_TAGS: tuple[LayoutTag, ...] = (LayoutTag.INDEX, LayoutTag.SHOW, LayoutTag.FORM)


def _declared_layouts(
    layouts: Iterable[LayoutDeclaration], known: Iterable[str]
) -> dict[tuple[str, LayoutTag], LayoutDeclaration]:
    known = set(known)
    declared: dict[tuple[str, LayoutTag], LayoutDeclaration] = {}
    for layout in layouts:
        if not layout.tag.is_root or layout.resource is None:
            raise make_layout_error(
                f"Top level layouts must be index, show or form roots, got '{layout.tag.value}'",
                layout.resource or "",
                layout.tag.value,
            )
        if layout.resource not in known:
            raise RegistryError(
                f"Layout '{layout.tag.value}' declared for unknown resource '{layout.resource}'"
            )
        key = (layout.resource, layout.tag)
        if key in declared:
            logger.debug(f"{layout.resource}: {layout.tag.value} layout redeclared, replacing")
        declared[key] = layout
    return declared


def compile_app(
    resources: Iterable[ResourceDeclaration],
    layouts: Iterable[LayoutDeclaration] = (),
    config: UiForgeConfig | None = None,
) -> AppSchema:
    """
    Compile resource and layout declarations into an AppSchema.

    Args:
        resources: Resource declarations
        layouts: Layout declarations; a later one for the same resource and
            tag replaces an earlier one
        config: Configuration (defaults when omitted)

    Raises:
        ConfigurationError: On any structural defect in the declarations
    """
    config = config or UiForgeConfig()
    declarations = list(resources)
    registry = build_registry(declarations, config.build_naming_policy())
    declared = _declared_layouts(layouts, registry)

    compiled: dict[str, dict[LayoutTag, LayoutNode]] = {}
    for name in registry:
        compiled[name] = {
            tag: compile_layout(name, tag, declared.get((name, tag)), registry, config)
            for tag in ROOT_TAGS
        }

    routes = {d.name: route_manifest(d.name, d.only, d.except_) for d in declarations}

    log_with_context(
        logger,
        logging.INFO,
        f"Compiled {len(registry)} resources",
        declared=[d.name for d in declarations],
        embedded=len(registry) - len(declarations),
    )
    return AppSchema(resources=registry, layouts=compiled, routes=routes)
