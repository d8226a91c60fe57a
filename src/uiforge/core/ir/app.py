"""
Compiled application schema for uiforge IR.

AppSchema is the single immutable value produced by a compile. It is passed
to whatever consumes resources, layouts and route manifests; there is no
process-wide registry.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .layout import LayoutNode, LayoutTag
from .resources import ResourceSpec


class AppSchema(BaseModel):
    """
    Complete compiled application.

    Attributes:
        resources: Resource registry by name (declared and embedded)
        layouts: Compiled layout trees by resource name, then tag
        routes: Enabled route names by declared resource name
    """

    resources: dict[str, ResourceSpec] = Field(default_factory=dict)
    layouts: dict[str, dict[LayoutTag, LayoutNode]] = Field(default_factory=dict)
    routes: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def get_resource(self, name: str) -> ResourceSpec | None:
        """Get resource by name."""
        return self.resources.get(name)

    def get_layout(self, resource: str, tag: LayoutTag | str) -> LayoutNode | None:
        """Get the compiled layout of a resource for one of index/show/form."""
        return self.layouts.get(resource, {}).get(LayoutTag(tag))

    def resource_for_schema(self, schema: Any) -> ResourceSpec | None:
        """First non-embedded resource declared over the given schema."""
        for resource in self.resources.values():
            if not resource.is_embedded and resource.schema_ref is schema:
                return resource
        return None

    def embedded_resources(self, parent: str) -> list[ResourceSpec]:
        """Resources synthesized from the embeds of a parent resource."""
        return [r for r in self.resources.values() if r.embedded_in == parent]
