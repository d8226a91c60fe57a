"""
uiforge Intermediate Representation (IR) types.

Types are organized into submodules and re-exported here.
"""

from .app import AppSchema
from .backend import (
    ActionKind,
    ActionMeta,
    AttributeMeta,
    BackendKind,
    RelationshipKind,
    RelationshipMeta,
)
from .fields import (
    ASSOCIATION_TYPES,
    AssociationData,
    AttributeLabel,
    ContextLabel,
    EmbedData,
    EntityLabel,
    FieldData,
    FieldSpec,
    FieldType,
    HtmlType,
    OptionLabel,
    SelectData,
    StepData,
    option_label_text,
)
from .layout import LayoutNode, LayoutTag
from .resources import OperationName, OperationRef, ResourceSpec

__all__ = [
    # App
    "AppSchema",
    # Backend metadata
    "ActionKind",
    "ActionMeta",
    "AttributeMeta",
    "BackendKind",
    "RelationshipKind",
    "RelationshipMeta",
    # Fields
    "ASSOCIATION_TYPES",
    "AssociationData",
    "AttributeLabel",
    "ContextLabel",
    "EmbedData",
    "EntityLabel",
    "FieldData",
    "FieldSpec",
    "FieldType",
    "HtmlType",
    "OptionLabel",
    "SelectData",
    "StepData",
    "option_label_text",
    # Layout
    "LayoutNode",
    "LayoutTag",
    # Resources
    "OperationName",
    "OperationRef",
    "ResourceSpec",
]
