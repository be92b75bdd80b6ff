"""Project-config record types and their class-name discriminators."""

from craftgen.target.models import (
    CustomFieldElement,
    EntryTitleElement,
    FieldLayout,
    ProjectManifest,
    ProjectMeta,
    Tab,
    TargetEntryType,
    TargetField,
)
from craftgen.target.types import CRAFT5_TYPES, DEFAULT_TYPES, ElementKind, FieldKind, TypeTable

__all__ = [
    "CRAFT5_TYPES",
    "DEFAULT_TYPES",
    "CustomFieldElement",
    "ElementKind",
    "EntryTitleElement",
    "FieldKind",
    "FieldLayout",
    "ProjectManifest",
    "ProjectMeta",
    "Tab",
    "TargetEntryType",
    "TargetField",
    "TypeTable",
]
