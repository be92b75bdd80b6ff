"""Input schema for craft-config-gen.

Usage::

    from craftgen.schema import load_project

    project = load_project("content-model.json")
    print([f.handle for f in project.fields])
"""

from craftgen.schema.models import (
    EntryTypeDeclaration,
    FieldDeclaration,
    FieldReference,
    FieldTypeTag,
    HANDLE_PATTERN,
    ProjectDeclaration,
    SectionDeclaration,
    SectionType,
    SiteSetting,
    VolumeDeclaration,
    load_project,
    validate_handle,
)

__all__ = [
    "load_project",
    "validate_handle",
    "HANDLE_PATTERN",
    "FieldDeclaration",
    "FieldReference",
    "FieldTypeTag",
    "EntryTypeDeclaration",
    "ProjectDeclaration",
    "SectionDeclaration",
    "SectionType",
    "SiteSetting",
    "VolumeDeclaration",
]
