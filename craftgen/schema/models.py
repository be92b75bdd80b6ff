"""Pydantic v2 models for the generator's input schema.

Describes a content model the way an author writes it: fields, entry types
that reference fields by handle, and optional sections and volumes.  The
models are read once from JSON and never mutated.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from craftgen.errors import InputError
from craftgen.utils import load_json

# Handles end up in file names, so path separators and dots are never allowed.
HANDLE_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_]*$"
_HANDLE_RE = re.compile(HANDLE_PATTERN)


def validate_handle(handle: str, kind: str = "field") -> str:
    """Return *handle* unchanged, or raise ``InputError`` if it is not a valid handle."""
    if not _HANDLE_RE.fullmatch(handle):
        raise InputError(
            f"Invalid {kind} handle '{handle}': must start with a letter and "
            "contain only letters, digits and underscores"
        )
    return handle


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FieldTypeTag(str, Enum):
    """Documented field-type tags.

    ``FieldDeclaration.field_type`` is a plain string so that tags outside
    this list still load and are handled by the compiler's skip policy.
    """
    PLAIN_TEXT = "plain_text"
    RICH_TEXT = "rich_text"
    IMAGE = "image"
    ASSET = "asset"
    NUMBER = "number"
    URL = "url"
    DROPDOWN = "dropdown"
    RADIO = "radio"
    CHECKBOXES = "checkboxes"
    DATE = "date"
    EMAIL = "email"
    LIGHTSWITCH = "lightswitch"
    COLOR = "color"
    TABLE = "table"
    MATRIX = "matrix"


class SectionType(str, Enum):
    """How a section publishes its entries."""
    CHANNEL = "channel"
    STRUCTURE = "structure"
    SINGLE = "single"


# ---------------------------------------------------------------------------
# Fields & Entry Types
# ---------------------------------------------------------------------------

class Declaration(BaseModel):
    """Base for input models: unknown keys are rejected, not ignored."""

    model_config = ConfigDict(extra="forbid")


class FieldDeclaration(Declaration):
    """A field as declared by the author."""
    name: str = Field(..., description="Display name, e.g. 'Body Content'")
    handle: str = Field(
        ..., pattern=HANDLE_PATTERN, description="Unique handle, e.g. 'bodyContent'"
    )
    field_type: str = Field(..., description="Field-type tag, e.g. 'plain_text'")
    instructions: Optional[str] = Field(default=None, description="Help text shown to editors")
    required: Optional[bool] = Field(
        default=None,
        description="Author's default; entry-type references decide actual requiredness",
    )
    searchable: Optional[bool] = Field(default=None, description="Index the field for search")
    settings: Optional[dict[str, Any]] = Field(
        default=None, description="Overrides merged over the generated settings"
    )


class FieldReference(Declaration):
    """A field attached to an entry type."""
    handle: str = Field(..., description="Handle of a declared field")
    required: Optional[bool] = Field(default=None, description="Required on this entry type")


class EntryTypeDeclaration(Declaration):
    """An entry type and the ordered fields on its layout."""
    name: str = Field(..., description="Display name, e.g. 'Page'")
    handle: str = Field(..., pattern=HANDLE_PATTERN, description="Unique handle, e.g. 'page'")
    fields: list[FieldReference] = Field(
        default_factory=list, description="Fields in editing order"
    )
    has_title_field: Optional[bool] = Field(
        default=None, description="Whether the layout shows a title input (default true)"
    )
    title_format: Optional[str] = Field(
        default=None, description="Template for auto-generated titles"
    )


# ---------------------------------------------------------------------------
# Sections & Volumes (carried through unchanged)
# ---------------------------------------------------------------------------

class SiteSetting(Declaration):
    """Per-site publishing settings of a section."""
    site_handle: str
    enabled_by_default: bool = True
    has_urls: bool = True
    uri_format: Optional[str] = None
    template: Optional[str] = None


class SectionDeclaration(Declaration):
    """A section publishing one or more entry types."""
    name: str
    handle: str = Field(..., pattern=HANDLE_PATTERN)
    section_type: SectionType
    entry_types: list[str] = Field(default_factory=list, description="Entry-type handles")
    site_settings: Optional[list[SiteSetting]] = None


class VolumeDeclaration(Declaration):
    """An asset volume."""
    name: str
    handle: str = Field(..., pattern=HANDLE_PATTERN)
    fs_handle: str = Field(..., description="Filesystem handle backing the volume")
    transform_fs_handle: Optional[str] = None
    transform_subpath: Optional[str] = None


# ---------------------------------------------------------------------------
# Top-Level Project
# ---------------------------------------------------------------------------

class ProjectDeclaration(Declaration):
    """Complete input document."""
    fields: list[FieldDeclaration] = Field(..., description="Field declarations, may be empty")
    entry_types: list[EntryTypeDeclaration] = Field(
        ..., description="Entry-type declarations, may be empty"
    )
    sections: Optional[list[SectionDeclaration]] = None
    volumes: Optional[list[VolumeDeclaration]] = None

    @model_validator(mode="after")
    def _check_unique_handles(self) -> "ProjectDeclaration":
        groups = {
            "field": [f.handle for f in self.fields],
            "entry type": [e.handle for e in self.entry_types],
            "section": [s.handle for s in self.sections or []],
            "volume": [v.handle for v in self.volumes or []],
        }
        for category, handles in groups.items():
            seen: set[str] = set()
            for handle in handles:
                if handle in seen:
                    raise ValueError(f"Duplicate {category} handle: {handle}")
                seen.add(handle)
        return self

    @classmethod
    def example(cls) -> "ProjectDeclaration":
        """A representative project used by the ``example`` command."""
        return cls(
            fields=[
                FieldDeclaration(
                    name="Heading",
                    handle="heading",
                    field_type=FieldTypeTag.PLAIN_TEXT.value,
                    instructions="Enter the main heading",
                    required=False,
                    searchable=True,
                ),
                FieldDeclaration(
                    name="Body Content",
                    handle="bodyContent",
                    field_type=FieldTypeTag.RICH_TEXT.value,
                    instructions="Main content for the page",
                    required=False,
                    searchable=True,
                ),
                FieldDeclaration(
                    name="Featured Image",
                    handle="featuredImage",
                    field_type=FieldTypeTag.IMAGE.value,
                    instructions="Main image for the entry",
                    required=False,
                    searchable=False,
                ),
                FieldDeclaration(
                    name="Link URL",
                    handle="linkUrl",
                    field_type=FieldTypeTag.URL.value,
                    required=False,
                    searchable=False,
                ),
                FieldDeclaration(
                    name="Price",
                    handle="price",
                    field_type=FieldTypeTag.NUMBER.value,
                    instructions="Product price",
                    required=False,
                    searchable=False,
                ),
            ],
            entry_types=[
                EntryTypeDeclaration(
                    name="Page",
                    handle="page",
                    fields=[
                        FieldReference(handle="heading", required=True),
                        FieldReference(handle="bodyContent", required=False),
                        FieldReference(handle="featuredImage", required=False),
                    ],
                    has_title_field=True,
                ),
                EntryTypeDeclaration(
                    name="Article",
                    handle="article",
                    fields=[
                        FieldReference(handle="bodyContent", required=True),
                        FieldReference(handle="featuredImage", required=False),
                    ],
                    has_title_field=True,
                ),
            ],
            sections=[
                SectionDeclaration(
                    name="Pages",
                    handle="pages",
                    section_type=SectionType.CHANNEL,
                    entry_types=["page"],
                    site_settings=[
                        SiteSetting(
                            site_handle="default",
                            uri_format="{slug}",
                            template="pages/_entry",
                        ),
                    ],
                ),
                SectionDeclaration(
                    name="Blog",
                    handle="blog",
                    section_type=SectionType.CHANNEL,
                    entry_types=["article"],
                    site_settings=[
                        SiteSetting(
                            site_handle="default",
                            uri_format="blog/{slug}",
                            template="blog/_entry",
                        ),
                    ],
                ),
            ],
            volumes=[
                VolumeDeclaration(name="Images", handle="images", fs_handle="local"),
            ],
        )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_project(path: str | Path) -> ProjectDeclaration:
    """Read and validate a project description from a JSON file.

    Raises:
        InputError: If the file is missing, is not valid JSON, or does not
            match the input schema.
    """
    file_path = Path(path)
    try:
        data = load_json(file_path)
    except FileNotFoundError:
        raise InputError(f"Config file not found: {file_path}") from None
    except OSError as exc:
        raise InputError(f"Failed to read config file {file_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"Failed to parse config JSON {file_path}: {exc}") from exc

    # load_json wraps any non-object document under "_root".
    if "_root" in data:
        raise InputError(
            f"Invalid project description {file_path}: top level must be a JSON object, "
            f"not {type(data['_root']).__name__}"
        )

    try:
        return ProjectDeclaration.model_validate(data)
    except ValidationError as exc:
        raise InputError(f"Invalid project description {file_path}: {exc}") from exc
