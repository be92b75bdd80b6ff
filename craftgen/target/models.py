"""Pydantic v2 models for project-config records.

These mirror the YAML files the CMS reads: one ``TargetField`` per
``fields/<handle>--<uid>.yaml``, one ``TargetEntryType`` per
``entryTypes/<handle>--<uid>.yaml`` and a ``ProjectManifest`` for
``project.yaml``.  Attribute names are snake_case; serialising with
``by_alias=True`` yields the camelCase keys the CMS expects, in the same
alphabetical order it writes them.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ConfigRecord(BaseModel):
    """Base for every serialised record: camelCase aliases, no unknown keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_config(self) -> dict[str, Any]:
        """Plain data in project-config key casing, ready for a YAML/JSON encoder."""
        return self.model_dump(by_alias=True, mode="json")


# ---------------------------------------------------------------------------
# Field settings variants
# ---------------------------------------------------------------------------

class PlainTextSettings(ConfigRecord):
    byte_limit: Optional[int] = None
    char_limit: Optional[int] = None
    code: bool = False
    initial_rows: int = 1
    multiline: bool = False
    placeholder: Optional[str] = None
    ui_mode: str = "normal"


class RichTextSettings(ConfigRecord):
    """CKEditor field settings."""
    available_transforms: str = ""
    available_volumes: str = ""
    character_limit: Optional[int] = None
    cke_config: str = ""
    create_button_label: Optional[str] = None
    default_transform: Optional[str] = None
    expand_entry_buttons: bool = False
    full_graphql_data: bool = True
    parse_embeds: bool = False
    purifier_config: Optional[str] = None
    purify_html: bool = True
    show_unpermitted_files: bool = False
    show_unpermitted_volumes: bool = False
    show_word_count: bool = False
    source_editing_groups: list[str] = Field(default_factory=lambda: ["__ADMINS__"])
    word_limit: Optional[int] = None


class AssetSettings(ConfigRecord):
    allow_self_relations: bool = False
    allow_subfolders: bool = False
    allow_uploads: bool = True
    allowed_kinds: Optional[list[str]] = Field(default_factory=lambda: ["image"])
    branch_limit: Optional[int] = None
    default_placement: str = "end"
    default_upload_location_source: str = ""
    default_upload_location_subpath: str = "images"
    maintain_hierarchy: bool = False
    max_relations: Optional[int] = 1
    min_relations: Optional[int] = None
    preview_mode: str = "full"
    restrict_files: bool = True
    restrict_location: bool = False
    restricted_default_upload_subpath: Optional[str] = None
    restricted_location_source: str = ""
    restricted_location_subpath: Optional[str] = None
    selection_label: Optional[str] = None
    show_cards_in_grid: bool = False
    show_site_menu: bool = False
    show_unpermitted_files: bool = False
    show_unpermitted_volumes: bool = False
    sources: str = "*"
    target_site_id: Optional[str] = None
    validate_related_elements: bool = False
    view_mode: str = "list"


class NumberSettings(ConfigRecord):
    decimals: int = 0
    default_value: Optional[float] = None
    max: Optional[float] = None
    min: Optional[float] = None
    prefix: Optional[str] = None
    preview_currency: Optional[str] = None
    preview_format: str = "decimal"
    size: Optional[int] = None
    suffix: Optional[str] = None


class UrlSettings(ConfigRecord):
    max_length: int = 255
    placeholder: Optional[str] = None


class SelectOption(ConfigRecord):
    label: str
    value: str
    default: bool = False


class OptionsSettings(ConfigRecord):
    """Settings shared by dropdown, radio-button and checkbox fields."""
    options: list[SelectOption] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def _normalise_options(cls, value: Any) -> Any:
        # Accept bare strings and partial {label|value} dicts.
        if not isinstance(value, list):
            return value
        prepared: list[Any] = []
        for option in value:
            if isinstance(option, str):
                prepared.append({"label": option, "value": option, "default": False})
            elif isinstance(option, dict):
                label = option.get("label") or option.get("value") or ""
                prepared.append({
                    "label": label,
                    "value": option.get("value") or option.get("label") or "",
                    "default": option.get("default", False),
                })
            else:
                prepared.append(option)
        return prepared


class DateSettings(ConfigRecord):
    max: Optional[str] = None
    min: Optional[str] = None
    minute_increment: int = 30
    show_date: bool = True
    show_time: bool = False
    show_time_zone: bool = False


FieldSettings = Union[
    PlainTextSettings,
    RichTextSettings,
    AssetSettings,
    NumberSettings,
    UrlSettings,
    OptionsSettings,
    DateSettings,
]


# ---------------------------------------------------------------------------
# Field
# ---------------------------------------------------------------------------

class TargetField(ConfigRecord):
    """A ``fields/<handle>--<uid>.yaml`` record."""
    column_suffix: Optional[str] = None
    handle: str
    instructions: Optional[str] = None
    name: str
    searchable: bool = False
    settings: FieldSettings
    translation_key_format: Optional[str] = None
    translation_method: str = "none"
    type: str


# ---------------------------------------------------------------------------
# Field layout
# ---------------------------------------------------------------------------

class EntryTitleElement(ConfigRecord):
    """The built-in title input of an entry-type layout."""
    autocapitalize: bool = True
    autocomplete: bool = False
    autocorrect: bool = True
    class_: Optional[str] = Field(default=None, alias="class")
    date_added: str
    disabled: bool = False
    element_condition: Optional[str] = None
    id: Optional[str] = None
    include_in_cards: bool = False
    input_type: Optional[str] = None
    instructions: Optional[str] = None
    label: Optional[str] = None
    max: Optional[int] = None
    min: Optional[int] = None
    name: Optional[str] = None
    orientation: Optional[str] = None
    placeholder: Optional[str] = None
    provides_thumbs: bool = False
    readonly: bool = False
    required: bool = True
    size: Optional[int] = None
    step: Optional[int] = None
    tip: Optional[str] = None
    title: Optional[str] = None
    type: str
    uid: str
    user_condition: Optional[str] = None
    warning: Optional[str] = None
    width: int = 100


class CustomFieldElement(ConfigRecord):
    """A reference from a layout tab to a field, by the field's uid."""
    date_added: str
    edit_condition: Optional[str] = None
    element_condition: Optional[str] = None
    field_uid: str
    handle: Optional[str] = None
    include_in_cards: bool = False
    instructions: Optional[str] = None
    label: Optional[str] = None
    provides_thumbs: bool = False
    required: bool = False
    tip: Optional[str] = None
    type: str
    uid: str
    user_condition: Optional[str] = None
    warning: Optional[str] = None
    width: int = 100


LayoutElement = Union[EntryTitleElement, CustomFieldElement]


class Tab(ConfigRecord):
    element_condition: Optional[str] = None
    elements: list[LayoutElement] = Field(default_factory=list)
    name: str
    uid: str
    user_condition: Optional[str] = None


class FieldLayout(ConfigRecord):
    tabs: list[Tab] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Entry type
# ---------------------------------------------------------------------------

class TargetEntryType(ConfigRecord):
    """An ``entryTypes/<handle>--<uid>.yaml`` record."""
    color: Optional[str] = None
    field_layouts: dict[str, FieldLayout] = Field(default_factory=dict)
    handle: str
    has_title_field: bool = True
    icon: Optional[str] = None
    name: str
    show_slug_field: bool = True
    show_status_field: bool = True
    slug_translation_key_format: Optional[str] = None
    slug_translation_method: str = "none"
    title_format: Optional[str] = None
    title_translation_key_format: Optional[str] = None
    title_translation_method: str = "none"

    def elements(self) -> list[LayoutElement]:
        """All layout elements, in layout/tab order."""
        return [
            element
            for layout in self.field_layouts.values()
            for tab in layout.tabs
            for element in tab.elements
        ]

    def field_uids(self) -> list[str]:
        """Uids of the fields referenced by this entry type, in layout order."""
        return [e.field_uid for e in self.elements() if isinstance(e, CustomFieldElement)]


# ---------------------------------------------------------------------------
# project.yaml
# ---------------------------------------------------------------------------

class ProjectMeta(ConfigRecord):
    names: dict[str, str] = Field(default_factory=dict, alias="__names__")


class ProjectManifest(ConfigRecord):
    """The ``project.yaml`` record: modification time and the name index."""
    date_modified: int
    meta: ProjectMeta = Field(default_factory=ProjectMeta)
