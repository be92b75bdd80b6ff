"""Class-name discriminators written into project-config records.

The CMS identifies field types and layout elements by PHP class name
(``craft\\fields\\PlainText`` and so on).  Builders look those strings up in
a ``TypeTable`` instead of spelling them out, so supporting another CMS
version means passing a different table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from craftgen.target.models import (
    AssetSettings,
    ConfigRecord,
    DateSettings,
    NumberSettings,
    OptionsSettings,
    PlainTextSettings,
    RichTextSettings,
    UrlSettings,
)


class FieldKind(str, Enum):
    """Field types the builders can produce."""
    PLAIN_TEXT = "plain_text"
    RICH_TEXT = "rich_text"
    ASSETS = "assets"
    NUMBER = "number"
    URL = "url"
    DROPDOWN = "dropdown"
    RADIO_BUTTONS = "radio_buttons"
    CHECKBOXES = "checkboxes"
    DATE = "date"


class ElementKind(str, Enum):
    """Layout element types."""
    ENTRY_TITLE = "entry_title"
    CUSTOM_FIELD = "custom_field"


# Settings shape each kind must carry.
SETTINGS_MODELS: Mapping[FieldKind, type[ConfigRecord]] = MappingProxyType({
    FieldKind.PLAIN_TEXT: PlainTextSettings,
    FieldKind.RICH_TEXT: RichTextSettings,
    FieldKind.ASSETS: AssetSettings,
    FieldKind.NUMBER: NumberSettings,
    FieldKind.URL: UrlSettings,
    FieldKind.DROPDOWN: OptionsSettings,
    FieldKind.RADIO_BUTTONS: OptionsSettings,
    FieldKind.CHECKBOXES: OptionsSettings,
    FieldKind.DATE: DateSettings,
})


@dataclass(frozen=True)
class TypeTable:
    """Versioned mapping of field/element kinds to class-name strings."""

    version: str
    fields: Mapping[FieldKind, str]
    elements: Mapping[ElementKind, str] = field(default_factory=dict)

    def field_type(self, kind: FieldKind) -> str:
        try:
            return self.fields[kind]
        except KeyError:
            raise KeyError(f"No {kind.value} field type in table {self.version}") from None

    def element_type(self, kind: ElementKind) -> str:
        try:
            return self.elements[kind]
        except KeyError:
            raise KeyError(f"No {kind.value} element type in table {self.version}") from None

    def kind_for(self, type_name: str) -> FieldKind | None:
        """Reverse lookup: which kind a field ``type`` string belongs to."""
        for kind, name in self.fields.items():
            if name == type_name:
                return kind
        return None


CRAFT5_TYPES = TypeTable(
    version="craft5",
    fields=MappingProxyType({
        FieldKind.PLAIN_TEXT: "craft\\fields\\PlainText",
        FieldKind.RICH_TEXT: "craft\\ckeditor\\Field",
        FieldKind.ASSETS: "craft\\fields\\Assets",
        FieldKind.NUMBER: "craft\\fields\\Number",
        FieldKind.URL: "craft\\fields\\Url",
        FieldKind.DROPDOWN: "craft\\fields\\Dropdown",
        FieldKind.RADIO_BUTTONS: "craft\\fields\\RadioButtons",
        FieldKind.CHECKBOXES: "craft\\fields\\Checkboxes",
        FieldKind.DATE: "craft\\fields\\Date",
    }),
    elements=MappingProxyType({
        ElementKind.ENTRY_TITLE: "craft\\fieldlayoutelements\\entries\\EntryTitleField",
        ElementKind.CUSTOM_FIELD: "craft\\fieldlayoutelements\\CustomField",
    }),
)

DEFAULT_TYPES = CRAFT5_TYPES


def settings_match(type_table: TypeTable, type_name: str, settings: ConfigRecord) -> bool:
    """Return ``True`` if *settings* has the shape required by *type_name*."""
    kind = type_table.kind_for(type_name)
    if kind is None:
        return False
    return type(settings) is SETTINGS_MODELS[kind]
