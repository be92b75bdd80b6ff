"""Field builders.

Turns a field-type tag plus name/handle/instructions into a fully populated
``TargetField``.  Tags are matched case-insensitively against
``FIELD_TYPE_ALIASES``; each alias selects a settings builder and the
options it is called with.  Defaults produced here are the values the CMS
itself writes for a freshly created field of that type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from craftgen.errors import InvalidSettingsError, UnsupportedFieldTypeError
from craftgen.identity import RandomUidGenerator, UidGenerator
from craftgen.schema.models import FieldDeclaration
from craftgen.target.models import (
    AssetSettings,
    ConfigRecord,
    DateSettings,
    NumberSettings,
    OptionsSettings,
    PlainTextSettings,
    RichTextSettings,
    TargetField,
    UrlSettings,
)
from craftgen.target.types import DEFAULT_TYPES, FieldKind, TypeTable, settings_match


# ---------------------------------------------------------------------------
# Alias table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldTypeSpec:
    """What an alias resolves to: a field kind and builder options."""

    kind: FieldKind
    options: Mapping[str, Any] = field(default_factory=dict)


_PLAIN = FieldTypeSpec(FieldKind.PLAIN_TEXT)
_MULTILINE = FieldTypeSpec(FieldKind.PLAIN_TEXT, {"multiline": True})
_RICH = FieldTypeSpec(FieldKind.RICH_TEXT)
_ASSETS = FieldTypeSpec(FieldKind.ASSETS)
_NUMBER = FieldTypeSpec(FieldKind.NUMBER)
_URL = FieldTypeSpec(FieldKind.URL)
_DROPDOWN = FieldTypeSpec(FieldKind.DROPDOWN)
_RADIO = FieldTypeSpec(FieldKind.RADIO_BUTTONS)
_CHECKBOXES = FieldTypeSpec(FieldKind.CHECKBOXES)
_DATE = FieldTypeSpec(FieldKind.DATE)
_DATETIME = FieldTypeSpec(FieldKind.DATE, {"show_time": True})

FIELD_TYPE_ALIASES: dict[str, FieldTypeSpec] = {
    "text": _PLAIN,
    "plaintext": _PLAIN,
    "plain_text": _PLAIN,
    "textarea": _MULTILINE,
    "multiline": _MULTILINE,
    "richtext": _RICH,
    "rich_text": _RICH,
    "wysiwyg": _RICH,
    "ckeditor": _RICH,
    "image": _ASSETS,
    "asset": _ASSETS,
    "assets": _ASSETS,
    "number": _NUMBER,
    "integer": _NUMBER,
    "float": _NUMBER,
    "url": _URL,
    "link": _URL,
    "dropdown": _DROPDOWN,
    "select": _DROPDOWN,
    "radio": _RADIO,
    "radio_buttons": _RADIO,
    "radiobuttons": _RADIO,
    "checkboxes": _CHECKBOXES,
    "date": _DATE,
    "datetime": _DATETIME,
}


def resolve_field_type(tag: str, handle: Optional[str] = None) -> FieldTypeSpec:
    """Look up *tag* (case-insensitive) in the alias table.

    Raises:
        UnsupportedFieldTypeError: If the tag is not a known alias.
    """
    spec = FIELD_TYPE_ALIASES.get(tag.strip().lower())
    if spec is None:
        raise UnsupportedFieldTypeError(tag, handle)
    return spec


def is_supported(tag: str) -> bool:
    return tag.strip().lower() in FIELD_TYPE_ALIASES


# ---------------------------------------------------------------------------
# Settings builders
# ---------------------------------------------------------------------------

def _plain_text_settings(uids: UidGenerator, multiline: bool = False) -> PlainTextSettings:
    return PlainTextSettings(
        code=False,
        initial_rows=4 if multiline else 1,
        multiline=multiline,
        ui_mode="normal",
    )


def _rich_text_settings(uids: UidGenerator) -> RichTextSettings:
    # ckeConfig points at a CKEditor config that is not generated.
    return RichTextSettings(
        cke_config=uids.next_uid(),
        full_graphql_data=True,
        parse_embeds=False,
        purify_html=True,
        source_editing_groups=["__ADMINS__"],
    )


def _asset_settings(uids: UidGenerator) -> AssetSettings:
    # Placeholder volume: not registered in the name index or any volume file.
    volume_source = f"volume:{uids.next_uid()}"
    return AssetSettings(
        allow_uploads=True,
        allowed_kinds=["image"],
        default_placement="end",
        default_upload_location_source=volume_source,
        default_upload_location_subpath="images",
        max_relations=1,
        preview_mode="full",
        restrict_files=True,
        restricted_location_source=volume_source,
        sources="*",
        view_mode="list",
    )


def _number_settings(uids: UidGenerator) -> NumberSettings:
    return NumberSettings(decimals=0, preview_format="decimal")


def _url_settings(uids: UidGenerator) -> UrlSettings:
    return UrlSettings(max_length=255)


def _options_settings(uids: UidGenerator) -> OptionsSettings:
    return OptionsSettings(options=[])


def _date_settings(uids: UidGenerator, show_time: bool = False) -> DateSettings:
    return DateSettings(
        minute_increment=30,
        show_date=True,
        show_time=show_time,
        show_time_zone=False,
    )


SETTINGS_BUILDERS: dict[FieldKind, Callable[..., ConfigRecord]] = {
    FieldKind.PLAIN_TEXT: _plain_text_settings,
    FieldKind.RICH_TEXT: _rich_text_settings,
    FieldKind.ASSETS: _asset_settings,
    FieldKind.NUMBER: _number_settings,
    FieldKind.URL: _url_settings,
    FieldKind.DROPDOWN: _options_settings,
    FieldKind.RADIO_BUTTONS: _options_settings,
    FieldKind.CHECKBOXES: _options_settings,
    FieldKind.DATE: _date_settings,
}


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

def _config_key(key: str) -> str:
    """Accept snake_case or camelCase override keys."""
    return to_camel(key) if "_" in key.strip("_") else key


def apply_settings_override(
    settings: ConfigRecord,
    override: Optional[Mapping[str, Any]],
    handle: str,
) -> ConfigRecord:
    """Merge *override* over *settings*, last write wins per key.

    The result is validated against the same settings model, so an override
    can change values but never the settings shape.

    Raises:
        InvalidSettingsError: If a key is unknown or a value has the wrong type.
    """
    if not override:
        return settings

    merged = settings.to_config()
    for key, value in override.items():
        merged[_config_key(key)] = value

    try:
        return type(settings).model_validate(merged)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidSettingsError(handle, details) from exc


# ---------------------------------------------------------------------------
# Public builders
# ---------------------------------------------------------------------------

def build_field(
    field_type: str,
    name: str,
    handle: str,
    instructions: Optional[str] = None,
    *,
    searchable: bool = False,
    settings: Optional[Mapping[str, Any]] = None,
    uids: Optional[UidGenerator] = None,
    types: TypeTable = DEFAULT_TYPES,
) -> TargetField:
    """Build a ``TargetField`` for *field_type*.

    Args:
        field_type: Tag such as ``"text"``, ``"textarea"`` or ``"image"``.
        name: Display name.
        handle: Field handle.
        instructions: Optional help text.
        searchable: Whether the field is indexed for search.
        settings: Optional override merged over the computed defaults.
        uids: Identifier source for embedded identifiers (CKEditor config,
            placeholder volume).  Defaults to random UUIDs.
        types: Class-name table used for the ``type`` discriminator.

    Raises:
        UnsupportedFieldTypeError: If *field_type* is not a known alias.
        InvalidSettingsError: If *settings* does not fit the type, or *types*
            names a class whose settings shape differs from the built one.
    """
    spec = resolve_field_type(field_type, handle)
    uids = uids or RandomUidGenerator()

    computed = SETTINGS_BUILDERS[spec.kind](uids, **spec.options)
    final_settings = apply_settings_override(computed, settings, handle)

    type_name = types.field_type(spec.kind)
    if not settings_match(types, type_name, final_settings):
        raise InvalidSettingsError(
            handle,
            f"{type(final_settings).__name__} does not fit field type {type_name} "
            f"in table {types.version}",
        )

    return TargetField(
        handle=handle,
        instructions=instructions,
        name=name,
        searchable=searchable,
        settings=final_settings,
        translation_method="none",
        type=type_name,
    )


def field_from_declaration(
    declaration: FieldDeclaration,
    *,
    uids: Optional[UidGenerator] = None,
    types: TypeTable = DEFAULT_TYPES,
) -> TargetField:
    """Build the ``TargetField`` for an input ``FieldDeclaration``."""
    return build_field(
        declaration.field_type,
        declaration.name,
        declaration.handle,
        declaration.instructions,
        searchable=bool(declaration.searchable),
        settings=declaration.settings,
        uids=uids,
        types=types,
    )
