"""Entry-type and field-layout builder.

An entry type gets exactly one field layout with one ``Content`` tab.  The
tab holds the title element (when the entry type has a title field) followed
by one custom-field element per attached field, in declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional, Sequence

from craftgen.errors import UnresolvedFieldReferenceError
from craftgen.identity import RandomUidGenerator, UidGenerator
from craftgen.schema.models import EntryTypeDeclaration, FieldReference
from craftgen.target.models import (
    CustomFieldElement,
    EntryTitleElement,
    FieldLayout,
    Tab,
    TargetEntryType,
)
from craftgen.target.types import DEFAULT_TYPES, ElementKind, TypeTable
from craftgen.utils import iso_timestamp, utc_now

Clock = Callable[[], datetime]

CONTENT_TAB = "Content"
ELEMENT_WIDTH = 100


@dataclass
class EntryTypeBuild:
    """A built entry type plus the field handles that could not be attached."""

    entry_type: TargetEntryType
    skipped: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Layout construction
# ---------------------------------------------------------------------------

def _content_tab(entry_type: TargetEntryType) -> Tab:
    layout = next(iter(entry_type.field_layouts.values()))
    return layout.tabs[0]


def new_entry_type(
    name: str,
    handle: str,
    *,
    has_title_field: bool = True,
    title_format: Optional[str] = None,
    uids: UidGenerator,
) -> TargetEntryType:
    """Create an entry type with one empty layout holding one ``Content`` tab."""
    layout_uid = uids.next_uid()
    tab = Tab(name=CONTENT_TAB, uid=uids.next_uid())
    return TargetEntryType(
        field_layouts={layout_uid: FieldLayout(tabs=[tab])},
        handle=handle,
        has_title_field=has_title_field,
        name=name,
        title_format=title_format,
    )


def add_title_element(
    entry_type: TargetEntryType,
    *,
    uids: UidGenerator,
    types: TypeTable = DEFAULT_TYPES,
    now: Optional[datetime] = None,
) -> EntryTitleElement:
    """Put the title element at the start of the content tab.

    Does nothing (and returns the existing element) if one is already there.
    """
    tab = _content_tab(entry_type)
    for element in tab.elements:
        if isinstance(element, EntryTitleElement):
            return element

    element = EntryTitleElement(
        autocapitalize=True,
        autocomplete=False,
        autocorrect=True,
        date_added=iso_timestamp(now or utc_now()),
        required=True,
        type=types.element_type(ElementKind.ENTRY_TITLE),
        uid=uids.next_uid(),
        width=ELEMENT_WIDTH,
    )
    tab.elements.insert(0, element)
    return element


def add_field_element(
    entry_type: TargetEntryType,
    field_uid: str,
    required: bool,
    *,
    uids: UidGenerator,
    types: TypeTable = DEFAULT_TYPES,
    now: Optional[datetime] = None,
) -> CustomFieldElement:
    """Append a custom-field element referencing *field_uid* to the content tab."""
    element = CustomFieldElement(
        date_added=iso_timestamp(now or utc_now()),
        field_uid=field_uid,
        required=required,
        type=types.element_type(ElementKind.CUSTOM_FIELD),
        uid=uids.next_uid(),
        width=ELEMENT_WIDTH,
    )
    _content_tab(entry_type).elements.append(element)
    return element


def _assemble(
    name: str,
    handle: str,
    attachments: Iterable[tuple[str, bool]],
    *,
    has_title_field: bool,
    title_format: Optional[str],
    uids: UidGenerator,
    types: TypeTable,
    clock: Clock,
) -> TargetEntryType:
    now = clock()
    entry_type = new_entry_type(
        name, handle, has_title_field=has_title_field, title_format=title_format, uids=uids
    )
    if has_title_field:
        add_title_element(entry_type, uids=uids, types=types, now=now)
    for field_uid, required in attachments:
        add_field_element(entry_type, field_uid, required, uids=uids, types=types, now=now)
    return entry_type


# ---------------------------------------------------------------------------
# Public builders
# ---------------------------------------------------------------------------

def build_entry_type(
    name: str,
    handle: str,
    references: Sequence[FieldReference],
    resolve: Mapping[str, str],
    *,
    has_title_field: Optional[bool] = True,
    title_format: Optional[str] = None,
    strict: bool = False,
    uids: Optional[UidGenerator] = None,
    types: TypeTable = DEFAULT_TYPES,
    clock: Clock = utc_now,
) -> EntryTypeBuild:
    """Build an entry type whose layout attaches *references* in order.

    Each reference's own ``required`` flag decides requiredness on this entry
    type.  References whose handle is missing from *resolve* are skipped and
    reported in ``EntryTypeBuild.skipped``, or raise in strict mode.

    Raises:
        UnresolvedFieldReferenceError: In strict mode, for the first handle
            missing from *resolve*.
    """
    uids = uids or RandomUidGenerator()
    attachments: list[tuple[str, bool]] = []
    skipped: list[str] = []
    for ref in references:
        field_uid = resolve.get(ref.handle)
        if field_uid is None:
            if strict:
                raise UnresolvedFieldReferenceError(handle, ref.handle)
            skipped.append(ref.handle)
            continue
        attachments.append((field_uid, bool(ref.required)))

    entry_type = _assemble(
        name,
        handle,
        attachments,
        has_title_field=True if has_title_field is None else has_title_field,
        title_format=title_format,
        uids=uids,
        types=types,
        clock=clock,
    )
    return EntryTypeBuild(entry_type=entry_type, skipped=skipped)


def entry_type_from_declaration(
    declaration: EntryTypeDeclaration,
    resolve: Mapping[str, str],
    *,
    strict: bool = False,
    uids: Optional[UidGenerator] = None,
    types: TypeTable = DEFAULT_TYPES,
    clock: Clock = utc_now,
) -> EntryTypeBuild:
    """Build the entry type for an input ``EntryTypeDeclaration``."""
    return build_entry_type(
        declaration.name,
        declaration.handle,
        declaration.fields,
        resolve,
        has_title_field=declaration.has_title_field,
        title_format=declaration.title_format,
        strict=strict,
        uids=uids,
        types=types,
        clock=clock,
    )


def build_adhoc_entry_type(
    name: str,
    handle: str,
    field_handles: Sequence[str],
    *,
    has_title_field: bool = True,
    uids: Optional[UidGenerator] = None,
    types: TypeTable = DEFAULT_TYPES,
    clock: Clock = utc_now,
) -> TargetEntryType:
    """Build an entry type outside a project.

    Every handle gets its own fresh uid and is attached as not required.
    Those uids are not registered anywhere, so they do not point at any
    generated field file.
    """
    uids = uids or RandomUidGenerator()
    attachments = [(uids.next_uid(), False) for _ in field_handles]
    return _assemble(
        name,
        handle,
        attachments,
        has_title_field=has_title_field,
        title_format=None,
        uids=uids,
        types=types,
        clock=clock,
    )
