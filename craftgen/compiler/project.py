"""Whole-project compilation.

Runs the two passes over a ``ProjectDeclaration``:

Pass 1 (fields): build every field in input order, give it a uid, record
``handle -> uid`` and ``uid -> "<Name> # <handle>"``.

Pass 2 (entry types): build every entry type in input order against the
pass-1 resolution table, give it a uid and record its label.

Field types without a builder and entry-type references to unknown handles
are skipped with a warning, or abort the run when ``config.strict`` is set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

from craftgen.compiler.entry_types import Clock, entry_type_from_declaration
from craftgen.compiler.fields import field_from_declaration, is_supported
from craftgen.config import GeneratorConfig
from craftgen.errors import UnsupportedFieldTypeError
from craftgen.identity import IdentityIndex, UidGenerator, make_uid_generator
from craftgen.schema.models import ProjectDeclaration, SectionDeclaration, VolumeDeclaration
from craftgen.target.models import (
    ConfigRecord,
    ProjectManifest,
    ProjectMeta,
    TargetEntryType,
    TargetField,
)
from craftgen.target.types import DEFAULT_TYPES, TypeTable
from craftgen.utils import unix_timestamp, utc_now

RecordT = TypeVar("RecordT", bound=ConfigRecord)


class WarningKind(str, Enum):
    UNSUPPORTED_FIELD_TYPE = "unsupported_field_type"
    UNRESOLVED_FIELD_REFERENCE = "unresolved_field_reference"


@dataclass(frozen=True)
class CompileWarning:
    """An item left out of the output in lenient mode."""

    kind: WarningKind
    subject: str
    message: str


@dataclass
class CompiledRecord(Generic[RecordT]):
    """A target record together with the uid it is filed under."""

    uid: str
    handle: str
    record: RecordT


@dataclass
class CompileResult:
    """Everything the writer needs to emit a project tree."""

    fields: list[CompiledRecord[TargetField]] = field(default_factory=list)
    entry_types: list[CompiledRecord[TargetEntryType]] = field(default_factory=list)
    index: IdentityIndex = field(default_factory=IdentityIndex)
    warnings: list[CompileWarning] = field(default_factory=list)
    sections: list[SectionDeclaration] = field(default_factory=list)
    volumes: list[VolumeDeclaration] = field(default_factory=list)
    date_modified: int = 0

    @property
    def field_uids(self) -> dict[str, str]:
        """``handle -> uid`` for every generated field."""
        return {compiled.handle: compiled.uid for compiled in self.fields}

    def manifest(self) -> ProjectManifest:
        """The ``project.yaml`` record for this result."""
        return ProjectManifest(
            date_modified=self.date_modified,
            meta=ProjectMeta(names=self.index.labels()),
        )


class ProjectCompiler:
    """Compiles a ``ProjectDeclaration`` into target records.

    Attributes:
        config: Generator settings (``strict`` and ``seed`` are used here).
        uids: Identifier source; seeded from ``config.seed`` when not given.
        clock: Time source for ``dateAdded``/``dateModified``.
        types: Class-name table for type discriminators.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        *,
        uids: Optional[UidGenerator] = None,
        clock: Clock = utc_now,
        types: TypeTable = DEFAULT_TYPES,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.uids = uids or make_uid_generator(self.config.seed)
        self.clock = clock
        self.types = types

    def compile(self, project: ProjectDeclaration) -> CompileResult:
        """Run both passes and return the compiled records.

        Raises:
            UnsupportedFieldTypeError: In strict mode, on the first field
                whose type has no builder.
            UnresolvedFieldReferenceError: In strict mode, on the first
                entry-type reference to an unknown field handle.
            InvalidSettingsError: When a field's settings override does not
                fit its type (in either mode).
        """
        result = CompileResult(
            sections=list(project.sections or []),
            volumes=list(project.volumes or []),
        )
        resolve: dict[str, str] = {}

        # Pass 1: fields
        for declaration in project.fields:
            if not is_supported(declaration.field_type):
                if self.config.strict:
                    raise UnsupportedFieldTypeError(declaration.field_type, declaration.handle)
                result.warnings.append(CompileWarning(
                    kind=WarningKind.UNSUPPORTED_FIELD_TYPE,
                    subject=declaration.handle,
                    message=(
                        f"Skipped field '{declaration.handle}': "
                        f"unsupported field type '{declaration.field_type}'"
                    ),
                ))
                continue

            record = field_from_declaration(declaration, uids=self.uids, types=self.types)
            uid = self.uids.next_uid()
            resolve[declaration.handle] = uid
            result.index.register(uid, declaration.name, declaration.handle)
            result.fields.append(CompiledRecord(uid=uid, handle=declaration.handle, record=record))

        # Pass 2: entry types
        for declaration in project.entry_types:
            build = entry_type_from_declaration(
                declaration,
                resolve,
                strict=self.config.strict,
                uids=self.uids,
                types=self.types,
                clock=self.clock,
            )
            for missing in build.skipped:
                result.warnings.append(CompileWarning(
                    kind=WarningKind.UNRESOLVED_FIELD_REFERENCE,
                    subject=declaration.handle,
                    message=(
                        f"Entry type '{declaration.handle}' skipped unknown field '{missing}'"
                    ),
                ))

            uid = self.uids.next_uid()
            result.index.register(uid, declaration.name, declaration.handle)
            result.entry_types.append(
                CompiledRecord(uid=uid, handle=declaration.handle, record=build.entry_type)
            )

        result.date_modified = unix_timestamp(self.clock())
        return result
