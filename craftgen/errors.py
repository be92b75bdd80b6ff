"""Exceptions raised by the generator.

Every error carries the step that failed so the CLI can print a contextual
message before exiting non-zero.
"""

from __future__ import annotations


class ConfigGenError(Exception):
    """Base class for generator failures."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"{step}: {message}")


class InputError(ConfigGenError):
    """Missing, unreadable, or malformed input."""

    def __init__(self, message: str) -> None:
        super().__init__("read input", message)


class UnsupportedFieldTypeError(ConfigGenError):
    """Raised when a field-type tag matches nothing in the alias table."""

    def __init__(self, tag: str, handle: str | None = None) -> None:
        self.tag = tag
        self.handle = handle
        subject = f" (field '{handle}')" if handle else ""
        super().__init__("build field", f"Unsupported field type: {tag}{subject}")


class InvalidSettingsError(ConfigGenError):
    """A settings override does not fit the field type's settings shape."""

    def __init__(self, handle: str, detail: str) -> None:
        self.handle = handle
        super().__init__("build field", f"Invalid settings for field '{handle}': {detail}")


class UnresolvedFieldReferenceError(ConfigGenError):
    """An entry type references a field handle that was never generated."""

    def __init__(self, entry_type: str, field_handle: str) -> None:
        self.entry_type = entry_type
        self.field_handle = field_handle
        super().__init__(
            "build entry type",
            f"Entry type '{entry_type}' references unknown field '{field_handle}'",
        )


class OutputError(ConfigGenError):
    """Failure to create directories or write files."""

    def __init__(self, message: str) -> None:
        super().__init__("write output", message)
